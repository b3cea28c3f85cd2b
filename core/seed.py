# core/seed.py

from datetime import datetime, timezone

from .models import (
    InsertUser, InsertCrop, InsertSoilData, InsertWeatherData,
    InsertMarketData, InsertGovernmentScheme, InsertSettings,
    Mandi, ForecastTrend, CropStatus,
)
from .storage import MemStorage

SAMPLE_SCHEMES = [
    InsertGovernmentScheme(
        title="PM-KISAN",
        organization="Ministry of Agriculture",
        description="Financial assistance to small and marginal farmers through direct benefit transfer.",
        eligibility=["Small and marginal farmers with up to 2 hectares", "Valid land records", "Bank account linked to Aadhaar"],
        benefits=["₹6,000 per year in three equal installments", "Direct bank transfer", "No middlemen"],
        deadline="30 Sep 2023",
        application_url="https://pmkisan.gov.in",
        category="Financial Assistance",
        is_new=True,
    ),
    InsertGovernmentScheme(
        title="Soil Health Card Scheme",
        organization="Department of Agriculture",
        description="Free soil testing and recommendations for appropriate nutrients to improve soil health and fertility.",
        eligibility=["All farmers", "Valid ID proof", "Land ownership documents"],
        benefits=["Free soil testing", "Customized fertilizer recommendations", "Increased crop yield"],
        deadline="Ongoing",
        application_url="https://soilhealth.gov.in",
        category="Technical Assistance",
        is_new=False,
    ),
    InsertGovernmentScheme(
        title="Solar Pump Subsidy",
        organization="Ministry of New and Renewable Energy",
        description="Subsidy for installing solar-powered irrigation pumps to reduce dependency on diesel and electricity.",
        eligibility=["Small and marginal farmers", "No existing solar pump", "Valid bank account"],
        benefits=["Up to 90% subsidy on solar pump installation", "Reduced electricity costs", "Environment-friendly irrigation"],
        deadline="15 Oct 2023",
        application_url="https://mnre.gov.in/solar-pump",
        category="Irrigation",
        is_new=True,
    ),
]


def seed_sample_data(storage: MemStorage) -> dict:
    """
    Fills an empty store with one demo farmer and everything the dashboard shows for them.
    Cross-references use the ids the store hands back, so this works on a store that already has rows.
    Returns the created records keyed by kind.
    """
    user = storage.create_user(InsertUser(
        username="farmerraj",
        password="password123",
        name="Farmer Raj",
        email="raj@agrimail.com",
        phone="9876543210",
        location="Rajpur, Madhya Pradesh",
        farm_size="5.5 acres",
        farm_type="Mixed (Rice, Wheat)",
    ))

    crop = storage.create_crop(InsertCrop(
        user_id=user.id,
        name="Rice",
        emoji="🌾",
        status=CropStatus.HEALTHY,
        planted_date=datetime(2023, 8, 1, tzinfo=timezone.utc),
        expected_harvest=datetime(2023, 10, 15, tzinfo=timezone.utc),
        growth_progress=65,
        water_needs="High",
        nutrition_needs="Nitrogen, Potassium",
        field_name="North Field",
        field_size=2.5,
    ))

    soil = storage.create_soil_data(InsertSoilData(
        user_id=user.id,
        crop_id=crop.id,
        status="Optimal",
        percentage=68,
        ph=6.8,
        nitrogen=75,
        phosphorus=62,
        potassium=80,
        type="Clay Loam",
    ))

    weather = storage.create_weather_data(InsertWeatherData(
        user_id=user.id,
        location=user.location,
        condition="Sunny",
        temperature=28,
        humidity=65,
        wind=8,
        precipitation=0,
        feels_like=29,
        uv_index=7,
    ))

    market = storage.create_market_data(InsertMarketData(
        crop_name=crop.name,
        price=2050,
        trend=2.5,
        ai_tip="Consider holding your harvest for 15 more days. Prices are projected to rise by 8% during festival season.",
        nearby_mandis=[
            Mandi(name="Rajpur Mandi", price=2050, distance=5),
            Mandi(name="Bhopal Central", price=2020, distance=12),
            Mandi(name="Indore Agri Hub", price=2120, distance=25),
        ],
        forecast_trend=ForecastTrend(
            days=["Today", "1 Week", "2 Weeks", "1 Month"],
            prices=[2050, 2100, 2210, 2150],
        ),
    ))

    schemes = [storage.create_government_scheme(s) for s in SAMPLE_SCHEMES]

    settings = storage.create_settings(InsertSettings(user_id=user.id))

    print(f"---SEED: Loaded sample farm for '{user.username}' ({len(schemes)} schemes)---")
    return {
        "user": user,
        "crop": crop,
        "soil": soil,
        "weather": weather,
        "market": market,
        "schemes": schemes,
        "settings": settings,
    }
