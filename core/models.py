# core/models.py

from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel
from typing import Optional, List
from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Record(BaseModel):
    """Base for everything kept in the store. Serializes with camelCase keys for the web client."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CropStatus(str, Enum):
    HEALTHY = "healthy"
    STRESSED = "stressed"
    DISEASED = "diseased"


class DiseaseSeverity(str, Enum):
    NONE = "none"
    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"


# --- Users ---

class InsertUser(Record):
    """Fields a caller may supply when registering a user."""
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    farm_size: Optional[str] = None
    farm_type: Optional[str] = None

class User(InsertUser):
    id: int
    created_at: datetime = Field(default_factory=utcnow)

class UserPublic(Record):
    """A user as it may leave the service: everything except the password."""
    id: int
    username: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    farm_size: Optional[str] = None
    farm_type: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_user(cls, user: User) -> "UserPublic":
        return cls.model_validate(user.model_dump(exclude={"password"}))


# --- Crops ---

class InsertCrop(Record):
    user_id: Optional[int] = None
    name: str
    emoji: Optional[str] = None
    status: CropStatus = CropStatus.HEALTHY
    planted_date: Optional[datetime] = None
    expected_harvest: Optional[datetime] = None
    growth_progress: int = Field(0, ge=0, le=100)
    water_needs: Optional[str] = None
    nutrition_needs: Optional[str] = None
    field_name: Optional[str] = None
    field_size: Optional[float] = None

class Crop(InsertCrop):
    id: int
    created_at: datetime = Field(default_factory=utcnow)


# --- Soil ---

class InsertSoilData(Record):
    user_id: Optional[int] = None
    crop_id: Optional[int] = None
    status: str
    percentage: int
    ph: Optional[float] = Field(None, alias="pH")
    nitrogen: Optional[int] = None
    phosphorus: Optional[int] = None
    potassium: Optional[int] = None
    type: Optional[str] = None

class SoilData(InsertSoilData):
    id: int
    measurement_date: datetime = Field(default_factory=utcnow)


# --- Weather ---

class InsertWeatherData(Record):
    user_id: Optional[int] = None
    location: str
    condition: str
    temperature: float
    humidity: Optional[int] = None
    wind: Optional[float] = None
    precipitation: Optional[float] = None
    feels_like: Optional[float] = None
    uv_index: Optional[int] = None

class WeatherData(InsertWeatherData):
    id: int
    timestamp: datetime = Field(default_factory=utcnow)


# --- Market ---

class Mandi(Record):
    """A nearby wholesale market and its quoted price."""
    name: str
    price: float
    distance: float

class ForecastTrend(Record):
    days: List[str] = []
    prices: List[float] = []

    @model_validator(mode="after")
    def check_lengths(self):
        if len(self.days) != len(self.prices):
            raise ValueError("forecast days and prices must have the same length")
        return self

class InsertMarketData(Record):
    crop_name: str
    price: float
    trend: Optional[float] = None
    ai_tip: Optional[str] = None
    nearby_mandis: List[Mandi] = []
    forecast_trend: Optional[ForecastTrend] = None

class MarketData(InsertMarketData):
    id: int
    last_updated: datetime = Field(default_factory=utcnow)


# --- Disease records ---

class InsertDiseaseRecord(Record):
    user_id: Optional[int] = None
    crop_id: Optional[int] = None
    name: str = ""  # empty means no disease was found
    confidence: Optional[int] = Field(None, ge=0, le=100)
    description: str = ""
    treatment: List[str] = []
    preventive_measures: List[str] = []
    organic_remedies: List[str] = []
    severity: DiseaseSeverity = DiseaseSeverity.NONE
    image_url: Optional[str] = None

class DiseaseRecord(InsertDiseaseRecord):
    id: int
    scan_date: datetime = Field(default_factory=utcnow)


# --- Government schemes ---

class InsertGovernmentScheme(Record):
    title: str
    organization: str
    description: str
    eligibility: List[str] = []
    benefits: List[str] = []
    deadline: Optional[str] = None  # free text, e.g. "Ongoing" or "30 Sep 2023"
    application_url: Optional[str] = None
    category: Optional[str] = None
    is_new: bool = False

class GovernmentScheme(InsertGovernmentScheme):
    id: int


# --- Settings ---

class InsertSettings(Record):
    user_id: int
    notifications_enabled: bool = True
    voice_assistant_enabled: bool = True
    auto_scan_enabled: bool = False
    dark_mode_enabled: bool = False
    language: str = "en"

class Settings(InsertSettings):
    id: int
