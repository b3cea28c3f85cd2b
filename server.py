# server.py

from typing import Annotated, List, Optional
import uvicorn
from dotenv import load_dotenv

# Settings are built at import time, so .env has to be loaded before core.config.
load_dotenv()

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BeforeValidator, Field

from core.config import settings
from core.models import (
    Record, UserPublic, InsertUser, Crop, InsertCrop, CropStatus, MarketData,
    DiseaseRecord, GovernmentScheme, Settings as UserSettings,
)
from core.storage import MemStorage
from core.seed import seed_sample_data
from advisory.plant_disease import PlantDiseaseAgent
from advisory.crop_suitability import crop_suitability


# --- Request bodies that only exist at the HTTP boundary ---
# Fields left out are untouched; fields the stored record requires may not be sent as null.

def _reject_null(value):
    if value is None:
        raise ValueError("may be omitted but not null")
    return value

NotNull = BeforeValidator(_reject_null)

class ProfileUpdate(Record):
    name: Annotated[Optional[str], NotNull] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    farm_size: Optional[str] = None
    farm_type: Optional[str] = None

class CropUpdate(Record):
    name: Annotated[Optional[str], NotNull] = None
    emoji: Optional[str] = None
    status: Annotated[Optional[CropStatus], NotNull] = None
    growth_progress: Annotated[Optional[int], NotNull] = Field(None, ge=0, le=100)
    water_needs: Optional[str] = None
    nutrition_needs: Optional[str] = None
    field_name: Optional[str] = None
    field_size: Optional[float] = None

class SettingsUpdate(Record):
    notifications_enabled: Annotated[Optional[bool], NotNull] = None
    voice_assistant_enabled: Annotated[Optional[bool], NotNull] = None
    auto_scan_enabled: Annotated[Optional[bool], NotNull] = None
    dark_mode_enabled: Annotated[Optional[bool], NotNull] = None
    language: Annotated[Optional[str], NotNull] = None

class ImagePayload(Record):
    image: Optional[str] = None  # data URL from the camera page
    crop_id: Optional[int] = None


# --- Dependencies ---

def get_storage(request: Request) -> MemStorage:
    return request.app.state.storage

def get_disease_agent(request: Request) -> PlantDiseaseAgent:
    return request.app.state.disease_agent

def get_demo_user_id(request: Request) -> int:
    return request.app.state.demo_user_id

Storage = Annotated[MemStorage, Depends(get_storage)]
DemoUser = Annotated[int, Depends(get_demo_user_id)]


router = APIRouter(prefix="/api")

@router.get("/health")
def health():
    return {"status": "ok"}


# --- Users ---

@router.get("/user/{user_id}", response_model=UserPublic)
def get_user(user_id: int, storage: Storage):
    user = storage.get_user(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return UserPublic.from_user(user)

@router.post("/user/register", response_model=UserPublic, status_code=status.HTTP_201_CREATED)
def register_user(payload: InsertUser, storage: Storage):
    if storage.get_user_by_username(payload.username):
        raise HTTPException(status_code=409, detail="Username already exists")
    new_user = storage.create_user(payload)
    return UserPublic.from_user(new_user)

@router.post("/user/profile", response_model=UserPublic)
def update_profile(payload: ProfileUpdate, storage: Storage, user_id: DemoUser):
    updated = storage.update_user(user_id, payload.model_dump(exclude_unset=True))
    if not updated:
        raise HTTPException(status_code=404, detail="User not found")
    return UserPublic.from_user(updated)


# --- Weather & soil ---

@router.get("/weather")
def current_weather(storage: Storage, user_id: DemoUser):
    weather = storage.get_weather_data_by_user(user_id)
    if not weather:
        raise HTTPException(status_code=404, detail="Weather data not found")
    return weather.model_dump(
        by_alias=True,
        include={"condition", "temperature", "humidity", "wind", "precipitation", "feels_like", "uv_index"},
    )

@router.get("/soil-data")
def current_soil_data(storage: Storage, user_id: DemoUser):
    soil = storage.get_current_soil_data(user_id)
    if not soil:
        raise HTTPException(status_code=404, detail="Soil data not found")
    return soil.model_dump(
        by_alias=True,
        include={"status", "percentage", "ph", "nitrogen", "phosphorus", "potassium", "type"},
    )


# --- Crops ---

@router.get("/crops", response_model=List[Crop])
def list_crops(storage: Storage, user_id: DemoUser):
    return storage.get_crops_by_user(user_id)

@router.get("/crops/current")
def current_crop(storage: Storage, user_id: DemoUser):
    crop = storage.get_current_crop(user_id)
    if not crop:
        raise HTTPException(status_code=404, detail="No current crop found")
    return {
        "id": crop.id,
        "name": crop.name,
        "emoji": crop.emoji,
        "status": crop.status.value.capitalize(),
        "plantedDate": crop.planted_date.isoformat() if crop.planted_date else None,
        "expectedHarvest": crop.expected_harvest.isoformat() if crop.expected_harvest else None,
        "growthProgress": crop.growth_progress,
        "waterNeeds": crop.water_needs,
        "nutritionNeeds": crop.nutrition_needs,
    }

@router.get("/crops/{crop_id}", response_model=Crop)
def get_crop(crop_id: int, storage: Storage):
    crop = storage.get_crop(crop_id)
    if not crop:
        raise HTTPException(status_code=404, detail="Crop not found")
    return crop

@router.post("/crops", response_model=Crop, status_code=status.HTTP_201_CREATED)
def create_crop(payload: InsertCrop, storage: Storage):
    return storage.create_crop(payload)

@router.patch("/crops/{crop_id}", response_model=Crop)
def update_crop(crop_id: int, payload: CropUpdate, storage: Storage):
    updated = storage.update_crop(crop_id, payload.model_dump(exclude_unset=True))
    if not updated:
        raise HTTPException(status_code=404, detail="Crop not found")
    return updated

@router.delete("/crops/{crop_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_crop(crop_id: int, storage: Storage):
    if not storage.delete_crop(crop_id):
        raise HTTPException(status_code=404, detail="Crop not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.get("/crops/{crop_id}/disease-records", response_model=List[DiseaseRecord])
def crop_disease_records(crop_id: int, storage: Storage):
    return storage.get_disease_records_by_crop(crop_id)


# --- Market ---

@router.get("/market", response_model=List[MarketData])
def all_market_data(storage: Storage):
    return storage.get_all_market_data()

@router.get("/market/current", response_model=MarketData)
def current_market_data(storage: Storage, user_id: DemoUser):
    crop = storage.get_current_crop(user_id)
    if not crop:
        raise HTTPException(status_code=404, detail="No current crop found")
    market = storage.get_market_data_by_crop(crop.name)
    if not market:
        raise HTTPException(status_code=404, detail="Market data not found")
    return market

@router.get("/market/{crop_name}", response_model=MarketData)
def market_data_for_crop(crop_name: str, storage: Storage):
    market = storage.get_market_data_by_crop(crop_name)
    if not market:
        raise HTTPException(status_code=404, detail="Market data not found")
    return market


# --- Scans ---

Agent = Annotated[PlantDiseaseAgent, Depends(get_disease_agent)]

@router.post("/scan")
def scan_crop(agent: Agent, payload: Optional[ImagePayload] = None):
    payload = payload or ImagePayload()
    return agent.scan(payload.image)

@router.post("/disease-detection")
def detect_disease(storage: Storage, user_id: DemoUser, agent: Agent,
                   payload: Optional[ImagePayload] = None):
    payload = payload or ImagePayload()
    result = agent.detect(payload.image)
    if payload.crop_id is not None:
        storage.create_disease_record(agent.to_disease_record(result, user_id, payload.crop_id))
    return result


# --- Schemes, suitability, settings ---

@router.get("/government-schemes", response_model=List[GovernmentScheme])
def government_schemes(storage: Storage):
    return storage.get_all_government_schemes()

@router.get("/crop-suitability")
def suitability():
    return crop_suitability()

@router.get("/settings", response_model=UserSettings)
def get_settings(storage: Storage, user_id: DemoUser):
    user_settings = storage.get_settings(user_id)
    if not user_settings:
        raise HTTPException(status_code=404, detail="Settings not found")
    return user_settings

@router.patch("/settings", response_model=UserSettings)
def update_settings(payload: SettingsUpdate, storage: Storage, user_id: DemoUser):
    updated = storage.update_settings(user_id, payload.model_dump(exclude_unset=True))
    if not updated:
        raise HTTPException(status_code=404, detail="Settings not found")
    return updated


def create_app(storage: Optional[MemStorage] = None,
               disease_agent: Optional[PlantDiseaseAgent] = None,
               seed: Optional[bool] = None) -> FastAPI:
    """
    Builds the API around one store. Pass a store to share it with the caller (tests do);
    otherwise a fresh one is made and, if configured, loaded with the sample farm.
    """
    if seed is None:
        seed = settings.seed_sample_data
    if storage is None:
        storage = MemStorage()
        if seed:
            seed_sample_data(storage)

    app = FastAPI(title=settings.app_name)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.storage = storage
    app.state.disease_agent = disease_agent or PlantDiseaseAgent()
    app.state.demo_user_id = settings.demo_user_id
    app.include_router(router)
    return app


app = create_app()

if __name__ == "__main__":
    print(f"---SERVER: Starting {settings.app_name} on {settings.host}:{settings.port}---")
    uvicorn.run(app, host=settings.host, port=settings.port)
