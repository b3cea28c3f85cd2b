# core/storage.py

import threading
from typing import Any, List, Mapping, Optional, Type, TypeVar
from pydantic import BaseModel

from .collection import Collection
from .models import (
    User, InsertUser,
    Crop, InsertCrop,
    SoilData, InsertSoilData,
    WeatherData, InsertWeatherData,
    MarketData, InsertMarketData,
    DiseaseRecord, InsertDiseaseRecord,
    GovernmentScheme, InsertGovernmentScheme,
    Settings, InsertSettings,
    utcnow,
)

M = TypeVar("M", bound=BaseModel)


def _same_text(a: Optional[str], b: Optional[str]) -> bool:
    """Case-insensitive equality; a missing value never matches."""
    if a is None or b is None:
        return False
    return a.lower() == b.lower()


def _field_name(model: Type[BaseModel], key: str) -> Optional[str]:
    """Maps a snake_case name or its camelCase alias onto the model's field name."""
    if key in model.model_fields:
        return key
    for name, info in model.model_fields.items():
        if info.alias == key:
            return name
    return None


# Assigned once on create and never rewritten by an update.
IMMUTABLE_FIELDS = frozenset({"id", "created_at", "measurement_date", "timestamp", "scan_date"})


def merge(record: M, partial: Mapping[str, Any]) -> M:
    """
    Returns a new record with `partial` laid over `record`.
    Unknown keys are ignored; the id and creation timestamps can never change.
    """
    model = type(record)
    data = record.model_dump()
    for key, value in partial.items():
        name = _field_name(model, key)
        if name is None or name in IMMUTABLE_FIELDS:
            continue
        data[name] = value
    return model.model_validate(data)


class MemStorage:
    """
    Holds every entity collection for the life of the process and hands out ids.
    Lookups that find nothing return None (or False for deletes); nothing here raises for a missing record.
    Referential integrity between users, crops and soil data is left to callers.
    """

    def __init__(self):
        self.users: Collection[User] = Collection()
        self.crops: Collection[Crop] = Collection()
        self.soil_data: Collection[SoilData] = Collection()
        self.weather_data: Collection[WeatherData] = Collection()
        self.market_data: Collection[MarketData] = Collection()
        self.disease_records: Collection[DiseaseRecord] = Collection()
        self.government_schemes: Collection[GovernmentScheme] = Collection()
        self.settings: Collection[Settings] = Collection()
        # Request handlers run on a thread pool, so id assignment and the insert happen under one lock.
        self._lock = threading.RLock()
        print("---STORAGE: In-memory store ready---")

    def _insert(self, collection: Collection[M], model: Type[M], payload: BaseModel, **server_fields) -> M:
        with self._lock:
            record = model(id=collection.next_id(), **payload.model_dump(), **server_fields)
            collection.put(record)
            return record

    def _update(self, collection: Collection[M], record_id: int, partial: Mapping[str, Any], **server_fields) -> Optional[M]:
        with self._lock:
            existing = collection.get(record_id)
            if existing is None:
                return None
            updated = merge(existing, {**partial, **server_fields})
            collection.put(updated)
            return updated

    # --- Users ---

    def get_user(self, user_id: int) -> Optional[User]:
        with self._lock:
            return self.users.get(user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        with self._lock:
            return self.users.find(lambda u: _same_text(u.username, username))

    def create_user(self, user: InsertUser) -> User:
        """Always creates; rejecting duplicate usernames is the caller's job."""
        new_user = self._insert(self.users, User, user)
        print(f"---STORAGE: Created user '{new_user.username}' (id={new_user.id})---")
        return new_user

    def update_user(self, user_id: int, partial: Mapping[str, Any]) -> Optional[User]:
        return self._update(self.users, user_id, partial)

    # --- Crops ---

    def get_crop(self, crop_id: int) -> Optional[Crop]:
        with self._lock:
            return self.crops.get(crop_id)

    def get_crops_by_user(self, user_id: int) -> List[Crop]:
        with self._lock:
            return self.crops.filter(lambda c: c.user_id == user_id)

    def get_current_crop(self, user_id: int) -> Optional[Crop]:
        """The user's current crop is the first one created for them, not the most recent."""
        with self._lock:
            return self.crops.find(lambda c: c.user_id == user_id)

    def create_crop(self, crop: InsertCrop) -> Crop:
        return self._insert(self.crops, Crop, crop)

    def update_crop(self, crop_id: int, partial: Mapping[str, Any]) -> Optional[Crop]:
        return self._update(self.crops, crop_id, partial)

    def delete_crop(self, crop_id: int) -> bool:
        with self._lock:
            removed = self.crops.remove(crop_id)
        if removed:
            print(f"---STORAGE: Deleted crop {crop_id}---")
        return removed

    # --- Soil data ---

    def get_soil_data(self, soil_id: int) -> Optional[SoilData]:
        with self._lock:
            return self.soil_data.get(soil_id)

    def get_soil_data_by_crop(self, crop_id: int) -> Optional[SoilData]:
        with self._lock:
            return self.soil_data.find(lambda s: s.crop_id == crop_id)

    def get_current_soil_data(self, user_id: int) -> Optional[SoilData]:
        with self._lock:
            crop = self.get_current_crop(user_id)
            if crop is None:
                return None
            return self.get_soil_data_by_crop(crop.id)

    def create_soil_data(self, soil: InsertSoilData) -> SoilData:
        return self._insert(self.soil_data, SoilData, soil, measurement_date=utcnow())

    # --- Weather ---

    def get_weather_data(self, weather_id: int) -> Optional[WeatherData]:
        with self._lock:
            return self.weather_data.get(weather_id)

    def get_weather_data_by_user(self, user_id: int) -> Optional[WeatherData]:
        """Weather is keyed by place, so this goes through the user's location."""
        with self._lock:
            user = self.get_user(user_id)
            if user is None or not user.location:
                return None
            return self.get_weather_data_by_location(user.location)

    def get_weather_data_by_location(self, location: str) -> Optional[WeatherData]:
        with self._lock:
            return self.weather_data.find(lambda w: _same_text(w.location, location))

    def create_weather_data(self, weather: InsertWeatherData) -> WeatherData:
        return self._insert(self.weather_data, WeatherData, weather, timestamp=utcnow())

    # --- Market ---

    def get_market_data(self, market_id: int) -> Optional[MarketData]:
        with self._lock:
            return self.market_data.get(market_id)

    def get_market_data_by_crop(self, crop_name: str) -> Optional[MarketData]:
        with self._lock:
            return self.market_data.find(lambda m: _same_text(m.crop_name, crop_name))

    def get_all_market_data(self) -> List[MarketData]:
        with self._lock:
            return self.market_data.all()

    def create_market_data(self, market: InsertMarketData) -> MarketData:
        return self._insert(self.market_data, MarketData, market, last_updated=utcnow())

    def update_market_data(self, market_id: int, partial: Mapping[str, Any]) -> Optional[MarketData]:
        return self._update(self.market_data, market_id, partial, last_updated=utcnow())

    # --- Disease records ---

    def get_disease_record(self, record_id: int) -> Optional[DiseaseRecord]:
        with self._lock:
            return self.disease_records.get(record_id)

    def get_disease_records_by_crop(self, crop_id: int) -> List[DiseaseRecord]:
        with self._lock:
            return self.disease_records.filter(lambda r: r.crop_id == crop_id)

    def create_disease_record(self, record: InsertDiseaseRecord) -> DiseaseRecord:
        return self._insert(self.disease_records, DiseaseRecord, record, scan_date=utcnow())

    # --- Government schemes ---

    def get_government_scheme(self, scheme_id: int) -> Optional[GovernmentScheme]:
        with self._lock:
            return self.government_schemes.get(scheme_id)

    def get_all_government_schemes(self) -> List[GovernmentScheme]:
        with self._lock:
            return self.government_schemes.all()

    def create_government_scheme(self, scheme: InsertGovernmentScheme) -> GovernmentScheme:
        return self._insert(self.government_schemes, GovernmentScheme, scheme)

    # --- Settings ---

    def get_settings(self, user_id: int) -> Optional[Settings]:
        with self._lock:
            return self.settings.find(lambda s: s.user_id == user_id)

    def create_settings(self, settings: InsertSettings) -> Settings:
        # A second row for the same user is accepted; lookups keep returning the first.
        return self._insert(self.settings, Settings, settings)

    def update_settings(self, user_id: int, partial: Mapping[str, Any]) -> Optional[Settings]:
        with self._lock:
            existing = self.get_settings(user_id)
            if existing is None:
                return None
            return self._update(self.settings, existing.id, partial)
