import random

from fastapi.testclient import TestClient

from server import create_app
from core.storage import MemStorage
from core.seed import seed_sample_data
from core.models import InsertCrop, InsertUser
from advisory.plant_disease import PlantDiseaseAgent


def seeded_client(rng=None):
    storage = MemStorage()
    seed_sample_data(storage)
    app = create_app(storage=storage, disease_agent=PlantDiseaseAgent(rng))
    return TestClient(app), storage


def empty_client():
    storage = MemStorage()
    return TestClient(create_app(storage=storage)), storage


def test_health():
    client, _ = empty_client()
    assert client.get("/api/health").json() == {"status": "ok"}


def test_get_user_strips_password():
    client, _ = seeded_client()
    response = client.get("/api/user/1")
    assert response.status_code == 200
    body = response.json()
    assert body["username"] == "farmerraj"
    assert body["farmSize"] == "5.5 acres"
    assert "password" not in body

    assert client.get("/api/user/42").status_code == 404
    assert client.get("/api/user/abc").status_code == 422


def test_register_conflict():
    client, storage = empty_client()
    payload = {"username": "farmerraj", "password": "pw", "name": "Raj"}

    created = client.post("/api/user/register", json=payload)
    assert created.status_code == 201
    assert "password" not in created.json()
    assert created.json()["id"] == 1

    duplicate = client.post("/api/user/register", json=payload)
    assert duplicate.status_code == 409
    assert duplicate.json()["detail"] == "Username already exists"
    assert len(storage.users) == 1


def test_register_rejects_missing_fields():
    client, _ = empty_client()
    assert client.post("/api/user/register", json={"username": "x"}).status_code == 422


def test_profile_update_merges_into_demo_user():
    client, storage = seeded_client()
    response = client.post("/api/user/profile", json={"phone": "1112223333", "farmType": "Rice"})
    assert response.status_code == 200
    body = response.json()
    assert body["phone"] == "1112223333"
    assert body["farmType"] == "Rice"
    assert body["name"] == "Farmer Raj"
    assert "password" not in body
    assert storage.get_user(1).password == "password123"


def test_profile_update_without_user():
    client, _ = empty_client()
    assert client.post("/api/user/profile", json={"name": "X"}).status_code == 404


def test_weather_and_soil():
    client, _ = seeded_client()
    weather = client.get("/api/weather").json()
    assert weather == {
        "condition": "Sunny", "temperature": 28, "humidity": 65, "wind": 8,
        "precipitation": 0, "feelsLike": 29, "uvIndex": 7,
    }

    soil = client.get("/api/soil-data").json()
    assert soil["pH"] == 6.8
    assert soil["percentage"] == 68
    assert soil["type"] == "Clay Loam"


def test_derived_endpoints_404_when_chain_breaks():
    client, _ = empty_client()
    for path in ["/api/weather", "/api/soil-data", "/api/crops/current", "/api/market/current", "/api/settings"]:
        assert client.get(path).status_code == 404, path


def test_market_current_404_when_no_market_for_crop():
    client, storage = empty_client()
    storage.create_user(InsertUser(username="u", password="pw", name="U"))
    storage.create_crop(InsertCrop(user_id=1, name="Millet"))
    response = client.get("/api/market/current")
    assert response.status_code == 404
    assert response.json()["detail"] == "Market data not found"


def test_current_crop_shape():
    client, _ = seeded_client()
    crop = client.get("/api/crops/current").json()
    assert crop["name"] == "Rice"
    assert crop["status"] == "Healthy"
    assert crop["growthProgress"] == 65
    assert crop["plantedDate"].startswith("2023-08-01")


def test_crop_crud():
    client, _ = seeded_client()
    created = client.post("/api/crops", json={"userId": 1, "name": "Wheat", "fieldSize": 1.5})
    assert created.status_code == 201
    crop_id = created.json()["id"]
    assert created.json()["status"] == "healthy"

    assert client.get(f"/api/crops/{crop_id}").json()["fieldSize"] == 1.5
    assert [c["name"] for c in client.get("/api/crops").json()] == ["Rice", "Wheat"]

    patched = client.patch(f"/api/crops/{crop_id}", json={"status": "stressed"})
    assert patched.json()["status"] == "stressed"
    assert patched.json()["name"] == "Wheat"
    assert client.patch(f"/api/crops/{crop_id}", json={"status": "wilting"}).status_code == 422

    assert client.delete(f"/api/crops/{crop_id}").status_code == 204
    assert client.get(f"/api/crops/{crop_id}").status_code == 404
    assert client.delete(f"/api/crops/{crop_id}").status_code == 404
    assert client.patch("/api/crops/999", json={"name": "X"}).status_code == 404


def test_create_crop_requires_name():
    client, _ = empty_client()
    assert client.post("/api/crops", json={"userId": 1}).status_code == 422


def test_market_routes():
    client, _ = seeded_client()
    current = client.get("/api/market/current").json()
    assert current["cropName"] == "Rice"
    assert current["forecastTrend"]["prices"] == [2050, 2100, 2210, 2150]
    assert current["nearbyMandis"][0]["name"] == "Rajpur Mandi"

    assert client.get("/api/market/RICE").json()["id"] == current["id"]
    assert client.get("/api/market/wheat").status_code == 404
    assert len(client.get("/api/market").json()) == 1


def test_scan_ignores_store():
    client, _ = empty_client()
    body = client.post("/api/scan", json={"image": "data:image/png;base64,abc"}).json()
    assert body["health"] == "Healthy"
    assert client.post("/api/scan").status_code == 200


def test_disease_detection_records_when_crop_given():
    client, storage = seeded_client(rng=random.Random(3))
    result = client.post("/api/disease-detection", json={"image": "data:...", "cropId": 1}).json()
    assert result["confidence"] in (89, 95)

    records = client.get("/api/crops/1/disease-records").json()
    assert len(records) == 1
    assert records[0]["name"] == result["name"]
    assert records[0]["userId"] == 1

    client.post("/api/disease-detection", json={"image": "data:..."})
    assert len(storage.get_disease_records_by_crop(1)) == 1


def test_government_schemes_in_insertion_order():
    client, _ = seeded_client()
    schemes = client.get("/api/government-schemes").json()
    assert [s["title"] for s in schemes] == ["PM-KISAN", "Soil Health Card Scheme", "Solar Pump Subsidy"]
    assert schemes[0]["isNew"] is True
    assert schemes[1]["deadline"] == "Ongoing"


def test_crop_suitability():
    client, _ = empty_client()
    assert len(client.get("/api/crop-suitability").json()) == 4


def test_settings_routes():
    client, _ = seeded_client()
    current = client.get("/api/settings").json()
    assert current["language"] == "en"
    assert current["voiceAssistantEnabled"] is True

    updated = client.patch("/api/settings", json={"darkModeEnabled": True, "language": "hi"}).json()
    assert updated["darkModeEnabled"] is True
    assert updated["language"] == "hi"
    assert updated["notificationsEnabled"] is True


def test_create_app_seeds_its_own_store():
    client = TestClient(create_app(seed=True))
    assert client.get("/api/crops/current").json()["name"] == "Rice"
    client = TestClient(create_app(seed=False))
    assert client.get("/api/crops/current").status_code == 404


def test_updates_reject_out_of_range_and_null_required_fields():
    client, storage = seeded_client()
    crop_before = storage.get_crop(1)
    settings_before = storage.get_settings(1)
    user_before = storage.get_user(1)

    assert client.patch("/api/crops/1", json={"growthProgress": 150}).status_code == 422
    assert client.patch("/api/crops/1", json={"growthProgress": -1}).status_code == 422
    assert client.patch("/api/crops/1", json={"name": None}).status_code == 422
    assert client.patch("/api/crops/1", json={"status": None}).status_code == 422
    assert client.patch("/api/settings", json={"language": None}).status_code == 422
    assert client.patch("/api/settings", json={"darkModeEnabled": None}).status_code == 422
    assert client.post("/api/user/profile", json={"name": None}).status_code == 422

    assert storage.get_crop(1) == crop_before
    assert storage.get_settings(1) == settings_before
    assert storage.get_user(1) == user_before


def test_updates_allow_clearing_optional_fields():
    client, _ = seeded_client()
    crop = client.patch("/api/crops/1", json={"emoji": None, "growthProgress": 100})
    assert crop.status_code == 200
    assert crop.json()["emoji"] is None
    assert crop.json()["growthProgress"] == 100

    profile = client.post("/api/user/profile", json={"phone": None})
    assert profile.status_code == 200
    assert profile.json()["phone"] is None
