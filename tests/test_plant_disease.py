import random

from advisory.plant_disease import PlantDiseaseAgent
from advisory.crop_suitability import crop_suitability
from core.models import DiseaseSeverity


class FixedRandom(random.Random):
    def __init__(self, value):
        super().__init__()
        self.value = value

    def random(self):
        return self.value


def test_detect_healthy():
    result = PlantDiseaseAgent(FixedRandom(0.9)).detect("data:image/jpeg;base64,xyz")
    assert result["name"] == ""
    assert result["confidence"] == 95
    assert result["treatment"] == []


def test_detect_leaf_blight():
    result = PlantDiseaseAgent(FixedRandom(0.1)).detect()
    assert result["name"] == "Bacterial Leaf Blight"
    assert result["confidence"] == 89
    assert len(result["treatment"]) == 3
    assert len(result["preventiveMeasures"]) == 3
    assert len(result["organicRemedies"]) == 3
    assert result["isSevere"] is False


def test_detect_results_are_independent_copies():
    agent = PlantDiseaseAgent(FixedRandom(0.1))
    agent.detect()["treatment"].clear()
    assert len(agent.detect()["treatment"]) == 3


def test_scan_is_fixed():
    result = PlantDiseaseAgent().scan()
    assert result["crop"] == "Rice"
    assert result["health"] == "Healthy"
    assert result["issues"] == []
    assert len(result["recommendations"]) == 2


def test_to_disease_record_severity():
    agent = PlantDiseaseAgent(FixedRandom(0.1))
    blight = agent.to_disease_record(agent.detect(), user_id=1, crop_id=4)
    assert blight.crop_id == 4
    assert blight.severity == DiseaseSeverity.MILD
    assert blight.preventive_measures[0] == "Use disease-free seeds and seedlings"

    severe = agent.to_disease_record({**agent.detect(), "isSevere": True}, user_id=1, crop_id=4)
    assert severe.severity == DiseaseSeverity.MODERATE

    healthy = PlantDiseaseAgent(FixedRandom(0.9))
    record = healthy.to_disease_record(healthy.detect(), user_id=1, crop_id=4)
    assert record.name == ""
    assert record.severity == DiseaseSeverity.NONE


def test_crop_suitability_listing():
    crops = crop_suitability()
    assert [c["name"] for c in crops] == ["Rice", "Wheat", "Corn", "Soybeans"]
    assert crops[0]["score"] == 92
    crops[0]["score"] = 0
    assert crop_suitability()[0]["score"] == 92
