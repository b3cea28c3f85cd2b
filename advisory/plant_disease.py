# advisory/plant_disease.py

import random
from typing import Optional

from core.models import InsertDiseaseRecord, DiseaseSeverity

HEALTHY_RESULT = {
    "name": "",
    "confidence": 95,
    "description": "",
    "treatment": [],
    "preventiveMeasures": [],
    "organicRemedies": [],
    "isSevere": False,
}

LEAF_BLIGHT_RESULT = {
    "name": "Bacterial Leaf Blight",
    "confidence": 89,
    "description": "A bacterial disease causing yellow to white lesions along the leaf veins.",
    "treatment": [
        "Drain the field and allow to dry when possible",
        "Apply copper-based bactericides as per recommended dose",
        "Remove and destroy infected plant debris",
    ],
    "preventiveMeasures": [
        "Use disease-free seeds and seedlings",
        "Maintain proper spacing between plants for better air circulation",
        "Avoid excessive nitrogen fertilization",
    ],
    "organicRemedies": [
        "Spray neem oil solution (5ml/liter of water) at weekly intervals",
        "Apply compost tea as a natural fungicide",
        "Introduce beneficial microorganisms to soil",
    ],
    "isSevere": False,
}

SCAN_RESULT = {
    "crop": "Rice",
    "health": "Healthy",
    "issues": [],
    "recommendations": ["Continue current irrigation schedule", "Apply nitrogen in 5 days"],
}


class PlantDiseaseAgent:
    """
    Stand-in for image-based disease detection. No model is consulted: the image is accepted
    and ignored, and one of two canned diagnoses comes back at random.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def detect(self, image: Optional[str] = None) -> dict:
        print("---PLANT DISEASE AGENT---")
        if self.rng.random() > 0.5:
            result = HEALTHY_RESULT
        else:
            result = LEAF_BLIGHT_RESULT
        print(f"Disease Detected: {result['name'] or 'none'} ({result['confidence']})")
        # Hand out a fresh copy so callers can't edit the canned payloads.
        return {k: list(v) if isinstance(v, list) else v for k, v in result.items()}

    def scan(self, image: Optional[str] = None) -> dict:
        print("---CROP SCAN---")
        return {**SCAN_RESULT, "issues": [], "recommendations": list(SCAN_RESULT["recommendations"])}

    @staticmethod
    def to_disease_record(result: dict, user_id: Optional[int], crop_id: Optional[int],
                          image_url: Optional[str] = None) -> InsertDiseaseRecord:
        """Turns a detection payload into something the store can keep."""
        if not result.get("name"):
            severity = DiseaseSeverity.NONE
        elif result.get("isSevere"):
            severity = DiseaseSeverity.MODERATE
        else:
            severity = DiseaseSeverity.MILD

        return InsertDiseaseRecord(
            user_id=user_id,
            crop_id=crop_id,
            name=result.get("name", ""),
            confidence=result.get("confidence"),
            description=result.get("description", ""),
            treatment=result.get("treatment", []),
            preventive_measures=result.get("preventiveMeasures", []),
            organic_remedies=result.get("organicRemedies", []),
            severity=severity,
            image_url=image_url,
        )
