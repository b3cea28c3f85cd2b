# advisory/crop_suitability.py

from typing import List

# Fixed ranking until suitability is computed from the farm's soil readings.
SUITABLE_CROPS = [
    {"name": "Rice", "icon": "🌾", "score": 92, "soil": "Clay loam", "water": "High", "season": "Kharif (June-Oct)"},
    {"name": "Wheat", "icon": "🌿", "score": 78, "soil": "Clay loam", "water": "Medium", "season": "Rabi (Nov-Apr)"},
    {"name": "Corn", "icon": "🌽", "score": 85, "soil": "Loam", "water": "Medium", "season": "Kharif (June-Oct)"},
    {"name": "Soybeans", "icon": "🫘", "score": 70, "soil": "Loam", "water": "Medium-Low", "season": "Kharif (June-Oct)"},
]


def crop_suitability() -> List[dict]:
    return [dict(crop) for crop in SUITABLE_CROPS]
