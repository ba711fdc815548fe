import json

FARM_PAYLOAD = {
    "location": {"latitude": 30.9, "longitude": 75.85, "region": "Punjab"},
    "soilData": {
        "ph": 7.2,
        "nitrogen": 45,
        "phosphorus": 22,
        "potassium": 38,
        "organicMatter": 2.5,
        "soilType": "loamy",
    },
    "climate": {
        "averageTemperature": 28,
        "rainfall": 650,
        "humidity": 70,
        "season": "monsoon",
    },
    "farmingDetails": {
        "farmSize": 5,
        "budget": 50000,
        "experience": "intermediate",
        "irrigationAvailable": False,
    },
}

WHEAT_RECOMMENDATION = {
    "primaryRecommendation": {
        "cropName": "Wheat",
        "variety": "HD-2967",
        "confidence": 82,
        "expectedYield": "45-50 quintals per hectare",
        "plantingTime": "November",
        "harvestTime": "April",
        "marketPrice": "₹2,275 per quintal",
        "profitability": "high",
        "riskLevel": "low",
        "waterRequirement": "Moderate",
        "fertilizer": {
            "type": "NPK 120:60:40",
            "quantity": "120 kg/ha nitrogen",
            "schedule": "Half at sowing, rest at first irrigation",
        },
        "pestManagement": ["Monitor for aphids", "Use rust resistant seed"],
        "suitabilityScore": 88,
    },
    "alternativeRecommendations": [
        {
            "cropName": "Mustard",
            "variety": "Pusa Bold",
            "confidence": 70,
            "profitability": "medium",
            "riskLevel": "medium",
            "suitabilityScore": 74,
        }
    ],
    "seasonalAdvice": "Prepare fields after the monsoon recedes.",
    "sustainabilityTips": ["Rotate with legumes"],
    "riskFactors": ["Late heat stress"],
    "additionalNotes": "Check local mandi prices before harvest.",
}

WHEAT_JSON = json.dumps(WHEAT_RECOMMENDATION, ensure_ascii=False)

PROSE_ANSWER = (
    "Given the monsoon rains in Punjab and loamy soil, paddy followed by wheat "
    "is a sensible rotation. Make sure drainage channels are kept clear."
)


def farm_payload(**overrides) -> dict:
    payload = json.loads(json.dumps(FARM_PAYLOAD))
    for section, values in overrides.items():
        payload[section] = {**payload.get(section, {}), **values}
    return payload


def parse_sse(body: str) -> list:
    events = []
    for block in body.split("\n\n"):
        block = block.strip()
        if not block.startswith("data: "):
            continue
        data = block[len("data: ") :]
        events.append(data if data == "[DONE]" else json.loads(data))
    return events
