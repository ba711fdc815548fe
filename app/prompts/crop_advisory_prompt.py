from app.models.farm_profile import FarmProfile

CROP_ADVISORY_SYSTEM_PROMPT = """
You are an expert agricultural advisor. Based on the farm data given by the user, provide a comprehensive crop recommendation analysis.

Please provide recommendations in the following JSON format:
{
  "primaryRecommendation": {
    "cropName": "string",
    "variety": "string",
    "confidence": number (0-100),
    "expectedYield": "string with units",
    "plantingTime": "string",
    "harvestTime": "string",
    "marketPrice": "string per unit",
    "profitability": "high/medium/low",
    "riskLevel": "low/medium/high",
    "waterRequirement": "string",
    "fertilizer": {
      "type": "string",
      "quantity": "string",
      "schedule": "string"
    },
    "pestManagement": ["array of pest management strategies"],
    "suitabilityScore": number (0-100)
  },
  "alternativeRecommendations": [
    // 2-3 alternative crops with same structure as primary
  ],
  "seasonalAdvice": "string with seasonal planting advice",
  "sustainabilityTips": ["array of sustainability tips"],
  "riskFactors": ["array of potential risks"],
  "additionalNotes": "string with extra important information"
}

Focus on:
1. Crop suitability for the specific soil and climate conditions
2. Economic viability and market potential
3. Water and resource efficiency
4. Risk assessment (weather, pests, diseases)
5. Sustainable farming practices
6. Specific varieties suited for the region

Provide practical, actionable advice that considers the farmer's experience level and available resources.
"""


def _number(value: float) -> str:
    return f"{value:g}"


def build_prompt(profile: FarmProfile) -> str:
    location = profile.location
    soil = profile.soil_data
    climate = profile.climate
    farming = profile.farming_details
    preferences = profile.preferences

    lines = [
        "**Location Information:**",
        f"- Region: {location.region}",
        f"- Coordinates: {_number(location.latitude)}, {_number(location.longitude)}",
        "",
        "**Soil Analysis:**",
        f"- pH Level: {_number(soil.ph)}",
        f"- Nitrogen: {_number(soil.nitrogen)}%",
        f"- Phosphorus: {_number(soil.phosphorus)}%",
        f"- Potassium: {_number(soil.potassium)}%",
        f"- Organic Matter: {_number(soil.organic_matter)}%",
        f"- Soil Type: {soil.soil_type.value}",
        "",
        "**Climate Conditions:**",
        f"- Average Temperature: {_number(climate.average_temperature)}°C",
        f"- Annual Rainfall: {_number(climate.rainfall)}mm",
        f"- Humidity: {_number(climate.humidity)}%",
        f"- Current Season: {climate.season.value}",
        "",
        "**Farming Details:**",
        f"- Farm Size: {_number(farming.farm_size)} acres",
        f"- Budget: ${_number(farming.budget)}",
        f"- Farmer Experience: {farming.experience.value}",
        f"- Irrigation Available: {'Yes' if farming.irrigation_available else 'No'}",
    ]
    if farming.previous_crops:
        lines.append(f"- Previous Crops: {', '.join(farming.previous_crops)}")

    preference_lines = []
    if preferences is not None:
        if preferences.crop_type is not None:
            preference_lines.append(
                f"- Crop Type Preference: {preferences.crop_type.value}"
            )
        if preferences.sustainability_focus:
            preference_lines.append("- Sustainability Focus: Yes")
        if preferences.organic_farming:
            preference_lines.append("- Organic Farming: Yes")
    if preference_lines:
        lines.extend(["", "**Preferences:**", *preference_lines])

    return "\n".join(lines)
