from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _FrozenCamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class SoilType(str, Enum):
    CLAY = "clay"
    SANDY = "sandy"
    LOAMY = "loamy"
    SILT = "silt"
    PEAT = "peat"
    CHALK = "chalk"
    MIXED = "mixed"


class Season(str, Enum):
    SPRING = "spring"
    SUMMER = "summer"
    MONSOON = "monsoon"
    WINTER = "winter"


class Experience(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    EXPERT = "expert"


class CropType(str, Enum):
    CASH = "cash"
    FOOD = "food"
    BOTH = "both"


class Location(_FrozenCamelModel):
    """Geographical location of the farm."""

    latitude: float = Field(ge=-90, le=90, description="Latitude of the farm.")
    longitude: float = Field(ge=-180, le=180, description="Longitude of the farm.")
    region: str = Field(
        min_length=2, max_length=100, description="Region the farm is located in."
    )


class SoilData(_FrozenCamelModel):
    """Results of a soil sample test."""

    ph: float = Field(ge=0, le=14, description="pH level of the soil.")
    nitrogen: float = Field(ge=0, le=100, description="Nitrogen content in percent.")
    phosphorus: float = Field(
        ge=0, le=100, description="Phosphorus content in percent."
    )
    potassium: float = Field(ge=0, le=100, description="Potassium content in percent.")
    organic_matter: float = Field(
        ge=0, le=100, description="Organic matter content in percent."
    )
    soil_type: SoilType


class Climate(_FrozenCamelModel):
    average_temperature: float = Field(
        ge=-50, le=60, description="Average temperature in °C."
    )
    rainfall: float = Field(ge=0, le=10000, description="Annual rainfall in mm.")
    humidity: float = Field(ge=0, le=100, description="Relative humidity in percent.")
    season: Season


class FarmingDetails(_FrozenCamelModel):
    farm_size: float = Field(ge=0.1, le=10000, description="Farm size in acres.")
    budget: float = Field(ge=0, description="Available budget.")
    experience: Experience
    irrigation_available: bool
    previous_crops: Optional[Tuple[str, ...]] = Field(
        default=None, description="Crops grown on the farm before."
    )


class Preferences(_FrozenCamelModel):
    crop_type: Optional[CropType] = None
    sustainability_focus: Optional[bool] = None
    organic_farming: Optional[bool] = None


class FarmProfile(_FrozenCamelModel):
    """
    Farm conditions a crop recommendation is generated for.
    Frozen once validated; each request owns its own instance.
    """

    location: Location
    soil_data: SoilData
    climate: Climate
    farming_details: FarmingDetails
    preferences: Optional[Preferences] = None
