import math
import re
from datetime import datetime, timezone
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

ANALYSIS_VERSION = "1.0"

_NUMBER_PATTERN = re.compile(r"-?\d+(?:\.\d+)?")


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_text(value: Any, default: str = "") -> str:
    if value is None or isinstance(value, (dict, list)):
        return default
    if isinstance(value, str):
        return value.strip()
    return str(value)


def _as_text_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value.strip()] if value.strip() else []
    if not isinstance(value, list):
        return []
    return [
        _as_text(item)
        for item in value
        if isinstance(item, (str, int, float)) and _as_text(item)
    ]


def _as_score(value: Any, default: float) -> float:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        # clamp before converting; float() overflows on very large ints
        number = float(max(0, min(100, value)))
    elif isinstance(value, float):
        number = value
    elif isinstance(value, str):
        match = _NUMBER_PATTERN.search(value)
        if match is None:
            return default
        number = float(match.group())
    else:
        return default
    if not math.isfinite(number):
        return default
    return max(0.0, min(100.0, number))


class Rating(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def coerce(cls, value: Any) -> "Rating":
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.MEDIUM


class FertilizerPlan(_CamelModel):
    type: str = ""
    quantity: str = ""
    schedule: str = ""

    @model_validator(mode="before")
    @classmethod
    def _project(cls, values):
        if isinstance(values, BaseModel):
            return values
        if isinstance(values, str):
            return {"type": values.strip()}
        if not isinstance(values, dict):
            return {}
        return {key: _as_text(values.get(key)) for key in ("type", "quantity", "schedule")}


class CropRecommendation(_CamelModel):
    """A single crop suggestion as produced by the model."""

    crop_name: str = Field(default="", description="e.g. 'Wheat'")
    variety: str = Field(default="", description="e.g. 'HD-2967'")
    confidence: float = Field(default=0, ge=0, le=100)
    expected_yield: str = Field(default="", description="e.g. '45 quintals per acre'")
    planting_time: str = ""
    harvest_time: str = ""
    market_price: str = Field(default="", description="e.g. '₹2,275 per quintal'")
    profitability: Rating = Rating.MEDIUM
    risk_level: Rating = Rating.MEDIUM
    water_requirement: str = ""
    fertilizer: FertilizerPlan = Field(default_factory=FertilizerPlan)
    pest_management: List[str] = Field(default_factory=list)
    suitability_score: float = Field(default=0, ge=0, le=100)

    @model_validator(mode="before")
    @classmethod
    def _project(cls, values):
        """Best-effort projection of loosely typed model output onto this schema."""
        if not isinstance(values, dict):
            return values

        projected = dict(values)
        for key in (
            "cropName",
            "variety",
            "expectedYield",
            "plantingTime",
            "harvestTime",
            "marketPrice",
            "waterRequirement",
        ):
            if key in projected:
                projected[key] = _as_text(projected[key])
        for key in ("confidence", "suitabilityScore"):
            if key in projected:
                projected[key] = _as_score(projected[key], default=0)
        for key in ("profitability", "riskLevel"):
            if key in projected:
                projected[key] = Rating.coerce(projected[key])
        if "pestManagement" in projected:
            projected["pestManagement"] = _as_text_list(projected["pestManagement"])
        if "fertilizer" in projected and projected["fertilizer"] is None:
            projected.pop("fertilizer")
        return projected


class RecommendationDraft(_CamelModel):
    """
    The structured advisory result. Emitted either as a partial draft while the
    model is still streaming or as the complete draft at the end; each emission
    is the full current state, never a diff against an earlier one.
    """

    primary_recommendation: CropRecommendation
    alternative_recommendations: List[CropRecommendation] = Field(default_factory=list)
    seasonal_advice: str = ""
    sustainability_tips: List[str] = Field(default_factory=list)
    risk_factors: List[str] = Field(default_factory=list)
    additional_notes: str = ""

    @model_validator(mode="before")
    @classmethod
    def _project(cls, values):
        if not isinstance(values, dict):
            return values

        projected = dict(values)
        if "alternativeRecommendations" in projected:
            alternatives = projected["alternativeRecommendations"]
            projected["alternativeRecommendations"] = (
                [
                    item
                    for item in alternatives
                    if isinstance(item, (dict, CropRecommendation))
                ]
                if isinstance(alternatives, list)
                else []
            )
        for key in ("seasonalAdvice", "additionalNotes"):
            if key in projected:
                projected[key] = _as_text(projected[key])
        for key in ("sustainabilityTips", "riskFactors"):
            if key in projected:
                projected[key] = _as_text_list(projected[key])
        return projected

    @property
    def crop_name(self) -> str:
        return self.primary_recommendation.crop_name


class ResponseMetadata(_CamelModel):
    timestamp: datetime = Field(default_factory=_utcnow)
    request_id: str
    analysis_version: str = ANALYSIS_VERSION


class CropAdvisoryResponse(_CamelModel):
    success: bool = True
    data: RecommendationDraft
    metadata: ResponseMetadata


class StreamEventType(str, Enum):
    PARTIAL = "partial"
    COMPLETE = "complete"
    ERROR = "error"


class StreamEvent(_CamelModel):
    type: StreamEventType
    sequence: int = Field(ge=0)
    data: Optional[CropAdvisoryResponse] = None
    error: Optional[dict[str, Any]] = None
    timestamp: datetime = Field(default_factory=_utcnow)
