import json
import logging
import time
from dataclasses import dataclass
from typing import Optional
from uuid import uuid4

from pydantic import ValidationError

from app.models.crop_advisory import (
    CropRecommendation,
    FertilizerPlan,
    Rating,
    RecommendationDraft,
)
from app.models.farm_profile import FarmProfile

logger = logging.getLogger(__name__)

FALLBACK_SCORE = 75
NOTES_PREVIEW_CHARS = 500
TRUNCATION_MARKER = "..."


@dataclass
class StreamState:
    """Raw model output accumulated for one stream; never shared across requests."""

    buffer: str = ""
    sequence: int = 0

    def append(self, chunk: str) -> str:
        self.buffer += chunk
        return self.buffer

    def next_sequence(self) -> int:
        self.sequence += 1
        return self.sequence


def find_balanced_object(text: str) -> Optional[str]:
    """
    Return the first top-level ``{...}`` literal in ``text``, or None when the
    first opening brace has no matching close yet. Braces inside double-quoted
    strings are ignored.
    """
    start = text.find("{")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start : index + 1]
    return None


def _parse_draft(text: str) -> Optional[RecommendationDraft]:
    candidate = find_balanced_object(text)
    if candidate is None:
        return None

    try:
        payload = json.loads(candidate)
    except (ValueError, RecursionError):
        return None

    primary = payload.get("primaryRecommendation")
    if not isinstance(primary, dict):
        return None
    crop_name = primary.get("cropName")
    if not isinstance(crop_name, str) or not crop_name.strip():
        return None

    try:
        return RecommendationDraft.model_validate(payload)
    except ValidationError:
        return None


def try_extract_partial(buffer: str) -> Optional[RecommendationDraft]:
    """Draft from the text streamed so far, or None if there is not enough of it yet."""
    return _parse_draft(buffer)


def _preview(text: str) -> str:
    if len(text) <= NOTES_PREVIEW_CHARS:
        return text
    return text[:NOTES_PREVIEW_CHARS] + TRUNCATION_MARKER


def build_fallback_draft(text: str, profile: FarmProfile) -> RecommendationDraft:
    season = profile.climate.season.value
    region = profile.location.region
    irrigated = profile.farming_details.irrigation_available

    return RecommendationDraft(
        primary_recommendation=CropRecommendation(
            crop_name="Based on analysis",
            variety="Recommended variety",
            confidence=FALLBACK_SCORE,
            expected_yield="Variable based on conditions",
            planting_time=f"Suitable for {season} season",
            harvest_time="3-4 months after planting",
            market_price="Contact local market",
            profitability=Rating.MEDIUM,
            risk_level=Rating.MEDIUM,
            water_requirement="Moderate" if irrigated else "Low",
            fertilizer=FertilizerPlan(
                type="NPK based on soil analysis",
                quantity="As per soil test recommendations",
                schedule="Split application during growing season",
            ),
            pest_management=["Integrated Pest Management", "Regular monitoring"],
            suitability_score=FALLBACK_SCORE,
        ),
        alternative_recommendations=[],
        seasonal_advice=f"For {season} season in {region}",
        sustainability_tips=["Crop rotation", "Organic matter addition"],
        risk_factors=["Weather dependency", "Market fluctuations"],
        additional_notes=_preview(text),
    )


def extract_final(buffer: str, profile: FarmProfile) -> RecommendationDraft:
    """
    Authoritative parse of the complete model output. Falls back to a
    conservative draft built from the farm profile when no usable object is
    found; the raw text is kept in ``additional_notes``.
    """
    draft = _parse_draft(buffer)
    if draft is not None:
        return draft

    logger.warning(
        "No structured recommendation in model output (%d chars), using fallback",
        len(buffer),
    )
    return build_fallback_draft(buffer, profile)


def generate_request_id() -> str:
    return f"req_{int(time.time() * 1000)}_{uuid4().hex[:9]}"
