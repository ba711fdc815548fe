from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from langchain_core.language_models import BaseChatModel

from app.core.config import settings
from app.core.genai_client import get_advisory_model
from app.models.crop_advisory import CropAdvisoryResponse
from app.models.farm_profile import FarmProfile
from app.services.crop_advisory_service import (
    get_crop_recommendation,
    stream_crop_recommendation,
)

router = APIRouter(prefix="/api/crop-advisory", tags=["Crop Advisory"])


@router.post("", response_model=CropAdvisoryResponse)
async def create_crop_recommendation(
    profile: FarmProfile,
    model: BaseChatModel = Depends(get_advisory_model),
) -> CropAdvisoryResponse:
    """
    Get crop recommendations based on farm conditions as a single JSON response.
    """
    return await get_crop_recommendation(profile, model)


@router.post("/stream")
async def stream_crop_recommendation_events(
    profile: FarmProfile,
    model: BaseChatModel = Depends(get_advisory_model),
) -> StreamingResponse:
    """
    Get crop recommendations as Server-Sent Events: ``partial`` drafts while the
    model is writing, then a ``complete`` draft and ``[DONE]``.
    """
    return StreamingResponse(
        stream_crop_recommendation(profile, model),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
    )


@router.get("/info")
async def get_api_info():
    return {
        "success": True,
        "data": {
            "name": "Smart Crop Advisory API",
            "version": settings.APP_VERSION,
            "description": "AI-powered crop recommendation system using Gemini AI",
            "endpoints": {
                "POST": {
                    "/api/crop-advisory": "Get crop recommendations based on farm conditions (JSON response)",
                    "/api/crop-advisory/stream": "Get crop recommendations with streaming response (Server-Sent Events)",
                },
                "GET": {
                    "/health": "Health check endpoint",
                    "/api/crop-advisory/info": "API information",
                },
            },
            "requiredData": {
                "location": "Geographic coordinates and region",
                "soilData": "Soil composition and pH levels",
                "climate": "Weather and seasonal information",
                "farmingDetails": "Farm size, budget, and experience",
                "preferences": "Optional farming preferences",
            },
        },
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
