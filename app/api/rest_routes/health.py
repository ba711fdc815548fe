import time
from datetime import datetime, timezone

from fastapi import APIRouter

from app.core.config import settings

router = APIRouter(tags=["Health"])

_STARTED_AT = time.monotonic()


@router.get("/health")
async def health():
    return {
        "success": True,
        "message": "Smart Crop Advisory API is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": settings.APP_VERSION,
        "uptime": round(time.monotonic() - _STARTED_AT, 3),
        "services": {"geminiAI": bool(settings.GEMINI_API_KEY)},
    }
