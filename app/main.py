import logging
import sys
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from app.api.rest_routes.crop_advisory import router as crop_advisory_router
from app.api.rest_routes.health import router as health_router
from app.core.config import settings, validate_config
from app.core.errors import register_exception_handlers
from app.core.logging_config import configure_logging

load_dotenv()

logger = logging.getLogger("app.main")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        logger.info(
            "%s %s %s %.1fms",
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - started) * 1000,
        )
        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.LOG_LEVEL)
    logger.info(
        "Smart Crop Advisory API starting (environment=%s, model=%s)",
        settings.ENVIRONMENT,
        settings.GEMINI_MODEL,
    )
    yield
    logger.info("Smart Crop Advisory API shutting down")


app = FastAPI(
    title="Smart Crop Advisory API",
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)
register_exception_handlers(app)

app.include_router(health_router)
app.include_router(crop_advisory_router)


@app.get("/")
async def root():
    return {
        "success": True,
        "message": "Welcome to Smart Crop Advisory API",
        "description": "AI-powered crop recommendation system using Gemini AI",
        "version": settings.APP_VERSION,
        "endpoints": {
            "health": "/health",
            "api": "/api",
            "cropAdvisory": "/api/crop-advisory",
            "info": "/api/crop-advisory/info",
        },
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


def run() -> None:
    import uvicorn

    configure_logging(settings.LOG_LEVEL)
    try:
        validate_config(settings)
    except RuntimeError as e:
        logger.error("Configuration validation failed: %s", e)
        sys.exit(1)

    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
