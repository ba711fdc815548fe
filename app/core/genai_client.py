from langchain_google_genai import (
    ChatGoogleGenerativeAI,
    HarmBlockThreshold,
    HarmCategory,
)

from .config import Settings, settings
from .errors import AppError, ErrorCode

DEFAULT_SAFETY_SETTINGS = {
    HarmCategory.HARM_CATEGORY_HATE_SPEECH: HarmBlockThreshold.BLOCK_LOW_AND_ABOVE,
}


def get_chat_model(
    model: str | None = None, config: Settings = settings, **kwargs
) -> ChatGoogleGenerativeAI:
    if "google_api_key" not in kwargs and "api_key" not in kwargs:
        kwargs["google_api_key"] = config.GEMINI_API_KEY
    if "safety_settings" not in kwargs:
        kwargs["safety_settings"] = DEFAULT_SAFETY_SETTINGS
    return ChatGoogleGenerativeAI(model=model or config.GEMINI_MODEL, **kwargs)


def get_advisory_model() -> ChatGoogleGenerativeAI:
    """FastAPI dependency returning the chat model used for crop advisory."""
    if not settings.GEMINI_API_KEY:
        raise AppError(
            "AI service not configured",
            status_code=503,
            code=ErrorCode.SERVICE_UNAVAILABLE,
        )
    return get_chat_model()
