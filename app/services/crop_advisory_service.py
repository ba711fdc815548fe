import logging
from typing import Any, AsyncIterator, Optional

from fastapi import status
from langchain_core.language_models import BaseChatModel
from langchain_core.prompts import ChatPromptTemplate

from app.core.errors import AppError, ErrorCode, error_body
from app.models.crop_advisory import (
    CropAdvisoryResponse,
    RecommendationDraft,
    ResponseMetadata,
    StreamEvent,
    StreamEventType,
)
from app.models.farm_profile import FarmProfile
from app.prompts.crop_advisory_prompt import CROP_ADVISORY_SYSTEM_PROMPT, build_prompt
from app.services.recommendation_extractor import (
    StreamState,
    extract_final,
    generate_request_id,
    try_extract_partial,
)

logger = logging.getLogger(__name__)

STREAM_DONE = "data: [DONE]\n\n"


def _build_chain(model: BaseChatModel):
    prompt = ChatPromptTemplate.from_messages(
        [("system", "{system_prompt}"), ("human", "{farm_details}")]
    )
    return prompt | model


def _chain_input(profile: FarmProfile) -> dict:
    return {
        "system_prompt": CROP_ADVISORY_SYSTEM_PROMPT,
        "farm_details": build_prompt(profile),
    }


def _message_text(message: Any) -> str:
    content = getattr(message, "content", message)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        # Gemini may return content as a list of typed parts.
        return "".join(
            part if isinstance(part, str) else str(part.get("text", ""))
            for part in content
            if isinstance(part, (str, dict))
        )
    return ""


def _wrap(draft: RecommendationDraft, request_id: str) -> CropAdvisoryResponse:
    return CropAdvisoryResponse(
        data=draft, metadata=ResponseMetadata(request_id=request_id)
    )


def format_sse(event: StreamEvent) -> str:
    return f"data: {event.model_dump_json(by_alias=True, exclude_none=True)}\n\n"


async def get_crop_recommendation(
    profile: FarmProfile, model: BaseChatModel
) -> CropAdvisoryResponse:
    try:
        message = await _build_chain(model).ainvoke(_chain_input(profile))
    except Exception as e:
        logger.exception("Gemini API error for region %s", profile.location.region)
        raise AppError(
            "AI service temporarily unavailable",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            code=ErrorCode.EXTERNAL_API_ERROR,
        ) from e

    draft = extract_final(_message_text(message), profile)
    logger.info(
        "Crop recommendation generated for region: %s", profile.location.region
    )
    return _wrap(draft, generate_request_id())


async def stream_crop_recommendation(
    profile: FarmProfile, model: BaseChatModel
) -> AsyncIterator[str]:
    """
    Relay the model's streamed answer as SSE lines: a ``partial`` event each
    time the extracted draft changes, one ``complete`` event, then ``[DONE]``.
    An upstream failure ends the stream with an ``error`` event instead.
    """
    request_id = generate_request_id()
    state = StreamState()
    last_partial: Optional[RecommendationDraft] = None
    partial_count = 0

    logger.info(
        "Streaming crop recommendation started for region: %s (%s)",
        profile.location.region,
        request_id,
    )
    upstream = _build_chain(model).astream(_chain_input(profile))
    while True:
        # only the upstream read is mapped to EXTERNAL_API_ERROR
        try:
            chunk = await anext(upstream)
        except StopAsyncIteration:
            break
        except Exception:
            logger.exception("Gemini streaming API error (%s)", request_id)
            body = error_body(
                ErrorCode.EXTERNAL_API_ERROR, "AI service temporarily unavailable"
            )
            yield format_sse(
                StreamEvent(
                    type=StreamEventType.ERROR,
                    sequence=state.next_sequence(),
                    error=body["error"],
                )
            )
            return

        buffer = state.append(_message_text(chunk))
        draft = try_extract_partial(buffer)
        if draft is None or draft == last_partial:
            continue
        last_partial = draft
        partial_count += 1
        yield format_sse(
            StreamEvent(
                type=StreamEventType.PARTIAL,
                sequence=state.next_sequence(),
                data=_wrap(draft, request_id),
            )
        )

    final_draft = extract_final(state.buffer, profile)
    yield format_sse(
        StreamEvent(
            type=StreamEventType.COMPLETE,
            sequence=state.next_sequence(),
            data=_wrap(final_draft, request_id),
        )
    )
    yield STREAM_DONE
    logger.info(
        "Streaming crop recommendation finished (%s): %d partial update(s), %d chars",
        request_id,
        partial_count,
        len(state.buffer),
    )
