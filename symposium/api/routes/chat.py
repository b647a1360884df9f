"""
Chat Routes - Run one consultant turn.

Errors raised by the consultant pipeline are rendered by the application's
exception handlers as a single error body. The user message is already
stored at that point; no consultant reply is written.
"""
from fastapi import APIRouter, Depends

from symposium.core.logging_config import get_logger
from symposium.api.dependencies import get_chat_service
from symposium.models.chat import ChatRequest, ChatResponse, ErrorResponse
from symposium.services.chat_service import ChatService

logger = get_logger(__name__)

router = APIRouter(
    prefix="/api/chat",
    tags=["Chat"],
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request or missing API configuration"},
        404: {"model": ErrorResponse, "description": "Symposium or consultant not found"},
        502: {"model": ErrorResponse, "description": "External data source failed"},
        503: {"model": ErrorResponse, "description": "LLM gateway unavailable"},
    }
)


@router.post(
    "",
    response_model=ChatResponse,
    summary="Send a message to a consultant",
    description="""
    Stores the user's message, runs the consultant's pipeline
    (interpret, optional external call, format) and stores the reply.

    The consultant sees the symposium's messages that are not hidden from it
    and every visible knowledge card.
    """
)
def send_message(request: ChatRequest, service: ChatService = Depends(get_chat_service)) -> ChatResponse:
    logger.info(
        f"Chat request: symposium={request.symposium_id}, consultant={request.consultant_id}, "
        f"message={request.message[:50]}..."
    )

    result = service.handle_turn(request.symposium_id, request.consultant_id, request.message)

    return ChatResponse(
        user_message=result.user_message,
        consultant_message=result.consultant_message,
    )
