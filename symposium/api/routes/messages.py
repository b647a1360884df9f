"""
Message Routes - Stored messages and per-consultant visibility.

Endpoints:
- GET    /api/messages?symposium_id=
- POST   /api/messages
- PUT    /api/messages/{id}
- DELETE /api/messages/{id}
- POST   /api/message-visibility
- POST   /api/clear-messages
"""
from fastapi import APIRouter, Depends, Query

from symposium.api.dependencies import get_chat_service
from symposium.models.chat import (
    ClearMessagesRequest,
    MessageCreate,
    MessageOut,
    MessageUpdate,
    StatusResponse,
    VisibilityRequest,
)
from symposium.services.chat_service import ChatService

router = APIRouter(prefix="/api", tags=["Messages"])


@router.get("/messages", response_model=list[MessageOut], summary="List a symposium's messages")
def list_messages(
    symposium_id: int = Query(..., description="Symposium ID"),
    service: ChatService = Depends(get_chat_service),
):
    return service.list_messages(symposium_id)


@router.post("/messages", response_model=MessageOut, status_code=201, summary="Store a message")
def create_message(body: MessageCreate, service: ChatService = Depends(get_chat_service)):
    return service.add_message(body.symposium_id, body.content, body.is_user, body.consultant_id)


@router.put("/messages/{message_id}", response_model=MessageOut, summary="Edit a message")
def edit_message(message_id: int, body: MessageUpdate, service: ChatService = Depends(get_chat_service)):
    return service.edit_message(message_id, body.content)


@router.delete("/messages/{message_id}", response_model=StatusResponse, summary="Delete a message")
def delete_message(message_id: int, service: ChatService = Depends(get_chat_service)):
    service.delete_message(message_id)
    return StatusResponse(detail={"message_id": message_id})


@router.post("/message-visibility", summary="Hide or show a message for one consultant")
def set_visibility(body: VisibilityRequest, service: ChatService = Depends(get_chat_service)):
    return service.set_visibility(body.message_id, body.consultant_id, body.is_hidden)


@router.post("/clear-messages", response_model=StatusResponse, summary="Delete all messages of a symposium")
def clear_messages(body: ClearMessagesRequest, service: ChatService = Depends(get_chat_service)):
    deleted = service.clear_messages(body.symposium_id)
    return StatusResponse(detail={"symposium_id": body.symposium_id, "deleted": deleted})
