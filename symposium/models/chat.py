"""
Request and Response models for chat and message endpoints.

These Pydantic models define the contract between client and server.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from symposium.core.validators import MAX_MESSAGE_LENGTH


class ChatRequest(BaseModel):
    """
    Request model for the /api/chat endpoint.

    Attributes:
        symposium_id: Symposium the conversation belongs to
        consultant_id: Consultant that should answer
        message: The user's message
    """
    symposium_id: int = Field(..., description="Symposium ID")
    consultant_id: int = Field(..., description="Consultant that answers this turn")
    message: str = Field(
        ...,
        min_length=1,
        max_length=MAX_MESSAGE_LENGTH,
        description="The user's message",
        examples=["How many doctors are in the Contacts table?"]
    )


class VisibilityEntry(BaseModel):
    consultant_id: int
    is_hidden: bool


class MessageOut(BaseModel):
    """A stored message."""
    id: int
    symposium_id: int
    consultant_id: Optional[int] = None
    consultant_name: Optional[str] = None
    content: str
    is_user: bool
    timestamp: Optional[str] = None
    updated_at: Optional[str] = None
    visibility: List[VisibilityEntry] = Field(default_factory=list)


class ChatResponse(BaseModel):
    """Response model for the /api/chat endpoint: both stored messages."""
    user_message: MessageOut
    consultant_message: MessageOut


class MessageCreate(BaseModel):
    symposium_id: int
    content: str = Field(..., min_length=1, max_length=MAX_MESSAGE_LENGTH)
    is_user: bool = True
    consultant_id: Optional[int] = None


class MessageUpdate(BaseModel):
    content: str = Field(..., min_length=1, max_length=MAX_MESSAGE_LENGTH)


class VisibilityRequest(BaseModel):
    """Hide or show one message for one consultant."""
    message_id: int
    consultant_id: int
    is_hidden: bool


class ClearMessagesRequest(BaseModel):
    symposium_id: int


class HealthResponse(BaseModel):
    """Response model for the /health endpoint."""
    status: str = Field(default="healthy")
    version: str
    database: Optional[str] = None
    timestamp: datetime = Field(default_factory=datetime.utcnow)


class ErrorResponse(BaseModel):
    """Standard error response model."""
    error: str
    message: str
    details: Optional[str] = None
    timestamp: datetime = Field(default_factory=datetime.utcnow)


class StatusResponse(BaseModel):
    """Generic acknowledgement for deletes and bulk operations."""
    success: bool = True
    detail: Optional[Dict[str, Any]] = None
