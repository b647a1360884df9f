"""
Models module - Pydantic schemas for data validation.

This module defines:
- Request models: Input validation for API endpoints
- Response models: Output formatting for API responses
"""
from symposium.models.chat import (
    ChatRequest,
    ChatResponse,
    HealthResponse,
    ErrorResponse,
    MessageOut,
)

__all__ = [
    "ChatRequest",
    "ChatResponse",
    "HealthResponse",
    "ErrorResponse",
    "MessageOut",
]
