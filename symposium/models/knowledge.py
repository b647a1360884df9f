"""
Request models for knowledge base endpoints.
"""
from typing import List, Optional

from pydantic import BaseModel, Field


class CardCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1)
    symposium_id: Optional[int] = None
    tag_ids: List[int] = Field(default_factory=list)


class CardUpdate(BaseModel):
    title: Optional[str] = Field(default=None, max_length=200)
    content: Optional[str] = None


class CardVisibility(BaseModel):
    is_visible: bool


class CardFromMessage(BaseModel):
    message_id: int
    title: Optional[str] = Field(default=None, max_length=200)


class TagCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    color: str = Field(default="#4f46e5")


class CardTagsUpdate(BaseModel):
    tag_ids: List[int] = Field(default_factory=list)
