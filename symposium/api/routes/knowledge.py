"""
Knowledge Base Routes - Cards and tags.

Endpoints:
- GET/POST        /api/knowledge-cards
- PUT/DELETE      /api/knowledge-cards/{id}
- POST            /api/knowledge-cards/{id}/visibility
- POST            /api/knowledge-cards/from-message
- PUT             /api/knowledge-cards/{id}/tags
- GET/POST        /api/tags
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from symposium.api.dependencies import get_knowledge_service
from symposium.models.chat import StatusResponse
from symposium.models.knowledge import (
    CardCreate,
    CardFromMessage,
    CardTagsUpdate,
    CardUpdate,
    CardVisibility,
    TagCreate,
)
from symposium.services.knowledge_service import KnowledgeService

router = APIRouter(prefix="/api", tags=["Knowledge Base"])


@router.get("/knowledge-cards", summary="List knowledge cards")
def list_cards(
    symposium_id: Optional[int] = Query(default=None, description="Cards for this symposium plus global cards"),
    visible_only: bool = Query(default=False),
    service: KnowledgeService = Depends(get_knowledge_service),
):
    return service.list_cards(symposium_id, visible_only)


@router.post("/knowledge-cards", status_code=201, summary="Create a knowledge card")
def create_card(body: CardCreate, service: KnowledgeService = Depends(get_knowledge_service)):
    return service.create_card(
        title=body.title,
        content=body.content,
        symposium_id=body.symposium_id,
        tag_ids=body.tag_ids,
    )


# Declared before /{card_id} routes so "from-message" is not parsed as an ID
@router.post("/knowledge-cards/from-message", status_code=201, summary="Save a message as a card")
def card_from_message(body: CardFromMessage, service: KnowledgeService = Depends(get_knowledge_service)):
    return service.card_from_message(body.message_id, body.title)


@router.put("/knowledge-cards/{card_id}", summary="Update a knowledge card")
def update_card(card_id: int, body: CardUpdate, service: KnowledgeService = Depends(get_knowledge_service)):
    return service.update_card(card_id, body.title, body.content)


@router.delete("/knowledge-cards/{card_id}", response_model=StatusResponse, summary="Delete a knowledge card")
def delete_card(card_id: int, service: KnowledgeService = Depends(get_knowledge_service)):
    service.delete_card(card_id)
    return StatusResponse(detail={"card_id": card_id})


@router.post("/knowledge-cards/{card_id}/visibility", summary="Show or hide a card from consultants")
def set_card_visibility(
    card_id: int,
    body: CardVisibility,
    service: KnowledgeService = Depends(get_knowledge_service),
):
    return service.set_card_visibility(card_id, body.is_visible)


@router.put("/knowledge-cards/{card_id}/tags", summary="Replace a card's tags")
def set_card_tags(card_id: int, body: CardTagsUpdate, service: KnowledgeService = Depends(get_knowledge_service)):
    return service.set_card_tags(card_id, body.tag_ids)


@router.get("/tags", summary="List tags")
def list_tags(service: KnowledgeService = Depends(get_knowledge_service)):
    return service.list_tags()


@router.post("/tags", status_code=201, summary="Create a tag")
def create_tag(body: TagCreate, service: KnowledgeService = Depends(get_knowledge_service)):
    return service.create_tag(body.name, body.color)
