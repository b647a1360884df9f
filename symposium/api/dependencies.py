"""
Service singletons for route handlers.

Routes receive services through FastAPI's Depends, so tests can swap any
of them with app.dependency_overrides.
"""
from typing import Optional

from symposium.llm.client import LLMClient, get_llm_client
from symposium.services.chat_service import ChatService
from symposium.services.knowledge_service import KnowledgeService
from symposium.services.query_service import TableQueryService
from symposium.services.symposium_service import SymposiumService

_symposium_service: Optional[SymposiumService] = None
_chat_service: Optional[ChatService] = None
_knowledge_service: Optional[KnowledgeService] = None
_query_service: Optional[TableQueryService] = None


def get_symposium_service() -> SymposiumService:
    """Get or create the symposium service instance."""
    global _symposium_service
    if _symposium_service is None:
        _symposium_service = SymposiumService()
    return _symposium_service


def get_chat_service() -> ChatService:
    """Get or create the chat service instance."""
    global _chat_service
    if _chat_service is None:
        _chat_service = ChatService()
    return _chat_service


def get_knowledge_service() -> KnowledgeService:
    """Get or create the knowledge service instance."""
    global _knowledge_service
    if _knowledge_service is None:
        _knowledge_service = KnowledgeService()
    return _knowledge_service


def get_query_service() -> TableQueryService:
    """Get or create the table query service instance."""
    global _query_service
    if _query_service is None:
        _query_service = TableQueryService(get_symposium_service())
    return _query_service


def get_llm() -> LLMClient:
    return get_llm_client()
