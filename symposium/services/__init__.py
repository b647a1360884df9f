"""
Services module - Business logic and orchestration.

Services contain the core application logic:
- No HTTP concerns (those belong in api/)
- Orchestrate between consultants, data sources and the database
"""
from symposium.services.chat_service import ChatService, ChatTurnResult
from symposium.services.knowledge_service import KnowledgeService
from symposium.services.query_service import TableQueryService
from symposium.services.symposium_service import SymposiumService

__all__ = [
    "ChatService",
    "ChatTurnResult",
    "KnowledgeService",
    "TableQueryService",
    "SymposiumService",
]
