"""
API Routes module - Endpoint definitions.

Each file in this module defines routes for a specific domain:
- health.py     : Health check endpoints
- chat.py       : Consultant chat turns
- symposiums.py : Symposium CRUD
- consultants.py: Consultants, templates, API configuration, Airtable helpers
- messages.py   : Messages and visibility
- knowledge.py  : Knowledge base cards and tags
- catalog.py    : LLM model catalogue and credits
"""
from symposium.api.routes.catalog import router as catalog_router
from symposium.api.routes.chat import router as chat_router
from symposium.api.routes.consultants import router as consultants_router
from symposium.api.routes.health import router as health_router
from symposium.api.routes.knowledge import router as knowledge_router
from symposium.api.routes.messages import router as messages_router
from symposium.api.routes.symposiums import router as symposiums_router

__all__ = [
    "catalog_router",
    "chat_router",
    "consultants_router",
    "health_router",
    "knowledge_router",
    "messages_router",
    "symposiums_router",
]
