"""
Model Catalogue Routes - OpenRouter models and account credits.

Endpoints:
- GET /api/models : paid models, cheapest first
- GET /api/auth   : credit balance of the configured key
"""
from fastapi import APIRouter, Depends

from symposium.api.dependencies import get_llm
from symposium.llm.client import LLMClient

router = APIRouter(prefix="/api", tags=["Models"])


@router.get("/models", summary="List available LLM models")
def list_models(client: LLMClient = Depends(get_llm)):
    return client.list_models()


@router.get("/auth", summary="Get the OpenRouter credit balance")
def get_credits(client: LLMClient = Depends(get_llm)):
    return client.get_credits()
