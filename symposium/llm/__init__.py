"""
LLM module - Language model integration.

This module handles all LLM interactions:
- Prompt construction for each consultant step
- Completion calls through the OpenRouter gateway
- Model catalogue and credit lookups
"""
from symposium.core.exceptions import LLMError
from symposium.llm.client import LLMClient, get_llm_client

__all__ = [
    "LLMClient",
    "LLMError",
    "get_llm_client",
]
