"""
Perplexity Client - Web search through an online completion model.

search(query) sends the query as the user turn of a chat completion with
fixed low-temperature sampling and returns the answer text together with
the model name and token usage reported by the API.
"""
from typing import Any, Dict, Optional

import requests

from symposium.core.config import get_settings
from symposium.core.exceptions import DataSourceError
from symposium.core.logging_config import get_logger
from symposium.llm.prompts.search_prompts import SEARCH_SYSTEM_PROMPT

logger = get_logger(__name__)

SEARCH_TEMPERATURE = 0.2
SEARCH_MAX_TOKENS = 4000


class PerplexityClient:
    """
    Client for the Perplexity chat-completions endpoint.

    Example:
        >>> client = PerplexityClient(api_key="pplx-...")
        >>> result = client.search("latest news about fusion energy")
        >>> result["text"][:40]
        'Several private fusion companies report...'
    """

    def __init__(
        self,
        api_key: str,
        api_url: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[int] = None,
    ):
        settings = get_settings()
        self.api_key = api_key
        self.api_url = (api_url or settings.perplexity_api_url).rstrip("/")
        self.model = model or settings.perplexity_model
        self.timeout = timeout or settings.http_timeout_seconds

    def search(self, query: str) -> Dict[str, Any]:
        """
        Run one web search.

        Returns:
            {"text": str, "source_model": str | None, "usage": dict | None}

        Raises:
            DataSourceError: On transport failure, non-success status or a
                payload without choices[0].message
        """
        body = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SEARCH_SYSTEM_PROMPT},
                {"role": "user", "content": query},
            ],
            "temperature": SEARCH_TEMPERATURE,
            "max_tokens": SEARCH_MAX_TOKENS,
        }

        logger.info(f"Perplexity search: model={self.model}, query={query[:100]}")

        try:
            response = requests.post(
                f"{self.api_url}/chat/completions",
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                json=body,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Perplexity transport error: {e}")
            raise DataSourceError(f"Perplexity request failed: {e}", source="perplexity") from e

        if not response.ok:
            try:
                error = response.json().get("error")
            except ValueError:
                error = None
            message = error.get("message") if isinstance(error, dict) else (error or "Unknown error")
            logger.error(f"Perplexity API error {response.status_code}: {message}")
            raise DataSourceError(
                f"Perplexity API error: {response.status_code} - {message}", source="perplexity"
            )

        try:
            data = response.json()
            text = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise DataSourceError("Invalid response format from Perplexity", source="perplexity") from e

        return {
            "text": text,
            "source_model": data.get("model"),
            "usage": data.get("usage"),
        }
