"""
LLM Client for the OpenRouter gateway.

Every consultant completion goes through LLMClient.chat(model, prompt).
The whole conversation is folded into a single system-role message, so
there is no message array or streaming at this layer.

Also exposes the model catalogue and the account's credit balance.
"""
from typing import Any, Dict, List, Optional

import requests

from symposium.core.config import get_settings
from symposium.core.exceptions import LLMError
from symposium.core.logging_config import get_logger

logger = get_logger(__name__)


def _error_message(response: requests.Response) -> str:
    """Pull the remote error message out of a failed response."""
    try:
        payload = response.json()
    except ValueError:
        return "Unknown error"
    error = payload.get("error") if isinstance(payload, dict) else None
    if isinstance(error, dict):
        return error.get("message") or "Unknown error"
    return str(error) if error else "Unknown error"


class LLMClient:
    """
    Client for the OpenRouter chat-completions API.

    Example:
        >>> client = LLMClient()
        >>> client.chat("openai/gpt-4o", "You are a poet. Write a haiku.")
        'Autumn moonlight...'
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        timeout: Optional[int] = None,
    ):
        settings = get_settings()
        self.api_key = api_key or settings.openrouter_api_key
        self.base_url = (base_url or settings.openrouter_base_url).rstrip("/")
        self.temperature = settings.llm_temperature if temperature is None else temperature
        self.max_tokens = max_tokens or settings.llm_max_tokens
        self.timeout = timeout or settings.http_timeout_seconds
        self.app_title = settings.app_name

        logger.info(f"LLM client initialized for {self.base_url}")

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "X-Title": self.app_title,
        }

    def chat(self, model: str, prompt: str) -> str:
        """
        Run one completion.

        Args:
            model: OpenRouter model identifier, e.g. "anthropic/claude-3.5-sonnet"
            prompt: Complete prompt, sent as a single system message

        Returns:
            Generated text

        Raises:
            LLMError: On transport failure, non-success status or a payload
                without choices[0].message
        """
        body = {
            "model": model,
            "messages": [{"role": "system", "content": prompt}],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "stream": False,
        }

        logger.debug(f"LLM request: model={model}, prompt_length={len(prompt)}")

        try:
            response = requests.post(
                f"{self.base_url}/chat/completions",
                headers=self._headers(),
                json=body,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"LLM transport error for {model}: {e}")
            raise LLMError(f"Failed to get response from {model}: {e}") from e

        if not response.ok:
            message = _error_message(response)
            logger.error(f"OpenRouter error {response.status_code} for {model}: {message}")
            raise LLMError(
                f"Failed to get response from {model}: OpenRouter API error: "
                f"{response.status_code} - {message}"
            )

        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            logger.error(f"Malformed OpenRouter payload for {model}: {e}")
            raise LLMError(f"Invalid response format from OpenRouter for {model}") from e

        if content is None:
            raise LLMError(f"Invalid response format from OpenRouter for {model}")

        logger.debug(f"LLM response: model={model}, length={len(content)}")
        return content

    def list_models(self) -> List[Dict[str, Any]]:
        """
        Get the paid model catalogue, cheapest first.

        Raises:
            LLMError: If the catalogue cannot be fetched
        """
        try:
            response = requests.get(f"{self.base_url}/models", headers=self._headers(), timeout=self.timeout)
            response.raise_for_status()
            entries = response.json().get("data", [])
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Error fetching OpenRouter models: {e}")
            raise LLMError("Failed to fetch available models") from e

        models = []
        for entry in entries:
            pricing = entry.get("pricing")
            if "free" in entry.get("id", "") or not pricing:
                continue
            models.append({
                "id": entry["id"],
                "name": entry.get("name") or entry["id"],
                "description": entry.get("description") or "",
                "context_length": entry.get("context_length") or 0,
                "pricing": {
                    "prompt": float(pricing.get("prompt") or 0),
                    "completion": float(pricing.get("completion") or 0),
                },
            })

        models.sort(key=lambda m: m["pricing"]["prompt"] + m["pricing"]["completion"])
        return models

    def get_credits(self) -> Dict[str, Any]:
        """
        Get the account's credit balance.

        Raises:
            LLMError: If the balance cannot be fetched
        """
        try:
            response = requests.get(f"{self.base_url}/credits", headers=self._headers(), timeout=self.timeout)
        except requests.RequestException as e:
            raise LLMError(f"Failed to get credit information: {e}") from e

        if not response.ok:
            raise LLMError(
                f"Failed to get credit information: OpenRouter API error: "
                f"{response.status_code} - {_error_message(response)}"
            )

        payload = response.json()
        data = payload.get("data", payload)
        total = data.get("total_credits") or 0
        usage = data.get("total_usage") or 0
        return {
            "total_credits": total,
            "total_usage": usage,
            "remaining_credits": total - usage,
        }


# Module-level instance (singleton pattern)
_llm_client: Optional[LLMClient] = None


def get_llm_client() -> LLMClient:
    """Get or create the shared LLM client."""
    global _llm_client
    if _llm_client is None:
        _llm_client = LLMClient()
    return _llm_client
