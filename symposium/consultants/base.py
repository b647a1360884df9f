"""
Consultant Strategy - Interface shared by every consultant type.

A strategy turns one user message into a reply in three steps:

1. interpret_request: decide whether external data is needed
2. execute_api_call:  fetch it (only when step 1 asked for it)
3. format_response:   write the reply

interpret_request and format_response degrade on upstream failures and
do not raise. execute_api_call raises on any failure.
"""
import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from symposium.core.exceptions import LLMError
from symposium.core.logging_config import LoggerMixin
from symposium.llm.client import LLMClient
from symposium.llm.prompts import get_answer_prompt

APOLOGY_MESSAGE = "I apologize, but I encountered an error while processing your request."


@dataclass
class ApiAction:
    """Outcome of interpret_request."""
    needs_api_call: bool = False
    action: Optional[str] = None
    parameters: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def no_action(cls) -> "ApiAction":
        return cls(needs_api_call=False)

    def to_dict(self) -> Dict[str, Any]:
        if not self.needs_api_call:
            return {"needs_api_call": False}
        return {
            "needs_api_call": True,
            "action": self.action,
            "parameters": self.parameters,
        }


@dataclass(frozen=True)
class ConsultantProfile:
    """The stored consultant fields a strategy needs, detached from the ORM session."""
    id: int
    name: str
    model: str
    system_prompt: str
    template_id: Optional[int] = None
    consultant_type: Optional[str] = None

    @classmethod
    def from_model(cls, consultant) -> "ConsultantProfile":
        return cls(
            id=consultant.id,
            name=consultant.name,
            model=consultant.model,
            system_prompt=consultant.system_prompt,
            template_id=consultant.template_id,
            consultant_type=consultant.consultant_type,
        )


class ConsultantStrategy(ABC, LoggerMixin):
    """
    Base class for consultant types.

    The API configuration is loaded lazily on the first load_api_config()
    call and kept on the instance. Instances are created per chat turn, so
    the cached configuration never outlives one request.
    """

    type_tag = "pure_llm"

    def __init__(self, profile: ConsultantProfile, llm_client: LLMClient, config_store=None):
        self.profile = profile
        self.llm = llm_client
        self.config_store = config_store
        self.api_config: Optional[Dict[str, Any]] = None
        self.api_type: Optional[str] = None
        self._config_loaded = False

    @property
    def consultant_id(self) -> int:
        return self.profile.id

    @property
    def adapter_type(self) -> str:
        """Label written to the audit log."""
        return self.api_type or self.type_tag

    def load_api_config(self) -> Optional[Dict[str, Any]]:
        """Load and cache this consultant's active API configuration."""
        if self._config_loaded:
            return self.api_config

        if self.config_store is not None:
            loaded = self.config_store.load(self.profile.id)
            if loaded is not None:
                self.api_type, self.api_config = loaded

        self._config_loaded = True
        return self.api_config

    @abstractmethod
    def interpret_request(self, user_message: str, context: str) -> ApiAction:
        """Decide whether the message needs an external call."""

    @abstractmethod
    def execute_api_call(self, action: ApiAction) -> Optional[Dict[str, Any]]:
        """Run the external call planned by interpret_request."""

    def format_response(
        self,
        user_message: str,
        action: ApiAction,
        action_result: Optional[Dict[str, Any]],
        context: str,
    ) -> str:
        """
        Write the reply with one LLM call.

        Returns a fixed apology if the LLM call fails.
        """
        api_response = json.dumps(action_result, indent=2, default=str) if action_result else None
        prompt = get_answer_prompt(self.profile.system_prompt, context, user_message, api_response)

        try:
            return self.llm.chat(self.profile.model, prompt)
        except LLMError as e:
            self.logger.warning(f"Formatting failed for consultant={self.profile.id}: {e.message}")
            return APOLOGY_MESSAGE
