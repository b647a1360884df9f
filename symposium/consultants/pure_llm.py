"""
Plain conversational consultant.

Never calls an external service: interpretation is free and the reply is
a single LLM completion.
"""
from typing import Any, Dict, Optional

from symposium.consultants.base import ApiAction, ConsultantStrategy


class PureLLMConsultant(ConsultantStrategy):
    """Consultant backed only by its language model."""

    type_tag = "pure_llm"

    def interpret_request(self, user_message: str, context: str) -> ApiAction:
        return ApiAction.no_action()

    def execute_api_call(self, action: ApiAction) -> Optional[Dict[str, Any]]:
        return None
