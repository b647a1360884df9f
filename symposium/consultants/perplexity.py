"""
Web-search-backed consultant.

Interpretation decides whether a live search is needed and writes the
search query. The search runs through Perplexity and the reply cites its
results.
"""
from typing import Any, Callable, Dict, Optional

from symposium.consultants.base import ApiAction, ConsultantProfile, ConsultantStrategy
from symposium.consultants.parsing import extract_json
from symposium.core.exceptions import ConfigurationMissingError, LLMError
from symposium.datasources.perplexity import PerplexityClient
from symposium.llm.client import LLMClient
from symposium.llm.prompts import search_prompts

SEARCH_ACTION = "web_search"
ATTRIBUTION_PREFIX = "Based on my research:\n\n"


class PerplexityConsultant(ConsultantStrategy):
    """Consultant that researches current information on the web."""

    type_tag = "perplexity"

    def __init__(
        self,
        profile: ConsultantProfile,
        llm_client: LLMClient,
        config_store=None,
        client_factory: Callable[..., PerplexityClient] = PerplexityClient,
    ):
        super().__init__(profile, llm_client, config_store)
        self.client_factory = client_factory

    def interpret_request(self, user_message: str, context: str) -> ApiAction:
        prompt = search_prompts.get_interpret_prompt(context, user_message)

        try:
            reply = self.llm.chat(self.profile.model, prompt)
        except LLMError as e:
            self.logger.warning(f"Interpretation failed, answering without search: {e.message}")
            return ApiAction.no_action()

        data = extract_json(reply)
        if data is None or not data.get("needsApiCall"):
            return ApiAction.no_action()

        parameters = data.get("parameters") if isinstance(data.get("parameters"), dict) else {}
        query = str(parameters.get("query") or user_message).strip()
        return ApiAction(needs_api_call=True, action=SEARCH_ACTION, parameters={"query": query})

    def execute_api_call(self, action: ApiAction) -> Dict[str, Any]:
        """
        Run the search.

        Raises:
            ConfigurationMissingError: No API key configured
            DataSourceError: Perplexity request failed
        """
        config = self.load_api_config() or {}
        if not config.get("api_key"):
            raise ConfigurationMissingError(
                "Perplexity API key not configured", consultant_id=self.consultant_id
            )

        client = self.client_factory(config["api_key"])
        result = client.search(action.parameters.get("query", ""))
        self.logger.info(f"Search returned {len(result['text'])} characters")
        return result

    def format_response(
        self,
        user_message: str,
        action: ApiAction,
        action_result: Optional[Dict[str, Any]],
        context: str,
    ) -> str:
        if action_result is None:
            return super().format_response(user_message, action, action_result, context)

        prompt = search_prompts.get_answer_prompt(
            self.profile.system_prompt, context, user_message, action_result["text"]
        )

        try:
            return self.llm.chat(self.profile.model, prompt)
        except LLMError as e:
            self.logger.warning(f"Formatting failed, returning raw search text: {e.message}")
            return ATTRIBUTION_PREFIX + action_result["text"]
