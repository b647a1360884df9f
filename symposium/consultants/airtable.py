"""
Airtable-backed consultant.

Interpretation asks the LLM for Airtable query parameters. Execution
validates them against the live table schema before querying, and the
reply summarizes the returned records.
"""
from typing import Any, Callable, Dict, Optional

from symposium.consultants.base import ApiAction, ConsultantProfile, ConsultantStrategy
from symposium.consultants.formatting import RecordFormatter
from symposium.consultants.parsing import extract_json, is_counting_query
from symposium.core.exceptions import ConfigurationMissingError, DataSourceError, LLMError
from symposium.datasources.airtable import MAX_RECORDS, AirtableClient, AirtableQuery
from symposium.datasources.validator import QueryValidator
from symposium.llm.client import LLMClient
from symposium.llm.prompts import airtable_prompts

QUERY_ACTION = "query_airtable"


class AirtableConsultant(ConsultantStrategy):
    """
    Consultant that answers from an Airtable table.

    The API configuration holds base_id, api_key and optionally table_name.
    """

    type_tag = "airtable"

    def __init__(
        self,
        profile: ConsultantProfile,
        llm_client: LLMClient,
        config_store=None,
        client_factory: Callable[..., AirtableClient] = AirtableClient,
    ):
        super().__init__(profile, llm_client, config_store)
        self.client_factory = client_factory
        self.table_schema: Optional[Dict[str, Any]] = None
        self.formatter = RecordFormatter()

    def _client(self) -> AirtableClient:
        config = self.load_api_config()
        if not config:
            raise ConfigurationMissingError(
                "Airtable configuration not found", consultant_id=self.consultant_id
            )
        if not config.get("api_key") or not config.get("base_id"):
            raise ConfigurationMissingError(
                "Airtable configuration requires base_id and api_key",
                consultant_id=self.consultant_id,
            )
        return self.client_factory(config["api_key"], config["base_id"])

    def _known_schema(self) -> Optional[Dict[str, Any]]:
        """Schema of the configured table, fetched once; None when unavailable."""
        if self.table_schema is not None:
            return self.table_schema

        config = self.load_api_config() or {}
        table_name = config.get("table_name")
        if not table_name:
            return None

        try:
            self.table_schema = self._client().get_table_schema(table_name)
        except (DataSourceError, ConfigurationMissingError) as e:
            self.logger.warning(f"Schema unavailable for interpretation: {e.message}")
        return self.table_schema

    def interpret_request(self, user_message: str, context: str) -> ApiAction:
        counting = is_counting_query(user_message)
        prompt = airtable_prompts.get_interpret_prompt(
            self.profile.system_prompt, context, user_message, self._known_schema(), counting
        )

        try:
            reply = self.llm.chat(self.profile.model, prompt)
        except LLMError as e:
            self.logger.warning(f"Interpretation failed, answering without data: {e.message}")
            return ApiAction.no_action()

        data = extract_json(reply)
        if data is None:
            self.logger.warning("No JSON object in interpretation reply, answering without data")
            return ApiAction.no_action()

        if not data.get("needsApiCall", True):
            return ApiAction.no_action()

        parameters = data.get("parameters") if isinstance(data.get("parameters"), dict) else data
        try:
            query = AirtableQuery.from_parameters(parameters)
        except (TypeError, ValueError) as e:
            self.logger.warning(f"Unusable query parameters in interpretation reply: {e}")
            return ApiAction.no_action()
        if counting:
            query.max_records = MAX_RECORDS

        self.logger.info(
            f"Planned Airtable query: formula={query.filter_by_formula or '-'}, "
            f"max_records={query.max_records}, counting={counting}"
        )
        return ApiAction(needs_api_call=True, action=QUERY_ACTION, parameters=query.to_parameters())

    def execute_api_call(self, action: ApiAction) -> Dict[str, Any]:
        """
        Query the table.

        Raises:
            ConfigurationMissingError: No configuration or no table name
            SchemaMismatchError: The query names fields the table lacks
            DataSourceError: Airtable request failed
        """
        client = self._client()
        query = AirtableQuery.from_parameters(action.parameters)
        table_name = query.table_name or (self.api_config or {}).get("table_name")
        if not table_name:
            raise ConfigurationMissingError("Table name is required", consultant_id=self.consultant_id)

        schema = client.get_table_schema(table_name)
        self.table_schema = schema
        QueryValidator(schema).ensure_valid(query)

        result = client.select(table_name, query)
        records = result["records"]
        self.logger.info(f"Airtable query on {table_name} returned {len(records)} records")
        return {
            "records": records,
            "record_count": len(records),
            "table_schema": schema,
        }

    def format_response(
        self,
        user_message: str,
        action: ApiAction,
        action_result: Optional[Dict[str, Any]],
        context: str,
    ) -> str:
        if action_result is None:
            return super().format_response(user_message, action, action_result, context)

        records = action_result.get("records") or []
        prompt = airtable_prompts.get_answer_prompt(
            self.profile.system_prompt,
            context,
            user_message,
            records,
            action_result.get("table_schema"),
        )

        try:
            return self.llm.chat(self.profile.model, prompt)
        except LLMError as e:
            self.logger.warning(f"Formatting failed, returning raw records: {e.message}")
            return self.formatter.format_as_text(records)

