"""
Table Query Service - Structured Airtable queries without an LLM.

Used by the query builder: conditions become a filter formula, the query
is checked against the live table schema, and the records come back with
a markdown rendering.
"""
from typing import Any, Callable, Dict, Iterable, List, Optional

from symposium.consultants.formatting import RecordFormatter
from symposium.core.exceptions import ValidationError
from symposium.core.logging_config import get_logger
from symposium.datasources.airtable import AirtableClient, AirtableQuery, clamp_max_records
from symposium.datasources.formula import FilterCondition, build_filter_formula
from symposium.datasources.validator import QueryValidator
from symposium.services.symposium_service import SymposiumService

logger = get_logger(__name__)


class TableQueryService:
    """
    Airtable helpers for one consultant's stored configuration.

    Example:
        >>> service = TableQueryService()
        >>> service.run_query(4, "Contacts", [FilterCondition("Type", "=", "Doctor")])
        {'formula': '{Type} = "Doctor"', 'records': [...], 'record_count': 3, 'markdown': '...'}
    """

    def __init__(
        self,
        symposium_service: Optional[SymposiumService] = None,
        client_factory: Callable[..., AirtableClient] = AirtableClient,
    ):
        self.symposium_service = symposium_service or SymposiumService()
        self.client_factory = client_factory
        self.formatter = RecordFormatter()

    def _client(self, consultant_id: int) -> AirtableClient:
        api_type, config = self.symposium_service.load_api_config(consultant_id)
        if api_type != "airtable":
            raise ValidationError(
                f"Consultant {consultant_id} is not an Airtable consultant", field="consultant_id"
            )
        return self.client_factory(config.get("api_key", ""), config.get("base_id", ""))

    def list_tables(self, consultant_id: int) -> List[Dict[str, Any]]:
        """Tables of the consultant's base with field names and types."""
        tables = self._client(consultant_id).list_tables()
        return [
            {
                "id": table.get("id"),
                "name": table.get("name"),
                "fields": [
                    {"name": f.get("name"), "type": f.get("type")}
                    for f in table.get("fields") or []
                ],
            }
            for table in tables
        ]

    def test_connection(self, api_key: str, base_id: str, table_name: Optional[str] = None) -> Dict[str, Any]:
        """Check credentials before they are saved."""
        if not api_key or not base_id:
            raise ValidationError("api_key and base_id are required", field="config")
        return self.client_factory(api_key, base_id).test_connection(table_name)

    def run_query(
        self,
        consultant_id: int,
        table_name: str,
        conditions: Iterable[FilterCondition] = (),
        fields: Iterable[str] = (),
        sort: Iterable[Dict[str, str]] = (),
        max_records: Any = None,
    ) -> Dict[str, Any]:
        """
        Build, validate and run a structured query.

        Raises:
            ValidationError: Bad operator or logic keyword, or no table name
            SchemaMismatchError: Query names fields the table lacks
            DataSourceError: Airtable request failed
        """
        if not (table_name or "").strip():
            raise ValidationError("Table name is required", field="table_name")

        formula = build_filter_formula(conditions)
        query = AirtableQuery.from_parameters({
            "filterByFormula": formula,
            "fields": list(fields),
            "sort": list(sort),
            "maxRecords": clamp_max_records(max_records),
        })

        client = self._client(consultant_id)
        schema = client.get_table_schema(table_name)
        QueryValidator(schema).ensure_valid(query)

        records = client.select(table_name, query)["records"]
        logger.info(f"Structured query on {table_name}: formula={formula or '-'}, records={len(records)}")

        return {
            "formula": formula,
            "records": records,
            "record_count": len(records),
            "markdown": self.formatter.format_query_result(records, table_name, query.to_parameters()),
        }
