"""
Airtable Client - Read-only access to an Airtable base.

Wraps the Airtable REST API: list tables, fetch one table's schema and
select records by formula, fields, sort and record cap. Every failure is
raised as DataSourceError with the remote message attached.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import requests

from symposium.core.config import get_settings
from symposium.core.exceptions import DataSourceError
from symposium.core.logging_config import get_logger

logger = get_logger(__name__)

MAX_RECORDS = 20


def clamp_max_records(value: Any, default: int = MAX_RECORDS) -> int:
    """
    Clamp a record cap into [1, MAX_RECORDS].

    Non-numeric, non-finite or missing values fall back to default.
    """
    try:
        number = int(float(value))
    except (TypeError, ValueError, OverflowError):
        number = default
    return max(1, min(MAX_RECORDS, number))


def _as_list(value: Any) -> List[Any]:
    # A lone string or object stands for a one-item list
    if isinstance(value, (str, dict)):
        return [value]
    if isinstance(value, (list, tuple)):
        return list(value)
    return []


def _normalize_sort(sort: Any) -> List[Dict[str, str]]:
    specs = []
    for entry in _as_list(sort):
        if isinstance(entry, str):
            entry = {"field": entry}
        if not isinstance(entry, dict) or not entry.get("field"):
            continue
        direction = str(entry.get("direction") or "asc").lower()
        specs.append({
            "field": str(entry["field"]),
            "direction": direction if direction in ("asc", "desc") else "asc",
        })
    return specs


@dataclass
class AirtableQuery:
    """
    Parameters of one select call.

    to_parameters()/from_parameters() use Airtable's own key names, which
    is also the shape the interpretation step asks the LLM for.
    """
    filter_by_formula: str = ""
    fields: List[str] = field(default_factory=list)
    max_records: int = MAX_RECORDS
    sort: List[Dict[str, str]] = field(default_factory=list)
    table_name: Optional[str] = None

    @classmethod
    def from_parameters(cls, parameters: Optional[Dict[str, Any]]) -> "AirtableQuery":
        parameters = parameters or {}
        table_name = parameters.get("table_name")
        return cls(
            filter_by_formula=str(parameters.get("filterByFormula") or ""),
            fields=[f for f in _as_list(parameters.get("fields")) if isinstance(f, str) and f],
            max_records=clamp_max_records(parameters.get("maxRecords")),
            sort=_normalize_sort(parameters.get("sort")),
            table_name=table_name if isinstance(table_name, str) and table_name else None,
        )

    def to_parameters(self) -> Dict[str, Any]:
        parameters = {
            "filterByFormula": self.filter_by_formula,
            "fields": list(self.fields),
            "maxRecords": self.max_records,
            "sort": [dict(s) for s in self.sort],
        }
        if self.table_name:
            parameters["table_name"] = self.table_name
        return parameters

    def to_query_params(self) -> List[Tuple[str, str]]:
        """Encode as Airtable list-records query parameters."""
        params: List[Tuple[str, str]] = []
        if self.filter_by_formula:
            params.append(("filterByFormula", self.filter_by_formula))
        for name in self.fields:
            params.append(("fields[]", name))
        params.append(("maxRecords", str(clamp_max_records(self.max_records))))
        for index, order in enumerate(self.sort):
            params.append((f"sort[{index}][field]", order["field"]))
            params.append((f"sort[{index}][direction]", order.get("direction", "asc")))
        return params


class AirtableClient:
    """
    Minimal Airtable REST client.

    Example:
        >>> client = AirtableClient(api_key="pat...", base_id="app123")
        >>> schema = client.get_table_schema("Contacts")
        >>> client.select("Contacts", AirtableQuery(filter_by_formula='{Type} = "Doctor"'))
        {'records': [...], 'offset': None}
    """

    def __init__(self, api_key: str, base_id: str, api_url: Optional[str] = None, timeout: Optional[int] = None):
        settings = get_settings()
        self.api_key = api_key
        self.base_id = base_id
        self.api_url = (api_url or settings.airtable_api_url).rstrip("/")
        self.timeout = timeout or settings.http_timeout_seconds
        self.base_url = f"{self.api_url}/{base_id}"

    def _request(self, url: str, params: Optional[List[Tuple[str, str]]] = None) -> Dict[str, Any]:
        try:
            response = requests.get(
                url,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                params=params,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Airtable transport error: {e}")
            raise DataSourceError(f"Airtable request failed: {e}", source="airtable") from e

        if not response.ok:
            try:
                error = response.json().get("error")
            except ValueError:
                error = None
            message = error.get("message") if isinstance(error, dict) else (error or "Unknown error")
            logger.error(f"Airtable API error {response.status_code}: {message}")
            raise DataSourceError(
                f"Airtable API error: {response.status_code} - {message}", source="airtable"
            )

        try:
            return response.json()
        except ValueError as e:
            raise DataSourceError("Invalid response format from Airtable", source="airtable") from e

    def list_tables(self) -> List[Dict[str, Any]]:
        """List the base's tables with their fields."""
        data = self._request(f"{self.api_url}/meta/bases/{self.base_id}/tables")
        return data.get("tables") or []

    def get_table_schema(self, table_name: str) -> Dict[str, Any]:
        """
        Get {name, fields: [{name, type, options}]} for one table.

        Raises:
            DataSourceError: If the table is not in the base
        """
        for table in self.list_tables():
            if table.get("name") == table_name:
                return {
                    "name": table["name"],
                    "fields": [
                        {
                            "name": f.get("name"),
                            "type": f.get("type"),
                            "options": f.get("options") or {},
                        }
                        for f in table.get("fields") or []
                    ],
                }
        raise DataSourceError(f'Table "{table_name}" not found', source="airtable")

    def select(self, table_name: str, query: Optional[AirtableQuery] = None) -> Dict[str, Any]:
        """
        Select records from a table.

        Returns:
            {"records": [...], "offset": str | None}
        """
        query = query or AirtableQuery()
        url = f"{self.base_url}/{requests.utils.quote(table_name, safe='')}"
        logger.info(
            f"Airtable select: table={table_name}, formula={query.filter_by_formula or '-'}, "
            f"max_records={query.max_records}"
        )
        data = self._request(url, params=query.to_query_params())
        records = data.get("records") or []
        logger.info(f"Airtable returned {len(records)} records")
        return {"records": records, "offset": data.get("offset")}

    def test_connection(self, table_name: Optional[str] = None) -> Dict[str, Any]:
        """Check credentials by listing tables or reading one record."""
        try:
            if table_name:
                self.select(table_name, AirtableQuery(max_records=1))
            else:
                self.list_tables()
            return {"success": True}
        except DataSourceError as e:
            return {"success": False, "error": e.message}
