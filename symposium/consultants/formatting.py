"""
Record Formatter - Render Airtable records for chat display.

This module provides:
- Markdown tables with a query summary (query builder results)
- A plain key/value dump (fallback when the LLM cannot summarize)

Airtable records look like {"id": "rec...", "fields": {"Name": "Ann"}}.
Columns are the union of field names over all records, in first-seen order.
"""
import math
from typing import Any, Dict, List, Optional

from symposium.core.logging_config import get_logger

logger = get_logger(__name__)


class RecordFormatter:
    """
    Formats Airtable records into markdown.

    Example:
        >>> formatter = RecordFormatter()
        >>> print(formatter.format_as_table([{"fields": {"Name": "Ann", "Active": True}}]))
        | Name | Active |
        |---|---|
        | Ann | ✓ |
    """

    def __init__(self, max_rows: int = 20, max_col_width: int = 100):
        """
        Initialize the formatter.

        Args:
            max_rows: Maximum rows to include in a table
            max_col_width: Maximum cell length before truncation
        """
        self.max_rows = max_rows
        self.max_col_width = max_col_width

    @staticmethod
    def field_names(records: List[Dict[str, Any]]) -> List[str]:
        names: List[str] = []
        for record in records:
            for name in (record.get("fields") or {}):
                if name not in names:
                    names.append(name)
        return names

    def format_as_table(self, records: List[Dict[str, Any]]) -> str:
        """
        Format records as a markdown table.

        Returns:
            Markdown table string
        """
        if not records:
            return "_No records found_"

        headers = self.field_names(records)
        if not headers:
            return "_No fields in records_"

        header_row = "| " + " | ".join(self._escape(h) for h in headers) + " |"
        separator = "|" + "|".join("---" for _ in headers) + "|"

        rows = []
        for record in records[:self.max_rows]:
            fields = record.get("fields") or {}
            rows.append("| " + " | ".join(self._format_value(fields.get(h)) for h in headers) + " |")

        table = "\n".join([header_row, separator] + rows)

        if len(records) > self.max_rows:
            table += f"\n\n_Showing {self.max_rows} of {len(records)} records_"

        return table

    def format_query_result(
        self,
        records: List[Dict[str, Any]],
        table_name: str,
        parameters: Optional[Dict[str, Any]] = None,
    ) -> str:
        """
        Format a query result as a heading, a table and the query details.

        Args:
            records: Airtable records
            table_name: Table that was queried
            parameters: Query parameters (filterByFormula, fields, sort, maxRecords)
        """
        parameters = parameters or {}
        count = len(records)

        if count == 0:
            heading = "## Query Results: No records found"
            body = ""
        else:
            plural = "" if count == 1 else "s"
            heading = f'## Query Results: {count} record{plural} from "{table_name}" table'
            body = self.format_as_table(records) + "\n\n"

        details = ["**Query Details:**", f"- **Table:** {table_name}"]

        formula = parameters.get("filterByFormula")
        details.append(f"- **Filters:** `{formula}`" if formula else "- **Filters:** None")

        fields = parameters.get("fields") or []
        details.append(f"- **Fields:** {', '.join(fields)}" if fields else "- **Fields:** All fields")

        sort = parameters.get("sort") or []
        if sort:
            details.append(
                "- **Sort:** " + ", ".join(f"{s['field']} ({s.get('direction', 'asc')})" for s in sort)
            )

        limit = parameters.get("maxRecords")
        details.append(f"- **Records:** {count}" + (f" (limit: {limit})" if limit else ""))

        return f"{heading}\n\n{body}" + "\n".join(details)

    def format_as_text(self, records: List[Dict[str, Any]]) -> str:
        """
        Dump every field of every record as "key: value" lines.

        Nothing is truncated; this is the fallback when no summary could
        be written.
        """
        if not records:
            return "No records found."

        lines = [f"Found {len(records)} record{'' if len(records) == 1 else 's'}:"]
        for index, record in enumerate(records, start=1):
            lines.append("")
            lines.append(f"Record {index}:")
            for name, value in (record.get("fields") or {}).items():
                if isinstance(value, list):
                    value = ", ".join(str(v) for v in value)
                lines.append(f"- {name}: {value}")
        return "\n".join(lines)

    def _format_value(self, value: Any) -> str:
        """Format a single cell for a markdown table."""
        if value is None:
            return ""

        if isinstance(value, bool):
            return "✓" if value else "✗"

        if isinstance(value, list):
            return self._escape(", ".join(self._plain(v) for v in value))

        if isinstance(value, dict):
            return self._escape(self._plain(value))

        if isinstance(value, float) and math.isfinite(value) and value == int(value):
            return str(int(value))

        str_value = str(value).replace("\n", " ")

        if len(str_value) > self.max_col_width:
            str_value = str_value[:self.max_col_width - 3] + "..."

        return self._escape(str_value)

    @staticmethod
    def _plain(value: Any) -> str:
        # Attachments carry url/filename, collaborators carry name/email
        if isinstance(value, dict):
            if value.get("url"):
                return f"[{value.get('filename') or 'File'}]({value['url']})"
            if value.get("name"):
                return str(value["name"])
            if value.get("email"):
                return str(value["email"])
        return str(value)

    @staticmethod
    def _escape(text: str) -> str:
        return text.replace("|", "\\|")
