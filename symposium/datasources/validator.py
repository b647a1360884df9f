"""
Query Validator - Checks an Airtable query against the table schema.

This module validates tabular queries for:
- Field references inside the filter formula ({Field Name})
- Requested field names
- Sort field names

A formula built from structured conditions, or proposed by the LLM, is
never sent upstream with a column the table does not have. Airtable
answers such queries with an error or an empty record list, and neither
tells the user which column name was wrong.
"""
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from symposium.core.exceptions import SchemaMismatchError
from symposium.core.logging_config import get_logger
from symposium.datasources.airtable import AirtableQuery

logger = get_logger(__name__)

_STRING_LITERAL = re.compile(r'"(?:[^"\\]|\\.)*"|\'(?:[^\'\\]|\\.)*\'')
_FIELD_REFERENCE = re.compile(r"\{([^{}]+)\}")


@dataclass
class ValidationResult:
    """Result of query validation."""
    is_valid: bool
    unknown_fields: List[str] = field(default_factory=list)
    valid_fields: List[str] = field(default_factory=list)
    error: Optional[str] = None


def referenced_fields(formula: str) -> List[str]:
    """
    Field names referenced by a formula, in order of first appearance.

    Braces inside string literals are not references.
    """
    if not formula:
        return []
    stripped = _STRING_LITERAL.sub('""', formula)
    names: List[str] = []
    for match in _FIELD_REFERENCE.finditer(stripped):
        name = match.group(1).strip()
        if name not in names:
            names.append(name)
    return names


class QueryValidator:
    """
    Validates a query against one table's schema.

    Example:
        >>> validator = QueryValidator({"name": "Contacts", "fields": [{"name": "Type"}]})
        >>> result = validator.validate(AirtableQuery(filter_by_formula='{Kind} = "A"'))
        >>> result.is_valid, result.unknown_fields
        (False, ['Kind'])
    """

    def __init__(self, table_schema: Dict[str, Any]):
        self.table_name = table_schema.get("name", "")
        self.valid_fields = [
            f["name"] for f in table_schema.get("fields") or [] if f.get("name")
        ]

    def validate(self, query: AirtableQuery) -> ValidationResult:
        """
        Check every field the query references.

        Returns:
            ValidationResult listing unknown field names, if any
        """
        known = set(self.valid_fields)
        candidates = referenced_fields(query.filter_by_formula)
        candidates += list(query.fields)
        candidates += [order["field"] for order in query.sort]

        unknown: List[str] = []
        for name in candidates:
            if name not in known and name not in unknown:
                unknown.append(name)

        if unknown:
            error = SchemaMismatchError(unknown, self.valid_fields, self.table_name)
            logger.warning(f"Query validation failed: {error.message}")
            return ValidationResult(
                is_valid=False,
                unknown_fields=unknown,
                valid_fields=list(self.valid_fields),
                error=error.message,
            )

        return ValidationResult(is_valid=True, valid_fields=list(self.valid_fields))

    def ensure_valid(self, query: AirtableQuery) -> None:
        """
        Raises:
            SchemaMismatchError: If the query references unknown fields
        """
        result = self.validate(query)
        if not result.is_valid:
            raise SchemaMismatchError(result.unknown_fields, result.valid_fields, self.table_name)
