"""
Filter Formula Builder - Structured conditions to Airtable formula syntax.

Conditions come from the query builder as {field, operator, value, logic}.
The builder only renders text. It does not check field names against the
table; run QueryValidator before sending a built formula upstream.

Example:
    >>> build_filter_formula([
    ...     FilterCondition("Status", "=", "Active"),
    ...     FilterCondition("Rating", ">", "4", logic="AND"),
    ... ])
    'AND({Status} = "Active", {Rating} > 4)'
"""
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List

from symposium.core.exceptions import ValidationError

COMPARISON_OPERATORS = {"=", "!=", ">", ">=", "<", "<="}
TEXT_OPERATORS = {"CONTAINS", "NOT_CONTAINS", "STARTS_WITH", "ENDS_WITH"}
SET_OPERATORS = {"HAS", "HAS_ALL", "NOT_HAS"}
SUPPORTED_OPERATORS = COMPARISON_OPERATORS | TEXT_OPERATORS | SET_OPERATORS

LOGIC_OPERATORS = {"AND", "OR"}

_NUMERIC = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")


@dataclass(frozen=True)
class FilterCondition:
    """One condition of a filter; logic joins it to the conditions before it."""
    field: str
    operator: str
    value: Any
    logic: str = "AND"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FilterCondition":
        return cls(
            field=data.get("field", ""),
            operator=data.get("operator", ""),
            value=data.get("value", ""),
            logic=data.get("logic") or "AND",
        )

    @property
    def is_complete(self) -> bool:
        """Conditions still being edited in the UI have no field, operator or value."""
        if not self.field or not self.operator:
            return False
        if self.value is None:
            return False
        if isinstance(self.value, (list, tuple)):
            return len(self.value) > 0
        return str(self.value) != ""


def is_numeric(value: Any) -> bool:
    """True for numbers and number-looking strings ("4", "-2.5", "1e3")."""
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    return bool(_NUMERIC.match(str(value).strip()))


def quote(value: Any) -> str:
    """Render a formula string literal."""
    text = str(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{text}"'


def format_value(value: Any) -> str:
    """Numbers unquoted, booleans as TRUE()/FALSE(), everything else quoted."""
    if isinstance(value, bool):
        return "TRUE()" if value else "FALSE()"
    if is_numeric(value):
        return str(value).strip()
    return quote(value)


def _field_ref(name: str) -> str:
    return "{" + name + "}"


def _values(value: Any) -> List[Any]:
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def build_condition_formula(condition: FilterCondition) -> str:
    """
    Render a single condition.

    Raises:
        ValidationError: If the operator is not supported
    """
    field = _field_ref(condition.field)
    operator = condition.operator.strip().upper()
    value = condition.value

    if operator in COMPARISON_OPERATORS:
        return f"{field} {operator} {format_value(value)}"

    if operator == "CONTAINS":
        return f"FIND({quote(value)}, {field})"
    if operator == "NOT_CONTAINS":
        return f"NOT(FIND({quote(value)}, {field}))"
    if operator == "STARTS_WITH":
        text = str(value)
        return f"LEFT({field}, {len(text)}) = {quote(text)}"
    if operator == "ENDS_WITH":
        text = str(value)
        return f"RIGHT({field}, {len(text)}) = {quote(text)}"

    if operator == "HAS":
        return " OR ".join(f"FIND({quote(v)}, {field})" for v in _values(value))
    if operator == "HAS_ALL":
        return " AND ".join(f"FIND({quote(v)}, {field})" for v in _values(value))
    if operator == "NOT_HAS":
        return " AND ".join(f"NOT(FIND({quote(v)}, {field}))" for v in _values(value))

    raise ValidationError(
        f"Unsupported operator: {condition.operator}. "
        f"Must be one of: {sorted(SUPPORTED_OPERATORS)}",
        field="operator",
    )


def build_filter_formula(conditions: Iterable[FilterCondition]) -> str:
    """
    Join conditions left to right into one formula.

    The first condition stands alone; each following condition wraps the
    formula so far together with itself in its own logic operator, so
    [a, AND b, OR c] renders as OR(AND(a, b), c). Incomplete conditions
    are skipped. An empty list renders "".

    Raises:
        ValidationError: On an unsupported operator or logic keyword
    """
    formula = ""
    for condition in conditions:
        if not condition.is_complete:
            continue

        part = build_condition_formula(condition)
        if not formula:
            formula = part
            continue

        logic = (condition.logic or "AND").upper()
        if logic not in LOGIC_OPERATORS:
            raise ValidationError(
                f"Unsupported logic operator: {condition.logic}. Must be AND or OR",
                field="logic",
            )
        formula = f"{logic}({formula}, {part})"

    return formula
