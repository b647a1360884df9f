"""
Request models for symposium, consultant and Airtable endpoints.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from symposium.datasources.airtable import MAX_RECORDS
from symposium.datasources.formula import FilterCondition


class SymposiumCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(default="")


class SymposiumUpdate(BaseModel):
    name: Optional[str] = Field(default=None, max_length=200)
    description: Optional[str] = None


class ConsultantCreate(BaseModel):
    """
    New consultant.

    With template_id, the template's api_type becomes the type and its
    default prompt is used when system_prompt is empty.
    """
    symposium_id: int
    name: str = Field(..., min_length=1, max_length=200)
    model: str = Field(..., min_length=1, max_length=200, examples=["anthropic/claude-3.5-sonnet"])
    system_prompt: Optional[str] = None
    template_id: Optional[int] = None
    consultant_type: Optional[str] = Field(
        default=None,
        description="pure_llm, standard, airtable or perplexity (ignored with a template)"
    )


class ConsultantUpdate(BaseModel):
    name: Optional[str] = Field(default=None, max_length=200)
    model: Optional[str] = Field(default=None, max_length=200)
    system_prompt: Optional[str] = None


class ApiConfigRequest(BaseModel):
    """Consultant API configuration, e.g. {"base_id", "api_key", "table_name"}."""
    config: Dict[str, Any]


class AirtableTestRequest(BaseModel):
    api_key: str
    base_id: str
    table_name: Optional[str] = None


class ConditionModel(BaseModel):
    """One query builder condition; logic joins it to the conditions before it."""
    field: str = ""
    operator: str = "="
    value: Any = ""
    logic: str = "AND"

    def to_condition(self) -> FilterCondition:
        return FilterCondition(field=self.field, operator=self.operator, value=self.value, logic=self.logic)


class SortModel(BaseModel):
    field: str
    direction: str = "asc"


class TableQueryRequest(BaseModel):
    table_name: str = Field(..., min_length=1)
    conditions: List[ConditionModel] = Field(default_factory=list)
    fields: List[str] = Field(default_factory=list)
    sort: List[SortModel] = Field(default_factory=list)
    max_records: int = Field(default=MAX_RECORDS)
