"""
Datasources module - External data adapters used by consultants.

This module handles:
- Airtable record queries and table schemas
- Filter formulas built from structured conditions
- Schema validation of queries before they are sent
- Perplexity web search
"""
from symposium.datasources.airtable import (
    MAX_RECORDS,
    AirtableClient,
    AirtableQuery,
    clamp_max_records,
)
from symposium.datasources.formula import FilterCondition, build_filter_formula
from symposium.datasources.perplexity import PerplexityClient
from symposium.datasources.validator import QueryValidator, ValidationResult

__all__ = [
    "MAX_RECORDS",
    "AirtableClient",
    "AirtableQuery",
    "clamp_max_records",
    "FilterCondition",
    "build_filter_formula",
    "PerplexityClient",
    "QueryValidator",
    "ValidationResult",
]
