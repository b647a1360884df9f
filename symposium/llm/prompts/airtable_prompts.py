"""
Airtable Prompts - Query interpretation and answer formatting.

The interpretation prompt asks the model whether a message needs a data
lookup and, if so, for Airtable query parameters as a JSON object. The
answer prompt turns retrieved records into prose.
"""
import json
from typing import Any, Dict, List, Optional

from symposium.llm.prompts.formatting_prompt import GLOBAL_FORMATTING_PROMPT


def get_interpret_prompt(
    system_prompt: str,
    context: str,
    user_message: str,
    table_schema: Optional[Dict[str, Any]],
    is_counting_query: bool,
) -> str:
    """
    Prompt for deciding on, and planning, an Airtable query.

    Args:
        system_prompt: The consultant's own system prompt
        context: Conversation context
        user_message: The current user message
        table_schema: {name, fields: [{name, type, options}]} or None if unknown
        is_counting_query: Whether the message asks for a count or total
    """
    schema_text = json.dumps(table_schema, indent=2) if table_schema else "(schema unavailable)"
    query_type = "COUNTING QUERY - Use maxRecords: 20" if is_counting_query else "REGULAR QUERY"

    return f"""{system_prompt}

You are an Airtable query interpreter. Given a user message and table schema, decide whether the
message needs data from the table and, if it does, generate Airtable filter formulas and field selections.

Table Schema:
{schema_text}

Context: {context}

User Query: "{user_message}"

IMPORTANT RULES:
1. Set needsApiCall to false for greetings, small talk or questions that do not need table data
2. For counting queries (how many, count, total number), ALWAYS set maxRecords to 20
3. For specific item requests ("show me 5"), respect the requested number but cap at 20
4. For general queries without specific numbers, use 20 as default
5. Empty filterByFormula means "get all records"
6. Only reference field names that appear in the schema, wrapped in curly braces

Respond with ONLY a JSON object containing:
- needsApiCall: boolean
- filterByFormula: Airtable formula string (empty string for all records)
- fields: Array of field names to return (empty array for all fields)
- maxRecords: Number between 1-20 (ALWAYS 20 for counting queries)
- sort: Array of sort specifications with field and direction

Examples:
- "How many doctors are there?" -> {{"needsApiCall": true, "filterByFormula": "{{Type}} = 'Doctor'", "fields": [], "maxRecords": 20, "sort": []}}
- "Show me 5 recent entries" -> {{"needsApiCall": true, "filterByFormula": "", "fields": [], "maxRecords": 5, "sort": [{{"field": "Created", "direction": "desc"}}]}}
- "Find active users" -> {{"needsApiCall": true, "filterByFormula": "{{Status}} = 'Active'", "fields": [], "maxRecords": 20, "sort": []}}
- "Thanks, that helps!" -> {{"needsApiCall": false}}

Query Type Detected: {query_type}

Respond with valid JSON only, no other text."""


def get_answer_prompt(
    system_prompt: str,
    context: str,
    user_message: str,
    records: List[Dict[str, Any]],
    table_schema: Optional[Dict[str, Any]],
) -> str:
    """Prompt for turning retrieved records into an answer."""
    return f"""{system_prompt}

{GLOBAL_FORMATTING_PROMPT}

You are an Airtable data analyst. Format the following data into a natural, helpful response to the user's query.

Context: {context}

Original Query: "{user_message}"

Table Schema:
{json.dumps(table_schema, indent=2)}

Data Retrieved ({len(records)} records):
{json.dumps(records, indent=2, default=str)}

Provide a natural language response that:
1. Directly answers the user's question
2. Summarizes key findings from the data
3. Presents the information in a clear, organized way
4. Includes relevant statistics or counts when appropriate
5. Uses rich markdown formatting for readability

If the query was asking for a count, state the exact number of matching records.
If showing records, format them in a readable table or list.
Be conversational but informative."""
