"""
Prompts module - LLM prompt templates.

Prompts live in separate modules per consultant type:
- conversation_prompts : context block and plain answers
- airtable_prompts     : table query planning and record summaries
- search_prompts       : web search decision and synthesis
"""
from symposium.llm.prompts.conversation_prompts import build_context_prompt, get_answer_prompt
from symposium.llm.prompts.formatting_prompt import GLOBAL_FORMATTING_PROMPT

__all__ = [
    "build_context_prompt",
    "get_answer_prompt",
    "GLOBAL_FORMATTING_PROMPT",
]
