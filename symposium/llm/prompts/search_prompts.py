"""
Web Search Prompts - Search decision and answer synthesis.
"""
from symposium.llm.prompts.formatting_prompt import GLOBAL_FORMATTING_PROMPT

SEARCH_SYSTEM_PROMPT = (
    "You are a helpful research assistant. Provide accurate, up-to-date information "
    "with sources when possible."
)


def get_interpret_prompt(context: str, user_message: str) -> str:
    """Prompt for deciding whether a message needs a live web search."""
    return f"""You are a research assistant that uses web search for current information.

User Message: "{user_message}"
Context: {context}

Determine if this request requires a web search or current information lookup.

Respond with a JSON object containing:
- needsApiCall: boolean (true if the user is asking for current information, research, facts, news, or anything that would benefit from web search)
- action: "web_search" (if needsApiCall is true)
- parameters: object with:
  - query: string (the search query to send)

Examples of queries that need a search:
- "What's the latest news about AI?"
- "What are the current stock prices?"
- "Research the benefits of meditation"

Examples that don't:
- "Hello, how are you?"
- "Can you help me with math?"
- Personal opinions or creative tasks"""


def get_answer_prompt(system_prompt: str, context: str, user_message: str, search_text: str) -> str:
    """Prompt for synthesizing search results into a cited answer."""
    return f"""{system_prompt}

{GLOBAL_FORMATTING_PROMPT}

You are a research assistant. The user asked: "{user_message}"

You performed a web search and received the following information:

{search_text}

Context: {context}

Based on the search results, provide a comprehensive, well-formatted response that:
1. Directly answers the user's question
2. Includes the most relevant and up-to-date information
3. Cites the sources mentioned in the search results
4. Uses rich markdown formatting where the content supports it
5. Is conversational and helpful"""
