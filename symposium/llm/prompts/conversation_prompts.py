"""
Conversation Prompts - Prompts shared by every consultant type.

build_context_prompt turns symposium state into the context block each
consultant step receives. get_answer_prompt is the final answer prompt
used when no external data was fetched.
"""
from typing import Iterable, Optional, Sequence


def build_context_prompt(
    symposium_name: str,
    symposium_description: str,
    consultant_prompt: str,
    history: Sequence[tuple],
    knowledge: Iterable[tuple] = (),
) -> str:
    """
    Build the conversation context for one consultant.

    Args:
        symposium_name: Name of the symposium
        symposium_description: What the symposium is about
        consultant_prompt: The consultant's role description
        history: (speaker, content) pairs, oldest first
        knowledge: (title, content) pairs of visible knowledge cards

    Returns:
        Context text passed to every pipeline step
    """
    parts = [
        f'You are participating in a symposium called "{symposium_name}". '
        f"Symposium description: {symposium_description}",
        f"Your role as a consultant: {consultant_prompt}",
    ]

    knowledge = list(knowledge)
    if knowledge:
        lines = ["Knowledge base:"]
        for title, content in knowledge:
            lines.append(f"### {title}\n{content}")
        parts.append("\n".join(lines))

    if history:
        lines = ["Previous conversation history:"]
        for speaker, content in history:
            lines.append(f"{speaker}: {content}")
        parts.append("\n".join(lines))

    return "\n\n".join(parts)


def get_answer_prompt(
    system_prompt: str,
    context: str,
    user_message: str,
    api_response: Optional[str] = None,
) -> str:
    """
    Final answer prompt.

    Args:
        system_prompt: The consultant's own system prompt
        context: Conversation context
        user_message: The current user message
        api_response: Serialized external data, if any was fetched
    """
    prompt = (
        f"{system_prompt}\n\n"
        f"Context: {context}\n\n"
        f'User Message: "{user_message}"'
    )

    if api_response:
        prompt += f"""

API Response Data:
{api_response}

Based on the API response, provide a natural, helpful response to the user's question. Format the information clearly and conversationally."""
    else:
        prompt += """

No external API call was needed. Respond to the user's message based on your role and expertise."""

    return prompt
