from __future__ import annotations
from typing import Any, Mapping, Sequence


NO_ANSWER = "Sorry, I don't know."

SYSTEM_PROMPT_TEMPLATE = """You are a helpful assistant acting as the users' second brain.
Use only the retrieved context and chat history to answer.
If no relevant information is found in the retrieved context, respond exactly with "{no_answer}"
Keep responses short and concise. Answer in a single sentence where possible.
Cite the sources using source ids at the end of the answer text, like 【234d987】, using the id of the source.
If you cannot support an answer with the retrieved context, respond exactly with "{no_answer}"

Current user query:
\"\"\"{query}\"\"\"

Retrieved context:
\"\"\"{context}\"\"\"
"""


def get_text_from_message_content(content: Any) -> str:
    if isinstance(content, str):
        return content

    if isinstance(content, (list, tuple)):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, Mapping) and isinstance(part.get("text"), str):
                parts.append(part["text"])
            else:
                parts.append("")
        return " ".join(parts).strip()

    return ""


def get_latest_user_query(messages: Sequence[Mapping[str, Any]]) -> str:
    for message in reversed(messages):
        if message.get("role") == "user":
            content = get_text_from_message_content(message.get("content"))
            if content:
                return content
    return ""


def build_system_prompt(query: str, context: str) -> str:
    return SYSTEM_PROMPT_TEMPLATE.format(
        no_answer=NO_ANSWER,
        query=query or "No user query provided.",
        context=context,
    )
