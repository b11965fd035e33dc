from __future__ import annotations

from functools import lru_cache
from typing import Sequence

import tiktoken

from secondbrain.core.types import RetrievedChunk


NO_CONTEXT_MESSAGE = "No relevant context was retrieved from the knowledge base."
SECTION_SEPARATOR = "\n\n---\n\n"
DEFAULT_MAX_CONTEXT_CHARACTERS = 7000


def format_retrieved_context(
    chunks: Sequence[RetrievedChunk],
    max_context_characters: int = DEFAULT_MAX_CONTEXT_CHARACTERS,
) -> str:
    """
    Concatenate ranked chunks into a prompt context block.

    Sections are taken in order until the next one would push the summed
    section length (separators not counted) past max_context_characters.
    """
    if not chunks:
        return NO_CONTEXT_MESSAGE

    sections = []
    current_length = 0
    for chunk in chunks:
        section = f"Source ID: {chunk.id}\n{chunk.text}"
        if current_length + len(section) > max_context_characters:
            break
        sections.append(section)
        current_length += len(section)

    return SECTION_SEPARATOR.join(sections)


@lru_cache(maxsize=8)
def _encoding_for(model: str):
    try:
        return tiktoken.encoding_for_model(model)
    except KeyError:
        return tiktoken.get_encoding("cl100k_base")


def count_tokens(text: str, model: str = "gpt-4o-mini") -> int:
    return len(_encoding_for(model).encode(text))
