from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterator, List, Mapping, Sequence

from secondbrain.core.types import RetrievedChunk
from secondbrain.generation.context import (
    DEFAULT_MAX_CONTEXT_CHARACTERS,
    count_tokens,
    format_retrieved_context,
)
from secondbrain.generation.prompting import build_system_prompt, get_latest_user_query
from secondbrain.retrieval.ranker import DEFAULT_MAX_CHUNKS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PreparedChat:
    query: str
    chunks: List[RetrievedChunk]
    system_prompt: str


class ChatService:
    def __init__(
        self,
        finder,
        llm,
        max_chunks: int = DEFAULT_MAX_CHUNKS,
        max_context_characters: int = DEFAULT_MAX_CONTEXT_CHARACTERS,
    ):
        self.finder = finder
        self.llm = llm
        self.max_chunks = max_chunks
        self.max_context_characters = max_context_characters

    def prepare(self, messages: Sequence[Mapping[str, Any]]) -> PreparedChat:
        query = get_latest_user_query(messages)
        chunks = self.finder.find_relevant_chunks(query, self.max_chunks) if query else []
        context = format_retrieved_context(chunks, self.max_context_characters)
        system_prompt = build_system_prompt(query, context)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Context: %d chunks, %d characters, ~%d tokens",
                len(chunks), len(context), count_tokens(context, getattr(self.llm, "model", "gpt-4o-mini")),
            )
        return PreparedChat(query=query, chunks=chunks, system_prompt=system_prompt)

    def stream_answer(self, messages: Sequence[Mapping[str, Any]]) -> Iterator[str]:
        """Retrieval and the completion request run before the first delta is read."""
        prepared = self.prepare(messages)
        return self.llm.stream(prepared.system_prompt, messages)
