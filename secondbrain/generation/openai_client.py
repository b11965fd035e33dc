from __future__ import annotations
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence

from openai import OpenAI

from secondbrain.generation.prompting import get_text_from_message_content


def to_chat_messages(system_prompt: str, messages: Sequence[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    out: List[Dict[str, Any]] = [{"role": "system", "content": system_prompt}]
    for m in messages:
        role = m.get("role")
        if role not in ("user", "assistant", "system"):
            continue
        # part lists are flattened to their text; other part types are dropped
        out.append({"role": role, "content": get_text_from_message_content(m.get("content"))})
    return out


class OpenAILLM:
    def __init__(self, model: str, api_key: Optional[str] = None, client: Optional[OpenAI] = None):
        self.client = client or OpenAI(api_key=api_key)
        self.model = model

    def stream(self, system_prompt: str, messages: Sequence[Mapping[str, Any]]) -> Iterator[str]:
        resp = self.client.chat.completions.create(
            model=self.model,
            messages=to_chat_messages(system_prompt, messages),
            temperature=0.0,
            stream=True,
        )
        # request is sent here; only reading the deltas is deferred
        return _iter_deltas(resp)


def _iter_deltas(resp) -> Iterator[str]:
    for event in resp:
        if not event.choices:
            continue
        delta = event.choices[0].delta.content
        if delta:
            yield delta
