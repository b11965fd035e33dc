from __future__ import annotations
from pydantic import BaseModel
from typing import Any, Dict, List, Mapping


class ChatMessage(BaseModel):
    role: str
    content: Any = ""  # plain string or a list of parts ({"type": "text", "text": ...})


class ChatRequest(BaseModel):
    # left untyped so a malformed history degrades to an empty one
    messages: Any = None

    def message_dicts(self) -> List[Dict[str, Any]]:
        if not isinstance(self.messages, list):
            return []
        return [
            ChatMessage.model_validate(m).model_dump()
            for m in self.messages
            if isinstance(m, Mapping)
        ]


class ErrorResponse(BaseModel):
    error: str
