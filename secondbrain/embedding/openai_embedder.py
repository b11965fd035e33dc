from __future__ import annotations

from typing import List, Optional

from openai import OpenAI


class OpenAIEmbedder:
    def __init__(self, model: str, api_key: Optional[str] = None, client: Optional[OpenAI] = None):
        self.client = client or OpenAI(api_key=api_key)
        self.model = model

    def embed(self, text: str) -> List[float]:
        # newlines degrade embedding quality for some models
        r = self.client.embeddings.create(model=self.model, input=text.replace("\n", " "))
        return r.data[0].embedding

    def embed_batch(self, texts: List[str]) -> List[List[float]]:
        if not texts:
            return []
        resp = self.client.embeddings.create(
            model=self.model,
            input=[t.replace("\n", " ") for t in texts],
        )
        return [d.embedding for d in resp.data]
