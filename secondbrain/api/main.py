from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from secondbrain.api.routes_chat import request_validation_handler, router as chat_router
from secondbrain.core.config import Settings, get_settings
from secondbrain.core.errors import ConfigurationError
from secondbrain.core.logging_config import configure_logging
from secondbrain.embedding.openai_embedder import OpenAIEmbedder
from secondbrain.generation.chat import ChatService
from secondbrain.generation.openai_client import OpenAILLM
from secondbrain.indexing.record_store import PGRecordStore
from secondbrain.rerank.cohere_reranker import CohereReranker
from secondbrain.retrieval.documents import DocumentSearch
from secondbrain.retrieval.fusion import RRFWeights
from secondbrain.retrieval.pipeline import RelevantChunkFinder
from secondbrain.retrieval.search import HybridSearchService
from secondbrain.retrieval.segmenter import TextSegmenter


def build_chunk_finder(settings: Settings) -> RelevantChunkFinder:
    options = settings.search_options()

    embedder = None
    if options.has_vector_query:
        embedder = OpenAIEmbedder(model=settings.embedding_model, api_key=settings.openai_api_key)

    reranker = None
    if options.semantic_configuration_name:
        if not settings.cohere_api_key:
            raise ConfigurationError(
                f"semantic configuration '{options.semantic_configuration_name}' needs COHERE_API_KEY"
            )
        reranker = CohereReranker(
            api_key=settings.cohere_api_key,
            model=settings.cohere_rerank_model,
        )

    search = HybridSearchService(
        store=PGRecordStore(settings.pg_dsn),
        options=options,
        embedder=embedder,
        reranker=reranker,
        weights=RRFWeights(k=settings.rrf_k, w_text=settings.w_text, w_vector=settings.w_vector),
    )
    return RelevantChunkFinder(
        DocumentSearch(search, options),
        segmenter=TextSegmenter(settings.chunk_max_length, settings.chunk_overlap),
    )


def build_chat_service(settings: Settings) -> ChatService:
    return ChatService(
        finder=build_chunk_finder(settings),
        llm=OpenAILLM(model=settings.llm_model, api_key=settings.openai_api_key),
        max_chunks=settings.max_chunks,
        max_context_characters=settings.max_context_characters,
    )


def create_app(chat_service: Optional[ChatService] = None) -> FastAPI:
    """Shared clients are built once per process, at startup, unless injected."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "chat_service", None) is None:
            load_dotenv()
            settings = get_settings()
            configure_logging(settings.log_level)
            app.state.chat_service = build_chat_service(settings)
        yield

    app = FastAPI(title="Second Brain Chat", lifespan=lifespan)
    app.state.chat_service = chat_service
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.include_router(chat_router)
    return app


app = create_app()
