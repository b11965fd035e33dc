import sys
from pathlib import Path

# Ensure project root is on sys.path so `import secondbrain` works when running this file directly.
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

from secondbrain.core.config import get_settings
from secondbrain.core.logging_config import configure_logging
from secondbrain.embedding.openai_embedder import OpenAIEmbedder
from secondbrain.indexing.record_store import PGRecordStore
from secondbrain.ingestion.record_indexer import RecordIndexer, load_jsonl

load_dotenv()

if len(sys.argv) < 2:
    print("Usage: python scripts/index_records.py <records.jsonl>")
    raise SystemExit(1)

settings = get_settings()
configure_logging(settings.log_level)
options = settings.search_options()

store = PGRecordStore(settings.pg_dsn)
store.ensure_schema()

embedder = None
if options.has_vector_query:
    embedder = OpenAIEmbedder(model=settings.embedding_model, api_key=settings.openai_api_key)

indexer = RecordIndexer(store, options, embedder=embedder)
ids = indexer.index_records(load_jsonl(sys.argv[1]))
print("Indexed", len(ids), "records from", sys.argv[1])
