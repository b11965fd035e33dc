import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

from secondbrain.api.main import build_chunk_finder
from secondbrain.core.config import get_settings
from secondbrain.core.logging_config import configure_logging

load_dotenv()

settings = get_settings()
configure_logging(settings.log_level)
finder = build_chunk_finder(settings)

query = " ".join(sys.argv[1:]) or "What is the objective of the onboarding procedure?"
chunks = finder.find_relevant_chunks(query, max_chunks=settings.max_chunks)

print("TOP CHUNKS:")
for i, c in enumerate(chunks, start=1):
    print(i, c.id, "score=", round(c.score, 4), "|", c.source_name or "-", "|", c.text[:80])
