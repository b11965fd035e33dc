from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping, Optional, Tuple

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine

from secondbrain.core.types import SearchRecord


SCHEMA_SQL = (
    "CREATE EXTENSION IF NOT EXISTS vector",
    """
    CREATE TABLE IF NOT EXISTS records (
      record_id TEXT PRIMARY KEY,
      position BIGSERIAL,
      fields JSONB NOT NULL DEFAULT '{}'::jsonb
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS record_vectors (
      record_id TEXT NOT NULL REFERENCES records(record_id) ON DELETE CASCADE,
      field TEXT NOT NULL,
      embedding vector NOT NULL,
      PRIMARY KEY (record_id, field)
    )
    """,
)


class PGRecordStore:
    """Search records (arbitrary field mappings) and their per-field vectors in Postgres."""

    def __init__(self, dsn: Optional[str] = None, engine: Optional[Engine] = None):
        if engine is None:
            if not dsn:
                raise ValueError("PGRecordStore needs a DSN or an engine")
            engine = create_engine(dsn, pool_pre_ping=True, future=True)
        self.engine: Engine = engine

    def ensure_schema(self) -> None:
        with self.engine.begin() as conn:
            for statement in SCHEMA_SQL:
                conn.execute(text(statement))

    def upsert_record(self, record_id: str, fields: Mapping[str, Any]) -> None:
        q = text("""
        INSERT INTO records (record_id, fields)
        VALUES (:record_id, CAST(:fields AS jsonb))
        ON CONFLICT (record_id) DO UPDATE SET
          fields = EXCLUDED.fields;
        """)
        with self.engine.begin() as conn:
            conn.execute(q, {"record_id": record_id, "fields": _to_json(fields)})

    def upsert_vectors(self, record_id: str, vectors: Mapping[str, List[float]]) -> None:
        """
        Inserts/updates one embedding per vector field.
        The record row must exist already (FK on record_id).
        """
        if not vectors:
            return
        q = text("""
        INSERT INTO record_vectors (record_id, field, embedding)
        VALUES (:record_id, :field, CAST(:embedding AS vector))
        ON CONFLICT (record_id, field) DO UPDATE SET
          embedding = EXCLUDED.embedding;
        """)
        with self.engine.begin() as conn:
            for field_name, vector in vectors.items():
                conn.execute(
                    q,
                    {
                        "record_id": record_id,
                        "field": field_name,
                        "embedding": _to_pgvector_literal(vector),
                    },
                )

    def all_records(self) -> List[SearchRecord]:
        sql = text("SELECT record_id, fields FROM records ORDER BY position;")
        with self.engine.connect() as conn:
            rows = conn.execute(sql).mappings().all()
        return [SearchRecord(record_id=r["record_id"], fields=r["fields"] or {}) for r in rows]

    def vector_search(
        self,
        field_name: str,
        query_embedding: List[float],
        top_k: int = 8,
    ) -> List[Tuple[SearchRecord, float]]:
        """
        Returns (SearchRecord, distance) sorted by cosine distance ascending.
        """
        params: Dict[str, Any] = {
            "k": top_k,
            "field": field_name,
            "q": _to_pgvector_literal(query_embedding),
        }
        sql = text("""
        SELECT r.record_id, r.fields,
               (v.embedding <=> CAST(:q AS vector)) AS distance
        FROM record_vectors v
        JOIN records r ON r.record_id = v.record_id
        WHERE v.field = :field
        ORDER BY v.embedding <=> CAST(:q AS vector)
        LIMIT :k;
        """)

        out: List[Tuple[SearchRecord, float]] = []
        with self.engine.connect() as conn:
            rows = conn.execute(sql, params).mappings().all()
            for r in rows:
                record = SearchRecord(record_id=r["record_id"], fields=r["fields"] or {})
                out.append((record, float(r["distance"])))
        return out


def _to_pgvector_literal(vec: List[float]) -> str:
    # pgvector accepts array-like string: '[1,2,3]'
    return "[" + ",".join(f"{x:.8f}" for x in vec) + "]"


def _to_json(d: Mapping[str, Any]) -> str:
    return json.dumps(dict(d), ensure_ascii=False)
