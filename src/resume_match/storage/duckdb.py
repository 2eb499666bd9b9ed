"""
DuckDB storage backend for documents and embeddings.
"""

from __future__ import annotations

import json
import uuid
from pathlib import Path
from typing import Any

import duckdb

from ..models import Document
from .base import coerce_embedding


def _new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex}"


class DuckDBStorage:
    """DuckDB-backed persistence for owner documents."""

    def __init__(
        self,
        db_path: str,
        *,
        read_only: bool = False,
        initialize: bool = True,
    ) -> None:
        self.db_path = str(Path(db_path).expanduser().resolve())
        self.read_only = read_only
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self._conn = duckdb.connect(self.db_path, read_only=read_only)
        if initialize and not read_only:
            self.initialize()

    def close(self) -> None:
        """Close the underlying DuckDB connection."""
        self._conn.close()

    def initialize(self) -> None:
        self._conn.execute("CREATE SEQUENCE IF NOT EXISTS documents_seq START 1;")
        self._conn.execute(
            """
            CREATE TABLE IF NOT EXISTS documents (
                id VARCHAR PRIMARY KEY,
                seq BIGINT NOT NULL DEFAULT nextval('documents_seq'),
                owner_id VARCHAR NOT NULL,
                filename VARCHAR NOT NULL,
                content VARCHAR NOT NULL,
                embedding VARCHAR,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            );
            """
        )

    def add_document(
        self,
        *,
        owner_id: str,
        filename: str,
        text: str,
        embedding: list[float] | None = None,
    ) -> Document:
        if not owner_id:
            raise ValueError("owner_id must not be empty")
        doc_id = _new_id("doc")
        self._conn.execute(
            """
            INSERT INTO documents (id, owner_id, filename, content, embedding)
            VALUES (?, ?, ?, ?, ?)
            """,
            [
                doc_id,
                owner_id,
                filename,
                text,
                self._dump_embedding(embedding),
            ],
        )
        return Document(
            id=doc_id,
            text=text,
            embedding=coerce_embedding(embedding),
            owner_id=owner_id,
            filename=filename,
        )

    def fetch_documents(self, owner_id: str) -> list[Document]:
        rows = self._conn.execute(
            """
            SELECT id, content, embedding, owner_id, filename
            FROM documents
            WHERE owner_id = ?
            ORDER BY seq ASC
            """,
            [owner_id],
        ).fetchall()
        return [self._row_to_document(row) for row in rows]

    def get_document(self, doc_id: str) -> Document | None:
        row = self._conn.execute(
            """
            SELECT id, content, embedding, owner_id, filename
            FROM documents
            WHERE id = ?
            LIMIT 1
            """,
            [doc_id],
        ).fetchone()
        if row is None:
            return None
        return self._row_to_document(row)

    def update_embedding(self, doc_id: str, vector: list[float] | None) -> None:
        self._conn.execute(
            """
            UPDATE documents
            SET embedding = ?, updated_at = now()
            WHERE id = ?
            """,
            [self._dump_embedding(vector), doc_id],
        )

    def delete_document(self, doc_id: str) -> bool:
        existing = self._conn.execute(
            "SELECT COUNT(*) FROM documents WHERE id = ?", [doc_id]
        ).fetchone()
        if not existing or int(existing[0]) == 0:
            return False
        self._conn.execute("DELETE FROM documents WHERE id = ?", [doc_id])
        return True

    @staticmethod
    def _dump_embedding(vector: list[float] | None) -> str | None:
        if not vector:
            return None
        return json.dumps([float(v) for v in vector])

    @staticmethod
    def _row_to_document(row: tuple[Any, ...]) -> Document:
        return Document(
            id=str(row[0]),
            text=str(row[1]),
            embedding=coerce_embedding(row[2]),
            owner_id=str(row[3]),
            filename=str(row[4]),
        )
