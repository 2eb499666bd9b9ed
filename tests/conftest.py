from __future__ import annotations

from pathlib import Path

import pytest

from resume_match.errors import EmbeddingError, EmptyInput
from resume_match.storage import DuckDBStorage


class FakeEmbeddingClient:
    """Stands in for EmbeddingClient; vectors and failures are keyed by substring."""

    def __init__(self) -> None:
        self.vectors: dict[str, list[float]] = {}
        self.failures: dict[str, EmbeddingError] = {}
        self.default: list[float] = [1.0, 0.0, 0.0]
        self.calls: list[str] = []

    def embed(self, text: str) -> list[float]:
        if not text or not text.strip():
            raise EmptyInput()
        self.calls.append(text)
        for marker, exc in self.failures.items():
            if marker in text:
                raise exc
        for marker, vector in self.vectors.items():
            if marker in text:
                return list(vector)
        return list(self.default)

    def try_embed(self, text: str) -> list[float]:
        try:
            return self.embed(text)
        except EmbeddingError:
            return []

    def close(self) -> None:
        return None

    def __enter__(self) -> FakeEmbeddingClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


@pytest.fixture()
def fake_client() -> FakeEmbeddingClient:
    return FakeEmbeddingClient()


@pytest.fixture()
def db_path(tmp_path: Path) -> str:
    return str(tmp_path / "documents.duckdb")


@pytest.fixture()
def storage(db_path: str):
    store = DuckDBStorage(db_path)
    yield store
    store.close()
