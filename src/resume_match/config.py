"""
Configuration helpers for the document store and the embedding endpoint.
"""

from __future__ import annotations

import os
from pathlib import Path


DEFAULT_DB_PATH = "~/.resume_match/documents.duckdb"
ENV_DB_PATH = "RESUME_MATCH_DB_PATH"

DEFAULT_EMBEDDING_MODEL = "text-embedding-3-small"
DEFAULT_EMBEDDING_ENDPOINT = "https://models.inference.ai.azure.com/embeddings"
ENV_EMBEDDING_MODEL = "RESUME_MATCH_EMBEDDING_MODEL"
ENV_EMBEDDING_DIM = "RESUME_MATCH_EMBEDDING_DIM"
ENV_EMBEDDING_ENDPOINT = "RESUME_MATCH_EMBEDDING_ENDPOINT"
ENV_API_KEY = "RESUME_MATCH_API_KEY"
ENV_API_KEY_FALLBACK = "GITHUB_TOKEN"

MODEL_DIMENSIONS: dict[str, int] = {
    "text-embedding-3-small": 1536,
    "text-embedding-3-large": 3072,
    "text-embedding-ada-002": 1536,
}
_FALLBACK_DIMENSION = 1536


def resolve_db_path(override_path: str | None = None) -> str:
    """
    Resolve the DuckDB path from CLI override, env var, or default.

    Precedence:
    1) explicit override_path
    2) RESUME_MATCH_DB_PATH
    3) default path
    """
    raw_path = override_path or os.getenv(ENV_DB_PATH) or DEFAULT_DB_PATH
    resolved = Path(raw_path).expanduser().resolve()
    resolved.parent.mkdir(parents=True, exist_ok=True)
    return str(resolved)


def expected_dimension(model: str) -> int:
    """Return the output dimensionality of a known embedding model."""
    return MODEL_DIMENSIONS.get(model, _FALLBACK_DIMENSION)


def resolve_api_key(override: str | None = None) -> str:
    """Return the endpoint token, raising ``ValueError`` when none is set."""
    key = override or os.getenv(ENV_API_KEY) or os.getenv(ENV_API_KEY_FALLBACK)
    if not key:
        raise ValueError(
            f"{ENV_API_KEY} not found. "
            f"Provide api_key or set {ENV_API_KEY} (or {ENV_API_KEY_FALLBACK})."
        )
    return key
