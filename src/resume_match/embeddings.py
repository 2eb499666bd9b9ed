"""
Embedding client for resume and job-description vectors.

Talks to an OpenAI-compatible ``/embeddings`` endpoint over HTTP, normalizes
input text, retries on rate limiting and memoizes results in an injected
``EmbeddingCache``.
"""

from __future__ import annotations

import logging
import os
import time
from numbers import Real
from typing import Any, Callable

import httpx

from .cache import EmbeddingCache, make_cache_key
from .config import (
    DEFAULT_EMBEDDING_ENDPOINT,
    DEFAULT_EMBEDDING_MODEL,
    ENV_API_KEY,
    ENV_API_KEY_FALLBACK,
    ENV_EMBEDDING_DIM,
    ENV_EMBEDDING_ENDPOINT,
    ENV_EMBEDDING_MODEL,
    expected_dimension,
    resolve_api_key,
)
from .errors import (
    DimensionMismatch,
    EmbeddingError,
    EmbeddingRequestFailed,
    EmptyInput,
    RateLimitExceeded,
)
from .indexing.normalizer import normalize

logger = logging.getLogger(__name__)

_DEFAULT_MAX_RETRIES = 3
_DEFAULT_BACKOFF_BASE = 2.0
_DEFAULT_TIMEOUT = 30.0


class EmbeddingClient:
    """Generate text embeddings through a remote embedding endpoint."""

    def __init__(
        self,
        *,
        api_key: str | None = None,
        model: str | None = None,
        dim: int | None = None,
        endpoint: str | None = None,
        cache: EmbeddingCache | None = None,
        http_client: httpx.Client | None = None,
        sleep: Callable[[float], None] = time.sleep,
        max_retries: int = _DEFAULT_MAX_RETRIES,
        backoff_base: float = _DEFAULT_BACKOFF_BASE,
        timeout: float = _DEFAULT_TIMEOUT,
    ) -> None:
        self.model = model or os.getenv(ENV_EMBEDDING_MODEL, DEFAULT_EMBEDDING_MODEL)
        self.dim = dim or int(
            os.getenv(ENV_EMBEDDING_DIM, str(expected_dimension(self.model)))
        )
        self.endpoint = endpoint or os.getenv(
            ENV_EMBEDDING_ENDPOINT, DEFAULT_EMBEDDING_ENDPOINT
        )
        self.cache = cache if cache is not None else EmbeddingCache()
        self.max_retries = max_retries
        self.backoff_base = backoff_base
        self._sleep = sleep

        if http_client is not None:
            self._http = http_client
            self._owns_http = False
            self._api_key = (
                api_key or os.getenv(ENV_API_KEY) or os.getenv(ENV_API_KEY_FALLBACK)
            )
        else:
            self._api_key = resolve_api_key(api_key)
            self._http = httpx.Client(timeout=timeout)
            self._owns_http = True

    @property
    def model_tag(self) -> str:
        return f"{self.model}:{self.dim}"

    def switch_model(self, model: str, dim: int | None = None) -> None:
        """Point the client at another model, dropping cached vectors if it changed."""
        previous_tag = self.model_tag
        self.model = model
        self.dim = dim or expected_dimension(model)
        if self.model_tag != previous_tag:
            logger.info(
                "Embedding model changed from %s to %s; clearing cache",
                previous_tag,
                self.model_tag,
            )
            self.cache.clear()

    def embed(self, text: str) -> list[float]:
        """
        Embed *text*, raising an ``EmbeddingError`` subclass on failure.

        The cache key is derived from the raw text; the request body carries
        the normalized text.
        """
        if not text or not text.strip():
            raise EmptyInput()

        key = make_cache_key(text, self.model_tag)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        vector = self._request(normalize(text))
        try:
            self.check_dimension(vector)
        except DimensionMismatch as exc:
            # Accepted anyway; scoring rejects mismatched pairs on its own.
            logger.warning("%s Model %s; keeping the vector.", exc, self.model)

        self.cache.put(key, vector)
        return vector

    def try_embed(self, text: str) -> list[float]:
        """Embed *text*, returning an empty list instead of raising."""
        try:
            return self.embed(text)
        except EmptyInput:
            logger.info("Skipping embedding for empty text")
        except EmbeddingError as exc:
            logger.warning("No embedding produced: %s", exc)
        return []

    def check_dimension(self, vector: list[float]) -> None:
        if len(vector) != self.dim:
            raise DimensionMismatch(expected=self.dim, actual=len(vector))

    def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> EmbeddingClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _request(self, text: str) -> list[float]:
        payload = {"model": self.model, "input": text}
        attempt = 0
        while True:
            try:
                response = self._http.post(
                    self.endpoint, json=payload, headers=self._headers()
                )
            except httpx.HTTPError as exc:
                raise EmbeddingRequestFailed(f"Embedding request error: {exc}") from exc

            if response.status_code == 429:
                if attempt >= self.max_retries:
                    raise RateLimitExceeded(attempts=attempt + 1)
                delay = self.backoff_base * (2**attempt)
                logger.warning(
                    "Embedding endpoint rate limited; retry %d/%d in %.1fs",
                    attempt + 1,
                    self.max_retries,
                    delay,
                )
                self._sleep(delay)
                attempt += 1
                continue

            if not response.is_success:
                raise EmbeddingRequestFailed(
                    "Embedding request failed", status_code=response.status_code
                )
            return self._parse_vector(response)

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        return headers

    @staticmethod
    def _parse_vector(response: httpx.Response) -> list[float]:
        try:
            body = response.json()
            raw = body["data"][0]["embedding"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise EmbeddingRequestFailed(
                f"Malformed embedding response: {exc!r}"
            ) from exc

        if not isinstance(raw, list) or not raw:
            raise EmbeddingRequestFailed("Embedding response contained no vector")
        if not all(isinstance(v, Real) and not isinstance(v, bool) for v in raw):
            raise EmbeddingRequestFailed("Embedding vector contains non-numeric values")
        return [float(v) for v in raw]
