"""Tests for the embedding client."""

from __future__ import annotations

import json
import logging
from typing import Any, Callable

import httpx
import pytest

from resume_match.cache import EmbeddingCache
from resume_match.embeddings import EmbeddingClient
from resume_match.errors import EmbeddingRequestFailed, EmptyInput, RateLimitExceeded
from resume_match.indexing.normalizer import normalize


ENDPOINT = "https://embeddings.test/v1/embeddings"


# ---------------------------------------------------------------------------
# Mock helpers
# ---------------------------------------------------------------------------


def _ok(vector: list[float]) -> httpx.Response:
    return httpx.Response(200, json={"data": [{"embedding": vector}]})


class _Endpoint:
    """Records requests and replies with queued responses (last one repeats)."""

    def __init__(self, *responses: httpx.Response | Callable[[httpx.Request], Any]) -> None:
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        index = min(len(self.requests), len(self.responses)) - 1
        response = self.responses[index]
        if isinstance(response, httpx.Response):
            return httpx.Response(
                response.status_code,
                content=response.content,
                headers=response.headers,
            )
        return response(request)

    @property
    def bodies(self) -> list[dict[str, Any]]:
        return [json.loads(request.content) for request in self.requests]


def _client(endpoint: _Endpoint, sleeps: list[float] | None = None, **kwargs: Any) -> EmbeddingClient:
    recorded = sleeps if sleeps is not None else []
    kwargs.setdefault("dim", 4)
    return EmbeddingClient(
        api_key="test-key",
        model="test-model",
        endpoint=ENDPOINT,
        http_client=httpx.Client(transport=httpx.MockTransport(endpoint)),
        sleep=recorded.append,
        **kwargs,
    )


# ---------------------------------------------------------------------------
# Unit tests
# ---------------------------------------------------------------------------


def test_embed_posts_model_and_normalized_input() -> None:
    endpoint = _Endpoint(_ok([0.1, 0.2, 0.3, 0.4]))
    client = _client(endpoint)
    text = "Jane Doe\nSKILLS\nPython, SQL\nSome unrelated trailing line"

    vector = client.embed(text)

    assert vector == [0.1, 0.2, 0.3, 0.4]
    assert endpoint.bodies == [{"model": "test-model", "input": normalize(text)}]
    assert endpoint.requests[0].headers["Authorization"] == "Bearer test-key"


def test_cache_hit_skips_network() -> None:
    endpoint = _Endpoint(_ok([1.0, 0.0, 0.0, 0.0]))
    client = _client(endpoint)

    first = client.embed("Python developer")
    second = client.embed("Python developer")

    assert first == second
    assert len(endpoint.requests) == 1


def test_cache_key_only_looks_at_first_200_chars() -> None:
    endpoint = _Endpoint(_ok([1.0, 0.0, 0.0, 0.0]))
    client = _client(endpoint)
    prefix = "p" * 200

    client.embed(prefix + " first ending")
    client.embed(prefix + " second ending")

    assert len(endpoint.requests) == 1


def test_injected_cache_is_used() -> None:
    cache = EmbeddingCache(capacity=1)
    endpoint = _Endpoint(_ok([1.0, 0.0, 0.0, 0.0]))
    client = _client(endpoint, cache=cache)

    client.embed("first text")
    client.embed("second text")

    assert len(cache) == 1
    assert client.cache is cache


def test_empty_input_fails_fast() -> None:
    endpoint = _Endpoint(_ok([1.0]))
    client = _client(endpoint)

    with pytest.raises(EmptyInput):
        client.embed("   \n\t ")

    assert endpoint.requests == []


def test_rate_limit_retries_with_exponential_backoff() -> None:
    limited = httpx.Response(429)
    endpoint = _Endpoint(limited, limited, limited, _ok([1.0, 2.0, 3.0, 4.0]))
    sleeps: list[float] = []
    client = _client(endpoint, sleeps)

    vector = client.embed("resume text")

    assert vector == [1.0, 2.0, 3.0, 4.0]
    assert sleeps == [2.0, 4.0, 8.0]
    assert len(endpoint.requests) == 4


def test_rate_limit_exhausted_raises() -> None:
    endpoint = _Endpoint(httpx.Response(429))
    sleeps: list[float] = []
    client = _client(endpoint, sleeps)

    with pytest.raises(RateLimitExceeded) as excinfo:
        client.embed("resume text")

    assert excinfo.value.attempts == 4
    assert sleeps == [2.0, 4.0, 8.0]
    assert len(endpoint.requests) == 4


def test_other_errors_are_not_retried() -> None:
    endpoint = _Endpoint(httpx.Response(500))
    sleeps: list[float] = []
    client = _client(endpoint, sleeps)

    with pytest.raises(EmbeddingRequestFailed) as excinfo:
        client.embed("resume text")

    assert excinfo.value.status_code == 500
    assert sleeps == []
    assert len(endpoint.requests) == 1


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, json={"data": []}),
        httpx.Response(200, json={"data": [{"embedding": []}]}),
        httpx.Response(200, json={"data": [{"embedding": ["a", "b"]}]}),
        httpx.Response(200, content=b"not json"),
    ],
)
def test_malformed_responses_fail(response: httpx.Response) -> None:
    client = _client(_Endpoint(response))

    with pytest.raises(EmbeddingRequestFailed) as excinfo:
        client.embed("resume text")

    assert excinfo.value.status_code is None


def test_transport_error_is_reported_as_request_failure() -> None:
    def _boom(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(_Endpoint(_boom))

    with pytest.raises(EmbeddingRequestFailed):
        client.embed("resume text")
    assert client.try_embed("resume text") == []


def test_try_embed_returns_empty_vector_on_failure() -> None:
    client = _client(_Endpoint(httpx.Response(503)))

    assert client.try_embed("resume text") == []
    assert client.try_embed("") == []


def test_dimension_mismatch_is_accepted_with_warning(caplog) -> None:
    caplog.set_level(logging.WARNING, logger="resume_match.embeddings")
    endpoint = _Endpoint(_ok([0.5, 0.5]))
    client = _client(endpoint, dim=4)

    vector = client.embed("resume text")

    assert vector == [0.5, 0.5]
    assert "Dimension mismatch" in caplog.text
    # Still cached.
    client.embed("resume text")
    assert len(endpoint.requests) == 1


def test_switch_model_clears_cache_only_on_change() -> None:
    endpoint = _Endpoint(_ok([1.0, 0.0, 0.0, 0.0]))
    client = _client(endpoint)
    client.embed("resume text")

    client.switch_model("test-model", dim=4)
    assert len(client.cache) == 1

    client.switch_model("text-embedding-3-large")
    assert len(client.cache) == 0
    assert client.dim == 3072
    assert client.model_tag == "text-embedding-3-large:3072"


def test_env_overrides(monkeypatch) -> None:
    monkeypatch.setenv("RESUME_MATCH_EMBEDDING_MODEL", "custom-model")
    monkeypatch.setenv("RESUME_MATCH_EMBEDDING_DIM", "256")
    monkeypatch.setenv("RESUME_MATCH_EMBEDDING_ENDPOINT", ENDPOINT)
    endpoint = _Endpoint(_ok([1.0] * 256))

    client = EmbeddingClient(
        http_client=httpx.Client(transport=httpx.MockTransport(endpoint))
    )
    client.embed("resume text")

    assert client.model == "custom-model"
    assert client.dim == 256
    assert str(endpoint.requests[0].url) == ENDPOINT
    assert endpoint.bodies[0]["model"] == "custom-model"


def test_default_dimension_follows_model(monkeypatch) -> None:
    monkeypatch.delenv("RESUME_MATCH_EMBEDDING_DIM", raising=False)
    client = EmbeddingClient(
        model="text-embedding-3-large",
        http_client=httpx.Client(transport=httpx.MockTransport(_Endpoint(_ok([1.0])))),
    )

    assert client.dim == 3072


def test_missing_api_key_raises(monkeypatch) -> None:
    monkeypatch.delenv("RESUME_MATCH_API_KEY", raising=False)
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)

    with pytest.raises(ValueError, match="RESUME_MATCH_API_KEY"):
        EmbeddingClient()
