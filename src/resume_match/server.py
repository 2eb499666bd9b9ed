"""
FastAPI server exposing document upload, embedding regeneration and matching.

Handlers are plain ``def`` functions so FastAPI runs them in its worker
threads; embedding requests and batch throttling block.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from .cache import EmbeddingCache
from .config import resolve_db_path
from .embeddings import EmbeddingClient
from .indexing import EmbeddingPipeline
from .models import Document, MatchResult
from .search import (
    DEFAULT_CONTEXT_CHARS,
    JOB_TOP_K,
    PEER_TOP_K,
    build_match_context,
    find_similar_resumes,
    is_matching_request,
    match_job_description,
)
from .storage import DuckDBStorage

logger = logging.getLogger(__name__)

app = FastAPI(title="resume_match", description="Semantic resume-to-job matching")

# Shared by every request handled by this process.
_cache = EmbeddingCache()


def get_client() -> EmbeddingClient:
    """Build an embedding client bound to the process-wide cache."""
    return EmbeddingClient(cache=_cache)


class DocumentRequest(BaseModel):
    """Request model for document upload."""

    owner_id: str
    filename: str
    text: str
    db_path: str | None = None


class RegenerateRequest(BaseModel):
    """Request model for batch embedding regeneration."""

    owner_id: str
    only_missing: bool = False
    throttle: bool = True
    db_path: str | None = None


class MatchRequest(BaseModel):
    """Request model for job-description matching."""

    owner_id: str
    job_description: str
    top_k: int = Field(default=JOB_TOP_K, ge=1)
    db_path: str | None = None


class ChatContextRequest(BaseModel):
    """Request model for building chat context from a message."""

    owner_id: str
    message: str
    top_k: int = Field(default=JOB_TOP_K, ge=1)
    max_chars: int = Field(default=DEFAULT_CONTEXT_CHARS, ge=1)
    db_path: str | None = None


def _document_summary(document: Document) -> dict:
    return {
        "id": document.id,
        "owner_id": document.owner_id,
        "filename": document.filename,
        "characters": len(document.text),
        "has_embedding": document.has_embedding,
    }


def _results_payload(results: list[MatchResult]) -> list[dict]:
    return [result.to_dict() for result in results]


@app.post("/api/documents")
def upload_document(request: DocumentRequest):
    """Store a document; the upload succeeds even if embedding fails."""
    try:
        storage = DuckDBStorage(resolve_db_path(request.db_path))
        try:
            try:
                client = get_client()
            except ValueError as exc:
                logger.warning("Embedding client unavailable: %s", exc)
                document = storage.add_document(
                    owner_id=request.owner_id,
                    filename=request.filename,
                    text=request.text,
                )
            else:
                with client:
                    document = EmbeddingPipeline(storage, client).ingest(
                        owner_id=request.owner_id,
                        filename=request.filename,
                        text=request.text,
                    )
        finally:
            storage.close()
        return _document_summary(document)
    except ValueError as exc:
        return JSONResponse({"error": str(exc)}, status_code=400)
    except Exception as exc:
        return JSONResponse({"error": str(exc)}, status_code=500)


@app.get("/api/documents")
def list_documents(owner_id: str, db_path: str | None = None):
    """List an owner's documents."""
    try:
        storage = DuckDBStorage(resolve_db_path(db_path))
        try:
            documents = storage.fetch_documents(owner_id)
        finally:
            storage.close()
        return {
            "owner_id": owner_id,
            "documents": [_document_summary(document) for document in documents],
        }
    except Exception as exc:
        return JSONResponse({"error": str(exc)}, status_code=500)


@app.delete("/api/documents/{doc_id}")
def delete_document(doc_id: str, db_path: str | None = None):
    """Delete a document."""
    try:
        storage = DuckDBStorage(resolve_db_path(db_path))
        try:
            deleted = storage.delete_document(doc_id)
        finally:
            storage.close()
        if not deleted:
            return JSONResponse({"error": "Document not found"}, status_code=404)
        return {"deleted": doc_id}
    except Exception as exc:
        return JSONResponse({"error": str(exc)}, status_code=500)


@app.post("/api/embeddings/regenerate")
def regenerate_embeddings(request: RegenerateRequest):
    """Regenerate embeddings and report succeeded / failed / total counts."""
    try:
        storage = DuckDBStorage(resolve_db_path(request.db_path))
        try:
            with get_client() as client:
                pipeline = EmbeddingPipeline(storage, client, throttle=request.throttle)
                result = pipeline.regenerate(
                    request.owner_id, only_missing=request.only_missing
                )
        finally:
            storage.close()
        return {"owner_id": request.owner_id, **result.to_dict()}
    except ValueError as exc:
        return JSONResponse({"error": str(exc)}, status_code=400)
    except Exception as exc:
        return JSONResponse({"error": str(exc)}, status_code=500)


@app.post("/api/match")
def match_resumes(request: MatchRequest):
    """Rank an owner's resumes against a job description."""
    try:
        storage = DuckDBStorage(resolve_db_path(request.db_path))
        try:
            corpus = storage.fetch_documents(request.owner_id)
        finally:
            storage.close()
        with get_client() as client:
            results = match_job_description(
                request.job_description, corpus, client, request.top_k
            )
        return {"owner_id": request.owner_id, "results": _results_payload(results)}
    except ValueError as exc:
        return JSONResponse({"error": str(exc)}, status_code=400)
    except Exception as exc:
        return JSONResponse({"error": str(exc)}, status_code=500)


@app.post("/api/documents/{doc_id}/embedding")
def regenerate_document_embedding(doc_id: str, db_path: str | None = None):
    """Retry the embedding of a single document."""
    try:
        storage = DuckDBStorage(resolve_db_path(db_path))
        try:
            if storage.get_document(doc_id) is None:
                return JSONResponse({"error": "Document not found"}, status_code=404)
            with get_client() as client:
                embedded = EmbeddingPipeline(storage, client).regenerate_document(doc_id)
        finally:
            storage.close()
        return {"document_id": doc_id, "embedded": embedded}
    except ValueError as exc:
        return JSONResponse({"error": str(exc)}, status_code=400)
    except Exception as exc:
        return JSONResponse({"error": str(exc)}, status_code=500)


@app.post("/api/chat/context")
def chat_context(request: ChatContextRequest):
    """Turn a chat message into ranked resume context when it reads like a job ad."""
    if not is_matching_request(request.message):
        return {"owner_id": request.owner_id, "matched": False, "context": "", "results": []}
    try:
        storage = DuckDBStorage(resolve_db_path(request.db_path))
        try:
            corpus = storage.fetch_documents(request.owner_id)
        finally:
            storage.close()
        with get_client() as client:
            results = match_job_description(
                request.message, corpus, client, request.top_k
            )
        return {
            "owner_id": request.owner_id,
            "matched": True,
            "context": build_match_context(results, max_chars=request.max_chars),
            "results": _results_payload(results),
        }
    except ValueError as exc:
        return JSONResponse({"error": str(exc)}, status_code=400)
    except Exception as exc:
        return JSONResponse({"error": str(exc)}, status_code=500)


@app.get("/api/documents/{doc_id}/similar")
def similar_resumes(doc_id: str, top_k: int = PEER_TOP_K, db_path: str | None = None):
    """Return the stored resumes most similar to *doc_id*."""
    try:
        storage = DuckDBStorage(resolve_db_path(db_path))
        try:
            document = storage.get_document(doc_id)
            if document is None:
                return JSONResponse({"error": "Document not found"}, status_code=404)
            corpus = storage.fetch_documents(document.owner_id)
        finally:
            storage.close()
        results = find_similar_resumes(document, corpus, top_k)
        return {"document_id": doc_id, "results": _results_payload(results)}
    except Exception as exc:
        return JSONResponse({"error": str(exc)}, status_code=500)


def run_server(host: str = "127.0.0.1", port: int = 8000):
    """Run the FastAPI server."""
    import uvicorn

    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run_server()
