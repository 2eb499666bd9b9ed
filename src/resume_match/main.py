import logging
from pathlib import Path
from typing import Annotated

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from typer import Exit, Option, Typer

from .config import resolve_db_path
from .embeddings import EmbeddingClient
from .indexing import EmbeddingPipeline
from .models import MatchResult
from .search import JOB_TOP_K, PEER_TOP_K, find_similar_resumes, match_job_description
from .storage import DuckDBStorage

app = Typer(help="Semantic resume-to-job matching.")
console = Console()

DbPathOption = Annotated[
    str | None,
    Option("--db-path", help="DuckDB file (defaults to RESUME_MATCH_DB_PATH)."),
]
OwnerOption = Annotated[str, Option("--owner", "-o", help="Owner of the documents.")]


def get_client() -> EmbeddingClient:
    return EmbeddingClient()


def _require_client() -> EmbeddingClient:
    try:
        return get_client()
    except ValueError as exc:
        console.print(f"[bold red]Embedding unavailable:[/] {exc}")
        raise Exit(code=1) from exc


def _open_storage(db_path: str | None) -> DuckDBStorage:
    return DuckDBStorage(resolve_db_path(db_path))


def _print_results(title: str, results: list[MatchResult]) -> None:
    if not results:
        console.print(
            Panel("No scored documents.", title=title, border_style="bold yellow")
        )
        return
    table = Table(title=title)
    table.add_column("#", justify="right")
    table.add_column("Document")
    table.add_column("Filename")
    table.add_column("Match", justify="right")
    for index, result in enumerate(results, start=1):
        table.add_row(
            str(index),
            result.document_id,
            result.document.filename,
            f"{result.score * 100:.1f}%",
        )
    console.print(table)


@app.callback()
def main(
    verbose: Annotated[
        bool, Option("--verbose", "-v", help="Enable debug logging.")
    ] = False,
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
def add(
    owner: OwnerOption,
    file: Annotated[Path, Option("--file", "-f", help="Plain-text document to add.")],
    filename: Annotated[
        str | None, Option("--filename", help="Display name (defaults to file name).")
    ] = None,
    db_path: DbPathOption = None,
) -> None:
    """Store a document and generate its embedding."""
    if not file.is_file():
        console.print(f"[bold red]No such file:[/] {file}")
        raise Exit(code=1)
    text = file.read_text(encoding="utf-8", errors="replace")
    storage = _open_storage(db_path)
    try:
        try:
            client = get_client()
        except ValueError as exc:
            console.print(f"[bold yellow]Embedding unavailable:[/] {exc}")
            document = storage.add_document(
                owner_id=owner, filename=filename or file.name, text=text
            )
        else:
            with client:
                document = EmbeddingPipeline(storage, client).ingest(
                    owner_id=owner, filename=filename or file.name, text=text
                )
    finally:
        storage.close()
    state = "embedded" if document.has_embedding else "stored without embedding"
    console.print(f"[bold green]Added[/] {document.filename} ({document.id}), {state}.")


@app.command()
def regenerate(
    owner: Annotated[
        str | None, Option("--owner", "-o", help="Owner of the documents.")
    ] = None,
    doc_id: Annotated[
        str | None, Option("--doc-id", "-d", help="Retry a single document.")
    ] = None,
    only_missing: Annotated[
        bool, Option("--only-missing", help="Skip documents that already have one.")
    ] = False,
    no_throttle: Annotated[
        bool, Option("--no-throttle", help="Do not wait between requests.")
    ] = False,
    db_path: DbPathOption = None,
) -> None:
    """Regenerate embeddings for an owner's documents, or for one document."""
    if not owner and not doc_id:
        console.print("[bold red]Pass --owner or --doc-id.[/]")
        raise Exit(code=1)
    client = _require_client()
    storage = _open_storage(db_path)
    try:
        with client:
            pipeline = EmbeddingPipeline(storage, client, throttle=not no_throttle)
            if doc_id:
                try:
                    embedded = pipeline.regenerate_document(doc_id)
                except ValueError as exc:
                    console.print(f"[bold red]Document not found:[/] {doc_id}")
                    raise Exit(code=1) from exc
            else:
                with console.status("Generating embeddings..."):
                    result = pipeline.regenerate(owner, only_missing=only_missing)
    finally:
        storage.close()

    if doc_id:
        if embedded:
            console.print(f"[bold green]Embedded[/] {doc_id}.")
        else:
            console.print(f"[bold yellow]No embedding stored for[/] {doc_id}.")
            raise Exit(code=1)
        return

    content = (
        f"Succeeded: {result.succeeded}\n"
        f"Failed: {result.failed}\n"
        f"Skipped (empty): {result.skipped}\n"
        f"Total: {result.total}"
    )
    if result.failed_ids:
        content += "\nFailed documents:\n- " + "\n- ".join(result.failed_ids)
    console.print(
        Panel(
            content,
            title="Embedding regeneration",
            title_align="left",
            border_style="bold green" if result.failed == 0 else "bold yellow",
        )
    )


@app.command()
def match(
    owner: OwnerOption,
    job_file: Annotated[
        Path, Option("--job-file", "-j", help="Job description text file.")
    ],
    top_k: Annotated[int, Option("--top-k", "-k")] = JOB_TOP_K,
    db_path: DbPathOption = None,
) -> None:
    """Rank an owner's resumes against a job description."""
    if not job_file.is_file():
        console.print(f"[bold red]No such file:[/] {job_file}")
        raise Exit(code=1)
    job_text = job_file.read_text(encoding="utf-8", errors="replace")
    client = _require_client()
    storage = _open_storage(db_path)
    try:
        corpus = storage.fetch_documents(owner)
        with client:
            results = match_job_description(job_text, corpus, client, top_k)
    finally:
        storage.close()
    _print_results("Job description matches", results)


@app.command()
def similar(
    doc_id: Annotated[str, Option("--doc-id", "-d", help="Resume to compare.")],
    top_k: Annotated[int, Option("--top-k", "-k")] = PEER_TOP_K,
    db_path: DbPathOption = None,
) -> None:
    """List the resumes most similar to a stored resume."""
    storage = _open_storage(db_path)
    try:
        document = storage.get_document(doc_id)
        if document is None:
            console.print(f"[bold red]Document not found:[/] {doc_id}")
            raise Exit(code=1)
        corpus = storage.fetch_documents(document.owner_id)
    finally:
        storage.close()
    results = find_similar_resumes(document, corpus, top_k)
    _print_results(f"Similar to {document.filename or doc_id}", results)


@app.command("list")
def list_documents(owner: OwnerOption, db_path: DbPathOption = None) -> None:
    """List an owner's documents and whether they are embedded."""
    storage = _open_storage(db_path)
    try:
        documents = storage.fetch_documents(owner)
    finally:
        storage.close()
    table = Table(title=f"Documents for {owner}")
    table.add_column("Document")
    table.add_column("Filename")
    table.add_column("Characters", justify="right")
    table.add_column("Embedding")
    for document in documents:
        table.add_row(
            document.id,
            document.filename,
            str(len(document.text)),
            f"{len(document.embedding)} dims" if document.embedding else "missing",
        )
    console.print(table)


@app.command()
def serve(
    host: Annotated[str, Option("--host")] = "127.0.0.1",
    port: Annotated[int, Option("--port")] = 8000,
) -> None:
    """Run the HTTP API."""
    from .server import run_server

    run_server(host=host, port=port)
