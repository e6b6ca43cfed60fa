"""CLI interface for docrag."""

import json
import mimetypes
import os
from pathlib import Path

import typer
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from ....common.exception_handler import format_exception_json
from ....composition.container import build_pipeline
from ....config.logging import setup_logging
from ....config.settings import settings
from ....core.domain import ExtractedDocument, QueryAnswer, QueryOptions
from ....core.domain.exceptions import DocumentNotFoundError
from ....core.services.rag_service import RAGPipeline

app = typer.Typer(
    name="docrag",
    help="docrag - ask questions about your documents",
    add_completion=False,
)

console = Console(legacy_windows=False)

# Determine if we're in debug mode (shows full stack traces)
DEBUG_MODE = os.getenv("DEBUG", "false").lower() == "true"


def handle_cli_error(exc: Exception) -> None:
    """Handle and display errors in CLI with structured format.

    In debug mode, shows full JSON error details.
    In normal mode, shows a user-friendly message with error code.

    Args:
        exc: The exception to handle.
    """
    error_data = format_exception_json(exc, include_trace=DEBUG_MODE)

    if DEBUG_MODE:
        console.print(
            Panel(
                json.dumps(error_data, indent=2, default=str),
                title="[bold red]Error Details[/]",
                border_style="red",
            )
        )
    else:
        error_type = error_data["error"]["type"]
        error_msg = error_data["error"]["message"]
        error_code = error_data["error"].get("code", "UNKNOWN")

        console.print(f"\n[red]Error [{error_code}]:[/] {error_msg}")
        console.print(f"[dim]Type: {error_type}[/]")
        console.print("[dim]Set DEBUG=true for full details[/]")


def get_pipeline() -> RAGPipeline:
    """Build the pipeline from the environment settings."""
    setup_logging(settings.log_level, json_format=settings.log_json)
    return build_pipeline(settings)


def _load_pipeline() -> RAGPipeline:
    try:
        return get_pipeline()
    except Exception as exc:
        handle_cli_error(exc)
        raise typer.Exit(1)


def _print_answer(answer: QueryAnswer, show_context: bool) -> None:
    if not answer.success:
        console.print(f"[red]Error [{answer.error_code or 'UNKNOWN'}]:[/] {answer.error}")
        return

    console.print(Panel(Markdown(answer.suggestion or ""), title="Answer", border_style="cyan"))
    console.print(f"[dim]Confidence: {answer.confidence:.2f}[/]")

    if answer.sources:
        console.print("[dim]Sources:[/]")
        for source in answer.sources:
            console.print(f"  [dim]{source.filename} ({source.similarity:.3f})[/]")

    if show_context and answer.context:
        for result in answer.context:
            console.print(
                Panel(
                    result.chunk_text,
                    title=f"{result.metadata.filename} #{result.chunk_index}",
                    subtitle=f"{result.similarity:.3f}",
                    border_style="dim",
                )
            )


@app.command()
def ingest(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="UTF-8 text file"),
    document_id: str | None = typer.Option(None, "--id", help="Replace this document id"),
    mimetype: str | None = typer.Option(None, help="MIME type (guessed from name)"),
) -> None:
    """Index a plain-text document."""
    pipeline = _load_pipeline()

    document = ExtractedDocument(
        text=path.read_text(encoding="utf-8", errors="replace"),
        filename=path.name,
        mimetype=mimetype or mimetypes.guess_type(path.name)[0] or "text/plain",
        size=path.stat().st_size,
    )

    with console.status(f"[bold green]Indexing {path.name}...[/]"):
        result = pipeline.ingest(document, document_id=document_id)

    if not result.success:
        console.print(f"[red]Error [{result.error_code or 'UNKNOWN'}]:[/] {result.error}")
        raise typer.Exit(1)

    console.print(
        f"[green]Indexed {result.filename}[/] as [bold]{result.document_id}[/] "
        f"({result.chunk_count} chunks)"
    )


@app.command()
def ask(
    question: str = typer.Argument(..., help="Question about the indexed documents"),
    max_results: int = typer.Option(settings.top_k_results, "--max-results", "-k"),
    threshold: float = typer.Option(settings.similarity_threshold, "--threshold", "-t"),
    no_context: bool = typer.Option(False, "--no-context", help="Omit retrieved chunks"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw answer as JSON"),
) -> None:
    """Ask a single question and get an answer."""
    pipeline = _load_pipeline()

    try:
        options = QueryOptions(
            max_results=max_results, threshold=threshold, include_context=not no_context
        )
    except Exception as exc:
        handle_cli_error(exc)
        raise typer.Exit(1)

    with console.status("[bold green]Searching...[/]"):
        answer = pipeline.ask(question, options)

    if as_json:
        console.print_json(json.dumps(answer.to_dict(), ensure_ascii=False))
    else:
        _print_answer(answer, show_context=not no_context)

    if not answer.success:
        raise typer.Exit(1)


@app.command()
def chat() -> None:
    """Start an interactive question session."""
    console.print(
        Panel.fit(
            "[bold cyan]docrag[/]\n"
            "[dim]Ask questions about your indexed documents[/]\n\n"
            "[dim]Type 'quit' or 'exit' to leave[/]",
            border_style="cyan",
        )
    )

    pipeline = _load_pipeline()
    history: list[dict[str, str]] = []

    while True:
        try:
            query = Prompt.ask("\n[bold cyan]You[/]")

            if query.lower() in ("quit", "exit", "q"):
                console.print("[dim]Goodbye![/]")
                break

            if not query.strip():
                continue

            history.append({"sender": "user", "message": query})
            with console.status("[bold green]Searching...[/]"):
                answer = pipeline.answer(history)

            console.print()
            _print_answer(answer, show_context=False)

        except KeyboardInterrupt:
            console.print("\n[dim]Goodbye![/]")
            break
        except Exception as exc:
            handle_cli_error(exc)


@app.command()
def stats() -> None:
    """Show document and chunk counts."""
    pipeline = _load_pipeline()
    store_stats = pipeline.stats()

    console.print("[bold]docrag status[/]\n")
    console.print(f"  Documents: {store_stats.document_count}")
    console.print(f"  Chunks: {store_stats.total_chunk_count}")
    console.print(f"  Embeddings: {store_stats.model_name}")

    if store_stats.document_count == 0:
        console.print("\n[yellow]Knowledge base is empty. Run 'docrag ingest FILE' first.[/]")


@app.command(name="list")
def list_documents() -> None:
    """List indexed documents."""
    pipeline = _load_pipeline()
    documents = pipeline.documents()

    if not documents:
        console.print("[yellow]No documents indexed.[/]")
        return

    table = Table(title="Indexed documents")
    table.add_column("ID", style="bold")
    table.add_column("File")
    table.add_column("Type", style="dim")
    table.add_column("Chunks", justify="right")
    table.add_column("Added", style="dim")

    for document in sorted(documents, key=lambda d: d.added_at):
        table.add_row(
            document.id,
            document.metadata.filename,
            document.metadata.mimetype,
            str(document.chunk_count),
            document.added_at,
        )
    console.print(table)


@app.command()
def delete(document_id: str = typer.Argument(..., help="Document id to remove")) -> None:
    """Remove a document from the index."""
    pipeline = _load_pipeline()

    try:
        if not pipeline.delete(document_id):
            raise DocumentNotFoundError(
                f"No document with id {document_id}", context={"document_id": document_id}
            )
    except Exception as exc:
        handle_cli_error(exc)
        raise typer.Exit(1)

    console.print(f"[green]Deleted {document_id}[/]")


@app.command()
def reset(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete every indexed document."""
    if not yes and not typer.confirm("Delete all indexed documents?"):
        raise typer.Abort()

    pipeline = _load_pipeline()
    try:
        pipeline.clear()
    except Exception as exc:
        handle_cli_error(exc)
        raise typer.Exit(1)
    console.print("[yellow]Vector store reset complete[/]")


if __name__ == "__main__":
    app()
