# src/recall/cli/app.py
"""Command-line interface for Recall.

This module provides a thin Typer wrapper around the commands layer.
Each command:
1. Parses args (via Typer)
2. Creates progress callbacks (for Rich display)
3. Calls commands module functions
4. Renders results with Rich
"""

from __future__ import annotations

from typing import Any

try:
    import typer
    from rich.console import Console
    from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn
    from rich.table import Table
except ImportError as e:
    raise SystemExit(
        "CLI requires additional dependencies.\nInstall with: pip install recall-rag[cli]"
    ) from e

from recall import __version__
from recall.commands import (
    IngestCommandResult,
    ProgressUpdate,
    config_cmd,
    ingest,
    query,
    remove,
    sources,
)
from recall.config import load_env_file
from recall.log import configure_logging
from recall.models import SourceType

app = typer.Typer(
    name="recall",
    help="Recall - owner-scoped retrieval context engine.",
    no_args_is_help=True,
)
console = Console()


def version_callback(value: bool) -> None:
    if value:
        console.print(f"recall {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Log pipeline activity to stderr.",
    ),
    log_file: str = typer.Option(
        None,
        "--log-file",
        help="Also write logs to this file.",
    ),
) -> None:
    """Recall - owner-scoped retrieval context engine."""
    load_env_file()
    if verbose or log_file:
        configure_logging("DEBUG" if verbose else "INFO", log_file)


def _scope_option() -> Any:
    return typer.Option(..., "--scope", "-s", help="Owner scope (tenant/user partition)")


def _data_dir_option() -> Any:
    return typer.Option(
        None,
        "--data-dir",
        "-d",
        help="Data directory (default: from settings)",
    )


def _config_option() -> Any:
    return typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file",
    )


def _plain_option() -> Any:
    return typer.Option(
        False,
        "--plain",
        help="Plain output (no colors/formatting)",
    )


@app.command(name="ingest")
def ingest_cmd(
    path: str = typer.Argument(..., help="File or directory to ingest"),
    scope: str = _scope_option(),
    source_id: str = typer.Option(
        None,
        "--source-id",
        help="Source identifier (single file only; default: absolute path)",
    ),
    source_type: SourceType = typer.Option(
        SourceType.FILE,
        "--type",
        "-t",
        help="Source type recorded for the text",
    ),
    content_type: str = typer.Option(
        None,
        "--content-type",
        help="MIME type override (single file only)",
    ),
    max_chunk_size: int = typer.Option(
        None,
        "--max-chunk-size",
        help="Maximum chunk size in characters",
    ),
    data_dir: str = _data_dir_option(),
    config_file: str = _config_option(),
    plain: bool = _plain_option(),
    no_progress: bool = typer.Option(
        False,
        "--no-progress",
        help="Disable progress bars",
    ),
) -> None:
    """Ingest a file or directory into a scope."""
    show_progress = not plain and not no_progress and console.is_terminal
    kwargs = {
        "path": path,
        "owner_scope": scope,
        "source_id": source_id,
        "source_type": source_type,
        "content_type": content_type,
        "max_chunk_size": max_chunk_size,
        "data_dir": data_dir,
        "config_path": config_file,
    }

    if show_progress:
        with Progress(
            SpinnerColumn(),
            TextColumn("[bold]{task.fields[stage]:>12}", justify="right"),
            BarColumn(bar_width=20),
            TextColumn("{task.description}", style="dim"),
            console=console,
        ) as progress:
            stage_task = progress.add_task("", total=None, stage="")

            def on_progress(update: ProgressUpdate) -> None:
                progress.update(
                    stage_task,
                    stage=update.stage.value,
                    description=update.message or f"({update.current}/{update.total})",
                    total=update.total or None,
                    completed=update.current,
                )

            result = ingest.ingest(**kwargs, on_progress=on_progress)
    else:
        result = ingest.ingest(**kwargs)

    _render_ingest_result(result, plain)


def _render_ingest_result(result: IngestCommandResult, plain: bool) -> None:
    """Render ingest result to console."""
    if not result.success:
        console.print(f"[red]Error: {result.error}[/red]")
        raise typer.Exit(1)

    for file_result in result.file_results:
        if file_result.error:
            line = f"Failed {file_result.filepath}: {file_result.error}"
            console.print(line if plain else f"[red]{line}[/red]")
        elif file_result.partial:
            line = (
                f"Partially ingested {file_result.filepath}: {file_result.stored}/"
                f"{file_result.chunks} chunks, missing {file_result.failed_ordinals}"
            )
            if file_result.aborted:
                line += " (provider unavailable)"
            console.print(line if plain else f"[yellow]{line}[/yellow]")
        elif not plain:
            console.print(f"[dim]Ingested {file_result.filepath}[/dim]")

    summary = (
        f"Ingested {result.files_processed} files "
        f"({result.total_stored}/{result.total_chunks} chunks stored)"
    )
    if plain:
        console.print(summary)
    else:
        console.print()
        console.print(f"[green]{summary}[/green]")
        if result.error:
            console.print(f"[dim]{result.error}[/dim]")

    if result.files_failed > 0 and result.files_processed == 0:
        raise typer.Exit(1)


@app.command(name="query")
def query_cmd(
    question: str = typer.Argument(..., help="Text to find context for"),
    scope: str = _scope_option(),
    k: int = typer.Option(
        None,
        "--k",
        "-k",
        help="Number of results to return",
    ),
    min_similarity: float = typer.Option(
        None,
        "--min-similarity",
        "-m",
        help="Minimum cosine similarity in [-1, 1]",
    ),
    raw: bool = typer.Option(
        False,
        "--raw",
        "-r",
        help="List results instead of the prompt-ready context",
    ),
    max_chars: int = typer.Option(
        None,
        "--max-chars",
        help="Size limit for the rendered context",
    ),
    data_dir: str = _data_dir_option(),
    config_file: str = _config_option(),
    plain: bool = _plain_option(),
) -> None:
    """Retrieve the context most relevant to a query."""
    result = query.query(
        text=question,
        owner_scope=scope,
        k=k,
        min_similarity=min_similarity,
        raw=raw,
        max_chars=max_chars,
        data_dir=data_dir,
        config_path=config_file,
    )

    if not result.success:
        console.print(f"[red]Error: {result.error}[/red]")
        raise typer.Exit(1)

    if not result.results:
        console.print("No results found." if plain else "[yellow]No results found.[/yellow]")
        raise typer.Exit(0)

    if result.context is not None:
        console.print(result.context, markup=False, highlight=False)
        return

    for i, r in enumerate(result.results, 1):
        preview = r.text[:100].replace("\n", " ")
        if len(r.text) > 100:
            preview += "..."
        if plain:
            console.print(f"  [{i}] {r.source_type}/{r.source_id}#{r.ordinal} ({r.similarity:.3f})")
            console.print(f"      {preview}", markup=False)
        else:
            console.print(
                f"  [{i}] [cyan]{r.source_type}/{r.source_id}#{r.ordinal}[/cyan] "
                f"[dim](similarity: {r.similarity:.3f})[/dim]"
            )
            console.print(f"      {preview}", style="dim", markup=False)


@app.command(name="remove")
def remove_cmd(
    source_id: str = typer.Argument(..., help="Source identifier to remove"),
    scope: str = _scope_option(),
    source_type: SourceType = typer.Option(
        SourceType.FILE,
        "--type",
        "-t",
        help="Source type of the records",
    ),
    data_dir: str = _data_dir_option(),
    config_file: str = _config_option(),
    plain: bool = _plain_option(),
) -> None:
    """Remove every record of a source."""
    result = remove.remove(
        owner_scope=scope,
        source_type=source_type,
        source_id=source_id,
        data_dir=data_dir,
        config_path=config_file,
    )

    if not result.success:
        console.print(f"[red]Error: {result.error}[/red]")
        raise typer.Exit(1)

    line = f"Removed {result.records_removed} records of {result.source_type}/{source_id}"
    console.print(line if plain else f"[green]{line}[/green]")


@app.command(name="sources")
def sources_cmd(
    scope: str = _scope_option(),
    data_dir: str = _data_dir_option(),
    config_file: str = _config_option(),
    plain: bool = _plain_option(),
) -> None:
    """List indexed sources of a scope."""
    result = sources.list_sources(
        owner_scope=scope,
        data_dir=data_dir,
        config_path=config_file,
    )

    if not result.success:
        console.print(f"[red]Error: {result.error}[/red]")
        raise typer.Exit(1)

    if not result.sources:
        console.print("No sources indexed." if plain else "[dim]No sources indexed.[/dim]")
        raise typer.Exit(0)

    if plain:
        console.print(f"Indexed sources ({len(result.sources)}):")
        for source in result.sources:
            console.print(
                f"  {source.source_type}/{source.source_id} ({source.record_count} records)"
            )
    else:
        table = Table(title=f"Indexed Sources in {scope} ({len(result.sources)})")
        table.add_column("Type", style="magenta")
        table.add_column("Source", style="cyan")
        table.add_column("Records", justify="right")

        for source in result.sources:
            table.add_row(source.source_type, source.source_id, str(source.record_count))

        console.print(table)


@app.command(name="config")
def config_cmd_handler(
    config_file: str = _config_option(),
) -> None:
    """Show current configuration settings."""
    result = config_cmd.config(config_path=config_file)

    if not result.success:
        console.print(f"[red]Error: {result.error}[/red]")
        raise typer.Exit(1)

    table = Table(title="Recall Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    table.add_column("Source", style="dim")

    from_file = "yaml" if result.config_path else "default"
    table.add_row("provider", result.provider, from_file)
    if result.provider == "litellm":
        table.add_row("embedding_model", result.embedding_model or "(not set)", from_file)
        table.add_row("llm_model", result.llm_model or "(not set)", from_file)
    table.add_row("data_dir", result.data_dir, from_file)
    table.add_row("storage_backend", result.storage_backend, from_file)

    table.add_row("", "", "")
    for setting in result.settings:
        table.add_row(setting.name, setting.value, setting.source)

    console.print(table)

    if result.config_path:
        console.print(f"\n[dim]Config file: {result.config_path}[/dim]")
    else:
        console.print("\n[dim]No config file found. Using env vars / defaults.[/dim]")

    console.print("\n[dim]Precedence: env var > yaml settings > default[/dim]")
