"""
CLI for ragent.

Provides commands to serve the HTTP API, ingest documents, inspect the
snapshot and ask the agent a single question.
"""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ragent.core.config import ConfigurationError, load_config
from ragent.infrastructure.snapshot_store import SnapshotStore
from ragent.services import (
    AgentRequest,
    IngestionResult,
    ServicesContainer,
    create_services,
)

# Initialize Rich Console
console = Console()

app = typer.Typer(
    name="ragent",
    help="Retrieval-augmented conversational agent",
    add_completion=False,
)


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to a YAML or JSON config file"
    ),
):
    """Load .env and remember the config path for subcommands."""
    load_dotenv()
    ctx.obj = {"config_path": config}


def _config_path(ctx: typer.Context) -> Optional[Path]:
    return (ctx.obj or {}).get("config_path")


def get_services(ctx: typer.Context) -> ServicesContainer:
    """Build services, exiting with status 1 on missing configuration."""
    try:
        return create_services(config_path=_config_path(ctx))
    except ConfigurationError as e:
        console.print(f"[bold red]Configuration error:[/bold red] {e}")
        raise typer.Exit(1)


def _print_ingestion_summary(result: IngestionResult) -> None:
    summary = Table.grid(padding=1)
    summary.add_column(style="bold")
    summary.add_column()
    summary.add_row("Total Files:", str(result.total_files))
    summary.add_row("Total Chunks:", str(result.total_chunks))
    summary.add_row("New Files:", str(result.new_files))
    summary.add_row("Changed Files:", str(result.changed_files))
    summary.add_row("Unchanged Files:", str(result.unchanged_files))
    summary.add_row("Deleted Files:", str(result.deleted_files))
    summary.add_row(
        "Snapshot Saved:",
        "[green]yes[/green]" if result.snapshot_saved else "[red]no[/red]",
    )
    summary.add_row("Duration:", f"{result.duration_seconds:.2f}s")
    if result.failed_files:
        summary.add_row("Failed Files:", f"[red]{len(result.failed_files)}[/red]")

    title = "Rebuild Complete" if result.rebuilt else "Ingestion Complete"
    console.print(
        Panel(
            summary,
            title=f"[bold green]{title}[/bold green]",
            border_style="green",
            expand=False,
        )
    )

    if result.failed_files:
        console.print("\n[bold red]Failed Files:[/bold red]")
        for f in result.failed_files[:5]:
            console.print(f"  - {f}")
        if len(result.failed_files) > 5:
            console.print(f"  ... and {len(result.failed_files) - 5} more")


@app.command()
def ingest(
    ctx: typer.Context,
    path: Optional[Path] = typer.Argument(
        None, help="Documents directory (default from RAGENT_INDEXING_DOCUMENTS_DIR)"
    ),
    rebuild: bool = typer.Option(
        False, "--rebuild", help="Ignore the snapshot and re-embed every document"
    ),
):
    """Ingest documents into the snapshot."""
    services = get_services(ctx)
    directory = path if path is not None else services.documents_dir
    if not directory.is_dir():
        console.print(f"[bold red]Error:[/bold red] Not a directory: {directory}")
        raise typer.Exit(1)

    console.print(f"[bold blue]Ingesting[/bold blue] {directory}...")

    async def run() -> IngestionResult:
        try:
            if rebuild:
                return await services.ingestion_service.force_rebuild(directory)
            return await services.ingestion_service.load_directory(directory)
        finally:
            await services.close()

    try:
        result = asyncio.run(run())
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    _print_ingestion_summary(result)


@app.command()
def info(ctx: typer.Context):
    """Show the snapshot file's status."""
    try:
        cfg = load_config(_config_path(ctx))
        store = SnapshotStore(cfg.indexing.snapshot_path)
        snapshot_info = asyncio.run(store.info())
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    table = Table(title="Vector Store", show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Path", str(store.path))
    table.add_row("Exists", "yes" if snapshot_info.exists else "no")
    if snapshot_info.exists:
        table.add_row("Size", f"{snapshot_info.size} bytes")
        table.add_row("Chunks", str(snapshot_info.document_count))
        table.add_row("Last Updated", snapshot_info.last_updated or "-")
    console.print(table)


@app.command()
def ask(
    ctx: typer.Context,
    message: str = typer.Argument(..., help="Message to send to the agent"),
    session: str = typer.Option("cli", "--session", "-s", help="Session id"),
):
    """Ingest documents, then answer one message."""
    services = get_services(ctx)

    async def run():
        try:
            await services.ingestion_service.load_directory(services.documents_dir)
            return await services.agent_service.process_message(
                AgentRequest(message=message, session_id=session)
            )
        finally:
            await services.close()

    try:
        response = asyncio.run(run())
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    console.print(Panel(response.reply, title="[bold green]Agent[/bold green]", expand=False))
    details = []
    if response.plugins_used:
        details.append(f"plugins: {', '.join(response.plugins_used)}")
    details.append(f"context retrieved: {'yes' if response.context_retrieved else 'no'}")
    console.print(f"[dim]{' | '.join(details)}[/dim]")


@app.command()
def serve(
    ctx: typer.Context,
    host: Optional[str] = typer.Option(
        None, "--host", help="HTTP host (default from RAGENT_SERVER_HOST or 0.0.0.0)"
    ),
    port: Optional[int] = typer.Option(
        None, "--port", "-p", help="HTTP port (default from RAGENT_SERVER_PORT or 3000)"
    ),
):
    """Start the HTTP API server."""
    import uvicorn

    from ragent.http_server import create_app

    services = get_services(ctx)
    actual_host = host if host is not None else services.config.server.host
    actual_port = port if port is not None else services.config.server.port

    try:
        app_instance = create_app(services)
        console.print(
            f"[bold green]Starting API server at http://{actual_host}:{actual_port}[/bold green]"
        )
        uvicorn.run(app_instance, host=actual_host, port=actual_port, log_level="info")
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
