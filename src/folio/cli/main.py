"""CLI entry point."""

import asyncio

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(name="folio", help="Content admin API with hosted image cleanup")
orphans_app = typer.Typer(help="Inspect and retry failed image deletions")
app.add_typer(orphans_app, name="orphans")
console = Console()


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", help="API server host"),
    port: int = typer.Option(5000, help="API server port"),
    reload: bool = typer.Option(False, help="Auto-reload on code changes"),
) -> None:
    """Start the Folio API server.

    Examples:
        folio serve
        folio serve --reload
        folio serve --host 127.0.0.1 --port 8080
    """
    import uvicorn

    console.print(f"[green]Starting Folio API server on {host}:{port}[/green]")
    console.print(f"[dim]Health:[/dim] http://{host}:{port}/api/health")
    console.print(f"[dim]Docs:[/dim] http://{host}:{port}/docs")

    uvicorn.run(
        "folio.api.main:app",
        host=host,
        port=port,
        reload=reload,
    )


@app.command()
def version() -> None:
    """Show version information."""
    from folio import __version__

    typer.echo(f"Folio v{__version__}")


def _require_ledger() -> None:
    from folio.settings import settings

    if not settings.lifecycle.orphan_ledger_enabled:
        console.print(
            "[red]Error:[/red] Orphan ledger is disabled (FOLIO_LIFECYCLE__ORPHAN_LEDGER_ENABLED)"
        )
        raise typer.Exit(code=1)


@orphans_app.command("list")
def list_orphans() -> None:
    """List images whose remote deletion failed.

    Example:
        folio orphans list
    """
    from folio.lifecycle.orphans import OrphanLedger
    from folio.records.store_factory import get_record_store

    _require_ledger()
    entries = asyncio.run(OrphanLedger(get_record_store()).entries())

    if not entries:
        console.print("[green]No orphaned images[/green]")
        return

    table = Table(title=f"Orphaned images ({len(entries)})")
    table.add_column("Identifier", style="cyan")
    table.add_column("Record")
    table.add_column("Field")
    table.add_column("Attempts", justify="right")
    table.add_column("Last error", style="dim")
    table.add_column("Last attempt")

    for entry in entries:
        table.add_row(
            entry.identifier,
            f"{entry.record_type}/{entry.record_id}",
            entry.field,
            str(entry.attempts),
            entry.reason or "",
            entry.last_attempt_at.strftime("%Y-%m-%d %H:%M"),
        )
    console.print(table)


@orphans_app.command("sweep")
def sweep_orphans() -> None:
    """Retry deleting every orphaned image once.

    Exits with code 1 if any image is still not deleted.

    Example:
        folio orphans sweep
    """
    from folio.assets.store_factory import get_asset_store
    from folio.lifecycle.orphans import OrphanLedger
    from folio.records.store_factory import get_record_store

    _require_ledger()
    try:
        assets = get_asset_store()
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)

    async def run():
        try:
            return await OrphanLedger(get_record_store()).sweep(assets)
        finally:
            await assets.close()

    result = asyncio.run(run())

    for identifier in result.cleared:
        console.print(f"[green]✓[/green] {identifier}")
    for identifier in result.remaining:
        console.print(f"[red]✗[/red] {identifier}")
    console.print(f"{len(result.cleared)} cleared, {len(result.remaining)} remaining")

    if result.remaining:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
