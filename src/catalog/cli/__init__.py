"""Main CLI application module."""

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

console = Console()

app = typer.Typer(
    help="Product catalog API - server and database tools",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


@app.callback()
def _load_environment() -> None:
    """Read .env before any configuration is loaded."""
    load_dotenv(override=False)


@app.command(name="serve")
def serve(
    host: str | None = typer.Option(None, help="Host to bind, defaults to app.host"),
    port: int | None = typer.Option(
        None, help="Port to bind, defaults to app.port (PORT)"
    ),
    reload: bool = typer.Option(False, help="Enable auto-reload on code changes"),
    log_level: str = typer.Option("info", help="Uvicorn log level"),
) -> None:
    """Start the API server."""
    import uvicorn

    from src.catalog.runtime.context import get_config

    config = get_config()
    bind_host = host or config.app.host
    bind_port = port or config.app.port

    console.print(
        Panel.fit(
            f"[bold green]Starting {config.app.name}[/bold green] on http://{bind_host}:{bind_port}",
            border_style="green",
        )
    )
    uvicorn.run(
        "src.catalog.api.http.app:app",
        host=bind_host,
        port=bind_port,
        reload=reload,
        log_level=log_level,
        access_log=False,
    )


@app.command(name="init-db")
def init_db_command() -> None:
    """Create the catalog tables if they do not exist."""
    from src.catalog.runtime.init_db import init_db

    try:
        tables = init_db()
    except Exception as e:
        console.print(f"[red]Failed to initialize database:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e

    console.print(f"[green]Database ready.[/green] Tables: {', '.join(tables)}")


@app.command(name="check-db")
def check_db(
    ensure_schema: bool = typer.Option(
        False, "--ensure-schema", help="Also create missing tables"
    ),
) -> None:
    """Run the startup database diagnostics and print a summary."""
    from src.catalog.core.services import DbManageService, DbSessionService

    database_service = DbSessionService()
    try:
        report = DbManageService(database_service.engine).run_startup_checks(
            fail_fast=False, ensure_schema=ensure_schema
        )
    finally:
        database_service.dispose()

    table = Table(title="Database diagnostics", show_header=False)
    table.add_column("check", style="cyan")
    table.add_column("result")
    table.add_row("source", report.source)
    table.add_row("target", report.target)
    table.add_row("connected", "[green]yes[/green]" if report.connected else "[red]no[/red]")
    table.add_row(
        "latency",
        f"{report.latency_ms} ms" if report.latency_ms is not None else "-",
    )
    if ensure_schema:
        table.add_row("tables", ", ".join(report.tables) or "-")
    if report.error:
        table.add_row("error", f"[red]{escape(report.error)}[/red]")
    console.print(table)

    if not report.ok:
        raise typer.Exit(1)


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
