"""
Manual integration runs.

Runs use the same pipelines as the scheduled Celery tasks, in-process and
with a synchronous database session.
"""
import asyncio
import uuid
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from dashboard.core.database import get_session_context, init_db
from dashboard.core.http_client import close_http_client
from dashboard.core.logging_config import setup_logging
from dashboard.integrations.pipeline import PipelineResult
from dashboard.integrations.service import PIPELINE_REGISTRY, run_all_integrations, run_integration
from dashboard.models.enums import IntegrationName

app = typer.Typer(help="Integration pipeline commands")
console = Console()


def _print_results(results: List[PipelineResult]) -> None:
    table = Table(title="Integration Runs")
    table.add_column("Integration", style="cyan")
    table.add_column("User", style="white")
    table.add_column("Status")
    table.add_column("Snapshot / Error", style="white")
    table.add_column("Duration (ms)", justify="right")

    for result in results:
        status = "[green]succeeded[/green]" if result.succeeded else "[red]failed[/red]"
        detail = (
            str(result.snapshot_id)
            if result.succeeded
            else f"{result.error_type}: {result.error_message}"
        )
        table.add_row(
            result.integration.value,
            str(result.user_id) if result.user_id else "-",
            status,
            detail,
            f"{result.duration_ms:.0f}",
        )
    console.print(table)


async def _run_one(name: IntegrationName, user_id: Optional[uuid.UUID]) -> PipelineResult:
    try:
        with get_session_context() as session:
            return await run_integration(session, name, user_id=user_id)
    finally:
        await close_http_client()


async def _run_all() -> List[PipelineResult]:
    try:
        with get_session_context() as session:
            return await run_all_integrations(session)
    finally:
        await close_http_client()


@app.command("list")
def list_integrations():
    """List the registered integrations."""
    table = Table(title="Registered Integrations")
    table.add_column("Name", style="cyan")
    table.add_column("Stages", style="white")
    for name, pipeline in PIPELINE_REGISTRY.items():
        table.add_row(name.value, " → ".join(stage.__name__ for stage in pipeline.stages))
    console.print(table)


@app.command("run")
def run(
    name: IntegrationName = typer.Argument(..., help="Integration to run"),
    user_id: Optional[str] = typer.Option(
        None, "--user-id", "-u", help="Use this user's settings (default: most recently updated settings)"
    ),
):
    """Run one integration now."""
    try:
        user_uuid = uuid.UUID(user_id) if user_id else None
    except ValueError:
        raise typer.BadParameter(f"Invalid user id: {user_id}")

    setup_logging()
    init_db()
    result = asyncio.run(_run_one(name, user_uuid))
    _print_results([result])
    if not result.succeeded:
        raise typer.Exit(code=1)


@app.command("run-all")
def run_all():
    """Run every active integration for every stored configuration."""
    setup_logging()
    init_db()
    results = asyncio.run(_run_all())
    if not results:
        console.print("[yellow]No active integrations configured[/yellow]")
        return
    _print_results(results)
    if any(not r.succeeded for r in results):
        raise typer.Exit(code=1)
