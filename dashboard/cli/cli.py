"""
Main CLI application using Typer.

Entry point: python -m dashboard.cli
CLI Name: dashboard-admin
"""
import typer

from dashboard import __version__ as app_version
from dashboard.cli.commands import integrations

app = typer.Typer(
    name="dashboard-admin",
    help="Dashboard Admin CLI - run integration pipelines and inspect results",
)


@app.command()
def version():
    """Show CLI version information."""
    typer.echo(f"Dashboard CLI version {app_version}")


# Register command groups
app.add_typer(integrations.app, name="integrations")
