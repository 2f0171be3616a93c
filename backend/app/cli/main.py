"""Blackstar CLI - Main entry point."""
import typer
from rich.console import Console
from rich.table import Table

from app.cli import releases, artists

app = typer.Typer(
    name="blackstar",
    help="Blackstar - Release submission and review",
    add_completion=True,
)

console = Console()

# Add subcommands
app.add_typer(releases.app, name="releases", help="Release review commands")
app.add_typer(artists.app, name="artists", help="Artist directory commands")


@app.command()
def version():
    """Show version information."""
    from app import __version__
    console.print(f"Blackstar v{__version__}")


@app.command()
def status():
    """Check system status."""
    from app.config import settings

    table = Table(title="Blackstar Status")
    table.add_column("Component", style="cyan")
    table.add_column("Status", style="green")

    # Check database
    try:
        from sqlalchemy import text
        from app.database import engine
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        table.add_row("Database", "Connected")
    except Exception as e:
        table.add_row("Database", f"[red]Error: {e}[/red]")

    # Check media storage
    from pathlib import Path
    p = Path(settings.storage_root)
    if p.exists():
        table.add_row("Media Storage", f"OK ({settings.storage_root})")
    else:
        table.add_row("Media Storage", f"[yellow]Missing ({settings.storage_root})[/yellow]")

    console.print(table)


if __name__ == "__main__":
    app()
