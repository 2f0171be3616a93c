"""Blackstar CLI - Artist directory commands."""
import typer
from rich.console import Console
from rich.prompt import Confirm
from rich.table import Table

from app.exceptions import PersistenceError

app = typer.Typer()
console = Console()


def get_db_session():
    """Get a database session."""
    from app.database import SessionLocal, init_db
    init_db()
    return SessionLocal()


def get_service(db):
    from app.services.releases import ReleaseService
    return ReleaseService(db)


@app.command("list")
def list_artists():
    """List registered artists and every artist credited on a release."""
    db = get_db_session()
    try:
        names = get_service(db).known_artists()

        table = Table(title=f"Artists (Total: {len(names)})")
        table.add_column("Name", style="cyan")
        for name in names:
            table.add_row(name)

        console.print(table)
    finally:
        db.close()


@app.command()
def add(
    name: str = typer.Argument(..., help="Artist name"),
):
    """Register an artist under its normalized name."""
    db = get_db_session()
    try:
        stored = get_service(db).add_artist(name)
        if stored is None:
            console.print("[red]Artist name is empty[/red]")
            raise typer.Exit(1)
        console.print(f"[green]Registered:[/green] {stored}")
    finally:
        db.close()


@app.command()
def normalize(
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
):
    """Rewrite artist and composer names on every release to title case."""
    if not force:
        if not Confirm.ask("Normalize artist and composer names on all releases?"):
            console.print("Cancelled")
            return

    db = get_db_session()
    try:
        try:
            count = get_service(db).normalize_names()
        except PersistenceError as e:
            console.print(f"[red]{e}[/red]")
            raise typer.Exit(1)
        console.print(f"[green]{count} release(s) updated[/green]")
    finally:
        db.close()
