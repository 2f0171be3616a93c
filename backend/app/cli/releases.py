"""Blackstar CLI - Release review commands."""
import asyncio
from typing import Optional

import typer
from rich.console import Console
from rich.prompt import Confirm
from rich.table import Table

from app.domain import Checklist, ReleaseStatus
from app.exceptions import NotFoundError, PersistenceError

app = typer.Typer()
console = Console()

STATUS_STYLES = {
    ReleaseStatus.FINALIZED: "yellow",
    ReleaseStatus.DISTRIBUTED: "green",
    ReleaseStatus.APPROVED: "blue",
    ReleaseStatus.UNDER_REVIEW: "cyan",
    ReleaseStatus.REJECTED: "red",
}


def get_db_session():
    """Get a database session."""
    from app.database import SessionLocal, init_db
    init_db()
    return SessionLocal()


def get_service(db):
    from app.services.releases import ReleaseService
    return ReleaseService(db)


def _status_text(status: ReleaseStatus) -> str:
    style = STATUS_STYLES.get(status, "dim")
    return f"[{style}]{status.value}[/{style}]"


def _load(service, release_id: str):
    try:
        return service.get(release_id)
    except NotFoundError:
        console.print(f"[red]Release {release_id} not found[/red]")
        raise typer.Exit(1)


@app.command("list")
def list_releases(
    view: str = typer.Option("all", "--view", "-v", help="all, active or history"),
    artist: Optional[str] = typer.Option(None, "--artist", "-a", help="Only releases crediting this artist"),
):
    """List releases, newest first."""
    if view not in ("all", "active", "history"):
        console.print(f"[red]Unknown view: {view}[/red]")
        raise typer.Exit(1)

    db = get_db_session()
    try:
        releases = get_service(db).list_releases(view, artist)

        table = Table(title=f"Releases ({view}, Total: {len(releases)})")
        table.add_column("ID", style="dim")
        table.add_column("Title", style="cyan")
        table.add_column("Artist")
        table.add_column("Type")
        table.add_column("Release Date")
        table.add_column("Status")
        table.add_column("Media", justify="center")

        for release in releases:
            table.add_row(
                release.id,
                release.title,
                ", ".join(release.main_artist),
                release.type.value,
                release.release_date.isoformat(),
                _status_text(release.status),
                "[red]purged[/red]" if release.purged else "",
            )

        console.print(table)
    finally:
        db.close()


@app.command()
def show(
    release_id: str = typer.Argument(..., help="Release ID"),
):
    """Show a release with its tracks and checklist."""
    db = get_db_session()
    try:
        release = _load(get_service(db), release_id)

        console.print(f"[bold]{release.title}[/bold] - {', '.join(release.main_artist)}")
        console.print(f"  Type: {release.type.value}")
        console.print(f"  Genre: {release.genre}")
        console.print(f"  Release date: {release.release_date.isoformat()}")
        console.print(f"  Status: {_status_text(release.status)}")
        console.print(f"  Cover: {release.cover_file_name or '-'}")
        if release.purged:
            console.print("  [red]Media deleted[/red]")

        checklist = release.checklist
        console.print("\nChecklist:")
        for label, done in (
            ("Files verified", checklist.files_verified),
            ("Metadata verified", checklist.metadata_verified),
            ("Sent to distributor", checklist.sent_to_distributor),
            ("Share-in sent", checklist.share_in_sent),
        ):
            mark = "[green]x[/green]" if done else " "
            console.print(f"  [{mark}] {label}")

        table = Table(title="Tracks")
        table.add_column("#", justify="right", style="dim")
        table.add_column("Title", style="cyan")
        table.add_column("Artist")
        table.add_column("Composer")
        table.add_column("ISRC")
        table.add_column("Audio")

        for number, track in enumerate(release.tracks, start=1):
            table.add_row(
                str(number),
                track.title,
                ", ".join(track.artist),
                ", ".join(track.composer),
                track.isrc or "",
                track.audio_file_name or "",
            )
        console.print(table)

        if release.admin_notes:
            console.print(f"\nNotes: {release.admin_notes}")
        if release.downloads:
            console.print(f"Downloads: {len(release.downloads)}")
    finally:
        db.close()


@app.command()
def checklist(
    release_id: str = typer.Argument(..., help="Release ID"),
    files: Optional[bool] = typer.Option(None, "--files/--no-files", help="Files verified"),
    metadata: Optional[bool] = typer.Option(None, "--metadata/--no-metadata", help="Metadata verified"),
    distributor: Optional[bool] = typer.Option(None, "--distributor/--no-distributor", help="Sent to distributor"),
    share_in: Optional[bool] = typer.Option(None, "--share-in/--no-share-in", help="Share-in sent"),
    reopen: bool = typer.Option(False, "--reopen", help="Re-derive status of a rejected release"),
):
    """Tick or untick checklist items. Unspecified items keep their value."""
    db = get_db_session()
    try:
        service = get_service(db)
        current = _load(service, release_id).checklist

        updated = Checklist(
            files_verified=current.files_verified if files is None else files,
            metadata_verified=current.metadata_verified if metadata is None else metadata,
            sent_to_distributor=current.sent_to_distributor if distributor is None else distributor,
            share_in_sent=current.share_in_sent if share_in is None else share_in,
        )

        new_status = asyncio.run(service.update_checklist(release_id, updated, reopen=reopen))
        console.print(f"Status: {_status_text(new_status)}")
    except PersistenceError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    finally:
        db.close()


@app.command()
def reject(
    release_id: str = typer.Argument(..., help="Release ID"),
    reason: str = typer.Option(None, "--reason", "-r", help="Reason, appended to the notes"),
):
    """Reject a release."""
    db = get_db_session()
    try:
        service = get_service(db)
        _load(service, release_id)
        asyncio.run(service.reject(release_id, reason))
        console.print(f"[red]Release {release_id} rejected[/red]")
    finally:
        db.close()


@app.command()
def notes(
    release_id: str = typer.Argument(..., help="Release ID"),
    text: str = typer.Argument(..., help="New notes"),
):
    """Replace a release's admin notes."""
    db = get_db_session()
    try:
        service = get_service(db)
        try:
            service.set_admin_notes(release_id, text)
        except NotFoundError:
            console.print(f"[red]Release {release_id} not found[/red]")
            raise typer.Exit(1)
        console.print("[green]Notes saved[/green]")
    finally:
        db.close()


@app.command()
def dashboard():
    """Show pending, approved and finalized-this-month counts."""
    db = get_db_session()
    try:
        stats = get_service(db).dashboard()

        table = Table(title="Overview")
        table.add_column("Pending review", justify="right")
        table.add_column("Approved", justify="right")
        table.add_column("Finalized this month", justify="right")
        table.add_row(str(stats.pending), str(stats.approved), str(stats.finalized_this_month))
        console.print(table)
    finally:
        db.close()


@app.command()
def purge(
    release_id: str = typer.Argument(..., help="Release ID"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
):
    """Delete a release's audio and cover, keeping its metadata."""
    db = get_db_session()
    try:
        service = get_service(db)
        release = _load(service, release_id)

        if release.purged:
            console.print("Media already deleted")
        if not force:
            if not Confirm.ask(f"Delete audio and cover of '{release.title}'?"):
                console.print("Cancelled")
                return

        report = asyncio.run(service.purge(release_id))
        console.print(f"[green]Media deleted[/green] ({len(report.deleted)} file(s))")
        for error in report.failed:
            console.print(f"  [yellow]Not deleted: {error.path}[/yellow]")
    finally:
        db.close()


@app.command()
def delete(
    release_id: str = typer.Argument(..., help="Release ID"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
):
    """Delete a release permanently. This cannot be undone."""
    db = get_db_session()
    try:
        service = get_service(db)
        release = _load(service, release_id)

        if not force:
            if not Confirm.ask(f"Permanently delete '{release.title}'? This cannot be undone."):
                console.print("Cancelled")
                return

        try:
            asyncio.run(service.delete(release_id))
        except PersistenceError as e:
            console.print(f"[red]{e}[/red]")
            raise typer.Exit(1)
        console.print(f"[green]Release {release_id} deleted[/green]")
    finally:
        db.close()
