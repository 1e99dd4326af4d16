"""CLI commands for guest list management."""

import asyncio
from pathlib import Path
from uuid import UUID

import typer

from src.auth.dtos import Role, UserAlreadyExistsError
from src.auth.repository.identity import SqlIdentityProvider
from src.config.logging import setup_logging
from src.events.repository.read_models import SqlEventReadModel
from src.guests.dtos import CsvParseError, GuestStoreError, NoValidGuestsError
from src.guests.features.export_guests.exporter import export_filename, export_guests_csv
from src.guests.features.guest_report.images import ImageLoader
from src.guests.features.guest_report.layout import build_guest_report
from src.guests.features.import_guests.importer import GuestImporter
from src.guests.repository.read_models import SqlGuestReadModel
from src.guests.repository.write_models import SqlGuestWriteModel

app = typer.Typer(help="CLI commands for guest list management")


@app.callback()
def main():
    setup_logging()


@app.command()
def create_user(
    email: str = typer.Argument(..., help="Login email"),
    password: str = typer.Option(
        ..., "--password", "-p", prompt=True, hide_input=True, confirmation_prompt=True
    ),
    role: Role = typer.Option(Role.ADMIN, "--role", "-r", help="admin or hotel"),
):
    """Create an organizer (admin) or hotel account."""
    try:
        user = asyncio.run(SqlIdentityProvider().sign_up(email, password, role))
    except UserAlreadyExistsError as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.secho("User created!", fg=typer.colors.GREEN)
    typer.secho(f"  Email: {user.email}", fg=typer.colors.BLUE)
    typer.secho(f"  Role: {user.role.value}", fg=typer.colors.BLUE)
    typer.secho(f"  User ID: {user.id}", fg=typer.colors.CYAN)


@app.command()
def import_guests(
    event_id: UUID = typer.Argument(..., help="Event UUID"),
    csv_path: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True),
):
    """Import a CSV guest list into an event."""
    async def _import():
        event = await SqlEventReadModel().get_event(event_id)
        if event is None:
            raise ValueError(f"Event not found: {event_id}")
        importer = GuestImporter(SqlGuestWriteModel())
        return await importer.import_csv(event.id, csv_path.read_bytes())

    try:
        result = asyncio.run(_import())
    except (ValueError, CsvParseError, NoValidGuestsError, GuestStoreError) as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.secho(f"Successfully imported {result.imported} guests.", fg=typer.colors.GREEN)
    if result.skipped:
        typer.secho(f"  Skipped {result.skipped} rows without a name", fg=typer.colors.YELLOW)


@app.command()
def export_guests(
    event_id: UUID = typer.Argument(..., help="Event UUID"),
    hotel: bool = typer.Option(False, "--hotel", help="Add the Docs Uploaded column"),
    output: Path = typer.Option(None, "--output", "-o", help="Defaults to '{event}_export.csv'"),
):
    """Export an event's guest list as CSV."""
    async def _export():
        event = await SqlEventReadModel().get_event(event_id)
        if event is None:
            raise ValueError(f"Event not found: {event_id}")
        guests = await SqlGuestReadModel().list_for_event(event.id)
        return event, guests

    try:
        event, guests = asyncio.run(_export())
    except ValueError as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(1)

    target = output or Path(export_filename(event.name))
    target.write_text(export_guests_csv(guests, include_docs=hotel), encoding="utf-8", newline="")
    typer.secho(f"Exported {len(guests)} guests to {target}", fg=typer.colors.GREEN)


@app.command()
def guest_report(
    guest_id: UUID = typer.Argument(..., help="Guest UUID"),
    output: Path = typer.Option(None, "--output", "-o", help="Defaults to '{name}_details.pdf'"),
):
    """Render the printable details report for one guest."""
    async def _report():
        guest = await SqlGuestReadModel().get_guest(guest_id)
        if guest is None:
            raise ValueError(f"Guest not found: {guest_id}")
        event = await SqlEventReadModel().get_event(guest.event_id)
        return await build_guest_report(
            guest,
            ImageLoader(),
            event_name=event.name if event else None,
            event_date=event.date if event else None,
        )

    try:
        report = asyncio.run(_report())
    except ValueError as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(1)

    target = output or Path(report.filename)
    target.write_bytes(report.content)
    typer.secho(f"Report written to {target} ({report.page_count} pages)", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()
