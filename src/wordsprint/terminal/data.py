# SPDX-License-Identifier: MIT

from pathlib import Path
from typing import Annotated, Optional

import typer

from wordsprint.service.session import Session
from wordsprint.service.transfer import (
    ImportValidationError,
    dump_export_payload,
    export_filename,
    load_import_text,
)
from wordsprint.terminal.custom_typer import AliasedTyperGroup
from wordsprint.terminal.runner import console, run_session
from wordsprint.time import now_utc

app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)


@app.command("export, ex")
def export(
    path: Annotated[
        Optional[Path],
        typer.Argument(help="File or directory to write; defaults to a dated file here"),
    ] = None,
) -> None:
    """Write project, entries and preferences to a JSON file."""

    async def operation(session: Session) -> Path:
        exported_at = now_utc()
        payload = session.export_data(exported_at)
        target = path or Path.cwd()
        if target.is_dir():
            target = target / export_filename(session.mode, exported_at)
        target.write_text(dump_export_payload(payload))
        return target

    written = run_session(operation)
    console.print(f"[green]Exported to {written}[/green]")


@app.command("import, im", no_args_is_help=True)
def import_(
    path: Annotated[Path, typer.Argument(help="JSON file written by export")],
) -> None:
    """Replace everything with the contents of an export file."""

    if not path.is_file():
        console.print(f"[red]No such file: {path}[/red]")
        raise typer.Exit(1)
    try:
        imported = load_import_text(path.read_text())
    except ImportValidationError as error:
        console.print(f"[red]{error}[/red]")
        raise typer.Exit(1)

    async def operation(session: Session) -> None:
        await session.import_data(imported)

    run_session(operation)


@app.command("reset")
def reset(
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation")] = False,
) -> None:
    """Erase the project and all logged words (in the cloud too when signed in)."""

    if not yes:
        typer.confirm("Erase the project and all logged words?", abort=True)

    async def operation(session: Session) -> None:
        await session.reset_all()

    run_session(operation)
