# SPDX-License-Identifier: MIT

from typing import Annotated

import typer

from wordsprint.service.entry import EntryValidationError
from wordsprint.service.session import Session
from wordsprint.service.theme import get_theme
from wordsprint.terminal.custom_typer import AliasedTyperGroup
from wordsprint.terminal.runner import ask, console, run_session
from wordsprint.view.views.entries import entries_view

app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)


@app.command("list, ls")
def list_entries() -> None:
    """List the words logged per day."""

    async def operation(session: Session) -> None:
        entries_view(
            get_theme(session.state["theme"]),
            session.state["project"],
            session.state["entries"],
            session.server_snapshot,
            show_remote=session.is_remote,
        )

    run_session(operation)


@app.command("set, s", no_args_is_help=True)
def set_total(
    day: Annotated[str, typer.Argument(help="YYYY-MM-DD")],
    total: Annotated[str, typer.Argument(help="Total words for the day; blank clears")],
) -> None:
    """Replace the total for one day."""

    async def operation(session: Session) -> None:
        target = session.edit_day_total(day, total)
        console.print(f"[green]{day} set to {target:,} words[/green]")

    run_session(operation)


@app.command("edit, e")
def edit() -> None:
    """
    Edit several days in one go.

    Enter lines of "YYYY-MM-DD TOTAL" and an empty line to finish. Repeated
    edits of the same day are sent to the cloud once, with the last value.
    """

    async def operation(session: Session) -> None:
        while True:
            line = await ask(typer.prompt, "day total", default="", show_default=False)
            line = line.strip()
            if line == "":
                break
            parts = line.split(maxsplit=1)
            day = parts[0]
            raw_total = parts[1] if len(parts) > 1 else ""
            try:
                target = session.edit_day_total(day, raw_total)
            except EntryValidationError as error:
                console.print(f"[red]{error}[/red]")
                continue
            console.print(f"{day} → {target:,}")
        pending = session.scheduler.pending()
        if pending:
            console.print(f"Syncing {len(pending)} day(s)…")

    run_session(operation)
