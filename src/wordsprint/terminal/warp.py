# SPDX-License-Identifier: MIT

from typing import Annotated

import typer

from wordsprint.service.session import Session
from wordsprint.terminal.custom_typer import AliasedTyperGroup
from wordsprint.terminal.runner import console, run_session

app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)


@app.command("on", no_args_is_help=True)
def on(day: Annotated[str, typer.Argument(help="YYYY-MM-DD to treat as today")]) -> None:
    """View and log words as if it were another day."""

    async def operation(session: Session) -> None:
        session.set_time_warp(day)
        console.print(f"Viewing {day}")

    run_session(operation)


@app.command("off")
def off() -> None:
    """Go back to the real current day."""

    async def operation(session: Session) -> None:
        session.set_time_warp(None)
        console.print(f"Viewing {session.viewing_day()}")

    run_session(operation)
