# SPDX-License-Identifier: MIT

from typing import Annotated

import typer

from wordsprint.service.session import Session
from wordsprint.service.theme import get_theme
from wordsprint.terminal.runner import console, run_session
from wordsprint.view.views.progress import progress_view


def render_progress(session: Session) -> None:
    state = session.state
    progress_view(
        get_theme(state["theme"]),
        state["project"],
        session.series(),
        session.stats(),
        session.banner(),
        session.viewing_day(),
        session.sync_status_label(),
        time_warped=state["time_warp"] is not None,
    )


def show() -> None:
    """Show progress towards the goal for the viewing day."""

    async def operation(session: Session) -> None:
        render_progress(session)

    run_session(operation)


def add(
    words: Annotated[str, typer.Argument(help="Words written, e.g. 500 or 1,250")],
    quiet: Annotated[
        bool, typer.Option("--quiet", "-q", help="Do not print progress afterwards")
    ] = False,
) -> None:
    """Add words to the viewing day."""

    async def operation(session: Session) -> None:
        delta = await session.add_words(words)
        console.print(f"[green]Added {delta:,} words to {session.viewing_day()}[/green]")
        if not quiet:
            render_progress(session)

    run_session(operation)


def undo() -> None:
    """Take back the last add. Only one step is remembered."""

    async def operation(session: Session) -> None:
        snapshot = await session.undo()
        if snapshot is None:
            console.print("Nothing to undo")
            return
        console.print(
            f"[green]Removed {snapshot['delta']:,} words from {snapshot['day']}[/green]"
        )

    run_session(operation)
