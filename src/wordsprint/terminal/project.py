# SPDX-License-Identifier: MIT

from typing import Annotated, Optional

import typer

from wordsprint.model.theme import THEME_IDS
from wordsprint.service.session import Session
from wordsprint.service.theme import get_theme
from wordsprint.terminal.custom_typer import AliasedTyperGroup
from wordsprint.terminal.runner import run_session
from wordsprint.view.views.project import project_view

app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)


def _render(session: Session) -> None:
    mode_label = session.mode.value if session.mode is not None else "none"
    project_view(get_theme(session.state["theme"]), session.state["project"], mode_label)


@app.command("view, v")
def view() -> None:
    """Show the project settings."""

    async def operation(session: Session) -> None:
        _render(session)

    run_session(operation)


@app.command("set, s", no_args_is_help=True)
def set(
    name: Annotated[Optional[str], typer.Option("--name", "-n")] = None,
    goal_words: Annotated[
        Optional[int], typer.Option("--goal", "-g", help="Target word count")
    ] = None,
    start_date: Annotated[
        Optional[str], typer.Option("--start", "-s", help="YYYY-MM-DD")
    ] = None,
    end_date: Annotated[
        Optional[str], typer.Option("--end", "-e", help="YYYY-MM-DD")
    ] = None,
    baseline_words: Annotated[
        Optional[int],
        typer.Option("--baseline", "-b", help="Words written before tracking began"),
    ] = None,
    theme: Annotated[
        Optional[str], typer.Option("--theme", "-t", help=", ".join(THEME_IDS))
    ] = None,
) -> None:
    """Update project settings."""

    async def operation(session: Session) -> None:
        await session.save_settings(
            name=name,
            goal_words=goal_words,
            start_date=start_date,
            end_date=end_date,
            baseline_words=baseline_words,
            theme=theme,
        )
        _render(session)

    run_session(operation)
