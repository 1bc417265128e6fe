# SPDX-License-Identifier: MIT

from typing import Annotated, Optional

import typer
from rich import box
from rich.table import Table

from wordsprint.model.theme import THEME_IDS, THEMES
from wordsprint.service.session import Session
from wordsprint.terminal.runner import console, run_session


def theme(
    name: Annotated[
        Optional[str], typer.Argument(help=", ".join(THEME_IDS))
    ] = None,
) -> None:
    """Pick a colour theme, or list them when no name is given."""

    async def operation(session: Session) -> None:
        if name is None:
            table = Table(box=box.SIMPLE)
            table.add_column("")
            table.add_column("id")
            table.add_column("label")
            for item in THEMES:
                current = "*" if item["id"] == session.state["theme"] else ""
                accent = item["accent"]
                table.add_row(current, f"[{accent}]{item['id']}[/{accent}]", item["label"])
            console.print(table)
            return
        if name not in THEME_IDS:
            console.print(f"[red]Unknown theme '{name}'[/red]")
            raise typer.Exit(1)
        session.set_theme(name)
        console.print(f"Theme set to {name}")

    run_session(operation)
