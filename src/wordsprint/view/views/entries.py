# SPDX-License-Identifier: MIT

from rich import box
from rich.console import Console
from rich.table import Table

from wordsprint.model.entries import Entries
from wordsprint.model.project import Project
from wordsprint.model.theme import Theme
from wordsprint.service.project import in_range
from wordsprint.view.views.header import header


def entries_view(
    theme: Theme,
    project: Project,
    entries: Entries,
    server_snapshot: Entries,
    show_remote: bool = False,
) -> None:
    """List non-empty days, flagging the ones outside the project window."""
    header(theme, project["name"], "entries")

    table = Table(box=box.SIMPLE)
    table.add_column("day")
    table.add_column("words", justify="right")
    if show_remote:
        table.add_column("cloud", justify="right")

    for day in sorted(entries):
        words = entries[day]
        if words == 0 and day not in server_snapshot:
            continue
        label = day
        if not in_range(project, day):
            muted = theme["muted"]
            label = f"[{muted}]{day} (outside)[/{muted}]"
        row = [label, f"{words:,}"]
        if show_remote:
            remote = server_snapshot.get(day)
            if remote is None:
                row.append("")
            elif remote == words:
                row.append(f"[{theme['ok']}]{remote:,}[/{theme['ok']}]")
            else:
                row.append(f"[{theme['warn']}]{remote:,}[/{theme['warn']}]")
        table.add_row(*row)

    console = Console()
    if table.row_count == 0:
        console.print(f"[{theme['muted']}]No words logged yet[/{theme['muted']}]")
        return
    console.print(table)
