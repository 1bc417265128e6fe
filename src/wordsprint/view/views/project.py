# SPDX-License-Identifier: MIT

from rich import box
from rich.console import Console
from rich.table import Table

from wordsprint.model.project import Project
from wordsprint.model.theme import Theme
from wordsprint.time import ymd_utc
from wordsprint.view.views.header import header


def project_view(theme: Theme, project: Project, mode_label: str) -> None:
    header(theme, project["name"], "project")

    table = Table(box=box.SIMPLE)
    table.add_column("property")
    table.add_column("value")

    table.add_row("name", project["name"])
    table.add_row("goal_words", f"{project['goal_words']:,}")
    table.add_row("start_date", ymd_utc(project["start_date"]))
    table.add_row("end_date", ymd_utc(project["end_date"]))
    table.add_row("baseline_words", f"{project['baseline_words']:,}")
    table.add_row("theme", theme["label"])
    table.add_row("mode", mode_label)

    console = Console()
    console.print(table)
