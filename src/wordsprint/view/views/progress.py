# SPDX-License-Identifier: MIT

from rich import box
from rich.console import Console
from rich.padding import Padding
from rich.progress_bar import ProgressBar
from rich.table import Table

from wordsprint.model.project import Project
from wordsprint.model.series import Series, Stats
from wordsprint.model.theme import Theme
from wordsprint.model.ymd import Ymd
from wordsprint.service.series import cutoff_index_for_viewing
from wordsprint.time import fmt_md, fmt_range, ymd_utc
from wordsprint.view.views.header import header


def progress_view(
    theme: Theme,
    project: Project,
    series: Series,
    stats: Stats,
    banner: str,
    viewing_day: Ymd,
    sync_label: str,
    time_warped: bool = False,
) -> None:
    """Header, stats, motivational banner and the pace table."""
    date_range = fmt_range(ymd_utc(project["start_date"]), ymd_utc(project["end_date"]))
    header(theme, f"{project['name']} • {date_range}", sync_label)

    console = Console()
    accent = theme["accent"]

    stats_table = Table(box=box.SIMPLE, show_header=False)
    stats_table.add_column("property", style=theme["muted"])
    stats_table.add_column("value", justify="right")

    viewing = fmt_md(viewing_day)
    if time_warped:
        viewing = f"{viewing} (time warp)"
    needed_style = theme["warn"] if stats["behind_pace"] else theme["ok"]

    stats_table.add_row("viewing", viewing)
    stats_table.add_row(
        "total", f"[{accent}]{stats['total']:,}[/{accent}] / {project['goal_words']:,}"
    )
    stats_table.add_row("progress", f"{stats['pct']}%")
    stats_table.add_row("remaining", f"{stats['remaining']:,}")
    stats_table.add_row("today", f"{stats['today_words']:,}")
    stats_table.add_row("ideal per day", f"{stats['ideal_per_day']:,}")
    stats_table.add_row(
        "needed per day",
        f"[{needed_style}]{stats['needed_per_day']:,}[/{needed_style}]",
    )
    stats_table.add_row("days", f"{stats['elapsed']} elapsed • {stats['days_left']} left")
    console.print(stats_table)

    console.print(
        Padding(
            ProgressBar(
                total=100,
                completed=stats["pct"],
                width=40,
                complete_style=accent,
                finished_style=theme["ok"],
            ),
            (0, 1),
        )
    )
    console.print(Padding(f"[bold]{banner}[/bold]", (1, 1)))

    pace_table(console, theme, series, viewing_day)


def pace_table(console: Console, theme: Theme, series: Series, viewing_day: Ymd) -> None:
    days = series["days"]
    if len(days) == 0:
        return

    cut = cutoff_index_for_viewing(days, viewing_day)

    table = Table(box=box.SIMPLE)
    table.add_column("day")
    table.add_column("words", justify="right")
    table.add_column("total", justify="right")
    table.add_column("pace", justify="right")
    table.add_column("+/-", justify="right")

    table.add_row(
        "baseline",
        "",
        f"{series['cumulative'][0]:,}",
        f"{series['pace'][0]:,}",
        "",
        style=theme["muted"],
    )
    for index, day in enumerate(days):
        words = series["daily"][index]
        pace = series["pace"][index + 1]
        if index >= cut:
            table.add_row(fmt_md(day), "", "", f"{pace:,}", "", style=theme["muted"])
            continue
        total = series["cumulative"][index + 1]
        diff = total - pace
        diff_style = theme["ok"] if diff >= 0 else theme["warn"]
        table.add_row(
            fmt_md(day),
            f"{words:,}" if words else "",
            f"{total:,}",
            f"{pace:,}",
            f"[{diff_style}]{diff:+,}[/{diff_style}]",
            style=f"bold {theme['accent']}" if day == viewing_day else None,
        )

    console.print(table)
