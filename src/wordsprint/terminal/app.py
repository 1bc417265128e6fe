# SPDX-License-Identifier: MIT

from typing import Annotated

import typer

from wordsprint.terminal import cloud, configuration, data, entries, mode, project, warp
from wordsprint.terminal.custom_typer import OrderedTyperGroup
from wordsprint.terminal.theme import theme
from wordsprint.terminal.words import add, show, undo
from wordsprint.view import state as view_state

app = typer.Typer(
    cls=OrderedTyperGroup,
    help="wordsprint - Word count sprints in the CLI",
    no_args_is_help=True,
)
app.command(name="show, s")(show)
app.command(name="add, a", no_args_is_help=True)(add)
app.command(name="undo, u")(undo)
app.add_typer(entries.app, name="entries, e", help="Per-day word totals")
app.add_typer(project.app, name="project, p", help="Goal, dates and baseline")
app.add_typer(warp.app, name="warp, w", help="Pretend it is another day")
app.command(name="theme, th")(theme)
app.add_typer(data.app, name="data, d", help="Export, import and reset")
app.add_typer(mode.app, name="mode, m", help="Local or cloud storage")
app.add_typer(cloud.app, name="cloud, cl", help="Cloud sign-in and sync")
app.add_typer(configuration.app, name="config, c", help="Application settings")


@app.callback()
def main_callback(
    no_header: Annotated[
        bool,
        typer.Option(
            "--no-header",
            "-nh",
            help="Suppress header output in reports",
        ),
    ] = False,
) -> None:
    """
    wordsprint - Word count sprints in the CLI

    Global options that apply to all commands.
    """
    if no_header:
        view_state.set_show_header(False)


def run() -> None:
    app()
