# SPDX-License-Identifier: MIT

import typer
from rich import box
from rich.table import Table

from wordsprint.model.mode import Mode, SessionState
from wordsprint.service.session import Session
from wordsprint.terminal.custom_typer import AliasedTyperGroup
from wordsprint.terminal.runner import console, run_session

app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)


@app.command("local, l")
def local() -> None:
    """Keep everything on this machine."""

    async def operation(session: Session) -> None:
        await session.activate_mode(Mode.LOCAL)
        console.print("Offline mode")

    run_session(operation)


@app.command("cloud, c")
def cloud() -> None:
    """Sync with the cloud ledger. Local entries are replaced by the cloud's."""

    async def operation(session: Session) -> None:
        await session.activate_mode(Mode.CLOUD)
        if session.session_state == SessionState.CLOUD_UNAUTHENTICATED:
            console.print("Cloud mode. Sign in with `wordsprint cloud login EMAIL`.")
        elif session.is_cloud_mode:
            console.print(f"Cloud mode • {session.sync_status_label()}")

    run_session(operation)


@app.command("status, st")
def status() -> None:
    """Show the storage mode and sign-in state."""

    async def operation(session: Session) -> None:
        table = Table(box=box.SIMPLE, show_header=False)
        table.add_column("property")
        table.add_column("value")
        table.add_row("mode", session.mode.value if session.mode else "none")
        table.add_row("session", session.session_state.value)
        table.add_row("cloud configured", "yes" if session.backend else "no")
        if session.user is not None:
            table.add_row("user", session.user.get("email", session.user["id"]))
        table.add_row("sync", session.sync_status_label())
        console.print(table)

    run_session(operation)
