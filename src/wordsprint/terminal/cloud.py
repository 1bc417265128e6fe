# SPDX-License-Identifier: MIT

import asyncio
from typing import Annotated

import typer

from wordsprint.service.session import Session
from wordsprint.terminal.custom_typer import AliasedTyperGroup
from wordsprint.terminal.runner import console, run_session
from wordsprint.terminal.words import render_progress

app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)


@app.command("login, in", no_args_is_help=True)
def login(email: Annotated[str, typer.Argument()]) -> None:
    """Email a sign-in code (magic link)."""

    async def operation(session: Session) -> bool:
        return await session.send_magic_link(email)

    if not run_session(operation):
        raise typer.Exit(1)
    console.print(f"Then run `wordsprint cloud verify {email} CODE`")


@app.command("verify, v", no_args_is_help=True)
def verify(
    email: Annotated[str, typer.Argument()],
    code: Annotated[str, typer.Argument(help="Code from the sign-in email")],
) -> None:
    """Finish signing in with the emailed code."""

    async def operation(session: Session) -> None:
        user = await session.verify_code(email, code)
        console.print(f"[green]Signed in as {user.get('email', user['id'])}[/green]")
        if not session.is_cloud_mode:
            console.print("Run `wordsprint mode cloud` to start syncing.")

    run_session(operation)


@app.command("logout, out")
def logout() -> None:
    """Sign out and forget the cloud session on this machine."""

    async def operation(session: Session) -> None:
        await session.sign_out()

    run_session(operation)


@app.command("refresh, r")
def refresh() -> None:
    """Reload the project and entries from the cloud."""

    async def operation(session: Session) -> None:
        if await session.refresh():
            render_progress(session)

    run_session(operation)


@app.command("watch, w")
def watch() -> None:
    """Keep showing progress, redrawing when another device writes."""

    async def operation(session: Session) -> None:
        if not session.is_remote:
            console.print("Sign in to sync")
            return

        def redraw() -> None:
            console.clear()
            render_progress(session)

        session.on_change = redraw
        redraw()
        await asyncio.Event().wait()

    try:
        run_session(operation)
    except KeyboardInterrupt:
        console.print("Stopped watching")
