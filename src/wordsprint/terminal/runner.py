# SPDX-License-Identifier: MIT

import asyncio
import logging
import weakref
from typing import Any, Awaitable, Callable, Optional, TypeVar

import typer
from rich.console import Console
from rich.padding import Padding

from wordsprint import configuration
from wordsprint.model.ymd import Ymd
from wordsprint.remote.backend import LedgerBackend, RemoteError
from wordsprint.remote.supabase_backend import SupabaseLedgerBackend
from wordsprint.repository.configuration import CONFIGURATION_REPO
from wordsprint.service.entry import EntryValidationError
from wordsprint.service.ledger import ProjectSetupError
from wordsprint.service.project import ProjectValidationError
from wordsprint.service.session import (
    AuthenticationRequiredError,
    CloudNotConfiguredError,
    Session,
)
from wordsprint.service.transfer import ImportValidationError

logger = logging.getLogger(__name__)

T = TypeVar("T")

console = Console()


def notify(message: str) -> None:
    console.print(Padding(f"[italic]{message}[/italic]", (0, 1)))


_prompt_locks: "weakref.WeakKeyDictionary[asyncio.AbstractEventLoop, asyncio.Lock]" = (
    weakref.WeakKeyDictionary()
)


def _prompt_lock() -> asyncio.Lock:
    loop = asyncio.get_running_loop()
    lock = _prompt_locks.get(loop)
    if lock is None:
        lock = _prompt_locks[loop] = asyncio.Lock()
    return lock


async def ask(prompt: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """
    Run a blocking typer prompt in a worker thread.

    Debounce timers and realtime reloads keep running while the user types.
    Prompts are taken one at a time so two of them never read stdin at once.
    """
    async with _prompt_lock():
        return await asyncio.to_thread(prompt, *args, **kwargs)


async def confirm_conflict(day: Ymd, server_total: int, target: int) -> bool:
    return await ask(
        typer.confirm,
        f"{day} changed on another device: the cloud has {server_total:,} words "
        f"and you entered {target:,}. Overwrite the cloud total?",
        default=False,
    )


async def connect_backend() -> Optional[LedgerBackend]:
    config = CONFIGURATION_REPO.get_config()
    url, anon_key = configuration.resolve_supabase_credentials(config)
    if not url or not anon_key:
        return None
    return await SupabaseLedgerBackend.connect(url, anon_key)


async def open_session(on_change: Optional[Callable[[], None]] = None) -> Session:
    config = CONFIGURATION_REPO.get_config()
    session = Session(
        backend=await connect_backend(),
        notify=notify,
        resolve_conflict=confirm_conflict,
        on_change=on_change,
        debounce_seconds=config["sync_debounce_ms"] / 1000,
    )
    await session.start()
    return session


def run_session(operation: Callable[[Session], Awaitable[T]]) -> T:
    """
    Start a session, run one command against it and wait for pending syncs.

    Errors the user can act on are printed and turned into exit status 1.
    """

    async def runner() -> T:
        session = await open_session()
        try:
            return await operation(session)
        finally:
            await session.close()

    try:
        return asyncio.run(runner())
    except (
        EntryValidationError,
        ProjectValidationError,
        ImportValidationError,
    ) as error:
        console.print(f"[red]{error}[/red]")
        raise typer.Exit(1)
    except (AuthenticationRequiredError, CloudNotConfiguredError) as error:
        console.print(f"[yellow]{error}[/yellow]")
        raise typer.Exit(1)
    except ProjectSetupError as error:
        logger.error("Cloud project setup failed: %s", error)
        console.print(f"[red]{error}[/red]")
        raise typer.Exit(1)
    except RemoteError as error:
        logger.error("Cloud request failed: %s", error.haystack())
        console.print(f"[red]Cloud error: {error.message}[/red]")
        raise typer.Exit(1)
