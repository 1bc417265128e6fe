# SPDX-License-Identifier: MIT

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Optional

from wordsprint.model.remote_project import RemoteProject, RemoteUser
from wordsprint.model.word_event import WordEvent
from wordsprint.model.ymd import Ymd

ChangeCallback = Callable[[], Awaitable[None]]


class RemoteError(Exception):
    """Any failure reported by the remote database or its transport."""

    def __init__(
        self,
        message: str,
        details: Optional[str] = None,
        hint: Optional[str] = None,
        code: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details
        self.hint = hint
        self.code = code

    def haystack(self) -> str:
        """All human readable parts of the error, lowercased, for matching."""
        return " ".join(
            part for part in (self.message, self.details, self.hint) if part
        ).lower()


class LedgerBackend(ABC):
    """
    The remote side of cloud mode: authentication, the projects table and
    the append-only word_events ledger.
    """

    # Authentication

    @abstractmethod
    async def send_magic_link(self, email: str) -> None: ...

    @abstractmethod
    async def verify_code(self, email: str, code: str) -> RemoteUser: ...

    @abstractmethod
    async def restore_session(
        self, access_token: str, refresh_token: str
    ) -> Optional[RemoteUser]: ...

    @abstractmethod
    async def session_tokens(self) -> Optional[tuple[str, str]]: ...

    @abstractmethod
    async def sign_out(self) -> None: ...

    # Projects

    @abstractmethod
    async def find_project(self, owner: str) -> Optional[RemoteProject]:
        """The most recently created project owned by owner, if any."""
        ...

    @abstractmethod
    async def create_project(self, payload: dict[str, Any]) -> RemoteProject: ...

    @abstractmethod
    async def fetch_project(self, project_id: str) -> RemoteProject: ...

    @abstractmethod
    async def update_project(self, project_id: str, payload: dict[str, Any]) -> None: ...

    # Ledger

    @abstractmethod
    async def fetch_events(
        self, project_id: str, day: Optional[Ymd] = None
    ) -> list[WordEvent]:
        """Events ordered by (ymd, created_at), optionally for a single day."""
        ...

    @abstractmethod
    async def insert_event(self, event: WordEvent) -> None: ...

    @abstractmethod
    async def delete_events(self, project_id: str) -> None: ...

    # Realtime

    @abstractmethod
    async def subscribe(
        self,
        project_id: str,
        on_events: ChangeCallback,
        on_project: ChangeCallback,
    ) -> list[Any]:
        """Listen for changes; returns handles to pass to unsubscribe."""
        ...

    @abstractmethod
    async def unsubscribe(self, handles: list[Any]) -> None: ...
