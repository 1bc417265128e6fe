# SPDX-License-Identifier: MIT

from typing import Any, Optional

import pendulum

from wordsprint.model.remote_project import RemoteProject, RemoteUser
from wordsprint.model.word_event import WordEvent
from wordsprint.model.ymd import Ymd
from wordsprint.remote.backend import ChangeCallback, LedgerBackend, RemoteError

MISSING_BASELINE_MESSAGE = (
    'Could not find the \'baseline_words\' column of \'projects\' in the schema cache'
)


class InMemoryLedgerBackend(LedgerBackend):
    """
    A remote ledger kept in lists, shared by every session that uses it.

    fail_next(operation) makes the next call of that operation raise a
    RemoteError. baseline_column=False mimics a projects table created
    before the baseline_words column existed.
    """

    def __init__(self, baseline_column: bool = True) -> None:
        self.baseline_column = baseline_column
        self.projects: list[dict[str, Any]] = []
        self.events: list[WordEvent] = []
        self.current: Optional[RemoteUser] = None
        self.sent_links: list[str] = []
        self.codes: dict[str, str] = {}
        self.users: dict[str, RemoteUser] = {}
        self.tokens: dict[str, RemoteUser] = {}
        self.listeners: dict[str, tuple[str, ChangeCallback, ChangeCallback]] = {}
        self._failures: dict[str, int] = {}
        self._clock = pendulum.datetime(2025, 1, 1, tz="UTC")
        self._next_id = 0

    def fail_next(self, operation: str, times: int = 1) -> None:
        self._failures[operation] = self._failures.get(operation, 0) + times

    def _maybe_fail(self, operation: str) -> None:
        remaining = self._failures.get(operation, 0)
        if remaining > 0:
            self._failures[operation] = remaining - 1
            raise RemoteError(f"{operation}: network down")

    def _tick(self) -> str:
        self._clock = self._clock.add(seconds=1)
        return self._clock.isoformat()

    def _new_id(self, prefix: str) -> str:
        self._next_id += 1
        return f"{prefix}-{self._next_id}"

    def _check_baseline(self, payload: dict[str, Any]) -> None:
        if not self.baseline_column and "baseline_words" in payload:
            raise RemoteError(MISSING_BASELINE_MESSAGE, code="PGRST204")

    # Authentication

    async def send_magic_link(self, email: str) -> None:
        self._maybe_fail("send_magic_link")
        self.sent_links.append(email)
        self.codes[email] = "123456"

    async def verify_code(self, email: str, code: str) -> RemoteUser:
        self._maybe_fail("verify_code")
        if self.codes.get(email) != code:
            raise RemoteError("Token has expired or is invalid")
        if email not in self.users:
            self.users[email] = {"id": self._new_id("user"), "email": email}
        self.current = self.users[email]
        return self.current

    async def restore_session(
        self, access_token: str, refresh_token: str
    ) -> Optional[RemoteUser]:
        self._maybe_fail("restore_session")
        self.current = self.tokens.get(access_token)
        return self.current

    async def session_tokens(self) -> Optional[tuple[str, str]]:
        if self.current is None:
            return None
        access_token = f"access-{self.current['id']}"
        self.tokens[access_token] = self.current
        return access_token, f"refresh-{self.current['id']}"

    async def sign_out(self) -> None:
        self._maybe_fail("sign_out")
        if self.current is not None:
            self.tokens.pop(f"access-{self.current['id']}", None)
        self.current = None

    # Projects

    async def find_project(self, owner: str) -> Optional[RemoteProject]:
        self._maybe_fail("find_project")
        rows = [row for row in self.projects if row["owner"] == owner]
        if not rows:
            return None
        rows.sort(key=lambda row: row["created_at"], reverse=True)
        return dict(rows[0])  # type: ignore[return-value]

    async def create_project(self, payload: dict[str, Any]) -> RemoteProject:
        self._maybe_fail("create_project")
        self._check_baseline(payload)
        row = {"id": self._new_id("project"), "created_at": self._tick(), **payload}
        self.projects.append(row)
        return dict(row)  # type: ignore[return-value]

    async def fetch_project(self, project_id: str) -> RemoteProject:
        self._maybe_fail("fetch_project")
        for row in self.projects:
            if row["id"] == project_id:
                return dict(row)  # type: ignore[return-value]
        raise RemoteError("JSON object requested, multiple (or no) rows returned")

    async def update_project(self, project_id: str, payload: dict[str, Any]) -> None:
        self._maybe_fail("update_project")
        self._check_baseline(payload)
        for row in self.projects:
            if row["id"] == project_id:
                row.update(payload)

    # Ledger

    async def fetch_events(
        self, project_id: str, day: Optional[Ymd] = None
    ) -> list[WordEvent]:
        self._maybe_fail("fetch_events")
        return [
            dict(event)  # type: ignore[misc]
            for event in self.events
            if event["project_id"] == project_id and (day is None or event["ymd"] == day)
        ]

    async def insert_event(self, event: WordEvent) -> None:
        self._maybe_fail("insert_event")
        self.events.append({**event, "created_at": self._tick()})

    async def delete_events(self, project_id: str) -> None:
        self._maybe_fail("delete_events")
        self.events = [
            event for event in self.events if event["project_id"] != project_id
        ]

    # Realtime

    async def subscribe(
        self,
        project_id: str,
        on_events: ChangeCallback,
        on_project: ChangeCallback,
    ) -> list[Any]:
        handle = self._new_id("channel")
        self.listeners[handle] = (project_id, on_events, on_project)
        return [handle]

    async def unsubscribe(self, handles: list[Any]) -> None:
        for handle in handles:
            self.listeners.pop(handle, None)

    # Helpers for tests

    def project_id_for(self, owner: str) -> str:
        return [row for row in self.projects if row["owner"] == owner][-1]["id"]

    def server_total(self, project_id: str, day: Ymd) -> int:
        return sum(
            event["delta"]
            for event in self.events
            if event["project_id"] == project_id and event["ymd"] == day
        )

    def write_from_other_device(self, project_id: str, day: Ymd, delta: int) -> None:
        self.events.append(
            {
                "project_id": project_id,
                "user_id": "other-device",
                "ymd": day,
                "delta": delta,
                "created_at": self._tick(),
            }
        )

    async def broadcast_events(self, project_id: str) -> None:
        for listened_id, on_events, _ in list(self.listeners.values()):
            if listened_id == project_id:
                await on_events()

    async def broadcast_project(self, project_id: str) -> None:
        for listened_id, _, on_project in list(self.listeners.values()):
            if listened_id == project_id:
                await on_project()
