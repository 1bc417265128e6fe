# SPDX-License-Identifier: MIT

import asyncio
import logging
from typing import Any, Optional, cast

import httpx
from supabase import AsyncClient, AuthError, PostgrestAPIError, acreate_client

from wordsprint.model.remote_project import RemoteProject, RemoteUser
from wordsprint.model.word_event import WordEvent
from wordsprint.model.ymd import Ymd
from wordsprint.remote.backend import ChangeCallback, LedgerBackend, RemoteError

logger = logging.getLogger(__name__)

PROJECTS_TABLE = "projects"
EVENTS_TABLE = "word_events"


def _to_remote_user(user: Any) -> RemoteUser:
    remote_user: RemoteUser = {"id": str(user.id)}
    if getattr(user, "email", None):
        remote_user["email"] = user.email
    return remote_user


class SupabaseLedgerBackend(LedgerBackend):
    def __init__(self, client: AsyncClient) -> None:
        self._client = client
        # Realtime callbacks are synchronous; keep the reload tasks they
        # spawn referenced until they finish.
        self._callback_tasks: set[asyncio.Task[None]] = set()

    @classmethod
    async def connect(cls, url: str, anon_key: str) -> "SupabaseLedgerBackend":
        client = await acreate_client(url, anon_key)
        return cls(client)

    async def _execute(self, query: Any) -> Any:
        try:
            response = await query.execute()
        except PostgrestAPIError as error:
            raise RemoteError(
                error.message or str(error),
                details=error.details,
                hint=error.hint,
                code=error.code,
            ) from error
        except httpx.HTTPError as error:
            raise RemoteError(f"Network error: {error}") from error
        return response.data

    # ─────────────────────────────────────────────────────────────
    # Authentication
    # ─────────────────────────────────────────────────────────────

    async def send_magic_link(self, email: str) -> None:
        try:
            await self._client.auth.sign_in_with_otp({"email": email})
        except AuthError as error:
            raise RemoteError(str(error)) from error

    async def verify_code(self, email: str, code: str) -> RemoteUser:
        try:
            response = await self._client.auth.verify_otp(
                {"email": email, "token": code, "type": "email"}
            )
        except AuthError as error:
            raise RemoteError(str(error)) from error
        if response.user is None:
            raise RemoteError("Verification did not return a user")
        return _to_remote_user(response.user)

    async def restore_session(
        self, access_token: str, refresh_token: str
    ) -> Optional[RemoteUser]:
        try:
            response = await self._client.auth.set_session(
                access_token, refresh_token
            )
        except AuthError as error:
            raise RemoteError(str(error)) from error
        if response.user is None:
            return None
        return _to_remote_user(response.user)

    async def session_tokens(self) -> Optional[tuple[str, str]]:
        session = await self._client.auth.get_session()
        if session is None:
            return None
        return session.access_token, session.refresh_token

    async def sign_out(self) -> None:
        try:
            await self._client.auth.sign_out()
        except AuthError as error:
            raise RemoteError(str(error)) from error

    # ─────────────────────────────────────────────────────────────
    # Projects
    # ─────────────────────────────────────────────────────────────

    async def find_project(self, owner: str) -> Optional[RemoteProject]:
        rows = await self._execute(
            self._client.table(PROJECTS_TABLE)
            .select("*")
            .eq("owner", owner)
            .order("created_at", desc=True)
            .limit(1)
        )
        if not rows:
            return None
        return cast(RemoteProject, rows[0])

    async def create_project(self, payload: dict[str, Any]) -> RemoteProject:
        rows = await self._execute(self._client.table(PROJECTS_TABLE).insert(payload))
        if not rows:
            raise RemoteError("Project insert returned no row")
        return cast(RemoteProject, rows[0])

    async def fetch_project(self, project_id: str) -> RemoteProject:
        row = await self._execute(
            self._client.table(PROJECTS_TABLE).select("*").eq("id", project_id).single()
        )
        return cast(RemoteProject, row)

    async def update_project(self, project_id: str, payload: dict[str, Any]) -> None:
        await self._execute(
            self._client.table(PROJECTS_TABLE).update(payload).eq("id", project_id)
        )

    # ─────────────────────────────────────────────────────────────
    # Ledger
    # ─────────────────────────────────────────────────────────────

    async def fetch_events(
        self, project_id: str, day: Optional[Ymd] = None
    ) -> list[WordEvent]:
        query = (
            self._client.table(EVENTS_TABLE)
            .select("project_id, user_id, ymd, delta, created_at")
            .eq("project_id", project_id)
        )
        if day is not None:
            query = query.eq("ymd", day)
        rows = await self._execute(query.order("ymd").order("created_at"))
        return cast(list[WordEvent], rows or [])

    async def insert_event(self, event: WordEvent) -> None:
        await self._execute(self._client.table(EVENTS_TABLE).insert(dict(event)))

    async def delete_events(self, project_id: str) -> None:
        await self._execute(
            self._client.table(EVENTS_TABLE).delete().eq("project_id", project_id)
        )

    # ─────────────────────────────────────────────────────────────
    # Realtime
    # ─────────────────────────────────────────────────────────────

    def _spawn(self, callback: ChangeCallback) -> None:
        task = asyncio.ensure_future(callback())
        self._callback_tasks.add(task)
        task.add_done_callback(self._callback_tasks.discard)

    async def subscribe(
        self,
        project_id: str,
        on_events: ChangeCallback,
        on_project: ChangeCallback,
    ) -> list[Any]:
        events_channel = self._client.channel(f"realtime:{EVENTS_TABLE}")
        events_channel.on_postgres_changes(
            "*",
            schema="public",
            table=EVENTS_TABLE,
            filter=f"project_id=eq.{project_id}",
            callback=lambda _payload: self._spawn(on_events),
        )
        await events_channel.subscribe()

        project_channel = self._client.channel(f"realtime:{PROJECTS_TABLE}")
        project_channel.on_postgres_changes(
            "*",
            schema="public",
            table=PROJECTS_TABLE,
            filter=f"id=eq.{project_id}",
            callback=lambda _payload: self._spawn(on_project),
        )
        await project_channel.subscribe()

        logger.debug("Subscribed to realtime changes for project %s", project_id)
        return [events_channel, project_channel]

    async def unsubscribe(self, handles: list[Any]) -> None:
        for channel in handles:
            await self._client.remove_channel(channel)
