# SPDX-License-Identifier: MIT

import inspect
import logging
from typing import Any, Awaitable, Callable, Iterable, Literal, Optional, TypedDict, Union

import pendulum

from wordsprint.model.entries import Entries
from wordsprint.model.project import Project
from wordsprint.model.remote_project import RemoteProject
from wordsprint.model.word_event import WordEvent
from wordsprint.model.ymd import Ymd
from wordsprint.remote.backend import LedgerBackend, RemoteError
from wordsprint.time import parse_ymd, ymd_utc

logger = logging.getLogger(__name__)

BASELINE_COLUMN = "baseline_words"
BASELINE_MIGRATION_SQL = (
    "alter table public.projects add column baseline_words integer not null default 0;"
)
BASELINE_WARNING = "Cloud schema outdated; keeping baseline locally."

Notifier = Callable[[str], None]

# Asked when the server total moved under a local edit. Returns True to
# overwrite the server with the local target, False to keep the server value.
ConflictResolver = Callable[[Ymd, int, int], Union[bool, Awaitable[bool]]]

SyncStatus = Literal["written", "unchanged", "reverted", "failed"]


class SyncOutcome(TypedDict):
    status: SyncStatus
    day: Ymd
    server_total: Optional[int]  # None when the server could not be read
    total: int  # The value the day should now show locally


class ProjectSetupError(Exception):
    """Raised when no project row could be found or created for the user."""

    pass


def fold_events(rows: Iterable[dict[str, Any]]) -> Entries:
    """Sum ledger deltas per day. The result does not depend on row order."""
    totals: Entries = {}
    for row in rows:
        day = row["ymd"]
        if not isinstance(day, str):
            day = ymd_utc(day)
        totals[day] = totals.get(day, 0) + int(row.get("delta") or 0)
    return totals


def is_baseline_column_error(error: RemoteError) -> bool:
    return BASELINE_COLUMN in error.haystack()


class BaselineCapability:
    """
    Tracks whether the remote projects table has a baseline_words column.

    Older deployments lack it. Once that is noticed the baseline is kept
    locally for the rest of the session and the user is told once.
    """

    def __init__(self, notify: Optional[Notifier] = None) -> None:
        self.supported = True
        self._notify = notify
        self._warning_shown = False

    def degrade(self) -> None:
        if not self.supported:
            return
        self.supported = False
        logger.warning(
            "Remote projects table is missing the %s column. Add it with:\n  %s\n"
            "Then restart after the migration.",
            BASELINE_COLUMN,
            BASELINE_MIGRATION_SQL,
        )
        if not self._warning_shown:
            self._warning_shown = True
            if self._notify is not None:
                self._notify(BASELINE_WARNING)

    def observe_row(self, row: RemoteProject) -> bool:
        """Update from a project row that was read; True when the column exists."""
        if BASELINE_COLUMN in row:
            self.supported = True
            return True
        self.degrade()
        return False


def project_fields(project: Project, include_baseline: bool) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "name": project["name"],
        "goal_words": project["goal_words"],
        "start_date": ymd_utc(project["start_date"]),
        "end_date": ymd_utc(project["end_date"]),
    }
    if include_baseline:
        payload[BASELINE_COLUMN] = project["baseline_words"]
    return payload


def merge_remote_project(
    project: Project, row: RemoteProject, include_baseline: bool
) -> Project:
    """Adopt the fields of a remote row, keeping the local baseline if told to."""
    merged: Project = {
        "name": row["name"],
        "goal_words": int(row["goal_words"]),
        "start_date": parse_ymd(str(row["start_date"])[:10]),
        "end_date": parse_ymd(str(row["end_date"])[:10]),
        "baseline_words": project["baseline_words"],
    }
    if include_baseline:
        merged["baseline_words"] = int(row.get(BASELINE_COLUMN) or 0)
    return merged


class LedgerSync:
    """
    Keeps a locally edited "total for the day" view consistent with the
    remote append-only ledger of signed deltas.

    snapshot holds the per-day totals as of the last fold or successful
    write. It is the expected baseline for conflict detection and never
    the source of what is rendered.
    """

    def __init__(
        self,
        backend: LedgerBackend,
        project_id: str,
        user_id: str,
        capability: BaselineCapability,
    ) -> None:
        self.backend = backend
        self.project_id = project_id
        self.user_id = user_id
        self.capability = capability
        self.snapshot: Entries = {}
        self.last_synced_at: Optional[pendulum.DateTime] = None

    def _mark_synced(self) -> None:
        self.last_synced_at = pendulum.now("UTC")

    async def load_entries(self) -> Entries:
        """Fold the whole ledger. The result replaces local entries wholesale."""
        rows = await self.backend.fetch_events(self.project_id)
        entries = fold_events(rows)
        self.snapshot = dict(entries)
        self._mark_synced()
        return entries

    async def server_total(self, day: Ymd) -> int:
        rows = await self.backend.fetch_events(self.project_id, day)
        return fold_events(rows).get(day, 0)

    async def add_event(self, day: Ymd, delta: int) -> None:
        await self.backend.insert_event(
            {
                "project_id": self.project_id,
                "user_id": self.user_id,
                "ymd": day,
                "delta": delta,
            }
        )
        self._mark_synced()

    async def sync_day_total(
        self,
        day: Ymd,
        expected_baseline: Optional[int],
        target: int,
        resolve_conflict: Optional[ConflictResolver] = None,
        force: bool = False,
    ) -> SyncOutcome:
        """
        Append whatever delta moves the server total for day to target.

        Unless forced, a server total that no longer matches
        expected_baseline means another device wrote in the meantime; the
        resolver decides between overriding and reverting, and no answer
        means revert. Network failures leave everything as it was.
        """
        try:
            server_total = await self.server_total(day)

            if (
                not force
                and expected_baseline is not None
                and server_total != expected_baseline
            ):
                override = False
                if resolve_conflict is not None:
                    answer = resolve_conflict(day, server_total, target)
                    if inspect.isawaitable(answer):
                        answer = await answer
                    override = bool(answer)
                if not override:
                    self.snapshot[day] = server_total
                    return {
                        "status": "reverted",
                        "day": day,
                        "server_total": server_total,
                        "total": server_total,
                    }

            delta = target - server_total
            if delta == 0:
                self.snapshot[day] = target
                return {
                    "status": "unchanged",
                    "day": day,
                    "server_total": server_total,
                    "total": target,
                }

            await self.add_event(day, delta)
            self.snapshot[day] = target
            return {
                "status": "written",
                "day": day,
                "server_total": server_total,
                "total": target,
            }
        except RemoteError as error:
            logger.error("Syncing %s failed: %s", day, error.message)
            return {
                "status": "failed",
                "day": day,
                "server_total": None,
                "total": target,
            }

    async def delete_all_events(self) -> None:
        await self.backend.delete_events(self.project_id)
        self.snapshot = {}
        self._mark_synced()

    async def sync_project_settings(self, project: Project) -> None:
        """Push settings, retrying once without the baseline if the schema lacks it."""
        include_baseline = self.capability.supported
        for _ in range(2):
            try:
                await self.backend.update_project(
                    self.project_id, project_fields(project, include_baseline)
                )
            except RemoteError as error:
                if include_baseline and is_baseline_column_error(error):
                    self.capability.degrade()
                    include_baseline = False
                    continue
                raise
            self._mark_synced()
            return

    async def fetch_project_state(self, project: Project) -> Project:
        row = await self.backend.fetch_project(self.project_id)
        has_baseline = self.capability.observe_row(row)
        return merge_remote_project(project, row, has_baseline)


async def get_or_create_project(
    backend: LedgerBackend,
    owner: str,
    project: Project,
    capability: BaselineCapability,
) -> RemoteProject:
    """
    Find the user's project row or create one from the local defaults.

    Creation is retried once without the baseline column when the schema
    rejects it; any other failure is fatal.
    """
    existing = await backend.find_project(owner)
    if existing is not None:
        capability.observe_row(existing)
        return existing

    include_baseline = capability.supported
    for _ in range(2):
        payload = {"owner": owner, **project_fields(project, include_baseline)}
        try:
            return await backend.create_project(payload)
        except RemoteError as error:
            if include_baseline and is_baseline_column_error(error):
                capability.degrade()
                include_baseline = False
                continue
            raise ProjectSetupError(f"Unable to create project: {error.message}") from error
    raise ProjectSetupError("Unable to create project")
