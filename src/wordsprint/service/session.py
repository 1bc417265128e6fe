# SPDX-License-Identifier: MIT

import asyncio
import logging
from copy import deepcopy
from typing import Any, Callable, Optional, Union

import pendulum

from wordsprint.model.app_state import AppState
from wordsprint.model.entries import Entries
from wordsprint.model.export import ExportPayload
from wordsprint.model.mode import Mode, SessionState
from wordsprint.model.remote_project import RemoteUser
from wordsprint.model.series import Series, Stats
from wordsprint.model.undo import UndoSnapshot
from wordsprint.model.ymd import Ymd
from wordsprint.remote.backend import LedgerBackend, RemoteError
from wordsprint.repository.cloud_session import CLOUD_SESSION_REPO, CloudSessionRepository
from wordsprint.repository.local_state import LOCAL_STATE_REPO, LocalStateRepository
from wordsprint.repository.mode import MODE_REPO, ModeRepository
from wordsprint.repository.preferences import PREFERENCES_REPO, PreferencesRepository
from wordsprint.service.entry import (
    EntryValidationError,
    add_local,
    parse_day_total,
    parse_word_count,
    set_day_total,
    undo_local,
)
from wordsprint.service.history import UndoHistory
from wordsprint.service.ledger import (
    BASELINE_COLUMN,
    BaselineCapability,
    ConflictResolver,
    LedgerSync,
    Notifier,
    SyncOutcome,
    get_or_create_project,
    merge_remote_project,
)
from wordsprint.service.motivation import motivation_text
from wordsprint.service.project import apply_settings, in_range
from wordsprint.service.scheduler import DebouncedSyncScheduler
from wordsprint.service.series import compute_series, compute_stats
from wordsprint.service.theme import normalize_theme
from wordsprint.service.transfer import ImportedData, build_export_payload
from wordsprint.template.project import get_project_template
from wordsprint.time import format_relative, is_ymd, now_utc, today_ymd_utc

logger = logging.getLogger(__name__)


class AuthenticationRequiredError(Exception):
    """Raised when cloud mode is active but nobody is signed in."""

    pass


class CloudNotConfiguredError(Exception):
    """Raised when a cloud operation is attempted without a backend."""

    pass


class Session:
    """
    Owns the in-memory project, entries and preferences of one run and is
    the only thing that writes them to disk.

    Mutations happen in two phases: the local change is applied and
    persisted synchronously, then in cloud mode the matching remote
    operation runs and may later confirm or revert it.
    """

    def __init__(
        self,
        backend: Optional[LedgerBackend] = None,
        notify: Optional[Notifier] = None,
        resolve_conflict: Optional[ConflictResolver] = None,
        on_change: Optional[Callable[[], None]] = None,
        debounce_seconds: float = 0.3,
        local_state_repo: Optional[LocalStateRepository] = None,
        preferences_repo: Optional[PreferencesRepository] = None,
        mode_repo: Optional[ModeRepository] = None,
        cloud_session_repo: Optional[CloudSessionRepository] = None,
    ) -> None:
        self.backend = backend
        self._notify_callback = notify
        self.resolve_conflict = resolve_conflict
        self.on_change = on_change

        self.local_state_repo = local_state_repo or LOCAL_STATE_REPO
        self.preferences_repo = preferences_repo or PREFERENCES_REPO
        self.mode_repo = mode_repo or MODE_REPO
        self.cloud_session_repo = cloud_session_repo or CLOUD_SESSION_REPO

        self.state: AppState = {
            "project": get_project_template(),
            "entries": {},
            "time_warp": None,
            "theme": normalize_theme(None),
        }
        self.mode: Optional[Mode] = None
        self.user: Optional[RemoteUser] = None
        self.history = UndoHistory()
        self.capability = BaselineCapability(self._notify)
        self.ledger: Optional[LedgerSync] = None
        self.scheduler = DebouncedSyncScheduler(debounce_seconds, self._sync_day)

        self._local_snapshot: Entries = {}
        self._subscriptions: list[Any] = []
        self._reload_lock = asyncio.Lock()
        # Bumped on every mode switch and sign out; replies to requests
        # issued under an older generation are ignored.
        self._generation = 0

    # ─────────────────────────────────────────────────────────────
    # Derived state
    # ─────────────────────────────────────────────────────────────

    @property
    def is_local_mode(self) -> bool:
        return self.mode == Mode.LOCAL

    @property
    def is_cloud_mode(self) -> bool:
        return self.mode == Mode.CLOUD

    @property
    def is_remote(self) -> bool:
        return (
            self.is_cloud_mode
            and self.backend is not None
            and self.user is not None
            and self.ledger is not None
        )

    @property
    def session_state(self) -> SessionState:
        if self.is_cloud_mode:
            if self.user is None:
                return SessionState.CLOUD_UNAUTHENTICATED
            return SessionState.CLOUD_AUTHENTICATED
        return SessionState.LOCAL

    def is_interactive(self) -> bool:
        return self.session_state != SessionState.CLOUD_UNAUTHENTICATED

    @property
    def server_snapshot(self) -> Entries:
        if self.ledger is not None:
            return self.ledger.snapshot
        return self._local_snapshot

    @property
    def last_synced_at(self) -> Optional[pendulum.DateTime]:
        if self.ledger is None:
            return None
        return self.ledger.last_synced_at

    def viewing_day(self) -> Ymd:
        return self.state["time_warp"] or today_ymd_utc()

    def series(self) -> Series:
        return compute_series(self.state["project"], self.state["entries"])

    def stats(self) -> Stats:
        return compute_stats(self.state["project"], self.series(), self.viewing_day())

    def banner(self) -> str:
        return motivation_text(self.state["project"], self.series(), self.viewing_day())

    def sync_status_label(self, now: Optional[pendulum.DateTime] = None) -> str:
        if self.is_cloud_mode:
            if self.user is None:
                return "Sign in to sync"
            if self.last_synced_at is None:
                return "Not synced yet"
            return f"Synced {format_relative(self.last_synced_at, now)}"
        if self.is_local_mode:
            return "Offline mode"
        return "Choose mode"

    # ─────────────────────────────────────────────────────────────
    # Persistence and notification
    # ─────────────────────────────────────────────────────────────

    def _notify(self, message: str) -> None:
        logger.info(message)
        if self._notify_callback is not None:
            self._notify_callback(message)

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change()

    def _save_preferences(self) -> None:
        self.preferences_repo.save_preferences(
            self.state["time_warp"], self.state["theme"]
        )

    def persist(self) -> None:
        self._save_preferences()
        if self.is_local_mode:
            self.local_state_repo.save_state(self.state)

    def flush(self) -> None:
        self.local_state_repo.flush()
        self.preferences_repo.flush()
        self.mode_repo.flush()
        self.cloud_session_repo.flush()

    def _require_interactive(self) -> None:
        if not self.is_interactive():
            raise AuthenticationRequiredError("Sign in to enable cloud sync")

    def _reset_project_data(self) -> None:
        self.state["project"] = get_project_template()
        self.state["entries"] = {}

    def _load_local_state(self) -> None:
        stored = self.local_state_repo.get_state()
        if stored is None:
            return
        self.state["project"] = stored["project"]
        self.state["entries"] = stored["entries"]
        if stored["time_warp"] is not None:
            self.state["time_warp"] = stored["time_warp"]
        self.state["theme"] = stored["theme"]

    # ─────────────────────────────────────────────────────────────
    # Mode and authentication
    # ─────────────────────────────────────────────────────────────

    async def start(self) -> None:
        """Load preferences, restore any cloud sign-in and enter the stored mode."""
        preferences = self.preferences_repo.get_preferences()
        self.state["time_warp"] = preferences["time_warp"]
        self.state["theme"] = preferences["theme"]

        if self.backend is not None:
            tokens = self.cloud_session_repo.get_tokens()
            if tokens is not None:
                try:
                    self.user = await self.backend.restore_session(
                        tokens["access_token"], tokens["refresh_token"]
                    )
                except RemoteError as error:
                    logger.warning("Could not restore cloud session: %s", error.message)
                    self.user = None
                if self.user is None:
                    self.cloud_session_repo.clear_tokens()
                else:
                    await self._store_tokens()

        stored_mode = self.mode_repo.get_mode()
        preferred = stored_mode or (Mode.CLOUD if self.backend is not None else Mode.LOCAL)
        await self.activate_mode(preferred)

    async def activate_mode(self, next_mode: Mode) -> None:
        """
        Switch storage strategy.

        Realtime subscriptions are torn down first and the project and
        entries are reset to defaults before the new mode's source fills
        them. Leaving an authenticated cloud session for local mode keeps
        the cloud data as the new local record; entering cloud mode always
        discards local entries in favour of the remote ledger.
        """
        remember = True
        if next_mode == Mode.CLOUD and self.backend is None:
            self._notify("Cloud sync not configured")
            next_mode = Mode.LOCAL
            # Keep the stored choice so cloud resumes once credentials exist
            remember = False

        carried: Optional[AppState] = None
        if (
            next_mode == Mode.LOCAL
            and self.session_state == SessionState.CLOUD_AUTHENTICATED
            and self.ledger is not None
        ):
            carried = deepcopy(self.state)

        await self._clear_realtime()
        self.scheduler.cancel_all()
        self._generation += 1
        self.ledger = None

        self.mode = next_mode
        if remember:
            self.mode_repo.set_mode(next_mode)
        self._reset_project_data()

        if next_mode == Mode.LOCAL:
            if carried is not None:
                self.state["project"] = carried["project"]
                self.state["entries"] = carried["entries"]
            else:
                self._load_local_state()
            self._local_snapshot = dict(self.state["entries"])
            self.persist()
            self._changed()
            return

        self._local_snapshot = {}
        self._changed()
        if self.user is not None:
            await self.boot_after_auth()

    async def boot_after_auth(self) -> None:
        """Find or create the project row, fold the ledger and subscribe."""
        if self.backend is None:
            raise CloudNotConfiguredError("Cloud sync not configured")
        if self.user is None:
            raise AuthenticationRequiredError("Sign in to enable cloud sync")

        generation = self._generation
        row = await get_or_create_project(
            self.backend, self.user["id"], self.state["project"], self.capability
        )
        if generation != self._generation:
            return

        ledger = LedgerSync(self.backend, row["id"], self.user["id"], self.capability)
        self.state["project"] = merge_remote_project(
            self.state["project"], row, BASELINE_COLUMN in row
        )
        entries = await ledger.load_entries()
        if generation != self._generation:
            return

        self.ledger = ledger
        self.state["entries"] = entries
        self._subscriptions = await self.backend.subscribe(
            row["id"], self._on_remote_events, self._on_remote_project
        )
        self._save_preferences()
        self._changed()

    async def _clear_realtime(self) -> None:
        if self._subscriptions and self.backend is not None:
            handles = self._subscriptions
            self._subscriptions = []
            await self.backend.unsubscribe(handles)

    async def _store_tokens(self) -> None:
        if self.backend is None:
            return
        tokens = await self.backend.session_tokens()
        if tokens is not None:
            self.cloud_session_repo.save_tokens(*tokens)

    async def send_magic_link(self, email: str) -> bool:
        if self.backend is None:
            self._notify("Cloud sync not configured")
            return False
        email = email.strip()
        if email == "":
            raise EntryValidationError("Enter an email address")
        try:
            await self.backend.send_magic_link(email)
        except RemoteError as error:
            logger.error("Sending magic link failed: %s", error.message)
            self._notify("Could not send magic link. Try again.")
            return False
        self._notify("Check your email for the magic link")
        return True

    async def verify_code(self, email: str, code: str) -> RemoteUser:
        if self.backend is None:
            raise CloudNotConfiguredError("Cloud sync not configured")
        self.user = await self.backend.verify_code(email.strip(), code.strip())
        await self._store_tokens()
        if self.is_cloud_mode:
            await self.boot_after_auth()
        return self.user

    async def sign_out(self) -> None:
        if self.backend is None:
            return
        try:
            await self.backend.sign_out()
        except RemoteError as error:
            logger.warning("Remote sign-out failed: %s", error.message)
        await self._clear_realtime()
        self.scheduler.cancel_all()
        self._generation += 1
        self.ledger = None
        self.user = None
        self.cloud_session_repo.clear_tokens()
        self.state["time_warp"] = None
        self._save_preferences()
        self.local_state_repo.remove_state()
        await self.activate_mode(Mode.CLOUD)
        self._notify("Signed out. Sign in to continue syncing.")

    # ─────────────────────────────────────────────────────────────
    # Remote reloads
    # ─────────────────────────────────────────────────────────────

    async def reload_events(self) -> None:
        """Refold the ledger and replace local entries with the result."""
        async with self._reload_lock:
            ledger = self.ledger
            if ledger is None:
                return
            generation = self._generation
            entries = await ledger.load_entries()
            if generation != self._generation or ledger is not self.ledger:
                return
            self.state["entries"] = entries
            self.persist()
            self._changed()

    async def reload_project(self) -> None:
        async with self._reload_lock:
            ledger = self.ledger
            if ledger is None:
                return
            generation = self._generation
            project = await ledger.fetch_project_state(self.state["project"])
            if generation != self._generation or ledger is not self.ledger:
                return
            self.state["project"] = project
            self.persist()
            self._changed()

    async def _on_remote_events(self) -> None:
        try:
            await self.reload_events()
        except RemoteError as error:
            logger.error("Realtime reload of events failed: %s", error.message)

    async def _on_remote_project(self) -> None:
        try:
            await self.reload_project()
        except RemoteError as error:
            logger.error("Realtime reload of project failed: %s", error.message)

    async def _recover(self) -> None:
        try:
            await self.reload_events()
        except RemoteError as error:
            logger.error("Reload after failed write failed: %s", error.message)
            self._notify("Cloud refresh failed")

    async def refresh(self) -> bool:
        if not self.is_remote:
            self._notify("Sign in to sync")
            return False
        try:
            await self.reload_project()
            await self.reload_events()
        except RemoteError as error:
            logger.error("Refreshing from server failed: %s", error.message)
            self._notify("Cloud refresh failed")
            return False
        self._notify("Latest cloud data loaded")
        return True

    # ─────────────────────────────────────────────────────────────
    # Word counts
    # ─────────────────────────────────────────────────────────────

    def apply_add(self, day: Ymd, delta: int) -> Entries:
        self.state["entries"] = add_local(self.state["entries"], day, delta)
        self.history.push(day, delta)
        self.persist()
        self._changed()
        return self.state["entries"]

    async def reconcile_add(self, day: Ymd, delta: int) -> None:
        ledger = self.ledger
        if ledger is None:
            return
        generation = self._generation
        try:
            await ledger.add_event(day, delta)
        except RemoteError as error:
            logger.error("Saving %+d words for %s failed: %s", delta, day, error.message)
            if generation != self._generation:
                return
            self._notify("Save failed; reloading…")
            await self._recover()
            return
        ledger.snapshot[day] = ledger.snapshot.get(day, 0) + delta

    async def add_words(self, raw: Union[str, int, float]) -> int:
        self._require_interactive()
        delta = parse_word_count(raw)
        day = self.viewing_day()
        if not in_range(self.state["project"], day):
            raise EntryValidationError("Date is outside project window")
        self.apply_add(day, delta)
        if self.is_remote:
            await self.reconcile_add(day, delta)
        return delta

    def apply_undo(self) -> Optional[UndoSnapshot]:
        snapshot = self.history.pop()
        if snapshot is None:
            return None
        self.state["entries"] = undo_local(self.state["entries"], snapshot)
        self.persist()
        self._changed()
        return snapshot

    async def reconcile_undo(self, snapshot: UndoSnapshot) -> None:
        ledger = self.ledger
        if ledger is None:
            return
        generation = self._generation
        day = snapshot["day"]
        try:
            await ledger.add_event(day, -snapshot["delta"])
        except RemoteError as error:
            logger.error("Undo for %s failed: %s", day, error.message)
            if generation != self._generation:
                return
            self._notify("Cloud undo failed; refreshing…")
            await self._recover()
            return
        if day in ledger.snapshot:
            ledger.snapshot[day] = self.state["entries"].get(day, 0)

    async def undo(self) -> Optional[UndoSnapshot]:
        self._require_interactive()
        snapshot = self.apply_undo()
        if snapshot is not None and self.is_remote:
            await self.reconcile_undo(snapshot)
        return snapshot

    def apply_day_total(self, day: Ymd, total: int) -> Entries:
        self.state["entries"] = set_day_total(self.state["entries"], day, total)
        self.persist()
        self._changed()
        return self.state["entries"]

    def edit_day_total(self, day: Ymd, raw: Union[str, int, float]) -> int:
        """
        Set the total for one day and queue its reconciliation.

        The expected server total is read before the local change so that
        a write from another device since the last fold shows up as a
        conflict when the debounced sync runs.
        """
        self._require_interactive()
        if not is_ymd(day):
            raise EntryValidationError(f"Not a YYYY-MM-DD date: {day!r}")
        target = parse_day_total(raw)
        expected = self.server_snapshot.get(day, 0)
        self.apply_day_total(day, target)
        if self.is_remote:
            self.scheduler.schedule(day, expected, target)
        return target

    async def _sync_day(self, day: Ymd, expected: int, target: int) -> None:
        await self.sync_day_total_now(day, expected, target)

    async def sync_day_total_now(
        self, day: Ymd, expected: Optional[int], target: int, force: bool = False
    ) -> Optional[SyncOutcome]:
        ledger = self.ledger
        if not self.is_remote or ledger is None:
            return None
        generation = self._generation
        outcome = await ledger.sync_day_total(
            day, expected, target, self.resolve_conflict, force=force
        )
        if generation != self._generation:
            return outcome
        if outcome["status"] == "reverted":
            self.apply_day_total(day, outcome["total"])
            self._notify("Reloaded server total")
        elif outcome["status"] == "failed":
            self._notify("Sync failed; please try again")
        return outcome

    # ─────────────────────────────────────────────────────────────
    # Project settings and preferences
    # ─────────────────────────────────────────────────────────────

    async def save_settings(
        self,
        name: Optional[str] = None,
        goal_words: Optional[int] = None,
        start_date: Optional[Ymd] = None,
        end_date: Optional[Ymd] = None,
        baseline_words: Optional[int] = None,
        theme: Optional[str] = None,
    ) -> None:
        self._require_interactive()
        self.state["project"] = apply_settings(
            self.state["project"],
            name=name,
            goal_words=goal_words,
            start_date=start_date,
            end_date=end_date,
            baseline_words=baseline_words,
        )
        if theme is not None:
            self.state["theme"] = normalize_theme(theme)
        self.persist()
        self._changed()

        if self.is_remote and self.ledger is not None:
            try:
                await self.ledger.sync_project_settings(self.state["project"])
            except RemoteError as error:
                logger.error("Syncing project settings failed: %s", error.message)
                self._notify("Cloud save failed; keeping changes locally")
                return
            self._notify("Project settings synced to cloud")
        else:
            self._notify("Project settings updated")

    def set_time_warp(self, day: Optional[Ymd]) -> None:
        self._require_interactive()
        if day is not None and not is_ymd(day):
            raise EntryValidationError(f"Not a YYYY-MM-DD date: {day!r}")
        self.state["time_warp"] = day
        self.persist()
        self._changed()

    def set_theme(self, theme: str) -> str:
        self.state["theme"] = normalize_theme(theme)
        self.persist()
        self._changed()
        return self.state["theme"]

    # ─────────────────────────────────────────────────────────────
    # Reset, import and export
    # ─────────────────────────────────────────────────────────────

    async def reset_all(self) -> None:
        """Erase project and entries here and, when signed in, in the cloud."""
        self._require_interactive()
        self.history.clear()
        self._reset_project_data()
        self.state["time_warp"] = None
        self._local_snapshot = {}
        self._save_preferences()
        self.local_state_repo.remove_state()
        if self.is_local_mode:
            self.local_state_repo.save_state(self.state)
        self._changed()

        if self.is_remote and self.ledger is not None:
            try:
                await asyncio.gather(
                    self.ledger.delete_all_events(),
                    self.ledger.sync_project_settings(self.state["project"]),
                )
            except RemoteError as error:
                logger.error("Cloud reset failed: %s", error.message)
                self._notify("Cloud reset hit an error; reload recommended.")
                return
            self._notify("Project reset. Cloud data cleared.")
        else:
            self._notify("Project reset.")

    def export_data(self, exported_at: Optional[pendulum.DateTime] = None) -> ExportPayload:
        return build_export_payload(self.state, self.mode, exported_at or now_utc())

    async def import_data(self, imported: ImportedData) -> None:
        """
        Replace everything with an imported dataset.

        In cloud mode every day known to the server or present in the
        import is force-synced to the imported total, skipping conflict
        checks since the import is meant to overwrite.
        """
        if self.is_cloud_mode and not self.is_remote:
            raise AuthenticationRequiredError(
                "Sign in before importing when cloud sync is enabled."
            )

        self.history.clear()
        self._reset_project_data()
        self.state["project"] = imported["project"]
        self.state["entries"] = dict(imported["entries"])
        if imported["theme"] is not None:
            self.state["theme"] = imported["theme"]
        self.state["time_warp"] = imported["time_warp"]
        self.persist()
        self._changed()

        ledger = self.ledger
        if not self.is_remote or ledger is None:
            self._notify("Import complete (offline)")
            return

        try:
            await ledger.sync_project_settings(self.state["project"])
            prior = dict(ledger.snapshot)
            entries = self.state["entries"]
            for day in sorted(set(prior) | set(entries)):
                outcome = await ledger.sync_day_total(
                    day, prior.get(day, 0), entries.get(day, 0), force=True
                )
                if outcome["status"] == "failed":
                    raise RemoteError(f"Syncing {day} failed")
            ledger.snapshot = dict(entries)
        except RemoteError as error:
            logger.error("Cloud import sync failed: %s", error.message)
            self._notify("Cloud import failed; data kept locally")
            return
        self._changed()
        self._notify("Imported data synced to cloud")

    async def close(self) -> None:
        """Let queued syncs finish, then drop realtime subscriptions."""
        await self.scheduler.drain()
        await self._clear_realtime()
