# SPDX-License-Identifier: MIT

import pytest

from fakes import InMemoryLedgerBackend
from wordsprint.model.mode import Mode, SessionState
from wordsprint.repository.cloud_session import CloudSessionRepository
from wordsprint.repository.local_state import LocalStateRepository
from wordsprint.repository.mode import ModeRepository
from wordsprint.repository.preferences import PreferencesRepository
from wordsprint.service.entry import EntryValidationError
from wordsprint.service.ledger import BASELINE_WARNING
from wordsprint.service.session import AuthenticationRequiredError, Session
from wordsprint.service.transfer import parse_import_payload

EMAIL = "writer@example.com"


def make_session(backend=None, **kwargs):
    notices = []
    session = Session(
        backend=backend,
        notify=notices.append,
        debounce_seconds=0.01,
        local_state_repo=LocalStateRepository(),
        preferences_repo=PreferencesRepository(),
        mode_repo=ModeRepository(),
        cloud_session_repo=CloudSessionRepository(),
        **kwargs,
    )
    return session, notices


def sprint_day(session, day_of_month=5):
    year = session.state["project"]["start_date"].year
    return f"{year}-11-{day_of_month:02d}"


async def sign_in(session, backend):
    await session.send_magic_link(EMAIL)
    await session.verify_code(EMAIL, backend.codes[EMAIL])


@pytest.fixture
def backend():
    return InMemoryLedgerBackend()


class TestLocalMode:
    async def test_starts_offline_without_backend(self, data_dir):
        session, _ = make_session()
        await session.start()

        assert session.mode == Mode.LOCAL
        assert session.session_state == SessionState.LOCAL
        assert session.sync_status_label() == "Offline mode"
        assert session.is_interactive()

    async def test_add_undo_and_persist(self, data_dir):
        session, _ = make_session()
        await session.start()
        day = sprint_day(session)
        session.set_time_warp(day)

        assert await session.add_words("1,500") == 1500
        assert session.state["entries"][day] == 1500
        session.flush()

        reopened, _ = make_session()
        await reopened.start()
        assert reopened.state["entries"][day] == 1500
        assert reopened.viewing_day() == day

        snapshot = await session.undo()
        assert snapshot == {"day": day, "delta": 1500}
        assert session.state["entries"][day] == 0
        assert await session.undo() is None

    async def test_add_outside_window_is_refused(self, data_dir):
        session, _ = make_session()
        await session.start()
        year = session.state["project"]["start_date"].year
        session.set_time_warp(f"{year}-12-25")

        with pytest.raises(EntryValidationError):
            await session.add_words("100")
        assert session.state["entries"] == {}

    async def test_edit_day_total_needs_a_valid_day(self, data_dir):
        session, _ = make_session()
        await session.start()

        with pytest.raises(EntryValidationError):
            session.edit_day_total("11/05", "100")

    async def test_stored_cloud_mode_without_backend(self, data_dir):
        session, notices = make_session()
        session.mode_repo.set_mode(Mode.CLOUD)
        await session.start()

        assert session.mode == Mode.LOCAL
        assert "Cloud sync not configured" in notices
        assert session.mode_repo.get_mode() == Mode.CLOUD

    async def test_reset(self, data_dir):
        session, notices = make_session()
        await session.start()
        day = sprint_day(session)
        session.set_time_warp(day)
        await session.add_words(300)
        await session.save_settings(name="Renamed")

        await session.reset_all()

        assert session.state["entries"] == {}
        assert session.state["project"]["name"].startswith("NaNo ")
        assert session.state["time_warp"] is None
        assert await session.undo() is None
        assert notices[-1] == "Project reset."

    async def test_import_offline(self, data_dir):
        session, notices = make_session()
        await session.start()

        await session.import_data(
            parse_import_payload(
                {
                    "project": {"name": "Imported", "goalWords": 1000},
                    "entries": {"2025-11-02": 400},
                    "meta": {"theme": "dawn"},
                }
            )
        )

        assert session.state["project"]["name"] == "Imported"
        assert session.state["entries"] == {"2025-11-02": 400}
        assert session.state["theme"] == "dawn"
        assert notices[-1] == "Import complete (offline)"


class TestCloudMode:
    async def test_unauthenticated_cloud_is_read_only(self, data_dir, backend):
        session, _ = make_session(backend)
        await session.start()

        assert session.mode == Mode.CLOUD
        assert session.session_state == SessionState.CLOUD_UNAUTHENTICATED
        assert session.sync_status_label() == "Sign in to sync"
        assert not session.is_interactive()
        with pytest.raises(AuthenticationRequiredError):
            await session.add_words("100")
        with pytest.raises(AuthenticationRequiredError):
            await session.import_data(parse_import_payload({}))

    async def test_sign_in_creates_project_and_writes_events(self, data_dir, backend):
        session, _ = make_session(backend)
        await session.start()
        await sign_in(session, backend)

        assert session.session_state == SessionState.CLOUD_AUTHENTICATED
        assert len(backend.projects) == 1
        assert len(backend.listeners) == 1
        assert session.sync_status_label().startswith("Synced")

        day = sprint_day(session)
        session.set_time_warp(day)
        await session.add_words("250")

        project_id = session.ledger.project_id
        assert backend.server_total(project_id, day) == 250
        assert session.server_snapshot[day] == 250

    async def test_failed_add_reloads_from_server(self, data_dir, backend):
        session, notices = make_session(backend)
        await session.start()
        await sign_in(session, backend)
        day = sprint_day(session)
        session.set_time_warp(day)
        backend.fail_next("insert_event")

        await session.add_words("250")

        assert "Save failed; reloading…" in notices
        assert session.state["entries"].get(day, 0) == 0

    async def test_undo_appends_compensating_event(self, data_dir, backend):
        session, _ = make_session(backend)
        await session.start()
        await sign_in(session, backend)
        day = sprint_day(session)
        session.set_time_warp(day)

        await session.add_words("250")
        await session.undo()

        assert [event["delta"] for event in backend.events] == [250, -250]
        assert backend.server_total(session.ledger.project_id, day) == 0

    async def test_failed_undo_refolds_server_ledger(self, data_dir, backend):
        session, notices = make_session(backend)
        await session.start()
        await sign_in(session, backend)
        day = sprint_day(session)
        session.set_time_warp(day)

        await session.add_words("250")
        backend.fail_next("insert_event")
        await session.undo()

        assert "Cloud undo failed; refreshing…" in notices
        assert backend.server_total(session.ledger.project_id, day) == 250
        assert session.state["entries"][day] == 250
        assert session.server_snapshot[day] == 250

    async def test_edited_total_is_synced_after_debounce(self, data_dir, backend):
        session, _ = make_session(backend)
        await session.start()
        await sign_in(session, backend)
        day = sprint_day(session, 3)

        session.edit_day_total(day, "700")
        session.edit_day_total(day, "900")
        assert session.scheduler.pending() == [day]
        await session.scheduler.drain()

        assert backend.server_total(session.ledger.project_id, day) == 900
        assert len(backend.events) == 1

    async def test_conflicting_edit_is_reverted(self, data_dir, backend):
        session, notices = make_session(backend)
        await session.start()
        await sign_in(session, backend)
        day = sprint_day(session, 3)

        session.edit_day_total(day, "400")
        backend.write_from_other_device(session.ledger.project_id, day, 100)
        await session.scheduler.drain()

        assert session.state["entries"][day] == 100
        assert backend.server_total(session.ledger.project_id, day) == 100
        assert "Reloaded server total" in notices

    async def test_conflicting_edit_can_override(self, data_dir, backend):
        session, _ = make_session(backend, resolve_conflict=lambda day, server, target: True)
        await session.start()
        await sign_in(session, backend)
        day = sprint_day(session, 3)

        session.edit_day_total(day, "400")
        backend.write_from_other_device(session.ledger.project_id, day, 100)
        await session.scheduler.drain()

        assert session.state["entries"][day] == 400
        assert backend.server_total(session.ledger.project_id, day) == 400

    async def test_realtime_change_reloads_entries(self, data_dir, backend):
        session, _ = make_session(backend)
        await session.start()
        await sign_in(session, backend)
        project_id = session.ledger.project_id
        day = sprint_day(session, 8)

        backend.write_from_other_device(project_id, day, 321)
        await backend.broadcast_events(project_id)

        assert session.state["entries"][day] == 321

    async def test_realtime_project_change_reloads_settings(self, data_dir, backend):
        session, _ = make_session(backend)
        await session.start()
        await sign_in(session, backend)
        project_id = session.ledger.project_id

        await backend.update_project(project_id, {"name": "Renamed elsewhere"})
        await backend.broadcast_project(project_id)

        assert session.state["project"]["name"] == "Renamed elsewhere"

    async def test_session_is_restored_from_tokens(self, data_dir, backend):
        first, _ = make_session(backend)
        await first.start()
        await sign_in(first, backend)
        day = sprint_day(first)
        first.set_time_warp(day)
        await first.add_words("600")
        first.flush()

        second, _ = make_session(backend)
        await second.start()

        assert second.session_state == SessionState.CLOUD_AUTHENTICATED
        assert second.state["entries"][day] == 600

    async def test_sign_out(self, data_dir, backend):
        session, notices = make_session(backend)
        await session.start()
        await sign_in(session, backend)

        await session.sign_out()

        assert session.session_state == SessionState.CLOUD_UNAUTHENTICATED
        assert session.cloud_session_repo.get_tokens() is None
        assert backend.listeners == {}
        assert notices[-1] == "Signed out. Sign in to continue syncing."

    async def test_sign_out_completes_when_server_fails(self, data_dir, backend):
        session, notices = make_session(backend)
        await session.start()
        await sign_in(session, backend)
        backend.fail_next("sign_out")

        await session.sign_out()

        assert session.session_state == SessionState.CLOUD_UNAUTHENTICATED
        assert session.ledger is None
        assert session.cloud_session_repo.get_tokens() is None
        assert backend.listeners == {}
        assert notices[-1] == "Signed out. Sign in to continue syncing."

    async def test_settings_with_outdated_schema(self, data_dir):
        backend = InMemoryLedgerBackend(baseline_column=False)
        session, notices = make_session(backend)
        await session.start()
        await sign_in(session, backend)

        await session.save_settings(goal_words=80000, baseline_words=5000)
        await session.save_settings(name="Second save")

        assert backend.projects[0]["goal_words"] == 80000
        assert session.state["project"]["baseline_words"] == 5000
        assert notices.count(BASELINE_WARNING) == 1
        assert notices[-1] == "Project settings synced to cloud"

    async def test_import_overwrites_cloud_totals(self, data_dir, backend):
        session, notices = make_session(backend)
        await session.start()
        await sign_in(session, backend)
        project_id = session.ledger.project_id
        backend.write_from_other_device(project_id, "2025-11-01", 100)
        backend.write_from_other_device(project_id, "2025-11-02", 50)
        await session.reload_events()

        await session.import_data(
            parse_import_payload(
                {"entries": {"2025-11-01": 300, "2025-11-03": 20}}
            )
        )

        assert backend.server_total(project_id, "2025-11-01") == 300
        assert backend.server_total(project_id, "2025-11-02") == 0
        assert backend.server_total(project_id, "2025-11-03") == 20
        assert session.server_snapshot == {"2025-11-01": 300, "2025-11-03": 20}
        assert notices[-1] == "Imported data synced to cloud"

    async def test_cloud_reset_clears_events(self, data_dir, backend):
        session, notices = make_session(backend)
        await session.start()
        await sign_in(session, backend)
        day = sprint_day(session)
        session.set_time_warp(day)
        await session.add_words("250")

        await session.reset_all()

        assert backend.events == []
        assert notices[-1] == "Project reset. Cloud data cleared."


class TestModeSwitching:
    async def test_entering_cloud_replaces_local_entries(self, data_dir, backend):
        session, _ = make_session(backend)
        session.mode_repo.set_mode(Mode.LOCAL)
        await session.start()
        day = sprint_day(session)
        session.set_time_warp(day)
        await session.add_words("999")
        await sign_in(session, backend)
        assert session.mode == Mode.LOCAL

        await session.activate_mode(Mode.CLOUD)

        assert session.session_state == SessionState.CLOUD_AUTHENTICATED
        assert session.state["entries"] == {}
        assert backend.events == []

    async def test_leaving_cloud_keeps_cloud_data_locally(self, data_dir, backend):
        session, _ = make_session(backend)
        await session.start()
        await sign_in(session, backend)
        project_id = session.ledger.project_id
        backend.write_from_other_device(project_id, "2025-11-04", 444)
        await session.reload_events()

        await session.activate_mode(Mode.LOCAL)

        assert session.session_state == SessionState.LOCAL
        assert session.state["entries"] == {"2025-11-04": 444}
        assert session.local_state_repo.get_state()["entries"] == {"2025-11-04": 444}
        assert backend.listeners == {}

    async def test_reload_after_mode_switch_is_ignored(self, data_dir, backend):
        session, _ = make_session(backend)
        await session.start()
        await sign_in(session, backend)
        project_id = session.ledger.project_id
        await session.activate_mode(Mode.LOCAL)

        backend.write_from_other_device(project_id, "2025-11-04", 10)
        await session.reload_events()

        assert session.state["entries"] == {}
