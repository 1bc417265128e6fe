# SPDX-License-Identifier: MIT

import json

import pendulum
import pytest

from wordsprint.model.mode import Mode
from wordsprint.service.transfer import (
    ImportValidationError,
    build_export_payload,
    dump_export_payload,
    export_filename,
    load_import_text,
    parse_import_payload,
)
from wordsprint.template.app_state import get_app_state_template

EXPORTED_AT = pendulum.datetime(2025, 11, 12, 9, 30, tz="UTC")


@pytest.fixture
def state():
    state = get_app_state_template()
    state["project"]["name"] = "Novel"
    state["project"]["start_date"] = pendulum.date(2025, 11, 1)
    state["project"]["end_date"] = pendulum.date(2025, 11, 30)
    state["project"]["baseline_words"] = 2000
    state["entries"] = {"2025-11-01": 1500, "2025-11-02": 900}
    state["theme"] = "midnight"
    state["time_warp"] = "2025-11-02"
    return state


def test_export_payload_shape(state):
    payload = build_export_payload(state, Mode.CLOUD, EXPORTED_AT)

    assert payload["project"] == {
        "name": "Novel",
        "goalWords": 50000,
        "startDate": "2025-11-01",
        "endDate": "2025-11-30",
        "baselineWords": 2000,
    }
    assert payload["entries"] == {"2025-11-01": 1500, "2025-11-02": 900}
    assert payload["meta"]["mode"] == "cloud"
    assert payload["meta"]["theme"] == "midnight"
    assert payload["meta"]["timeWarp"] == "2025-11-02"
    assert payload["meta"]["exportedAt"].startswith("2025-11-12T09:30:00")


def test_export_filename():
    assert export_filename(Mode.CLOUD, EXPORTED_AT) == "wordtracker-cloud-2025-11-12.json"
    assert export_filename(Mode.LOCAL, EXPORTED_AT) == "wordtracker-offline-2025-11-12.json"
    assert export_filename(None, EXPORTED_AT) == "wordtracker-offline-2025-11-12.json"


def test_export_then_import_keeps_everything(state):
    text = dump_export_payload(build_export_payload(state, Mode.LOCAL, EXPORTED_AT))
    imported = load_import_text(text)

    assert imported["project"] == state["project"]
    assert imported["entries"] == state["entries"]
    assert imported["theme"] == "midnight"
    assert imported["time_warp"] == "2025-11-02"


def test_import_falls_back_field_by_field():
    imported = parse_import_payload(
        {
            "project": {
                "name": "   ",
                "goalWords": -5,
                "startDate": "2025-02-30",
                "endDate": "2025-12-31",
                "baselineWords": "lots",
            },
            "entries": {
                "2025-11-01": "250",
                "not-a-day": 10,
                "2025-11-02": "garbage",
                "2025-11-03": 12.9,
            },
            "meta": {"theme": "neon", "timeWarp": "yesterday"},
        }
    )

    project = imported["project"]
    assert project["name"].startswith("NaNo ")
    assert project["goal_words"] == 50000
    assert project["start_date"].month == 11
    assert project["end_date"] == pendulum.date(2025, 12, 31)
    assert project["baseline_words"] == 0
    assert imported["entries"] == {"2025-11-01": 250, "2025-11-02": 0, "2025-11-03": 12}
    assert imported["theme"] == "spruce"
    assert imported["time_warp"] is None


def test_import_without_meta_keeps_theme():
    imported = parse_import_payload({"entries": {}})
    assert imported["theme"] is None
    assert imported["entries"] == {}


def test_import_rejects_non_objects():
    with pytest.raises(ImportValidationError):
        parse_import_payload([1, 2, 3])


def test_import_rejects_bad_json():
    with pytest.raises(ImportValidationError) as error:
        load_import_text("{not json")
    assert str(error.value) == "Import failed. Check the JSON file."


def test_dump_is_json(state):
    text = dump_export_payload(build_export_payload(state, Mode.LOCAL, EXPORTED_AT))
    assert json.loads(text)["project"]["name"] == "Novel"
