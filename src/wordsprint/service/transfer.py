# SPDX-License-Identifier: MIT

import json
from typing import Any, Optional, TypedDict

import pendulum

from wordsprint.model.app_state import AppState
from wordsprint.model.entries import Entries
from wordsprint.model.export import ExportPayload
from wordsprint.model.mode import Mode
from wordsprint.model.project import Project
from wordsprint.model.ymd import Ymd
from wordsprint.service.theme import normalize_theme
from wordsprint.template.project import get_project_template
from wordsprint.time import is_ymd, parse_ymd, ymd_utc


class ImportValidationError(Exception):
    """Raised when an import payload cannot be used at all."""

    pass


class ImportedData(TypedDict):
    project: Project
    entries: Entries
    theme: Optional[str]  # None keeps the current theme
    time_warp: Optional[Ymd]


def build_export_payload(
    state: AppState, mode: Optional[Mode], exported_at: pendulum.DateTime
) -> ExportPayload:
    project = state["project"]
    return {
        "project": {
            "name": project["name"],
            "goalWords": project["goal_words"],
            "startDate": ymd_utc(project["start_date"]),
            "endDate": ymd_utc(project["end_date"]),
            "baselineWords": project["baseline_words"],
        },
        "entries": dict(state["entries"]),
        "meta": {
            "mode": mode.value if mode is not None else None,
            "theme": state["theme"],
            "timeWarp": state["time_warp"],
            "exportedAt": exported_at.isoformat(),
        },
    }


def export_filename(mode: Optional[Mode], exported_at: pendulum.DateTime) -> str:
    suffix = "cloud" if mode == Mode.CLOUD else "offline"
    return f"wordtracker-{suffix}-{exported_at.format('YYYY-MM-DD')}.json"


def dump_export_payload(payload: ExportPayload) -> str:
    return json.dumps(payload, indent=2)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _entry_value(value: Any) -> int:
    if _is_number(value):
        return int(value)
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return 0


def parse_import_payload(data: Any) -> ImportedData:
    """
    Validate an exported dataset field by field.

    The project starts from the defaults; each field is taken only when it
    is well formed, otherwise the default stays. Entry keys that are not
    YYYY-MM-DD days are dropped and unreadable values count as zero.
    """
    if not isinstance(data, dict):
        raise ImportValidationError("Invalid JSON payload")

    raw_project = data.get("project")
    if not isinstance(raw_project, dict):
        raw_project = {}
    raw_entries = data.get("entries")
    if not isinstance(raw_entries, dict):
        raw_entries = {}
    meta = data.get("meta")
    if not isinstance(meta, dict):
        meta = {}

    project = get_project_template()
    name = raw_project.get("name")
    if isinstance(name, str) and name.strip():
        project["name"] = name.strip()
    goal_words = raw_project.get("goalWords")
    if _is_number(goal_words) and goal_words > 0:
        project["goal_words"] = int(goal_words)
    baseline_words = raw_project.get("baselineWords")
    if _is_number(baseline_words) and baseline_words >= 0:
        project["baseline_words"] = int(baseline_words)
    start_date = raw_project.get("startDate")
    if is_ymd(start_date):
        project["start_date"] = parse_ymd(start_date)
    end_date = raw_project.get("endDate")
    if is_ymd(end_date):
        project["end_date"] = parse_ymd(end_date)

    entries: Entries = {}
    for key, value in raw_entries.items():
        if is_ymd(key):
            entries[key] = _entry_value(value)

    theme = meta.get("theme")
    time_warp = meta.get("timeWarp")

    return {
        "project": project,
        "entries": entries,
        "theme": normalize_theme(theme) if theme else None,
        "time_warp": time_warp if is_ymd(time_warp) else None,
    }


def load_import_text(text: str) -> ImportedData:
    try:
        data = json.loads(text or "{}")
    except json.JSONDecodeError:
        raise ImportValidationError("Import failed. Check the JSON file.")
    return parse_import_payload(data)
