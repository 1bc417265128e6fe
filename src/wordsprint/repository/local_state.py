# SPDX-License-Identifier: MIT

from copy import deepcopy
from typing import Any, Optional, cast

from yaml import dump, load

try:
    from yaml import CDumper as Dumper
    from yaml import CLoader as Loader
except ImportError:
    from yaml import Dumper, Loader  # type: ignore[assignment]

from wordsprint import configuration
from wordsprint.model.app_state import AppState
from wordsprint.service.theme import normalize_theme
from wordsprint.template.app_state import get_app_state_template
from wordsprint.time import is_ymd, parse_ymd, ymd_utc


class LocalStateRepository:
    """
    The primary record: project, entries, time warp and theme.

    The record may be absent (first run, or after a reset); get_state then
    returns None and callers fall back to the defaults.
    """

    def __init__(self) -> None:
        self._state: Optional[AppState] = None
        self._loaded = False
        self._removed = False
        self.is_dirty = False

    @property
    def state(self) -> Optional[AppState]:
        if not self._loaded:
            self.__load_data()
        return self._state

    def __load_data(self) -> None:
        self._loaded = True
        self._state = None
        if not configuration.DATA_STATE_PATH.is_file():
            return
        raw_state = load(configuration.DATA_STATE_PATH.read_text(), Loader=Loader)
        if isinstance(raw_state, dict):
            self._state = self.__convert_state_for_deserialization(raw_state)

    def __save_data(self) -> None:
        if self._state is None:
            if self._removed and configuration.DATA_STATE_PATH.exists():
                configuration.DATA_STATE_PATH.unlink()
            return
        serializable_state = self.__convert_state_for_serialization(
            deepcopy(self._state)
        )
        configuration.DATA_STATE_PATH.parent.mkdir(parents=True, exist_ok=True)
        configuration.DATA_STATE_PATH.write_text(
            dump(serializable_state, Dumper=Dumper)
        )

    def flush(self) -> bool:
        if self.is_dirty:
            self.__save_data()
            self.is_dirty = False
            self._removed = False
            return True
        return False

    def __convert_state_for_serialization(self, state: AppState) -> dict[str, Any]:
        serializable_state = cast(dict[str, Any], state)
        project = serializable_state["project"]
        project["start_date"] = ymd_utc(project["start_date"])
        project["end_date"] = ymd_utc(project["end_date"])
        return serializable_state

    def __convert_state_for_deserialization(self, raw_state: dict[str, Any]) -> AppState:
        # Merge over the defaults so records written by older versions load
        state = get_app_state_template()
        raw_project = raw_state.get("project") or {}
        project = state["project"]
        if raw_project.get("name") is not None:
            project["name"] = raw_project["name"]
        if raw_project.get("goal_words") is not None:
            project["goal_words"] = int(raw_project["goal_words"])
        if is_ymd(str(raw_project.get("start_date"))):
            project["start_date"] = parse_ymd(str(raw_project["start_date"]))
        if is_ymd(str(raw_project.get("end_date"))):
            project["end_date"] = parse_ymd(str(raw_project["end_date"]))
        if raw_project.get("baseline_words") is not None:
            project["baseline_words"] = max(0, int(raw_project["baseline_words"]))

        raw_entries = raw_state.get("entries") or {}
        state["entries"] = {
            str(day): int(value or 0) for day, value in raw_entries.items()
        }
        time_warp = raw_state.get("time_warp")
        state["time_warp"] = str(time_warp) if is_ymd(str(time_warp)) else None
        state["theme"] = normalize_theme(raw_state.get("theme"))
        return state

    def get_state(self) -> Optional[AppState]:
        return deepcopy(self.state)

    def save_state(self, state: AppState) -> None:
        self.is_dirty = True
        self._loaded = True
        self._removed = False
        self._state = deepcopy(state)

    def remove_state(self) -> None:
        self.is_dirty = True
        self._loaded = True
        self._removed = True
        self._state = None


LOCAL_STATE_REPO = LocalStateRepository()
