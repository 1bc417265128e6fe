# SPDX-License-Identifier: MIT

from copy import deepcopy
from typing import Optional

from yaml import dump, load

try:
    from yaml import CDumper as Dumper
    from yaml import CLoader as Loader
except ImportError:
    from yaml import Dumper, Loader  # type: ignore[assignment]

from wordsprint import configuration
from wordsprint.model.app_state import Preferences
from wordsprint.service.theme import normalize_theme
from wordsprint.template.app_state import get_preferences_template
from wordsprint.time import is_ymd


class PreferencesRepository:
    """Theme and time warp, kept apart so they survive a project reset."""

    def __init__(self) -> None:
        self._preferences: Optional[Preferences] = None
        self.is_dirty = False

    @property
    def preferences(self) -> Preferences:
        if self._preferences is None:
            self.__load_data()
        if self._preferences is None:
            raise ValueError()
        return self._preferences

    def __load_data(self) -> None:
        self._preferences = get_preferences_template()
        if not configuration.DATA_PREFERENCES_PATH.is_file():
            return
        raw_preferences = load(
            configuration.DATA_PREFERENCES_PATH.read_text(), Loader=Loader
        )
        if not isinstance(raw_preferences, dict):
            return
        time_warp = raw_preferences.get("time_warp")
        if is_ymd(str(time_warp)):
            self._preferences["time_warp"] = str(time_warp)
        self._preferences["theme"] = normalize_theme(raw_preferences.get("theme"))

    def __save_data(self, preferences: Preferences) -> None:
        configuration.DATA_PREFERENCES_PATH.parent.mkdir(parents=True, exist_ok=True)
        configuration.DATA_PREFERENCES_PATH.write_text(
            dump(dict(preferences), Dumper=Dumper)
        )

    def flush(self) -> bool:
        if self._preferences is not None and self.is_dirty:
            self.__save_data(self._preferences)
            self.is_dirty = False
            return True
        return False

    def get_preferences(self) -> Preferences:
        return deepcopy(self.preferences)

    def save_preferences(self, time_warp: Optional[str], theme: str) -> None:
        self.is_dirty = True
        self.preferences["time_warp"] = time_warp
        self.preferences["theme"] = normalize_theme(theme)


PREFERENCES_REPO = PreferencesRepository()
