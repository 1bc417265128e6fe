# SPDX-License-Identifier: MIT

from wordsprint.model.app_state import AppState, Preferences
from wordsprint.model.theme import DEFAULT_THEME
from wordsprint.template.project import get_project_template


def get_app_state_template() -> AppState:
    return {
        "project": get_project_template(),
        "entries": {},
        "time_warp": None,
        "theme": DEFAULT_THEME,
    }


def get_preferences_template() -> Preferences:
    return {
        "time_warp": None,
        "theme": DEFAULT_THEME,
    }
