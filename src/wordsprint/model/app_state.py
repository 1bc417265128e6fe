# SPDX-License-Identifier: MIT

from typing import Optional, TypedDict

from wordsprint.model.entries import Entries
from wordsprint.model.project import Project
from wordsprint.model.ymd import Ymd


class AppState(TypedDict):
    project: Project
    entries: Entries
    time_warp: Optional[Ymd]  # Overrides the viewing day when set
    theme: str


class Preferences(TypedDict):
    time_warp: Optional[Ymd]
    theme: str
