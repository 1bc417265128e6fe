# SPDX-License-Identifier: MIT

from typing import TypedDict

from wordsprint.model.ymd import Ymd


class UndoSnapshot(TypedDict):
    day: Ymd
    delta: int
