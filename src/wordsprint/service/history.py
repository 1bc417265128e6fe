# SPDX-License-Identifier: MIT

from typing import Optional

from wordsprint.model.undo import UndoSnapshot
from wordsprint.model.ymd import Ymd


class UndoHistory:
    """Single-step undo buffer. Each push replaces whatever was pending."""

    def __init__(self) -> None:
        self._last: Optional[UndoSnapshot] = None

    def push(self, day: Ymd, delta: int) -> None:
        self._last = {"day": day, "delta": delta}

    def pop(self) -> Optional[UndoSnapshot]:
        snapshot = self._last
        self._last = None
        return snapshot

    def peek(self) -> Optional[UndoSnapshot]:
        return self._last

    def clear(self) -> None:
        self._last = None
