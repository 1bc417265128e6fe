# SPDX-License-Identifier: MIT

import math
from typing import Union

from wordsprint.model.entries import Entries
from wordsprint.model.undo import UndoSnapshot
from wordsprint.model.ymd import Ymd


class EntryValidationError(Exception):
    """Raised when a word count entered by the user is unusable."""

    pass


def _parse_number(raw: Union[str, int, float]) -> float:
    if isinstance(raw, bool):
        raise EntryValidationError(f"Word count must be a number. Got: {raw}")
    if isinstance(raw, (int, float)):
        return float(raw)
    try:
        return float(raw.strip().replace(",", "").replace("_", ""))
    except ValueError:
        raise EntryValidationError(f"Word count must be a number. Got: {raw!r}")


def parse_word_count(raw: Union[str, int, float]) -> int:
    """
    Validate the words typed into the add box.

    Returns a positive integer, raises EntryValidationError for anything
    non-numeric, zero or negative.
    """
    value = _parse_number(raw)
    if not math.isfinite(value) or int(value) <= 0:
        raise EntryValidationError(
            f"Word count must be a positive number. Got: {raw!r}"
        )
    return int(value)


def parse_day_total(raw: Union[str, int, float]) -> int:
    """Validate an edited day total. Blank means zero, negatives are refused."""
    if isinstance(raw, str) and raw.strip() == "":
        return 0
    value = _parse_number(raw)
    if not math.isfinite(value) or value < 0:
        raise EntryValidationError(
            f"Day total must be zero or a positive number. Got: {raw!r}"
        )
    return int(value)


def add_local(entries: Entries, day: Ymd, delta: int) -> Entries:
    updated = dict(entries)
    updated[day] = int(updated.get(day, 0) or 0) + delta
    return updated


def undo_local(entries: Entries, snapshot: UndoSnapshot) -> Entries:
    updated = dict(entries)
    day = snapshot["day"]
    updated[day] = max(0, int(updated.get(day, 0) or 0) - snapshot["delta"])
    return updated


def set_day_total(entries: Entries, day: Ymd, total: int) -> Entries:
    updated = dict(entries)
    updated[day] = total
    return updated
