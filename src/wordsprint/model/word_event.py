# SPDX-License-Identifier: MIT

from typing import NotRequired, TypedDict

from wordsprint.model.ymd import Ymd


class WordEvent(TypedDict):
    """One row of the append-only word_events ledger."""

    project_id: str
    user_id: str
    ymd: Ymd
    delta: int  # Signed
    created_at: NotRequired[str]
