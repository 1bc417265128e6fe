# SPDX-License-Identifier: MIT

from typing import NotRequired, TypedDict


class RemoteProject(TypedDict):
    """A row of the remote projects table."""

    id: str
    owner: str
    name: str
    goal_words: int
    start_date: str
    end_date: str
    baseline_words: NotRequired[int]  # Absent on older schemas
    created_at: NotRequired[str]


class RemoteUser(TypedDict):
    id: str
    email: NotRequired[str]
