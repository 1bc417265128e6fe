# SPDX-License-Identifier: MIT

from typing import TypedDict

from wordsprint.model.ymd import Ymd


class Series(TypedDict):
    days: list[Ymd]
    days_for_chart: list[str]  # "baseline" followed by days
    daily: list[int]
    cumulative: list[int]  # len(days) + 1, index 0 is the baseline
    pace: list[int]  # len(days) + 1, never above the goal
    ideal_per_day: int
    baseline: int
    remaining_target: int


class Stats(TypedDict):
    total: int
    pct: int
    remaining: int
    today_words: int
    ideal_per_day: int
    elapsed: int
    days_left: int
    needed_per_day: int
    behind_pace: bool
