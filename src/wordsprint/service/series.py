# SPDX-License-Identifier: MIT

import math

from wordsprint.model.entries import Entries
from wordsprint.model.project import Project
from wordsprint.model.series import Series, Stats
from wordsprint.model.ymd import Ymd
from wordsprint.time import dates_in_range_utc, days_between, ymd_utc


def compute_series(project: Project, entries: Entries) -> Series:
    """
    Turn a project and its sparse daily totals into the cumulative and
    ideal-pace series.

    Both cumulative and pace have one more element than days: index 0 is
    the baseline, index i + 1 is the value at the end of days[i].
    """
    days = dates_in_range_utc(
        ymd_utc(project["start_date"]), ymd_utc(project["end_date"])
    )
    goal = project["goal_words"]
    baseline = project["baseline_words"] or 0
    remaining_target = max(0, goal - baseline)

    daily = [int(entries.get(day, 0) or 0) for day in days]

    cumulative = [baseline]
    for words in daily:
        cumulative.append(cumulative[-1] + words)

    if len(days) > 0:
        ideal_per_day = math.ceil(remaining_target / max(1, len(days)))
    else:
        ideal_per_day = remaining_target

    pace = [baseline]
    for index in range(len(days)):
        pace.append(min(goal, baseline + ideal_per_day * (index + 1)))

    return {
        "days": days,
        "days_for_chart": ["baseline", *days],
        "daily": daily,
        "cumulative": cumulative,
        "pace": pace,
        "ideal_per_day": ideal_per_day,
        "baseline": baseline,
        "remaining_target": remaining_target,
    }


def cutoff_index_for_viewing(days: list[Ymd], viewing_day: Ymd) -> int:
    """How much of the cumulative series counts as elapsed on viewing_day."""
    if len(days) == 0:
        return 0
    if viewing_day < days[0]:
        return 0
    if viewing_day > days[-1]:
        return len(days)
    return days.index(viewing_day) + 1


def words_on(day: Ymd, series: Series) -> int:
    if day in series["days"]:
        return series["daily"][series["days"].index(day)]
    return 0


def compute_stats(project: Project, series: Series, viewing_day: Ymd) -> Stats:
    days = series["days"]
    goal = project["goal_words"]
    ideal_per_day = series["ideal_per_day"]

    cut = cutoff_index_for_viewing(days, viewing_day)
    total = series["cumulative"][cut]
    pct = 0
    if goal > 0:
        pct = min(100, math.floor(total / max(1, goal) * 100 + 0.5))
    remaining = max(0, goal - total)

    elapsed = 0
    days_left = len(days)
    if len(days) > 0 and viewing_day >= days[0]:
        clamped = min(viewing_day, days[-1])
        elapsed = min(len(days), days_between(days[0], clamped) + 1)
        days_left = max(0, len(days) - elapsed)

    needed_per_day = 0
    if remaining != 0:
        needed_per_day = math.ceil(remaining / max(1, days_left))

    return {
        "total": total,
        "pct": pct,
        "remaining": remaining,
        "today_words": words_on(viewing_day, series),
        "ideal_per_day": ideal_per_day,
        "elapsed": elapsed,
        "days_left": days_left,
        "needed_per_day": needed_per_day,
        "behind_pace": needed_per_day > ideal_per_day,
    }
