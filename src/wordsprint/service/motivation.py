# SPDX-License-Identifier: MIT

from wordsprint.model.project import Project
from wordsprint.model.series import Series
from wordsprint.model.ymd import Ymd
from wordsprint.time import days_between

AHEAD_THRESHOLD_DAYS = 0.75
PLURAL_THRESHOLD_DAYS = 1.75


def _days_label(value: float) -> str:
    return f"{value:.1f} day{'s' if value >= PLURAL_THRESHOLD_DAYS else ''}"


def pace_status(actual_total: int, expected: int, ideal_per_day: int) -> str:
    ahead_days = (actual_total - expected) / max(1, ideal_per_day)
    if ahead_days > AHEAD_THRESHOLD_DAYS:
        return f"Ahead by {_days_label(ahead_days)}"
    if ahead_days < -AHEAD_THRESHOLD_DAYS:
        return f"Behind by {_days_label(abs(ahead_days))}"
    return "On pace"


def motivation_text(project: Project, series: Series, viewing_day: Ymd) -> str:
    """
    Build the one-line banner shown above the stats.

    Before the sprint it counts down to the start, after the sprint it
    reports the final total, and in between it compares the words written
    so far with the ideal pace for that day.
    """
    days = series["days"]
    if len(days) == 0:
        return "Set a project start and end date to begin tracking."

    goal = project["goal_words"]
    baseline = series["baseline"]
    cumulative = series["cumulative"]
    total_days = len(days)

    if viewing_day < days[0]:
        days_until = days_between(viewing_day, days[0])
        return (
            f"Sprint starts in {days_until} day{'' if days_until == 1 else 's'}"
            f" • Goal {goal:,} words"
        )
    if viewing_day > days[-1]:
        return f"Sprint finished • {cumulative[-1]:,} words written"

    day_number = min(total_days, max(1, days.index(viewing_day) + 1))
    actual_total = cumulative[day_number]

    if goal <= baseline:
        return f"Goal reached! • {actual_total:,} words"

    ideal_per_day = series["ideal_per_day"]
    expected = baseline + ideal_per_day * day_number
    status = pace_status(actual_total, expected, ideal_per_day)
    return f"Day {day_number} of {total_days} • {status} • {actual_total:,} words"
