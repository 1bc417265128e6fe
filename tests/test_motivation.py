# SPDX-License-Identifier: MIT

import pendulum

from wordsprint.service.motivation import motivation_text, pace_status
from wordsprint.service.series import compute_series


def banner(viewing_day, entries=None, goal=300, baseline=0, start="2025-11-01", end="2025-11-03"):
    project = {
        "name": "Test",
        "goal_words": goal,
        "start_date": pendulum.parse(start).date(),
        "end_date": pendulum.parse(end).date(),
        "baseline_words": baseline,
    }
    series = compute_series(project, entries or {})
    return motivation_text(project, series, viewing_day)


def test_countdown_before_start():
    assert banner("2025-10-30") == "Sprint starts in 2 days • Goal 300 words"
    assert banner("2025-10-31") == "Sprint starts in 1 day • Goal 300 words"


def test_goal_is_formatted_with_separators():
    assert banner("2025-10-31", goal=50000) == "Sprint starts in 1 day • Goal 50,000 words"


def test_finished_after_end():
    assert (
        banner("2025-11-04", {"2025-11-01": 1200})
        == "Sprint finished • 1,200 words written"
    )


def test_goal_reached_when_baseline_covers_goal():
    assert banner("2025-11-02", goal=300, baseline=500) == "Goal reached! • 500 words"


def test_on_pace_behind_and_ahead():
    entries = {"2025-11-01": 100, "2025-11-02": 50}
    assert banner("2025-11-02", entries) == "Day 2 of 3 • On pace • 150 words"
    assert banner("2025-11-03", entries) == "Day 3 of 3 • Behind by 1.5 day • 150 words"
    assert (
        banner("2025-11-01", {"2025-11-01": 300})
        == "Day 1 of 3 • Ahead by 2.0 days • 300 words"
    )


def test_no_dates():
    assert (
        banner("2025-11-01", start="2025-11-05", end="2025-11-01")
        == "Set a project start and end date to begin tracking."
    )


def test_pace_status_thresholds():
    assert pace_status(75, 0, 100) == "On pace"
    assert pace_status(-75, 0, 100) == "On pace"
    assert pace_status(76, 0, 100) == "Ahead by 0.8 day"
    assert pace_status(170, 0, 100) == "Ahead by 1.7 day"
    assert pace_status(0, 180, 100) == "Behind by 1.8 days"
