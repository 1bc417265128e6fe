# SPDX-License-Identifier: MIT

from copy import deepcopy
from typing import Optional

from wordsprint.model.project import Project
from wordsprint.model.ymd import Ymd
from wordsprint.time import parse_ymd, ymd_utc


class ProjectValidationError(Exception):
    """Raised when project settings would leave the project unusable."""

    pass


def in_range(project: Project, day: Ymd) -> bool:
    return ymd_utc(project["start_date"]) <= day <= ymd_utc(project["end_date"])


def apply_settings(
    project: Project,
    name: Optional[str] = None,
    goal_words: Optional[int] = None,
    start_date: Optional[Ymd] = None,
    end_date: Optional[Ymd] = None,
    baseline_words: Optional[int] = None,
) -> Project:
    """
    Return a copy of project with the given settings applied.

    A blank name or a goal that is not positive is ignored and the previous
    value kept. A negative baseline is clamped to zero.
    """
    updated = deepcopy(project)
    if name is not None and name.strip() != "":
        updated["name"] = name.strip()
    if goal_words is not None and goal_words > 0:
        updated["goal_words"] = int(goal_words)
    try:
        if start_date is not None:
            updated["start_date"] = parse_ymd(start_date)
        if end_date is not None:
            updated["end_date"] = parse_ymd(end_date)
    except ValueError as error:
        raise ProjectValidationError(str(error))
    if baseline_words is not None:
        updated["baseline_words"] = max(0, int(baseline_words))

    if updated["end_date"] < updated["start_date"]:
        raise ProjectValidationError(
            f"End date {ymd_utc(updated['end_date'])} is before start date "
            f"{ymd_utc(updated['start_date'])}."
        )
    return updated
