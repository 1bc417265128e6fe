# SPDX-License-Identifier: MIT

from typing import Optional

import pendulum

from wordsprint.model.project import Project
from wordsprint.time import now_utc


def get_project_template(year: Optional[int] = None) -> Project:
    if year is None:
        year = now_utc().year
    return {
        "name": f"NaNo {year}",
        "goal_words": 50000,
        "start_date": pendulum.date(year, 11, 1),
        "end_date": pendulum.date(year, 11, 30),
        "baseline_words": 0,
    }
