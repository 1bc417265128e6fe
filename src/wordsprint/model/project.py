# SPDX-License-Identifier: MIT

from typing import TypedDict

import pendulum


class Project(TypedDict):
    name: str
    goal_words: int
    start_date: pendulum.Date
    end_date: pendulum.Date
    baseline_words: int  # Words credited before tracking began
