# SPDX-License-Identifier: MIT

import math
import re
from typing import Optional, Union

import pendulum

from wordsprint.model.ymd import Ymd

MONTHS = [
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
]

YMD_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def now_utc() -> pendulum.DateTime:
    return pendulum.now("UTC")


def pad(value: int) -> str:
    return str(value).rjust(2, "0")


def ymd_utc(value: Union[pendulum.Date, pendulum.DateTime]) -> Ymd:
    if isinstance(value, pendulum.DateTime):
        value = value.in_tz("UTC").date()
    return f"{value.year:04d}-{pad(value.month)}-{pad(value.day)}"


def today_ymd_utc() -> Ymd:
    return ymd_utc(now_utc())


def is_ymd(value: object) -> bool:
    """True for strings shaped like YYYY-MM-DD that name a real calendar day."""
    if not isinstance(value, str) or YMD_PATTERN.match(value) is None:
        return False
    year, month, day = map(int, value.split("-"))
    try:
        pendulum.date(year, month, day)
    except ValueError:
        return False
    return True


def parse_ymd(value: str) -> pendulum.Date:
    if not is_ymd(value):
        raise ValueError(f"Not a YYYY-MM-DD date: {value!r}")
    year, month, day = map(int, value.split("-"))
    return pendulum.date(year, month, day)


def dates_in_range_utc(start: Ymd, end: Ymd) -> list[Ymd]:
    """Every calendar day from start to end inclusive; empty when end < start."""
    days: list[Ymd] = []
    cursor = parse_ymd(start)
    last = parse_ymd(end)
    while cursor <= last:
        days.append(ymd_utc(cursor))
        cursor = cursor.add(days=1)
    return days


def days_between(start: Ymd, end: Ymd) -> int:
    """Signed number of whole days from start to end."""
    return parse_ymd(start).diff(parse_ymd(end), False).in_days()


def fmt_md(ymd: Ymd) -> str:
    _, month, day = map(int, ymd.split("-"))
    return f"{MONTHS[month - 1]} {day}"


def fmt_range(start: Ymd, end: Ymd) -> str:
    y1, m1, d1 = map(int, start.split("-"))
    y2, m2, d2 = map(int, end.split("-"))
    same_year = y1 == y2
    if same_year and m1 == m2:
        return f"{MONTHS[m1 - 1]} {d1} – {d2}"
    if same_year:
        return f"{MONTHS[m1 - 1]} {d1} – {MONTHS[m2 - 1]} {d2}"
    return f"{MONTHS[m1 - 1]} {d1}, {y1} – {MONTHS[m2 - 1]} {d2}, {y2}"


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def format_relative(
    moment: pendulum.DateTime, now: Optional[pendulum.DateTime] = None
) -> str:
    if now is None:
        now = now_utc()
    seconds = (now - moment).total_seconds()
    if seconds < 45:
        return "just now"
    mins = _round_half_up(seconds / 60)
    if mins < 60:
        return f"{mins} min{'' if mins == 1 else 's'} ago"
    hours = _round_half_up(mins / 60)
    if hours < 24:
        return f"{hours} hr{'' if hours == 1 else 's'} ago"
    days = _round_half_up(hours / 24)
    return f"{days} day{'' if days == 1 else 's'} ago"
