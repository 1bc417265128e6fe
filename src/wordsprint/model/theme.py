# SPDX-License-Identifier: MIT

from typing import TypedDict


class Theme(TypedDict):
    id: str
    label: str
    accent: str  # rich colour names used by the terminal views
    muted: str
    ok: str
    warn: str


THEMES: list[Theme] = [
    {
        "id": "spruce",
        "label": "Spruce (default)",
        "accent": "spring_green3",
        "muted": "grey62",
        "ok": "green3",
        "warn": "dark_orange",
    },
    {
        "id": "midnight",
        "label": "Midnight",
        "accent": "slate_blue1",
        "muted": "grey50",
        "ok": "cyan3",
        "warn": "orange_red1",
    },
    {
        "id": "charcoal",
        "label": "Charcoal",
        "accent": "grey85",
        "muted": "grey42",
        "ok": "pale_green3",
        "warn": "light_salmon3",
    },
    {
        "id": "sunset",
        "label": "Sunset",
        "accent": "orange1",
        "muted": "rosy_brown",
        "ok": "gold1",
        "warn": "red1",
    },
    {
        "id": "dawn",
        "label": "Aurora",
        "accent": "plum1",
        "muted": "thistle3",
        "ok": "aquamarine1",
        "warn": "hot_pink",
    },
    {
        "id": "sage",
        "label": "Seaside",
        "accent": "dark_sea_green2",
        "muted": "light_slate_grey",
        "ok": "sea_green2",
        "warn": "sandy_brown",
    },
]

DEFAULT_THEME = "spruce"

THEME_IDS = [theme["id"] for theme in THEMES]
