# SPDX-License-Identifier: MIT

from typing import Optional

from wordsprint.model.theme import DEFAULT_THEME, THEME_IDS, THEMES, Theme


def normalize_theme(value: Optional[str]) -> str:
    return value if value in THEME_IDS else DEFAULT_THEME


def get_theme(value: Optional[str]) -> Theme:
    theme_id = normalize_theme(value)
    return [theme for theme in THEMES if theme["id"] == theme_id][0]
