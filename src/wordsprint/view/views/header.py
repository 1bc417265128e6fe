# SPDX-License-Identifier: MIT

from typing import Optional

from rich import print
from rich.padding import Padding

from wordsprint.model.theme import Theme
from wordsprint.view.state import get_show_header


def header(theme: Theme, title: str, sub_header: Optional[str] = None) -> None:
    """Print the application header.

    Args:
        theme: Colours to use
        title: Usually the project name
        sub_header: Optional second line, e.g. the sync status
    """
    if not get_show_header():
        return

    accent = theme["accent"]
    muted = theme["muted"]
    print(Padding(f"[bold {accent}]wordsprint[/bold {accent}]", (1, 0, 0, 1)))
    print(Padding(f"[{accent}]{title}[/{accent}]", (0, 1)))
    if sub_header is not None:
        print(Padding(f"[{muted}]{sub_header}[/{muted}]", (0, 1)))
