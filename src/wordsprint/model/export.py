# SPDX-License-Identifier: MIT

from typing import Optional, TypedDict


class ExportProject(TypedDict):
    name: str
    goalWords: int
    startDate: str
    endDate: str
    baselineWords: int


class ExportMeta(TypedDict):
    mode: Optional[str]
    theme: str
    timeWarp: Optional[str]
    exportedAt: str


class ExportPayload(TypedDict):
    project: ExportProject
    entries: dict[str, int]
    meta: ExportMeta
