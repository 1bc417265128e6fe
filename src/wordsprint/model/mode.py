# SPDX-License-Identifier: MIT

from enum import Enum


class Mode(str, Enum):
    LOCAL = "local"
    CLOUD = "cloud"


class SessionState(str, Enum):
    LOCAL = "local"
    CLOUD_UNAUTHENTICATED = "cloud_unauthenticated"
    CLOUD_AUTHENTICATED = "cloud_authenticated"
