# SPDX-License-Identifier: MIT

import atexit

from wordsprint.repository.cloud_session import CLOUD_SESSION_REPO
from wordsprint.repository.configuration import CONFIGURATION_REPO
from wordsprint.repository.local_state import LOCAL_STATE_REPO
from wordsprint.repository.mode import MODE_REPO
from wordsprint.repository.preferences import PREFERENCES_REPO


def flush() -> None:
    CONFIGURATION_REPO.flush()
    MODE_REPO.flush()
    CLOUD_SESSION_REPO.flush()

    PREFERENCES_REPO.flush()
    LOCAL_STATE_REPO.flush()


def register_cleanup() -> None:
    atexit.register(flush)
