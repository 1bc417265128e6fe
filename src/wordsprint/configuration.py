# SPDX-License-Identifier: MIT

import os
from pathlib import Path
from typing import NotRequired, Optional, TypedDict

from yaml import load

try:
    from yaml import CLoader as Loader
except ImportError:
    from yaml import Loader  # type: ignore[assignment]
import platformdirs

APP_NAME = "wordsprint"

CONFIG_PATH = platformdirs.user_config_path(APP_NAME)
APP_CONFIG_PATH = CONFIG_PATH / "config.yaml"

# These will be set dynamically by load_data_path_configuration()
DATA_PATH: Path = platformdirs.user_data_path(APP_NAME)
DATA_STATE_PATH: Path = DATA_PATH / "state.yaml"
DATA_PREFERENCES_PATH: Path = DATA_PATH / "preferences.yaml"
DATA_MODE_PATH: Path = DATA_PATH / "mode.yaml"
DATA_CLOUD_SESSION_PATH: Path = DATA_PATH / "cloud_session.yaml"

SUPABASE_URL_ENV = "WORDSPRINT_SUPABASE_URL"
SUPABASE_ANON_KEY_ENV = "WORDSPRINT_SUPABASE_ANON_KEY"


class Configuration(TypedDict):
    supabase_url: Optional[str]
    supabase_anon_key: Optional[str]
    sync_debounce_ms: int
    log_level: str
    data_path: Optional[str]
    show_header: NotRequired[bool]


def get_default_configuration() -> Configuration:
    return {
        "supabase_url": None,
        "supabase_anon_key": None,
        "sync_debounce_ms": 300,
        "log_level": "WARNING",
        "data_path": None,
        "show_header": True,
    }


def set_data_path(data_path: Path) -> None:
    global \
        DATA_PATH, \
        DATA_STATE_PATH, \
        DATA_PREFERENCES_PATH, \
        DATA_MODE_PATH, \
        DATA_CLOUD_SESSION_PATH

    DATA_PATH = data_path
    DATA_STATE_PATH = DATA_PATH / "state.yaml"
    DATA_PREFERENCES_PATH = DATA_PATH / "preferences.yaml"
    DATA_MODE_PATH = DATA_PATH / "mode.yaml"
    DATA_CLOUD_SESSION_PATH = DATA_PATH / "cloud_session.yaml"


def load_data_path_configuration() -> None:
    """
    Load the configuration and set the DATA_PATH variables dynamically.

    This must be called after the config file exists and before any
    repositories are read.
    """
    if not APP_CONFIG_PATH.is_file():
        # Config doesn't exist yet, use defaults
        return

    config: Optional[Configuration] = load(APP_CONFIG_PATH.read_text(), Loader=Loader)
    if config is None:
        return
    data_path_setting = config.get("data_path")
    if data_path_setting is not None:
        set_data_path(Path(data_path_setting))


def resolve_supabase_credentials(
    config: Configuration,
) -> tuple[Optional[str], Optional[str]]:
    """Environment variables win over the values stored in config.yaml."""
    url = os.environ.get(SUPABASE_URL_ENV) or config.get("supabase_url")
    key = os.environ.get(SUPABASE_ANON_KEY_ENV) or config.get("supabase_anon_key")
    return url, key
