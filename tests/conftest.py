# SPDX-License-Identifier: MIT

from pathlib import Path
from typing import Iterator

import pytest

from wordsprint import configuration


@pytest.fixture
def data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Point every data and config file at a temporary directory."""
    original = configuration.DATA_PATH
    configuration.set_data_path(tmp_path / "data")
    monkeypatch.setattr(configuration, "CONFIG_PATH", tmp_path / "config")
    monkeypatch.setattr(
        configuration, "APP_CONFIG_PATH", tmp_path / "config" / "config.yaml"
    )
    monkeypatch.delenv(configuration.SUPABASE_URL_ENV, raising=False)
    monkeypatch.delenv(configuration.SUPABASE_ANON_KEY_ENV, raising=False)
    yield tmp_path / "data"
    configuration.set_data_path(original)
