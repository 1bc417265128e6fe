# SPDX-License-Identifier: MIT

from typing import Optional

from yaml import dump, load

try:
    from yaml import CDumper as Dumper
    from yaml import CLoader as Loader
except ImportError:
    from yaml import Dumper, Loader  # type: ignore[assignment]

from wordsprint import configuration
from wordsprint.model.mode import Mode


class ModeRepository:
    """The last storage mode the user chose, local or cloud."""

    def __init__(self) -> None:
        self._mode: Optional[Mode] = None
        self._loaded = False
        self.is_dirty = False

    @property
    def mode(self) -> Optional[Mode]:
        if not self._loaded:
            self.__load_data()
        return self._mode

    def __load_data(self) -> None:
        self._loaded = True
        self._mode = None
        if not configuration.DATA_MODE_PATH.is_file():
            return
        raw_mode = load(configuration.DATA_MODE_PATH.read_text(), Loader=Loader)
        if isinstance(raw_mode, dict) and raw_mode.get("mode") in (
            Mode.LOCAL.value,
            Mode.CLOUD.value,
        ):
            self._mode = Mode(raw_mode["mode"])

    def __save_data(self) -> None:
        if self._mode is None:
            if configuration.DATA_MODE_PATH.exists():
                configuration.DATA_MODE_PATH.unlink()
            return
        configuration.DATA_MODE_PATH.parent.mkdir(parents=True, exist_ok=True)
        configuration.DATA_MODE_PATH.write_text(
            dump({"mode": self._mode.value}, Dumper=Dumper)
        )

    def flush(self) -> bool:
        if self.is_dirty:
            self.__save_data()
            self.is_dirty = False
            return True
        return False

    def get_mode(self) -> Optional[Mode]:
        return self.mode

    def set_mode(self, mode: Mode) -> None:
        if not isinstance(mode, Mode):
            raise ValueError(f"Invalid mode: {mode}")
        self.is_dirty = True
        self._loaded = True
        self._mode = mode

    def clear_mode(self) -> None:
        self.is_dirty = True
        self._loaded = True
        self._mode = None


MODE_REPO = ModeRepository()
