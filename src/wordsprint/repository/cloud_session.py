# SPDX-License-Identifier: MIT

from typing import Optional, TypedDict

from yaml import dump, load

try:
    from yaml import CDumper as Dumper
    from yaml import CLoader as Loader
except ImportError:
    from yaml import Dumper, Loader  # type: ignore[assignment]

from wordsprint import configuration


class CloudTokens(TypedDict):
    access_token: str
    refresh_token: str


class CloudSessionRepository:
    """Auth tokens of the signed-in cloud user, so later runs stay signed in."""

    def __init__(self) -> None:
        self._tokens: Optional[CloudTokens] = None
        self._loaded = False
        self.is_dirty = False

    @property
    def tokens(self) -> Optional[CloudTokens]:
        if not self._loaded:
            self.__load_data()
        return self._tokens

    def __load_data(self) -> None:
        self._loaded = True
        self._tokens = None
        if not configuration.DATA_CLOUD_SESSION_PATH.is_file():
            return
        raw_tokens = load(
            configuration.DATA_CLOUD_SESSION_PATH.read_text(), Loader=Loader
        )
        if (
            isinstance(raw_tokens, dict)
            and raw_tokens.get("access_token")
            and raw_tokens.get("refresh_token")
        ):
            self._tokens = {
                "access_token": str(raw_tokens["access_token"]),
                "refresh_token": str(raw_tokens["refresh_token"]),
            }

    def __save_data(self) -> None:
        path = configuration.DATA_CLOUD_SESSION_PATH
        if self._tokens is None:
            if path.exists():
                path.unlink()
            return
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(dump(dict(self._tokens), Dumper=Dumper))
        path.chmod(0o600)

    def flush(self) -> bool:
        if self.is_dirty:
            self.__save_data()
            self.is_dirty = False
            return True
        return False

    def get_tokens(self) -> Optional[CloudTokens]:
        return self.tokens

    def save_tokens(self, access_token: str, refresh_token: str) -> None:
        self.is_dirty = True
        self._loaded = True
        self._tokens = {"access_token": access_token, "refresh_token": refresh_token}

    def clear_tokens(self) -> None:
        self.is_dirty = True
        self._loaded = True
        self._tokens = None


CLOUD_SESSION_REPO = CloudSessionRepository()
