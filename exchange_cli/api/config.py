from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final, Iterable, Protocol

from dotenv import find_dotenv, load_dotenv

from ..core.exceptions import ConfigError
from ..infra.settings import SettingsLoader
from .storage import read_key_file

API_KEY_ENV: Final[str] = "EXCHANGERATE_API_KEY"


@dataclass(frozen=True)
class ClientConfig:
    # Base URL up to and including the API version segment
    EXCHANGERATE_API_URL: str

    # Where `set-key` stores the key and FileKeySource reads it
    KEY_FILE_PATH: str

    # Network
    REQUEST_TIMEOUT: float


class ApiKeySource(Protocol):
    def get_api_key(self) -> str:
        """Return the API key or raise ConfigError if none is configured."""
        ...


class StaticKeySource:
    """Always returns the key it was built with."""

    def __init__(self, api_key: str | None) -> None:
        self._api_key = api_key

    def get_api_key(self) -> str:
        if not self._api_key:
            raise ConfigError("API key is empty")
        return self._api_key


class EnvKeySource:
    """Reads the key from an environment variable on every call."""

    def __init__(self, var_name: str = API_KEY_ENV) -> None:
        self.var_name = var_name

    def get_api_key(self) -> str:
        key = (os.getenv(self.var_name) or "").strip()
        if not key:
            raise ConfigError(f"{self.var_name} is not set")
        return key


class FileKeySource:
    """Reads {"api_key": "..."} from a JSON file on every call."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)

    def get_api_key(self) -> str:
        key = str(read_key_file(self.path).get("api_key") or "").strip()
        if not key:
            raise ConfigError(f"no API key stored in {self.path}")
        return key


class ChainKeySource:
    """First source that yields a key wins."""

    def __init__(self, sources: Iterable[ApiKeySource]) -> None:
        self.sources = list(sources)

    def get_api_key(self) -> str:
        reasons: list[str] = []
        for source in self.sources:
            try:
                return source.get_api_key()
            except ConfigError as exc:
                reasons.append(str(exc))
        raise ConfigError(
            "no API key configured ("
            + "; ".join(reasons)
            + "). Use 'set-key <key>' or set "
            + API_KEY_ENV
        )


def _load_env_file() -> None:
    # Load .env once per process (non-overriding), if present
    path = find_dotenv(usecwd=True)
    if path:
        load_dotenv(dotenv_path=path, override=False)


def load_client_config() -> ClientConfig:
    """Load client configuration from env/.env and project settings.

    Environment variables override .env; SettingsLoader provides the
    defaults for the base URL, key file location and request timeout.
    """
    _load_env_file()
    settings = SettingsLoader()
    return ClientConfig(
        EXCHANGERATE_API_URL=os.getenv(
            "EXCHANGERATE_API_URL", str(settings.get("api_base_url"))
        ).rstrip("/"),
        KEY_FILE_PATH=os.fspath(
            os.path.expanduser(
                os.getenv("EXCHANGERATE_KEY_FILE", str(settings.get("key_file")))
            )
        ),
        REQUEST_TIMEOUT=float(
            os.getenv("EXCHANGERATE_HTTP_TIMEOUT", settings.get("request_timeout", 10))
        ),
    )


def default_key_source(cfg: ClientConfig) -> ApiKeySource:
    """Environment first, then the key file."""
    return ChainKeySource([EnvKeySource(), FileKeySource(cfg.KEY_FILE_PATH)])
