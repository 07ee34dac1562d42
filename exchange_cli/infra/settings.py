from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

APP_DIR_NAME = ".exchange_cli"


class SettingsLoader:
    """Process-wide settings for the CLI.

    Built-in defaults keep every writable path (log file, key file) under
    ``~/.exchange_cli`` so an installed package never writes next to its code.
    A ``[tool.exchange_cli]`` table in the source checkout's pyproject.toml
    overrides them.
    """

    _instance: "SettingsLoader | None" = None
    _lock = threading.Lock()

    def __new__(cls, *args, **kwargs):
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        if getattr(self, "_initialized", False):
            return
        self._initialized = True
        self._project_file = Path(__file__).resolve().parents[2] / "pyproject.toml"
        self._config: dict[str, Any] = {}
        self.reload()

    @staticmethod
    def _defaults() -> dict[str, Any]:
        app_dir = Path.home() / APP_DIR_NAME
        return {
            "log_file": str(app_dir / "logs" / "exchange_cli.log"),
            "log_level": "INFO",
            "log_rotation_bytes": 1_048_576,
            "log_backup_count": 5,
            "api_base_url": "https://v6.exchangerate-api.com/v6",
            "request_timeout": 10.0,
            "key_file": str(app_dir / "config.json"),
        }

    def _project_overrides(self) -> dict[str, Any]:
        if not self._project_file.is_file():
            return {}
        try:
            data = tomllib.loads(self._project_file.read_text(encoding="utf-8"))
        except (OSError, tomllib.TOMLDecodeError):
            return {}
        section = data.get("tool", {}).get("exchange_cli", {})
        return section if isinstance(section, dict) else {}

    def reload(self) -> None:
        cfg = self._defaults()
        cfg.update(self._project_overrides())
        self._config = cfg

    def get(self, key: str, default: Any | None = None) -> Any:
        return self._config.get(key, default)
