from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

KEY_FILE_MODE = 0o600


def _atomic_write_json(path: Path, obj: Any, mode: int = 0o644) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    # A stale tmp keeps its old mode through O_CREAT
    tmp.unlink(missing_ok=True)
    fd = os.open(tmp, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
    with os.fdopen(fd, "w", encoding="utf-8") as fh:
        json.dump(obj, fh, ensure_ascii=False, indent=2)
    os.replace(tmp, path)


def read_key_file(path: Path) -> dict[str, Any]:
    """Return the key file contents, or an empty dict if missing/unreadable."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def write_api_key(path: Path, api_key: str) -> None:
    """Store the API key, keeping any other fields already in the file.

    The file is only ever readable by its owner: the temporary copy is
    created with that mode before the key is written into it.
    """
    data = read_key_file(path)
    data["api_key"] = api_key
    _atomic_write_json(path, data, mode=KEY_FILE_MODE)
