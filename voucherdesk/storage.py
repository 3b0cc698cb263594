"""
Key-value persistence for desk state.

Each logical store (roster, voucher log) is one JSON document under its own
key. Stores never raise to the caller: a missing or unreadable document loads
as the default, and a failed write leaves the in-memory state as the only copy
for the rest of the session.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Protocol

logger = logging.getLogger(__name__)

_SAFE_KEY = re.compile(r"[^A-Za-z0-9._-]")


class KeyValueStore(Protocol):
    """Durable storage keyed by logical store name."""

    def load(self, key: str, default: Any) -> Any: ...

    def save(self, key: str, value: Any) -> None: ...


class JsonFileStore:
    """
    One JSON document per key inside a data directory:

        .voucherdesk/cafe-voucher-students.json
        .voucherdesk/cafe-voucher-log.json

    Writes go to a temp file that is renamed over the target, so a crash never
    leaves a half-written document behind.
    """

    def __init__(self, data_dir: Path):
        self.data_dir = data_dir

    def path_for(self, key: str) -> Path:
        return self.data_dir / f"{_SAFE_KEY.sub('_', key)}.json"

    def load(self, key: str, default: Any) -> Any:
        path = self.path_for(key)
        if not path.exists():
            return default
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, RecursionError) as e:
            logger.warning("Unreadable %s (%s); using default", path, e)
            return default

    def save(self, key: str, value: Any) -> None:
        path = self.path_for(key)
        temp_path = path.with_suffix(".tmp")
        try:
            serialized = json.dumps(value, indent=2, ensure_ascii=False)
            self.data_dir.mkdir(parents=True, exist_ok=True)
            temp_path.write_text(serialized, encoding="utf-8")
            temp_path.replace(path)
        except (OSError, TypeError, ValueError) as e:
            logger.warning("Could not persist %s (%s); keeping in-memory state", key, e)


class MemoryStore:
    """Dict-backed store. `fail_writes` simulates unavailable storage."""

    def __init__(self, initial: dict[str, Any] | None = None, *, fail_writes: bool = False):
        self.data: dict[str, Any] = dict(initial or {})
        self.fail_writes = fail_writes
        self.writes: list[str] = []

    def load(self, key: str, default: Any) -> Any:
        if key not in self.data:
            return default
        # JSON round-trip hands back a detached copy
        try:
            return json.loads(json.dumps(self.data[key]))
        except (TypeError, ValueError, RecursionError):
            return default

    def save(self, key: str, value: Any) -> None:
        if self.fail_writes:
            logger.warning("Could not persist %s (storage unavailable); keeping in-memory state", key)
            return
        try:
            self.data[key] = json.loads(json.dumps(value))
        except (TypeError, ValueError) as e:
            logger.warning("Could not persist %s (%s); keeping in-memory state", key, e)
            return
        self.writes.append(key)
