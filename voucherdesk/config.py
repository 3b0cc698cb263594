"""
Desk configuration.

Loaded from a `voucherdesk.toml` file:

    [desk]
    threshold = 5
    amount_pence = 290
    school_name = "School Café"
    data_dir = ".voucherdesk"

All keys are optional. Relative `data_dir` values resolve against the
directory holding the config file.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .ledger import LEDGER_KEY
from .policy import DEFAULT_AMOUNT_PENCE, DEFAULT_THRESHOLD
from .roster import ROSTER_KEY

CONFIG_FILENAME = "voucherdesk.toml"
DEFAULT_DATA_DIR = ".voucherdesk"


class ConfigError(ValueError):
    """Raised when a config file cannot be parsed or holds invalid values."""


@dataclass(frozen=True)
class DeskConfig:
    threshold: int = DEFAULT_THRESHOLD
    amount_pence: int = DEFAULT_AMOUNT_PENCE
    data_dir: Path = field(default_factory=lambda: Path(DEFAULT_DATA_DIR))
    school_name: str = "School Café"
    roster_key: str = ROSTER_KEY
    ledger_key: str = LEDGER_KEY


def _coerce_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _positive_int(raw: dict[str, Any], key: str, default: int) -> int:
    value = raw.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigError(f"{key} must be a positive integer, got {value!r}")
    return value


def find_config(start: Path) -> Path | None:
    """Find voucherdesk.toml by walking up from `start`."""
    cur = start.resolve()
    for p in (cur, *cur.parents):
        candidate = p / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Path | None, *, base_dir: Path | None = None) -> DeskConfig:
    """
    Load desk configuration.

    Args:
        path: Config file, or None for defaults
        base_dir: Where a relative data_dir resolves when there is no file

    Raises:
        ConfigError: If the TOML is malformed or values are invalid
    """
    root = (base_dir or Path.cwd()).resolve()
    if path is None or not path.exists():
        return DeskConfig(data_dir=root / DEFAULT_DATA_DIR)

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Failed to parse {path}: {e}") from e

    desk = _coerce_dict(data.get("desk"))
    data_dir = Path(str(desk.get("data_dir", DEFAULT_DATA_DIR)))
    if not data_dir.is_absolute():
        data_dir = path.resolve().parent / data_dir

    school_name = desk.get("school_name", "School Café")
    if not isinstance(school_name, str) or not school_name.strip():
        raise ConfigError(f"school_name must be a non-empty string, got {school_name!r}")

    return DeskConfig(
        threshold=_positive_int(desk, "threshold", DEFAULT_THRESHOLD),
        amount_pence=_positive_int(desk, "amount_pence", DEFAULT_AMOUNT_PENCE),
        data_dir=data_dir,
        school_name=school_name.strip(),
        roster_key=str(desk.get("roster_key", ROSTER_KEY)),
        ledger_key=str(desk.get("ledger_key", LEDGER_KEY)),
    )
