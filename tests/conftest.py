"""Pytest configuration and fixtures."""

from datetime import datetime, timezone
from itertools import count
from pathlib import Path
from typing import Callable

import pytest

from voucherdesk.config import DeskConfig
from voucherdesk.desk import VoucherDesk
from voucherdesk.models import Student
from voucherdesk.storage import MemoryStore

FIXED_NOW = datetime(2026, 10, 18, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def clock() -> Callable[[], datetime]:
    return lambda: FIXED_NOW


@pytest.fixture
def id_factory() -> Callable[[], str]:
    """Deterministic, distinct ids shaped like real ones."""
    counter = count(1)
    return lambda: f"00000000-0000-4000-8000-{next(counter):012x}"


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def config(tmp_path: Path) -> DeskConfig:
    return DeskConfig(data_dir=tmp_path / ".voucherdesk")


@pytest.fixture
def desk(store: MemoryStore, config: DeskConfig, id_factory, clock) -> VoucherDesk:
    """Desk on the seed roster with deterministic ids and time."""
    return VoucherDesk(store, config, id_factory=id_factory, clock=clock)


@pytest.fixture
def students() -> tuple[Student, ...]:
    return (
        Student("a", "Ada", 5),
        Student("b", "Bo", 7),
        Student("c", "Cy", 4),
    )
