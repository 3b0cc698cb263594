"""
Roster seed files.

A seed file is YAML:

    students:
      - id: s1
        name: Alice Johnson
        commendations: 3
      - id: s2
        name: Ben Carter

`commendations` defaults to 0. A bare list of students is also accepted.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Sequence

import yaml

from .models import Student


class RosterImportError(ValueError):
    """Raised when a seed file cannot be turned into a roster."""


def parse_roster_yaml(text: str) -> list[Student]:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise RosterImportError(f"Invalid YAML: {e}") from e

    items: Any = data.get("students") if isinstance(data, dict) else data
    if not isinstance(items, list):
        raise RosterImportError("Expected a 'students' list")

    students: list[Student] = []
    seen: set[str] = set()
    for i, raw in enumerate(items):
        if not isinstance(raw, dict):
            raise RosterImportError(f"Entry {i}: expected a mapping")
        try:
            student = Student.from_dict(raw)
        except (KeyError, TypeError, ValueError) as e:
            raise RosterImportError(f"Entry {i}: {e}") from e
        if student.id in seen:
            raise RosterImportError(f"Entry {i}: duplicate id {student.id!r}")
        seen.add(student.id)
        students.append(student)
    return students


def load_roster_file(path: Path) -> list[Student]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise RosterImportError(f"Cannot read {path}: {e}") from e
    return parse_roster_yaml(text)


def dump_roster_yaml(students: Sequence[Student]) -> str:
    return yaml.safe_dump(
        {"students": [s.to_dict() for s in students]},
        sort_keys=False,
        allow_unicode=True,
    )
