"""
Student roster.

The transition functions are pure: they take a tuple of students and return a
new one. `RosterStore` holds the current tuple and writes it through a
`KeyValueStore` after every change.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Sequence

from .models import Student
from .storage import KeyValueStore

logger = logging.getLogger(__name__)

ROSTER_KEY = "cafe-voucher-students"

SEED_ROSTER: tuple[Student, ...] = (
    Student("s1", "Alice Johnson", 3),
    Student("s2", "Ben Carter", 5),
    Student("s3", "Chloe Singh", 1),
    Student("s4", "Daniel O'Neill", 4),
)


def adjust_commendations(
    students: Sequence[Student], student_id: str, delta: int
) -> tuple[Student, ...]:
    """Apply `delta` to one student, clamped at zero. Unknown ids are ignored."""
    return tuple(
        s.with_commendations(max(0, s.commendations + delta)) if s.id == student_id else s
        for s in students
    )


def find_student(students: Sequence[Student], student_id: str | None) -> Student | None:
    """
    Look up a student by id.

    Falls back to the first student in roster order when the id is None or
    unknown, so there is always a selection while the roster is non-empty.
    """
    if student_id is not None:
        for s in students:
            if s.id == student_id:
                return s
    return students[0] if students else None


def rename_student(students: Sequence[Student], student_id: str, name: str) -> tuple[Student, ...]:
    return tuple(
        Student(s.id, name, s.commendations) if s.id == student_id else s
        for s in students
    )


def decode_roster(raw: Any) -> tuple[Student, ...]:
    """
    Decode a persisted roster document.

    Raises:
        ValueError: If the document is not a list of valid student records
    """
    if not isinstance(raw, list):
        raise ValueError(f"roster must be a list, got {type(raw).__name__}")
    try:
        students = tuple(Student.from_dict(item) for item in raw)
    except (KeyError, TypeError, ValueError, AttributeError, OverflowError) as e:
        raise ValueError(f"malformed student record: {e}") from e
    ids = [s.id for s in students]
    if len(set(ids)) != len(ids):
        raise ValueError("duplicate student ids in roster")
    return students


class RosterStore:
    """Persistence-backed roster."""

    def __init__(self, store: KeyValueStore, *, key: str = ROSTER_KEY, students: Iterable[Student] = ()):
        self.store = store
        self.key = key
        self._students: tuple[Student, ...] = tuple(students)

    @classmethod
    def load(
        cls,
        store: KeyValueStore,
        *,
        key: str = ROSTER_KEY,
        seed: Sequence[Student] = SEED_ROSTER,
    ) -> "RosterStore":
        """Load the roster, falling back to `seed` when absent or corrupt."""
        raw = store.load(key, None)
        if raw is None:
            return cls(store, key=key, students=seed)
        try:
            students = decode_roster(raw)
        except ValueError as e:
            logger.warning("Corrupt roster under %r (%s); using seed roster", key, e)
            students = tuple(seed)
        return cls(store, key=key, students=students)

    @property
    def students(self) -> tuple[Student, ...]:
        return self._students

    def find_student(self, student_id: str | None) -> Student | None:
        return find_student(self._students, student_id)

    def get(self, student_id: str) -> Student | None:
        """Exact lookup, without the first-student fallback."""
        for s in self._students:
            if s.id == student_id:
                return s
        return None

    def replace(self, students: Iterable[Student]) -> None:
        """Swap in a new roster tuple without persisting it."""
        self._students = tuple(students)

    def adjust_commendations(self, student_id: str, delta: int) -> None:
        if self.get(student_id) is None:
            logger.debug("adjust ignored: unknown student %s", student_id)
            return
        self._students = adjust_commendations(self._students, student_id, delta)
        logger.debug("adjusted %s by %+d", student_id, delta)
        self.persist()

    def rename(self, student_id: str, name: str) -> None:
        if self.get(student_id) is None:
            return
        self._students = rename_student(self._students, student_id, name)
        self.persist()

    def persist(self) -> None:
        self.store.save(self.key, [s.to_dict() for s in self._students])
