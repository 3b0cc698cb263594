"""
Student and voucher records.

Records are plain dataclasses. The dict layout used for persistence keeps the
field names of the original browser storage (`studentId`, `amountPence`, ...)
so existing exports load unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

_MISSING = object()


def _field(data: dict[str, Any], key: str, default: Any) -> Any:
    value = data.get(key, default)
    if value is _MISSING:
        raise KeyError(key)
    return value


def _require_str(data: dict[str, Any], key: str, default: Any = _MISSING) -> str:
    value = _field(data, key, default)
    if not isinstance(value, str):
        raise ValueError(f"{key} must be a string, got {value!r}")
    return value


def _require_int(data: dict[str, Any], key: str, default: Any = _MISSING) -> int:
    # bool is an int subclass
    value = _field(data, key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{key} must be an integer, got {value!r}")
    return value


def _require_bool(data: dict[str, Any], key: str, default: Any = _MISSING) -> bool:
    value = _field(data, key, default)
    if not isinstance(value, bool):
        raise ValueError(f"{key} must be a boolean, got {value!r}")
    return value



@dataclass(frozen=True)
class Student:
    """A student and their current commendation balance."""

    id: str
    name: str
    commendations: int = 0

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Student id is required")
        if self.commendations < 0:
            raise ValueError(f"Negative commendations for {self.id}: {self.commendations}")

    def with_commendations(self, value: int) -> "Student":
        return replace(self, commendations=value)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to JSON-compatible dict."""
        return {
            "id": self.id,
            "name": self.name,
            "commendations": self.commendations,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Student":
        """Create from dictionary. Wrongly typed fields raise ValueError."""
        return cls(
            id=_require_str(data, "id"),
            name=_require_str(data, "name", ""),
            commendations=_require_int(data, "commendations", 0),
        )


@dataclass(frozen=True)
class Voucher:
    """
    An issued café voucher.

    Everything except `redeemed` is a snapshot taken at issuance and never
    changes afterwards. `studentId` is a weak reference: the student may leave
    the roster without affecting the voucher.
    """

    id: str
    student_id: str
    student_name: str
    issued_at: str  # ISO-8601
    amount_pence: int
    redeemed: bool = False

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Voucher id is required")
        if self.amount_pence <= 0:
            raise ValueError(f"Voucher amount must be positive: {self.amount_pence}")

    def toggled(self) -> "Voucher":
        return replace(self, redeemed=not self.redeemed)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to JSON-compatible dict."""
        return {
            "id": self.id,
            "studentId": self.student_id,
            "studentName": self.student_name,
            "issuedAt": self.issued_at,
            "amountPence": self.amount_pence,
            "redeemed": self.redeemed,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Voucher":
        """Create from dictionary. Older records may lack `redeemed`."""
        return cls(
            id=_require_str(data, "id"),
            student_id=_require_str(data, "studentId"),
            student_name=_require_str(data, "studentName", ""),
            issued_at=_require_str(data, "issuedAt"),
            amount_pence=_require_int(data, "amountPence"),
            redeemed=_require_bool(data, "redeemed", False),
        )
