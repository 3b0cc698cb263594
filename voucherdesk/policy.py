"""Eligibility rules for voucher issuance."""

from __future__ import annotations

from dataclasses import dataclass

from .models import Student

DEFAULT_THRESHOLD = 5
DEFAULT_AMOUNT_PENCE = 290


@dataclass(frozen=True)
class EligibilityPolicy:
    """
    Threshold gate for issuing vouchers.

    A voucher costs exactly `threshold` commendations; the debit is
    floor-clamped at zero by the roster.
    """

    threshold: int = DEFAULT_THRESHOLD

    def __post_init__(self) -> None:
        if self.threshold < 1:
            raise ValueError(f"threshold must be a positive integer, got {self.threshold}")

    def is_eligible(self, student: Student | None) -> bool:
        return student is not None and student.commendations >= self.threshold

    def remaining(self, student: Student) -> int:
        """Commendations still needed before a voucher can be issued."""
        return max(0, self.threshold - student.commendations)

    @property
    def debit(self) -> int:
        """Commendation delta applied to a student on issuance."""
        return -self.threshold


def is_eligible(student: Student | None, threshold: int = DEFAULT_THRESHOLD) -> bool:
    return EligibilityPolicy(threshold).is_eligible(student)


def remaining_to_eligibility(student: Student, threshold: int = DEFAULT_THRESHOLD) -> int:
    return EligibilityPolicy(threshold).remaining(student)
