"""Per-session UI state, kept apart from the durable stores."""

from __future__ import annotations

from dataclasses import dataclass

from .models import Student, Voucher
from .roster import RosterStore


@dataclass
class Session:
    """
    Which student is selected and which voucher is open for preview/printing.

    Nothing here is persisted. Closing the preview only drops the pointer;
    the voucher stays in the log.
    """

    selected_student_id: str | None = None
    active_voucher: Voucher | None = None

    def select(self, student_id: str | None) -> None:
        self.selected_student_id = student_id

    def selected_student(self, roster: RosterStore) -> Student | None:
        return roster.find_student(self.selected_student_id)

    def open_voucher(self, voucher: Voucher) -> None:
        self.active_voucher = voucher

    def close_voucher(self) -> None:
        self.active_voucher = None
