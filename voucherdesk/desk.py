"""
Voucher desk: the stores, the policy and persistence wired together.

Commands talk to the desk; the desk calls the pure transitions in `roster`,
`ledger` and `issuance` and writes through its `KeyValueStore`.
"""

from __future__ import annotations

import logging
from typing import Iterable

from .config import DeskConfig
from .issuance import Clock, IssuanceError, issue_voucher, utc_now
from .ledger import VoucherLedger
from .models import Student, Voucher
from .policy import EligibilityPolicy
from .roster import SEED_ROSTER, RosterStore
from .session import Session
from .storage import JsonFileStore, KeyValueStore
from .util import IdFactory, new_voucher_id

logger = logging.getLogger(__name__)


class VoucherDesk:
    def __init__(
        self,
        store: KeyValueStore,
        config: DeskConfig | None = None,
        *,
        id_factory: IdFactory = new_voucher_id,
        clock: Clock = utc_now,
        seed: Iterable[Student] = SEED_ROSTER,
    ):
        self.store = store
        self.config = config or DeskConfig()
        self.policy = EligibilityPolicy(self.config.threshold)
        self.id_factory = id_factory
        self.clock = clock
        self.roster = RosterStore.load(store, key=self.config.roster_key, seed=tuple(seed))
        self.ledger = VoucherLedger.load(store, key=self.config.ledger_key)

    @classmethod
    def open(cls, config: DeskConfig) -> "VoucherDesk":
        """Open the desk backed by JSON files in `config.data_dir`."""
        return cls(JsonFileStore(config.data_dir), config)

    def students(self) -> tuple[Student, ...]:
        return self.roster.students

    def vouchers(self) -> tuple[Voucher, ...]:
        return self.ledger.list_vouchers()

    def find_student(self, student_id: str | None) -> Student | None:
        return self.roster.find_student(student_id)

    def get_student(self, student_id: str) -> Student | None:
        return self.roster.get(student_id)

    def is_eligible(self, student: Student | None) -> bool:
        return self.policy.is_eligible(student)

    def remaining(self, student: Student) -> int:
        return self.policy.remaining(student)

    def adjust(self, student_id: str, delta: int) -> Student | None:
        """Adjust commendations; returns the updated student or None if unknown."""
        self.roster.adjust_commendations(student_id, delta)
        return self.roster.get(student_id)

    def rename_student(self, student_id: str, name: str) -> Student | None:
        self.roster.rename(student_id, name)
        return self.roster.get(student_id)

    def issue(self, student_id: str | None, session: Session | None = None) -> Voucher | IssuanceError:
        """
        Issue a voucher to the given student (or the roster fallback).

        On success the voucher becomes the session's active voucher.
        """
        if session is not None and student_id is None:
            student = session.selected_student(self.roster)
        else:
            student = self.roster.find_student(student_id)
        result = issue_voucher(
            self.roster,
            self.ledger,
            student,
            policy=self.policy,
            amount_pence=self.config.amount_pence,
            id_factory=self.id_factory,
            clock=self.clock,
        )
        if session is not None and isinstance(result, Voucher):
            session.select(result.student_id)
            session.open_voucher(result)
        return result

    def toggle_redeemed(self, voucher_id: str) -> Voucher | None:
        self.ledger.toggle_redeemed(voucher_id)
        return self.ledger.get(voucher_id)

    def resolve_voucher(self, ref: str) -> Voucher | None:
        return self.ledger.resolve(ref)

    def import_roster(self, students: Iterable[Student]) -> int:
        """Replace the roster. Issued vouchers are left as they are."""
        students = tuple(students)
        ids = [s.id for s in students]
        if len(set(ids)) != len(ids):
            raise ValueError("duplicate student ids in import")
        self.roster.replace(students)
        self.roster.persist()
        logger.info("roster replaced with %d students", len(students))
        return len(students)
