"""
Voucher issuance.

Issuing touches both stores: the voucher is prepended to the log and the
student is debited one threshold's worth of commendations. Both in-memory
updates are computed first and applied together; only then is anything
written, so a rejected or failed issuance never leaves a debit without a
voucher (or a voucher without a debit).
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Sequence

from .ledger import VoucherLedger, prepend_voucher
from .models import Student, Voucher
from .policy import EligibilityPolicy
from .roster import RosterStore, adjust_commendations
from .util import IdFactory, new_voucher_id

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

# Attempts at drawing an id not already present in the log
MAX_ID_ATTEMPTS = 8


class IssuanceError(enum.Enum):
    NOT_ELIGIBLE = "not_eligible"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Issued:
    """Result of the pure issuance transition."""

    voucher: Voucher
    students: tuple[Student, ...]
    vouchers: tuple[Voucher, ...]


def _unique_id(id_factory: IdFactory, taken: Sequence[Voucher]) -> str:
    existing = {v.id for v in taken}
    for _ in range(MAX_ID_ATTEMPTS):
        candidate = id_factory()
        if candidate and candidate not in existing:
            return candidate
        logger.warning("voucher id collision (%r); drawing another", candidate)
    # Injected factory keeps colliding; switch to the default generator
    candidate = new_voucher_id()
    while candidate in existing:
        candidate = new_voucher_id()
    return candidate


def issue_transition(
    students: Sequence[Student],
    vouchers: Sequence[Voucher],
    student: Student | None,
    *,
    policy: EligibilityPolicy,
    amount_pence: int,
    voucher_id: str,
    issued_at: datetime,
) -> Issued | IssuanceError:
    """
    Compute the post-issuance roster and log without touching any store.

    The debit is floor-clamped at zero, matching `adjust_commendations`.
    """
    if student is None or not policy.is_eligible(student):
        return IssuanceError.NOT_ELIGIBLE

    voucher = Voucher(
        id=voucher_id,
        student_id=student.id,
        student_name=student.name,
        issued_at=issued_at.isoformat(),
        amount_pence=amount_pence,
        redeemed=False,
    )
    return Issued(
        voucher=voucher,
        students=adjust_commendations(students, student.id, policy.debit),
        vouchers=prepend_voucher(vouchers, voucher),
    )


def issue_voucher(
    roster: RosterStore,
    ledger: VoucherLedger,
    student: Student | None,
    *,
    policy: EligibilityPolicy,
    amount_pence: int,
    id_factory: IdFactory = new_voucher_id,
    clock: Clock = utc_now,
) -> Voucher | IssuanceError:
    """
    Issue a voucher to `student` and persist both stores.

    Returns the new voucher, or `IssuanceError.NOT_ELIGIBLE` with no state
    change when the student is missing or below the threshold.
    """
    if student is None or not policy.is_eligible(student):
        logger.debug("issuance rejected for %s", student.id if student else None)
        return IssuanceError.NOT_ELIGIBLE

    outcome = issue_transition(
        roster.students,
        ledger.list_vouchers(),
        student,
        policy=policy,
        amount_pence=amount_pence,
        voucher_id=_unique_id(id_factory, ledger.list_vouchers()),
        issued_at=clock(),
    )
    if isinstance(outcome, IssuanceError):
        return outcome

    roster.replace(outcome.students)
    ledger.replace(outcome.vouchers)

    # Best-effort sequential writes; each store swallows its own failures
    ledger.persist()
    roster.persist()

    logger.info(
        "issued voucher %s to %s (%d pence)",
        outcome.voucher.id, student.id, outcome.voucher.amount_pence,
    )
    return outcome.voucher
