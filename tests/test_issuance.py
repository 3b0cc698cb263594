"""
Tests for voucher issuance.

Covers the threshold gate, the atomic debit, snapshot fields, id uniqueness,
and behaviour when storage is unavailable.
"""

from datetime import datetime, timezone

from voucherdesk.config import DeskConfig
from voucherdesk.desk import VoucherDesk
from voucherdesk.issuance import IssuanceError, issue_transition, issue_voucher
from voucherdesk.ledger import LEDGER_KEY, VoucherLedger
from voucherdesk.models import Student, Voucher
from voucherdesk.policy import EligibilityPolicy
from voucherdesk.roster import ROSTER_KEY, RosterStore
from voucherdesk.storage import MemoryStore

NOW = datetime(2026, 10, 18, 9, 30, tzinfo=timezone.utc)


def _stores(*students: Student) -> tuple[MemoryStore, RosterStore, VoucherLedger]:
    store = MemoryStore()
    return store, RosterStore(store, students=students), VoucherLedger(store)


def test_issue_at_exact_threshold(id_factory, clock) -> None:
    store, roster, ledger = _stores(Student("s1", "Alice", 5))

    voucher = issue_voucher(
        roster, ledger, roster.get("s1"),
        policy=EligibilityPolicy(), amount_pence=290, id_factory=id_factory, clock=clock,
    )

    assert isinstance(voucher, Voucher)
    assert roster.get("s1").commendations == 0
    assert ledger.list_vouchers() == (voucher,)
    assert voucher.amount_pence == 290
    assert voucher.redeemed is False
    assert voucher.student_id == "s1"
    assert voucher.student_name == "Alice"
    assert voucher.issued_at == "2026-10-18T09:30:00+00:00"

    assert store.data[ROSTER_KEY] == [{"id": "s1", "name": "Alice", "commendations": 0}]
    assert store.data[LEDGER_KEY] == [voucher.to_dict()]


def test_issue_keeps_surplus(id_factory, clock) -> None:
    _, roster, ledger = _stores(Student("s1", "Alice", 7))
    issue_voucher(
        roster, ledger, roster.get("s1"),
        policy=EligibilityPolicy(), amount_pence=290, id_factory=id_factory, clock=clock,
    )
    assert roster.get("s1").commendations == 2


def test_below_threshold_changes_nothing(id_factory, clock) -> None:
    store, roster, ledger = _stores(Student("s1", "Alice", 4))

    result = issue_voucher(
        roster, ledger, roster.get("s1"),
        policy=EligibilityPolicy(), amount_pence=290, id_factory=id_factory, clock=clock,
    )

    assert result is IssuanceError.NOT_ELIGIBLE
    assert roster.get("s1").commendations == 4
    assert len(ledger) == 0
    assert store.writes == []


def test_missing_student_is_rejected(id_factory, clock) -> None:
    store, roster, ledger = _stores()
    result = issue_voucher(
        roster, ledger, None,
        policy=EligibilityPolicy(), amount_pence=290, id_factory=id_factory, clock=clock,
    )
    assert result is IssuanceError.NOT_ELIGIBLE
    assert store.writes == []


def test_transition_is_pure() -> None:
    students = (Student("s1", "Alice", 6),)
    outcome = issue_transition(
        students, (), students[0],
        policy=EligibilityPolicy(), amount_pence=290, voucher_id="v1", issued_at=NOW,
    )
    assert students[0].commendations == 6
    assert outcome.students[0].commendations == 1
    assert [v.id for v in outcome.vouchers] == ["v1"]


def test_stale_student_debit_clamps_to_zero() -> None:
    """Eligibility is judged on the student passed in; the debit floors at zero."""
    current = (Student("s1", "Alice", 2),)
    stale = Student("s1", "Alice", 5)
    outcome = issue_transition(
        current, (), stale,
        policy=EligibilityPolicy(), amount_pence=290, voucher_id="v1", issued_at=NOW,
    )
    assert outcome.students[0].commendations == 0


def test_ids_are_unique_across_many_issues(desk: VoucherDesk) -> None:
    desk.adjust("s1", 100)
    issued = [desk.issue("s1") for _ in range(20)]
    ids = [v.id for v in issued]
    assert len(set(ids)) == 20
    assert [v.id for v in desk.vouchers()] == list(reversed(ids))


def test_colliding_id_factory_still_yields_unique_ids(store, config, clock) -> None:
    desk = VoucherDesk(store, config, id_factory=lambda: "same-id", clock=clock)
    desk.adjust("s2", 5)
    first = desk.issue("s2")
    second = desk.issue("s2")
    assert first.id == "same-id"
    assert second.id != first.id


def test_default_id_factory_produces_distinct_ids(store, config) -> None:
    desk = VoucherDesk(store, config)
    desk.adjust("s1", 50)
    ids = {desk.issue("s1").id for _ in range(10)}
    assert len(ids) == 10


def test_snapshot_fields_survive_rename_and_amount_change(store, config, id_factory, clock) -> None:
    desk = VoucherDesk(store, config, id_factory=id_factory, clock=clock)
    voucher = desk.issue("s2")

    desk.rename_student("s2", "Benjamin Carter")

    repriced = VoucherDesk(
        store,
        DeskConfig(amount_pence=350, data_dir=config.data_dir),
        id_factory=id_factory,
        clock=clock,
    )
    stored = repriced.resolve_voucher(voucher.id)
    assert stored.student_name == "Ben Carter"
    assert stored.amount_pence == 290

    repriced.adjust("s2", 5)
    newer = repriced.issue("s2")
    assert newer.amount_pence == 350
    assert newer.student_name == "Benjamin Carter"
    assert repriced.resolve_voucher(voucher.id).amount_pence == 290


def test_voucher_outlives_student(desk: VoucherDesk) -> None:
    voucher = desk.issue("s2")
    desk.import_roster([Student("n1", "New", 0)])

    assert desk.resolve_voucher(voucher.id) == voucher
    desk.toggle_redeemed(voucher.id)
    assert desk.resolve_voucher(voucher.id).redeemed is True


def test_issue_survives_unavailable_storage(config, id_factory, clock) -> None:
    store = MemoryStore(fail_writes=True)
    desk = VoucherDesk(store, config, id_factory=id_factory, clock=clock)

    voucher = desk.issue("s2")

    assert isinstance(voucher, Voucher)
    assert desk.get_student("s2").commendations == 0
    assert desk.vouchers() == (voucher,)
    assert store.data == {}
