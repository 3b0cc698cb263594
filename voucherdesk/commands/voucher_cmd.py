"""Voucher issuance and log CLI commands."""

from __future__ import annotations

import json
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from ..desk import VoucherDesk
from ..issuance import IssuanceError
from ..models import Voucher
from ..render import eligibility_text, log_status, printable_html, voucher_card, voucher_log_table
from ..session import Session


def _write_printable(desk: VoucherDesk, voucher: Voucher, out: Path | None, *, launch: bool) -> Path:
    target = out or desk.config.data_dir / "print" / f"voucher-{voucher.id}.html"
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(printable_html(voucher, desk.config), encoding="utf-8")
    if launch:
        click.launch(str(target))
    return target


def _print_voucher(
    desk: VoucherDesk,
    session: Session,
    *,
    out: Path | None,
    print_it: bool,
) -> int:
    """Show the session's active voucher, optionally sending it to the printer page."""
    voucher = session.active_voucher
    if voucher is None:
        return 0
    console = Console()
    console.print(voucher_card(voucher, desk.config))
    if print_it or out is not None:
        try:
            target = _write_printable(desk, voucher, out, launch=print_it)
        except OSError as e:
            Console(stderr=True).print(f"Could not write printable voucher: {escape(str(e))}", style="bold red")
            return 1
        console.print(f"printable voucher: {escape(str(target))}", style="dim")
    return 0


def run_issue(
    desk: VoucherDesk,
    student_id: str | None,
    *,
    out: Path | None = None,
    print_it: bool = False,
    output_json: bool = False,
) -> int:
    err = Console(stderr=True)
    session = Session()

    if student_id is not None:
        if desk.get_student(student_id) is None:
            err.print(f"Student not found: {escape(student_id)}", style="bold red")
            return 1
        session.select(student_id)

    student = session.selected_student(desk.roster)
    if student is None:
        err.print("No students on the roster", style="bold red")
        return 1

    result = desk.issue(None, session)
    if result is IssuanceError.NOT_ELIGIBLE:
        err.print(f"{escape(student.name)} is not eligible yet: {eligibility_text(student, desk.policy)}", style="yellow")
        return 1

    if output_json:
        print(json.dumps(result.to_dict(), indent=2))
        return 0

    updated = desk.get_student(result.student_id)
    err.print(
        f"issued to {escape(result.student_name)}; {updated.commendations if updated else 0} commendations left",
        style="green",
    )
    return _print_voucher(desk, session, out=out, print_it=print_it)


def run_log(desk: VoucherDesk, *, output_json: bool = False, limit: int | None = None) -> int:
    vouchers = desk.vouchers()
    if limit is not None:
        vouchers = vouchers[:limit]

    if output_json:
        print(json.dumps([v.to_dict() for v in vouchers], indent=2))
        return 0

    console = Console()
    if not vouchers:
        console.print("No vouchers have been issued yet.", style="dim")
        return 0
    console.print(voucher_log_table(vouchers))
    return 0


def run_redeem(desk: VoucherDesk, ref: str) -> int:
    err = Console(stderr=True)
    voucher = desk.resolve_voucher(ref)
    if voucher is None:
        err.print(f"Voucher not found: {escape(ref)}", style="bold red")
        return 1

    updated = desk.toggle_redeemed(voucher.id)
    err.print(f"{escape(updated.student_name)} {voucher.id[-8:].upper()}: {log_status(updated)}", style="green")
    return 0


def run_show(
    desk: VoucherDesk,
    ref: str,
    *,
    out: Path | None = None,
    print_it: bool = False,
    output_json: bool = False,
) -> int:
    err = Console(stderr=True)
    voucher = desk.resolve_voucher(ref)
    if voucher is None:
        err.print(f"Voucher not found: {escape(ref)}", style="bold red")
        return 1

    if output_json:
        print(json.dumps(voucher.to_dict(), indent=2))
        return 0

    session = Session()
    session.open_voucher(voucher)
    return _print_voucher(desk, session, out=out, print_it=print_it)
