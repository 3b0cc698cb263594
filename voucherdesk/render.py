"""
Display helpers for students and vouchers.

Plain formatting functions are shared by the rich terminal views and the
printable HTML page.
"""

from __future__ import annotations

import html
from datetime import datetime
from typing import Sequence

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .barcode import code128_svg, strip_xml_declaration
from .config import DeskConfig
from .models import Student, Voucher
from .policy import EligibilityPolicy


def format_pounds(pence: int) -> str:
    return f"£{pence / 100:.2f}"


def format_issued_at(iso: str) -> str:
    """Format an ISO timestamp in local time, e.g. '18 Oct 2026, 14:05'."""
    try:
        dt = datetime.fromisoformat(iso)
    except ValueError:
        return iso
    if dt.tzinfo is not None:
        dt = dt.astimezone()
    return f"{dt.day:02d} {dt:%b %Y, %H:%M}"


def short_id(voucher: Voucher) -> str:
    return voucher.id[-8:].upper()


def long_id(voucher: Voucher) -> str:
    return voucher.id[-16:].upper()


def card_status(voucher: Voucher) -> str:
    return "Used" if voucher.redeemed else "Valid"


def log_status(voucher: Voucher) -> str:
    return "Used" if voucher.redeemed else "Unused"


def badge_text(student: Student, policy: EligibilityPolicy) -> str:
    text = f"{student.commendations}/{policy.threshold} commendations"
    if not policy.is_eligible(student):
        text += f" · {policy.remaining(student)} more for a voucher"
    return text


def eligibility_text(student: Student, policy: EligibilityPolicy) -> str:
    if policy.is_eligible(student):
        return "Eligible for a voucher"
    return f"Needs {policy.remaining(student)} more"


def student_table(
    students: Sequence[Student],
    policy: EligibilityPolicy,
    *,
    selected_id: str | None = None,
) -> Table:
    table = Table(title="Students", caption=f"{len(students)} enrolled")
    table.add_column("", width=1)
    table.add_column("id", style="cyan", no_wrap=True)
    table.add_column("name")
    table.add_column("progress", style="dim")
    table.add_column("", no_wrap=True)

    for s in students:
        ready = policy.is_eligible(s)
        table.add_row(
            "›" if s.id == selected_id else "",
            s.id,
            Text(s.name),
            badge_text(s, policy),
            Text("READY", style="bold green") if ready else "",
        )
    return table


def voucher_log_table(vouchers: Sequence[Voucher]) -> Table:
    table = Table(title="Issued vouchers", caption=f"{len(vouchers)} issued")
    table.add_column("student")
    table.add_column("id", style="dim", no_wrap=True)
    table.add_column("issued")
    table.add_column("amount", justify="right")
    table.add_column("status")

    for v in vouchers:
        table.add_row(
            Text(v.student_name),
            short_id(v),
            format_issued_at(v.issued_at),
            format_pounds(v.amount_pence),
            Text(log_status(v), style="dim" if v.redeemed else "green"),
        )
    return table


def voucher_card(voucher: Voucher, config: DeskConfig) -> Panel:
    body = Table.grid(padding=(0, 2))
    body.add_column(style="bold dim")
    body.add_column()
    body.add_row("Student", Text(voucher.student_name))
    body.add_row("Issued", format_issued_at(voucher.issued_at))
    body.add_row("Value", f"{format_pounds(voucher.amount_pence)} · non-transferable")
    body.add_row("ID", short_id(voucher))
    body.add_row("Ref", long_id(voucher))

    status = card_status(voucher)
    return Panel(
        body,
        title=f"{escape(config.school_name)} Voucher · Worth {format_pounds(voucher.amount_pence)}",
        subtitle=f"[{'dim' if voucher.redeemed else 'bold green'}]{status}[/]",
        border_style="dim" if voucher.redeemed else "green",
        expand=False,
    )


_PRINT_CSS = """
body { margin: 0; font-family: system-ui, sans-serif; color: #0f172a; }
.page { display: flex; min-height: 100vh; align-items: center; justify-content: center; }
.card { width: 22rem; border: 1px solid #cbd5e1; border-radius: 8px; padding: 12px 16px; font-size: 13px; }
.head { display: flex; justify-content: space-between; align-items: center; }
.title { font-size: 11px; font-weight: 600; letter-spacing: .16em; text-transform: uppercase; color: #64748b; }
.status { border: 1px solid; border-radius: 6px; padding: 2px 8px; font-size: 11px; font-weight: 600; text-transform: uppercase; }
dl { display: grid; grid-template-columns: auto 1fr; gap: 2px 12px; margin: 12px 0; }
dt { font-weight: 600; color: #64748b; }
.foot { border-top: 1px dashed #cbd5e1; padding-top: 8px; font-size: 10px; color: #94a3b8; }
.row { display: flex; justify-content: space-between; }
.mono { font-family: ui-monospace, monospace; }
.barcode { text-align: center; margin-top: 4px; }
.barcode svg { height: 40px; max-width: 220px; width: 100%; }
.ref { letter-spacing: .18em; font-size: 8px; }
"""


def printable_html(voucher: Voucher, config: DeskConfig) -> str:
    """
    Standalone page containing only the voucher card.

    Meant to be handed to the host's print dialog.
    """
    esc = html.escape
    svg = code128_svg(voucher.id)
    barcode_html = strip_xml_declaration(svg) if svg else ""
    amount = format_pounds(voucher.amount_pence)
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{esc(config.school_name)} Voucher {esc(short_id(voucher))}</title>
<style>{_PRINT_CSS}</style>
</head>
<body>
<div class="page">
  <div class="card">
    <div class="head">
      <div>
        <div class="title">{esc(config.school_name)} Voucher</div>
        <div>Worth {esc(amount)}</div>
      </div>
      <div class="status">{esc(card_status(voucher))}</div>
    </div>
    <dl>
      <dt>Student</dt><dd>{esc(voucher.student_name)}</dd>
      <dt>Issued</dt><dd>{esc(format_issued_at(voucher.issued_at))}</dd>
      <dt>Value</dt><dd>{esc(amount)} · non-transferable</dd>
    </dl>
    <div class="foot">
      <div class="row">
        <div>Café use only · one voucher per purchase</div>
        <div class="mono">ID: {esc(short_id(voucher))}</div>
      </div>
      <div class="barcode">{barcode_html}</div>
      <div class="barcode mono ref">{esc(long_id(voucher))}</div>
    </div>
  </div>
</div>
</body>
</html>
"""
