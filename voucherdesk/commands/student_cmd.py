"""Student roster CLI commands."""

from __future__ import annotations

import json

from rich.console import Console
from rich.markup import escape

from ..desk import VoucherDesk
from ..render import badge_text, eligibility_text, student_table


def run_students(desk: VoucherDesk, *, output_json: bool = False, selected_id: str | None = None) -> int:
    students = desk.students()
    if output_json:
        rows = [
            {
                **s.to_dict(),
                "eligible": desk.is_eligible(s),
                "remaining": desk.remaining(s),
            }
            for s in students
        ]
        print(json.dumps(rows, indent=2))
        return 0

    console = Console()
    if not students:
        console.print("No students on the roster. Import one with `voucherdesk roster import`.", style="dim")
        return 0

    selected = desk.find_student(selected_id)
    console.print(student_table(students, desk.policy, selected_id=selected.id if selected else None))
    return 0


def run_adjust(desk: VoucherDesk, student_id: str, delta: int) -> int:
    err = Console(stderr=True)
    if desk.get_student(student_id) is None:
        err.print(f"Student not found: {escape(student_id)}", style="bold red")
        return 1

    student = desk.adjust(student_id, delta)
    console = Console()
    console.print(f"{escape(student.name)}: {badge_text(student, desk.policy)}")
    console.print(f"  {eligibility_text(student, desk.policy)}", style="green" if desk.is_eligible(student) else "dim")
    return 0


def run_rename(desk: VoucherDesk, student_id: str, name: str) -> int:
    err = Console(stderr=True)
    name = name.strip()
    if not name:
        err.print("Name must not be empty", style="bold red")
        return 1
    if desk.get_student(student_id) is None:
        err.print(f"Student not found: {escape(student_id)}", style="bold red")
        return 1
    desk.rename_student(student_id, name)
    err.print(f"renamed: {escape(student_id)} -> {escape(name)}", style="green")
    return 0
