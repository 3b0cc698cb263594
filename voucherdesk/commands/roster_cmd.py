"""Roster import/export CLI commands."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.markup import escape

from ..desk import VoucherDesk
from ..seed import RosterImportError, dump_roster_yaml, load_roster_file


def run_roster_import(desk: VoucherDesk, path: Path) -> int:
    err = Console(stderr=True)
    try:
        students = load_roster_file(path)
    except RosterImportError as e:
        err.print(escape(str(e)), style="bold red")
        return 1

    count = desk.import_roster(students)
    kept = len(desk.vouchers())
    err.print(f"imported {count} students from {escape(str(path))}", style="green")
    if kept:
        err.print(f"  {kept} issued vouchers kept", style="dim")
    return 0


def run_roster_export(desk: VoucherDesk, out: Path | None = None) -> int:
    text = dump_roster_yaml(desk.students())
    if out is None:
        print(text, end="")
        return 0
    try:
        out.write_text(text, encoding="utf-8")
    except OSError as e:
        Console(stderr=True).print(f"Could not write {escape(str(out))}: {escape(str(e))}", style="bold red")
        return 1
    Console(stderr=True).print(f"exported {len(desk.students())} students to {escape(str(out))}", style="green")
    return 0
