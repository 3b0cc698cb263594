"""CLI entrypoint for voucherdesk."""

import logging
import sys
from pathlib import Path

import click

from . import __version__
from .config import ConfigError, DeskConfig, find_config, load_config


def _configure_logging(verbose: bool) -> None:
    from rich.console import Console
    from rich.logging import RichHandler

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _desk(ctx: click.Context):
    from .desk import VoucherDesk

    desk = ctx.obj.get("desk")
    if desk is None:
        desk = VoucherDesk.open(ctx.obj["config"])
        ctx.obj["desk"] = desk
    return desk


@click.group()
@click.version_option(__version__, prog_name="voucherdesk")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to voucherdesk.toml (defaults to auto-detected)",
)
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding the roster and voucher log",
)
@click.option("--verbose", is_flag=True, help="Log debug output to stderr")
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, data_dir: Path | None, verbose: bool) -> None:
    """voucherdesk - Track commendations and issue café vouchers.

    Students earn commendations; once they reach the threshold a voucher can
    be issued, which deducts the threshold from their balance.
    """
    ctx.ensure_object(dict)
    _configure_logging(verbose)

    if config_path is None:
        config_path = find_config(Path.cwd())
    try:
        config = load_config(config_path)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    if data_dir is not None:
        config = DeskConfig(
            threshold=config.threshold,
            amount_pence=config.amount_pence,
            data_dir=data_dir.resolve(),
            school_name=config.school_name,
            roster_key=config.roster_key,
            ledger_key=config.ledger_key,
        )
    ctx.obj["config"] = config


@cli.command()
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.option("--select", "selected_id", type=str, default=None, help="Mark this student as selected")
@click.pass_context
def students(ctx: click.Context, output_json: bool, selected_id: str | None) -> None:
    """List students with their commendation progress."""
    from .commands.student_cmd import run_students

    sys.exit(run_students(_desk(ctx), output_json=output_json, selected_id=selected_id))


@cli.command()
@click.argument("student_id")
@click.option("--by", "amount", type=click.IntRange(min=1), default=1, show_default=True, help="Commendations to add")
@click.pass_context
def commend(ctx: click.Context, student_id: str, amount: int) -> None:
    """Add commendations to a student."""
    from .commands.student_cmd import run_adjust

    sys.exit(run_adjust(_desk(ctx), student_id, amount))


@cli.command()
@click.argument("student_id")
@click.option("--by", "amount", type=click.IntRange(min=1), default=1, show_default=True, help="Commendations to remove")
@click.pass_context
def uncommend(ctx: click.Context, student_id: str, amount: int) -> None:
    """Remove commendations from a student (never below zero)."""
    from .commands.student_cmd import run_adjust

    sys.exit(run_adjust(_desk(ctx), student_id, -amount))


@cli.command()
@click.argument("student_id")
@click.argument("name")
@click.pass_context
def rename(ctx: click.Context, student_id: str, name: str) -> None:
    """Rename a student. Issued vouchers keep the old name."""
    from .commands.student_cmd import run_rename

    sys.exit(run_rename(_desk(ctx), student_id, name))


@cli.command()
@click.argument("student_id", required=False)
@click.option("--print", "print_it", is_flag=True, help="Open the printable voucher for printing")
@click.option(
    "--out",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the printable voucher page to this file",
)
@click.option("--json", "output_json", is_flag=True, help="Output the voucher as JSON")
@click.pass_context
def issue(ctx: click.Context, student_id: str | None, print_it: bool, out: Path | None, output_json: bool) -> None:
    """Issue a voucher to an eligible student.

    Without STUDENT_ID the first student on the roster is used.

    Examples:

        voucherdesk issue s2

        voucherdesk issue s2 --print
    """
    from .commands.voucher_cmd import run_issue

    sys.exit(run_issue(_desk(ctx), student_id, out=out, print_it=print_it, output_json=output_json))


@cli.command()
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.option("--limit", type=click.IntRange(min=1), default=None, help="Show only the N most recent vouchers")
@click.pass_context
def log(ctx: click.Context, output_json: bool, limit: int | None) -> None:
    """Show issued vouchers, most recent first."""
    from .commands.voucher_cmd import run_log

    sys.exit(run_log(_desk(ctx), output_json=output_json, limit=limit))


@cli.command()
@click.argument("voucher_ref")
@click.pass_context
def redeem(ctx: click.Context, voucher_ref: str) -> None:
    """Toggle a voucher between used and unused.

    VOUCHER_REF is the full id or the ID shown on the voucher.
    """
    from .commands.voucher_cmd import run_redeem

    sys.exit(run_redeem(_desk(ctx), voucher_ref))


@cli.command()
@click.argument("voucher_ref")
@click.option("--print", "print_it", is_flag=True, help="Open the printable voucher for printing")
@click.option(
    "--out",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the printable voucher page to this file",
)
@click.option("--json", "output_json", is_flag=True, help="Output the voucher as JSON")
@click.pass_context
def show(ctx: click.Context, voucher_ref: str, print_it: bool, out: Path | None, output_json: bool) -> None:
    """Re-open an issued voucher to view or print it again."""
    from .commands.voucher_cmd import run_show

    sys.exit(run_show(_desk(ctx), voucher_ref, out=out, print_it=print_it, output_json=output_json))


# -----------------------------------------------------------------------------
# Roster commands
# -----------------------------------------------------------------------------


@cli.group()
def roster() -> None:
    """Import or export the student roster."""
    pass


@roster.command("import")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def roster_import(ctx: click.Context, path: Path) -> None:
    """Replace the roster from a YAML file.

    Issued vouchers are kept, including those for students no longer listed.
    """
    from .commands.roster_cmd import run_roster_import

    sys.exit(run_roster_import(_desk(ctx), path))


@roster.command("export")
@click.option("--out", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Write to a file")
@click.pass_context
def roster_export(ctx: click.Context, out: Path | None) -> None:
    """Print the roster as YAML."""
    from .commands.roster_cmd import run_roster_export

    sys.exit(run_roster_export(_desk(ctx), out))


def main() -> None:
    """Main entrypoint."""
    cli()


if __name__ == "__main__":
    main()
