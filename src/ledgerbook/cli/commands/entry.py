"""Journal entry commands (libro diario)."""

import json
from decimal import Decimal

import click
from ledgerbook.cli.account_resolution import resolve_account_or_exit, resolve_user_or_exit
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.entities import JournalEntry, MovementInput
from ledgerbook.domain.journal import JournalService
from ledgerbook.domain.payloads import journal_entry_payload
from ledgerbook.utils.amount_parser import parse_posting
from ledgerbook.utils.date_parser import parse_date


def _account_codes(db) -> dict[int, str]:
    return {acc.id: acc.code for acc in AccountService(db).list_accounts(active=None)}


def _echo_entry(entry: JournalEntry, codes: dict[int, str]) -> None:
    click.echo(f"\n#{entry.sequence_number} | {entry.date.isoformat()} | {entry.memo}")
    for m in entry.movements:
        code = codes.get(m.account_id, str(m.account_id))
        debit = f"{m.debit:,.2f}" if m.debit else ""
        credit = f"{m.credit:,.2f}" if m.credit else ""
        click.echo(f"    {code:<10} {debit:>15} {credit:>15}")


@click.group()
def entry_group():
    """Record and list journal entries."""
    pass


@entry_group.command("add")
@click.option("--date", "entry_date", required=True, help="Entry date (YYYY-MM-DD, DD/MM/YYYY, 'today')")
@click.option("--memo", required=True, help="Entry description (concepto)")
@click.option(
    "--debit",
    "debits",
    multiple=True,
    metavar="ACCOUNT:AMOUNT",
    help="Debit line; repeat for several accounts",
)
@click.option(
    "--credit",
    "credits",
    multiple=True,
    metavar="ACCOUNT:AMOUNT",
    help="Credit line; repeat for several accounts",
)
@click.pass_context
def add_entry(ctx, entry_date: str, memo: str, debits: tuple[str, ...], credits: tuple[str, ...]):
    """Record a balanced journal entry.

    ACCOUNT can be an account code or ID. Debit lines are stored first, then
    credit lines, each in the order given.

    Examples:
        ledgerbook --user admin entry add --date 2024-01-01 --memo "Opening" \\
            --debit 1101:1000 --credit 3101:1000
        ledgerbook --user admin entry add --date today --memo "Venta de contado" \\
            --debit 1101:1160 --credit 4101:1000 --credit 2103:160
    """
    db = ctx.obj["db"]
    user_id = resolve_user_or_exit(ctx)
    account_service = AccountService(db)

    try:
        parsed_date = parse_date(entry_date)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    movements = []
    for side, postings in (("debit", debits), ("credit", credits)):
        for posting in postings:
            try:
                account, amount = parse_posting(posting)
            except ValueError as e:
                click.echo(f"Error: Invalid posting: {e}", err=True)
                ctx.exit(1)
            account_obj = resolve_account_or_exit(ctx, account_service, account)
            if side == "debit":
                movements.append(MovementInput(account_id=account_obj.id, debit=amount))
            else:
                movements.append(MovementInput(account_id=account_obj.id, credit=amount))

    try:
        sequence_number = JournalService(db).create_entry(
            entry_date=parsed_date, memo=memo, movements=movements, created_by=user_id
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    total = sum((m.debit for m in movements), Decimal("0"))
    click.echo(f"Created journal entry #{sequence_number} for {total:,.2f}")


@entry_group.command("list")
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
@click.pass_context
def list_entries(ctx, as_json: bool):
    """List journal entries, newest first."""
    db = ctx.obj["db"]
    entries = JournalService(db).list_entries()
    codes = _account_codes(db)

    if as_json:
        click.echo(json.dumps([journal_entry_payload(e, codes) for e in entries], indent=2))
        return

    if not entries:
        click.echo("No journal entries found.")
        return
    for e in entries:
        _echo_entry(e, codes)


@entry_group.command("show")
@click.argument("sequence_number", type=int)
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
@click.pass_context
def show_entry(ctx, sequence_number: int, as_json: bool):
    """Show one journal entry by sequence number."""
    db = ctx.obj["db"]
    try:
        e = JournalService(db).get_entry(sequence_number)
    except ValueError as exc:
        handle_domain_error(ctx, exc)

    codes = _account_codes(db)
    if as_json:
        click.echo(json.dumps(journal_entry_payload(e, codes), indent=2))
        return
    _echo_entry(e, codes)
    click.echo(f"    {'Totals':<10} {e.total_debit:>15,.2f} {e.total_credit:>15,.2f}")


def register_commands(cli):
    """Register entry commands with main CLI."""
    cli.add_command(entry_group, name="entry")
