"""Cash count commands (arqueo de caja)."""

import json

import click
from ledgerbook.cli.account_resolution import resolve_user_or_exit
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.config import load_report_settings
from ledgerbook.domain.cash_count import DEFAULT_HISTORY_LIMIT, DENOMINATIONS, CashCountService
from ledgerbook.domain.payloads import cash_count_payload


def _service(ctx) -> CashCountService:
    try:
        settings = load_report_settings()
    except ValueError as e:
        handle_domain_error(ctx, e)
    return CashCountService(ctx.obj["db"], settings)


def _parse_counts(ctx, counts: tuple[str, ...]) -> dict[str, int]:
    quantities: dict[str, int] = {}
    for item in counts:
        denomination, sep, quantity = item.rpartition("=")
        try:
            if not sep or not denomination.strip():
                raise ValueError
            number = int(quantity.strip())
        except ValueError:
            click.echo(f"Error: '{item}' is not in DENOMINATION=QUANTITY form", err=True)
            ctx.exit(1)
        key = denomination.strip()
        quantities[key] = quantities.get(key, 0) + number
    return quantities


@click.group()
def cash_count_group():
    """Count the cash drawer against the ledger."""
    pass


@cash_count_group.command("balance")
@click.pass_context
def show_balance(ctx):
    """Show the ledger balance of the cash account."""
    service = _service(ctx)
    try:
        balance = service.system_balance()
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Cash account {service.settings.cash_account_code} balance: {balance:,.2f}")


@cash_count_group.command("record")
@click.option(
    "--count",
    "counts",
    multiple=True,
    metavar="DENOMINATION=QUANTITY",
    help="Pieces counted of one denomination; repeat per denomination",
)
@click.option("--notes", help="Observations")
@click.pass_context
def record_count(ctx, counts: tuple[str, ...], notes: str | None):
    """Record a physical cash count.

    Bills: 1000, 500, 200, 100, 50, 20. Coins: 20, 10, 5, 2, 1, 0.50.
    Write bill:20 or coin:20 for the value both kinds share.

    Examples:
        ledgerbook --user admin cash-count record --count 500=2 --count bill:20=3 --count coin:20=1
    """
    user_id = resolve_user_or_exit(ctx)
    quantities = _parse_counts(ctx, counts)
    service = _service(ctx)
    try:
        count_id = service.record_count(user_id=user_id, quantities=quantities, notes=notes)
        count = service.get_count(count_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Recorded cash count {count.id}")
    click.echo(f"  System balance: {count.system_balance:>15,.2f}")
    click.echo(f"  Physical total: {count.physical_total:>15,.2f}")
    click.echo(f"  Difference:     {count.difference:>15,.2f}")


@cash_count_group.command("history")
@click.option("--limit", type=int, default=DEFAULT_HISTORY_LIMIT, show_default=True, help="Number of counts")
@click.pass_context
def history(ctx, limit: int):
    """List the most recent cash counts."""
    counts = _service(ctx).history(limit=limit)
    if not counts:
        click.echo("No cash counts found.")
        return
    for c in counts:
        click.echo(
            f"ID: {c.id:3d} | {c.counted_at:%Y-%m-%d %H:%M} | system {c.system_balance:>12,.2f} | "
            f"counted {c.physical_total:>12,.2f} | difference {c.difference:>10,.2f}"
        )


@cash_count_group.command("show")
@click.argument("count_id", type=int)
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
@click.pass_context
def show_count(ctx, count_id: int, as_json: bool):
    """Show one cash count with its denominations."""
    try:
        count = _service(ctx).get_count(count_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if as_json:
        click.echo(json.dumps(cash_count_payload(count), indent=2))
        return
    click.echo(f"Cash count {count.id} ({count.counted_at:%Y-%m-%d %H:%M})")
    for denomination in DENOMINATIONS:
        quantity = count.quantities.get(denomination, 0)
        if quantity:
            value = denomination.value
            click.echo(
                f"  {denomination.kind.value:<4} {value:>8,.2f} x {quantity:<5d} = {value * quantity:>12,.2f}"
            )
    click.echo(f"  System balance: {count.system_balance:>15,.2f}")
    click.echo(f"  Physical total: {count.physical_total:>15,.2f}")
    click.echo(f"  Difference:     {count.difference:>15,.2f}")
    if count.notes:
        click.echo(f"  Notes: {count.notes}")


def register_commands(cli):
    """Register cash count commands with main CLI."""
    cli.add_command(cash_count_group, name="cash-count")
