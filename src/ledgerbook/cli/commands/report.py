"""Report commands."""

import dataclasses
import json
from decimal import Decimal

import click
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.config import load_report_settings
from ledgerbook.domain.entities import BalanceLine
from ledgerbook.domain.payloads import (
    balance_sheet_payload,
    detailed_income_statement_payload,
    general_ledger_payload,
    income_statement_payload,
    trial_balance_payload,
)
from ledgerbook.domain.reports import ReportService
from ledgerbook.utils.amount_parser import parse_amount

NAME_WIDTH = 36
AMOUNT_WIDTH = 15


def _amount(value: Decimal) -> str:
    return f"{value:,.2f}"


def _row(label: str, value: Decimal, indent: int = 0) -> None:
    width = NAME_WIDTH - indent
    click.echo(f"{' ' * indent}{label:<{width}} {_amount(value):>{AMOUNT_WIDTH}}")


def _section(title: str, lines: tuple[BalanceLine, ...], total_label: str, total: Decimal) -> None:
    click.echo(f"\n{title}")
    for line in lines:
        _row(f"{line.account_code} {line.account_name}", line.balance, indent=2)
    _row(total_label, total)


def _echo_json(payload) -> None:
    click.echo(json.dumps(payload, indent=2, ensure_ascii=False))


def _service(ctx, **overrides) -> ReportService:
    try:
        settings = load_report_settings()
    except ValueError as e:
        handle_domain_error(ctx, e)
    overrides = {key: value for key, value in overrides.items() if value is not None}
    return ReportService(ctx.obj["db"], dataclasses.replace(settings, **overrides))


@click.group()
def report_group():
    """Derive financial reports from the journal."""
    pass


@report_group.command("ledger")
@click.option("--account", "account_code", help="Only this account code")
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
@click.pass_context
def ledger(ctx, account_code: str | None, as_json: bool):
    """General ledger (libro mayor) with running balances."""
    try:
        accounts = _service(ctx).general_ledger(account_code)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if as_json:
        _echo_json(general_ledger_payload(accounts))
        return
    if not accounts:
        click.echo("No movements found.")
        return

    for account in accounts:
        click.echo(f"\n{account.account_code} {account.account_name}")
        click.echo("-" * 96)
        click.echo(
            f"{'#':>5} {'Date':<10} {'Memo':<30} {'Debit':>15} {'Credit':>15} {'Balance':>15}"
        )
        for line in account.lines:
            click.echo(
                f"{line.sequence_number:>5} {line.date.isoformat():<10} {line.memo[:30]:<30} "
                f"{_amount(line.debit):>15} {_amount(line.credit):>15} "
                f"{_amount(line.running_balance):>15}"
            )
        click.echo(f"{'Final balance':>79} {_amount(account.final_balance):>15}")


@report_group.command("trial-balance")
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
@click.pass_context
def trial_balance(ctx, as_json: bool):
    """Trial balance (balanza de comprobación)."""
    report = _service(ctx).trial_balance()
    if as_json:
        _echo_json(trial_balance_payload(report))
        return
    if not report.rows:
        click.echo("No movements found.")
        return

    header = f"{'Code':<8} {'Account':<30} {'Debit':>15} {'Credit':>15} {'Debtor':>15} {'Creditor':>15}"
    click.echo(header)
    click.echo("-" * len(header))
    for row in (*report.rows, report.totals):
        if row is report.totals:
            click.echo("-" * len(header))
        click.echo(
            f"{row.account_code:<8} {row.account_name[:30]:<30} {_amount(row.total_debit):>15} "
            f"{_amount(row.total_credit):>15} {_amount(row.debtor_balance):>15} "
            f"{_amount(row.creditor_balance):>15}"
        )


@report_group.command("balance-sheet")
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
@click.pass_context
def balance_sheet(ctx, as_json: bool):
    """Balance sheet (balance general)."""
    report = _service(ctx).balance_sheet()
    if as_json:
        _echo_json(balance_sheet_payload(report))
        return

    click.echo("ASSETS")
    _section("Circulating", report.circulating, "Total circulating assets", report.total_circulating)
    _section(
        "Non-circulating",
        report.non_circulating,
        "Total non-circulating assets",
        report.total_non_circulating,
    )
    _row("TOTAL ASSETS", report.total_assets)
    click.echo("\nLIABILITIES")
    _section("Short term", report.short_term, "Total short-term liabilities", report.total_short_term)
    _section("Long term", report.long_term, "Total long-term liabilities", report.total_long_term)
    click.echo("\nEQUITY")
    _section("Equity", report.equity, "Total equity", report.total_equity)
    click.echo()
    _row("LIABILITIES + EQUITY", report.total_liabilities_and_equity)


def _amount_option(value: str | None, ctx) -> Decimal | None:
    if value is None:
        return None
    try:
        return parse_amount(value)
    except ValueError as e:
        handle_domain_error(ctx, e)


@report_group.command("income-statement")
@click.option("--detailed", is_flag=True, help="Keyword-driven statement with inventory and taxes")
@click.option("--opening-inventory", help="Opening inventory used when no inventory debit exists")
@click.option("--closing-inventory", help="Closing inventory")
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
@click.pass_context
def income_statement(
    ctx,
    detailed: bool,
    opening_inventory: str | None,
    closing_inventory: str | None,
    as_json: bool,
):
    """Income statement (estado de resultados)."""
    service = _service(
        ctx,
        opening_inventory_default=_amount_option(opening_inventory, ctx),
        closing_inventory=_amount_option(closing_inventory, ctx),
    )

    if detailed:
        report = service.detailed_income_statement()
        if as_json:
            _echo_json(detailed_income_statement_payload(report))
            return
        _row("Gross sales", report.gross_sales)
        _row("Sales returns", report.sales_returns, indent=2)
        _row("Sales allowances", report.sales_allowances, indent=2)
        _row("Sales discounts", report.sales_discounts, indent=2)
        _row("Net sales", report.net_sales)
        click.echo()
        _row("Opening inventory", report.opening_inventory, indent=2)
        _row("Purchases", report.purchases, indent=2)
        _row("Purchase expenses", report.purchase_expenses, indent=2)
        _row("Total purchases", report.total_purchases, indent=2)
        _row("Purchase discounts", report.purchase_discounts, indent=2)
        _row("Purchase returns", report.purchase_returns, indent=2)
        _row("Purchase allowances", report.purchase_allowances, indent=2)
        _row("Net purchases", report.net_purchases, indent=2)
        _row("Goods available", report.goods_available, indent=2)
        _row("Closing inventory", report.closing_inventory, indent=2)
        _row("Cost of sales", report.cost_of_sales)
        _row("Gross profit", report.gross_profit)
        click.echo()
        _row("Selling expenses", report.selling_expenses, indent=2)
        _row("Administrative expenses", report.administrative_expenses, indent=2)
        _row("Operating expenses", report.total_operating_expenses)
        _row("Income before taxes", report.pre_tax_income)
        _row(f"ISR ({service.settings.isr_rate:.0%})", report.isr, indent=2)
        _row(f"PTU ({service.settings.ptu_rate:.0%})", report.ptu, indent=2)
        _row("Total taxes", report.total_taxes)
        _row("NET INCOME", report.net_income)
        return

    report = service.income_statement()
    if as_json:
        _echo_json(income_statement_payload(report))
        return
    _section("Income", report.income, "Net sales", report.net_sales)
    _section("Cost of sales", report.cost_of_sales, "Total cost of sales", report.total_cost_of_sales)
    _row("GROSS PROFIT", report.gross_profit)
    _section(
        "Selling expenses",
        report.selling_expenses,
        "Total selling expenses",
        report.total_selling_expenses,
    )
    _section(
        "Administrative expenses",
        report.administrative_expenses,
        "Total administrative expenses",
        report.total_administrative_expenses,
    )
    _row("Operating expenses", report.total_operating_expenses)
    _row("NET INCOME", report.net_income)


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
