"""Chart of accounts commands."""

import click
from ledgerbook.cli.account_resolution import resolve_account_or_exit
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.entities import AccountNature, AccountSubtype, AccountType

TYPE_CHOICES = [t.value for t in AccountType]
NATURE_CHOICES = [n.value for n in AccountNature]
SUBTYPE_CHOICES = [s.value for s in AccountSubtype]


@click.group()
def account_group():
    """Manage the chart of accounts."""
    pass


@account_group.command("create")
@click.argument("code", metavar="CODE")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option("--type", "account_type", type=click.Choice(TYPE_CHOICES), required=True, help="Account type")
@click.option("--subtype", type=click.Choice(SUBTYPE_CHOICES), help="Account subtype")
@click.option(
    "--nature",
    type=click.Choice(NATURE_CHOICES),
    help="Debtor or creditor (defaults to debtor for assets/expenses, creditor otherwise)",
)
@click.pass_context
def create_account(
    ctx, code: str, name: str, account_type: str, subtype: str | None, nature: str | None
):
    """Create a new account.

    Examples:
        ledgerbook account create 1101 "Caja" --type asset --subtype circulating
        ledgerbook account create 2101 "Proveedores" --type liability --subtype short_term
        ledgerbook account create 3101 "Capital social" --type equity
    """
    db = ctx.obj["db"]
    service = AccountService(db)

    if nature is None:
        debtor_types = (AccountType.ASSET.value, AccountType.EXPENSE.value)
        nature = AccountNature.DEBTOR.value if account_type in debtor_types else AccountNature.CREDITOR.value

    try:
        account_id = service.create_account(
            code=code, name=name, type=account_type, nature=nature, subtype=subtype
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created account {code} '{name}' (ID: {account_id})")


@account_group.command("list")
@click.option("--all", "show_all", is_flag=True, help="Include inactive accounts")
@click.option("--type", "account_type", type=click.Choice(TYPE_CHOICES), help="Filter by type")
@click.option("--subtype", type=click.Choice(SUBTYPE_CHOICES), help="Filter by subtype")
@click.pass_context
def list_accounts(ctx, show_all: bool, account_type: str | None, subtype: str | None):
    """List accounts ordered by code."""
    db = ctx.obj["db"]
    service = AccountService(db)

    accounts = service.list_accounts(
        active=None if show_all else True, type=account_type, subtype=subtype
    )
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 80)
    for acc in accounts:
        subtype_label = acc.subtype.value if acc.subtype else "-"
        status = "" if acc.active else " (inactive)"
        click.echo(
            f"{acc.code:<8} | {acc.name:<30} | {acc.type.value:<9} | "
            f"{subtype_label:<15} | {acc.nature.value}{status}"
        )


@account_group.command("deactivate")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def deactivate_account(ctx, account: str) -> None:
    """Deactivate an account.

    ACCOUNT can be an account code or ID. Accounts are never deleted;
    deactivated accounts keep their movements but accept no new ones and
    drop out of the trial balance and balance sheet.
    """
    db = ctx.obj["db"]
    service = AccountService(db)
    account_obj = resolve_account_or_exit(ctx, service, account)

    try:
        service.deactivate_account(account_obj.id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deactivated account {account_obj.code} '{account_obj.name}'")


@account_group.command("activate")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def activate_account(ctx, account: str) -> None:
    """Reactivate a deactivated account."""
    db = ctx.obj["db"]
    service = AccountService(db)
    account_obj = resolve_account_or_exit(ctx, service, account)

    try:
        service.activate_account(account_obj.id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Activated account {account_obj.code} '{account_obj.name}'")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
