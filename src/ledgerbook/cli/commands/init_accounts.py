"""Initialize the default chart of accounts."""

import click
from ledgerbook.domain.account import AccountService


# (code, name, type, subtype, nature). Names follow the keywords the detailed
# income statement looks for ("venta", "compra", "devol", "rebaj", "desc").
DEFAULT_CHART = [
    # Assets
    ("1101", "Caja", "asset", "circulating", "debtor"),
    ("1102", "Bancos", "asset", "circulating", "debtor"),
    ("1103", "Clientes", "asset", "circulating", "debtor"),
    ("1104", "Inventario", "asset", "circulating", "debtor"),
    ("1105", "IVA acreditable", "asset", "circulating", "debtor"),
    ("1201", "Terrenos", "asset", "non_circulating", "debtor"),
    ("1202", "Edificios", "asset", "non_circulating", "debtor"),
    ("1203", "Mobiliario y equipo", "asset", "non_circulating", "debtor"),
    ("1204", "Equipo de transporte", "asset", "non_circulating", "debtor"),
    ("1205", "Depreciación acumulada", "asset", "non_circulating", "creditor"),
    # Liabilities
    ("2101", "Proveedores", "liability", "short_term", "creditor"),
    ("2102", "Acreedores diversos", "liability", "short_term", "creditor"),
    ("2103", "IVA trasladado", "liability", "short_term", "creditor"),
    ("2201", "Documentos por pagar a largo plazo", "liability", "long_term", "creditor"),
    # Equity
    ("3101", "Capital social", "equity", None, "creditor"),
    ("3102", "Utilidades retenidas", "equity", None, "creditor"),
    # Income
    ("4101", "Ventas", "income", None, "creditor"),
    ("4102", "Devoluciones sobre ventas", "income", None, "debtor"),
    ("4103", "Rebajas sobre ventas", "income", None, "debtor"),
    ("4104", "Descuentos sobre ventas", "income", None, "debtor"),
    # Expenses
    ("5101", "Gastos de compra", "expense", "cost_of_sales", "debtor"),
    ("5102", "Devoluciones sobre compras", "expense", "cost_of_sales", "creditor"),
    ("5103", "Rebajas sobre compras", "expense", "cost_of_sales", "creditor"),
    ("5104", "Descuentos sobre compras", "expense", "cost_of_sales", "creditor"),
    ("6101", "Gastos de venta", "expense", "operating", "debtor"),
    ("6102", "Gastos de administración", "expense", "operating", "debtor"),
]


@click.command("init-accounts")
@click.option("--force", is_flag=True, help="Add missing default accounts even if accounts exist")
@click.pass_context
def init_accounts(ctx, force: bool):
    """Initialize database with the default chart of accounts."""
    db = ctx.obj["db"]
    service = AccountService(db)

    existing = service.list_accounts(active=None)
    if existing and not force:
        click.echo("Accounts already exist. Use --force to add missing defaults.")
        return

    click.echo("Creating default chart of accounts...")
    existing_codes = {acc.code for acc in existing}

    created = 0
    errors = 0
    for code, name, account_type, subtype, nature in DEFAULT_CHART:
        if code in existing_codes:
            continue
        try:
            service.create_account(
                code=code, name=name, type=account_type, nature=nature, subtype=subtype
            )
            created += 1
        except ValueError as e:
            click.echo(f"Warning: Could not create account {code} '{name}': {e}", err=True)
            errors += 1

    if errors == 0:
        click.echo(f"Successfully created {created} accounts.")
    else:
        click.echo(f"Created {created} accounts with {errors} errors.")


def register_commands(cli):
    """Register init-accounts command with main CLI."""
    cli.add_command(init_accounts)
