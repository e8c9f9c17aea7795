"""CLI helpers for account and user resolution."""

from __future__ import annotations

import click
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.entities import Account
from ledgerbook.domain.user import UserService
from ledgerbook.cli.error_handling import handle_domain_error


def resolve_account_or_exit(
    ctx: click.Context, account_service: AccountService, account: str | int
) -> Account:
    """Resolve account code or ID, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return account_service.resolve_account(account)
    except ValueError as exc:
        handle_domain_error(ctx, exc)


def resolve_user_or_exit(ctx: click.Context) -> int:
    """Return the ID of the user given with --user/LEDGERBOOK_USER, or exit."""
    username = ctx.obj.get("username")
    if not username:
        click.echo(
            "Error: No user given. Use --user or set LEDGERBOOK_USER.", err=True
        )
        ctx.exit(1)
    user = UserService(ctx.obj["db"]).get_user_by_username(username)
    if user is None:
        click.echo(f"Error: User '{username}' not found", err=True)
        ctx.exit(1)
    return user.id
