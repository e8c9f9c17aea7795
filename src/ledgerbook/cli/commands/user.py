"""User commands."""

import click
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.domain.user import UserService


@click.group()
def user_group():
    """Manage users."""
    pass


@user_group.command("create")
@click.argument("username", metavar="USERNAME")
@click.password_option(help="Password (prompted if omitted)")
@click.pass_context
def create_user(ctx, username: str, password: str):
    """Create a user.

    Examples:
        ledgerbook user create admin
        ledgerbook user create contador --password secreto
    """
    service = UserService(ctx.obj["db"])
    try:
        user_id = service.create_user(username=username, password=password)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created user '{username}' (ID: {user_id})")


@user_group.command("list")
@click.pass_context
def list_users(ctx):
    """List users."""
    users = UserService(ctx.obj["db"]).list_users()
    if not users:
        click.echo("No users found.")
        return
    for u in users:
        click.echo(f"ID: {u.id:3d} | {u.username}")


@user_group.command("verify")
@click.argument("username", metavar="USERNAME")
@click.option("--password", prompt=True, hide_input=True, help="Password to check")
@click.pass_context
def verify_user(ctx, username: str, password: str):
    """Check a user's password."""
    user = UserService(ctx.obj["db"]).authenticate(username, password)
    if user is None:
        click.echo("Error: Invalid credentials", err=True)
        ctx.exit(1)
    click.echo(f"Credentials valid for '{user.username}'")


def register_commands(cli):
    """Register user commands with main CLI."""
    cli.add_command(user_group, name="user")
