"""CLI error handling helpers."""

import logging

import click

from ledgerbook.domain.errors import DomainError, StoreError

logger = logging.getLogger(__name__)


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error on stderr and exit with status 1.

    Store failures have already been rolled back; their database cause is
    logged so it shows up with --verbose.
    """
    if isinstance(error, StoreError):
        logger.debug("Store failure", exc_info=error)
        click.echo(f"Error: {error}. Submit the request again.", err=True)
    else:
        click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
