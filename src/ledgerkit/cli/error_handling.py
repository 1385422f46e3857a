"""CLI error handling helpers."""

import click

from ledgerkit.domain.errors import DomainError, StoreUnavailableError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def handle_store_error(ctx: click.Context, error: StoreUnavailableError) -> None:
    """Render a store failure without exposing connection details."""
    click.echo(f"Error: {error}. Try again later.", err=True)
    ctx.exit(2)
