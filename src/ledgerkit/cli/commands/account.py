"""Account management commands."""

import click

from ledgerkit.cli.error_handling import handle_domain_error, handle_store_error
from ledgerkit.cli.formatting import format_account, format_balance, format_entry
from ledgerkit.domain.account import AccountService
from ledgerkit.domain.errors import DomainError, StoreUnavailableError


@click.group()
def account_group():
    """Manage accounts."""
    pass


@account_group.command("create")
@click.option("--owner", required=True, help="Owner identifier")
@click.option("--currency", required=True, help="Three-letter currency code (e.g., USD)")
@click.pass_context
def create_account(ctx, owner: str, currency: str):
    """Create a new account.

    Examples:
        ledgerkit account create --owner alice --currency USD
        ledgerkit account create --owner bob --currency eur
    """
    service = AccountService(ctx.obj["db"])

    try:
        account = service.create_account(owner_id=owner, currency=currency)
    except DomainError as e:
        handle_domain_error(ctx, e)
    except StoreUnavailableError as e:
        handle_store_error(ctx, e)
    else:
        click.echo(f"Created {account.currency} account for '{account.owner_id}' (ID: {account.id})")


@account_group.command("show")
@click.argument("account_id", type=int)
@click.pass_context
def show_account(ctx, account_id: int):
    """Show an account and its balance."""
    service = AccountService(ctx.obj["db"])

    try:
        account = service.get_account(account_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    except StoreUnavailableError as e:
        handle_store_error(ctx, e)
    else:
        click.echo(format_balance(account))


@account_group.command("list")
@click.option("--all", "include_system", is_flag=True, help="Include system accounts")
@click.pass_context
def list_accounts(ctx, include_system: bool):
    """List accounts."""
    service = AccountService(ctx.obj["db"])

    try:
        accounts = service.list_accounts(include_system=include_system)
    except StoreUnavailableError as e:
        handle_store_error(ctx, e)
        return

    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 72)
    for acc in accounts:
        click.echo(format_account(acc))


@account_group.command("ledger")
@click.argument("account_id", type=int)
@click.pass_context
def show_ledger(ctx, account_id: int):
    """Show the ledger entries of an account, oldest first."""
    service = AccountService(ctx.obj["db"])

    try:
        entries = service.get_ledger(account_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    except StoreUnavailableError as e:
        handle_store_error(ctx, e)
        return

    if not entries:
        click.echo(f"No ledger entries for account {account_id}.")
        return

    for entry in entries:
        click.echo(format_entry(entry))


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
