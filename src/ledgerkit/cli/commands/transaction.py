"""Deposit, withdrawal, transfer and transaction inspection commands."""

import click

from ledgerkit.cli.error_handling import handle_domain_error, handle_store_error
from ledgerkit.cli.formatting import format_entry, format_transaction
from ledgerkit.domain.errors import DomainError, StoreUnavailableError
from ledgerkit.domain.ledger import LedgerService
from ledgerkit.utils.amount_parser import parse_amount

currency_option = click.option(
    "--currency", required=True, help="Three-letter currency code (e.g., USD)"
)
description_option = click.option("--description", help="Transaction description")


def _run(ctx: click.Context, message: str, operation, *args, **kwargs) -> None:
    """Run a ledger operation and report the resulting transaction."""
    try:
        txn = operation(*args, **kwargs)
    except DomainError as e:
        handle_domain_error(ctx, e)
    except StoreUnavailableError as e:
        handle_store_error(ctx, e)
    else:
        click.echo(message)
        click.echo(format_transaction(txn))


@click.command("deposit")
@click.argument("account_id", type=int)
@click.argument("amount")
@currency_option
@description_option
@click.pass_context
def deposit(ctx, account_id: int, amount: str, currency: str, description: str | None):
    """Deposit AMOUNT into an account.

    Examples:
        ledgerkit deposit 1 100.00 --currency USD
        ledgerkit deposit 1 "1,250.50" --currency USD --description "Salary"
    """
    service = LedgerService(ctx.obj["db"])
    try:
        value = parse_amount(amount)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    _run(ctx, "Deposit successful", service.create_deposit, account_id, value, currency, description)


@click.command("withdraw")
@click.argument("account_id", type=int)
@click.argument("amount")
@currency_option
@description_option
@click.pass_context
def withdraw(ctx, account_id: int, amount: str, currency: str, description: str | None):
    """Withdraw AMOUNT from an account.

    Examples:
        ledgerkit withdraw 1 40 --currency USD
    """
    service = LedgerService(ctx.obj["db"])
    try:
        value = parse_amount(amount)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    _run(ctx, "Withdrawal successful", service.create_withdrawal, account_id, value, currency, description)


@click.command("transfer")
@click.argument("from_account_id", type=int)
@click.argument("to_account_id", type=int)
@click.argument("amount")
@currency_option
@description_option
@click.pass_context
def transfer(
    ctx,
    from_account_id: int,
    to_account_id: int,
    amount: str,
    currency: str,
    description: str | None,
):
    """Transfer AMOUNT between two accounts of the same currency.

    Examples:
        ledgerkit transfer 1 2 25.00 --currency USD --description "Rent share"
    """
    service = LedgerService(ctx.obj["db"])
    try:
        value = parse_amount(amount)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    _run(
        ctx,
        "Transfer successful",
        service.create_transfer,
        from_account_id,
        to_account_id,
        value,
        currency,
        description,
    )


@click.group()
def transaction_group():
    """Inspect transactions."""
    pass


@transaction_group.command("show")
@click.argument("transaction_id", type=int)
@click.pass_context
def show_transaction(ctx, transaction_id: int):
    """Show a transaction and its ledger entries."""
    service = LedgerService(ctx.obj["db"])

    try:
        txn = service.get_transaction(transaction_id)
        entries = service.get_transaction_entries(transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    except StoreUnavailableError as e:
        handle_store_error(ctx, e)
        return

    click.echo(format_transaction(txn))
    for entry in entries:
        click.echo(f"  {format_entry(entry)}")


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(deposit)
    cli.add_command(withdraw)
    cli.add_command(transfer)
    cli.add_command(transaction_group, name="transaction")
