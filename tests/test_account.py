"""Tests for the account service."""

from decimal import Decimal
import pytest

from ledgerkit.domain.entities import AccountBalance, AccountKind
from ledgerkit.domain.errors import (
    AccountNotFoundError,
    InvalidCurrencyError,
    NotFoundError,
    ValidationError,
)


class TestCreateAccount:
    """Tests for AccountService.create_account."""

    def test_create_account(self, account_service):
        account = account_service.create_account(owner_id="alice", currency="usd")

        assert account.owner_id == "alice"
        assert account.currency == "USD"
        assert account.kind is AccountKind.USER

    def test_create_does_not_deduplicate(self, account_service):
        first = account_service.create_account(owner_id="alice", currency="USD")
        second = account_service.create_account(owner_id="alice", currency="USD")
        assert first.id != second.id

    def test_system_type_rejected(self, account_service):
        with pytest.raises(ValidationError, match="managed by the ledger"):
            account_service.create_account(
                owner_id="alice", currency="USD", account_type="system"
            )

    def test_arguments_are_keyword_only(self, account_service):
        with pytest.raises(TypeError):
            account_service.create_account("alice", "user", "USD")

        account = account_service.create_account(
            owner_id="alice", account_type="user", currency="USD"
        )
        assert account.currency == "USD"

    def test_unknown_type_rejected(self, account_service):
        with pytest.raises(ValidationError):
            account_service.create_account(
                owner_id="alice", currency="USD", account_type="savings"
            )

    @pytest.mark.parametrize("owner", ["", "   ", "system"])
    def test_invalid_owner_rejected(self, account_service, owner):
        with pytest.raises(ValidationError):
            account_service.create_account(owner_id=owner, currency="USD")

    def test_invalid_currency_rejected(self, account_service):
        with pytest.raises(InvalidCurrencyError):
            account_service.create_account(owner_id="alice", currency="dollars")


class TestGetAccount:
    """Tests for AccountService.get_account."""

    def test_new_account_has_zero_balance(self, account_service, usd_account):
        snapshot = account_service.get_account(usd_account.id)

        assert isinstance(snapshot, AccountBalance)
        assert snapshot.account == usd_account
        assert snapshot.balance == Decimal("0")

    def test_missing_account(self, account_service):
        with pytest.raises(AccountNotFoundError, match="Account 999 not found"):
            account_service.get_account(999)

    def test_not_found_is_domain_value_error(self, account_service):
        with pytest.raises(ValueError) as exc_info:
            account_service.get_account(999)
        assert isinstance(exc_info.value, NotFoundError)
        assert exc_info.value.kind == "not_found"


class TestLedgerQueries:
    """Tests for ledger and listing queries."""

    def test_ledger_missing_account(self, account_service):
        with pytest.raises(AccountNotFoundError):
            account_service.get_ledger(999)

    def test_ledger_of_new_account_is_empty(self, account_service, usd_account):
        assert account_service.get_ledger(usd_account.id) == []

    def test_list_accounts_hides_system_accounts(
        self, account_service, ledger_service, usd_account
    ):
        ledger_service.create_deposit(usd_account.id, "5.00", "USD")

        users = account_service.list_accounts()
        everyone = account_service.list_accounts(include_system=True)

        assert [a.id for a in users] == [usd_account.id]
        assert len(everyone) == 2
        assert any(a.is_system for a in everyone)

    def test_get_system_account(self, account_service, ledger_service, usd_account):
        assert account_service.get_system_account("USD") is None

        ledger_service.create_deposit(usd_account.id, "5.00", "USD")
        system = account_service.get_system_account("usd")

        assert system.account.is_system
        assert system.balance == Decimal("-5.00")
