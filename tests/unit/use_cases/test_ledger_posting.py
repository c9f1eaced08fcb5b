"""Unit tests for LedgerPoster

Tests cover:
- Credit and debit post a signed transaction with balance snapshots
- Insufficient balance writes nothing
- Unknown account
- Type/direction mismatch and non-positive amounts
"""

import pytest
from unittest.mock import AsyncMock

from src.app.use_cases.ledger.posting import LedgerPoster
from src.domain.change_event import ChangeEntity
from src.domain.coin_transaction import TransactionType
from tests.unit.factories import make_account


@pytest.fixture
def poster(mock_uow, mock_account_repo, mock_transaction_repo):
    return LedgerPoster(mock_uow, mock_account_repo, mock_transaction_repo)


@pytest.mark.asyncio
class TestCredit:
    async def test_credit_posts_positive_transaction(
        self, poster, mock_uow, mock_account_repo, mock_transaction_repo
    ):
        """
        Given: Account with balance 100
        When: 50 coins are credited
        Then: Transaction +50 with snapshots 100 -> 150, events recorded
        """
        # Arrange
        mock_account_repo.apply_balance_delta = AsyncMock(return_value=150)
        mock_account_repo.get_by_id = AsyncMock(return_value=make_account(balance=150))

        # Act
        result = await poster.credit(
            "acc_1", 50, TransactionType.PURCHASE, description="Pro package"
        )

        # Assert
        assert result.is_ok()
        transaction = result.value
        assert transaction.amount == 50
        assert transaction.balance_before == 100
        assert transaction.balance_after == 150
        assert transaction.transaction_type == TransactionType.PURCHASE
        mock_account_repo.apply_balance_delta.assert_called_once_with("acc_1", 50, count_call=False)
        mock_transaction_repo.create.assert_called_once()
        assert [e.entity for e in mock_uow.recorded] == [ChangeEntity.TRANSACTION, ChangeEntity.ACCOUNT]
        mock_uow.commit.assert_not_called()

    async def test_credit_rejects_debit_type(self, poster, mock_account_repo):
        mock_account_repo.apply_balance_delta = AsyncMock()

        result = await poster.credit("acc_1", 50, TransactionType.USAGE)

        assert result.is_err()
        assert result.error.code == "INVALID_TRANSACTION_TYPE"
        mock_account_repo.apply_balance_delta.assert_not_called()

    @pytest.mark.parametrize("amount", [0, -10])
    async def test_credit_rejects_non_positive_amount(self, poster, mock_account_repo, amount):
        mock_account_repo.apply_balance_delta = AsyncMock()

        result = await poster.credit("acc_1", amount, TransactionType.PURCHASE)

        assert result.is_err()
        assert result.error.code == "INVALID_AMOUNT"
        mock_account_repo.apply_balance_delta.assert_not_called()


@pytest.mark.asyncio
class TestDebit:
    async def test_debit_posts_negative_transaction(
        self, poster, mock_account_repo, mock_transaction_repo
    ):
        mock_account_repo.apply_balance_delta = AsyncMock(return_value=95)
        mock_account_repo.get_by_id = AsyncMock(return_value=make_account(balance=95))

        result = await poster.debit(
            "acc_1",
            5,
            TransactionType.USAGE,
            reference_type="api_call",
            reference_id="youtube/search",
            count_call=True,
        )

        assert result.is_ok()
        assert result.value.amount == -5
        assert result.value.balance_before == 100
        assert result.value.balance_after == 95
        mock_account_repo.apply_balance_delta.assert_called_once_with("acc_1", -5, count_call=True)

    async def test_debit_insufficient_balance_writes_nothing(
        self, poster, mock_uow, mock_account_repo, mock_transaction_repo
    ):
        """
        Given: Account with balance 30
        When: 50 coins are debited
        Then: INSUFFICIENT_BALANCE, no transaction, no events
        """
        mock_account_repo.apply_balance_delta = AsyncMock(return_value=None)
        mock_account_repo.get_by_id = AsyncMock(return_value=make_account(balance=30))

        result = await poster.debit("acc_1", 50, TransactionType.ADMIN_DEDUCT)

        assert result.is_err()
        assert result.error.code == "INSUFFICIENT_BALANCE"
        assert "Available: 30" in result.error.message
        mock_transaction_repo.create.assert_not_called()
        assert mock_uow.recorded == []

    async def test_debit_unknown_account(self, poster, mock_account_repo, mock_transaction_repo):
        mock_account_repo.apply_balance_delta = AsyncMock(return_value=None)
        mock_account_repo.get_by_id = AsyncMock(return_value=None)

        result = await poster.debit("missing", 5, TransactionType.USAGE)

        assert result.is_err()
        assert result.error.code == "ACCOUNT_NOT_FOUND"
        mock_transaction_repo.create.assert_not_called()

    async def test_debit_rejects_credit_type(self, poster, mock_account_repo):
        mock_account_repo.apply_balance_delta = AsyncMock()

        result = await poster.debit("acc_1", 5, TransactionType.REFERRAL)

        assert result.is_err()
        assert result.error.code == "INVALID_TRANSACTION_TYPE"
