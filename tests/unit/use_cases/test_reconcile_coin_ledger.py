"""Unit tests for ReconcileLedger use case

Tests cover:
- Discrepancy detection when balance differs from the transaction sum
- Balanced accounts report nothing
- Empty system
- Error handling
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.ledger import ReconcileLedger
from tests.unit.factories import make_account


@pytest.fixture
def reconcile_use_case(mock_account_repo, mock_transaction_repo):
    """ReconcileLedger use case instance with mocked dependencies"""
    return ReconcileLedger(
        account_repo=mock_account_repo,
        transaction_repo=mock_transaction_repo,
    )


@pytest.mark.asyncio
class TestReconcileLedger:
    async def test_detects_discrepancy_when_balance_differs(
        self, reconcile_use_case, mock_account_repo, mock_transaction_repo
    ):
        """
        Given: Account balance 160 but transactions sum to 100
        When: Reconciliation runs
        Then: One discrepancy of +60 is reported
        """
        # Arrange
        mock_account_repo.get_all = AsyncMock(return_value=[make_account(balance=160)])
        mock_transaction_repo.get_transaction_sums = AsyncMock(return_value={"acc_1": 100})

        # Act
        result = await reconcile_use_case.execute()

        # Assert
        assert result.is_ok()
        response = result.value
        assert response.total_accounts_checked == 1
        assert response.discrepancies_found == 1

        discrepancy = response.discrepancies[0]
        assert discrepancy.account_id == "acc_1"
        assert discrepancy.email == "nimal@example.com"
        assert discrepancy.account_balance == 160
        assert discrepancy.calculated_balance == 100
        assert discrepancy.discrepancy == 60

    async def test_balanced_accounts_have_no_discrepancies(
        self, reconcile_use_case, mock_account_repo, mock_transaction_repo
    ):
        accounts = [
            make_account(account_id="acc_1", balance=100),
            make_account(account_id="acc_2", email="kamal@example.com", balance=0),
        ]
        mock_account_repo.get_all = AsyncMock(return_value=accounts)
        mock_transaction_repo.get_transaction_sums = AsyncMock(return_value={"acc_1": 100})

        result = await reconcile_use_case.execute()

        assert result.is_ok()
        assert result.value.total_accounts_checked == 2
        assert result.value.discrepancies_found == 0
        assert result.value.discrepancies == []

    async def test_empty_system(self, reconcile_use_case, mock_account_repo, mock_transaction_repo):
        mock_account_repo.get_all = AsyncMock(return_value=[])
        mock_transaction_repo.get_transaction_sums = AsyncMock()

        result = await reconcile_use_case.execute()

        assert result.is_ok()
        assert result.value.total_accounts_checked == 0
        mock_transaction_repo.get_transaction_sums.assert_not_called()

    async def test_repository_failure(self, reconcile_use_case, mock_account_repo):
        mock_account_repo.get_all = AsyncMock(side_effect=Exception("Database connection failed"))

        result = await reconcile_use_case.execute()

        assert result.is_err()
        assert result.error.code == "RECONCILIATION_FAILED"
        assert "Database connection failed" in result.error.reason

    async def test_does_not_write(self, mock_transaction_repo):
        account_repo = MagicMock()
        account_repo.get_all = AsyncMock(return_value=[make_account(balance=5)])
        mock_transaction_repo.get_transaction_sums = AsyncMock(return_value={"acc_1": 10})

        await ReconcileLedger(account_repo, mock_transaction_repo).execute()

        account_repo.save.assert_not_called()
        account_repo.apply_balance_delta.assert_not_called()
        mock_transaction_repo.create.assert_not_called()
