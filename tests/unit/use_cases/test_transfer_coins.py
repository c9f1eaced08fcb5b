"""Unit tests for TransferCoins use case

Tests cover:
- Successful transfer debits sender, credits recipient, notifies recipient
- Amount outside the configured range
- Self transfer and unknown recipient
- Insufficient balance writes nothing
- Suspended sender
"""

import pytest
from unittest.mock import AsyncMock

from src.app.use_cases.ledger import TransferCoins, TransferCommandDTO
from src.domain.account import AccountStatus
from src.domain.coin_transaction import TransactionType
from src.domain.notification import NotificationType
from tests.unit.factories import make_account


@pytest.fixture
def sender():
    return make_account(account_id="acc_sender", email="nimal@example.com", balance=200)


@pytest.fixture
def recipient():
    return make_account(account_id="acc_recipient", email="kamal@example.com", balance=10)


@pytest.fixture
def use_case(mock_uow, mock_account_repo, mock_transaction_repo, mock_notification_repo, settings):
    return TransferCoins(
        mock_uow, mock_account_repo, mock_transaction_repo, mock_notification_repo, settings
    )


def wire_accounts(account_repo, *accounts):
    by_id = {account.id: account for account in accounts}
    by_email = {account.email: account for account in accounts}
    account_repo.get_by_id = AsyncMock(side_effect=lambda account_id, **kwargs: by_id.get(account_id))
    account_repo.get_by_email = AsyncMock(side_effect=lambda email: by_email.get(email))


@pytest.mark.asyncio
class TestTransferCoins:
    async def test_transfer_success(
        self,
        use_case,
        sender,
        recipient,
        mock_uow,
        mock_account_repo,
        mock_transaction_repo,
        mock_notification_repo,
    ):
        """
        Given: Sender with 200 coins, recipient with 10 coins
        When: Sender transfers 50 coins
        Then: transfer_sent -50 and transfer_received +50 are posted and committed
        """
        # Arrange
        wire_accounts(mock_account_repo, sender, recipient)
        mock_account_repo.apply_balance_delta = AsyncMock(
            side_effect=lambda account_id, delta, count_call=False: {
                "acc_sender": 150,
                "acc_recipient": 60,
            }[account_id]
        )

        # Act
        result = await use_case.execute(
            TransferCommandDTO(sender_id="acc_sender", recipient_email="Kamal@Example.com", amount=50)
        )

        # Assert
        assert result.is_ok()
        assert result.value.recipient_email == "kamal@example.com"
        assert result.value.amount == 50
        assert result.value.balance_after == 150

        sent, received = [c.args[0] for c in mock_transaction_repo.create.call_args_list]
        assert sent.transaction_type == TransactionType.TRANSFER_SENT
        assert sent.amount == -50
        assert sent.counterparty == "kamal@example.com"
        assert received.transaction_type == TransactionType.TRANSFER_RECEIVED
        assert received.amount == 50
        assert received.balance_before == 10
        assert received.counterparty == "nimal@example.com"
        assert received.reference_id == sent.id

        notification = mock_notification_repo.create.call_args.args[0]
        assert notification.account_id == "acc_recipient"
        assert notification.notification_type == NotificationType.INFO
        mock_uow.commit.assert_called_once()

    async def test_locks_accounts_in_id_order(self, use_case, sender, recipient, mock_account_repo):
        wire_accounts(mock_account_repo, sender, recipient)
        mock_account_repo.apply_balance_delta = AsyncMock(return_value=100)

        await use_case.execute(
            TransferCommandDTO(sender_id="acc_sender", recipient_email="kamal@example.com", amount=50)
        )

        locked = [
            c.args[0]
            for c in mock_account_repo.get_by_id.call_args_list
            if c.kwargs.get("for_update")
        ]
        assert locked == ["acc_recipient", "acc_sender"]

    @pytest.mark.parametrize("amount", [5, 10001])
    async def test_amount_outside_range(
        self, use_case, sender, recipient, mock_account_repo, mock_transaction_repo, amount
    ):
        wire_accounts(mock_account_repo, sender, recipient)

        result = await use_case.execute(
            TransferCommandDTO(sender_id="acc_sender", recipient_email="kamal@example.com", amount=amount)
        )

        assert result.is_err()
        assert result.error.code == "INVALID_AMOUNT"
        mock_transaction_repo.create.assert_not_called()

    async def test_self_transfer(self, use_case, sender, mock_account_repo, mock_transaction_repo):
        wire_accounts(mock_account_repo, sender)

        result = await use_case.execute(
            TransferCommandDTO(sender_id="acc_sender", recipient_email="NIMAL@example.com", amount=50)
        )

        assert result.is_err()
        assert result.error.code == "SELF_TRANSFER"
        mock_transaction_repo.create.assert_not_called()

    async def test_unknown_recipient(self, use_case, sender, mock_account_repo, mock_uow):
        wire_accounts(mock_account_repo, sender)

        result = await use_case.execute(
            TransferCommandDTO(sender_id="acc_sender", recipient_email="nobody@example.com", amount=50)
        )

        assert result.is_err()
        assert result.error.code == "RECIPIENT_NOT_FOUND"
        mock_uow.commit.assert_not_called()

    async def test_insufficient_balance(
        self,
        use_case,
        recipient,
        mock_uow,
        mock_account_repo,
        mock_transaction_repo,
        mock_notification_repo,
    ):
        """
        Given: Sender with 20 coins
        When: Sender transfers 50 coins
        Then: INSUFFICIENT_BALANCE, no transactions, no notification, rolled back
        """
        poor_sender = make_account(account_id="acc_sender", balance=20)
        wire_accounts(mock_account_repo, poor_sender, recipient)
        mock_account_repo.apply_balance_delta = AsyncMock(return_value=None)

        result = await use_case.execute(
            TransferCommandDTO(sender_id="acc_sender", recipient_email="kamal@example.com", amount=50)
        )

        assert result.is_err()
        assert result.error.code == "INSUFFICIENT_BALANCE"
        mock_transaction_repo.create.assert_not_called()
        mock_notification_repo.create.assert_not_called()
        mock_uow.rollback.assert_called_once()
        mock_uow.commit.assert_not_called()

    async def test_suspended_sender(self, use_case, recipient, mock_account_repo):
        suspended = make_account(account_id="acc_sender", status=AccountStatus.SUSPENDED)
        wire_accounts(mock_account_repo, suspended, recipient)

        result = await use_case.execute(
            TransferCommandDTO(sender_id="acc_sender", recipient_email="kamal@example.com", amount=50)
        )

        assert result.is_err()
        assert result.error.code == "ACCOUNT_SUSPENDED"

    async def test_unexpected_error_rolls_back(
        self, use_case, sender, recipient, mock_uow, mock_account_repo
    ):
        wire_accounts(mock_account_repo, sender, recipient)
        mock_account_repo.apply_balance_delta = AsyncMock(side_effect=Exception("connection lost"))

        result = await use_case.execute(
            TransferCommandDTO(sender_id="acc_sender", recipient_email="kamal@example.com", amount=50)
        )

        assert result.is_err()
        assert result.error.code == "TRANSFER_FAILED"
        mock_uow.rollback.assert_called_once()
