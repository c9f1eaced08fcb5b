"""TransferCoins Use Case

Moves coins from the caller to another account identified by email.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.account_repository import AccountRepository
from src.app.repositories.coin_transaction_repository import CoinTransactionRepository
from src.app.repositories.notification_repository import NotificationRepository
from src.domain.change_event import ChangeAction, ChangeEvent
from src.domain.coin_transaction import TransactionType
from src.domain.notification import Notification, NotificationType
from src.domain.system_settings import SystemSettings
from src.app.use_cases.guards import load_active_account
from .dtos import TransferCommandDTO, TransferResponseDTO
from .posting import LedgerPoster

logger = logging.getLogger(__name__)


class TransferCoins:
    """
    Use Case: Transfer coins between two accounts

    Business Rules:
    1. Sender must be active
    2. min_transfer_amount <= amount <= max_transfer_amount
    3. Recipient must exist and differ from the sender
    4. Sender balance >= amount
    5. transfer_sent, transfer_received and the recipient's notification
       are committed together

    Flow:
    1. Load sender, validate amount
    2. Resolve recipient by email
    3. Lock both accounts in id order
    4. Debit sender, credit recipient
    5. Notify recipient
    6. Commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        account_repo: AccountRepository,
        transaction_repo: CoinTransactionRepository,
        notification_repo: NotificationRepository,
        settings: SystemSettings,
    ):
        self.uow = uow
        self.account_repo = account_repo
        self.transaction_repo = transaction_repo
        self.notification_repo = notification_repo
        self.settings = settings
        self.poster = LedgerPoster(uow, account_repo, transaction_repo)

    async def execute(self, command: TransferCommandDTO) -> Result[TransferResponseDTO]:
        try:
            # Step 1: Sender and amount
            loaded = await load_active_account(self.account_repo, command.sender_id)
            if loaded.is_err():
                return loaded
            sender = loaded.value

            if not (
                self.settings.min_transfer_amount
                <= command.amount
                <= self.settings.max_transfer_amount
            ):
                return Return.err(
                    Error(
                        code="INVALID_AMOUNT",
                        message=(
                            f"Transfer amount must be between {self.settings.min_transfer_amount} "
                            f"and {self.settings.max_transfer_amount}"
                        ),
                        reason=f"amount={command.amount}",
                    )
                )

            # Step 2: Recipient
            recipient_email = command.recipient_email.strip().lower()
            if recipient_email == sender.email.lower():
                return Return.err(
                    Error(
                        code="SELF_TRANSFER",
                        message="Cannot transfer to yourself",
                    )
                )

            recipient = await self.account_repo.get_by_email(recipient_email)
            if not recipient:
                return Return.err(
                    Error(
                        code="RECIPIENT_NOT_FOUND",
                        message=f"No account with email {command.recipient_email}",
                    )
                )

            # Step 3: Lock both rows in a fixed order
            for account_id in sorted([sender.id, recipient.id]):
                await self.account_repo.get_by_id(account_id, for_update=True)

            # Step 4: Move the coins
            sent = await self.poster.debit(
                sender.id,
                command.amount,
                TransactionType.TRANSFER_SENT,
                description=f"Transferred {command.amount} coins to {recipient.email}",
                counterparty=recipient.email,
                reference_type="transfer",
            )
            if sent.is_err():
                await self.uow.rollback()
                return sent

            received = await self.poster.credit(
                recipient.id,
                command.amount,
                TransactionType.TRANSFER_RECEIVED,
                description=f"Received {command.amount} coins from {sender.email}",
                counterparty=sender.email,
                reference_type="transfer",
                reference_id=sent.value.id,
            )
            if received.is_err():
                await self.uow.rollback()
                return received

            # Step 5: Tell the recipient
            notification = await self.notification_repo.create(
                Notification(
                    account_id=recipient.id,
                    notification_type=NotificationType.INFO,
                    title="Coins Received",
                    message=f"You received {command.amount} coins from {sender.email}",
                )
            )
            self.uow.record(ChangeEvent.notification_changed(notification, ChangeAction.CREATED))

            # Step 6: Commit
            await self.uow.commit()

            logger.info(
                f"Transferred {command.amount} coins from {sender.id} to {recipient.id}"
            )
            return Return.ok(
                TransferResponseDTO(
                    transaction_id=sent.value.id,
                    recipient_email=recipient.email,
                    amount=command.amount,
                    balance_after=sent.value.balance_after,
                    created_at=sent.value.created_at,
                )
            )

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="TRANSFER_FAILED",
                    message="Failed to transfer coins",
                    reason=str(e),
                )
            )
