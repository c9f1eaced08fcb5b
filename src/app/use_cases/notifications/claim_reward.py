"""ClaimReward Use Case

Turns a pending coin reward into a balance credit, exactly once.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.account_repository import AccountRepository
from src.app.repositories.coin_transaction_repository import CoinTransactionRepository
from src.app.repositories.notification_repository import NotificationRepository
from src.domain.change_event import ChangeAction, ChangeEvent
from src.app.use_cases.guards import load_active_account
from src.app.use_cases.ledger.posting import LedgerPoster
from .ownership import load_owned_notification
from .dtos import ClaimResponseDTO

logger = logging.getLogger(__name__)


def already_claimed(notification_id: str) -> Error:
    return Error(
        code="ALREADY_CLAIMED",
        message="This reward has already been claimed",
        reason=f"notification_id={notification_id}",
    )


class ClaimReward:
    """
    Use Case: Claim a coin reward

    Business Rules:
    1. Only the owner can claim, and the owner must be active
    2. Only coin_reward notifications with amount > 0 are claimable
    3. claimed goes False -> True at most once: the flag is flipped by a
       conditional update and only the caller that flipped it credits
    4. The claim flag and the credit transaction commit together

    Flow:
    1. Load claimer and notification
    2. Check claimability
    3. Conditional update claimed = True WHERE claimed = False
    4. Credit amount with the notification's credit_type
    5. Commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        account_repo: AccountRepository,
        transaction_repo: CoinTransactionRepository,
        notification_repo: NotificationRepository,
    ):
        self.uow = uow
        self.account_repo = account_repo
        self.transaction_repo = transaction_repo
        self.notification_repo = notification_repo
        self.poster = LedgerPoster(uow, account_repo, transaction_repo)

    async def execute(self, account_id: str, notification_id: str) -> Result[ClaimResponseDTO]:
        try:
            # Step 1: Claimer and notification
            loaded = await load_active_account(self.account_repo, account_id)
            if loaded.is_err():
                return loaded

            owned = await load_owned_notification(self.notification_repo, notification_id, account_id)
            if owned.is_err():
                return owned
            notification = owned.value

            # Step 2: Claimability
            if not notification.is_reward() or notification.amount <= 0:
                return Return.err(
                    Error(
                        code="NOT_A_REWARD_NOTIFICATION",
                        message="This notification has no reward to claim",
                        reason=f"type={notification.notification_type.value}, amount={notification.amount}",
                    )
                )
            if notification.claimed:
                return Return.err(already_claimed(notification_id))

            # Step 3: Win the claim
            won = await self.notification_repo.mark_claimed(notification_id)
            if not won:
                await self.uow.rollback()
                logger.warning(f"Lost claim race on notification {notification_id}")
                return Return.err(already_claimed(notification_id))

            # Step 4: Credit
            posted = await self.poster.credit(
                account_id,
                notification.amount,
                notification.credit_type,
                description=notification.title,
                reference_type="notification",
                reference_id=notification.id,
            )
            if posted.is_err():
                await self.uow.rollback()
                return posted

            self.uow.record(ChangeEvent.notification_changed(notification, ChangeAction.UPDATED))

            # Step 5: Commit
            await self.uow.commit()

            logger.info(
                f"Account {account_id} claimed {notification.amount} coins "
                f"from notification {notification_id}"
            )
            return Return.ok(
                ClaimResponseDTO(
                    notification_id=notification.id,
                    transaction_id=posted.value.id,
                    amount=notification.amount,
                    balance_after=posted.value.balance_after,
                    claimed_at=notification.claimed_at,
                )
            )

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="CLAIM_FAILED",
                    message="Failed to claim reward",
                    reason=str(e),
                )
            )
