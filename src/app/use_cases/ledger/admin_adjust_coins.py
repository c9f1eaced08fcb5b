"""AdminAdjustCoins Use Case

Admin balance adjustment. Deductions are applied at once; credits are
delivered as a coin reward the user has to claim.
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
from src.app.use_cases.guards import load_admin, account_not_found
from .dtos import AdminAdjustCommandDTO, AdminAdjustResponseDTO, AdjustDirection
from .posting import LedgerPoster

logger = logging.getLogger(__name__)


class AdminAdjustCoins:
    """
    Use Case: Admin credit or deduct

    Business Rules:
    1. Caller must be an active admin
    2. deduct: guarded debit (admin_deduct) plus a warning notification;
       INSUFFICIENT_BALANCE writes nothing
    3. credit: no balance change now; a claimable coin_reward is delivered
       and the admin_credit transaction is written when it is claimed
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

    async def execute(self, command: AdminAdjustCommandDTO) -> Result[AdminAdjustResponseDTO]:
        try:
            # Step 1: Authorize
            admin = await load_admin(self.account_repo, command.admin_id)
            if admin.is_err():
                return admin

            # Step 2: Target account
            account = await self.account_repo.get_by_id(command.account_id, for_update=True)
            if not account:
                return Return.err(account_not_found(command.account_id))

            transaction_id = None
            reason = command.reason or "Balance adjustment by admin"

            if command.direction == AdjustDirection.DEDUCT:
                # Step 3a: Immediate guarded debit
                posted = await self.poster.debit(
                    account.id,
                    command.amount,
                    TransactionType.ADMIN_DEDUCT,
                    description=reason,
                    reference_type="admin_adjustment",
                    reference_id=command.admin_id,
                )
                if posted.is_err():
                    await self.uow.rollback()
                    return posted
                transaction_id = posted.value.id
                balance_after = posted.value.balance_after

                notification = Notification(
                    account_id=account.id,
                    notification_type=NotificationType.WARNING,
                    title="Coins Deducted",
                    message=f"{command.amount} coins were deducted from your balance. Reason: {reason}",
                    created_by=command.admin_id,
                )
            else:
                # Step 3b: Claimable reward, balance untouched
                balance_after = account.balance
                notification = Notification(
                    account_id=account.id,
                    notification_type=NotificationType.COIN_REWARD,
                    title="Coin Reward from Admin",
                    message=f"You have received {command.amount} coins from admin. {reason}",
                    amount=command.amount,
                    credit_type=TransactionType.ADMIN_CREDIT,
                    created_by=command.admin_id,
                )

            # Step 4: Notify
            created = await self.notification_repo.create(notification)
            self.uow.record(ChangeEvent.notification_changed(created, ChangeAction.CREATED))

            # Step 5: Commit
            await self.uow.commit()

            logger.info(
                f"Admin {command.admin_id} {command.direction.value} {command.amount} coins "
                f"for account {account.id}"
            )
            return Return.ok(
                AdminAdjustResponseDTO(
                    account_id=account.id,
                    direction=command.direction,
                    amount=command.amount,
                    transaction_id=transaction_id,
                    notification_id=created.id,
                    balance_after=balance_after,
                )
            )

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="ADMIN_ADJUST_FAILED",
                    message="Failed to adjust balance",
                    reason=str(e),
                )
            )
