"""CreateAccount Use Case

Signup: new account, signup bonus, welcome notification and, when a known
referral code is given, a claimable referral reward for the referrer.
"""

import logging
from typing import Optional
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.credentials import generate_api_key, generate_referral_code
from src.app.repositories.account_repository import AccountRepository
from src.app.repositories.coin_transaction_repository import CoinTransactionRepository
from src.app.repositories.notification_repository import NotificationRepository
from src.domain.account import Account, AccountStatus
from src.domain.change_event import ChangeAction, ChangeEvent
from src.domain.coin_transaction import TransactionType
from src.domain.notification import Notification, NotificationType
from src.domain.system_settings import SystemSettings
from src.app.use_cases.ledger.posting import LedgerPoster
from .dtos import AccountDTO, CreateAccountCommandDTO, CreateAccountResponseDTO

logger = logging.getLogger(__name__)


class CreateAccount:
    """
    Use Case: Create account

    Business Rules:
    1. Email must be unused (EMAIL_ALREADY_EXISTS)
    2. New accounts are active with total_calls = 0 and a fresh API key
    3. Signup bonus = welcome_bonus, plus referral_bonus when the referral
       code matches an existing account; recorded as ONE signup_bonus
       transaction so balance always equals the transaction sum
    4. A welcome announcement is delivered
    5. The referrer gets a claimable coin_reward (credit_type referral)
    6. Everything above commits together

    Flow:
    1. Check email
    2. Resolve referrer
    3. Create account with zero balance
    4. Post signup bonus
    5. Deliver welcome and referral notifications
    6. Commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        account_repo: AccountRepository,
        transaction_repo: CoinTransactionRepository,
        notification_repo: NotificationRepository,
        settings: SystemSettings,
        api_key_prefix: str,
    ):
        self.uow = uow
        self.account_repo = account_repo
        self.transaction_repo = transaction_repo
        self.notification_repo = notification_repo
        self.settings = settings
        self.api_key_prefix = api_key_prefix
        self.poster = LedgerPoster(uow, account_repo, transaction_repo)

    async def execute(self, command: CreateAccountCommandDTO) -> Result[CreateAccountResponseDTO]:
        try:
            email = command.email.strip().lower()

            # Step 1: Email must be free
            if await self.account_repo.get_by_email(email):
                return Return.err(
                    Error(
                        code="EMAIL_ALREADY_EXISTS",
                        message=f"An account with email {email} already exists",
                    )
                )

            # Step 2: Referrer (unknown codes are ignored)
            referrer: Optional[Account] = None
            if command.referral_code:
                referrer = await self.account_repo.get_by_referral_code(command.referral_code)
                if not referrer:
                    logger.info(f"Ignoring unknown referral code {command.referral_code}")

            # Step 3: Account row, balance starts at zero
            account = await self.account_repo.create(
                Account(
                    email=email,
                    display_name=command.display_name,
                    api_key=generate_api_key(self.api_key_prefix),
                    referral_code=generate_referral_code(),
                    referred_by=referrer.id if referrer else None,
                    status=AccountStatus.ACTIVE,
                    role=command.role,
                )
            )

            # Step 4: Signup bonus
            bonus = self.settings.welcome_bonus
            if referrer:
                bonus += self.settings.referral_bonus

            signup_transaction_id = None
            if bonus > 0:
                posted = await self.poster.credit(
                    account.id,
                    bonus,
                    TransactionType.SIGNUP_BONUS,
                    description="Welcome bonus" if not referrer else "Welcome bonus with referral",
                    counterparty=referrer.email if referrer else None,
                    reference_type="signup",
                    reference_id=referrer.id if referrer else None,
                )
                if posted.is_err():
                    await self.uow.rollback()
                    return posted
                signup_transaction_id = posted.value.id

            # Step 5: Notifications
            welcome = await self.notification_repo.create(
                Notification(
                    account_id=account.id,
                    notification_type=NotificationType.ANNOUNCEMENT,
                    title="Welcome!",
                    message=f"Your account is ready. {bonus} coins have been added to your balance.",
                )
            )
            self.uow.record(ChangeEvent.notification_changed(welcome, ChangeAction.CREATED))

            if referrer and self.settings.referral_bonus > 0:
                reward = await self.notification_repo.create(
                    Notification(
                        account_id=referrer.id,
                        notification_type=NotificationType.COIN_REWARD,
                        title="Referral Reward",
                        message=(
                            f"{email} signed up with your referral code. "
                            f"Claim your {self.settings.referral_bonus} coins!"
                        ),
                        amount=self.settings.referral_bonus,
                        credit_type=TransactionType.REFERRAL,
                    )
                )
                self.uow.record(ChangeEvent.notification_changed(reward, ChangeAction.CREATED))

            # Step 6: Commit
            await self.uow.commit()

            logger.info(
                f"Created account {account.id} ({email}) with signup bonus {bonus}"
                + (f", referred by {referrer.id}" if referrer else "")
            )
            return Return.ok(
                CreateAccountResponseDTO(
                    account=AccountDTO.from_entity(account),
                    signup_bonus=bonus,
                    signup_transaction_id=signup_transaction_id,
                    welcome_notification_id=welcome.id,
                    referrer_id=referrer.id if referrer else None,
                )
            )

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="CREATE_ACCOUNT_FAILED",
                    message="Failed to create account",
                    reason=str(e),
                )
            )
