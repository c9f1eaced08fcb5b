"""Integration tests for ledger and reward flows on a real database

Every scenario ends with a reconciliation run: balances must always equal
the sum of their transactions.
"""

import pytest
from sqlalchemy import func
from sqlmodel import select

from src.adapter.repositories import SqlAlchemySystemSettingsRepository
from src.app.use_cases.accounts import DeleteAccount, RegenerateApiKey, SetAccountStatus, SetApiKeyPaused
from src.app.use_cases.admin import UpdateSettingsCommandDTO, UpdateSystemSettings
from src.app.use_cases.ledger import (
    AdjustDirection,
    AdminAdjustCoins,
    AdminAdjustCommandDTO,
    ChargeApiCall,
    ChargeApiCallCommandDTO,
    ReconcileLedger,
    TransferCoins,
    TransferCommandDTO,
)
from src.app.use_cases.notifications import (
    BroadcastCommandDTO,
    BroadcastNotification,
    ClaimReward,
    DeleteNotification,
    NotificationPayloadDTO,
)
from src.domain.account import AccountStatus
from src.domain.coin_transaction import CoinTransaction, TransactionType
from src.domain.notification import Notification, NotificationType


async def assert_ledger_balanced(repos):
    account_repo, transaction_repo, _ = repos
    result = await ReconcileLedger(account_repo, transaction_repo).execute()
    assert result.is_ok()
    assert result.value.discrepancies_found == 0, result.value.discrepancies


async def balance_of(repos, account_id):
    account = await repos[0].get_by_id(account_id)
    return account.balance


async def count_rows(db_session, model, account_id):
    stmt = select(func.count()).select_from(model).where(model.account_id == account_id)
    return (await db_session.execute(stmt)).scalar_one()


@pytest.mark.asyncio
class TestSignup:
    async def test_signup_with_referral(self, signup, repos):
        """
        Given: welcome_bonus = 100, referral_bonus = 60 and an existing referrer
        When: A new user signs up with the referrer's code
        Then: Balance 160 from one signup_bonus transaction, one welcome
              notification, and the referrer holds an unclaimed 60-coin reward
        """
        account_repo, transaction_repo, notification_repo = repos
        referrer = await signup("kamal@example.com")

        created = await signup("nimal@example.com", referral_code=referrer.account.referral_code)

        assert created.signup_bonus == 160
        assert await balance_of(repos, created.account.id) == 160

        transactions, total = await transaction_repo.get_by_account_id(created.account.id)
        assert total == 1
        assert transactions[0].transaction_type == TransactionType.SIGNUP_BONUS
        assert transactions[0].amount == 160

        notifications, total = await notification_repo.get_by_account_id(created.account.id)
        assert total == 1
        assert notifications[0].title == "Welcome!"

        rewards, _ = await notification_repo.get_by_account_id(referrer.account.id, rewards_only=True)
        assert len(rewards) == 1
        assert rewards[0].amount == 60
        assert rewards[0].claimed is False
        assert await balance_of(repos, referrer.account.id) == 100

        await assert_ledger_balanced(repos)

    async def test_referrer_claims_reward(self, signup, uow, repos):
        account_repo, transaction_repo, notification_repo = repos
        referrer = await signup("kamal@example.com")
        await signup("nimal@example.com", referral_code=referrer.account.referral_code)
        rewards, _ = await notification_repo.get_by_account_id(referrer.account.id, rewards_only=True)

        result = await ClaimReward(uow, account_repo, transaction_repo, notification_repo).execute(
            referrer.account.id, rewards[0].id
        )

        assert result.is_ok()
        assert await balance_of(repos, referrer.account.id) == 160
        transactions, _ = await transaction_repo.get_by_account_id(referrer.account.id)
        referral = [t for t in transactions if t.transaction_type == TransactionType.REFERRAL]
        assert len(referral) == 1
        assert referral[0].reference_type == "notification"
        assert referral[0].reference_id == rewards[0].id
        await assert_ledger_balanced(repos)


@pytest.mark.asyncio
class TestAdminAdjust:
    async def test_deduct_above_balance_changes_nothing(self, signup, admin, uow, repos, settings, db_session):
        """
        Given: Account with balance 30
        When: Admin deducts 50
        Then: INSUFFICIENT_BALANCE; balance stays 30 and no transaction is added
        """
        settings.welcome_bonus = 30
        user = await signup("nimal@example.com", settings_override=settings)
        account_repo, transaction_repo, notification_repo = repos

        result = await AdminAdjustCoins(uow, account_repo, transaction_repo, notification_repo).execute(
            AdminAdjustCommandDTO(
                admin_id=admin.account.id,
                account_id=user.account.id,
                amount=50,
                direction=AdjustDirection.DEDUCT,
            )
        )

        assert result.is_err()
        assert result.error.code == "INSUFFICIENT_BALANCE"
        assert await balance_of(repos, user.account.id) == 30
        assert await count_rows(db_session, CoinTransaction, user.account.id) == 1
        assert await count_rows(db_session, Notification, user.account.id) == 1
        await assert_ledger_balanced(repos)

    async def test_deduct_then_credit_reward(self, signup, admin, uow, repos):
        user = await signup("nimal@example.com")
        account_repo, transaction_repo, notification_repo = repos
        use_case = AdminAdjustCoins(uow, account_repo, transaction_repo, notification_repo)

        deducted = await use_case.execute(
            AdminAdjustCommandDTO(
                admin_id=admin.account.id,
                account_id=user.account.id,
                amount=40,
                direction=AdjustDirection.DEDUCT,
            )
        )
        credited = await use_case.execute(
            AdminAdjustCommandDTO(
                admin_id=admin.account.id,
                account_id=user.account.id,
                amount=25,
                direction=AdjustDirection.CREDIT,
            )
        )

        assert deducted.is_ok()
        assert deducted.value.balance_after == 60
        assert credited.is_ok()
        assert credited.value.balance_after == 60

        claimed = await ClaimReward(uow, account_repo, transaction_repo, notification_repo).execute(
            user.account.id, credited.value.notification_id
        )
        assert claimed.is_ok()
        assert await balance_of(repos, user.account.id) == 85
        await assert_ledger_balanced(repos)


@pytest.mark.asyncio
class TestTransfer:
    async def test_transfer_moves_coins(self, signup, uow, repos, settings, db_session):
        sender = await signup("nimal@example.com")
        recipient = await signup("kamal@example.com")
        account_repo, transaction_repo, notification_repo = repos

        result = await TransferCoins(uow, account_repo, transaction_repo, notification_repo, settings).execute(
            TransferCommandDTO(sender_id=sender.account.id, recipient_email="KAMAL@example.com", amount=40)
        )

        assert result.is_ok()
        assert await balance_of(repos, sender.account.id) == 60
        assert await balance_of(repos, recipient.account.id) == 140

        received, _ = await notification_repo.get_by_account_id(recipient.account.id)
        assert any(n.notification_type == NotificationType.INFO for n in received)
        await assert_ledger_balanced(repos)

    async def test_rejected_transfer_writes_nothing(self, signup, uow, repos, settings, db_session):
        sender = await signup("nimal@example.com")
        recipient = await signup("kamal@example.com")
        account_repo, transaction_repo, notification_repo = repos

        result = await TransferCoins(uow, account_repo, transaction_repo, notification_repo, settings).execute(
            TransferCommandDTO(sender_id=sender.account.id, recipient_email="kamal@example.com", amount=500)
        )

        assert result.is_err()
        assert result.error.code == "INSUFFICIENT_BALANCE"
        assert await balance_of(repos, sender.account.id) == 100
        assert await balance_of(repos, recipient.account.id) == 100
        assert await count_rows(db_session, CoinTransaction, recipient.account.id) == 1
        assert await count_rows(db_session, Notification, recipient.account.id) == 1


@pytest.mark.asyncio
class TestBroadcastAndClaim:
    async def test_bulk_grant_claimed_by_everyone(self, signup, admin, uow, repos):
        """
        Given: N accounts
        When: Admin broadcasts a 25-coin reward and every account claims it
        Then: The sum of balances grows by N * 25
        """
        users = [await signup(f"user{i}@example.com") for i in range(3)]
        account_repo, transaction_repo, notification_repo = repos
        stats_before = await account_repo.get_stats()

        broadcast = await BroadcastNotification(uow, account_repo, notification_repo).execute(
            BroadcastCommandDTO(
                admin_id=admin.account.id,
                payload=NotificationPayloadDTO(
                    notification_type=NotificationType.COIN_REWARD,
                    title="Festival Bonus",
                    message="Enjoy 25 free coins",
                    amount=25,
                ),
            )
        )
        assert broadcast.is_ok()
        recipients = broadcast.value.recipients
        assert recipients == len(users) + 1

        # Accounts created after the broadcast do not receive it
        late = await signup("late@example.com")
        late_rewards, _ = await notification_repo.get_by_account_id(late.account.id, rewards_only=True)
        assert late_rewards == []

        claim = ClaimReward(uow, account_repo, transaction_repo, notification_repo)
        for account_id in [admin.account.id] + [u.account.id for u in users]:
            rewards, _ = await notification_repo.get_by_account_id(account_id, rewards_only=True)
            assert len(rewards) == 1
            assert rewards[0].broadcast_id == broadcast.value.broadcast_id
            result = await claim.execute(account_id, rewards[0].id)
            assert result.is_ok()

        stats_after = await account_repo.get_stats()
        late_balance = await balance_of(repos, late.account.id)
        assert stats_after.total_coins - late_balance == stats_before.total_coins + recipients * 25
        await assert_ledger_balanced(repos)

    async def test_second_claim_is_rejected(self, signup, admin, uow, repos):
        user = await signup("nimal@example.com")
        account_repo, transaction_repo, notification_repo = repos
        adjusted = await AdminAdjustCoins(uow, account_repo, transaction_repo, notification_repo).execute(
            AdminAdjustCommandDTO(
                admin_id=admin.account.id,
                account_id=user.account.id,
                amount=50,
                direction=AdjustDirection.CREDIT,
            )
        )
        claim = ClaimReward(uow, account_repo, transaction_repo, notification_repo)

        first = await claim.execute(user.account.id, adjusted.value.notification_id)
        second = await claim.execute(user.account.id, adjusted.value.notification_id)

        assert first.is_ok()
        assert second.is_err()
        assert second.error.code == "ALREADY_CLAIMED"
        assert await balance_of(repos, user.account.id) == 150
        await assert_ledger_balanced(repos)

    async def test_deleted_reward_cannot_be_claimed(self, signup, admin, uow, repos):
        user = await signup("nimal@example.com")
        account_repo, transaction_repo, notification_repo = repos
        adjusted = await AdminAdjustCoins(uow, account_repo, transaction_repo, notification_repo).execute(
            AdminAdjustCommandDTO(
                admin_id=admin.account.id,
                account_id=user.account.id,
                amount=50,
                direction=AdjustDirection.CREDIT,
            )
        )
        notification_id = adjusted.value.notification_id

        deleted = await DeleteNotification(uow, account_repo, notification_repo).execute(
            user.account.id, notification_id
        )
        claimed = await ClaimReward(uow, account_repo, transaction_repo, notification_repo).execute(
            user.account.id, notification_id
        )

        assert deleted.is_ok()
        assert claimed.is_err()
        assert claimed.error.code == "NOTIFICATION_NOT_FOUND"
        assert await balance_of(repos, user.account.id) == 100


@pytest.mark.asyncio
class TestGatewayCharge:
    async def test_charge_counts_call(self, signup, uow, repos, settings):
        user = await signup("nimal@example.com")
        account_repo, transaction_repo, _ = repos

        result = await ChargeApiCall(uow, account_repo, transaction_repo, settings).execute(
            ChargeApiCallCommandDTO(api_key=user.account.api_key, endpoint="youtube/search")
        )

        assert result.is_ok()
        account = await account_repo.get_by_id(user.account.id)
        assert account.balance == 95
        assert account.total_calls == 1
        await assert_ledger_balanced(repos)

    async def test_retried_request_is_charged_once(self, signup, uow, repos, settings):
        user = await signup("nimal@example.com")
        account_repo, transaction_repo, _ = repos
        use_case = ChargeApiCall(uow, account_repo, transaction_repo, settings)
        command = ChargeApiCallCommandDTO(
            api_key=user.account.api_key, endpoint="youtube/search", idempotency_key="gw_req_1"
        )

        first = await use_case.execute(command)
        second = await use_case.execute(command)

        assert first.value.transaction_id == second.value.transaction_id
        account = await account_repo.get_by_id(user.account.id)
        assert account.balance == 95
        assert account.total_calls == 1

    async def test_paused_key_and_suspended_account_write_nothing(
        self, signup, admin, uow, repos, settings, db_session
    ):
        """
        Given: One account with a paused key, one suspended account
        When: The gateway charges a call for each
        Then: Both are refused; balances, call counts and transactions are unchanged
        """
        paused = await signup("nimal@example.com")
        suspended = await signup("kamal@example.com")
        account_repo, transaction_repo, notification_repo = repos

        await SetApiKeyPaused(uow, account_repo).execute(paused.account.id, paused.account.id, True)
        await SetAccountStatus(uow, account_repo, notification_repo).execute(
            admin.account.id, suspended.account.id, AccountStatus.SUSPENDED
        )
        use_case = ChargeApiCall(uow, account_repo, transaction_repo, settings)

        paused_result = await use_case.execute(
            ChargeApiCallCommandDTO(api_key=paused.account.api_key, endpoint="youtube/search")
        )
        suspended_result = await use_case.execute(
            ChargeApiCallCommandDTO(api_key=suspended.account.api_key, endpoint="youtube/search")
        )

        assert paused_result.error.code == "API_KEY_PAUSED"
        assert suspended_result.error.code == "ACCOUNT_SUSPENDED"
        for created in (paused, suspended):
            account = await account_repo.get_by_id(created.account.id)
            assert account.balance == 100
            assert account.total_calls == 0
            assert await count_rows(db_session, CoinTransaction, created.account.id) == 1

    async def test_regenerated_key_replaces_old_key(self, signup, uow, repos, settings):
        user = await signup("nimal@example.com")
        account_repo, transaction_repo, _ = repos
        old_key = user.account.api_key

        regenerated = await RegenerateApiKey(uow, account_repo, "kx_live_").execute(user.account.id)
        use_case = ChargeApiCall(uow, account_repo, transaction_repo, settings)

        with_old = await use_case.execute(ChargeApiCallCommandDTO(api_key=old_key, endpoint="maps/search"))
        with_new = await use_case.execute(
            ChargeApiCallCommandDTO(api_key=regenerated.value.api_key, endpoint="maps/search")
        )

        assert with_old.error.code == "INVALID_API_KEY"
        assert with_new.is_ok()


@pytest.mark.asyncio
class TestDeleteAccount:
    async def test_delete_removes_history(self, signup, admin, uow, repos, db_session):
        user = await signup("nimal@example.com")
        account_repo, transaction_repo, notification_repo = repos

        result = await DeleteAccount(uow, account_repo, transaction_repo, notification_repo).execute(
            admin.account.id, user.account.id
        )

        assert result.is_ok()
        assert await account_repo.get_by_id(user.account.id) is None
        assert await count_rows(db_session, CoinTransaction, user.account.id) == 0
        assert await count_rows(db_session, Notification, user.account.id) == 0
        await assert_ledger_balanced(repos)


@pytest.mark.asyncio
class TestSystemSettings:
    async def test_updated_cost_applies_to_next_charge(self, signup, admin, uow, repos, db_session, settings):
        user = await signup("nimal@example.com")
        account_repo, transaction_repo, _ = repos
        settings_repo = SqlAlchemySystemSettingsRepository(db_session)

        updated = await UpdateSystemSettings(uow, account_repo, settings_repo, settings).execute(
            UpdateSettingsCommandDTO(admin_id=admin.account.id, cost_per_call=8)
        )
        assert updated.is_ok()

        stored = await settings_repo.get()
        result = await ChargeApiCall(uow, account_repo, transaction_repo, stored).execute(
            ChargeApiCallCommandDTO(api_key=user.account.api_key, endpoint="youtube/search")
        )

        assert result.value.amount == -8
        assert stored.welcome_bonus == settings.welcome_bonus
