"""Unit tests for the notification inbox use cases

MarkNotificationRead, MarkAllNotificationsRead, DeleteNotification and
ListNotifications.
"""

import logging

import pytest
from unittest.mock import AsyncMock

from src.app.use_cases.notifications import (
    DeleteAllNotifications,
    DeleteNotification,
    ListNotifications,
    MarkAllNotificationsRead,
    MarkNotificationRead,
)
from src.domain.change_event import ChangeAction
from tests.unit.factories import make_account, make_reward


@pytest.fixture
def owner(mock_account_repo):
    mock_account_repo.get_by_id = AsyncMock(return_value=make_account())
    return mock_account_repo


@pytest.mark.asyncio
class TestMarkRead:
    async def test_mark_read(self, owner, mock_uow, mock_notification_repo):
        mock_notification_repo.get_by_id = AsyncMock(return_value=make_reward())
        mock_notification_repo.mark_read = AsyncMock()
        use_case = MarkNotificationRead(mock_uow, owner, mock_notification_repo)

        result = await use_case.execute("acc_1", "notif_1")

        assert result.is_ok()
        mock_notification_repo.mark_read.assert_called_once_with("notif_1")
        mock_uow.commit.assert_called_once()

    async def test_already_read_is_a_no_op(self, owner, mock_uow, mock_notification_repo):
        mock_notification_repo.get_by_id = AsyncMock(return_value=make_reward(read=True))
        mock_notification_repo.mark_read = AsyncMock()
        use_case = MarkNotificationRead(mock_uow, owner, mock_notification_repo)

        result = await use_case.execute("acc_1", "notif_1")

        assert result.is_ok()
        assert result.value.read is True
        mock_notification_repo.mark_read.assert_not_called()
        mock_uow.commit.assert_not_called()

    async def test_reading_does_not_claim(self, owner, mock_uow, mock_notification_repo):
        mock_notification_repo.get_by_id = AsyncMock(return_value=make_reward())
        mock_notification_repo.mark_read = AsyncMock()
        mock_notification_repo.mark_claimed = AsyncMock()
        use_case = MarkNotificationRead(mock_uow, owner, mock_notification_repo)

        result = await use_case.execute("acc_1", "notif_1")

        assert result.value.claimed is False
        mock_notification_repo.mark_claimed.assert_not_called()

    async def test_other_accounts_notification(self, owner, mock_uow, mock_notification_repo):
        mock_notification_repo.get_by_id = AsyncMock(return_value=make_reward(account_id="acc_2"))
        use_case = MarkNotificationRead(mock_uow, owner, mock_notification_repo)

        result = await use_case.execute("acc_1", "notif_1")

        assert result.is_err()
        assert result.error.code == "NOTIFICATION_NOT_FOUND"

    async def test_mark_all_read(self, owner, mock_uow, mock_notification_repo):
        mock_notification_repo.mark_all_read = AsyncMock(return_value=["notif_1", "notif_2"])
        use_case = MarkAllNotificationsRead(mock_uow, owner, mock_notification_repo)

        result = await use_case.execute("acc_1")

        assert result.is_ok()
        assert result.value.updated == 2
        assert [e.entity_id for e in mock_uow.recorded] == ["notif_1", "notif_2"]
        mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
class TestDeleteNotification:
    async def test_delete_unclaimed_reward_cancels_it(self, owner, mock_uow, mock_notification_repo):
        """
        Given: Unclaimed reward
        When: The owner deletes it
        Then: It is removed, no balance change
        """
        mock_notification_repo.get_by_id = AsyncMock(return_value=make_reward())
        mock_notification_repo.delete = AsyncMock()
        owner.apply_balance_delta = AsyncMock()
        use_case = DeleteNotification(mock_uow, owner, mock_notification_repo)

        result = await use_case.execute("acc_1", "notif_1")

        assert result.is_ok()
        mock_notification_repo.delete.assert_called_once_with("notif_1")
        owner.apply_balance_delta.assert_not_called()
        assert mock_uow.recorded[0].action == ChangeAction.DELETED
        mock_uow.commit.assert_called_once()

    async def test_cannot_delete_others_notification(self, owner, mock_uow, mock_notification_repo):
        mock_notification_repo.get_by_id = AsyncMock(return_value=make_reward(account_id="acc_2"))
        mock_notification_repo.delete = AsyncMock()
        use_case = DeleteNotification(mock_uow, owner, mock_notification_repo)

        result = await use_case.execute("acc_1", "notif_1")

        assert result.is_err()
        assert result.error.code == "NOTIFICATION_NOT_FOUND"
        mock_notification_repo.delete.assert_not_called()


@pytest.mark.asyncio
class TestDeleteAllNotifications:
    async def test_clears_inbox_and_reports_cancelled_rewards(
        self, owner, mock_uow, mock_notification_repo, caplog
    ):
        """
        Given: An inbox of three notifications, two of them unclaimed rewards
        When: The owner deletes everything
        Then: One commit, one DELETED event per row, and the lost coins are logged
        """
        mock_notification_repo.get_unclaimed_rewards = AsyncMock(
            return_value=[make_reward(amount=50), make_reward(notification_id="notif_2", amount=25)]
        )
        mock_notification_repo.delete_all = AsyncMock(return_value=["notif_1", "notif_2", "notif_3"])
        owner.apply_balance_delta = AsyncMock()
        use_case = DeleteAllNotifications(mock_uow, owner, mock_notification_repo)

        with caplog.at_level(logging.WARNING):
            result = await use_case.execute("acc_1")

        assert result.is_ok()
        assert result.value.deleted == 3
        assert result.value.cancelled_rewards == 2
        assert result.value.cancelled_coins == 75
        mock_notification_repo.delete_all.assert_called_once_with("acc_1")
        owner.apply_balance_delta.assert_not_called()
        assert [e.entity_id for e in mock_uow.recorded] == ["notif_1", "notif_2", "notif_3"]
        assert all(e.action == ChangeAction.DELETED for e in mock_uow.recorded)
        mock_uow.commit.assert_called_once()
        assert "2 unclaimed rewards of 75 coins" in caplog.text

    async def test_empty_inbox(self, owner, mock_uow, mock_notification_repo):
        mock_notification_repo.get_unclaimed_rewards = AsyncMock(return_value=[])
        mock_notification_repo.delete_all = AsyncMock(return_value=[])
        use_case = DeleteAllNotifications(mock_uow, owner, mock_notification_repo)

        result = await use_case.execute("acc_1")

        assert result.is_ok()
        assert result.value.deleted == 0
        assert result.value.cancelled_coins == 0
        assert mock_uow.recorded == []

    async def test_unknown_caller_deletes_nothing(self, mock_account_repo, mock_uow, mock_notification_repo):
        mock_account_repo.get_by_id = AsyncMock(return_value=None)
        mock_notification_repo.delete_all = AsyncMock()
        use_case = DeleteAllNotifications(mock_uow, mock_account_repo, mock_notification_repo)

        result = await use_case.execute("missing")

        assert result.is_err()
        assert result.error.code == "UNAUTHORIZED"
        mock_notification_repo.delete_all.assert_not_called()

    async def test_failure_rolls_back(self, owner, mock_uow, mock_notification_repo):
        mock_notification_repo.get_unclaimed_rewards = AsyncMock(return_value=[])
        mock_notification_repo.delete_all = AsyncMock(side_effect=Exception("database is locked"))
        use_case = DeleteAllNotifications(mock_uow, owner, mock_notification_repo)

        result = await use_case.execute("acc_1")

        assert result.is_err()
        assert result.error.code == "DELETE_NOTIFICATIONS_FAILED"
        mock_uow.rollback.assert_called_once()
        mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
class TestListNotifications:
    async def test_list_with_unread_count(self, mock_notification_repo):
        mock_notification_repo.get_by_account_id = AsyncMock(
            return_value=([make_reward(), make_reward(notification_id="notif_2", read=True)], 2)
        )
        mock_notification_repo.count_unread = AsyncMock(return_value=1)

        result = await ListNotifications(mock_notification_repo).execute("acc_1", rewards_only=True)

        assert result.is_ok()
        assert result.value.total == 2
        assert result.value.unread_count == 1
        assert result.value.notifications[0].notification_type == "coin_reward"
        mock_notification_repo.get_by_account_id.assert_called_once_with(
            "acc_1", limit=50, offset=0, unread_only=False, rewards_only=True
        )
