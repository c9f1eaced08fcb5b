import pytest
from unittest.mock import AsyncMock, MagicMock

from src.domain.account import AccountRole
from src.domain.system_settings import SystemSettings
from tests.unit.factories import make_account


@pytest.fixture
def mock_uow():
    """Mock unit of work; recorded change events are kept in uow.recorded"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock()
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    uow.recorded = []
    uow.record = MagicMock(side_effect=uow.recorded.append)
    return uow


@pytest.fixture
def mock_account_repo():
    return MagicMock()


@pytest.fixture
def mock_transaction_repo():
    repo = MagicMock()
    repo.create = AsyncMock(side_effect=lambda transaction: transaction)
    repo.get_by_idempotency_key = AsyncMock(return_value=None)
    return repo


@pytest.fixture
def mock_notification_repo():
    repo = MagicMock()
    repo.create = AsyncMock(side_effect=lambda notification: notification)
    repo.create_many = AsyncMock(side_effect=lambda notifications: notifications)
    return repo


@pytest.fixture
def settings():
    return SystemSettings(
        cost_per_call=5,
        referral_bonus=60,
        welcome_bonus=100,
        min_transfer_amount=10,
        max_transfer_amount=10000,
    )


@pytest.fixture
def user_account():
    return make_account()


@pytest.fixture
def admin_account():
    return make_account(
        account_id="admin_1", email="admin@example.com", balance=0, role=AccountRole.ADMIN
    )
