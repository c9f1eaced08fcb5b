"""Unit tests for Account domain entity"""

from src.domain.account import Account, AccountRole, AccountStatus
from tests.unit.factories import make_account


class TestAccountCreation:
    """Test Account entity creation"""

    def test_create_account_with_defaults(self):
        """New accounts are active users with zero balance and no calls"""
        # Arrange & Act
        account = Account(
            email="nimal@example.com",
            api_key="kx_live_abc",
            referral_code="ABCD1234",
        )

        # Assert
        assert account.id
        assert account.balance == 0
        assert account.total_calls == 0
        assert account.status == AccountStatus.ACTIVE
        assert account.role == AccountRole.USER
        assert account.api_key_paused is False
        assert account.referred_by is None
        assert account.display_name == ""

    def test_generated_ids_are_unique(self):
        first = Account(email="a@example.com", api_key="k1", referral_code="R1")
        second = Account(email="b@example.com", api_key="k2", referral_code="R2")

        assert first.id != second.id


class TestAccountState:
    def test_is_active(self):
        assert make_account(status=AccountStatus.ACTIVE).is_active() is True
        assert make_account(status=AccountStatus.SUSPENDED).is_active() is False

    def test_is_admin(self):
        assert make_account(role=AccountRole.ADMIN).is_admin() is True
        assert make_account(role=AccountRole.USER).is_admin() is False

    def test_table_has_non_negative_constraints(self):
        constraint_names = {c.name for c in Account.__table__.constraints}

        assert "account_balance_non_negative" in constraint_names
        assert "account_total_calls_non_negative" in constraint_names
