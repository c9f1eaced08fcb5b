"""Data Transfer Objects for Ledger Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field

from src.domain.coin_transaction import CoinTransaction, TransactionType


class AdjustDirection(str, Enum):
    CREDIT = "credit"
    DEDUCT = "deduct"


class CreditCommandDTO(BaseModel):
    """
    Command DTO for crediting coins

    Used as input to CreditCoins use case.
    """

    account_id: str = Field(..., description="Account to credit")

    amount: int = Field(..., gt=0, description="Coins to add (must be > 0)")

    transaction_type: TransactionType = Field(
        ...,
        description="Credit transaction type (purchase, signup_bonus, referral, ...)"
    )

    description: str = Field(default="", description="Human readable description")

    counterparty: Optional[str] = Field(default=None, description="Other side of the event")

    reference_type: Optional[str] = Field(
        default=None,
        description="Type of reference (e.g., 'purchase', 'notification')"
    )

    reference_id: Optional[str] = Field(default=None, description="ID of referenced entity")

    idempotency_key: Optional[str] = Field(
        default=None,
        description="Optional key; a repeated key returns the first transaction"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "account_id": "0b6d7f3e-5c1a-4e7b-9a57-1f2d3c4b5a69",
                "amount": 2500,
                "transaction_type": "purchase",
                "description": "Pro package",
                "reference_type": "purchase",
                "reference_id": "order_981"
            }
        }


class DebitCommandDTO(BaseModel):
    """
    Command DTO for debiting coins

    Used as input to DebitCoins use case.
    """

    account_id: str = Field(..., description="Account to debit")

    amount: int = Field(..., gt=0, description="Coins to remove (must be > 0)")

    transaction_type: TransactionType = Field(
        ...,
        description="Debit transaction type (usage, admin_deduct, transfer_sent)"
    )

    description: str = Field(default="", description="Human readable description")

    counterparty: Optional[str] = Field(default=None)
    reference_type: Optional[str] = Field(default=None)
    reference_id: Optional[str] = Field(default=None)
    idempotency_key: Optional[str] = Field(default=None)


class TransferCommandDTO(BaseModel):
    """Command DTO for a user-to-user transfer"""

    sender_id: str = Field(..., description="Sending account (the caller)")
    recipient_email: str = Field(..., description="Email of the receiving account")
    amount: int = Field(..., gt=0, description="Coins to transfer (must be > 0)")


class AdminAdjustCommandDTO(BaseModel):
    """
    Command DTO for an admin balance adjustment

    direction=deduct is applied immediately; direction=credit is delivered
    as a claimable coin reward.
    """

    admin_id: str = Field(..., description="Admin performing the adjustment")
    account_id: str = Field(..., description="Target account")
    amount: int = Field(..., gt=0, description="Coins (must be > 0)")
    direction: AdjustDirection = Field(..., description="credit or deduct")
    reason: Optional[str] = Field(default=None, description="Shown to the user")


class ChargeApiCallCommandDTO(BaseModel):
    """
    Command DTO for the API gateway charge

    Used as input to ChargeApiCall use case, once per served third-party call.
    """

    api_key: str = Field(..., description="API key presented by the caller")
    endpoint: str = Field(..., description="Endpoint name being billed")
    idempotency_key: Optional[str] = Field(
        default=None,
        description="Gateway request ID; retries with the same key are not charged twice"
    )


class CoinTransactionResponseDTO(BaseModel):
    """
    Response DTO for balance-changing operations

    Returned by CreditCoins, DebitCoins, ChargeApiCall, etc.
    """

    transaction_id: str = Field(..., description="Transaction ID")
    account_id: str = Field(..., description="Account the transaction belongs to")
    transaction_type: str = Field(..., description="Type of transaction")
    amount: int = Field(..., description="Signed coin delta")
    balance_before: int = Field(..., description="Balance before transaction")
    balance_after: int = Field(..., description="Balance after transaction")
    description: str = Field(default="", description="Description")
    idempotency_key: Optional[str] = Field(default=None)
    created_at: datetime = Field(..., description="Transaction timestamp")

    @classmethod
    def from_entity(cls, transaction: CoinTransaction) -> "CoinTransactionResponseDTO":
        return cls(
            transaction_id=transaction.id,
            account_id=transaction.account_id,
            transaction_type=transaction.transaction_type.value,
            amount=transaction.amount,
            balance_before=transaction.balance_before,
            balance_after=transaction.balance_after,
            description=transaction.description,
            idempotency_key=transaction.idempotency_key,
            created_at=transaction.created_at,
        )


class TransferResponseDTO(BaseModel):
    """Response DTO for a transfer, seen by the sender"""

    transaction_id: str = Field(..., description="Sender-side transfer_sent transaction")
    recipient_email: str
    amount: int
    balance_after: int = Field(..., description="Sender balance after transfer")
    created_at: datetime


class AdminAdjustResponseDTO(BaseModel):
    account_id: str
    direction: AdjustDirection
    amount: int
    transaction_id: Optional[str] = Field(
        default=None,
        description="admin_deduct transaction (deduct only)"
    )
    notification_id: str = Field(..., description="Notification sent to the user")
    balance_after: int = Field(..., description="Balance after the adjustment")


class BalanceResponseDTO(BaseModel):
    """Response DTO for balance queries"""

    account_id: str = Field(..., description="Account identifier")
    balance: int = Field(..., description="Current coin balance")
    total_calls: int = Field(..., description="Billed API calls so far")
    last_updated: datetime = Field(..., description="Last balance update timestamp")

    class Config:
        json_schema_extra = {
            "example": {
                "account_id": "0b6d7f3e-5c1a-4e7b-9a57-1f2d3c4b5a69",
                "balance": 95,
                "total_calls": 1,
                "last_updated": "2024-01-01T00:00:00Z"
            }
        }


class TransactionDTO(BaseModel):
    """Single transaction in the history list"""

    id: str
    transaction_type: str
    amount: int
    balance_after: int
    description: str
    counterparty: Optional[str] = None
    reference_type: Optional[str] = None
    reference_id: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_entity(cls, transaction: CoinTransaction) -> "TransactionDTO":
        return cls(
            id=transaction.id,
            transaction_type=transaction.transaction_type.value,
            amount=transaction.amount,
            balance_after=transaction.balance_after,
            description=transaction.description,
            counterparty=transaction.counterparty,
            reference_type=transaction.reference_type,
            reference_id=transaction.reference_id,
            created_at=transaction.created_at,
        )


class ListTransactionsResponseDTO(BaseModel):
    """Paginated transaction history, newest first"""

    transactions: List[TransactionDTO]
    total: int
    limit: int
    offset: int


class LedgerDiscrepancyDTO(BaseModel):
    """Account whose balance disagrees with its transaction sum"""

    account_id: str = Field(..., description="Account identifier")
    email: str = Field(..., description="Account email")
    account_balance: int = Field(..., description="Balance stored on the account")
    calculated_balance: int = Field(..., description="Sum of the account's transactions")
    discrepancy: int = Field(..., description="account_balance - calculated_balance")


class ReconciliationResultDTO(BaseModel):
    """Result of a reconciliation run"""

    total_accounts_checked: int = Field(..., description="Number of accounts checked")
    discrepancies_found: int = Field(..., description="Number of discrepancies")
    discrepancies: List[LedgerDiscrepancyDTO] = Field(default_factory=list)
    reconciliation_time: datetime = Field(..., description="When the run started")
    execution_time_ms: int = Field(..., description="Run duration in milliseconds")


class PurchaseCommandDTO(BaseModel):
    """Command DTO for recording a paid coin package"""

    admin_id: str = Field(..., description="Admin recording the purchase")
    account_id: str = Field(..., description="Account that bought the package")
    amount: int = Field(..., gt=0, description="Coins in the package")
    description: str = Field(default="Coin package purchase")
    reference_id: Optional[str] = Field(default=None, description="External order ID")
