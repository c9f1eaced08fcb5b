"""Ledger use cases"""
from .posting import LedgerPoster
from .credit_coins import CreditCoins
from .debit_coins import DebitCoins
from .transfer_coins import TransferCoins
from .admin_adjust_coins import AdminAdjustCoins
from .record_purchase import RecordPurchase
from .charge_api_call import ChargeApiCall
from .get_balance import GetBalance
from .list_transactions import ListTransactions
from .reconcile_ledger import ReconcileLedger
from .dtos import (
    AdjustDirection,
    CreditCommandDTO,
    DebitCommandDTO,
    TransferCommandDTO,
    AdminAdjustCommandDTO,
    PurchaseCommandDTO,
    ChargeApiCallCommandDTO,
    CoinTransactionResponseDTO,
    TransferResponseDTO,
    AdminAdjustResponseDTO,
    BalanceResponseDTO,
    TransactionDTO,
    ListTransactionsResponseDTO,
    LedgerDiscrepancyDTO,
    ReconciliationResultDTO,
)

__all__ = [
    "LedgerPoster",
    "CreditCoins",
    "DebitCoins",
    "TransferCoins",
    "AdminAdjustCoins",
    "RecordPurchase",
    "ChargeApiCall",
    "GetBalance",
    "ListTransactions",
    "ReconcileLedger",
    "AdjustDirection",
    "CreditCommandDTO",
    "DebitCommandDTO",
    "TransferCommandDTO",
    "AdminAdjustCommandDTO",
    "PurchaseCommandDTO",
    "ChargeApiCallCommandDTO",
    "CoinTransactionResponseDTO",
    "TransferResponseDTO",
    "AdminAdjustResponseDTO",
    "BalanceResponseDTO",
    "TransactionDTO",
    "ListTransactionsResponseDTO",
    "LedgerDiscrepancyDTO",
    "ReconciliationResultDTO",
]
