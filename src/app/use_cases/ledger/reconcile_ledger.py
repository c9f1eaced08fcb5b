"""ReconcileLedger Use Case

Checks every account balance against the sum of its transactions.
"""

import logging
import time
from datetime import datetime
from typing import List
from libs.result import Result, Return, Error
from src.app.repositories.account_repository import AccountRepository
from src.app.repositories.coin_transaction_repository import CoinTransactionRepository
from .dtos import LedgerDiscrepancyDTO, ReconciliationResultDTO

logger = logging.getLogger(__name__)


class ReconcileLedger:
    """
    Use Case: Reconcile account balances against the transaction log

    Business Rules:
    1. For each account, balance must equal sum(transaction.amount)
    2. An account with no transactions sums to 0
    3. Read-only: mismatches are reported, never repaired
    """

    def __init__(
        self,
        account_repo: AccountRepository,
        transaction_repo: CoinTransactionRepository,
    ):
        self.account_repo = account_repo
        self.transaction_repo = transaction_repo

    async def execute(self) -> Result[ReconciliationResultDTO]:
        started = time.monotonic()
        reconciliation_time = datetime.utcnow()

        try:
            # Step 1: Load balances and per-account sums in two queries
            accounts = await self.account_repo.get_all()
            sums = await self.transaction_repo.get_transaction_sums() if accounts else {}

            # Step 2: Compare
            discrepancies: List[LedgerDiscrepancyDTO] = [
                LedgerDiscrepancyDTO(
                    account_id=account.id,
                    email=account.email,
                    account_balance=account.balance,
                    calculated_balance=sums.get(account.id, 0),
                    discrepancy=account.balance - sums.get(account.id, 0),
                )
                for account in accounts
                if account.balance != sums.get(account.id, 0)
            ]

            for item in discrepancies:
                logger.warning(
                    f"Account {item.account_id} balance {item.account_balance} "
                    f"!= transaction sum {item.calculated_balance}"
                )

            # Step 3: Build report
            return Return.ok(
                ReconciliationResultDTO(
                    total_accounts_checked=len(accounts),
                    discrepancies_found=len(discrepancies),
                    discrepancies=discrepancies,
                    reconciliation_time=reconciliation_time,
                    execution_time_ms=int((time.monotonic() - started) * 1000),
                )
            )

        except Exception as e:
            logger.error(f"Ledger reconciliation failed: {e}")
            return Return.err(
                Error(
                    code="RECONCILIATION_FAILED",
                    message="Failed to reconcile coin ledger",
                    reason=str(e),
                )
            )
