"""
List Transactions Use Case

Retrieves coin transaction history for an account with pagination.
"""
from libs.result import Result, Return
from src.app.repositories.coin_transaction_repository import CoinTransactionRepository
from .dtos import ListTransactionsResponseDTO, TransactionDTO


class ListTransactions:
    """
    Use case: View coin transactions

    Transactions are ordered by created_at DESC (most recent first).
    """

    def __init__(self, transaction_repo: CoinTransactionRepository):
        self.transaction_repo = transaction_repo

    async def execute(
        self, account_id: str, limit: int = 50, offset: int = 0
    ) -> Result[ListTransactionsResponseDTO]:
        transactions, total = await self.transaction_repo.get_by_account_id(
            account_id=account_id,
            limit=limit,
            offset=offset,
        )

        return Return.ok(
            ListTransactionsResponseDTO(
                transactions=[TransactionDTO.from_entity(txn) for txn in transactions],
                total=total,
                limit=limit,
                offset=offset,
            )
        )
