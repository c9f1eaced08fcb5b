"""Ledger API Routes

Balance, transaction history and user-to-user transfers.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.error import ClientError
from src.api.schemas.ledger_request import TransferRequestSchema
from src.app.services.change_feed import ChangeFeed
from src.app.use_cases.ledger import (
    BalanceResponseDTO,
    GetBalance,
    ListTransactions,
    ListTransactionsResponseDTO,
    TransferCoins,
    TransferCommandDTO,
    TransferResponseDTO,
)
from src.adapter.repositories import (
    SqlAlchemyAccountRepository,
    SqlAlchemyCoinTransactionRepository,
    SqlAlchemyNotificationRepository,
)
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import (
    get_change_feed,
    get_config,
    get_current_account_id,
    get_session,
    get_system_settings,
)
from src.domain.system_settings import SystemSettings

router = APIRouter(prefix="/ledger", tags=["Ledger"])


@router.get("/balance", response_model=BalanceResponseDTO)
async def get_balance(
    account_id: str = Depends(get_current_account_id),
    session: AsyncSession = Depends(get_session),
):
    """
    Current coin balance of the caller.

    **Returns:**
    - 200: Balance retrieved
    - 404: Account not found
    """
    result = await GetBalance(SqlAlchemyAccountRepository(session)).execute(account_id)

    if result.is_err():
        raise ClientError(result.error, status_code=status.HTTP_404_NOT_FOUND)

    return result.value


@router.get("/transactions", response_model=ListTransactionsResponseDTO)
async def list_transactions(
    limit: Optional[int] = Query(default=None, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    account_id: str = Depends(get_current_account_id),
    session: AsyncSession = Depends(get_session),
    config=Depends(get_config),
):
    """Transaction history of the caller, newest first."""
    use_case = ListTransactions(SqlAlchemyCoinTransactionRepository(session))
    result = await use_case.execute(
        account_id, limit=limit or config.TRANSACTIONS_PAGE_SIZE, offset=offset
    )
    return result.value


@router.post(
    "/transfer",
    response_model=TransferResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={
        402: {
            "description": "Insufficient balance",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "INSUFFICIENT_BALANCE",
                            "message": "Insufficient balance. Required: 500, Available: 120"
                        }
                    }
                }
            }
        },
        404: {"description": "Recipient not found"},
        400: {"description": "Self transfer or amount outside the allowed range"},
    }
)
async def transfer(
    request: TransferRequestSchema,
    account_id: str = Depends(get_current_account_id),
    session: AsyncSession = Depends(get_session),
    change_feed: ChangeFeed = Depends(get_change_feed),
    settings: SystemSettings = Depends(get_system_settings),
):
    """
    Transfer coins to another account by email.

    Both sides get a transaction and the recipient a notification, in one
    commit. Nothing is written when the transfer is rejected.
    """
    uow = SqlAlchemyUnitOfWork(session, change_feed)
    use_case = TransferCoins(
        uow,
        SqlAlchemyAccountRepository(session),
        SqlAlchemyCoinTransactionRepository(session),
        SqlAlchemyNotificationRepository(session),
        settings,
    )
    result = await use_case.execute(
        TransferCommandDTO(
            sender_id=account_id,
            recipient_email=request.recipient_email,
            amount=request.amount,
        )
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value
