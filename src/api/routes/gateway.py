"""API Gateway Routes

Called by the API gateway once per served third-party call.
"""

from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.error import ClientError
from src.api.schemas.ledger_request import ChargeRequestSchema
from src.app.services.change_feed import ChangeFeed
from src.app.use_cases.ledger import ChargeApiCall, ChargeApiCallCommandDTO, CoinTransactionResponseDTO
from src.adapter.repositories import SqlAlchemyAccountRepository, SqlAlchemyCoinTransactionRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_change_feed, get_session, get_system_settings
from src.domain.system_settings import SystemSettings

router = APIRouter(prefix="/gateway", tags=["Gateway"])


@router.post("/charge", response_model=CoinTransactionResponseDTO)
async def charge(
    request: ChargeRequestSchema,
    session: AsyncSession = Depends(get_session),
    change_feed: ChangeFeed = Depends(get_change_feed),
    settings: SystemSettings = Depends(get_system_settings),
):
    """
    Charge `cost_per_call` coins for one API call.

    **Returns:**
    - 200: Charged (or replayed for a known `idempotency_key`)
    - 401: Unknown API key
    - 402: Insufficient balance
    - 403: API key paused or account suspended
    """
    uow = SqlAlchemyUnitOfWork(session, change_feed)
    use_case = ChargeApiCall(
        uow,
        SqlAlchemyAccountRepository(session),
        SqlAlchemyCoinTransactionRepository(session),
        settings,
    )
    result = await use_case.execute(
        ChargeApiCallCommandDTO(
            api_key=request.api_key,
            endpoint=request.endpoint,
            idempotency_key=request.idempotency_key,
        )
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value
