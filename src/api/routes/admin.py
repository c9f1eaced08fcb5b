"""Admin API Routes

User table, status and balance management, notifications, settings and
reconciliation. Every use case behind these routes checks that the
caller is an active admin.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.error import ClientError
from src.api.schemas.account_request import ApiKeyPausedRequestSchema
from src.api.schemas.admin_request import (
    AdjustRequestSchema,
    PurchaseRequestSchema,
    SetStatusRequestSchema,
    UpdateSettingsRequestSchema,
)
from src.app.services.change_feed import ChangeFeed
from src.app.use_cases.accounts import (
    AccountDTO,
    ApiKeyResponseDTO,
    DeleteAccount,
    SetAccountStatus,
    SetApiKeyPaused,
)
from src.app.use_cases.admin import (
    AccountStatsDTO,
    GetAccountStats,
    ListAccounts,
    ListAccountsResponseDTO,
    SystemSettingsDTO,
    UpdateSettingsCommandDTO,
    UpdateSystemSettings,
)
from src.app.use_cases.guards import load_admin
from src.app.use_cases.ledger import (
    AdminAdjustCoins,
    AdminAdjustCommandDTO,
    AdminAdjustResponseDTO,
    CoinTransactionResponseDTO,
    PurchaseCommandDTO,
    ReconcileLedger,
    ReconciliationResultDTO,
    RecordPurchase,
)
from src.app.use_cases.notifications import (
    BroadcastCommandDTO,
    BroadcastNotification,
    BroadcastResponseDTO,
    DeliverCommandDTO,
    DeliverNotification,
    NotificationDTO,
    NotificationPayloadDTO,
)
from src.adapter.repositories import (
    SqlAlchemyAccountRepository,
    SqlAlchemyCoinTransactionRepository,
    SqlAlchemyNotificationRepository,
    SqlAlchemySystemSettingsRepository,
)
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import (
    cache_system_settings,
    get_change_feed,
    get_config,
    get_current_account_id,
    get_session,
    get_system_settings,
)
from src.domain.system_settings import SystemSettings

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/accounts", response_model=ListAccountsResponseDTO)
async def list_accounts(
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    q: Optional[str] = Query(default=None, description="Email search"),
    admin_id: str = Depends(get_current_account_id),
    session: AsyncSession = Depends(get_session),
):
    result = await ListAccounts(SqlAlchemyAccountRepository(session)).execute(
        admin_id, limit=limit, offset=offset, email_query=q
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/stats", response_model=AccountStatsDTO)
async def get_stats(
    admin_id: str = Depends(get_current_account_id),
    session: AsyncSession = Depends(get_session),
):
    """Total, active and suspended users and the sum of all balances."""
    result = await GetAccountStats(SqlAlchemyAccountRepository(session)).execute(admin_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.put("/accounts/{account_id}/status", response_model=AccountDTO)
async def set_status(
    account_id: str,
    request: SetStatusRequestSchema,
    admin_id: str = Depends(get_current_account_id),
    session: AsyncSession = Depends(get_session),
    change_feed: ChangeFeed = Depends(get_change_feed),
):
    """Suspend or re-activate an account; the user is notified."""
    uow = SqlAlchemyUnitOfWork(session, change_feed)
    use_case = SetAccountStatus(
        uow, SqlAlchemyAccountRepository(session), SqlAlchemyNotificationRepository(session)
    )
    result = await use_case.execute(admin_id, account_id, request.status)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.put("/accounts/{account_id}/api-key/paused", response_model=ApiKeyResponseDTO)
async def set_api_key_paused(
    account_id: str,
    request: ApiKeyPausedRequestSchema,
    admin_id: str = Depends(get_current_account_id),
    session: AsyncSession = Depends(get_session),
    change_feed: ChangeFeed = Depends(get_change_feed),
):
    uow = SqlAlchemyUnitOfWork(session, change_feed)
    use_case = SetApiKeyPaused(uow, SqlAlchemyAccountRepository(session))
    result = await use_case.execute(admin_id, account_id, request.paused)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.delete("/accounts/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_account(
    account_id: str,
    admin_id: str = Depends(get_current_account_id),
    session: AsyncSession = Depends(get_session),
    change_feed: ChangeFeed = Depends(get_change_feed),
):
    """Delete an account with all its transactions and notifications."""
    uow = SqlAlchemyUnitOfWork(session, change_feed)
    use_case = DeleteAccount(
        uow,
        SqlAlchemyAccountRepository(session),
        SqlAlchemyCoinTransactionRepository(session),
        SqlAlchemyNotificationRepository(session),
    )
    result = await use_case.execute(admin_id, account_id)

    if result.is_err():
        raise ClientError(result.error)

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/accounts/{account_id}/adjust",
    response_model=AdminAdjustResponseDTO,
    responses={402: {"description": "Deduction exceeds the balance"}},
)
async def adjust_balance(
    account_id: str,
    request: AdjustRequestSchema,
    admin_id: str = Depends(get_current_account_id),
    session: AsyncSession = Depends(get_session),
    change_feed: ChangeFeed = Depends(get_change_feed),
):
    """
    Adjust a balance.

    - `deduct` is applied now and the user gets a warning notification.
    - `credit` delivers a coin reward; the balance changes when the user
      claims it.
    """
    uow = SqlAlchemyUnitOfWork(session, change_feed)
    use_case = AdminAdjustCoins(
        uow,
        SqlAlchemyAccountRepository(session),
        SqlAlchemyCoinTransactionRepository(session),
        SqlAlchemyNotificationRepository(session),
    )
    result = await use_case.execute(
        AdminAdjustCommandDTO(
            admin_id=admin_id,
            account_id=account_id,
            amount=request.amount,
            direction=request.direction,
            reason=request.reason,
        )
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post("/accounts/{account_id}/purchase", response_model=CoinTransactionResponseDTO)
async def record_purchase(
    account_id: str,
    request: PurchaseRequestSchema,
    admin_id: str = Depends(get_current_account_id),
    session: AsyncSession = Depends(get_session),
    change_feed: ChangeFeed = Depends(get_change_feed),
):
    """Credit a paid coin package directly (no claim)."""
    uow = SqlAlchemyUnitOfWork(session, change_feed)
    use_case = RecordPurchase(
        uow, SqlAlchemyAccountRepository(session), SqlAlchemyCoinTransactionRepository(session)
    )
    result = await use_case.execute(
        PurchaseCommandDTO(
            admin_id=admin_id,
            account_id=account_id,
            amount=request.amount,
            description=request.description,
            reference_id=request.reference_id,
        )
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post(
    "/accounts/{account_id}/notifications",
    response_model=NotificationDTO,
    status_code=status.HTTP_201_CREATED,
)
async def deliver_notification(
    account_id: str,
    request: NotificationPayloadDTO,
    admin_id: str = Depends(get_current_account_id),
    session: AsyncSession = Depends(get_session),
    change_feed: ChangeFeed = Depends(get_change_feed),
):
    """Send one notification; coin rewards wait for the user's claim."""
    uow = SqlAlchemyUnitOfWork(session, change_feed)
    use_case = DeliverNotification(
        uow, SqlAlchemyAccountRepository(session), SqlAlchemyNotificationRepository(session)
    )
    result = await use_case.execute(
        DeliverCommandDTO(admin_id=admin_id, account_id=account_id, payload=request)
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post("/broadcast", response_model=BroadcastResponseDTO, status_code=status.HTTP_201_CREATED)
async def broadcast(
    request: NotificationPayloadDTO,
    admin_id: str = Depends(get_current_account_id),
    session: AsyncSession = Depends(get_session),
    change_feed: ChangeFeed = Depends(get_change_feed),
):
    """
    Send a notification to every account that exists right now.

    With a `coin_reward` payload this is the bulk coin grant. All
    notifications are written in one commit, or none are.
    """
    uow = SqlAlchemyUnitOfWork(session, change_feed)
    use_case = BroadcastNotification(
        uow, SqlAlchemyAccountRepository(session), SqlAlchemyNotificationRepository(session)
    )
    result = await use_case.execute(BroadcastCommandDTO(admin_id=admin_id, payload=request))

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/settings", response_model=SystemSettingsDTO)
async def get_settings(
    admin_id: str = Depends(get_current_account_id),
    session: AsyncSession = Depends(get_session),
    settings: SystemSettings = Depends(get_system_settings),
):
    admin = await load_admin(SqlAlchemyAccountRepository(session), admin_id)
    if admin.is_err():
        raise ClientError(admin.error)

    return SystemSettingsDTO.from_entity(settings)


@router.put("/settings", response_model=SystemSettingsDTO)
async def update_settings(
    http_request: Request,
    request: UpdateSettingsRequestSchema,
    admin_id: str = Depends(get_current_account_id),
    session: AsyncSession = Depends(get_session),
    change_feed: ChangeFeed = Depends(get_change_feed),
    config=Depends(get_config),
):
    """
    Update cost per call, bonuses and transfer limits. Omitted fields keep
    their value. The new settings apply to the next request.
    """
    uow = SqlAlchemyUnitOfWork(session, change_feed)
    use_case = UpdateSystemSettings(
        uow,
        SqlAlchemyAccountRepository(session),
        SqlAlchemySystemSettingsRepository(session),
        SystemSettings.from_config(config),
    )
    result = await use_case.execute(
        UpdateSettingsCommandDTO(admin_id=admin_id, **request.model_dump(exclude_none=True))
    )

    if result.is_err():
        raise ClientError(result.error)

    cache_system_settings(http_request.app, SystemSettings(**result.value.model_dump()))
    return result.value


@router.post("/reconcile", response_model=ReconciliationResultDTO)
async def reconcile(
    admin_id: str = Depends(get_current_account_id),
    session: AsyncSession = Depends(get_session),
):
    """Compare every balance with its transaction sum. Read-only."""
    account_repo = SqlAlchemyAccountRepository(session)
    admin = await load_admin(account_repo, admin_id)
    if admin.is_err():
        raise ClientError(admin.error)

    use_case = ReconcileLedger(account_repo, SqlAlchemyCoinTransactionRepository(session))
    result = await use_case.execute()

    if result.is_err():
        raise ClientError(result.error)

    return result.value
