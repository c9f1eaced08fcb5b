"""Notification API Routes

Notification list, read/claim/delete, and a Server-Sent Events stream of
the caller's committed changes.
"""

from typing import AsyncIterator, Awaitable, Callable, Optional
from fastapi import APIRouter, Depends, Query, Request, Response, status
from fastapi.responses import StreamingResponse
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.error import ClientError
from src.app.services.change_feed import ChangeFeed
from src.app.use_cases.accounts import GetAccount
from src.app.use_cases.notifications import (
    ClaimResponseDTO,
    ClaimReward,
    DeleteAllNotifications,
    DeleteAllResponseDTO,
    DeleteNotification,
    ListNotifications,
    ListNotificationsResponseDTO,
    MarkAllNotificationsRead,
    MarkAllReadResponseDTO,
    MarkNotificationRead,
    NotificationDTO,
)
from src.adapter.repositories import (
    SqlAlchemyAccountRepository,
    SqlAlchemyCoinTransactionRepository,
    SqlAlchemyNotificationRepository,
)
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_change_feed, get_config, get_current_account_id, get_session

router = APIRouter(prefix="/notifications", tags=["Notifications"])

KEEPALIVE_SECONDS = 15.0


async def change_events(
    change_feed: ChangeFeed,
    account_id: str,
    is_disconnected: Callable[[], Awaitable[bool]],
    keepalive: float = KEEPALIVE_SECONDS,
) -> AsyncIterator[str]:
    """
    SSE frames for one account

    The subscription lives exactly as long as this generator; a client
    disconnect or generator close releases it.
    """
    async with change_feed.subscribe(account_id) as subscription:
        yield ": connected\n\n"
        while not await is_disconnected():
            event = await subscription.get(timeout=keepalive)
            if event is None:
                if subscription.closed:
                    break
                yield ": keep-alive\n\n"
                continue
            yield (
                f"id: {event.entity_id}\n"
                f"event: {event.entity.value}.{event.action.value}\n"
                f"data: {event.model_dump_json()}\n\n"
            )


@router.get("", response_model=ListNotificationsResponseDTO)
async def list_notifications(
    limit: Optional[int] = Query(default=None, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    unread_only: bool = Query(default=False),
    rewards_only: bool = Query(default=False),
    account_id: str = Depends(get_current_account_id),
    session: AsyncSession = Depends(get_session),
    config=Depends(get_config),
):
    """Notifications of the caller, newest first, with the unread count."""
    use_case = ListNotifications(SqlAlchemyNotificationRepository(session))
    result = await use_case.execute(
        account_id,
        limit=limit or config.NOTIFICATIONS_PAGE_SIZE,
        offset=offset,
        unread_only=unread_only,
        rewards_only=rewards_only,
    )
    return result.value


@router.get("/stream")
async def stream_changes(
    request: Request,
    account_id: str = Depends(get_current_account_id),
    session: AsyncSession = Depends(get_session),
    change_feed: ChangeFeed = Depends(get_change_feed),
):
    """
    Live changes to the caller's account, transactions and notifications
    as Server-Sent Events, in commit order.
    """
    account = await GetAccount(SqlAlchemyAccountRepository(session)).execute(account_id)
    if account.is_err():
        raise ClientError(account.error)

    return StreamingResponse(
        change_events(change_feed, account_id, request.is_disconnected),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )


@router.post("/read-all", response_model=MarkAllReadResponseDTO)
async def mark_all_read(
    account_id: str = Depends(get_current_account_id),
    session: AsyncSession = Depends(get_session),
    change_feed: ChangeFeed = Depends(get_change_feed),
):
    uow = SqlAlchemyUnitOfWork(session, change_feed)
    use_case = MarkAllNotificationsRead(
        uow, SqlAlchemyAccountRepository(session), SqlAlchemyNotificationRepository(session)
    )
    result = await use_case.execute(account_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post("/{notification_id}/read", response_model=NotificationDTO)
async def mark_read(
    notification_id: str,
    account_id: str = Depends(get_current_account_id),
    session: AsyncSession = Depends(get_session),
    change_feed: ChangeFeed = Depends(get_change_feed),
):
    """Mark one notification read. Idempotent."""
    uow = SqlAlchemyUnitOfWork(session, change_feed)
    use_case = MarkNotificationRead(
        uow, SqlAlchemyAccountRepository(session), SqlAlchemyNotificationRepository(session)
    )
    result = await use_case.execute(account_id, notification_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post(
    "/{notification_id}/claim",
    response_model=ClaimResponseDTO,
    responses={
        409: {
            "description": "Reward already claimed",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "ALREADY_CLAIMED",
                            "message": "This reward has already been claimed"
                        }
                    }
                }
            }
        },
        400: {"description": "Notification carries no reward"},
        404: {"description": "Notification not found"},
    }
)
async def claim(
    notification_id: str,
    account_id: str = Depends(get_current_account_id),
    session: AsyncSession = Depends(get_session),
    change_feed: ChangeFeed = Depends(get_change_feed),
):
    """
    Claim a coin reward. Exactly one claim per reward credits the balance;
    every other attempt gets `ALREADY_CLAIMED`.
    """
    uow = SqlAlchemyUnitOfWork(session, change_feed)
    use_case = ClaimReward(
        uow,
        SqlAlchemyAccountRepository(session),
        SqlAlchemyCoinTransactionRepository(session),
        SqlAlchemyNotificationRepository(session),
    )
    result = await use_case.execute(account_id, notification_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.delete("", response_model=DeleteAllResponseDTO)
async def delete_all_notifications(
    account_id: str = Depends(get_current_account_id),
    session: AsyncSession = Depends(get_session),
    change_feed: ChangeFeed = Depends(get_change_feed),
):
    """
    Clear the caller's inbox in one commit. Unclaimed rewards are
    cancelled and reported in the response.
    """
    uow = SqlAlchemyUnitOfWork(session, change_feed)
    use_case = DeleteAllNotifications(
        uow, SqlAlchemyAccountRepository(session), SqlAlchemyNotificationRepository(session)
    )
    result = await use_case.execute(account_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification(
    notification_id: str,
    account_id: str = Depends(get_current_account_id),
    session: AsyncSession = Depends(get_session),
    change_feed: ChangeFeed = Depends(get_change_feed),
):
    """Delete a notification. An unclaimed reward is cancelled with it."""
    uow = SqlAlchemyUnitOfWork(session, change_feed)
    use_case = DeleteNotification(
        uow, SqlAlchemyAccountRepository(session), SqlAlchemyNotificationRepository(session)
    )
    result = await use_case.execute(account_id, notification_id)

    if result.is_err():
        raise ClientError(result.error)

    return Response(status_code=status.HTTP_204_NO_CONTENT)
