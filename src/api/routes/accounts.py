"""Account API Routes

Signup and self-service account operations. The caller is identified by
the X-Account-Id header set by the authentication collaborator.
"""

from fastapi import APIRouter, Depends, Response, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.error import ClientError
from src.api.schemas.account_request import (
    ApiKeyPausedRequestSchema,
    SignupRequestSchema,
    UpdateProfileRequestSchema,
)
from src.app.services.change_feed import ChangeFeed
from src.app.use_cases.accounts import (
    AccountDTO,
    ApiKeyResponseDTO,
    CreateAccount,
    CreateAccountCommandDTO,
    CreateAccountResponseDTO,
    DeleteAccount,
    GetAccount,
    RegenerateApiKey,
    SetApiKeyPaused,
    UpdateProfile,
    UpdateProfileCommandDTO,
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

router = APIRouter(prefix="/accounts", tags=["Accounts"])


@router.post(
    "",
    response_model=CreateAccountResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {
            "description": "Email already registered",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "EMAIL_ALREADY_EXISTS",
                            "message": "An account with email nimal@example.com already exists"
                        }
                    }
                }
            }
        }
    }
)
async def signup(
    request: SignupRequestSchema,
    session: AsyncSession = Depends(get_session),
    change_feed: ChangeFeed = Depends(get_change_feed),
    settings: SystemSettings = Depends(get_system_settings),
    config=Depends(get_config),
):
    """
    Create an account for a verified email.

    The new account starts active with the welcome bonus (plus the referral
    bonus when `referral_code` belongs to an existing account), one
    `signup_bonus` transaction and a welcome notification. The referrer
    receives a claimable referral reward.

    **Returns:**
    - 201: Account created
    - 409: Email already registered
    """
    uow = SqlAlchemyUnitOfWork(session, change_feed)
    use_case = CreateAccount(
        uow,
        SqlAlchemyAccountRepository(session),
        SqlAlchemyCoinTransactionRepository(session),
        SqlAlchemyNotificationRepository(session),
        settings,
        config.API_KEY_PREFIX,
    )
    result = await use_case.execute(
        CreateAccountCommandDTO(
            email=request.email,
            display_name=request.display_name,
            referral_code=request.referral_code,
        )
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/me", response_model=AccountDTO)
async def get_me(
    account_id: str = Depends(get_current_account_id),
    session: AsyncSession = Depends(get_session),
):
    """Current account, including API key, balance and call count."""
    result = await GetAccount(SqlAlchemyAccountRepository(session)).execute(account_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.put("/me", response_model=AccountDTO)
async def update_me(
    request: UpdateProfileRequestSchema,
    account_id: str = Depends(get_current_account_id),
    session: AsyncSession = Depends(get_session),
    change_feed: ChangeFeed = Depends(get_change_feed),
):
    """Change the caller's display name."""
    uow = SqlAlchemyUnitOfWork(session, change_feed)
    use_case = UpdateProfile(uow, SqlAlchemyAccountRepository(session))
    result = await use_case.execute(
        UpdateProfileCommandDTO(account_id=account_id, display_name=request.display_name)
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post("/me/api-key/regenerate", response_model=ApiKeyResponseDTO)
async def regenerate_api_key(
    account_id: str = Depends(get_current_account_id),
    session: AsyncSession = Depends(get_session),
    change_feed: ChangeFeed = Depends(get_change_feed),
    config=Depends(get_config),
):
    """
    Issue a new API key. The previous key is refused by the gateway as
    soon as this returns.
    """
    uow = SqlAlchemyUnitOfWork(session, change_feed)
    use_case = RegenerateApiKey(uow, SqlAlchemyAccountRepository(session), config.API_KEY_PREFIX)
    result = await use_case.execute(account_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.put("/me/api-key/paused", response_model=ApiKeyResponseDTO)
async def set_api_key_paused(
    request: ApiKeyPausedRequestSchema,
    account_id: str = Depends(get_current_account_id),
    session: AsyncSession = Depends(get_session),
    change_feed: ChangeFeed = Depends(get_change_feed),
):
    """Pause or resume the caller's API key."""
    uow = SqlAlchemyUnitOfWork(session, change_feed)
    use_case = SetApiKeyPaused(uow, SqlAlchemyAccountRepository(session))
    result = await use_case.execute(account_id, account_id, request.paused)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
async def delete_me(
    account_id: str = Depends(get_current_account_id),
    session: AsyncSession = Depends(get_session),
    change_feed: ChangeFeed = Depends(get_change_feed),
):
    """
    Delete the caller's account with all its transactions and
    notifications. Irreversible; re-authentication happens upstream.
    """
    uow = SqlAlchemyUnitOfWork(session, change_feed)
    use_case = DeleteAccount(
        uow,
        SqlAlchemyAccountRepository(session),
        SqlAlchemyCoinTransactionRepository(session),
        SqlAlchemyNotificationRepository(session),
    )
    result = await use_case.execute(account_id, account_id)

    if result.is_err():
        raise ClientError(result.error)

    return Response(status_code=status.HTTP_204_NO_CONTENT)
