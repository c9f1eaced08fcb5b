from typing import Optional
from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from libs.result import Error
from src.adapter.repositories.system_settings_repository import SqlAlchemySystemSettingsRepository
from src.api.error import ClientError
from src.app.services.change_feed import ChangeFeed
from src.app.use_cases.admin.system_settings import GetSystemSettings
from src.domain.system_settings import SystemSettings

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


def get_config(request: Request):
    return request.app.state.config


def get_change_feed(request: Request) -> ChangeFeed:
    return request.app.state.change_feed


async def get_current_account_id(x_account_id: Optional[str] = Header(default=None)) -> str:
    """Account identity handed over by the authentication collaborator"""
    if not x_account_id:
        raise ClientError(
            Error(code="UNAUTHORIZED", message="Missing X-Account-Id header")
        )
    return x_account_id


async def get_system_settings(
    request: Request, session: AsyncSession = Depends(get_session)
) -> SystemSettings:
    """Settings are loaded once per process and replaced by the admin update"""
    cached = getattr(request.app.state, "system_settings", None)
    if cached is not None:
        return cached

    defaults = SystemSettings.from_config(request.app.state.config)
    result = await GetSystemSettings(SqlAlchemySystemSettingsRepository(session), defaults).execute()
    settings = cache_system_settings(request.app, result.value)
    return settings


def cache_system_settings(app, settings: SystemSettings) -> SystemSettings:
    detached = SystemSettings(**settings.model_dump())
    app.state.system_settings = detached
    return detached
