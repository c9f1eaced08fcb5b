import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

import src.domain  # noqa: F401  registers the tables on SQLModel.metadata
from config import ApplicationConfig
from src.adapter.repositories import (
    SqlAlchemyAccountRepository,
    SqlAlchemyCoinTransactionRepository,
    SqlAlchemyNotificationRepository,
)
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.use_cases.accounts import CreateAccount, CreateAccountCommandDTO
from src.depends import get_session
from src.domain.account import AccountRole
from src.domain.system_settings import SystemSettings


@pytest_asyncio.fixture(scope="function")
async def engine():
    """In-memory SQLite database, fresh schema for every test"""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        echo=False,
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    """Create a new database session for each test"""
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    async with Session() as session:
        yield session


@pytest.fixture
def settings():
    return SystemSettings.from_config(ApplicationConfig)


@pytest.fixture
def uow(db_session):
    return SqlAlchemyUnitOfWork(db_session)


@pytest.fixture
def repos(db_session):
    """(accounts, transactions, notifications) repositories on the test session"""
    return (
        SqlAlchemyAccountRepository(db_session),
        SqlAlchemyCoinTransactionRepository(db_session),
        SqlAlchemyNotificationRepository(db_session),
    )


@pytest.fixture
def signup(uow, repos, settings):
    """Signup through the CreateAccount use case; returns the response DTO"""
    account_repo, transaction_repo, notification_repo = repos

    async def _signup(email, referral_code=None, role=AccountRole.USER, settings_override=None):
        use_case = CreateAccount(
            uow,
            account_repo,
            transaction_repo,
            notification_repo,
            settings_override or settings,
            ApplicationConfig.API_KEY_PREFIX,
        )
        result = await use_case.execute(
            CreateAccountCommandDTO(email=email, referral_code=referral_code, role=role)
        )
        assert result.is_ok(), result.error
        return result.value

    return _signup


@pytest_asyncio.fixture
async def admin(signup):
    return await signup("admin@example.com", role=AccountRole.ADMIN)


@pytest_asyncio.fixture
async def client(db_session):
    """Create test client with database session override"""
    from src.api.app import create_app

    app = create_app(ApplicationConfig)

    # Override the session dependency to use test session
    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session

    # Use ASGITransport for httpx AsyncClient
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
