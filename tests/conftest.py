"""Shared test infrastructure for the Proclusive Platform test suite.

Provides:
- db_session: async SQLite in-memory session with all tables created
- email_mock: every email_service send function replaced by an AsyncMock
- make_profile / make_application / make_referral: row factories
- auth_headers: Bearer headers for a profile, minted like the identity provider does
- client: httpx AsyncClient bound to the app, sharing db_session
"""

import uuid
from contextlib import ExitStack
from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

# Import Base first, then models to register all tables
from proclusive_platform.infra.database import Base, get_db

import proclusive_platform.domain.models  # noqa: F401

from proclusive_platform.domain.models import Application, Profile, Referral
from proclusive_platform.services import email_service
from proclusive_platform.services.auth_service import create_access_token

EMAIL_FUNCTIONS = (
    "send_application_submitted",
    "send_new_application_alert",
    "send_application_rejected",
    "send_incomplete_application_reminder",
    "send_application_approved",
    "send_referral_submitted_confirmation",
    "send_new_referral_alert",
    "send_matched_referral",
    "send_referral_status_update",
    "send_referral_completed",
)


# ---------------------------------------------------------------------------
# Database session fixture
# ---------------------------------------------------------------------------

@pytest.fixture
async def db_session():
    """Async SQLite in-memory session with all tables created.

    Creates a fresh engine + tables for each test, yields a session,
    then rolls back and tears down.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False,
    )

    async with session_factory() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


# ---------------------------------------------------------------------------
# Email gateway mock
# ---------------------------------------------------------------------------

@pytest.fixture
def email_mock():
    """Replace every outbound email with an AsyncMock that reports success.

    Usage:
        email_mock.send_matched_referral.return_value = False
        assert email_mock.send_referral_completed.await_count == 2
    """
    with ExitStack() as stack:
        mocks = {
            name: stack.enter_context(
                patch.object(email_service, name, AsyncMock(return_value=True))
            )
            for name in EMAIL_FUNCTIONS
        }
        yield SimpleNamespace(**mocks)


# ---------------------------------------------------------------------------
# Row factories
# ---------------------------------------------------------------------------

@pytest.fixture
def make_profile(db_session):
    """Factory that creates a committed Profile.

    Usage:
        admin = await make_profile(is_admin=True)
    """
    async def _factory(
        full_name: str = "Jordan Rivera",
        email: str | None = None,
        company_name: str = "Rivera Builders",
        is_admin: bool = False,
        **kwargs,
    ) -> Profile:
        profile = Profile(
            id=str(uuid.uuid4()),
            email=email or f"{uuid.uuid4().hex[:8]}@example.com",
            full_name=full_name,
            company_name=company_name,
            is_admin=is_admin,
            **kwargs,
        )
        db_session.add(profile)
        await db_session.commit()
        return profile

    return _factory


@pytest.fixture
def make_application(db_session, make_profile):
    """Factory that creates a committed Application (and its applicant if not given).

    Usage:
        app = await make_application(created_at=now - timedelta(days=3), tos_accepted=True)
    """
    async def _factory(profile: Profile | None = None, **kwargs) -> Application:
        if profile is None:
            profile = await make_profile()
        kwargs.setdefault("created_at", datetime.now(timezone.utc))
        application = Application(id=str(uuid.uuid4()), user_id=profile.id, **kwargs)
        db_session.add(application)
        await db_session.commit()
        await db_session.refresh(application, attribute_names=["profile"])
        return application

    return _factory


@pytest.fixture
def make_referral(db_session, make_profile):
    """Factory that creates a committed Referral (and its submitter if not given).

    Usage:
        ref = await make_referral(status="MATCHED", matched_to=member.id)
    """
    async def _factory(submitter: Profile | None = None, **kwargs) -> Referral:
        if submitter is None:
            submitter = await make_profile(full_name="Sam Submitter")
        defaults = {
            "client_name": "Avery Client",
            "client_email": "avery@client.com",
            "client_phone": "+12025550100",
            "project_type": "Kitchen Remodel",
            "value_range": "$50k-$100k",
            "location": "Arlington, VA",
        }
        defaults.update(kwargs)
        referral = Referral(id=str(uuid.uuid4()), submitted_by=submitter.id, **defaults)
        db_session.add(referral)
        await db_session.commit()
        await db_session.refresh(referral, attribute_names=["submitter", "matched_member"])
        return referral

    return _factory


# ---------------------------------------------------------------------------
# HTTP client
# ---------------------------------------------------------------------------

@pytest.fixture
def auth_headers():
    """Build Bearer headers for a profile (or a bare user id)."""
    def _factory(profile) -> dict:
        user_id = profile if isinstance(profile, str) else profile.id
        return {"Authorization": f"Bearer {create_access_token(user_id)}"}

    return _factory


@pytest.fixture
async def client(db_session):
    """AsyncClient against the app with get_db bound to db_session."""
    from proclusive_platform.app.main import app

    async def _get_db_override():
        yield db_session

    app.dependency_overrides[get_db] = _get_db_override
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
