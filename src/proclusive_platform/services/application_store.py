"""Read/write access to vetting applications."""

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from proclusive_platform.domain.enums import ApplicationStatus
from proclusive_platform.domain.models import Application


async def get_application(db: AsyncSession, application_id: str) -> Application | None:
    """Fetch an application with its applicant profile loaded."""
    result = await db.execute(
        select(Application)
        .where(Application.id == application_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_application_for_user(db: AsyncSession, user_id: str) -> Application | None:
    result = await db.execute(select(Application).where(Application.user_id == user_id))
    return result.scalar_one_or_none()


async def list_pending_applications(db: AsyncSession) -> list[Application]:
    """All applications still in ``pending``, oldest first."""
    result = await db.execute(
        select(Application)
        .where(Application.status == ApplicationStatus.PENDING.value)
        .order_by(Application.created_at.asc())
    )
    return list(result.scalars().all())


async def record_reminder_sent(
    db: AsyncSession, application: Application, previous_count: int, now: datetime
) -> None:
    """Stamp reminder bookkeeping after a successful send. Commits."""
    application.reminder_count = previous_count + 1
    application.last_reminder_sent = now
    await db.commit()
