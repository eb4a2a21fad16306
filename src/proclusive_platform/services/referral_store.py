"""Read/write access to referrals and the profiles they reference.

No business rules live here; the lifecycle engine decides what to write.
"""

from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from proclusive_platform.domain.models import Profile, Referral


async def get_profile(db: AsyncSession, profile_id: str) -> Profile | None:
    result = await db.execute(select(Profile).where(Profile.id == profile_id))
    return result.scalar_one_or_none()


async def get_admin_flag(db: AsyncSession, profile_id: str) -> bool | None:
    """Return the profile's ``is_admin`` flag, or None if there is no profile."""
    result = await db.execute(select(Profile.is_admin).where(Profile.id == profile_id))
    return result.scalar_one_or_none()


async def get_referral(db: AsyncSession, referral_id: str) -> Referral | None:
    """Fetch a referral with its submitter and matched member loaded."""
    result = await db.execute(
        select(Referral)
        .where(Referral.id == referral_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def create_referral(db: AsyncSession, submitted_by: str, fields: dict) -> Referral:
    referral = Referral(submitted_by=submitted_by, **fields)
    db.add(referral)
    await db.commit()
    return await get_referral(db, referral.id)


async def compare_and_set_referral(
    db: AsyncSession,
    referral_id: str,
    expected_status: str,
    values: dict,
    now: datetime,
) -> bool:
    """Write ``values`` only if the referral is still in ``expected_status``.

    Returns False when another writer got there first. Does not commit.
    """
    result = await db.execute(
        update(Referral)
        .where(Referral.id == referral_id, Referral.status == expected_status)
        .values(**values, updated_at=now)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1
