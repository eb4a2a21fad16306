"""Scheduled job endpoints, called by an external cron."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from proclusive_platform.app.config import get_settings
from proclusive_platform.infra.database import get_db
from proclusive_platform.services.reminder_service import ReminderScheduler

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cron", tags=["cron"])


def verify_cron_secret(request: Request) -> None:
    """Dependency: when CRON_SECRET is set, require it as a Bearer token."""
    cron_secret = get_settings().cron_secret
    if not cron_secret:
        return
    if request.headers.get("Authorization", "") != f"Bearer {cron_secret}":
        logger.warning("[ApplicationReminders] Unauthorized request")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


@router.api_route(
    "/application-reminders",
    methods=["POST", "GET"],
    dependencies=[Depends(verify_cron_secret)],
)
async def application_reminders(db: AsyncSession = Depends(get_db)):
    """Run one reminder pass. GET is accepted for manual runs."""
    logger.info("[ApplicationReminders] Starting reminder check")
    try:
        results = await ReminderScheduler(db).run_reminder_pass()
    except Exception:
        logger.exception("[ApplicationReminders] Unexpected error")
        raise HTTPException(status_code=500, detail="Internal server error")

    return {
        "success": True,
        "results": results,
        "message": (
            f"Sent {results['sent']} reminders, skipped {results['skipped']}, "
            f"{results['errors']} errors"
        ),
    }
