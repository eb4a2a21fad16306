"""Reminder scheduler for incomplete vetting applications.

A reminder pass walks every pending application, oldest first, and emails
the applicant when one is due:

- first reminder 3 days after the application was created
- second reminder at 7 days
- then every 7 days after the previous reminder
- nothing once the application is more than 30 days old
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import status as http_status
from sqlalchemy.ext.asyncio import AsyncSession

from proclusive_platform.domain.enums import RequiredRole, VerificationStatus
from proclusive_platform.domain.exceptions import InvalidRequest, NotFound, ServiceError
from proclusive_platform.domain.models import DOCUMENT_POINT_FIELDS, Application
from proclusive_platform.services import email_service
from proclusive_platform.services.application_store import (
    get_application,
    list_pending_applications,
    record_reminder_sent,
)
from proclusive_platform.services.authorization import Caller, authorize

logger = logging.getLogger(__name__)

FIRST_REMINDER_DAYS = 3
SECOND_REMINDER_DAYS = 7
RECURRING_REMINDER_DAYS = 7
MAX_REMINDER_AGE_DAYS = 30

_SECONDS_PER_DAY = 24 * 60 * 60


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; they were written as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _whole_days(since: datetime, now: datetime) -> int:
    return int((now - _as_utc(since)).total_seconds() // _SECONDS_PER_DAY)


def should_send_reminder(
    created_at: datetime,
    last_reminder_sent: Optional[datetime],
    reminder_count: int,
    now: Optional[datetime] = None,
) -> bool:
    """Decide whether an application is due a reminder at ``now``."""
    now = now or datetime.now(timezone.utc)
    days_since_creation = _whole_days(created_at, now)

    if days_since_creation > MAX_REMINDER_AGE_DAYS:
        return False
    if reminder_count == 0 and days_since_creation >= FIRST_REMINDER_DAYS:
        return True
    if reminder_count == 1 and days_since_creation >= SECOND_REMINDER_DAYS:
        return True
    if reminder_count >= 2 and last_reminder_sent is not None:
        return _whole_days(last_reminder_sent, now) >= RECURRING_REMINDER_DAYS
    return False


def get_incomplete_steps(application: Application) -> list[str]:
    """Remaining steps to list in the reminder email. Never empty."""
    steps = []
    if all(
        getattr(application, field) == VerificationStatus.NOT_SUBMITTED.value
        for field in DOCUMENT_POINT_FIELDS
    ):
        steps.append("Upload verification documents")
    if not application.tos_accepted:
        steps.append("Accept Terms of Service")
    if not application.privacy_accepted:
        steps.append("Accept Privacy Policy")
    if not steps:
        steps.append("Complete and submit your application")
    return steps


class ReminderScheduler:
    """Runs reminder passes over pending applications."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def run_reminder_pass(self, now: Optional[datetime] = None) -> dict:
        """Send every reminder that is due.

        Returns ``{checked, sent, skipped, errors}``. A failure on one
        application is counted and logged; the pass moves on to the next.
        """
        now = now or datetime.now(timezone.utc)
        results = {"checked": 0, "sent": 0, "skipped": 0, "errors": 0}

        pending = await list_pending_applications(self.db)
        application_ids = [app.id for app in pending]
        logger.info("[ApplicationReminders] Found %d pending applications", len(application_ids))

        for application_id in application_ids:
            results["checked"] += 1
            try:
                outcome = await self._remind(application_id, now)
            except Exception:
                logger.exception(
                    "[ApplicationReminders] Error processing application %s", application_id
                )
                await self.db.rollback()
                # Drop expired rows so later applications load fresh profiles
                self.db.expunge_all()
                outcome = "errors"
            results[outcome] += 1

        logger.info("[ApplicationReminders] Complete: %s", results)
        return results

    async def _remind(self, application_id: str, now: datetime) -> str:
        """Handle one application; return the results key it counts toward."""
        # Reload so a rollback on an earlier row never leaves this one expired
        application = await get_application(self.db, application_id)
        if application is None:
            return "skipped"

        reminder_count = application.reminder_count or 0
        if not should_send_reminder(
            application.created_at, application.last_reminder_sent, reminder_count, now
        ):
            return "skipped"

        steps = get_incomplete_steps(application)
        logger.info(
            "[ApplicationReminders] Sending reminder to %s (count: %d)",
            application.profile.email, reminder_count + 1,
        )
        sent = await email_service.send_incomplete_application_reminder(application.profile, steps)
        if not sent:
            return "errors"

        await record_reminder_sent(self.db, application, reminder_count, now)
        return "sent"

    async def send_single_reminder(
        self, caller: Caller | None, application_id: str | None
    ) -> None:
        """Admin-triggered reminder for one application, ignoring the schedule.

        Raises ServiceError (500) when the email cannot be sent; bookkeeping
        is only updated after a successful send.
        """
        authorize(caller, RequiredRole.ADMIN)
        if not application_id:
            raise InvalidRequest("Application ID is required")
        application = await get_application(self.db, application_id)
        if application is None:
            raise NotFound("Application not found")

        steps = get_incomplete_steps(application)
        logger.info("[SendSingleReminder] Sending reminder to %s", application.profile.email)
        sent = await email_service.send_incomplete_application_reminder(application.profile, steps)
        if not sent:
            raise ServiceError("Failed to send email", http_status.HTTP_500_INTERNAL_SERVER_ERROR)

        await record_reminder_sent(
            self.db, application, application.reminder_count or 0, datetime.now(timezone.utc)
        )
