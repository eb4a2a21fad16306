"""Application review engine: vetting application submission and admin review."""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from proclusive_platform.domain.enums import (
    ApplicationStatus,
    AuditAction,
    AuditEntityType,
    BadgeLevel,
    RequiredRole,
    VerificationStatus,
)
from proclusive_platform.domain.exceptions import InvalidRequest, NotFound
from proclusive_platform.domain.models import VERIFICATION_POINT_FIELDS, Application
from proclusive_platform.services import email_service
from proclusive_platform.services.application_store import (
    get_application,
    get_application_for_user,
)
from proclusive_platform.services.audit_service import log_admin_action
from proclusive_platform.services.authorization import Caller, authorize

logger = logging.getLogger(__name__)

# Statuses an admin may set on a single verification point
REVIEWABLE_POINT_STATUSES = {VerificationStatus.VERIFIED.value, VerificationStatus.REJECTED.value}


@dataclass
class EmailResult:
    """Outcome of a review action whose email may or may not have gone out."""

    email_sent: bool
    message: str


@dataclass
class SubmissionNotice:
    applicant_email_sent: bool
    admin_email_sent: bool

    @property
    def message(self) -> str:
        applicant = str(self.applicant_email_sent).lower()
        admin = str(self.admin_email_sent).lower()
        return f"Emails sent - Applicant: {applicant}, Admin: {admin}"


def _parse_badge(badge_level: str) -> BadgeLevel:
    try:
        return BadgeLevel(badge_level.lower())
    except ValueError:
        raise InvalidRequest(f"Invalid badge level: {badge_level}")


async def _load_application(db: AsyncSession, application_id: str | None) -> Application:
    if not application_id:
        raise InvalidRequest("Application ID is required")
    application = await get_application(db, application_id)
    if application is None:
        raise NotFound("Application not found")
    return application


# ---------------------------------------------------------------------------
# Member-facing
# ---------------------------------------------------------------------------


async def submit_application(
    db: AsyncSession,
    caller: Caller | None,
    tos_accepted: bool,
    privacy_accepted: bool,
    workers_comp_exempt_sole_prop: bool = False,
) -> tuple[Application, bool]:
    """Create the caller's application, or update acceptance on the existing one.

    Returns ``(application, created)``. A member has at most one application.
    """
    caller = authorize(caller, RequiredRole.AUTHENTICATED)
    now = datetime.now(timezone.utc)

    application = await get_application_for_user(db, caller.id)
    created = application is None
    if created:
        application = Application(user_id=caller.id, status=ApplicationStatus.PENDING.value)
        db.add(application)

    if tos_accepted and not application.tos_accepted:
        application.tos_accepted = True
        application.tos_accepted_at = now
    if privacy_accepted and not application.privacy_accepted:
        application.privacy_accepted = True
        application.privacy_accepted_at = now
    application.workers_comp_exempt_sole_prop = workers_comp_exempt_sole_prop

    await db.commit()
    application = await get_application(db, application.id)
    logger.info(
        "Application %s %s for %s",
        application.id, "created" if created else "updated", caller.id,
    )
    return application, created


async def notify_submission(db: AsyncSession, application_id: str | None) -> SubmissionNotice:
    """Confirm receipt to the applicant and alert the admin inbox."""
    application = await _load_application(db, application_id)
    applicant_sent = await email_service.send_application_submitted(application.profile)
    admin_sent = await email_service.send_new_application_alert(application.profile)
    return SubmissionNotice(applicant_email_sent=applicant_sent, admin_email_sent=admin_sent)


# ---------------------------------------------------------------------------
# Admin review
# ---------------------------------------------------------------------------


async def approve(
    db: AsyncSession,
    caller: Caller | None,
    application_id: str | None,
    badge_level: str | None,
) -> EmailResult:
    """Send the welcome email carrying the granted badge level.

    The status write itself goes through update_status; this only notifies.
    """
    authorize(caller, RequiredRole.ADMIN)
    if not application_id or not badge_level:
        raise InvalidRequest("Application ID and badge level are required")
    badge = _parse_badge(badge_level)

    application = await _load_application(db, application_id)
    sent = await email_service.send_application_approved(application.profile, badge.value)
    if sent:
        return EmailResult(True, "Approval notification sent successfully")
    return EmailResult(False, "Application approved but email notification failed")


async def reject(
    db: AsyncSession,
    caller: Caller | None,
    application_id: str | None,
    admin_notes: str | None = None,
) -> EmailResult:
    """Mark an application rejected, audit it, and tell the applicant why."""
    caller = authorize(caller, RequiredRole.ADMIN)
    application = await _load_application(db, application_id)

    application.status = ApplicationStatus.REJECTED.value
    application.admin_notes = admin_notes or None
    application.reviewed_by = caller.id
    application.reviewed_at = datetime.now(timezone.utc)
    log_admin_action(
        db,
        caller.id,
        AuditAction.REJECTED_APPLICATION.value,
        AuditEntityType.APPLICATION,
        application.id,
        {"admin_notes": admin_notes},
    )
    await db.commit()
    logger.info("Application %s rejected by %s", application.id, caller.id)

    points = application.point_snapshot()
    sent = await email_service.send_application_rejected(
        application.profile, admin_notes or "", points
    )
    if sent:
        return EmailResult(True, "Application rejected and notification sent")
    return EmailResult(False, "Application rejected (email notification failed)")


async def update_status(
    db: AsyncSession,
    caller: Caller | None,
    application_id: str | None,
    new_status: str | None,
    admin_notes: str | None = None,
    badge_level: str | None = None,
) -> Application:
    """Admin status write. Approving also verifies the member's profile."""
    caller = authorize(caller, RequiredRole.ADMIN)
    if not new_status:
        raise InvalidRequest("New status is required")
    try:
        status = ApplicationStatus(new_status.lower())
    except ValueError:
        raise InvalidRequest(f"Invalid status: {new_status}")

    application = await _load_application(db, application_id)
    profile = application.profile
    badge = _parse_badge(badge_level) if badge_level else BadgeLevel(profile.badge_level)
    now = datetime.now(timezone.utc)

    if status == ApplicationStatus.APPROVED:
        profile.is_verified = True
        profile.badge_level = badge.value
        profile.verification_completed_at = now

    application.status = status.value
    application.admin_notes = admin_notes
    application.reviewed_by = caller.id
    application.reviewed_at = now

    action = (
        AuditAction.APPROVED_APPLICATION
        if status == ApplicationStatus.APPROVED
        else AuditAction.UPDATED_APPLICATION_STATUS
    )
    log_admin_action(
        db,
        caller.id,
        action.value,
        AuditEntityType.APPLICATION,
        application.id,
        {"new_status": status.value, "badge_assigned": badge.value},
    )
    await db.commit()
    logger.info("Application %s set to %s by %s", application.id, status.value, caller.id)
    return await get_application(db, application.id)


async def set_point_status(
    db: AsyncSession,
    caller: Caller | None,
    application_id: str | None,
    point: str | None,
    status: str | None,
) -> Application:
    """Mark one verification point verified or rejected."""
    caller = authorize(caller, RequiredRole.ADMIN)
    if point not in VERIFICATION_POINT_FIELDS:
        raise InvalidRequest(f"Unknown verification point: {point}")
    if status not in REVIEWABLE_POINT_STATUSES:
        raise InvalidRequest("Point status must be verified or rejected")

    application = await _load_application(db, application_id)
    setattr(application, point, status)
    application.reviewed_by = caller.id
    application.reviewed_at = datetime.now(timezone.utc)
    log_admin_action(
        db,
        caller.id,
        AuditAction.VERIFIED_POINT.value,
        AuditEntityType.APPLICATION,
        application.id,
        {"point": point, "status": status},
    )
    await db.commit()
    return await get_application(db, application.id)
