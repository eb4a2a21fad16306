"""Tests for the application review engine."""

import pytest
from sqlalchemy import select

from proclusive_platform.domain.enums import ApplicationStatus, BadgeLevel
from proclusive_platform.domain.exceptions import Forbidden, InvalidRequest, NotFound, Unauthorized
from proclusive_platform.domain.models import AdminAuditLog, Application, Profile
from proclusive_platform.services import application_service
from proclusive_platform.services.authorization import Caller


@pytest.fixture
async def admin(make_profile):
    profile = await make_profile(full_name="Alex Admin", is_admin=True)
    return Caller(id=profile.id, is_admin=True)


async def _audit_actions(db, entity_id) -> list[AdminAuditLog]:
    result = await db.execute(select(AdminAuditLog).where(AdminAuditLog.entity_id == entity_id))
    return list(result.scalars().all())


# ---------------------------------------------------------------------------
# Submission
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_submit_creates_pending_application(db_session, make_profile):
    member = await make_profile()
    application, created = await application_service.submit_application(
        db_session, Caller(id=member.id), tos_accepted=True, privacy_accepted=False
    )

    assert created is True
    assert application.status == ApplicationStatus.PENDING.value
    assert application.tos_accepted is True
    assert application.tos_accepted_at is not None
    assert application.privacy_accepted is False
    assert application.point_1_business_reg == "not_submitted"
    assert application.reminder_count == 0


@pytest.mark.asyncio
async def test_submit_again_updates_the_same_application(db_session, make_profile):
    member = await make_profile()
    caller = Caller(id=member.id)
    first, _ = await application_service.submit_application(db_session, caller, False, False)
    second, created = await application_service.submit_application(db_session, caller, True, True)

    assert created is False
    assert second.id == first.id
    assert second.privacy_accepted is True
    count = (await db_session.execute(select(Application))).scalars().all()
    assert len(count) == 1


@pytest.mark.asyncio
async def test_notify_submission_reports_both_flags(db_session, make_application, email_mock):
    application = await make_application()
    email_mock.send_new_application_alert.return_value = False

    notice = await application_service.notify_submission(db_session, application.id)

    assert notice.applicant_email_sent is True
    assert notice.admin_email_sent is False
    assert notice.message == "Emails sent - Applicant: true, Admin: false"


# ---------------------------------------------------------------------------
# Approve / reject
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_approve_sends_badge(db_session, make_application, admin, email_mock):
    application = await make_application()
    result = await application_service.approve(db_session, admin, application.id, "vetted")

    assert result.email_sent is True
    assert result.message == "Approval notification sent successfully"
    _, badge = email_mock.send_application_approved.await_args.args
    assert badge == "vetted"


@pytest.mark.asyncio
async def test_approve_succeeds_when_email_fails(db_session, make_application, admin, email_mock):
    application = await make_application()
    email_mock.send_application_approved.return_value = False

    result = await application_service.approve(db_session, admin, application.id, "elite")

    assert result.email_sent is False
    assert result.message == "Application approved but email notification failed"


@pytest.mark.asyncio
async def test_approve_requires_badge(db_session, make_application, admin, email_mock):
    application = await make_application()
    with pytest.raises(InvalidRequest, match="Application ID and badge level are required"):
        await application_service.approve(db_session, admin, application.id, None)


@pytest.mark.asyncio
async def test_reject_writes_status_and_audit(db_session, make_application, admin, email_mock):
    application = await make_application(point_1_business_reg="verified")
    result = await application_service.reject(
        db_session, admin, application.id, admin_notes="License expired"
    )

    assert result.email_sent is True
    assert result.message == "Application rejected and notification sent"

    row = await db_session.get(Application, application.id, populate_existing=True)
    assert row.status == ApplicationStatus.REJECTED.value
    assert row.admin_notes == "License expired"
    assert row.reviewed_by == admin.id
    assert row.reviewed_at is not None

    audit = await _audit_actions(db_session, application.id)
    assert [(a.action, a.details) for a in audit] == [
        ("rejected_application", {"admin_notes": "License expired"})
    ]

    _, notes, points = email_mock.send_application_rejected.await_args.args
    assert notes == "License expired"
    assert len(points) == 15
    assert points[0] == {"key": "point_1_business_reg", "status": "verified"}


@pytest.mark.asyncio
async def test_reject_reports_email_failure(db_session, make_application, admin, email_mock):
    application = await make_application()
    email_mock.send_application_rejected.return_value = False

    result = await application_service.reject(db_session, admin, application.id)

    assert result.email_sent is False
    assert result.message == "Application rejected (email notification failed)"
    row = await db_session.get(Application, application.id, populate_existing=True)
    assert row.status == ApplicationStatus.REJECTED.value


@pytest.mark.asyncio
@pytest.mark.parametrize("operation", ["approve", "reject"])
async def test_non_admin_cannot_review(db_session, make_application, email_mock, operation):
    application = await make_application()
    member = Caller(id=application.user_id, is_admin=False)

    with pytest.raises(Forbidden):
        if operation == "approve":
            await application_service.approve(db_session, member, application.id, "verified")
        else:
            await application_service.reject(db_session, member, application.id, "nope")
    with pytest.raises(Unauthorized):
        await application_service.reject(db_session, None, application.id)

    row = await db_session.get(Application, application.id, populate_existing=True)
    assert row.status == ApplicationStatus.PENDING.value
    assert await _audit_actions(db_session, application.id) == []
    assert email_mock.send_application_approved.await_count == 0
    assert email_mock.send_application_rejected.await_count == 0


@pytest.mark.asyncio
async def test_reject_unknown_application(db_session, admin, email_mock):
    with pytest.raises(NotFound, match="Application not found"):
        await application_service.reject(db_session, admin, "missing")


# ---------------------------------------------------------------------------
# Admin status writes
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_update_status_approved_verifies_profile(db_session, make_application, admin):
    application = await make_application()
    updated = await application_service.update_status(
        db_session, admin, application.id, "approved", admin_notes="Welcome", badge_level="elite"
    )

    assert updated.status == ApplicationStatus.APPROVED.value
    profile = await db_session.get(Profile, application.user_id, populate_existing=True)
    assert profile.is_verified is True
    assert profile.badge_level == BadgeLevel.ELITE.value
    assert profile.verification_completed_at is not None

    audit = await _audit_actions(db_session, application.id)
    assert audit[0].action == "approved_application"
    assert audit[0].details == {"new_status": "approved", "badge_assigned": "elite"}


@pytest.mark.asyncio
async def test_update_status_other_leaves_profile(db_session, make_application, admin):
    application = await make_application()
    await application_service.update_status(db_session, admin, application.id, "under_review")

    profile = await db_session.get(Profile, application.user_id, populate_existing=True)
    assert profile.is_verified is False
    audit = await _audit_actions(db_session, application.id)
    assert audit[0].action == "updated_application_status"


@pytest.mark.asyncio
async def test_update_status_rejects_unknown_status(db_session, make_application, admin):
    application = await make_application()
    with pytest.raises(InvalidRequest):
        await application_service.update_status(db_session, admin, application.id, "archived")


@pytest.mark.asyncio
async def test_set_point_status(db_session, make_application, admin):
    application = await make_application()
    updated = await application_service.set_point_status(
        db_session, admin, application.id, "point_7_references", "verified"
    )

    assert updated.point_7_references == "verified"
    assert updated.reviewed_by == admin.id
    audit = await _audit_actions(db_session, application.id)
    assert audit[0].action == "verified_point"
    assert audit[0].details == {"point": "point_7_references", "status": "verified"}


@pytest.mark.asyncio
async def test_set_point_status_validates_input(db_session, make_application, admin):
    application = await make_application()
    with pytest.raises(InvalidRequest):
        await application_service.set_point_status(
            db_session, admin, application.id, "point_99_unknown", "verified"
        )
    with pytest.raises(InvalidRequest):
        await application_service.set_point_status(
            db_session, admin, application.id, "point_1_business_reg", "pending"
        )
