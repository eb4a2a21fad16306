"""HTTP tests for the application routes and the admin application endpoints."""

import pytest
from sqlalchemy import select

from proclusive_platform.domain.models import AdminAuditLog, Application, Profile


@pytest.fixture
async def admin(make_profile):
    return await make_profile(full_name="Alex Admin", is_admin=True)


@pytest.mark.asyncio
async def test_submit_application(client, make_profile, auth_headers, email_mock):
    member = await make_profile()
    response = await client.post(
        "/api/applications",
        json={"tosAccepted": True, "privacyAccepted": True},
        headers=auth_headers(member),
    )

    assert response.status_code == 201
    body = response.json()
    assert body["application"]["userId"] == member.id
    assert body["application"]["status"] == "pending"
    assert body["application"]["tosAccepted"] is True
    assert body["applicantEmailSent"] is True
    assert body["adminEmailSent"] is True


@pytest.mark.asyncio
async def test_notify_submission(client, make_application, auth_headers, email_mock):
    application = await make_application()
    email_mock.send_application_submitted.return_value = False

    response = await client.post(
        "/api/applications/notify-submission",
        json={"applicationId": application.id},
        headers=auth_headers(application.user_id),
    )

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "applicantEmailSent": False,
        "adminEmailSent": True,
        "message": "Emails sent - Applicant: false, Admin: true",
    }


@pytest.mark.asyncio
async def test_notify_submission_unknown_application(client, make_profile, auth_headers, email_mock):
    member = await make_profile()
    response = await client.post(
        "/api/applications/notify-submission",
        json={"applicationId": "missing"},
        headers=auth_headers(member),
    )
    assert response.status_code == 404
    assert response.json() == {"error": "Application not found"}


@pytest.mark.asyncio
async def test_approve_as_admin(client, admin, make_application, auth_headers, email_mock):
    application = await make_application()
    response = await client.post(
        "/api/applications/approve",
        json={"applicationId": application.id, "badgeLevel": "verified"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "emailSent": True,
        "message": "Approval notification sent successfully",
    }


@pytest.mark.asyncio
async def test_approve_missing_badge(client, admin, make_application, auth_headers, email_mock):
    application = await make_application()
    response = await client.post(
        "/api/applications/approve",
        json={"applicationId": application.id},
        headers=auth_headers(admin),
    )
    assert response.status_code == 400
    assert response.json() == {"error": "Application ID and badge level are required"}


@pytest.mark.asyncio
async def test_reject_as_admin(client, db_session, admin, make_application, auth_headers, email_mock):
    application = await make_application()
    response = await client.post(
        "/api/applications/reject",
        json={"applicationId": application.id, "adminNotes": "Insurance lapsed"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    assert response.json()["emailSent"] is True
    row = await db_session.get(Application, application.id, populate_existing=True)
    assert row.status == "rejected"
    assert row.admin_notes == "Insurance lapsed"


@pytest.mark.asyncio
@pytest.mark.parametrize("path", ["/api/applications/approve", "/api/applications/reject"])
async def test_member_cannot_review(client, db_session, make_application, auth_headers, email_mock, path):
    application = await make_application()
    response = await client.post(
        path,
        json={"applicationId": application.id, "badgeLevel": "verified"},
        headers=auth_headers(application.user_id),
    )

    assert response.status_code == 403
    assert response.json() == {"error": "Admin access required"}
    row = await db_session.get(Application, application.id, populate_existing=True)
    assert row.status == "pending"
    assert email_mock.send_application_approved.await_count == 0
    assert email_mock.send_application_rejected.await_count == 0


@pytest.mark.asyncio
async def test_review_without_session(client, make_application, email_mock):
    application = await make_application()
    response = await client.post(
        "/api/applications/reject", json={"applicationId": application.id}
    )
    assert response.status_code == 401


# ---------------------------------------------------------------------------
# Admin application endpoints
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_admin_approves_via_status(client, db_session, admin, make_application, auth_headers):
    application = await make_application()
    response = await client.post(
        f"/api/admin/applications/{application.id}/status",
        json={"newStatus": "approved", "badgeLevel": "vetted"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    assert response.json()["application"]["status"] == "approved"
    profile = await db_session.get(Profile, application.user_id, populate_existing=True)
    assert profile.is_verified is True
    assert profile.badge_level == "vetted"


@pytest.mark.asyncio
async def test_admin_sets_point_status(client, db_session, admin, make_application, auth_headers):
    application = await make_application()
    response = await client.post(
        f"/api/admin/applications/{application.id}/points",
        json={"point": "point_2_prof_license", "status": "rejected"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    row = await db_session.get(Application, application.id, populate_existing=True)
    assert row.point_2_prof_license == "rejected"
    audit = (
        await db_session.execute(
            select(AdminAuditLog).where(AdminAuditLog.entity_id == application.id)
        )
    ).scalars().all()
    assert [a.action for a in audit] == ["verified_point"]


@pytest.mark.asyncio
async def test_send_single_reminder(client, admin, make_application, auth_headers, email_mock):
    application = await make_application()
    response = await client.post(
        "/api/admin/send-single-reminder",
        json={"applicationId": application.id},
        headers=auth_headers(admin),
    )
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Reminder sent successfully"}


@pytest.mark.asyncio
async def test_send_single_reminder_email_failure(client, admin, make_application, auth_headers, email_mock):
    application = await make_application()
    email_mock.send_incomplete_application_reminder.return_value = False
    response = await client.post(
        "/api/admin/send-single-reminder",
        json={"applicationId": application.id},
        headers=auth_headers(admin),
    )
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to send email"}


@pytest.mark.asyncio
async def test_send_single_reminder_by_member(client, make_application, auth_headers, email_mock):
    application = await make_application()
    response = await client.post(
        "/api/admin/send-single-reminder",
        json={"applicationId": application.id},
        headers=auth_headers(application.user_id),
    )
    assert response.status_code == 403
    assert email_mock.send_incomplete_application_reminder.await_count == 0
