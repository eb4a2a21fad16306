"""Tests for the SendGrid email gateway and its templates."""

from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from proclusive_platform.services import email_service
from proclusive_platform.services import email_templates as templates

CONFIG = ("SG.test-key", "noreply@proclusive.com", "admin@proclusive.com")

MEMBER = SimpleNamespace(
    id="m1",
    full_name="Morgan Member",
    email="morgan@example.com",
    company_name="Member Builders",
    primary_trade="Electrical",
)

REFERRAL = SimpleNamespace(
    reference_number="REF-1A2B3C4D",
    project_type="Kitchen Remodel",
    value_range="$50k-$100k",
    location="Arlington, VA",
    client_name="Avery Client",
    client_email="avery@client.com",
    client_phone="+12025550100",
)


def _sent_text(mail) -> str:
    """Plain-text body of a captured Mail."""
    return mail.get()["content"][0]["value"]


# ---------------------------------------------------------------------------
# Gateway behaviour
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_missing_api_key_skips_send():
    send = MagicMock(return_value=True)
    with patch.object(email_service, "_get_config", return_value=("", *CONFIG[1:])), patch.object(
        email_service, "_send_mail", send
    ):
        assert await email_service.send_application_submitted(MEMBER) is False
    send.assert_not_called()


@pytest.mark.asyncio
async def test_successful_send():
    send = MagicMock(return_value=True)
    with patch.object(email_service, "_get_config", return_value=CONFIG), patch.object(
        email_service, "_send_mail", send
    ):
        assert await email_service.send_application_submitted(MEMBER) is True

    mail = send.call_args.args[0]
    payload = mail.get()
    assert payload["personalizations"][0]["to"][0]["email"] == "morgan@example.com"
    assert payload["from"]["email"] == "noreply@proclusive.com"
    assert [c["type"] for c in payload["content"]] == ["text/plain", "text/html"]


@pytest.mark.asyncio
async def test_admin_alert_goes_to_admin_inbox():
    send = MagicMock(return_value=True)
    with patch.object(email_service, "_get_config", return_value=CONFIG), patch.object(
        email_service, "_send_mail", send
    ):
        assert await email_service.send_new_application_alert(MEMBER) is True

    payload = send.call_args.args[0].get()
    assert payload["personalizations"][0]["to"][0]["email"] == "admin@proclusive.com"


@pytest.mark.asyncio
async def test_provider_exception_returns_false():
    with patch.object(email_service, "_get_config", return_value=CONFIG), patch.object(
        email_service, "_send_mail", MagicMock(side_effect=RuntimeError("connection reset"))
    ):
        assert await email_service.send_application_approved(MEMBER, "vetted") is False


@pytest.mark.asyncio
async def test_provider_rejection_returns_false():
    with patch.object(email_service, "_get_config", return_value=CONFIG), patch.object(
        email_service, "_send_mail", MagicMock(return_value=False)
    ):
        assert await email_service.send_new_referral_alert(REFERRAL, MEMBER) is False


@pytest.mark.asyncio
async def test_matched_email_carries_client_contact():
    send = MagicMock(return_value=True)
    with patch.object(email_service, "_get_config", return_value=CONFIG), patch.object(
        email_service, "_send_mail", send
    ):
        assert await email_service.send_matched_referral(REFERRAL, MEMBER) is True

    text = _sent_text(send.call_args.args[0])
    assert "avery@client.com" in text
    assert "+12025550100" in text


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------


class TestTemplates:
    def test_format_date(self):
        assert templates.format_date(datetime(2026, 3, 5, tzinfo=timezone.utc)) == "March 5, 2026"

    def test_first_name(self):
        assert templates.first_name("Morgan Member") == "Morgan"

    def test_submitter_confirmation_hides_client_contact(self):
        subject, html, text = templates.build_referral_submitted(
            "Sam Submitter", "REF-1A2B3C4D", "Deck", "$10k-$25k", "http://app"
        )
        assert "REF-1A2B3C4D" in text
        assert "@client.com" not in html

    def test_rejection_lists_only_unverified_points(self):
        points = [
            {"key": "point_1_business_reg", "status": "verified"},
            {"key": "point_3_liability_ins", "status": "rejected"},
        ]
        _, _, text = templates.build_application_rejected(
            "Jordan Rivera", "Insurance lapsed", points, "http://app"
        )
        assert "Insurance lapsed" in text
        assert templates.POINT_LABELS["point_3_liability_ins"] in text
        assert templates.POINT_LABELS["point_1_business_reg"] not in text

    def test_status_update_stage_copy(self):
        _, _, text = templates.build_referral_status_update(
            "Sam Submitter", "REF-1", "engaged", "March 5, 2026", "http://app"
        )
        assert templates.STAGE_MESSAGES["engaged"] in text

    def test_reminder_lists_steps(self):
        _, html, text = templates.build_incomplete_reminder(
            "Jordan Rivera", ["Accept Terms of Service"], "http://app"
        )
        assert "Accept Terms of Service" in text
        assert "http://app/vetting" in text
