"""SendGrid email service for Proclusive.

Sends member notifications and admin alerts for applications and referrals.
Uses asyncio.to_thread to wrap the synchronous SendGrid client. Every public
function returns True on success and False on failure; none of them raise.
"""

import asyncio
import logging

import sendgrid
from sendgrid.helpers.mail import Content, Email, HtmlContent, Mail, To

from proclusive_platform.services import email_templates as templates

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Configuration (read from Pydantic settings, which loads .env)
# ---------------------------------------------------------------------------


def _get_config():
    """Get email config from app settings (lazy to avoid import-time issues)."""
    from proclusive_platform.app.config import get_settings
    s = get_settings()
    return s.sendgrid_api_key, s.sendgrid_from_email, s.sendgrid_admin_email


def _app_url() -> str:
    from proclusive_platform.app.config import get_settings
    return get_settings().app_url.rstrip("/")


def _get_client() -> sendgrid.SendGridAPIClient:
    """Return a configured SendGrid API client."""
    api_key, _, _ = _get_config()
    return sendgrid.SendGridAPIClient(api_key=api_key)


def _send_mail(mail: Mail) -> bool:
    """Synchronous send via SendGrid. Returns True on success."""
    client = _get_client()
    response = client.send(mail)
    if response.status_code in (200, 201, 202):
        return True
    logger.error(
        "SendGrid returned status %s: %s",
        response.status_code,
        response.body,
    )
    return False


async def _deliver(to_email: str, message: tuple[str, str, str], label: str) -> bool:
    """Send one templated message. Never raises."""
    api_key, from_email, _ = _get_config()
    if not api_key:
        logger.warning("SENDGRID_API_KEY not set, skipping %s email", label)
        return False
    if not to_email:
        logger.warning("No recipient address for %s email", label)
        return False

    subject, html_body, text_body = message
    try:
        mail = Mail(
            from_email=Email(from_email, "Proclusive"),
            to_emails=To(to_email),
            subject=subject,
        )
        mail.add_content(Content("text/plain", text_body))
        mail.add_content(HtmlContent(html_body))
        result = await asyncio.to_thread(_send_mail, mail)
        if result:
            logger.info("[SendGrid] %s email sent to %s", label, to_email)
        return result
    except Exception:
        logger.exception("[SendGrid] Failed to send %s email to %s", label, to_email)
        return False


def _admin_email() -> str:
    _, _, admin_email = _get_config()
    return admin_email


# ---------------------------------------------------------------------------
# Applications
# ---------------------------------------------------------------------------


async def send_application_submitted(applicant) -> bool:
    """Confirm receipt of a vetting application to the applicant."""
    message = templates.build_application_submitted(applicant.full_name)
    return await _deliver(applicant.email, message, "application submitted")


async def send_new_application_alert(applicant) -> bool:
    """Alert the admin inbox that a new application arrived."""
    message = templates.build_new_application_alert(
        applicant.full_name,
        applicant.email,
        applicant.company_name,
        applicant.primary_trade,
        _app_url(),
    )
    return await _deliver(_admin_email(), message, "new application alert")


async def send_application_rejected(applicant, admin_notes: str | None, points: list[dict]) -> bool:
    """Tell the applicant what needs correcting.

    Args:
        applicant: Profile of the applicant.
        admin_notes: Free-text reviewer notes, rendered verbatim.
        points: ``[{key, status}]`` snapshot of all 15 verification points.
    """
    message = templates.build_application_rejected(
        applicant.full_name, admin_notes, points, _app_url()
    )
    return await _deliver(applicant.email, message, "application rejected")


async def send_incomplete_application_reminder(applicant, incomplete_steps: list[str]) -> bool:
    message = templates.build_incomplete_reminder(
        applicant.full_name, incomplete_steps, _app_url()
    )
    return await _deliver(applicant.email, message, "incomplete application reminder")


async def send_application_approved(applicant, badge_level: str) -> bool:
    message = templates.build_application_approved(
        applicant.full_name, badge_level, _app_url()
    )
    return await _deliver(applicant.email, message, "application approved")


# ---------------------------------------------------------------------------
# Referrals
# ---------------------------------------------------------------------------


async def send_referral_submitted_confirmation(submitter, referral) -> bool:
    message = templates.build_referral_submitted(
        submitter.full_name,
        referral.reference_number,
        referral.project_type,
        referral.value_range,
        _app_url(),
    )
    return await _deliver(submitter.email, message, "referral submitted")


async def send_new_referral_alert(referral, submitter) -> bool:
    message = templates.build_new_referral_alert(
        referral.reference_number,
        submitter.full_name,
        submitter.company_name,
        referral.project_type,
        referral.value_range,
        referral.location,
        _app_url(),
    )
    return await _deliver(_admin_email(), message, "new referral alert")


async def send_matched_referral(referral, member) -> bool:
    """Notify the matched member. The only message that carries client contact details."""
    message = templates.build_matched_referral(
        member.full_name,
        referral.reference_number,
        referral.project_type,
        referral.value_range,
        referral.location,
        referral.client_name,
        referral.client_email,
        referral.client_phone,
        _app_url(),
    )
    return await _deliver(member.email, message, "matched referral")


async def send_referral_status_update(recipient, referral, stage: str, update_date: str) -> bool:
    message = templates.build_referral_status_update(
        recipient.full_name, referral.reference_number, stage, update_date, _app_url()
    )
    return await _deliver(recipient.email, message, f"referral {stage} update")


async def send_referral_completed(recipient, referral, final_value: str, completion_date: str) -> bool:
    message = templates.build_referral_completed(
        recipient.full_name,
        referral.reference_number,
        referral.project_type,
        final_value,
        completion_date,
    )
    return await _deliver(recipient.email, message, "referral completed")
