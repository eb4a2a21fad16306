"""HTML and plain-text bodies for Proclusive transactional email.

Each ``build_*`` function returns ``(subject, html, text)``.
"""

from datetime import datetime, timezone
from html import escape

_P = 'style="color: #b0b2bc; line-height: 1.7; font-size: 15px;"'
_LABEL = 'style="padding: 8px 0; color: #6a6d78; width: 120px;"'
_VALUE = 'style="padding: 8px 0; color: #f8f8fa;"'
_ACCENT = 'style="padding: 8px 0; color: #c9a962; font-weight: 600;"'

TEAM_SIGNATURE = "Warm regards,\nThe Proclusive Team"

# Human-readable names for the 15 verification points
POINT_LABELS: dict[str, str] = {
    "point_1_business_reg": "Business Registration",
    "point_2_prof_license": "Professional License",
    "point_3_liability_ins": "Liability Insurance",
    "point_4_workers_comp": "Workers' Compensation",
    "point_5_contact_verify": "Contact Verification",
    "point_6_portfolio": "Portfolio",
    "point_7_references": "Client References",
    "point_8_certifications": "Certifications",
    "point_9_financial": "Financial Standing",
    "point_10_legal_record": "Legal Record",
    "point_11_operating_history": "Operating History",
    "point_12_industry_awards": "Industry Awards",
    "point_13_satisfaction": "Client Satisfaction",
    "point_14_network_contrib": "Network Contribution",
    "point_15_enterprise": "Enterprise Readiness",
}

STAGE_LABELS = {
    "reviewed": "Reviewed",
    "matched": "Matched",
    "engaged": "Engaged",
}

STAGE_MESSAGES = {
    "reviewed": "Your referral has been verified and is being matched with the right member.",
    "matched": "A qualified member has been connected with this opportunity.",
    "engaged": "Active discussions are underway between the member and the client.",
}


def first_name(full_name: str) -> str:
    return full_name.split(" ")[0] or full_name


def format_date(value: datetime | None = None) -> str:
    """Render a date as ``Month D, YYYY``."""
    d = value or datetime.now(timezone.utc)
    return f"{d:%B} {d.day}, {d.year}"


def _wrap(content: str, signature: bool = True) -> str:
    footer = ""
    if signature:
        footer = """
      <div style="margin-top: 40px; padding-top: 24px; border-top: 1px solid rgba(255, 255, 255, 0.08);">
        <p style="color: #b0b2bc; font-size: 13px; margin: 0 0 4px 0;">Warm regards,</p>
        <p style="color: #f8f8fa; font-size: 13px; margin: 0; font-weight: 600;">The Proclusive Team</p>
      </div>"""
    return f"""
    <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; background-color: #1a1d27; color: #f8f8fa; padding: 32px; border-radius: 8px;">
      <div style="text-align: center; margin-bottom: 32px;">
        <h1 style="color: #c9a962; font-family: 'Cormorant Garamond', Georgia, serif; font-size: 32px; margin: 0 0 8px 0; letter-spacing: 0.1em;">PROCLUSIVE</h1>
        <div style="height: 1px; background: linear-gradient(90deg, transparent, #c9a962, transparent); margin: 16px 0;"></div>
      </div>
      {content}{footer}
    </div>
"""


def _button(text: str, url: str) -> str:
    return f"""
    <div style="text-align: center; margin: 32px 0;">
      <a href="{url}" style="display: inline-block; background-color: #c9a962; color: #1a1d27; padding: 14px 28px; text-decoration: none; border-radius: 6px; font-weight: 600; font-size: 14px; letter-spacing: 0.5px;">{text}</a>
    </div>
"""


def _panel(title: str, rows: list[tuple[str, str | None]], accent_label: str | None = None) -> str:
    """Boxed table of label/value rows. Rows with an empty value are skipped."""
    body = ""
    for label, value in rows:
        if not value:
            continue
        style = _ACCENT if label == accent_label else _VALUE
        body += f"<tr><td {_LABEL}>{label}:</td><td {style}>{escape(str(value))}</td></tr>"
    return f"""
    <div style="background-color: #252833; padding: 24px; border-radius: 8px; margin: 24px 0; border: 1px solid rgba(201, 169, 98, 0.2);">
      <h3 style="margin-top: 0; color: #c9a962; font-size: 16px; margin-bottom: 16px;">{title}</h3>
      <table style="width: 100%; border-collapse: collapse;">{body}</table>
    </div>
"""


def _text_rows(rows: list[tuple[str, str | None]]) -> str:
    return "\n".join(f"- {label}: {value}" for label, value in rows if value)


# ---------------------------------------------------------------------------
# Applications
# ---------------------------------------------------------------------------


def build_application_submitted(full_name: str) -> tuple[str, str, str]:
    name = first_name(full_name)
    paragraphs = [
        "Thank you for applying to join Proclusive. We've received your application "
        "and our team is reviewing your submission.",
        "Here's what happens next: We'll verify your credentials and professional "
        "background as part of our Vetting-as-a-Service (VaaS) process. Most "
        "applications are reviewed within 3-5 business days.",
        "If we need any additional information, we'll reach out directly. In the "
        "meantime, if you have questions, simply reply to this email.",
        "We appreciate your interest in joining a network built on trust and quality.",
    ]
    html = f"<p {_P}>Hi {escape(name)},</p>" + "".join(f"<p {_P}>{p}</p>" for p in paragraphs)
    text = f"Hi {name},\n\n" + "\n\n".join(paragraphs) + f"\n\n{TEAM_SIGNATURE}"
    return "We've Received Your Application", _wrap(html), text


def build_new_application_alert(
    full_name: str,
    email: str,
    company_name: str | None,
    primary_trade: str | None,
    app_url: str,
) -> tuple[str, str, str]:
    subject = f"New Application: {full_name}"
    if company_name:
        subject += f" — {company_name}"
    rows = [
        ("Name", full_name),
        ("Company", company_name),
        ("Email", email),
        ("Service Category", primary_trade),
        ("Submitted", format_date()),
    ]
    url = f"{app_url}/admin/dashboard"
    html = (
        f"<p {_P}>New membership application received.</p>"
        + _panel("Applicant Details", rows)
        + _button("Review Application", url)
    )
    text = (
        "New membership application received.\n\nApplicant Details:\n"
        f"{_text_rows(rows)}\n\nReview Application: {url}"
    )
    return subject, _wrap(html), text


def build_application_rejected(
    full_name: str, admin_notes: str | None, points: list[dict], app_url: str
) -> tuple[str, str, str]:
    """Rejection notice listing every verification point that is not verified."""
    name = first_name(full_name)
    notes = admin_notes or "Please review your application for any missing or incomplete information."
    outstanding = [
        (POINT_LABELS.get(p["key"], p["key"]), p["status"].replace("_", " "))
        for p in points
        if p["status"] != "verified"
    ]
    url = f"{app_url}/vetting"

    html = (
        f"<p {_P}>Hi {escape(name)},</p>"
        f"<p {_P}>Thank you for your interest in joining Proclusive. After reviewing your "
        "application, we need to bring something to your attention.</p>"
        '<div style="background-color: rgba(201, 169, 98, 0.1); padding: 20px; border-radius: 8px; '
        'margin: 24px 0; border: 1px solid rgba(201, 169, 98, 0.3);">'
        f'<p style="color: #f8f8fa; font-size: 15px; line-height: 1.7; margin: 0; white-space: pre-wrap;">{escape(notes)}</p>'
        "</div>"
    )
    if outstanding:
        html += _panel("Verification Items Outstanding", outstanding)
    html += (
        f"<p {_P}>We'd be happy to reconsider your application once this is addressed. "
        "Please reply to this email with any questions, or log in to update your application:</p>"
        + _button("Update My Application", url)
        + f"<p {_P}>We appreciate your understanding and look forward to working with you.</p>"
    )

    text = (
        f"Hi {name},\n\n"
        "Thank you for your interest in joining Proclusive. After reviewing your application, "
        f"we need to bring something to your attention.\n\n{notes}\n\n"
    )
    if outstanding:
        text += f"Verification items outstanding:\n{_text_rows(outstanding)}\n\n"
    text += (
        "We'd be happy to reconsider your application once this is addressed. Please reply to "
        f"this email with any questions, or log in to update your application:\n\n{url}\n\n"
        "We appreciate your understanding and look forward to working with you.\n\n"
        f"{TEAM_SIGNATURE}"
    )
    return "Your Proclusive Application — Action Needed", _wrap(html), text


def build_incomplete_reminder(
    full_name: str, incomplete_steps: list[str], app_url: str
) -> tuple[str, str, str]:
    name = first_name(full_name)
    url = f"{app_url}/vetting"
    items = "".join(
        f'<li style="color: #b0b2bc; padding: 4px 0;">{escape(step)}</li>' for step in incomplete_steps
    )
    html = (
        f"<p {_P}>Hi {escape(name)},</p>"
        f"<p {_P}>We noticed you started your Proclusive membership application but "
        "haven't completed all the steps yet.</p>"
        '<div style="background-color: #252833; padding: 24px; border-radius: 8px; margin: 24px 0; '
        'border: 1px solid rgba(255, 255, 255, 0.08);">'
        '<h3 style="margin-top: 0; color: #c9a962; font-size: 16px; margin-bottom: 12px;">Remaining Steps:</h3>'
        f'<ul style="margin: 0; padding-left: 20px;">{items}</ul>'
        "</div>"
        f"<p {_P}>Pick up where you left off:</p>"
        + _button("Complete My Application", url)
        + f"<p {_P}>If you have questions or need assistance, simply reply to this email. "
        "We're here to help.</p>"
        f"<p {_P}>Looking forward to welcoming you to the network.</p>"
    )
    steps = "\n".join(f"- {step}" for step in incomplete_steps)
    text = (
        f"Hi {name},\n\n"
        "We noticed you started your Proclusive membership application but haven't completed "
        f"all the steps yet.\n\nRemaining steps:\n{steps}\n\n"
        f"Pick up where you left off: {url}\n\n"
        "If you have questions or need assistance, simply reply to this email. We're here to help.\n\n"
        "Looking forward to welcoming you to the network.\n\n"
        f"{TEAM_SIGNATURE}"
    )
    return "Complete Your Proclusive Application", _wrap(html), text


def build_application_approved(
    full_name: str, badge_level: str, app_url: str
) -> tuple[str, str, str]:
    """Welcome email. Signed by the founder rather than the team."""
    name = first_name(full_name)
    url = f"{app_url}/dashboard"
    badge = badge_level.replace("_", " ").title()
    steps = [
        ("Log in to your dashboard", ""),
        ("Complete your profile", "A polished profile helps other members find and trust you."),
        (
            "Explore the Member Directory",
            "Connect with architects, contractors, designers, and specialists across the DC Metro area.",
        ),
        (
            "Submit your first referral",
            "When you know someone who needs quality work, send them to a fellow member.",
        ),
    ]
    items = "".join(
        f'<li><strong style="color: #f8f8fa;">{title}</strong>{": " + detail if detail else ""}</li>'
        for title, detail in steps
    )
    html = (
        f"<p {_P}>Hi {escape(name)},</p>"
        f'<p {_P}><strong style="color: #c9a962;">Congratulations</strong>: your membership has been '
        "approved. Welcome to Proclusive.</p>"
        f'<p {_P}>Your badge level: <strong style="color: #c9a962;">{escape(badge)}</strong></p>'
        f"<p {_P}>You now have access to a network of verified professionals in the built "
        "environment. Here's how to get started:</p>"
        '<div style="background-color: #252833; padding: 24px; border-radius: 8px; margin: 24px 0; '
        'border: 1px solid rgba(255, 255, 255, 0.08);">'
        f'<ol style="margin: 0; padding-left: 20px; color: #b0b2bc; line-height: 2;">{items}</ol>'
        "</div>"
        + _button("Go to Dashboard", url)
        + f"<p {_P}>Questions? Reply to this email anytime. We're here to help you make the most "
        "of your membership.</p>"
        f"<p {_P}>Welcome aboard.</p>"
        '<div style="margin-top: 40px; padding-top: 24px; border-top: 1px solid rgba(255, 255, 255, 0.08);">'
        '<p style="color: #b0b2bc; font-size: 13px; margin: 0 0 4px 0;">Warm regards,</p>'
        '<p style="color: #f8f8fa; font-size: 13px; margin: 0; font-weight: 600;">Michelle Liefke</p>'
        '<p style="color: #6a6d78; font-size: 12px; margin: 4px 0 0 0;">Founder &amp; CEO, Proclusive</p>'
        "</div>"
    )
    numbered = "\n".join(
        f"{i}. {title}" + (f": {detail}" if detail else f": {url}")
        for i, (title, detail) in enumerate(steps, start=1)
    )
    text = (
        f"Hi {name},\n\n"
        "Congratulations: your membership has been approved. Welcome to Proclusive.\n\n"
        f"Your badge level: {badge}\n\n"
        "You now have access to a network of verified professionals in the built environment. "
        f"Here's how to get started:\n\n{numbered}\n\n"
        "Questions? Reply to this email anytime. We're here to help you make the most of your "
        "membership.\n\nWelcome aboard.\n\n"
        "Warm regards,\nMichelle Liefke\nFounder & CEO, Proclusive"
    )
    return "Welcome to Proclusive — You're In", _wrap(html, signature=False), text


# ---------------------------------------------------------------------------
# Referrals
# ---------------------------------------------------------------------------


def build_referral_submitted(
    full_name: str, reference: str, project_type: str, value_range: str | None, app_url: str
) -> tuple[str, str, str]:
    name = first_name(full_name)
    url = f"{app_url}/dashboard/referrals"
    rows = [
        ("Reference", reference),
        ("Project Type", project_type),
        ("Estimated Value", value_range),
        ("Status", "Submitted"),
    ]
    html = (
        f"<p {_P}>Hi {escape(name)},</p>"
        f"<p {_P}>Thank you for submitting a referral through Proclusive. We've received it "
        "and our team is reviewing the details.</p>"
        + _panel("Referral Summary", rows, accent_label="Status")
        + f"<p {_P}>Once we match your referral with the right member, you'll receive an "
        "update. You can track progress anytime in your dashboard:</p>"
        + _button("View Dashboard", url)
        + f"<p {_P}>Thank you for strengthening the network.</p>"
    )
    text = (
        f"Hi {name},\n\n"
        "Thank you for submitting a referral through Proclusive. We've received it and our team "
        f"is reviewing the details.\n\nReferral Summary:\n{_text_rows(rows)}\n\n"
        "Once we match your referral with the right member, you'll receive an update. You can "
        f"track progress anytime in your dashboard: {url}\n\n"
        f"Thank you for strengthening the network.\n\n{TEAM_SIGNATURE}"
    )
    return f"Referral Submitted — {reference}", _wrap(html), text


def build_new_referral_alert(
    reference: str,
    submitter_name: str,
    submitter_company: str,
    project_type: str,
    value_range: str | None,
    location: str,
    app_url: str,
) -> tuple[str, str, str]:
    url = f"{app_url}/admin/referrals"
    rows = [
        ("Reference", reference),
        ("Submitted by", f"{submitter_name} ({submitter_company})"),
        ("Project Type", project_type),
        ("Estimated Value", value_range),
        ("Location", location),
    ]
    html = (
        f"<p {_P}>New referral submitted and ready for review.</p>"
        + _panel("Referral Details", rows)
        + _button("Review Referral", url)
    )
    text = (
        "New referral submitted and ready for review.\n\nReferral Details:\n"
        f"{_text_rows(rows)}\n\nReview Referral: {url}"
    )
    return f"New Referral: {reference} — {project_type}", _wrap(html), text


def build_matched_referral(
    full_name: str,
    reference: str,
    project_type: str,
    value_range: str | None,
    location: str,
    client_name: str,
    client_email: str | None,
    client_phone: str | None,
    app_url: str,
) -> tuple[str, str, str]:
    """The matched member's notice. Carries the client's contact details."""
    name = first_name(full_name)
    url = f"{app_url}/dashboard/referrals"
    overview = [
        ("Reference", reference),
        ("Project Type", project_type),
        ("Estimated Value", value_range),
        ("Location", location),
    ]
    contact = [
        ("Client", client_name),
        ("Email", client_email),
        ("Phone", client_phone),
    ]
    html = (
        f"<p {_P}>Hi {escape(name)},</p>"
        f"<p {_P}>A new project opportunity has been matched to you through Proclusive.</p>"
        + _panel("Project Overview", overview)
        + _panel("Client Contact", contact)
        + f"<p {_P}>Log in to view full details and respond:</p>"
        + _button("View Referral Details", url)
        + f"<p {_P}>We recommend reaching out promptly. Quality referrals move quickly.</p>"
        f"<p {_P}>Best of luck with this opportunity.</p>"
    )
    text = (
        f"Hi {name},\n\n"
        "A new project opportunity has been matched to you through Proclusive.\n\n"
        f"Project Overview:\n{_text_rows(overview)}\n\n"
        f"Client Contact:\n{_text_rows(contact)}\n\n"
        f"Log in to view full details and respond: {url}\n\n"
        "We recommend reaching out promptly. Quality referrals move quickly.\n\n"
        f"Best of luck with this opportunity.\n\n{TEAM_SIGNATURE}"
    )
    return "Great News — You Have a Referral", _wrap(html), text


def build_referral_status_update(
    full_name: str, reference: str, stage: str, update_date: str, app_url: str
) -> tuple[str, str, str]:
    name = first_name(full_name)
    url = f"{app_url}/dashboard/referrals"
    rows = [
        ("Reference", reference),
        ("Stage", STAGE_LABELS[stage]),
        ("Updated", update_date),
    ]
    message = STAGE_MESSAGES[stage]
    html = (
        f"<p {_P}>Hi {escape(name)},</p>"
        f"<p {_P}>Your referral has moved to a new stage.</p>"
        + _panel("Current Status", rows, accent_label="Stage")
        + '<div style="background-color: rgba(201, 169, 98, 0.1); padding: 16px 20px; border-radius: 8px; '
        'margin: 24px 0; border-left: 4px solid #c9a962;">'
        f'<p style="color: #f8f8fa; font-size: 14px; line-height: 1.6; margin: 0;">{message}</p>'
        "</div>"
        f"<p {_P}>Track all activity in your dashboard:</p>"
        + _button("View Dashboard", url)
    )
    text = (
        f"Hi {name},\n\nYour referral has moved to a new stage.\n\n"
        f"Current Status:\n{_text_rows(rows)}\n\n{message}\n\n"
        f"Track all activity in your dashboard: {url}\n\n{TEAM_SIGNATURE}"
    )
    return f"Referral Update — {reference}", _wrap(html), text


def build_referral_completed(
    full_name: str, reference: str, project_type: str, final_value: str, completion_date: str
) -> tuple[str, str, str]:
    name = first_name(full_name)
    rows = [
        ("Reference", reference),
        ("Project Type", project_type),
        ("Final Value", final_value),
        ("Closed", completion_date),
    ]
    feedback = (
        "How did this referral go? Your input helps us improve the matching process and build "
        "success stories for the network."
    )
    html = (
        f"<p {_P}>Hi {escape(name)},</p>"
        f"<p {_P}>Great news: your referral has been successfully completed.</p>"
        + _panel("Final Summary", rows)
        + '<div style="background-color: rgba(201, 169, 98, 0.1); padding: 20px; border-radius: 8px; '
        'margin: 24px 0; border: 1px solid rgba(201, 169, 98, 0.3);">'
        '<h3 style="margin-top: 0; color: #c9a962; font-size: 16px; margin-bottom: 8px;">We\'d love your feedback.</h3>'
        f'<p style="color: #b0b2bc; font-size: 14px; line-height: 1.6; margin: 0;">{feedback}</p>'
        '<p style="color: #b0b2bc; font-size: 14px; line-height: 1.6; margin: 12px 0 0 0;">Reply to this '
        'email or send your thoughts to: <a href="mailto:feedback@proclusive.com" '
        'style="color: #c9a962; text-decoration: none;">feedback@proclusive.com</a></p>'
        "</div>"
        f"<p {_P}>Thank you for being part of a network built on trust.</p>"
    )
    text = (
        f"Hi {name},\n\nGreat news: your referral has been successfully completed.\n\n"
        f"Final Summary:\n{_text_rows(rows)}\n\n"
        f"We'd love your feedback.\n\n{feedback}\n\n"
        "Reply to this email or send your thoughts to: feedback@proclusive.com\n\n"
        f"Thank you for being part of a network built on trust.\n\n{TEAM_SIGNATURE}"
    )
    return f"Referral Closed — {reference}", _wrap(html), text
