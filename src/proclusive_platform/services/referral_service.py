"""Referral lifecycle engine.

Mutations (submit, transition) and notifications are separate operations.
A transition commits before any email goes out, and a failed email never
rolls a transition back; routes compose the two.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from proclusive_platform.domain.enums import (
    AuditEntityType,
    NotificationRecipient,
    ReferralStatus,
    RequiredRole,
)
from proclusive_platform.domain.exceptions import (
    ConcurrentTransitionError,
    InvalidRequest,
    NotFound,
)
from proclusive_platform.domain.models import Referral
from proclusive_platform.services import email_service
from proclusive_platform.services.audit_service import log_admin_action
from proclusive_platform.services.authorization import Caller, authorize
from proclusive_platform.services.email_templates import format_date
from proclusive_platform.services.referral_state_machine import (
    STAMP_FIELDS,
    STATUS_UPDATE_STAGES,
    ReferralStateMachine,
    parse_status,
)
from proclusive_platform.services.referral_store import (
    compare_and_set_referral,
    create_referral,
    get_profile,
    get_referral,
)

logger = logging.getLogger(__name__)

_state_machine = ReferralStateMachine()

REFERRAL_FIELDS = (
    "client_name",
    "client_email",
    "client_phone",
    "client_company",
    "project_type",
    "project_description",
    "value_range",
    "location",
    "timeline",
    "notes",
)
REQUIRED_REFERRAL_FIELDS = ("client_name", "project_type", "location")


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------


@dataclass
class RecipientResult:
    recipient: NotificationRecipient
    sent: bool

    def to_dict(self) -> dict:
        return {"recipient": self.recipient.value, "sent": self.sent}


@dataclass
class NotificationResult:
    """Outcome of one notification operation.

    ``skipped`` means the operation had nothing to send for this status.
    """

    results: list[RecipientResult] = field(default_factory=list)
    skipped: bool = False

    @property
    def email_sent(self) -> bool:
        return bool(self.results) and all(r.sent for r in self.results)

    def to_list(self) -> list[dict]:
        return [r.to_dict() for r in self.results]


@dataclass
class TransitionResult:
    referral: Referral
    previous_status: ReferralStatus
    new_status: ReferralStatus


def _require_id(referral_id: str | None) -> str:
    if not referral_id:
        raise InvalidRequest("Referral ID is required")
    return referral_id


async def _load_referral(db: AsyncSession, referral_id: str) -> Referral:
    referral = await get_referral(db, referral_id)
    if referral is None:
        raise NotFound("Referral not found")
    return referral


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------


async def submit_referral(db: AsyncSession, caller: Caller | None, data: dict) -> Referral:
    """Create a SUBMITTED referral owned by the caller."""
    caller = authorize(caller, RequiredRole.AUTHENTICATED)

    fields = {}
    for name in REFERRAL_FIELDS:
        value = data.get(name)
        if isinstance(value, str):
            value = value.strip() or None
        fields[name] = value

    missing = [name for name in REQUIRED_REFERRAL_FIELDS if not fields[name]]
    if missing:
        raise InvalidRequest("Client name, project type and location are required")

    referral = await create_referral(db, caller.id, fields)
    logger.info("Referral %s submitted by %s", referral.reference_number, caller.id)
    return referral


async def transition(
    db: AsyncSession,
    caller: Caller | None,
    referral_id: str | None,
    new_status: str | None,
    matched_to: str | None = None,
    final_value: str | None = None,
    admin_notes: str | None = None,
) -> TransitionResult:
    """Move a referral one stage forward.

    The write is a compare-and-swap on the status that was read, so two
    admins racing on the same referral cannot both succeed.
    """
    caller = authorize(caller, RequiredRole.ADMIN)
    if not referral_id or not new_status:
        raise InvalidRequest("Referral ID and new status are required")

    target = parse_status(new_status)
    if target is None:
        raise InvalidRequest(f"Invalid status: {new_status}")

    referral = await _load_referral(db, referral_id)
    current = ReferralStatus(referral.status)
    _state_machine.validate_transition(current, target, referral=referral, matched_to=matched_to)

    now = datetime.now(timezone.utc)
    values: dict = {"status": target.value, STAMP_FIELDS[target]: now}

    if target == ReferralStatus.REVIEWED:
        values["reviewed_by"] = caller.id
    elif target == ReferralStatus.MATCHED:
        member = await get_profile(db, matched_to)
        if member is None:
            raise NotFound("Member not found")
        values["matched_to"] = member.id
    elif target == ReferralStatus.COMPLETED and final_value:
        values["final_value"] = final_value

    if admin_notes:
        values["admin_notes"] = admin_notes

    # rollback() expires loaded instances, so keep the id as a plain string
    referral_id = referral.id
    updated = await compare_and_set_referral(db, referral_id, current.value, values, now)
    if not updated:
        await db.rollback()
        db.expunge_all()
        logger.warning(
            "Referral %s changed underneath transition %s -> %s",
            referral_id, current.value, target.value,
        )
        raise ConcurrentTransitionError(referral_id, current.value)

    log_admin_action(
        db,
        caller.id,
        f"referral_{target.value.lower()}",
        AuditEntityType.REFERRAL,
        referral_id,
        {"new_status": target.value, "matched_to": matched_to},
    )
    await db.commit()

    referral = await _load_referral(db, referral_id)
    logger.info(
        "Referral %s: %s -> %s by %s",
        referral.reference_number, current.value, target.value, caller.id,
    )
    return TransitionResult(referral=referral, previous_status=current, new_status=target)


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------


async def notify_submitter(db: AsyncSession, referral_id: str | None) -> NotificationResult:
    """Send the submission confirmation to the referral's submitter."""
    referral = await _load_referral(db, _require_id(referral_id))
    sent = await email_service.send_referral_submitted_confirmation(referral.submitter, referral)
    return NotificationResult([RecipientResult(NotificationRecipient.SUBMITTER, sent)])


async def notify_admin(db: AsyncSession, referral_id: str | None) -> bool:
    """Alert the admin inbox about a new referral."""
    referral = await _load_referral(db, _require_id(referral_id))
    return await email_service.send_new_referral_alert(referral, referral.submitter)


async def notify_member(
    db: AsyncSession, referral_id: str | None, member_id: str | None
) -> NotificationResult:
    """Tell the matched member about their referral, with client contact details."""
    if not referral_id or not member_id:
        raise InvalidRequest("Referral ID and Member ID are required")
    referral = await _load_referral(db, referral_id)
    member = await get_profile(db, member_id)
    if member is None:
        raise NotFound("Member not found")
    sent = await email_service.send_matched_referral(referral, member)
    return NotificationResult([RecipientResult(NotificationRecipient.MATCHED_MEMBER, sent)])


async def notify_status_update(
    db: AsyncSession, referral_id: str | None, new_status: str | None
) -> NotificationResult:
    """Send the stage-change email for REVIEWED and ENGAGED.

    Any other status is a no-op: MATCHED goes through notify_member and
    COMPLETED through notify_completed.
    """
    if not referral_id or not new_status:
        raise InvalidRequest("Referral ID and new status are required")

    # Exact match: only the upper-case wire values send anything
    try:
        status = ReferralStatus(new_status)
    except ValueError:
        return NotificationResult(skipped=True)
    stage = STATUS_UPDATE_STAGES.get(status)
    if stage is None:
        return NotificationResult(skipped=True)

    referral = await _load_referral(db, referral_id)
    update_date = format_date()

    outcome = NotificationResult()
    sent = await email_service.send_referral_status_update(
        referral.submitter, referral, stage, update_date
    )
    outcome.results.append(RecipientResult(NotificationRecipient.SUBMITTER, sent))

    if status == ReferralStatus.ENGAGED and referral.matched_member is not None:
        sent = await email_service.send_referral_status_update(
            referral.matched_member, referral, stage, update_date
        )
        outcome.results.append(RecipientResult(NotificationRecipient.MATCHED_MEMBER, sent))
    return outcome


def completion_value(referral: Referral) -> str:
    """Value reported on completion: final, else estimated, else a placeholder."""
    return referral.final_value or referral.value_range or "Not specified"


async def notify_completed(db: AsyncSession, referral_id: str | None) -> NotificationResult:
    """Send the closing summary to the submitter and, if any, the matched member."""
    referral = await _load_referral(db, _require_id(referral_id))
    final_value = completion_value(referral)
    completion_date = format_date()

    outcome = NotificationResult()
    sent = await email_service.send_referral_completed(
        referral.submitter, referral, final_value, completion_date
    )
    outcome.results.append(RecipientResult(NotificationRecipient.SUBMITTER, sent))

    if referral.matched_member is not None:
        sent = await email_service.send_referral_completed(
            referral.matched_member, referral, final_value, completion_date
        )
        outcome.results.append(RecipientResult(NotificationRecipient.MATCHED_MEMBER, sent))
    return outcome


async def notify_for_transition(db: AsyncSession, result: TransitionResult) -> NotificationResult:
    """Dispatch the notification that belongs to the stage just entered."""
    referral = result.referral
    if result.new_status == ReferralStatus.MATCHED:
        return await notify_member(db, referral.id, referral.matched_to)
    if result.new_status == ReferralStatus.COMPLETED:
        return await notify_completed(db, referral.id)
    return await notify_status_update(db, referral.id, result.new_status.value)
