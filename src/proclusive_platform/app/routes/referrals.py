"""Referral routes: member submission and the notification endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from proclusive_platform.app.routes.auth import require_caller
from proclusive_platform.domain.exceptions import ServiceError
from proclusive_platform.domain.schemas import (
    NotifyMemberRequest,
    NotifyStatusUpdateRequest,
    ReferralCreate,
    ReferralIdRequest,
    ReferralResponse,
)
from proclusive_platform.infra.database import get_db
from proclusive_platform.services import referral_service
from proclusive_platform.services.authorization import Caller

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/referrals", tags=["referrals"])

NOTIFICATION_FAILED = "Failed to send notification"


def serialize_referral(referral) -> dict:
    return ReferralResponse.model_validate(referral).model_dump(by_alias=True, mode="json")


@router.post("", status_code=status.HTTP_201_CREATED)
async def submit_referral(
    body: ReferralCreate,
    caller: Caller = Depends(require_caller),
    db: AsyncSession = Depends(get_db),
):
    """Submit a new referral, then confirm to the submitter and alert the admins."""
    try:
        referral = await referral_service.submit_referral(db, caller, body.model_dump())
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception:
        logger.exception("[SubmitReferral] Error creating referral for %s", caller.id)
        raise HTTPException(status_code=500, detail="Failed to submit referral")

    # Submission stands even if the emails fail
    try:
        confirmation = await referral_service.notify_submitter(db, referral.id)
        admin_sent = await referral_service.notify_admin(db, referral.id)
    except Exception:
        logger.exception("[SubmitReferral] Notification error for %s", referral.id)
        submitter_sent, admin_sent = False, False
    else:
        submitter_sent = confirmation.email_sent

    return {
        "success": True,
        "referral": serialize_referral(referral),
        "submitterEmailSent": submitter_sent,
        "adminEmailSent": admin_sent,
    }


@router.post("/notify-submitter")
async def notify_submitter(
    body: ReferralIdRequest,
    caller: Caller = Depends(require_caller),
    db: AsyncSession = Depends(get_db),
):
    try:
        outcome = await referral_service.notify_submitter(db, body.referral_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception:
        logger.exception("[NotifySubmitter] Error for referral %s", body.referral_id)
        raise HTTPException(status_code=500, detail=NOTIFICATION_FAILED)

    return {
        "success": True,
        "emailSent": outcome.email_sent,
        "message": (
            "Confirmation email sent to submitter"
            if outcome.email_sent
            else "Failed to send confirmation email"
        ),
    }


@router.post("/notify-admin")
async def notify_admin(
    body: ReferralIdRequest,
    caller: Caller = Depends(require_caller),
    db: AsyncSession = Depends(get_db),
):
    try:
        sent = await referral_service.notify_admin(db, body.referral_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception:
        logger.exception("[NotifyAdmin] Error for referral %s", body.referral_id)
        raise HTTPException(status_code=500, detail=NOTIFICATION_FAILED)
    return {"success": sent}


@router.post("/notify-member")
async def notify_member(
    body: NotifyMemberRequest,
    caller: Caller = Depends(require_caller),
    db: AsyncSession = Depends(get_db),
):
    try:
        outcome = await referral_service.notify_member(db, body.referral_id, body.member_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception:
        logger.exception("[NotifyMember] Error for referral %s", body.referral_id)
        raise HTTPException(status_code=500, detail=NOTIFICATION_FAILED)
    return {"success": outcome.email_sent}


@router.post("/notify-status-update")
async def notify_status_update(
    body: NotifyStatusUpdateRequest,
    caller: Caller = Depends(require_caller),
    db: AsyncSession = Depends(get_db),
):
    """Stage-change email for REVIEWED and ENGAGED; other statuses send nothing."""
    try:
        outcome = await referral_service.notify_status_update(
            db, body.referral_id, body.new_status
        )
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception:
        logger.exception("[NotifyStatusUpdate] Error for referral %s", body.referral_id)
        raise HTTPException(status_code=500, detail=NOTIFICATION_FAILED)

    if outcome.skipped:
        return {
            "success": True,
            "results": [],
            "message": "No status update email needed for this status",
        }
    return {
        "success": True,
        "results": outcome.to_list(),
        "message": "Status update emails sent",
    }


@router.post("/notify-completed")
async def notify_completed(
    body: ReferralIdRequest,
    caller: Caller = Depends(require_caller),
    db: AsyncSession = Depends(get_db),
):
    try:
        outcome = await referral_service.notify_completed(db, body.referral_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception:
        logger.exception("[NotifyCompleted] Error for referral %s", body.referral_id)
        raise HTTPException(status_code=500, detail=NOTIFICATION_FAILED)
    return {
        "success": True,
        "results": outcome.to_list(),
        "message": "Completion emails sent",
    }
