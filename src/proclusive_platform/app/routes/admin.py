"""Admin API routes: referral pipeline, application review and reminders.

Every route here requires an admin caller.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from proclusive_platform.app.routes.applications import serialize_application
from proclusive_platform.app.routes.auth import require_admin
from proclusive_platform.app.routes.referrals import serialize_referral
from proclusive_platform.domain.exceptions import ServiceError
from proclusive_platform.domain.schemas import (
    ApplicationIdRequest,
    ApplicationStatusRequest,
    PointStatusRequest,
    ReferralTransitionRequest,
)
from proclusive_platform.infra.database import get_db
from proclusive_platform.services import application_service, referral_service
from proclusive_platform.services.authorization import Caller
from proclusive_platform.services.reminder_service import ReminderScheduler

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"])


# ---------------------------------------------------------------------------
# Referrals
# ---------------------------------------------------------------------------


@router.post("/referrals/{referral_id}/status")
async def transition_referral(
    referral_id: str,
    body: ReferralTransitionRequest,
    caller: Caller = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Move a referral to its next stage, then send that stage's emails."""
    try:
        result = await referral_service.transition(
            db,
            caller,
            referral_id,
            body.new_status,
            matched_to=body.matched_to,
            final_value=body.final_value,
            admin_notes=body.admin_notes,
        )
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception:
        logger.exception("[TransitionReferral] Error for %s", referral_id)
        raise HTTPException(status_code=500, detail="Failed to update referral")

    # The transition is committed; email trouble is reported, never raised
    try:
        notification = await referral_service.notify_for_transition(db, result)
        results = notification.to_list()
    except Exception:
        logger.exception("[TransitionReferral] Notification error for %s", referral_id)
        results = []

    return {
        "success": True,
        "referral": serialize_referral(result.referral),
        "results": results,
        "message": f"Referral moved to {result.new_status.value}",
    }


# ---------------------------------------------------------------------------
# Applications
# ---------------------------------------------------------------------------


@router.post("/applications/{application_id}/status")
async def update_application_status(
    application_id: str,
    body: ApplicationStatusRequest,
    caller: Caller = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    try:
        application = await application_service.update_status(
            db,
            caller,
            application_id,
            body.new_status,
            admin_notes=body.admin_notes,
            badge_level=body.badge_level,
        )
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception:
        logger.exception("[UpdateApplicationStatus] Error for %s", application_id)
        raise HTTPException(status_code=500, detail="Failed to update application")
    return {"success": True, "application": serialize_application(application)}


@router.post("/applications/{application_id}/points")
async def set_point_status(
    application_id: str,
    body: PointStatusRequest,
    caller: Caller = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    try:
        application = await application_service.set_point_status(
            db, caller, application_id, body.point, body.status
        )
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception:
        logger.exception("[VerifyPoint] Error for %s", application_id)
        raise HTTPException(status_code=500, detail="Failed to update verification point")
    return {"success": True, "application": serialize_application(application)}


@router.post("/send-single-reminder")
async def send_single_reminder(
    body: ApplicationIdRequest,
    caller: Caller = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    try:
        await ReminderScheduler(db).send_single_reminder(caller, body.application_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception:
        logger.exception("[SendSingleReminder] Error for %s", body.application_id)
        raise HTTPException(status_code=500, detail="Internal server error")
    return {"success": True, "message": "Reminder sent successfully"}
