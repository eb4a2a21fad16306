"""Vetting application routes: submission, review emails and decisions."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from proclusive_platform.app.routes.auth import require_admin, require_caller
from proclusive_platform.domain.exceptions import ServiceError
from proclusive_platform.domain.schemas import (
    ApplicationIdRequest,
    ApplicationResponse,
    ApplicationSubmit,
    ApproveApplicationRequest,
    RejectApplicationRequest,
)
from proclusive_platform.infra.database import get_db
from proclusive_platform.services import application_service
from proclusive_platform.services.authorization import Caller

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/applications", tags=["applications"])


def serialize_application(application) -> dict:
    return ApplicationResponse.model_validate(application).model_dump(by_alias=True, mode="json")


@router.post("", status_code=status.HTTP_201_CREATED)
async def submit_application(
    body: ApplicationSubmit,
    caller: Caller = Depends(require_caller),
    db: AsyncSession = Depends(get_db),
):
    """Create or update the caller's application and send the submission emails."""
    try:
        application, _created = await application_service.submit_application(
            db,
            caller,
            body.tos_accepted,
            body.privacy_accepted,
            body.workers_comp_exempt_sole_prop,
        )
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception:
        logger.exception("[SubmitApplication] Error for %s", caller.id)
        raise HTTPException(status_code=500, detail="Failed to submit application")

    try:
        notice = await application_service.notify_submission(db, application.id)
        applicant_sent, admin_sent = notice.applicant_email_sent, notice.admin_email_sent
    except Exception:
        logger.exception("[SubmitApplication] Notification error for %s", application.id)
        applicant_sent, admin_sent = False, False

    return {
        "success": True,
        "application": serialize_application(application),
        "applicantEmailSent": applicant_sent,
        "adminEmailSent": admin_sent,
    }


@router.post("/approve")
async def approve_application(
    body: ApproveApplicationRequest,
    caller: Caller = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    try:
        result = await application_service.approve(
            db, caller, body.application_id, body.badge_level
        )
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception:
        logger.exception("[ApproveApplication] Error for %s", body.application_id)
        raise HTTPException(status_code=500, detail="Failed to send approval notification")
    return {"success": True, "emailSent": result.email_sent, "message": result.message}


@router.post("/reject")
async def reject_application(
    body: RejectApplicationRequest,
    caller: Caller = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    try:
        result = await application_service.reject(
            db, caller, body.application_id, body.admin_notes
        )
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception:
        logger.exception("[RejectApplication] Error for %s", body.application_id)
        raise HTTPException(status_code=500, detail="Failed to process rejection")
    return {"success": True, "emailSent": result.email_sent, "message": result.message}


@router.post("/notify-submission")
async def notify_submission(
    body: ApplicationIdRequest,
    caller: Caller = Depends(require_caller),
    db: AsyncSession = Depends(get_db),
):
    try:
        notice = await application_service.notify_submission(db, body.application_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception:
        logger.exception("[NotifySubmission] Error for %s", body.application_id)
        raise HTTPException(status_code=500, detail="Failed to send notifications")
    return {
        "success": True,
        "applicantEmailSent": notice.applicant_email_sent,
        "adminEmailSent": notice.admin_email_sent,
        "message": notice.message,
    }
