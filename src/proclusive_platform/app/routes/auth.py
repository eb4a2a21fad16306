"""Authentication routes and caller dependencies.

Sessions are issued by the external identity provider; this module only
verifies the bearer token and resolves who is calling.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from proclusive_platform.domain.enums import RequiredRole
from proclusive_platform.domain.exceptions import ServiceError
from proclusive_platform.domain.schemas import CallerResponse
from proclusive_platform.infra.database import get_db
from proclusive_platform.services.authorization import Caller, authorize, resolve_caller

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _bearer_token(request: Request) -> str | None:
    auth_header = request.headers.get("Authorization", "")
    if not auth_header.startswith("Bearer "):
        return None
    return auth_header.removeprefix("Bearer ").strip() or None


async def get_current_caller_dep(
    request: Request, db: AsyncSession = Depends(get_db)
) -> Caller | None:
    """Dependency: resolve the caller from the Bearer token, or None."""
    return await resolve_caller(db, _bearer_token(request))


def require_role(role: RequiredRole):
    """Factory: dependency that authorizes the caller for ``role``."""

    async def checker(caller: Caller | None = Depends(get_current_caller_dep)) -> Caller:
        try:
            return authorize(caller, role)
        except ServiceError as e:
            raise HTTPException(status_code=e.status_code, detail=e.message)

    return checker


require_caller = require_role(RequiredRole.AUTHENTICATED)
require_admin = require_role(RequiredRole.ADMIN)


@router.get("/me", response_model=CallerResponse, response_model_by_alias=True)
async def get_me(caller: Caller = Depends(require_caller)):
    return CallerResponse(id=caller.id, is_admin=caller.is_admin)
