"""Authorization guard: who is calling, and may they do this?

The caller is resolved once per request from the session token and passed
explicitly into every engine; nothing reads identity from global state.
"""

import asyncio
import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from proclusive_platform.app.config import get_settings
from proclusive_platform.domain.enums import RequiredRole
from proclusive_platform.domain.exceptions import Forbidden, Unauthorized
from proclusive_platform.services.auth_service import decode_token
from proclusive_platform.services.referral_store import get_admin_flag

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Caller:
    """Identity of the authenticated user making a request."""

    id: str
    is_admin: bool = False


async def resolve_caller(db: AsyncSession, token: str | None) -> Caller | None:
    """Turn a bearer token into a Caller, or None if there is no valid session.

    The profile lookup is capped by ``profile_lookup_timeout_seconds``; a
    slow or missing profile yields a non-admin caller.
    """
    if not token:
        return None
    payload = decode_token(token)
    if not payload or "sub" not in payload:
        return None

    user_id = payload["sub"]
    timeout = get_settings().profile_lookup_timeout_seconds
    try:
        is_admin = await asyncio.wait_for(get_admin_flag(db, user_id), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning("Profile lookup for %s exceeded %ss; treating as non-admin", user_id, timeout)
        is_admin = False

    return Caller(id=user_id, is_admin=bool(is_admin))


def authorize(caller: Caller | None, required_role: RequiredRole) -> Caller:
    """Return the caller if it holds ``required_role``.

    Raises Unauthorized when there is no session and Forbidden when an
    authenticated caller lacks the admin flag.
    """
    if caller is None:
        raise Unauthorized()
    if required_role == RequiredRole.ADMIN and not caller.is_admin:
        raise Forbidden()
    return caller
