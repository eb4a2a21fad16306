"""Session token handling for tokens issued by the identity provider."""

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from proclusive_platform.app.config import get_settings

settings = get_settings()


def create_access_token(user_id: str, expires_minutes: int | None = None) -> str:
    """Mint a session token the way the identity provider does.

    Used by local tooling and the test suite; production tokens come from
    the provider itself.
    """
    minutes = expires_minutes if expires_minutes is not None else settings.jwt_expiration_minutes
    expire = datetime.now(timezone.utc) + timedelta(minutes=minutes)
    payload = {
        "sub": user_id,
        "aud": settings.jwt_audience,
        "role": "authenticated",
        "exp": expire,
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict | None:
    try:
        return jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
        )
    except JWTError:
        return None
