"""Service-layer errors. Routes turn these into HTTP responses."""

from fastapi import status


class ServiceError(Exception):
    """Base exception for service layer errors."""

    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class Unauthorized(ServiceError):
    """No session, or the session token is invalid."""

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message, status.HTTP_401_UNAUTHORIZED)


class Forbidden(ServiceError):
    """Authenticated, but the caller lacks the admin role."""

    def __init__(self, message: str = "Admin access required") -> None:
        super().__init__(message, status.HTTP_403_FORBIDDEN)


class InvalidRequest(ServiceError):
    def __init__(self, message: str) -> None:
        super().__init__(message, status.HTTP_400_BAD_REQUEST)


class NotFound(ServiceError):
    def __init__(self, message: str) -> None:
        super().__init__(message, status.HTTP_404_NOT_FOUND)


class ConcurrentTransitionError(ServiceError):
    """Another writer moved the referral between our read and our write."""

    def __init__(self, referral_id: str, expected_status: str) -> None:
        self.referral_id = referral_id
        self.expected_status = expected_status
        super().__init__(
            f"Referral {referral_id} is no longer {expected_status}; reload and retry",
            status.HTTP_409_CONFLICT,
        )
