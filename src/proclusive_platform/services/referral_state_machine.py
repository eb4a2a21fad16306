"""Referral state machine: validates transitions and enforces stage rules.

Referrals move strictly forward, one stage at a time:
SUBMITTED -> REVIEWED -> MATCHED -> ENGAGED -> COMPLETED.
"""

from fastapi import status as http_status

from proclusive_platform.domain.enums import ReferralStatus
from proclusive_platform.domain.exceptions import ServiceError


class InvalidTransitionError(ServiceError):
    """Raised when a referral state transition is not allowed."""

    def __init__(
        self,
        current_status: ReferralStatus,
        target_status: ReferralStatus,
        reason: str,
    ):
        self.current_status = current_status
        self.target_status = target_status
        self.reason = reason
        super().__init__(
            f"Invalid transition from {current_status.value} to {target_status.value}: {reason}",
            http_status.HTTP_400_BAD_REQUEST,
        )


S = ReferralStatus

# ---------------------------------------------------------------------------
# Transition map: from_status -> the single allowed next status
# ---------------------------------------------------------------------------

TRANSITION_MAP: dict[ReferralStatus, ReferralStatus] = {
    S.SUBMITTED: S.REVIEWED,
    S.REVIEWED: S.MATCHED,
    S.MATCHED: S.ENGAGED,
    S.ENGAGED: S.COMPLETED,
}

TERMINAL_STATES: set[ReferralStatus] = {S.COMPLETED}

# Timestamp stamped when a referral enters each status
STAMP_FIELDS: dict[ReferralStatus, str] = {
    S.REVIEWED: "reviewed_at",
    S.MATCHED: "matched_at",
    S.ENGAGED: "engaged_at",
    S.COMPLETED: "completed_at",
}

# Stage label used by the status-update email, for statuses that send one
STATUS_UPDATE_STAGES: dict[ReferralStatus, str] = {
    S.REVIEWED: "reviewed",
    S.ENGAGED: "engaged",
}


def parse_status(value: str) -> ReferralStatus | None:
    """Map a wire value onto ReferralStatus, or None if it is not one."""
    try:
        return ReferralStatus(value.upper())
    except (ValueError, AttributeError):
        return None


class ReferralStateMachine:
    """Validates referral state transitions and enforces stage preconditions."""

    def validate_transition(
        self,
        current_status: ReferralStatus,
        target_status: ReferralStatus,
        referral=None,
        matched_to: str | None = None,
    ) -> bool:
        """Return True if the transition is valid. Raise InvalidTransitionError if not.

        Checks:
        1. The current status is not terminal.
        2. The target is exactly the next stage (no skips, no going back).
        3. MATCHED names a member to match to.
        4. ENGAGED only follows a referral that has a matched member.
        """
        if current_status in TERMINAL_STATES:
            raise InvalidTransitionError(
                current_status,
                target_status,
                f"No transitions allowed from {current_status.value}",
            )

        next_status = self.get_valid_next_status(current_status)

        if target_status != next_status:
            raise InvalidTransitionError(
                current_status,
                target_status,
                f"Next stage from {current_status.value} is {next_status.value}",
            )

        if target_status == S.MATCHED and not matched_to:
            raise InvalidTransitionError(
                current_status, target_status, "A member to match to is required"
            )

        if target_status == S.ENGAGED and referral is not None and not referral.matched_to:
            raise InvalidTransitionError(
                current_status, target_status, "Referral has no matched member"
            )

        return True

    def get_valid_next_status(self, current_status: ReferralStatus) -> ReferralStatus | None:
        """Return the one status this referral may move to, if any."""
        return TRANSITION_MAP.get(current_status)
