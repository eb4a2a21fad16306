"""Domain enumerations for the Proclusive platform.

All enums use the (str, Enum) pattern to ensure JSON serialization compatibility.
"""

from enum import Enum


class ReferralStatus(str, Enum):
    """Lifecycle of a referral, in forward order."""

    SUBMITTED = "SUBMITTED"
    REVIEWED = "REVIEWED"
    MATCHED = "MATCHED"
    ENGAGED = "ENGAGED"
    COMPLETED = "COMPLETED"


class ApplicationStatus(str, Enum):
    """Overall status of a vetting application."""

    PENDING = "pending"
    UNDER_REVIEW = "under_review"
    APPROVED = "approved"
    REJECTED = "rejected"


class VerificationStatus(str, Enum):
    """Status of a single verification point on an application."""

    NOT_SUBMITTED = "not_submitted"
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


class BadgeLevel(str, Enum):
    """Tier label granted to a member on approval.

    compliance, capability, reputation and enterprise are legacy values
    kept for older profiles.
    """

    NONE = "none"
    VERIFIED = "verified"
    VETTED = "vetted"
    ELITE = "elite"
    COMPLIANCE = "compliance"
    CAPABILITY = "capability"
    REPUTATION = "reputation"
    ENTERPRISE = "enterprise"


class RequiredRole(str, Enum):
    """Role a caller must hold before an operation runs."""

    AUTHENTICATED = "authenticated"
    ADMIN = "admin"


class NotificationRecipient(str, Enum):
    """Who a referral notification was addressed to."""

    SUBMITTER = "submitter"
    MATCHED_MEMBER = "matched_member"


class AuditEntityType(str, Enum):
    """Entity kinds recorded in the admin audit log."""

    APPLICATION = "application"
    REFERRAL = "referral"


class AuditAction(str, Enum):
    """Admin actions written to the audit log.

    Referral transitions use ``referral_<status>`` and are built from the
    target status rather than listed here.
    """

    REJECTED_APPLICATION = "rejected_application"
    APPROVED_APPLICATION = "approved_application"
    UPDATED_APPLICATION_STATUS = "updated_application_status"
    VERIFIED_POINT = "verified_point"
