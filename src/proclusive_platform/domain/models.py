"""SQLAlchemy ORM models for the Proclusive platform.

All models use SQLite-compatible types:
- String(36) for UUID primary keys
- JSON for structured data (no JSONB)
- DateTime for timestamps (no TIMESTAMPTZ); values are written as UTC
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    JSON,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from proclusive_platform.domain.enums import (
    ApplicationStatus,
    BadgeLevel,
    ReferralStatus,
    VerificationStatus,
)
from proclusive_platform.infra.database import Base


def _uuid() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# The 15 vetting checks, in display order. The first five are the
# document uploads.
VERIFICATION_POINT_FIELDS: tuple[str, ...] = (
    "point_1_business_reg",
    "point_2_prof_license",
    "point_3_liability_ins",
    "point_4_workers_comp",
    "point_5_contact_verify",
    "point_6_portfolio",
    "point_7_references",
    "point_8_certifications",
    "point_9_financial",
    "point_10_legal_record",
    "point_11_operating_history",
    "point_12_industry_awards",
    "point_13_satisfaction",
    "point_14_network_contrib",
    "point_15_enterprise",
)

DOCUMENT_POINT_FIELDS: tuple[str, ...] = VERIFICATION_POINT_FIELDS[:5]


def _point_column():
    return Column(
        String(20),
        nullable=False,
        default=VerificationStatus.NOT_SUBMITTED.value,
    )


# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------


class Profile(Base):
    """Member or admin identity record, owned by the identity provider."""

    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True, default=_uuid)
    email = Column(String(255), unique=True, nullable=False, index=True)
    full_name = Column(String(255), nullable=False)
    company_name = Column(String(255), nullable=False, default="")
    phone = Column(String(50), nullable=True)
    primary_trade = Column(String(100), nullable=True)
    badge_level = Column(String(20), nullable=False, default=BadgeLevel.NONE.value)
    is_admin = Column(Boolean, nullable=False, default=False)
    is_verified = Column(Boolean, nullable=False, default=False)
    verification_completed_at = Column(DateTime, nullable=True)
    is_public = Column(Boolean, nullable=False, default=True)
    # Object storage URL; never dereferenced here
    profile_picture_url = Column(String(500), nullable=True)
    created_at = Column(DateTime, default=_utcnow)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)


# ---------------------------------------------------------------------------
# Vetting
# ---------------------------------------------------------------------------


class Application(Base):
    """A member's vetting application. One per member."""

    __tablename__ = "applications"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, unique=True)
    status = Column(
        String(20), nullable=False, default=ApplicationStatus.PENDING.value, index=True
    )

    point_1_business_reg = _point_column()
    point_2_prof_license = _point_column()
    point_3_liability_ins = _point_column()
    point_4_workers_comp = _point_column()
    point_5_contact_verify = _point_column()
    point_6_portfolio = _point_column()
    point_7_references = _point_column()
    point_8_certifications = _point_column()
    point_9_financial = _point_column()
    point_10_legal_record = _point_column()
    point_11_operating_history = _point_column()
    point_12_industry_awards = _point_column()
    point_13_satisfaction = _point_column()
    point_14_network_contrib = _point_column()
    point_15_enterprise = _point_column()
    workers_comp_exempt_sole_prop = Column(Boolean, nullable=False, default=False)

    # Review
    reviewed_by = Column(String(36), ForeignKey("profiles.id"), nullable=True)
    reviewed_at = Column(DateTime, nullable=True)
    admin_notes = Column(Text, nullable=True)

    # Acceptance
    tos_accepted = Column(Boolean, nullable=False, default=False)
    tos_accepted_at = Column(DateTime, nullable=True)
    privacy_accepted = Column(Boolean, nullable=False, default=False)
    privacy_accepted_at = Column(DateTime, nullable=True)

    # Reminder bookkeeping (written only by the reminder scheduler)
    last_reminder_sent = Column(DateTime, nullable=True)
    reminder_count = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, default=_utcnow, index=True)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)

    # Relationships
    profile = relationship("Profile", foreign_keys=[user_id], lazy="selectin")

    def point_snapshot(self) -> list[dict]:
        """Return ``[{key, status}]`` for all 15 verification points."""
        return [
            {"key": field, "status": getattr(self, field)}
            for field in VERIFICATION_POINT_FIELDS
        ]


# ---------------------------------------------------------------------------
# Referrals
# ---------------------------------------------------------------------------


class Referral(Base):
    """A client lead submitted by a member for matching to another member."""

    __tablename__ = "referrals"

    id = Column(String(36), primary_key=True, default=_uuid)
    # Immutable after creation
    submitted_by = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)

    # Client
    client_name = Column(String(255), nullable=False)
    client_email = Column(String(255), nullable=True)
    client_phone = Column(String(50), nullable=True)
    client_company = Column(String(255), nullable=True)

    # Project
    project_type = Column(String(100), nullable=False)
    project_description = Column(Text, nullable=True)
    value_range = Column(String(100), nullable=True)
    location = Column(String(255), nullable=False)
    timeline = Column(String(100), nullable=True)
    notes = Column(Text, nullable=True)

    # Lifecycle
    status = Column(
        String(20), nullable=False, default=ReferralStatus.SUBMITTED.value, index=True
    )
    matched_to = Column(String(36), ForeignKey("profiles.id"), nullable=True)
    reviewed_by = Column(String(36), ForeignKey("profiles.id"), nullable=True)
    reviewed_at = Column(DateTime, nullable=True)
    matched_at = Column(DateTime, nullable=True)
    engaged_at = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    admin_notes = Column(Text, nullable=True)
    final_value = Column(String(100), nullable=True)

    created_at = Column(DateTime, default=_utcnow)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)

    # Relationships
    submitter = relationship("Profile", foreign_keys=[submitted_by], lazy="selectin")
    matched_member = relationship("Profile", foreign_keys=[matched_to], lazy="selectin")

    @property
    def reference_number(self) -> str:
        """Human-readable reference, e.g. ``REF-1A2B3C4D``."""
        return f"REF-{self.id[:8].upper()}"


# ---------------------------------------------------------------------------
# Audit
# ---------------------------------------------------------------------------


class AdminAuditLog(Base):
    """Append-only record of admin actions."""

    __tablename__ = "admin_audit_log"

    id = Column(String(36), primary_key=True, default=_uuid)
    admin_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    action = Column(String(50), nullable=False)
    entity_type = Column(String(20), nullable=False)
    entity_id = Column(String(36), nullable=False, index=True)
    details = Column(JSON, nullable=True)
    created_at = Column(DateTime, default=_utcnow)
