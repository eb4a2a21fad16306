"""Pydantic v2 schemas for API request/response validation.

Request bodies use camelCase on the wire. Required identifiers are declared
optional here so handlers can answer a missing field with the same 400
message the frontend already expects.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Referrals
# ---------------------------------------------------------------------------


class ReferralCreate(CamelModel):
    """Schema for a member submitting a new referral."""

    client_name: str | None = None
    client_email: str | None = None
    client_phone: str | None = None
    client_company: str | None = None
    project_type: str | None = None
    project_description: str | None = None
    value_range: str | None = None
    location: str | None = None
    timeline: str | None = None
    notes: str | None = None


class ReferralIdRequest(CamelModel):
    referral_id: str | None = None


class NotifyMemberRequest(CamelModel):
    referral_id: str | None = None
    member_id: str | None = None


class NotifyStatusUpdateRequest(CamelModel):
    referral_id: str | None = None
    new_status: str | None = None


class ReferralTransitionRequest(CamelModel):
    """Admin moves a referral to its next stage."""

    new_status: str | None = None
    matched_to: str | None = None
    final_value: str | None = None
    admin_notes: str | None = None


class ReferralResponse(CamelModel):
    """Schema for referral API responses."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    id: str
    reference_number: str
    submitted_by: str
    client_name: str
    client_email: str | None = None
    client_phone: str | None = None
    client_company: str | None = None
    project_type: str
    project_description: str | None = None
    value_range: str | None = None
    location: str
    timeline: str | None = None
    notes: str | None = None
    status: str
    matched_to: str | None = None
    reviewed_by: str | None = None
    reviewed_at: datetime | None = None
    matched_at: datetime | None = None
    engaged_at: datetime | None = None
    completed_at: datetime | None = None
    admin_notes: str | None = None
    final_value: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


# ---------------------------------------------------------------------------
# Applications
# ---------------------------------------------------------------------------


class ApplicationSubmit(CamelModel):
    """Schema for a member submitting (or resubmitting) their vetting application."""

    tos_accepted: bool = False
    privacy_accepted: bool = False
    workers_comp_exempt_sole_prop: bool = False


class ApplicationIdRequest(CamelModel):
    application_id: str | None = None


class ApproveApplicationRequest(CamelModel):
    application_id: str | None = None
    badge_level: str | None = None


class RejectApplicationRequest(CamelModel):
    application_id: str | None = None
    admin_notes: str | None = None


class ApplicationStatusRequest(CamelModel):
    new_status: str | None = None
    admin_notes: str | None = None
    badge_level: str | None = None


class PointStatusRequest(CamelModel):
    point: str | None = None
    status: str | None = None


class ApplicationResponse(CamelModel):
    """Schema for application API responses."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    id: str
    user_id: str
    status: str
    point_1_business_reg: str
    point_2_prof_license: str
    point_3_liability_ins: str
    point_4_workers_comp: str
    point_5_contact_verify: str
    point_6_portfolio: str
    point_7_references: str
    point_8_certifications: str
    point_9_financial: str
    point_10_legal_record: str
    point_11_operating_history: str
    point_12_industry_awards: str
    point_13_satisfaction: str
    point_14_network_contrib: str
    point_15_enterprise: str
    workers_comp_exempt_sole_prop: bool
    tos_accepted: bool
    privacy_accepted: bool
    reviewed_by: str | None = None
    reviewed_at: datetime | None = None
    admin_notes: str | None = None
    last_reminder_sent: datetime | None = None
    reminder_count: int = 0
    created_at: datetime | None = None


# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------


class CallerResponse(CamelModel):
    id: str
    is_admin: bool


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    service: str
