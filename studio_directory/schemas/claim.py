"""Claim Pydantic schemas for API request/response models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from studio_directory.models.claim_request import ClaimRequestStatus


class RedeemClaimRequest(BaseModel):
    """Schema for redeeming a claim link."""

    token: str = Field(default="", description="Claim token from the link's query string")
    message: str | None = Field(default=None, max_length=2000, description="Optional note stored with the claim")


class RedeemClaimResponse(BaseModel):
    """Schema for a successful claim."""

    profile_id: str = Field(description="Profile now owned by the caller")


class ClaimLinkResponse(BaseModel):
    """Schema for a freshly issued claim link.

    The URL embeds the raw token and is only ever returned here.
    """

    profile_id: str = Field(description="Profile the link claims")
    url: str = Field(description="Claim URL to hand to the profile owner")
    expires_at: datetime = Field(description="When the link stops working")


class ClaimRequestSubmit(BaseModel):
    """Schema for asking an admin to hand over a profile."""

    username: str = Field(default="", max_length=255, description="Proposed username for the claimed profile")
    message: str | None = Field(default=None, max_length=2000, description="Optional note for the reviewer")


class ClaimProofSubmit(BaseModel):
    """Schema for asking to claim a profile by proving who you are."""

    requester_name: str = Field(default="", max_length=255, description="Requester's full name")
    requester_email: str = Field(default="", max_length=320, description="Address the decision is sent to")
    requester_website: str | None = Field(default=None, max_length=2000, description="Site that shows the requester runs the studio")
    proof_note: str | None = Field(default=None, max_length=4000, description="Evidence for the reviewer")


class ClaimRequestReject(BaseModel):
    """Schema for rejecting a claim request."""

    note: str | None = Field(default=None, max_length=2000, description="Reason shown to the requester")


class ClaimRequestResponse(BaseModel):
    """Schema for claim request API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(description="Claim request unique identifier")
    profile_id: str = Field(description="Profile being claimed")
    requester_user_id: str = Field(description="Identity that asked for the profile")
    requester_name: str | None = Field(default=None, description="Requester name from a proof request")
    requester_email: str | None = Field(default=None, description="Requester email if known")
    requester_website: str | None = Field(default=None, description="Requester website from a proof request")
    requested_username: str | None = Field(default=None, description="Username to apply on approval")
    message: str | None = Field(default=None, description="Requester's note")
    proof_note: str | None = Field(default=None, description="Evidence supplied with a proof request")
    status: ClaimRequestStatus = Field(description="Review status")
    admin_note: str | None = Field(default=None, description="Reviewer's note")
    reviewed_by: str | None = Field(default=None, description="Admin identity that reviewed the request")
    reviewed_at: datetime | None = Field(default=None, description="Review timestamp")
    created_at: datetime = Field(description="Submission timestamp")
