"""Claim request model type definitions for database operations."""

from datetime import datetime
from enum import Enum
from typing import TypedDict


class ClaimRequestStatus(str, Enum):
    """Claim request status values matching database enum."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ClaimRequest(TypedDict):
    """Claim request table row representation.

    Created by a signed-in user asking an admin to hand over an unclaimed
    profile; reviewed exactly once.
    """

    id: str
    profile_id: str
    requester_user_id: str
    requester_name: str | None
    requester_email: str | None
    requester_website: str | None
    requested_username: str | None
    message: str | None
    proof_note: str | None
    status: ClaimRequestStatus
    admin_note: str | None
    reviewed_by: str | None
    reviewed_at: datetime | None
    created_at: datetime


class ClaimRequestCreate(TypedDict, total=False):
    """Data required to create a claim request.

    A username request sets requested_username and message; a proof request
    sets the requester_name, requester_website and proof_note columns instead.
    """

    profile_id: str
    requester_user_id: str
    requester_name: str | None
    requester_email: str | None
    requester_website: str | None
    requested_username: str | None
    message: str | None
    proof_note: str | None
    status: str
