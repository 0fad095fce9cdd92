"""Profile model type definitions for database operations."""

from datetime import datetime
from enum import Enum
from typing import TypedDict


class ClaimStatus(str, Enum):
    """Profile claim status values matching database enum."""

    UNCLAIMED = "unclaimed"
    PENDING = "pending"
    CLAIMED = "claimed"


class Profile(TypedDict):
    """Profile table row representation.

    A designer, brand or reader entity. Profiles created by an operator start
    unclaimed and carry the claim columns until their owner takes them over.
    """

    id: str
    username: str | None
    display_name: str | None
    owner_user_id: str | None
    legacy_user_id: str | None
    is_primary: bool
    is_hidden: bool
    claim_status: ClaimStatus
    claim_token_hash: str | None
    claim_expires_at: datetime | None
    claimed_at: datetime | None
    created_at: datetime
    updated_at: datetime
