"""Database model type definitions."""

from studio_directory.models.claim_request import ClaimRequest, ClaimRequestCreate, ClaimRequestStatus
from studio_directory.models.profile import ClaimStatus, Profile

__all__ = [
    "Profile",
    "ClaimStatus",
    "ClaimRequest",
    "ClaimRequestCreate",
    "ClaimRequestStatus",
]
