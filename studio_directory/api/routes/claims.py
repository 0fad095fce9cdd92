"""Public claim API routes."""

from uuid import UUID

from fastapi import APIRouter, status

from studio_directory.api.deps import OptionalUser
from studio_directory.schemas.claim import (
    ClaimProofSubmit,
    ClaimRequestResponse,
    ClaimRequestSubmit,
    RedeemClaimRequest,
    RedeemClaimResponse,
)
from studio_directory.services.claim_request_service import ClaimRequestService
from studio_directory.services.claim_service import ClaimService

router = APIRouter(tags=["claims"])


@router.post(
    "/claims/redeem",
    response_model=RedeemClaimResponse,
    summary="Redeem claim link",
    description="Takes ownership of the profile a claim link points at. Each link works once.",
    responses={
        401: {"description": "Not signed in"},
        404: {"description": "Link invalid, already used, or expired"},
        422: {"description": "Missing token"},
    },
)
async def redeem_claim_link(data: RedeemClaimRequest, user: OptionalUser) -> RedeemClaimResponse:
    """Redeem a claim link for the signed-in caller.

    Args:
        data: Request body with the link's token and an optional message.
        user: The authenticated user context, if any.

    Returns:
        RedeemClaimResponse: The claimed profile id.
    """
    service = ClaimService()
    result = await service.redeem_claim_link(data.token, user.identity if user else None, message=data.message)
    return RedeemClaimResponse(profile_id=result.unwrap())


@router.post(
    "/profiles/{profile_id}/claim-requests",
    response_model=ClaimRequestResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Request profile claim",
    description="Asks an admin to hand over an unclaimed profile. Does not grant ownership.",
    responses={
        401: {"description": "Not signed in"},
        404: {"description": "Profile not found"},
        409: {"description": "Already claimed, request pending, or username taken"},
    },
)
async def submit_claim_request(
    profile_id: UUID,
    data: ClaimRequestSubmit,
    user: OptionalUser,
) -> ClaimRequestResponse:
    """Submit a claim request for review.

    Args:
        profile_id: The profile's UUID.
        data: Proposed username and optional message.
        user: The authenticated user context, if any.

    Returns:
        ClaimRequestResponse: The pending request.
    """
    service = ClaimRequestService()
    result = await service.submit_claim_request(
        profile_id=str(profile_id),
        requester_identity=user.identity if user else None,
        proposed_username=data.username,
        message=data.message,
        requester_email=user.email if user else None,
    )
    return ClaimRequestResponse(**result.unwrap())


@router.post(
    "/profiles/{profile_id}/claim-requests/proof",
    response_model=ClaimRequestResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Request profile claim with proof",
    description="Asks an admin to hand over a profile based on the requester's details and evidence. "
    "Marks the profile as pending review.",
    responses={
        401: {"description": "Not signed in"},
        404: {"description": "Profile not found"},
        409: {"description": "Already claimed or request pending"},
        422: {"description": "Name or email missing"},
    },
)
async def submit_proof_claim_request(
    profile_id: UUID,
    data: ClaimProofSubmit,
    user: OptionalUser,
) -> ClaimRequestResponse:
    """Submit a proof-backed claim request for review."""
    service = ClaimRequestService()
    result = await service.submit_proof_claim_request(
        profile_id=str(profile_id),
        requester_identity=user.identity if user else None,
        requester_name=data.requester_name,
        requester_email=data.requester_email,
        requester_website=data.requester_website,
        proof_note=data.proof_note,
    )
    return ClaimRequestResponse(**result.unwrap())
