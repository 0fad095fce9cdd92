"""Admin API routes for claim links and the claim request queue."""

from uuid import UUID

from fastapi import APIRouter, Query

from studio_directory.api.deps import AdminUser
from studio_directory.models.claim_request import ClaimRequestStatus
from studio_directory.schemas.claim import ClaimLinkResponse, ClaimRequestReject, ClaimRequestResponse
from studio_directory.services.claim_request_service import ClaimRequestService
from studio_directory.services.claim_service import ClaimService

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post(
    "/profiles/{profile_id}/claim-link",
    response_model=ClaimLinkResponse,
    summary="Generate claim link",
    description="Issues a new single-use claim link. Any earlier link for the profile stops working.",
)
async def generate_claim_link(profile_id: UUID, admin: AdminUser) -> ClaimLinkResponse:
    """Generate a claim link for a profile.

    Args:
        profile_id: The profile's UUID.
        admin: The authenticated admin context.

    Returns:
        ClaimLinkResponse: The claim URL and its expiry.
    """
    service = ClaimService()
    result = await service.issue_claim_link(str(profile_id))
    return result.unwrap()


@router.get(
    "/claim-requests",
    response_model=list[ClaimRequestResponse],
    summary="List claim requests",
)
async def list_claim_requests(
    admin: AdminUser,
    status: ClaimRequestStatus | None = None,
    limit: int | None = Query(default=None, ge=1, le=500),
) -> list[ClaimRequestResponse]:
    """List claim requests, newest first."""
    service = ClaimRequestService()
    result = await service.list_claim_requests(status=status, limit=limit)
    return [ClaimRequestResponse(**row) for row in result.unwrap()]


@router.get(
    "/claim-requests/{request_id}",
    response_model=ClaimRequestResponse,
    summary="Get claim request",
)
async def get_claim_request(request_id: UUID, admin: AdminUser) -> ClaimRequestResponse:
    """Get a single claim request."""
    service = ClaimRequestService()
    result = await service.get_claim_request(str(request_id))
    return ClaimRequestResponse(**result.unwrap())


@router.post(
    "/claim-requests/{request_id}/approve",
    response_model=ClaimRequestResponse,
    summary="Approve claim request",
    description="Hands the profile to the requester and hides their other profiles.",
)
async def approve_claim_request(request_id: UUID, admin: AdminUser) -> ClaimRequestResponse:
    """Approve a pending claim request.

    Args:
        request_id: The claim request's UUID.
        admin: The authenticated admin context.

    Returns:
        ClaimRequestResponse: The approved request.
    """
    service = ClaimRequestService()
    result = await service.approve_claim_request(str(request_id), admin.identity)
    return ClaimRequestResponse(**result.unwrap())


@router.post(
    "/claim-requests/{request_id}/reject",
    response_model=ClaimRequestResponse,
    summary="Reject claim request",
)
async def reject_claim_request(
    request_id: UUID,
    admin: AdminUser,
    data: ClaimRequestReject | None = None,
) -> ClaimRequestResponse:
    """Reject a pending claim request with an optional note."""
    service = ClaimRequestService()
    result = await service.reject_claim_request(
        str(request_id),
        admin.identity,
        data.note if data else None,
    )
    return ClaimRequestResponse(**result.unwrap())
