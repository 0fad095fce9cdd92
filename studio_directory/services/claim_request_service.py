"""Claim request business logic service.

Users without a claim link can ask an admin to hand over an unclaimed
profile, either by proposing a username or by sending proof of who they
are. Proof requests mark the profile pending while they wait. Requests are
reviewed once: approval assigns ownership the same way a redeemed link does,
and rejection closes the request.
"""

import logging
from datetime import datetime, timezone
from typing import Any

from supabase import Client

from studio_directory.api.middleware.error_handler import (
    APIError,
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from studio_directory.core.supabase import execute, get_supabase_client
from studio_directory.models.claim_request import ClaimRequest, ClaimRequestCreate, ClaimRequestStatus
from studio_directory.models.profile import ClaimStatus, Profile
from studio_directory.services.claim_service import demote_siblings
from studio_directory.services.email_service import EmailService
from studio_directory.services.profile_service import PROFILES_TABLE, ProfileService
from studio_directory.services.results import ClaimResult
from studio_directory.services.username_rules import validate_username

logger = logging.getLogger(__name__)

REQUESTS_TABLE = "profile_claim_requests"

# Profiles an approval may still hand over.
CLAIMABLE_STATUSES = [ClaimStatus.UNCLAIMED.value, ClaimStatus.PENDING.value]


class ClaimRequestService:
    """Service for the admin-reviewed claim request queue."""

    def __init__(
        self,
        client: Client | None = None,
        profile_service: ProfileService | None = None,
        email_service: EmailService | None = None,
    ) -> None:
        """Initialize claim request service with Supabase client.

        Args:
            client: Optional client; defaults to the shared singleton.
            profile_service: Optional profile service sharing the client.
            email_service: Optional email service for notifications.
        """
        self.client = client or get_supabase_client()
        self.profiles = profile_service or ProfileService(self.client)
        self.emails = email_service or EmailService()

    async def submit_claim_request(
        self,
        profile_id: str,
        requester_identity: str | None,
        proposed_username: str,
        message: str | None = None,
        requester_email: str | None = None,
    ) -> ClaimResult[ClaimRequest]:
        """Ask for an unclaimed profile to be handed over.

        Does not change ownership; creates a pending request for review.

        Args:
            profile_id: Profile to claim.
            requester_identity: Identity of the signed-in caller, if any.
            proposed_username: Username to apply when approved.
            message: Optional note for the reviewer.
            requester_email: Address used to report the decision.

        Returns:
            ClaimResult: The created request row, or AuthenticationError,
            ValidationError, NotFoundError, ConflictError or StoreError.
        """
        try:
            return ClaimResult.success(
                await self._submit(profile_id, requester_identity, proposed_username, message, requester_email)
            )
        except APIError as e:
            return ClaimResult.failure(e)

    async def _submit(
        self,
        profile_id: str,
        requester_identity: str | None,
        proposed_username: str,
        message: str | None,
        requester_email: str | None,
    ) -> ClaimRequest:
        if not requester_identity:
            raise AuthenticationError("You must be signed in to request a claim.")

        normalized, username_error = validate_username(proposed_username)
        if username_error:
            raise ValidationError(
                username_error,
                details=[{"loc": ["username"], "msg": username_error, "type": "invalid"}],
            )

        profile = await self._claimable_profile(profile_id, requester_identity)

        if await self.profiles.is_username_taken(normalized, exclude_profile_id=profile_id):
            raise ConflictError("This username is already taken. Please choose another.")

        note = (message or "").strip() or None
        payload: ClaimRequestCreate = {
            "profile_id": profile_id,
            "requester_user_id": requester_identity,
            "requester_email": (requester_email or "").strip() or None,
            "requested_username": normalized,
            "message": note,
            "status": ClaimRequestStatus.PENDING.value,
        }
        request = self._insert_request(payload)

        await self.emails.send_claim_request_notification(
            request_id=request["id"],
            profile_label=profile.get("display_name") or profile.get("username") or profile_id,
            requested_username=normalized,
            message=note,
        )
        return request

    async def submit_proof_claim_request(
        self,
        profile_id: str,
        requester_identity: str | None,
        requester_name: str | None,
        requester_email: str | None,
        requester_website: str | None = None,
        proof_note: str | None = None,
    ) -> ClaimResult[ClaimRequest]:
        """Ask for a profile by proving who you are instead of picking a username.

        Unlike a username request, this marks the profile ``pending`` so the
        public page can show that a claim is under review. Rejecting the last
        pending request puts it back to ``unclaimed``.

        Args:
            profile_id: Profile to claim.
            requester_identity: Identity of the signed-in caller, if any.
            requester_name: Requester's name (required).
            requester_email: Address the decision is sent to (required).
            requester_website: Optional site backing the claim.
            proof_note: Optional evidence for the reviewer.

        Returns:
            ClaimResult: The created request row, or AuthenticationError,
            ValidationError, NotFoundError, ConflictError or StoreError.
        """
        try:
            return ClaimResult.success(
                await self._submit_proof(
                    profile_id, requester_identity, requester_name, requester_email, requester_website, proof_note
                )
            )
        except APIError as e:
            return ClaimResult.failure(e)

    async def _submit_proof(
        self,
        profile_id: str,
        requester_identity: str | None,
        requester_name: str | None,
        requester_email: str | None,
        requester_website: str | None,
        proof_note: str | None,
    ) -> ClaimRequest:
        if not requester_identity:
            raise AuthenticationError("You must be signed in to submit a claim.")

        name = (requester_name or "").strip()
        email = (requester_email or "").strip()
        if not name or not email:
            missing = [field for field, value in (("requester_name", name), ("requester_email", email)) if not value]
            raise ValidationError(
                "Name and email are required.",
                details=[{"loc": [field], "msg": "Field required", "type": "missing"} for field in missing],
            )

        profile = await self._claimable_profile(profile_id, requester_identity)

        note = (proof_note or "").strip() or None
        payload: ClaimRequestCreate = {
            "profile_id": profile_id,
            "requester_user_id": requester_identity,
            "requester_name": name,
            "requester_email": email,
            "requester_website": (requester_website or "").strip() or None,
            "proof_note": note,
            "status": ClaimRequestStatus.PENDING.value,
        }
        request = self._insert_request(payload)

        await self.profiles.set_claim_status(
            profile_id,
            ClaimStatus.PENDING,
            datetime.now(timezone.utc).isoformat(),
            expected_status=ClaimStatus.UNCLAIMED,
        )

        await self.emails.send_claim_request_notification(
            request_id=request["id"],
            profile_label=profile.get("display_name") or profile.get("username") or profile_id,
            requested_username=None,
            message=note,
            requester_name=name,
        )
        return request

    async def _claimable_profile(self, profile_id: str, requester_identity: str) -> Profile:
        profile = await self.profiles.get_profile_by_id(profile_id)
        if not profile or profile.get("is_hidden"):
            raise NotFoundError("Profile not found.")
        if profile.get("claim_status") not in CLAIMABLE_STATUSES:
            raise ConflictError("This profile is already claimed.")

        if await self._get_pending_request(profile_id, requester_identity):
            raise ConflictError("You already have a pending claim request for this profile.")
        return profile

    def _insert_request(self, payload: ClaimRequestCreate) -> ClaimRequest:
        response = execute(self.client.table(REQUESTS_TABLE).insert(payload), "create claim request")
        request = response.data[0]
        logger.info("Claim request %s submitted for profile %s", request["id"], payload["profile_id"])
        return request

    async def _get_pending_request(self, profile_id: str, requester_identity: str) -> ClaimRequest | None:
        response = execute(
            self.client.table(REQUESTS_TABLE)
            .select("*")
            .eq("profile_id", profile_id)
            .eq("requester_user_id", requester_identity)
            .eq("status", ClaimRequestStatus.PENDING.value)
            .limit(1),
            "find pending claim request",
        )
        return response.data[0] if response.data else None

    async def list_claim_requests(
        self,
        status: ClaimRequestStatus | None = None,
        limit: int | None = None,
    ) -> ClaimResult[list[ClaimRequest]]:
        """List claim requests, newest first.

        Args:
            status: Optional filter by review status.
            limit: Optional maximum number of rows.

        Returns:
            ClaimResult: List of claim request rows.
        """
        query = self.client.table(REQUESTS_TABLE).select("*")
        if status:
            query = query.eq("status", status.value)
        query = query.order("created_at", desc=True)
        if limit:
            query = query.limit(limit)

        try:
            response = execute(query, "list claim requests")
        except APIError as e:
            return ClaimResult.failure(e)
        return ClaimResult.success(response.data or [])

    async def get_claim_request(self, request_id: str) -> ClaimResult[ClaimRequest]:
        """Get a claim request by ID."""
        try:
            request = await self._get_request(request_id)
        except APIError as e:
            return ClaimResult.failure(e)
        if not request:
            return ClaimResult.failure(NotFoundError("Claim request not found."))
        return ClaimResult.success(request)

    async def _get_request(self, request_id: str) -> ClaimRequest | None:
        response = execute(
            self.client.table(REQUESTS_TABLE)
            .select("*")
            .eq("id", request_id)
            .maybe_single(),
            "get claim request",
        )
        return response.data if response and response.data else None

    async def _get_pending(self, request_id: str) -> ClaimRequest:
        request = await self._get_request(request_id)
        if not request or request.get("status") != ClaimRequestStatus.PENDING.value:
            raise NotFoundError("Request not found or already reviewed.")
        return request

    async def count_pending_requests(self, profile_id: str) -> int:
        """Count pending requests for a profile."""
        response = execute(
            self.client.table(REQUESTS_TABLE)
            .select("id", count="exact")
            .eq("profile_id", profile_id)
            .eq("status", ClaimRequestStatus.PENDING.value),
            "count pending claim requests",
        )
        return response.count or 0

    async def approve_claim_request(self, request_id: str, admin_identity: str) -> ClaimResult[ClaimRequest]:
        """Approve a pending request and hand the profile to the requester.

        The requester's other profiles are demoted and their listing credits
        move to the claimed profile.

        Args:
            request_id: The claim request's id.
            admin_identity: Identity of the reviewing admin.

        Returns:
            ClaimResult: The updated request row, or NotFoundError,
            ConflictError or StoreError.
        """
        try:
            return ClaimResult.success(await self._approve(request_id, admin_identity))
        except APIError as e:
            return ClaimResult.failure(e)

    async def _approve(self, request_id: str, admin_identity: str) -> ClaimRequest:
        request = await self._get_pending(request_id)
        profile_id = request["profile_id"]
        requester = request["requester_user_id"]
        requested_username = (request.get("requested_username") or "").strip()

        profile = await self.profiles.get_profile_by_id(profile_id)
        if not profile:
            raise NotFoundError("Profile not found.")

        now_iso = datetime.now(timezone.utc).isoformat()
        # A previous attempt may have handed the profile over and then failed
        # to mark the request; finish that approval instead of conflicting.
        if profile.get("claim_status") == ClaimStatus.CLAIMED.value and profile.get("owner_user_id") == requester:
            logger.info("Profile %s already owned by requester; completing request %s", profile_id, request_id)
        else:
            await self._hand_over(profile, requester, requested_username, now_iso)

        reviewed = execute(
            self.client.table(REQUESTS_TABLE)
            .update({
                "status": ClaimRequestStatus.APPROVED.value,
                "reviewed_by": admin_identity,
                "reviewed_at": now_iso,
            })
            .eq("id", request_id)
            .eq("status", ClaimRequestStatus.PENDING.value),
            "mark claim request approved",
        )
        if not reviewed.data:
            raise NotFoundError("Request not found or already reviewed.")

        logger.info("Claim request %s approved; profile %s claimed", request_id, profile_id)
        label = requested_username or profile.get("display_name") or profile.get("username") or profile_id
        await self._notify_decision(reviewed.data[0], label, approved=True)
        return reviewed.data[0]

    async def _hand_over(self, profile: Profile, requester: str, requested_username: str, now_iso: str) -> None:
        profile_id = profile["id"]
        if profile.get("claim_status") not in CLAIMABLE_STATUSES:
            raise ConflictError("This profile is already claimed.")

        if requested_username and await self.profiles.is_username_taken(
            requested_username, exclude_profile_id=profile_id
        ):
            raise ConflictError("This username is already taken. Please choose another.")

        update: dict[str, Any] = {
            "owner_user_id": requester,
            "claim_status": ClaimStatus.CLAIMED.value,
            "claim_token_hash": None,
            "claim_expires_at": None,
            "claimed_at": now_iso,
            "is_primary": True,
            "is_hidden": False,
            "updated_at": now_iso,
        }
        if requested_username:
            update["username"] = requested_username

        claimed = execute(
            self.client.table(PROFILES_TABLE)
            .update(update)
            .eq("id", profile_id)
            .in_("claim_status", CLAIMABLE_STATUSES),
            "approve claim",
        )
        if not claimed.data:
            raise ConflictError("This profile is already claimed.")

        sibling_ids = await demote_siblings(self.profiles, requester, profile_id, now_iso, clear_legacy_link=True)
        for sibling_id in sibling_ids:
            try:
                await self.profiles.transfer_listing_team_members(sibling_id, profile_id)
            except APIError:
                logger.warning(
                    "Team member transfer from %s to %s failed", sibling_id, profile_id, exc_info=True
                )

    async def reject_claim_request(
        self,
        request_id: str,
        admin_identity: str,
        admin_note: str | None = None,
    ) -> ClaimResult[ClaimRequest]:
        """Reject a pending request.

        When no other pending requests remain, a profile left in ``pending``
        goes back to ``unclaimed``.

        Args:
            request_id: The claim request's id.
            admin_identity: Identity of the reviewing admin.
            admin_note: Optional reason for the requester.

        Returns:
            ClaimResult: The updated request row, or NotFoundError or StoreError.
        """
        try:
            return ClaimResult.success(await self._reject(request_id, admin_identity, admin_note))
        except APIError as e:
            return ClaimResult.failure(e)

    async def _reject(self, request_id: str, admin_identity: str, admin_note: str | None) -> ClaimRequest:
        request = await self._get_pending(request_id)
        note = (admin_note or "").strip() or None
        now_iso = datetime.now(timezone.utc).isoformat()

        reviewed = execute(
            self.client.table(REQUESTS_TABLE)
            .update({
                "status": ClaimRequestStatus.REJECTED.value,
                "admin_note": note,
                "reviewed_by": admin_identity,
                "reviewed_at": now_iso,
            })
            .eq("id", request_id)
            .eq("status", ClaimRequestStatus.PENDING.value),
            "mark claim request rejected",
        )
        if not reviewed.data:
            raise NotFoundError("Request not found or already reviewed.")

        profile_id = request["profile_id"]
        if await self.count_pending_requests(profile_id) == 0:
            await self.profiles.set_claim_status(
                profile_id,
                ClaimStatus.UNCLAIMED,
                now_iso,
                expected_status=ClaimStatus.PENDING,
            )

        logger.info("Claim request %s rejected", request_id)
        await self._notify_decision(
            reviewed.data[0], request.get("requested_username") or profile_id, approved=False, note=note
        )
        return reviewed.data[0]

    async def _notify_decision(
        self,
        request: ClaimRequest,
        profile_label: str,
        approved: bool,
        note: str | None = None,
    ) -> None:
        to_email = request.get("requester_email")
        if not to_email:
            return
        await self.emails.send_claim_decision_email(to_email, profile_label, approved=approved, note=note)
