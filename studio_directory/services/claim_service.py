"""Profile claim link business logic service.

A claim link lets the rightful owner of an operator-created profile take it
over exactly once:

    issue_claim_link   -> stores sha256(token), returns a URL with the raw token
    redeem_claim_link  -> compare-and-swap on (id, digest, unclaimed)
                       -> demotes the caller's other profiles (best effort)

The raw token is never persisted or logged; only profile ids appear in logs.
"""

import logging
from datetime import datetime, timedelta, timezone
from urllib.parse import quote

from supabase import Client

from studio_directory.api.middleware.error_handler import (
    APIError,
    AuthenticationError,
    NotFoundError,
    ValidationError,
)
from studio_directory.core.config import get_settings
from studio_directory.core.supabase import execute, get_supabase_client
from studio_directory.core.tokens import hash_token, issue_token
from studio_directory.models.profile import ClaimStatus
from studio_directory.schemas.claim import ClaimLinkResponse
from studio_directory.services.profile_service import PROFILES_TABLE, ProfileService
from studio_directory.services.results import ClaimResult

logger = logging.getLogger(__name__)

INVALID_LINK_MESSAGE = "This claim link is invalid, already used, or expired."
CLAIM_MESSAGES_TABLE = "profile_claim_messages"


class ClaimService:
    """Service for issuing and redeeming profile claim links."""

    def __init__(
        self,
        client: Client | None = None,
        profile_service: ProfileService | None = None,
    ) -> None:
        """Initialize claim service with Supabase client.

        Args:
            client: Optional client; defaults to the shared singleton.
            profile_service: Optional profile service sharing the client.
        """
        self.client = client or get_supabase_client()
        self.profiles = profile_service or ProfileService(self.client)
        self.settings = get_settings()

    def build_claim_url(self, username: str, token: str) -> str:
        """Build the public claim URL for a profile."""
        return (
            f"{self.settings.site_base_url}/u/{quote(username, safe='')}"
            f"/claim?token={quote(token, safe='')}"
        )

    async def issue_claim_link(self, profile_id: str) -> ClaimResult[ClaimLinkResponse]:
        """Generate a fresh claim link for a profile.

        Any previously issued link for the profile stops working, and any
        prior owner is cleared.

        Args:
            profile_id: The profile's id.

        Returns:
            ClaimResult: The link on success; NotFoundError, ValidationError
            or StoreError on failure.
        """
        try:
            return ClaimResult.success(await self._issue_claim_link(profile_id))
        except APIError as e:
            return ClaimResult.failure(e)

    async def _issue_claim_link(self, profile_id: str) -> ClaimLinkResponse:
        profile = await self.profiles.get_profile_by_id(profile_id)
        if not profile:
            raise NotFoundError("Profile not found.")

        username = (profile.get("username") or "").strip()
        if not username:
            raise ValidationError(
                "Profile has no username set.",
                details=[{"loc": ["username"], "msg": "Profile has no username set.", "type": "missing"}],
            )

        token = issue_token()
        now = datetime.now(timezone.utc)
        expires_at = now + timedelta(days=self.settings.claim_link_ttl_days)

        response = execute(
            self.client.table(PROFILES_TABLE)
            .update({
                "claim_token_hash": hash_token(token),
                "claim_expires_at": expires_at.isoformat(),
                "claim_status": ClaimStatus.UNCLAIMED.value,
                "owner_user_id": None,
                "claimed_at": None,
                "updated_at": now.isoformat(),
            })
            .eq("id", profile_id),
            "issue claim link",
        )
        if not response.data:
            raise NotFoundError("Profile not found.")

        logger.info("Claim link issued for profile %s, expires %s", profile_id, expires_at.isoformat())
        return ClaimLinkResponse(
            profile_id=profile_id,
            url=self.build_claim_url(username, token),
            expires_at=expires_at,
        )

    async def redeem_claim_link(
        self,
        token: str | None,
        requesting_identity: str | None,
        message: str | None = None,
    ) -> ClaimResult[str]:
        """Take ownership of the profile a claim link points at.

        Args:
            token: Raw token from the claim link.
            requesting_identity: Identity of the signed-in caller, if any.
            message: Optional note kept alongside the claim.

        Returns:
            ClaimResult: The claimed profile id on success. Failures carry
            AuthenticationError, ValidationError, NotFoundError (invalid,
            used or expired link, or a lost race) or StoreError.
        """
        try:
            return ClaimResult.success(await self._redeem_claim_link(token, requesting_identity, message))
        except APIError as e:
            return ClaimResult.failure(e)

    async def _redeem_claim_link(self, token: str | None, requesting_identity: str | None, message: str | None) -> str:
        if not requesting_identity:
            raise AuthenticationError("You must be signed in to claim a profile.")

        trimmed = (token or "").strip()
        if not trimmed:
            raise ValidationError(
                "Invalid or missing claim token.",
                details=[{"loc": ["token"], "msg": "Invalid or missing claim token.", "type": "missing"}],
            )

        digest = hash_token(trimmed)
        now_iso = datetime.now(timezone.utc).isoformat()

        lookup = execute(
            self.client.table(PROFILES_TABLE)
            .select("id")
            .eq("claim_token_hash", digest)
            .eq("claim_status", ClaimStatus.UNCLAIMED.value)
            .or_(f'claim_expires_at.is.null,claim_expires_at.gt."{now_iso}"')
            .limit(1),
            "find claimable profile",
        )
        if not lookup.data:
            raise NotFoundError(INVALID_LINK_MESSAGE)

        profile_id = lookup.data[0]["id"]

        # The digest and status predicates make this a compare-and-swap: a
        # concurrent redeemer that got here first leaves nothing to match.
        claimed = execute(
            self.client.table(PROFILES_TABLE)
            .update({
                "owner_user_id": requesting_identity,
                "claim_status": ClaimStatus.CLAIMED.value,
                "claim_token_hash": None,
                "claim_expires_at": None,
                "claimed_at": now_iso,
                "is_primary": True,
                "is_hidden": False,
                "updated_at": now_iso,
            })
            .eq("id", profile_id)
            .eq("claim_token_hash", digest)
            .eq("claim_status", ClaimStatus.UNCLAIMED.value),
            "claim profile",
        )
        if not claimed.data:
            logger.info("Claim of profile %s lost to a concurrent redemption", profile_id)
            raise NotFoundError(INVALID_LINK_MESSAGE)

        logger.info("Profile %s claimed", profile_id)
        await demote_siblings(self.profiles, requesting_identity, profile_id, now_iso)
        await self._record_claim_message(profile_id, requesting_identity, message)
        return profile_id

    async def _record_claim_message(self, profile_id: str, identity: str, message: str | None) -> None:
        text = (message or "").strip()
        if not text:
            return
        try:
            execute(
                self.client.table(CLAIM_MESSAGES_TABLE).insert({
                    "profile_id": profile_id,
                    "user_id": identity,
                    "message": text,
                }),
                "store claim message",
            )
        except APIError:
            logger.warning("Claim message for profile %s was not stored", profile_id)


async def demote_siblings(
    profiles: ProfileService,
    identity: str,
    keep_profile_id: str,
    now_iso: str,
    clear_legacy_link: bool = False,
) -> list[str]:
    """Hide every other profile owned by an identity.

    Keeps at most one visible primary profile per identity. Failures are
    logged and swallowed so they never undo a completed claim. Approvals pass
    clear_legacy_link so demoted rows drop their legacy owner.

    Returns:
        list[str]: Ids of demoted profiles (empty on failure).
    """
    try:
        sibling_ids = await profiles.find_owned_profile_ids(identity, exclude_profile_id=keep_profile_id)
        await profiles.demote_profiles(sibling_ids, now_iso, clear_legacy_link=clear_legacy_link)
    except Exception:
        logger.warning("Sibling demotion failed after claiming profile %s", keep_profile_id, exc_info=True)
        return []

    if sibling_ids:
        logger.info("Demoted %d sibling profile(s) after claiming %s", len(sibling_ids), keep_profile_id)
    return sibling_ids
