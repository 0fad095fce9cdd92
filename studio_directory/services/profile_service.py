"""Profile data access used by the claim flows."""

from supabase import Client

from studio_directory.core.supabase import execute, get_supabase_client
from studio_directory.models.profile import ClaimStatus, Profile

PROFILES_TABLE = "profiles"
TEAM_MEMBERS_TABLE = "listing_team_members"

# Columns that link a profile to an identity. legacy_user_id predates
# owner_user_id and is still populated on older rows; both are treated as a
# single "owned by" predicate.
OWNER_COLUMNS = ("owner_user_id", "legacy_user_id")


def owned_by_filter(identity: str) -> str:
    """Build a PostgREST or-filter matching profiles owned by an identity."""
    return ",".join(f'{column}.eq."{identity}"' for column in OWNER_COLUMNS)


class ProfileService:
    """Service for reading and updating profile rows."""

    def __init__(self, client: Client | None = None) -> None:
        """Initialize profile service with Supabase client.

        Args:
            client: Optional client; defaults to the shared singleton.
        """
        self.client = client or get_supabase_client()

    async def get_profile_by_id(self, profile_id: str) -> Profile | None:
        """Get a profile by profile ID.

        Args:
            profile_id: The profile's id.

        Returns:
            dict | None: The profile data or None if not found.
        """
        response = execute(
            self.client.table(PROFILES_TABLE)
            .select("*")
            .eq("id", profile_id)
            .maybe_single(),
            "get profile",
        )
        return response.data if response and response.data else None

    async def is_username_taken(self, username: str, exclude_profile_id: str | None = None) -> bool:
        """Check whether a username is used by another profile, ignoring case.

        Args:
            username: A normalised username (only [a-z0-9-], so no
                pattern characters reach the ilike filter).
            exclude_profile_id: Profile allowed to hold the username already.

        Returns:
            bool: True if another profile has the username.
        """
        query = self.client.table(PROFILES_TABLE).select("id").ilike("username", username)
        if exclude_profile_id:
            query = query.neq("id", exclude_profile_id)
        response = execute(query.limit(1), "check username")
        return bool(response.data)

    async def set_claim_status(
        self,
        profile_id: str,
        claim_status: ClaimStatus,
        now_iso: str,
        expected_status: ClaimStatus | None = None,
    ) -> bool:
        """Set a profile's claim status.

        Args:
            profile_id: The profile's id.
            claim_status: New status.
            now_iso: Timestamp written to updated_at.
            expected_status: Only update when the row currently has this status.

        Returns:
            bool: True if a row was updated.
        """
        query = (
            self.client.table(PROFILES_TABLE)
            .update({"claim_status": claim_status.value, "updated_at": now_iso})
            .eq("id", profile_id)
        )
        if expected_status is not None:
            query = query.eq("claim_status", expected_status.value)
        response = execute(query, "set claim status")
        return bool(response.data)

    async def find_owned_profile_ids(self, identity: str, exclude_profile_id: str) -> list[str]:
        """List ids of profiles owned by an identity, other than one profile.

        Args:
            identity: Owning identity.
            exclude_profile_id: Profile to leave out (the one just claimed).

        Returns:
            list[str]: Matching profile ids.
        """
        response = execute(
            self.client.table(PROFILES_TABLE)
            .select("id")
            .neq("id", exclude_profile_id)
            .or_(owned_by_filter(identity)),
            "find owned profiles",
        )
        return [row["id"] for row in response.data or []]

    async def demote_profiles(self, profile_ids: list[str], now_iso: str, clear_legacy_link: bool = False) -> None:
        """Hide profiles and clear their primary flag.

        With clear_legacy_link, legacy_user_id is also nulled so the demoted
        rows stop counting as owned by that identity.
        """
        if not profile_ids:
            return
        update = {"is_hidden": True, "is_primary": False, "updated_at": now_iso}
        if clear_legacy_link:
            update["legacy_user_id"] = None
        execute(
            self.client.table(PROFILES_TABLE)
            .update(update)
            .in_("id", profile_ids),
            "demote profiles",
        )

    async def transfer_listing_team_members(self, from_profile_id: str, to_profile_id: str) -> None:
        """Move listing credits from one profile to another."""
        if from_profile_id == to_profile_id:
            return
        execute(
            self.client.table(TEAM_MEMBERS_TABLE)
            .update({"profile_id": to_profile_id})
            .eq("profile_id", from_profile_id),
            "transfer team members",
        )
