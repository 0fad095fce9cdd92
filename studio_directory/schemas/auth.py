"""Authentication schemas for JWT tokens and caller identity."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class UserContext(BaseModel):
    """Caller identity extracted from a validated JWT.

    The identity is treated as an opaque key; services receive it
    explicitly rather than looking it up from ambient session state.
    """

    model_config = ConfigDict(from_attributes=True)

    identity: str = Field(description="Opaque identity of the caller (JWT sub claim)")
    email: str | None = Field(default=None, description="Caller's email address if available")
    is_admin: bool = Field(default=False, description="Whether the caller may use admin endpoints")


class TokenPayload(BaseModel):
    """JWT token payload structure for Supabase tokens."""

    model_config = ConfigDict(from_attributes=True)

    sub: str = Field(description="Subject - the caller's identity")
    email: str | None = Field(default=None, description="User's email address")
    role: str | None = Field(default=None, description="Database role claim")
    app_metadata: dict[str, Any] = Field(default_factory=dict, description="Provider-managed metadata")
    exp: int = Field(description="Expiration timestamp (Unix epoch)")
    iat: int = Field(description="Issued at timestamp (Unix epoch)")

    @property
    def app_role(self) -> str | None:
        """Application role assigned in app_metadata, if any."""
        role = self.app_metadata.get("role")
        return role if isinstance(role, str) else None

    def to_user_context(self, admin_identities: list[str] | None = None) -> UserContext:
        """Convert token payload to UserContext.

        Args:
            admin_identities: Identities granted admin access by configuration.

        Returns:
            UserContext: Caller context derived from token claims.
        """
        is_admin = self.app_role == "admin" or self.sub in (admin_identities or [])
        return UserContext(identity=self.sub, email=self.email, is_admin=is_admin)
