"""Pytest configuration and fixtures."""

import json
import os
import time
from collections.abc import Callable, Generator
from typing import Any
from unittest.mock import patch

import jwt
import pytest
from cryptography.hazmat.primitives.asymmetric import ec
from fastapi.testclient import TestClient
from jwt.algorithms import ECAlgorithm

from fakes import FakeSupabase

USER_IDENTITY = "550e8400-e29b-41d4-a716-446655440000"
OTHER_IDENTITY = "660e8400-e29b-41d4-a716-446655440000"
ADMIN_IDENTITY = "770e8400-e29b-41d4-a716-446655440000"

# ES256 keypair standing in for the Supabase project signing key
SIGNING_KEY = ec.generate_private_key(ec.SECP256R1())
PUBLIC_JWK = json.dumps(json.loads(ECAlgorithm.to_jwk(SIGNING_KEY.public_key())) | {"alg": "ES256"})

# Set test environment variables before importing application modules
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SECRET_KEY", "test-secret-key")
os.environ["SUPABASE_SIGNING_KEY_JWK"] = PUBLIC_JWK
os.environ["SITE_URL"] = "https://directory.test/"
os.environ["ADMIN_USER_IDS"] = ADMIN_IDENTITY
os.environ["RESEND_API_KEY"] = ""


def create_test_token(
    sub: str = USER_IDENTITY,
    email: str | None = "test@example.com",
    app_metadata: dict[str, Any] | None = None,
    exp_offset: int = 3600,
    key: Any = None,
) -> str:
    """Create an ES256 JWT shaped like a Supabase access token.

    Args:
        sub: Subject (caller identity).
        email: Caller email.
        app_metadata: Provider-managed metadata claim.
        exp_offset: Seconds from now for expiration (negative for expired).
        key: Signing key; defaults to the test project key.

    Returns:
        str: Encoded JWT token.
    """
    now = int(time.time())
    payload = {
        "sub": sub,
        "email": email,
        "role": "authenticated",
        "app_metadata": app_metadata or {},
        "exp": now + exp_offset,
        "iat": now,
        "aud": "authenticated",
    }
    return jwt.encode(payload, key or SIGNING_KEY, algorithm="ES256")


@pytest.fixture(autouse=True)
def fresh_settings() -> Generator[None, None, None]:
    """Reload settings and signing key for every test."""
    from studio_directory.api.middleware.auth import get_signing_key
    from studio_directory.core.config import get_settings

    get_settings.cache_clear()
    get_signing_key.cache_clear()
    yield
    get_settings.cache_clear()
    get_signing_key.cache_clear()


@pytest.fixture
def fake_db() -> FakeSupabase:
    """Provide an empty in-memory Supabase double."""
    return FakeSupabase()


@pytest.fixture
def auth_header() -> Callable[..., dict[str, str]]:
    """Build Authorization headers for test callers."""

    def _header(sub: str = USER_IDENTITY, **kwargs: Any) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_test_token(sub=sub, **kwargs)}"}

    return _header


@pytest.fixture
def client(fake_db: FakeSupabase) -> Generator[TestClient, None, None]:
    """Provide a test client whose services talk to the in-memory database.

    Args:
        fake_db: In-memory Supabase double.

    Yields:
        TestClient: FastAPI test client.
    """
    with (
        patch("studio_directory.services.claim_service.get_supabase_client", return_value=fake_db),
        patch("studio_directory.services.claim_request_service.get_supabase_client", return_value=fake_db),
        patch("studio_directory.core.supabase.get_supabase_client", return_value=fake_db),
    ):
        from studio_directory.main import app

        with TestClient(app) as test_client:
            yield test_client
