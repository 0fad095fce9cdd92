"""Claim token generation and hashing.

A claim token is a bearer secret handed to a profile's rightful owner exactly
once. Only its SHA-256 digest is persisted, so a leaked database row cannot be
turned back into a working claim link.
"""

import hashlib
import secrets

TOKEN_BYTES = 32  # 256 bits of entropy, 64 hex characters


def issue_token() -> str:
    """Generate a cryptographically secure claim token.

    Returns:
        str: A 64-character hex token.
    """
    return secrets.token_hex(TOKEN_BYTES)


def hash_token(token: str) -> str:
    """Compute the stored digest for a claim token.

    Surrounding whitespace is ignored so a pasted link still matches.

    Args:
        token: The raw claim token.

    Returns:
        str: Lowercase hex SHA-256 digest.
    """
    return hashlib.sha256(token.strip().encode("utf-8")).hexdigest()
