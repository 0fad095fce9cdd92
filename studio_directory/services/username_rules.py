"""Username normalisation and validation rules."""

import re

MIN_LENGTH = 3
MAX_LENGTH = 32

_WHITESPACE = re.compile(r"\s+")
_INVALID_CHARS = re.compile(r"[^a-z0-9-]")
_REPEATED_HYPHENS = re.compile(r"-+")


def slugify_username(raw: str) -> str:
    """Normalise a username: lowercase, spaces to hyphens, drop anything else.

    Length is not enforced here.
    """
    slug = _WHITESPACE.sub("-", raw.strip().lower())
    slug = _INVALID_CHARS.sub("", slug)
    slug = _REPEATED_HYPHENS.sub("-", slug)
    return slug.strip("-")


def validate_username(raw: str) -> tuple[str | None, str | None]:
    """Normalise and length-check a username.

    Returns:
        tuple: (normalized, None) when valid, (None, error message) otherwise.
    """
    normalized = slugify_username(raw or "")
    if len(normalized) < MIN_LENGTH:
        return None, f"Username must be at least {MIN_LENGTH} characters."
    if len(normalized) > MAX_LENGTH:
        return None, f"Username must be at most {MAX_LENGTH} characters."
    return normalized, None
