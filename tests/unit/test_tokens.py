"""Unit tests for claim token generation and hashing."""

import re

from studio_directory.core.tokens import hash_token, issue_token


class TestIssueToken:
    """Tests for issue_token."""

    def test_returns_64_hex_characters(self) -> None:
        assert re.fullmatch(r"[0-9a-f]{64}", issue_token())

    def test_tokens_are_unique(self) -> None:
        assert len({issue_token() for _ in range(50)}) == 50


class TestHashToken:
    """Tests for hash_token."""

    def test_matches_sha256_hex(self) -> None:
        assert hash_token("abc") == "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"

    def test_is_deterministic(self) -> None:
        token = issue_token()
        assert hash_token(token) == hash_token(token)

    def test_ignores_surrounding_whitespace(self) -> None:
        assert hash_token("  abc\n") == hash_token("abc")

    def test_digest_differs_from_token(self) -> None:
        token = issue_token()
        assert hash_token(token) != token
