"""Unit tests for application settings."""

from studio_directory.core.config import get_settings


class TestSettings:
    """Tests for Settings derived properties."""

    def test_site_base_url_strips_trailing_slash(self) -> None:
        assert get_settings().site_base_url == "https://directory.test"

    def test_claim_link_ttl_defaults_to_14_days(self) -> None:
        assert get_settings().claim_link_ttl_days == 14

    def test_admin_user_ids_list(self, monkeypatch) -> None:
        monkeypatch.setenv("ADMIN_USER_IDS", " a , b,,")
        get_settings.cache_clear()
        assert get_settings().admin_user_ids_list == ["a", "b"]

    def test_email_disabled_without_api_key(self) -> None:
        assert get_settings().email_enabled is False
