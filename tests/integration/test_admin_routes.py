"""Integration tests for admin claim API endpoints."""

from conftest import ADMIN_IDENTITY, USER_IDENTITY

REQUESTS_TABLE = "profile_claim_requests"


def add_request(fake_db, profile_id: str, **fields) -> dict:
    row = {
        "profile_id": profile_id,
        "requester_user_id": USER_IDENTITY,
        "requester_email": None,
        "requested_username": "jane-doe",
        "message": "please",
        "status": "pending",
    }
    row.update(fields)
    return fake_db.insert(REQUESTS_TABLE, row)


class TestAdminAccess:
    """Tests for admin authorization."""

    def test_non_admin_is_403(self, client, fake_db, auth_header) -> None:
        """Test that regular users cannot generate claim links."""
        profile = fake_db.add_profile(username="studio-mk27")

        response = client.post(f"/api/v1/admin/profiles/{profile['id']}/claim-link", headers=auth_header())

        assert response.status_code == 403
        assert response.json()["error"] == "authorization_error"

    def test_missing_auth_is_401(self, client) -> None:
        """Test that admin routes require a token."""
        response = client.get("/api/v1/admin/claim-requests")

        assert response.status_code == 401

    def test_app_metadata_admin_is_allowed(self, client, auth_header) -> None:
        """Test that app_metadata.role=admin grants access."""
        response = client.get(
            "/api/v1/admin/claim-requests",
            headers=auth_header(USER_IDENTITY, app_metadata={"role": "admin"}),
        )

        assert response.status_code == 200


class TestGenerateClaimLink:
    """Tests for POST /api/v1/admin/profiles/{profile_id}/claim-link endpoint."""

    def test_returns_link(self, client, fake_db, auth_header) -> None:
        """Test that admins receive a claim URL and expiry."""
        profile = fake_db.add_profile(username="studio-mk27")

        response = client.post(
            f"/api/v1/admin/profiles/{profile['id']}/claim-link",
            headers=auth_header(ADMIN_IDENTITY),
        )

        assert response.status_code == 200
        data = response.json()
        assert data["profile_id"] == profile["id"]
        assert data["url"].startswith("https://directory.test/u/studio-mk27/claim?token=")
        assert data["expires_at"]

    def test_profile_without_username_is_422(self, client, fake_db, auth_header) -> None:
        """Test that profiles without a username cannot get a link."""
        profile = fake_db.add_profile()

        response = client.post(
            f"/api/v1/admin/profiles/{profile['id']}/claim-link",
            headers=auth_header(ADMIN_IDENTITY),
        )

        assert response.status_code == 422
        assert response.json()["message"] == "Profile has no username set."


class TestClaimRequestReview:
    """Tests for the admin claim request queue endpoints."""

    def test_list_and_get(self, client, fake_db, auth_header) -> None:
        """Test listing with a status filter and fetching a single request."""
        profile = fake_db.add_profile(username="studio-mk27")
        pending = add_request(fake_db, profile["id"])
        add_request(fake_db, profile["id"], status="rejected")

        listed = client.get(
            "/api/v1/admin/claim-requests?status=pending",
            headers=auth_header(ADMIN_IDENTITY),
        )
        single = client.get(
            f"/api/v1/admin/claim-requests/{pending['id']}",
            headers=auth_header(ADMIN_IDENTITY),
        )

        assert listed.status_code == 200
        assert [r["id"] for r in listed.json()] == [pending["id"]]
        assert single.json()["message"] == "please"

    def test_approve(self, client, fake_db, auth_header) -> None:
        """Test that approval hands over the profile."""
        profile = fake_db.add_profile(username="studio-mk27")
        request = add_request(fake_db, profile["id"])

        response = client.post(
            f"/api/v1/admin/claim-requests/{request['id']}/approve",
            headers=auth_header(ADMIN_IDENTITY),
        )

        assert response.status_code == 200
        assert response.json()["status"] == "approved"
        row = fake_db.get("profiles", profile["id"])
        assert row["owner_user_id"] == USER_IDENTITY
        assert row["username"] == "jane-doe"

    def test_reject_with_note(self, client, fake_db, auth_header) -> None:
        """Test that rejection stores the admin note."""
        profile = fake_db.add_profile(username="studio-mk27")
        request = add_request(fake_db, profile["id"])

        response = client.post(
            f"/api/v1/admin/claim-requests/{request['id']}/reject",
            json={"note": "no proof"},
            headers=auth_header(ADMIN_IDENTITY),
        )

        assert response.status_code == 200
        assert response.json()["status"] == "rejected"
        assert response.json()["admin_note"] == "no proof"

    def test_review_twice_is_404(self, client, fake_db, auth_header) -> None:
        """Test that an already reviewed request cannot be reviewed again."""
        profile = fake_db.add_profile(username="studio-mk27")
        request = add_request(fake_db, profile["id"], status="approved")

        response = client.post(
            f"/api/v1/admin/claim-requests/{request['id']}/reject",
            headers=auth_header(ADMIN_IDENTITY),
        )

        assert response.status_code == 404
