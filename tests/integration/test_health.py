"""Integration tests for health check endpoints."""


class TestHealth:
    """Tests for /health endpoints."""

    def test_liveness(self, client) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"]

    def test_readiness_probes_claim_tables(self, client) -> None:
        response = client.get("/health/ready")

        assert response.status_code == 200
        assert [check["name"] for check in response.json()["checks"]] == ["profiles", "profile_claim_requests"]

    def test_readiness_unhealthy(self, client, fake_db) -> None:
        fake_db.failures.add(("profile_claim_requests", "select"))

        response = client.get("/health/ready")

        assert response.status_code == 503
        data = response.json()
        assert data["status"] == "unhealthy"
        assert [check["healthy"] for check in data["checks"]] == [True, False]
