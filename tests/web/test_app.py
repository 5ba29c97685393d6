class TestHealth:
    def test_health_is_public(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestAuthMiddleware:
    def test_missing_token(self, client):
        response = client.get("/api/bills")
        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}

    def test_malformed_header(self, client):
        response = client.get("/api/bills", headers={"Authorization": "Token abc"})
        assert response.status_code == 401

    def test_forged_token(self, client):
        response = client.get("/api/bills", headers={"Authorization": "Bearer not-a-real-token"})
        assert response.status_code == 401

    def test_me_requires_token(self, client):
        assert client.get("/api/auth/me").status_code == 401

    def test_valid_token(self, client, auth_headers):
        assert client.get("/api/bills", headers=auth_headers).status_code == 200


class TestErrorMapping:
    def test_domain_error_body(self, client, auth_headers):
        response = client.get("/api/bills/does-not-exist", headers=auth_headers)
        assert response.status_code == 404
        assert response.json() == {"error": "Bill not found"}

    def test_unhandled_error_is_500(self, auth_headers):
        from unittest.mock import patch

        from starlette.testclient import TestClient

        from web.app import app

        client = TestClient(app, raise_server_exceptions=False)
        with patch("pragatibook.services.bill_service.BillService.list_bills", side_effect=RuntimeError("boom")):
            response = client.get("/api/bills", headers=auth_headers)
        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}
