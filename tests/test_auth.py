"""Tests for session auth and API access control."""

import pytest

from mortgage_crm.extensions import db
from mortgage_crm.models.user import User


class TestLogin:

    def test_login_and_me(self, client, seed_data):
        resp = client.post("/auth/login", json={
            "email": "ADMIN@mortgage.local",
            "password": seed_data["admin_password"],
        })
        assert resp.status_code == 200
        assert resp.get_json()["email"] == seed_data["admin_email"]

        resp = client.get("/auth/me")
        assert resp.status_code == 200
        assert resp.get_json()["is_admin"] is True

    def test_session_unlocks_api(self, client, seed_data):
        client.post("/auth/login", json={
            "email": seed_data["admin_email"],
            "password": seed_data["admin_password"],
        })
        resp = client.get("/api/leads")
        assert resp.status_code == 200
        assert resp.get_json() == []

    def test_wrong_password(self, client, seed_data):
        resp = client.post("/auth/login", json={
            "email": seed_data["admin_email"],
            "password": "wrong",
        })
        assert resp.status_code == 401
        assert resp.get_json() == {"error": "Invalid email or password."}

    def test_missing_fields(self, client, seed_data):
        resp = client.post("/auth/login", json={"email": seed_data["admin_email"]})
        assert resp.status_code == 400

    def test_deactivated_user(self, client, seed_data):
        user = db.session.get(User, seed_data["admin_id"])
        user.is_active = False
        db.session.commit()

        resp = client.post("/auth/login", json={
            "email": seed_data["admin_email"],
            "password": seed_data["admin_password"],
        })
        assert resp.status_code == 403

    def test_logout(self, client, seed_data):
        client.post("/auth/login", json={
            "email": seed_data["admin_email"],
            "password": seed_data["admin_password"],
        })
        resp = client.post("/auth/logout")
        assert resp.status_code == 200

        resp = client.get("/auth/me")
        assert resp.status_code == 401


class TestApiAccess:

    @pytest.mark.parametrize("path", [
        "/api/dashboard",
        "/api/leads",
        "/api/referrers",
        "/api/checklist-templates",
    ])
    def test_unauthenticated_gets_401(self, client, path):
        resp = client.get(path)
        assert resp.status_code == 401

    def test_bearer_key(self, client, api_headers):
        assert client.get("/api/dashboard", headers=api_headers).status_code == 200

    def test_wrong_bearer_key(self, client):
        resp = client.get("/api/dashboard", headers={"Authorization": "Bearer wrong"})
        assert resp.status_code == 401
        assert resp.get_json() == {"error": "Invalid API key"}

    def test_security_headers(self, client, api_headers):
        resp = client.get("/api/dashboard", headers=api_headers)
        assert resp.headers["X-Content-Type-Options"] == "nosniff"
        assert resp.headers["X-Frame-Options"] == "DENY"

    def test_method_not_allowed_is_json(self, client, api_headers):
        resp = client.put("/api/leads", headers=api_headers)
        assert resp.status_code == 405
        assert "error" in resp.get_json()
