"""
End-to-end tests of the HTTP API
"""
import uuid
from datetime import timedelta

import pytest

from app.schemas.user import Role
from app.services.auth import COOKIE_NAME, AuthService

from conftest import login


def unique(prefix: str) -> str:
    return f"{prefix}{uuid.uuid4().hex[:8]}"


def create_camera(client, headers, camera_id=None, name="Door"):
    camera_id = camera_id or unique("cam")
    response = client.post(
        "/api/camera",
        json={"id": camera_id, "name": name, "latitude": 40.4, "longitude": -3.7},
        headers=headers,
    )
    assert response.status_code == 200, response.text
    return camera_id


@pytest.fixture(scope="module")
def read_only_user(client, admin_headers):
    user_id = unique("viewer")
    response = client.post(
        "/api/user",
        json={"id": user_id, "name": "Viewer", "password": "viewer-pass"},
        headers=admin_headers,
    )
    assert response.status_code == 200, response.text
    return user_id


@pytest.fixture(scope="module")
def read_only_headers(client, read_only_user):
    return login(client, read_only_user, "viewer-pass")


class TestAuthentication:
    def test_default_admin_logs_in(self, client):
        response = client.post("/api/login", json={"id": "admin", "password": "admin123"})
        client.cookies.clear()
        assert response.status_code == 200
        body = response.json()
        assert body["id"] == "admin"
        assert body["role"] == Role.ADMIN.value
        assert body["token"]
        assert COOKIE_NAME in response.headers["set-cookie"]
        assert "HttpOnly" in response.headers["set-cookie"]

    def test_super_admin_logs_in(self, client):
        headers = login(client, "superAdmin", "super-secret")
        me = client.get("/api/me", headers=headers).json()
        assert me["id"] == "superAdmin"
        assert me["role"] == Role.ADMIN.value

    @pytest.mark.parametrize("credentials", [
        {"id": "admin", "password": "wrong"},
        {"id": "nobody", "password": "admin123"},
        {"id": "superAdmin", "password": "admin123"},
    ])
    def test_wrong_credentials(self, client, credentials):
        response = client.post("/api/login", json=credentials)
        assert response.status_code == 401
        assert response.json() == {"error": "incorrect user or password"}

    def test_login_needs_a_body(self, client):
        assert client.post("/api/login", content=b"").status_code == 400
        assert client.post("/api/login", content=b"{not json").status_code == 400

    def test_me(self, client, admin_headers):
        response = client.get("/api/me", headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["id"] == "admin"
        assert response.json()["expires"]

    def test_missing_auth(self, client):
        response = client.get("/api/camera")
        assert response.status_code == 401
        assert "error" in response.json()

    @pytest.mark.parametrize("header", ["Token abc", "Bearer", "Bearer a b"])
    def test_malformed_header(self, client, header):
        assert client.get("/api/me", headers={"Authorization": header}).status_code == 401

    def test_invalid_token(self, client):
        assert client.get("/api/me", headers={"Authorization": "Bearer not-a-jwt"}).status_code == 401

    def test_expired_token(self, client):
        claims = AuthService.new_claims("admin", "admin", Role.ADMIN, expires_delta=timedelta(minutes=-10))
        token = AuthService.create_access_token(claims)
        assert client.get("/api/me", headers={"Authorization": f"Bearer {token}"}).status_code == 401

    def test_session_cookie(self, client):
        try:
            assert client.post("/api/login", json={"id": "admin", "password": "admin123"}).status_code == 200
            assert client.get("/api/me").json()["id"] == "admin"

            renewed = client.get("/api/login")
            assert renewed.status_code == 200
            assert renewed.json()["token"]

            response = client.post("/api/logout")
            assert response.status_code == 204
            assert COOKIE_NAME in response.headers["set-cookie"]
        finally:
            client.cookies.clear()


class TestCameraCrud:
    def test_lifecycle(self, client, admin_headers):
        camera_id = create_camera(client, admin_headers)

        body = client.get(f"/api/camera/{camera_id}", headers=admin_headers).json()
        assert body["name"] == "Door"
        assert body["latitude"] == 40.4
        assert body["local_path"] is None
        assert body["created_at"]

        response = client.put(f"/api/camera/{camera_id}", json={"local_path": "/mnt/door"}, headers=admin_headers)
        assert response.status_code == 204
        body = client.get(f"/api/camera/{camera_id}", headers=admin_headers).json()
        assert body["local_path"] == "/mnt/door"
        assert body["name"] == "Door"

        response = client.put(f"/api/camera/{camera_id}", json={"local_path": None}, headers=admin_headers)
        assert response.status_code == 204
        assert client.get(f"/api/camera/{camera_id}", headers=admin_headers).json()["local_path"] is None

        assert client.delete(f"/api/camera/{camera_id}", headers=admin_headers).status_code == 204
        assert client.get(f"/api/camera/{camera_id}", headers=admin_headers).status_code == 404

    def test_create_requires_fields(self, client, admin_headers):
        response = client.post("/api/camera", json={"id": unique("cam"), "name": "No position"}, headers=admin_headers)
        assert response.status_code == 400
        assert "latitude" in response.json()["error"]

    def test_duplicate_id(self, client, admin_headers):
        camera_id = create_camera(client, admin_headers)
        response = client.post(
            "/api/camera",
            json={"id": camera_id, "name": "Again", "latitude": 1, "longitude": 1},
            headers=admin_headers,
        )
        assert response.status_code == 500
        assert "query" not in response.json()["error"]

    def test_unknown_id(self, client, admin_headers):
        assert client.get("/api/camera/does-not-exist", headers=admin_headers).status_code == 404
        response = client.put("/api/camera/does-not-exist", json={"name": "x"}, headers=admin_headers)
        assert response.status_code == 404

    def test_write_without_id(self, client, admin_headers):
        assert client.put("/api/camera", json={"name": "x"}, headers=admin_headers).status_code == 400
        assert client.delete("/api/camera", headers=admin_headers).status_code == 400

    def test_upload_not_supported(self, client, admin_headers):
        camera_id = create_camera(client, admin_headers)
        response = client.post(
            f"/api/camera/{camera_id}",
            files={"file": ("x.jpg", b"data", "image/jpeg")},
            headers=admin_headers,
        )
        assert response.status_code == 405

    @pytest.mark.parametrize("body", [b"", b"{", b'{"latitude": "north"}'])
    def test_bad_bodies(self, client, admin_headers, body):
        response = client.post("/api/camera", content=body, headers=admin_headers)
        assert response.status_code == 400


class TestListing:
    def test_filter_and_paginate(self, client, admin_headers):
        prefix = unique("lst")
        ids = sorted(create_camera(client, admin_headers, f"{prefix}-{n}", name=f"{prefix} cam") for n in range(3))

        first = client.get(
            "/api/camera",
            params={"q:name:like": f"{prefix}%", "sort": "id", "asc": "true", "limit": "2"},
            headers=admin_headers,
        )
        assert first.status_code == 200
        page = first.json()
        assert [c["id"] for c in page["data"]] == ids[:2]
        assert page["next"]

        second = client.get(f"/api/camera?{page['next']}", headers=admin_headers).json()
        assert [c["id"] for c in second["data"]] == ids[2:]
        assert second["next"] == ""

    def test_equal_values_are_ored(self, client, admin_headers):
        a = create_camera(client, admin_headers)
        b = create_camera(client, admin_headers)
        create_camera(client, admin_headers)
        response = client.get(f"/api/camera?q:id:eq={a}&q:id:eq={b}&sort=id&asc=yes", headers=admin_headers)
        assert [c["id"] for c in response.json()["data"]] == sorted([a, b])

    def test_descending_by_default(self, client, admin_headers):
        prefix = unique("desc")
        ids = [create_camera(client, admin_headers, f"{prefix}-{n}") for n in range(2)]
        data = client.get(f"/api/camera?q:id:like={prefix}%25&sort=id", headers=admin_headers).json()["data"]
        assert [c["id"] for c in data] == sorted(ids, reverse=True)

    @pytest.mark.parametrize("query", [
        "q:name=x",
        "q:name:between=x",
        "q:na-me:eq=x",
        "q:nope:eq=x",
        "sort=nope",
        "sort=na;me",
        "offset=abc",
        "q:created_at:gt=yesterday",
    ])
    def test_bad_queries(self, client, admin_headers, query):
        response = client.get(f"/api/camera?{query}", headers=admin_headers)
        assert response.status_code == 400
        assert response.json()["error"]

    def test_injection_is_a_literal(self, client, admin_headers):
        create_camera(client, admin_headers)
        response = client.get("/api/camera", params={"q:name:eq": "x' OR '1'='1"}, headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["data"] == []


class TestRedirects:
    def test_redirect_on_error(self, client, admin_headers):
        response = client.get(
            "/api/camera/does-not-exist?redirectOnError=/ui/cameras%3Fpage%3D2",
            headers=admin_headers,
            follow_redirects=False,
        )
        assert response.status_code == 307
        assert response.headers["location"].startswith("/ui/cameras?page=2&error=")

    def test_redirect_on_success(self, client, admin_headers):
        camera_id = create_camera(client, admin_headers)
        response = client.put(
            f"/api/camera/{camera_id}?redirectOnSuccess=/ui/done",
            json={"name": "Renamed"},
            headers=admin_headers,
            follow_redirects=False,
        )
        assert response.status_code == 307
        assert response.headers["location"] == "/ui/done"

    def test_no_redirect_without_parameter(self, client, admin_headers):
        response = client.get("/api/camera/does-not-exist", headers=admin_headers, follow_redirects=False)
        assert response.status_code == 404


class TestAccessControl:
    def test_read_only_reads(self, client, admin_headers, read_only_headers):
        camera_id = create_camera(client, admin_headers)
        assert client.get(f"/api/camera/{camera_id}", headers=read_only_headers).status_code == 200

    def test_read_only_cannot_write(self, client, read_only_headers):
        response = client.post(
            "/api/camera",
            json={"id": unique("cam"), "name": "x", "latitude": 1, "longitude": 1},
            headers=read_only_headers,
        )
        assert response.status_code == 401

    def test_users_see_only_themselves(self, client, read_only_user, read_only_headers):
        own = client.get(f"/api/user/{read_only_user}", headers=read_only_headers)
        assert own.status_code == 200
        assert own.json()["role"] == Role.READ_ONLY.value
        assert "password" not in own.json()
        assert "hash" not in own.json()

        assert client.get("/api/user/admin", headers=read_only_headers).status_code == 401
        assert client.get("/api/user", headers=read_only_headers).status_code == 401

    def test_users_cannot_promote_themselves(self, client, read_only_user, read_only_headers):
        response = client.put(f"/api/user/{read_only_user}", json={"role": "ADMIN"}, headers=read_only_headers)
        assert response.status_code == 401

    def test_password_change(self, client, admin_headers):
        user_id = unique("writer")
        client.post(
            "/api/user",
            json={"id": user_id, "name": "Writer", "role": "READ_WRITE", "password": "first"},
            headers=admin_headers,
        )
        headers = login(client, user_id, "first")
        response = client.put(f"/api/user/{user_id}", json={"password": "second"}, headers=headers)
        assert response.status_code == 204

        assert client.post("/api/login", json={"id": user_id, "password": "first"}).status_code == 401
        login(client, user_id, "second")

    def test_admin_lists_users_without_hashes(self, client, admin_headers):
        response = client.get("/api/user?q:id:eq=admin", headers=admin_headers)
        assert response.status_code == 200
        assert [u["id"] for u in response.json()["data"]] == ["admin"]
        assert b"$2" not in response.content


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
