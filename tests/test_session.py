import inspect
import os

import pytest

from vidtube.api.v1.endpoints import user as user_endpoints
from vidtube.api.v1.endpoints import video as video_endpoints
from vidtube.core.exceptions import TokenExpiredOrReused
from vidtube.db.models.user import User

from conftest import API, auth_headers, login, register_user, signup


def test_register_returns_sanitized_user(client, asset_store):
    user = register_user(client, "Carol", cover=True)
    assert user["username"] == "carol"
    assert user["email"] == "carol@example.com"
    assert user["avatar"].startswith("https://")
    assert user["coverImage"].startswith("https://")
    assert "password" not in user and "passwordHash" not in user
    assert "refreshToken" not in user
    assert len(asset_store.uploaded) == 2


def test_register_requires_avatar(client, settings):
    r = client.post(f"{API}/users/register", data={
        "fullName": "No Avatar", "email": "na@example.com", "username": "na", "password": "pw",
    })
    assert r.status_code == 400
    body = r.json()
    assert body["success"] is False
    assert body["message"] == "Avatar file is required"


def test_register_rejects_blank_fields_before_staging_files(client, settings, asset_store):
    r = client.post(f"{API}/users/register", data={
        "fullName": "   ", "email": "x@example.com", "username": "x", "password": "pw",
    }, files={"avatar": ("a.png", b"img", "image/png")})
    assert r.status_code == 400
    assert asset_store.uploaded == []


def test_register_duplicate_is_conflict_and_cleans_temp_files(client, settings):
    register_user(client, "dave")
    r = client.post(f"{API}/users/register", data={
        "fullName": "Dave Again", "email": "other@example.com", "username": "DAVE", "password": "pw",
    }, files={"avatar": ("a.png", b"img", "image/png")})
    assert r.status_code == 409
    assert r.json()["message"] == "User with email or username already exists"
    temp_dir = settings.UPLOAD_TEMP_DIR
    assert not os.path.isdir(temp_dir) or os.listdir(temp_dir) == []


def test_login_with_email_sets_cookies(client):
    register_user(client, "erin")
    r = client.post(f"{API}/users/login", json={"email": "ERIN@example.com", "password": "secret-pass"})
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["user"]["username"] == "erin"
    assert not {"password", "passwordHash", "refreshToken"} & set(data["user"])
    assert r.cookies.get("accessToken") == data["accessToken"]
    assert r.cookies.get("refreshToken") == data["refreshToken"]


def test_login_requires_identifier(client):
    r = client.post(f"{API}/users/login", json={"password": "whatever"})
    assert r.status_code == 400
    assert r.json()["message"] == "Username or Email is required"


def test_login_unknown_user_and_wrong_password(client):
    register_user(client, "frank")
    r = client.post(f"{API}/users/login", json={"username": "nobody", "password": "x"})
    assert r.status_code == 404
    r = client.post(f"{API}/users/login", json={"username": "frank", "password": "wrong"})
    assert r.status_code == 401
    assert r.json()["message"] == "Invalid user credentials"


def test_current_user_requires_token(client):
    r = client.get(f"{API}/users/current-user")
    assert r.status_code == 401
    r = client.get(f"{API}/users/current-user", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401


def test_cookie_token_takes_precedence_over_header(client):
    register_user(client, "gina")
    register_user(client, "hank")
    hank_tokens = login(client, "hank")
    client.post(f"{API}/users/login", json={"username": "gina", "password": "secret-pass"})
    r = client.get(f"{API}/users/current-user", headers=auth_headers(hank_tokens))
    assert r.status_code == 200
    assert r.json()["data"]["username"] == "gina"


def test_refresh_rotates_and_rejects_reuse(client):
    register_user(client, "ivan")
    tokens = login(client, "ivan")
    old_refresh = tokens["refreshToken"]

    r = client.post(f"{API}/users/refresh-token", json={"refreshToken": old_refresh})
    assert r.status_code == 200, r.text
    rotated = r.json()["data"]
    assert rotated["refreshToken"] != old_refresh
    client.cookies.clear()

    r = client.post(f"{API}/users/refresh-token", json={"refreshToken": old_refresh})
    assert r.status_code == 401
    assert r.json()["message"] == "Refresh token is expired or used"

    r = client.post(f"{API}/users/refresh-token", json={"refreshToken": rotated["refreshToken"]})
    assert r.status_code == 200


def test_refresh_reads_cookie(client):
    register_user(client, "jane")
    client.post(f"{API}/users/login", json={"username": "jane", "password": "secret-pass"})
    r = client.post(f"{API}/users/refresh-token")
    assert r.status_code == 200
    assert r.cookies.get("refreshToken") == r.json()["data"]["refreshToken"]


def test_refresh_without_token_is_unauthorized(client):
    r = client.post(f"{API}/users/refresh-token")
    assert r.status_code == 401


def test_refresh_rejects_access_token(client):
    register_user(client, "kate")
    tokens = login(client, "kate")
    r = client.post(f"{API}/users/refresh-token", json={"refreshToken": tokens["accessToken"]})
    assert r.status_code == 401


def test_second_login_invalidates_first_refresh_token(client):
    register_user(client, "liam")
    first = login(client, "liam")
    login(client, "liam")
    r = client.post(f"{API}/users/refresh-token", json={"refreshToken": first["refreshToken"]})
    assert r.status_code == 401


def test_logout_clears_refresh_token(client):
    register_user(client, "mona")
    tokens = login(client, "mona")
    r = client.post(f"{API}/users/logout", headers=auth_headers(tokens))
    assert r.status_code == 200
    r = client.post(f"{API}/users/refresh-token", json={"refreshToken": tokens["refreshToken"]})
    assert r.status_code == 401
    # The access token itself stays valid until it expires
    r = client.get(f"{API}/users/current-user", headers=auth_headers(tokens))
    assert r.status_code == 200


def test_change_password(client):
    _, headers = signup(client, "nina")
    r = client.patch(f"{API}/users/password", json={"oldPassword": "wrong", "newPassword": "new-pass"},
                     headers=headers)
    assert r.status_code == 401
    r = client.patch(f"{API}/users/password", json={"oldPassword": "secret-pass", "newPassword": "new-pass"},
                     headers=headers)
    assert r.status_code == 200
    login(client, "nina", "new-pass")
    r = client.post(f"{API}/users/login", json={"username": "nina", "password": "secret-pass"})
    assert r.status_code == 401


def test_refresh_fails_when_token_rotated_concurrently(app, client, db_session, monkeypatch):
    user = register_user(client, "olga")
    tokens = login(client, "olga")
    services = app.state.services
    issue_pair = services.tokens.issue_pair

    def issue_after_other_device_rotated(target):
        db_session.query(User).filter(User.id == target.id).update(
            {User.refresh_token: "from-other-device"}, synchronize_session=False
        )
        return issue_pair(target)

    monkeypatch.setattr(services.tokens, "issue_pair", issue_after_other_device_rotated)
    with pytest.raises(TokenExpiredOrReused):
        services.sessions.refresh(db_session, tokens["refreshToken"])

    stored = db_session.query(User.refresh_token).filter(User.id == user["id"]).scalar()
    assert stored == "from-other-device"


@pytest.mark.parametrize("handler", [
    user_endpoints.register,
    user_endpoints.login,
    user_endpoints.change_password,
    user_endpoints.update_avatar,
    user_endpoints.update_cover_image,
    video_endpoints.publish_video,
    video_endpoints.update_video,
    video_endpoints.delete_video,
])
def test_hashing_and_upload_handlers_run_in_threadpool(handler):
    assert not inspect.iscoroutinefunction(handler)
