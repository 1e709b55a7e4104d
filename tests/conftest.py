import os
from typing import Dict, List, Optional, Tuple

import pytest
from fastapi.testclient import TestClient

from vidtube.config import Settings
from vidtube.core.asset_store import UploadedAsset, remove_local_file
from vidtube.core.cache import RedisCache
from vidtube.main import create_app

API = "/api/v1"


class FakeAssetStore:
    """Records uploads/deletes instead of talking to Cloudinary"""

    def __init__(self):
        self.uploaded: List[str] = []
        self.deleted: List[Tuple[str, str]] = []
        self.fail_uploads = False
        self.video_duration = 42.5

    def upload(self, local_path: Optional[str]) -> Optional[UploadedAsset]:
        if not local_path:
            return None
        name = os.path.basename(local_path)
        existed = os.path.exists(local_path)
        remove_local_file(local_path)
        if self.fail_uploads or not existed:
            return None
        url = f"https://res.cloudinary.test/demo/upload/v1/{name}"
        self.uploaded.append(url)
        duration = self.video_duration if name.endswith(".mp4") else None
        return UploadedAsset(url=url, public_id=name.split(".")[0], duration=duration)

    def delete(self, url: Optional[str], kind: str = "image") -> bool:
        if not url:
            return False
        self.deleted.append((url, kind))
        return True


@pytest.fixture
def settings(tmp_path):
    return Settings(
        DATABASE_URL="sqlite://",
        COOKIE_SECURE=False,
        UPLOAD_TEMP_DIR=str(tmp_path / "temp"),
        ACCESS_TOKEN_SECRET="test-access-secret-0123456789abcdef",
        REFRESH_TOKEN_SECRET="test-refresh-secret-0123456789abcdef",
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def asset_store():
    return FakeAssetStore()


@pytest.fixture
def app(settings, asset_store):
    return create_app(settings=settings, asset_store=asset_store, cache=RedisCache(None))


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db_session(app):
    db = app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def register_user(client, username: str, password: str = "secret-pass", cover: bool = False) -> Dict:
    files = {"avatar": ("avatar.png", b"\x89PNG avatar", "image/png")}
    if cover:
        files["coverImage"] = ("cover.png", b"\x89PNG cover", "image/png")
    r = client.post(f"{API}/users/register", data={
        "fullName": username.title(),
        "email": f"{username}@example.com",
        "username": username,
        "password": password,
    }, files=files)
    assert r.status_code == 201, f"register {username} failed: {r.text}"
    return r.json()["data"]


def login(client, username: str, password: str = "secret-pass") -> Dict:
    """Log in and return the body; the cookie jar is cleared so callers pick identities by header"""
    r = client.post(f"{API}/users/login", json={"username": username, "password": password})
    assert r.status_code == 200, f"login {username} failed: {r.text}"
    client.cookies.clear()
    return r.json()["data"]


def auth_headers(tokens: Dict) -> Dict[str, str]:
    return {"Authorization": f"Bearer {tokens['accessToken']}"}


def signup(client, username: str) -> Tuple[Dict, Dict[str, str]]:
    """Register + log in; returns (user, headers)"""
    user = register_user(client, username)
    return user, auth_headers(login(client, username))


def upload_video(client, headers: Dict[str, str], title: str = "My video",
                 description: str = "About my video") -> Dict:
    r = client.post(f"{API}/videos", data={"title": title, "description": description}, files={
        "videoFile": ("clip.mp4", b"video-bytes", "video/mp4"),
        "thumbnail": ("thumb.png", b"\x89PNG thumb", "image/png"),
    }, headers=headers)
    assert r.status_code == 201, f"upload failed: {r.text}"
    return r.json()["data"]


@pytest.fixture
def alice(client):
    return signup(client, "alice")


@pytest.fixture
def bob(client):
    return signup(client, "bob")
