from vidtube.core.cache import RedisCache, channel_stats_key

from conftest import API, upload_video


class DictRedis:
    """Just enough of the redis client for RedisCache"""

    def __init__(self):
        self.store = {}

    def set(self, key, value):
        self.store[key] = value

    def setex(self, key, expire, value):
        self.store[key] = value

    def get(self, key):
        return self.store.get(key)

    def delete(self, *keys):
        for key in keys:
            self.store.pop(key, None)


def test_cache_disabled_without_url():
    cache = RedisCache(None)
    assert not cache.enabled
    assert cache.set_cache("k", {"a": 1}) is False
    assert cache.get_cache("k") is None


def test_cache_disabled_when_server_unreachable():
    cache = RedisCache("redis://127.0.0.1:1/0")
    assert not cache.enabled


def test_channel_stats_are_cached_and_invalidated(app, client, alice):
    alice_user, headers = alice
    cache = app.state.cache
    cache.redis_client = DictRedis()
    key = channel_stats_key(alice_user["id"])

    stats = client.get(f"{API}/dashboard/stats", headers=headers).json()["data"]
    assert stats["totalVideos"] == 0
    assert cache.get_cache(key)["total_videos"] == 0

    upload_video(client, headers)
    assert cache.get_cache(key) is None
    stats = client.get(f"{API}/dashboard/stats", headers=headers).json()["data"]
    assert stats["totalVideos"] == 1


def test_cache_disabled_when_url_is_malformed():
    cache = RedisCache("not-a-redis-url")
    assert not cache.enabled


def test_channel_stats_follow_profile_changes(app, client, alice):
    alice_user, headers = alice
    cache = app.state.cache
    cache.redis_client = DictRedis()
    key = channel_stats_key(alice_user["id"])

    stats = client.get(f"{API}/dashboard/stats", headers=headers).json()["data"]
    assert stats["avatar"] == alice_user["avatar"]

    r = client.patch(f"{API}/users/avatar", files={"avatar": ("new.png", b"new", "image/png")}, headers=headers)
    new_avatar = r.json()["data"]["avatar"]
    assert cache.get_cache(key) is None
    stats = client.get(f"{API}/dashboard/stats", headers=headers).json()["data"]
    assert stats["avatar"] == new_avatar

    client.patch(f"{API}/users/account", json={"fullName": "Renamed", "email": "alice@example.com"}, headers=headers)
    assert cache.get_cache(key) is None
    stats = client.get(f"{API}/dashboard/stats", headers=headers).json()["data"]
    assert stats["fullName"] == "Renamed"
