import uuid

from vidtube.db.models.history import WatchHistory
from vidtube.db.models.video import Video

from conftest import API, upload_video


def test_publish_video_uses_uploaded_assets(client, alice, asset_store):
    alice_user, headers = alice
    video = upload_video(client, headers, title="Trip", description="Holiday")
    assert video["ownerId"] == alice_user["id"]
    assert video["duration"] == asset_store.video_duration
    assert video["isPublished"] is True
    assert video["views"] == 0
    assert video["videoFile"] in asset_store.uploaded


def test_publish_video_requires_both_files(client, alice):
    _, headers = alice
    r = client.post(f"{API}/videos", data={"title": "t", "description": "d"},
                    files={"videoFile": ("clip.mp4", b"v", "video/mp4")}, headers=headers)
    assert r.status_code == 400
    assert r.json()["message"] == "Video and thumbnail both are required"


def test_publish_video_upload_failure(client, alice, asset_store):
    _, headers = alice
    asset_store.fail_uploads = True
    r = client.post(f"{API}/videos", data={"title": "t", "description": "d"}, files={
        "videoFile": ("clip.mp4", b"v", "video/mp4"),
        "thumbnail": ("thumb.png", b"t", "image/png"),
    }, headers=headers)
    assert r.status_code == 500
    assert r.json()["success"] is False


def test_list_videos_paginates_deterministically(client, alice):
    _, headers = alice
    for title in ["c", "a", "e", "b", "d"]:
        upload_video(client, headers, title=title)

    seen = []
    for page in (1, 2, 3):
        r = client.get(f"{API}/videos", params={"page": page, "limit": 2, "sortBy": "title", "sortType": "asc"})
        assert r.status_code == 200
        seen.extend(v["title"] for v in r.json()["data"])
    assert seen == ["a", "b", "c", "d", "e"]


def test_list_videos_coerces_bad_pagination(client, alice):
    _, headers = alice
    for i in range(12):
        upload_video(client, headers, title=f"video {i}")
    r = client.get(f"{API}/videos", params={"page": "-3", "limit": "abc"})
    assert r.status_code == 200
    assert len(r.json()["data"]) == 10


def test_list_videos_search_is_literal_and_case_insensitive(client, alice):
    _, headers = alice
    upload_video(client, headers, title="Cooking 100% pasta")
    upload_video(client, headers, title="Cooking 1000 beans")
    r = client.get(f"{API}/videos", params={"query": "100%"})
    assert [v["title"] for v in r.json()["data"]] == ["Cooking 100% pasta"]
    r = client.get(f"{API}/videos", params={"query": "COOKING"})
    assert len(r.json()["data"]) == 2


def test_list_videos_rejects_unknown_sort_field(client):
    r = client.get(f"{API}/videos", params={"sortBy": "password"})
    assert r.status_code == 400


def test_list_videos_filters_by_owner_and_hides_unpublished(client, alice, bob):
    alice_user, alice_headers = alice
    _, bob_headers = bob
    hidden = upload_video(client, alice_headers, title="hidden")
    upload_video(client, alice_headers, title="shown")
    upload_video(client, bob_headers, title="bob's")
    client.patch(f"{API}/videos/toggle/publish/{hidden['id']}", headers=alice_headers)

    r = client.get(f"{API}/videos", params={"userId": alice_user["id"]})
    titles = [v["title"] for v in r.json()["data"]]
    assert titles == ["shown"]
    assert r.json()["data"][0]["owner"]["username"] == "alice"


def test_unpublished_video_visible_only_to_owner(client, alice, bob):
    _, alice_headers = alice
    _, bob_headers = bob
    video = upload_video(client, alice_headers)
    r = client.patch(f"{API}/videos/toggle/publish/{video['id']}", headers=alice_headers)
    assert r.json()["data"]["isPublished"] is False

    assert client.get(f"{API}/videos/{video['id']}", headers=bob_headers).status_code == 404
    assert client.get(f"{API}/videos/{video['id']}", headers=alice_headers).status_code == 200


def test_anonymous_view_is_not_recorded(client, alice):
    _, headers = alice
    video = upload_video(client, headers)
    r = client.get(f"{API}/videos/{video['id']}")
    assert r.status_code == 200
    assert r.json()["data"]["views"] == 0
    assert r.json()["data"]["owner"]["username"] == "alice"


def test_get_missing_video(client):
    assert client.get(f"{API}/videos/{uuid.uuid4()}").status_code == 404
    assert client.get(f"{API}/videos/nope").status_code == 400


def test_update_video_by_owner_only(client, alice, bob, asset_store):
    _, alice_headers = alice
    _, bob_headers = bob
    video = upload_video(client, alice_headers)

    r = client.patch(f"{API}/videos/{video['id']}", data={"title": "stolen"}, headers=bob_headers)
    assert r.status_code == 403
    assert client.get(f"{API}/videos/{video['id']}").json()["data"]["title"] == video["title"]

    r = client.patch(f"{API}/videos/{video['id']}", data={"title": "Renamed"},
                     files={"thumbnail": ("new.png", b"n", "image/png")}, headers=alice_headers)
    assert r.status_code == 200
    assert r.json()["data"]["title"] == "Renamed"
    assert r.json()["data"]["description"] == video["description"]
    assert (video["thumbnail"], "image") in asset_store.deleted


def test_delete_video_removes_assets(client, alice, bob, asset_store):
    _, alice_headers = alice
    _, bob_headers = bob
    video = upload_video(client, alice_headers)
    assert client.delete(f"{API}/videos/{video['id']}", headers=bob_headers).status_code == 403
    assert client.get(f"{API}/videos/{video['id']}").status_code == 200
    assert asset_store.deleted == []

    r = client.delete(f"{API}/videos/{video['id']}", headers=alice_headers)
    assert r.status_code == 200
    assert (video["videoFile"], "video") in asset_store.deleted
    assert (video["thumbnail"], "image") in asset_store.deleted
    assert client.get(f"{API}/videos/{video['id']}").status_code == 404


def test_repeated_listing_returns_same_slice(client, alice):
    _, headers = alice
    for i in range(4):
        upload_video(client, headers, title=f"same {i}")
    first = client.get(f"{API}/videos", params={"page": 1, "limit": 3}).json()["data"]
    second = client.get(f"{API}/videos", params={"page": 1, "limit": 3}).json()["data"]
    assert [v["id"] for v in first] == [v["id"] for v in second]
    rest = client.get(f"{API}/videos", params={"page": 2, "limit": 3}).json()["data"]
    assert len(rest) == 1
    assert rest[0]["id"] not in {v["id"] for v in first}


def test_view_is_counted_when_history_entry_appears_concurrently(app, client, alice, bob, db_session, monkeypatch):
    _, alice_headers = alice
    bob_user, _ = bob
    video = upload_video(client, alice_headers)
    videos = app.state.services.videos

    db_session.add(WatchHistory(user_id=bob_user["id"], video_id=video["id"]))
    db_session.commit()

    history_entry = videos._history_entry
    lookups = []

    def miss_first_lookup(db, video_id, viewer_id):
        lookups.append(video_id)
        if len(lookups) == 1:
            return None
        return history_entry(db, video_id, viewer_id)

    monkeypatch.setattr(videos, "_history_entry", miss_first_lookup)
    record = db_session.get(Video, video["id"])
    videos.record_view(db_session, record, bob_user["id"])

    assert record.views == 1
    assert len(lookups) == 2
    assert db_session.query(WatchHistory).filter(WatchHistory.user_id == bob_user["id"]).count() == 1
