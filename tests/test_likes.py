import uuid

from sqlalchemy.orm import Query

from vidtube.db.models.like import Like
from vidtube.services.toggle_service import ADDED, REMOVED, ToggleKind

from conftest import API, upload_video


def test_video_like_flips_between_added_and_removed(client, alice, bob, db_session):
    _, alice_headers = alice
    _, bob_headers = bob
    video = upload_video(client, alice_headers)

    r = client.post(f"{API}/like/video/{video['id']}", headers=bob_headers)
    assert r.status_code == 201, r.text
    assert r.json()["data"]["state"] == "added"
    assert r.json()["data"]["record"]["videoId"] == video["id"]

    r = client.post(f"{API}/like/video/{video['id']}", headers=bob_headers)
    assert r.status_code == 200
    assert r.json()["data"]["state"] == "removed"
    assert db_session.query(Like).count() == 0

    r = client.post(f"{API}/like/video/{video['id']}", headers=bob_headers)
    assert r.status_code == 201
    assert db_session.query(Like).count() == 1


def test_like_requires_existing_target(client, alice):
    _, headers = alice
    r = client.post(f"{API}/like/video/{uuid.uuid4()}", headers=headers)
    assert r.status_code == 404
    r = client.post(f"{API}/like/comment/not-an-id", headers=headers)
    assert r.status_code == 400
    assert r.json()["message"] == "Invalid comment id or comment id is missing"


def test_comment_and_tweet_likes(client, alice, bob):
    _, alice_headers = alice
    _, bob_headers = bob
    video = upload_video(client, alice_headers)
    comment = client.post(f"{API}/comments/{video['id']}", json={"content": "nice"}, headers=alice_headers).json()["data"]
    tweet = client.post(f"{API}/tweet", json={"content": "hello"}, headers=alice_headers).json()["data"]

    r = client.post(f"{API}/like/comment/{comment['id']}", headers=bob_headers)
    assert r.status_code == 201
    assert r.json()["data"]["record"]["commentId"] == comment["id"]
    r = client.post(f"{API}/like/tweet/{tweet['id']}", headers=bob_headers)
    assert r.status_code == 201
    assert r.json()["data"]["record"]["tweetId"] == tweet["id"]
    r = client.post(f"{API}/like/tweet/{tweet['id']}", headers=bob_headers)
    assert r.json()["data"]["state"] == "removed"


def test_liked_videos_only_lists_published(client, alice, bob):
    _, alice_headers = alice
    _, bob_headers = bob
    first = upload_video(client, alice_headers, title="First")
    second = upload_video(client, alice_headers, title="Second")
    client.post(f"{API}/like/video/{first['id']}", headers=bob_headers)
    client.post(f"{API}/like/video/{second['id']}", headers=bob_headers)

    r = client.get(f"{API}/like/videos", headers=bob_headers)
    assert r.status_code == 200
    assert {v["id"] for v in r.json()["data"]} == {first["id"], second["id"]}
    assert all(v["owner"]["username"] == "alice" for v in r.json()["data"])

    client.patch(f"{API}/videos/toggle/publish/{second['id']}", headers=alice_headers)
    r = client.get(f"{API}/like/videos", headers=bob_headers)
    assert [v["id"] for v in r.json()["data"]] == [first["id"]]


def test_liked_videos_empty_is_not_found(client, alice):
    _, headers = alice
    r = client.get(f"{API}/like/videos", headers=headers)
    assert r.status_code == 404
    assert r.json()["message"] == "No videos found"


def test_toggle_that_loses_insert_race_reports_surviving_record(app, client, alice, bob, db_session, monkeypatch):
    _, alice_headers = alice
    bob_user, _ = bob
    video = upload_video(client, alice_headers)
    toggles = app.state.services.toggles

    # Another request already stored the same pair
    winner = Like(liked_by_id=bob_user["id"], video_id=video["id"])
    db_session.add(winner)
    db_session.commit()

    first = Query.first
    lookups = []

    def miss_first_lookup(query):
        if not lookups:
            lookups.append(query)
            return None
        return first(query)

    monkeypatch.setattr(Query, "first", miss_first_lookup)
    outcome = toggles.toggle(db_session, ToggleKind.VIDEO_LIKE, video["id"], bob_user["id"])
    monkeypatch.undo()

    assert outcome.state == ADDED
    assert outcome.record.id == winner.id
    assert db_session.query(Like).filter(Like.liked_by_id == bob_user["id"]).count() == 1

    outcome = toggles.toggle(db_session, ToggleKind.VIDEO_LIKE, video["id"], bob_user["id"])
    assert outcome.state == REMOVED
    assert outcome.record is None
