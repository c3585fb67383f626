from __future__ import annotations

from datetime import datetime, timezone

from fastapi.testclient import TestClient

from adapters.http_api import create_app
from adapters.sqlite_storage import SQLiteMessageStore
from conftest import FakeClock
from core.cache import DerivedViewCache
from core.config import CacheConfig
from core.feed_service import FeedService
from core.periodic import PeriodicTask

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _client(tmp_path, tasks=()) -> tuple[TestClient, SQLiteMessageStore]:
    store = SQLiteMessageStore(str(tmp_path / "api.db"))
    store.init_db()
    service = FeedService(store, DerivedViewCache(clock=FakeClock()), CacheConfig())
    return TestClient(create_app(service, tasks)), store


def test_messages_by_tag_envelope(tmp_path) -> None:
    client, store = _client(tmp_path)
    match = store.add_message(user_id=1, username="ann", content="hello #cat", created_at=T0)
    store.add_message(user_id=1, username="ann", content="#category only", created_at=T0)

    response = client.get("/api/messages/tags/cat")

    assert response.status_code == 200
    body = response.json()
    assert body["code"] == 1
    assert [item["id"] for item in body["data"]] == [match.id]
    assert body["data"][0]["created_at"] == "2024-01-01T00:00:00+00:00"


def test_invalid_author_id_is_ignored(tmp_path) -> None:
    client, store = _client(tmp_path)
    store.add_message(user_id=5, content="#go", created_at=T0)

    assert len(client.get("/api/messages/tags/go", params={"authorId": "abc"}).json()["data"]) == 1
    assert client.get("/api/messages/tags/go", params={"authorId": "6"}).json()["data"] == []


def test_tags_endpoint_sets_no_cache_headers(tmp_path) -> None:
    client, store = _client(tmp_path)
    store.add_message(user_id=1, content="hello #go and #go2 world #go", created_at=T0)
    store.add_message(user_id=1, content="#video?id=123", created_at=T0)

    response = client.get("/api/tags")

    assert response.status_code == 200
    assert response.headers["cache-control"] == "no-cache, no-store, must-revalidate"
    assert response.headers["pragma"] == "no-cache"
    assert response.headers["expires"] == "0"
    body = response.json()
    assert body["data"] == [{"name": "go", "count": 2}, {"name": "go2", "count": 1}]
    assert isinstance(body["timestamp"], int)


def test_images_endpoint(tmp_path) -> None:
    client, store = _client(tmp_path)
    message = store.add_message(
        user_id=1,
        content="![pic](http://x/a.png)",
        image_url="http://x/b.png",
        created_at=T0,
    )

    body = client.get("/api/images").json()

    assert body["code"] == 1
    assert body["data"] == [
        {"id": message.id, "image_url": "http://x/b.png", "created_at": "2024-01-01T00:00:00+00:00"},
        {"id": message.id, "image_url": "http://x/a.png", "created_at": "2024-01-01T00:00:00+00:00"},
    ]


def test_get_message_status_codes(tmp_path) -> None:
    client, store = _client(tmp_path)
    message = store.add_message(user_id=1, content="single", created_at=T0)

    ok = client.get(f"/api/messages/{message.id}")
    assert ok.status_code == 200
    assert ok.json() == {"code": 1, "data": message.to_dict()}

    bad = client.get("/api/messages/abc")
    assert bad.status_code == 400
    assert bad.json()["code"] == 0

    missing = client.get("/api/messages/999")
    assert missing.status_code == 404
    assert missing.json()["code"] == 0


def test_lifespan_starts_and_stops_background_tasks(tmp_path) -> None:
    task = PeriodicTask("noop", 3600, lambda: None)
    client, _ = _client(tmp_path, [task])

    with client:
        assert client.get("/health").json()["status"] == "ok"
        assert task.running
    assert not task.running


def test_non_ascii_digits_are_not_message_ids(tmp_path) -> None:
    client, store = _client(tmp_path)
    for _ in range(12):
        store.add_message(user_id=1, content="filler", created_at=T0)

    assert client.get("/api/messages/12").status_code == 200
    assert client.get("/api/messages/١٢").status_code == 400
    assert client.get("/api/messages/²").status_code == 400

    store.add_message(user_id=1, content="#go", created_at=T0)
    # An authorId of Arabic-Indic "2" is ignored rather than read as author 2.
    assert len(client.get("/api/messages/tags/go", params={"authorId": "٢"}).json()["data"]) == 1
