"""Tests for sticker loot box endpoints."""

from types import SimpleNamespace

from sqlalchemy.exc import OperationalError

from flowlingo import db
from flowlingo.models import UserSticker
from flowlingo.services.sticker_catalog import get_sticker
from flowlingo.services.sticker_service import StickerService


class TestStickerCatalogAPI:
    """Test cases for the catalog endpoint."""

    def test_requires_auth(self, client):
        response = client.get("/api/stickers/catalog")
        assert response.status_code == 401
        assert response.json["success"] is False
        assert response.json["error"]["code"] == "UNAUTHORIZED"

    def test_catalog_for_new_user(self, auth_client):
        response = auth_client.get("/api/stickers/catalog")
        assert response.status_code == 200

        stickers = response.json
        assert isinstance(stickers, list)
        assert len(stickers) == 16
        assert all(s["collected"] is False for s in stickers)
        assert all(s["count"] == 0 for s in stickers)
        assert {"id", "name", "emoji", "rarity", "probability"} <= set(stickers[0])

    def test_catalog_reflects_collection(self, auth_client, test_user):
        StickerService().award_stickers(test_user["id"], [get_sticker("fox")])

        stickers = {s["id"]: s for s in auth_client.get("/api/stickers/catalog").json}
        assert stickers["fox"]["collected"] is True
        assert stickers["fox"]["count"] == 1
        assert stickers["dog"]["collected"] is False


class TestOpenLootBoxAPI:
    """Test cases for opening loot boxes."""

    def test_open_default_event(self, auth_client, test_user):
        response = auth_client.post("/api/stickers/open-lootbox", json={})
        assert response.status_code == 200

        body = response.json
        assert body["success"] is True
        assert len(body["stickers"]) == 1
        assert body["message"]

        owned = UserSticker.query.filter_by(user_id=test_user["id"]).all()
        assert [o.sticker_id for o in owned] == [body["stickers"][0]["id"]]

    def test_open_without_body(self, auth_client):
        response = auth_client.post("/api/stickers/open-lootbox")
        assert response.status_code == 200
        assert len(response.json["stickers"]) >= 1

    def test_duplicates_increment_count(self, auth_client, test_user, monkeypatch):
        monkeypatch.setattr(
            "flowlingo.services.loot_box.roll_one",
            lambda catalog, rng=None: get_sticker("dog"),
        )

        auth_client.post("/api/stickers/open-lootbox", json={"event": "level_complete"})
        response = auth_client.post(
            "/api/stickers/open-lootbox", json={"event": "level_complete"}
        )
        assert response.json["stickers"][0]["count"] == 2
        assert response.json["stickers"][0]["is_duplicate"] is True

        rows = UserSticker.query.filter_by(user_id=test_user["id"]).all()
        assert len(rows) == 1
        assert rows[0].acquired_count == 2

    def test_bonus_sticker_same_id(self, auth_client, test_user, monkeypatch):
        monkeypatch.setattr(
            "flowlingo.services.loot_box.roll_one",
            lambda catalog, rng=None: get_sticker("owl"),
        )
        monkeypatch.setattr(
            "flowlingo.services.loot_box.random", SimpleNamespace(random=lambda: 0.0)
        )

        response = auth_client.post(
            "/api/stickers/open-lootbox", json={"event": "perfect_score"}
        )
        assert [s["id"] for s in response.json["stickers"]] == ["owl", "owl"]

        row = UserSticker.query.filter_by(user_id=test_user["id"]).one()
        assert row.acquired_count == 2

    def test_concurrent_first_copy_is_counted(
        self, auth_client, test_user, monkeypatch
    ):
        monkeypatch.setattr(
            "flowlingo.services.loot_box.roll_one",
            lambda catalog, rng=None: get_sticker("dog"),
        )
        # Another request inserts the row after this one's lookup missed it
        db.session.add(
            UserSticker(user_id=test_user["id"], sticker_id="dog", acquired_count=1)
        )
        db.session.commit()

        find_entry = StickerService._find_entry
        misses = []

        def stale_find(self, user_id, sticker_id):
            if not misses:
                misses.append(sticker_id)
                return None
            return find_entry(self, user_id, sticker_id)

        monkeypatch.setattr(StickerService, "_find_entry", stale_find)

        response = auth_client.post(
            "/api/stickers/open-lootbox", json={"event": "level_complete"}
        )
        assert response.status_code == 200
        assert response.json["stickers"][0]["count"] == 2
        assert response.json["stickers"][0]["is_duplicate"] is True

        db.session.expire_all()
        row = UserSticker.query.filter_by(user_id=test_user["id"]).one()
        assert row.acquired_count == 2

    def test_awards_lock_the_user_row(self, app, test_user, monkeypatch):
        calls = []
        lock_user = StickerService._lock_user
        find_entry = StickerService._find_entry

        def record_lock(self, user_id):
            calls.append(("lock", user_id))
            return lock_user(self, user_id)

        def record_find(self, user_id, sticker_id):
            calls.append(("find", sticker_id))
            return find_entry(self, user_id, sticker_id)

        monkeypatch.setattr(StickerService, "_lock_user", record_lock)
        monkeypatch.setattr(StickerService, "_find_entry", record_find)

        StickerService().award_stickers(test_user["id"], [get_sticker("cat")])

        assert calls == [("lock", test_user["id"]), ("find", "cat")]

    def test_invalid_event_type(self, auth_client):
        response = auth_client.post("/api/stickers/open-lootbox", json={"event": 5})
        assert response.status_code == 400

    def test_database_failure(self, auth_client, monkeypatch):
        def fail(*args, **kwargs):
            raise OperationalError("INSERT", {}, Exception("database is locked"))

        monkeypatch.setattr(StickerService, "award_stickers", fail)

        response = auth_client.post("/api/stickers/open-lootbox", json={})
        assert response.status_code == 500
        assert response.json["error"]["code"] == "SERVER_ERROR"


class TestCheckLootBoxAPI:
    """Test cases for the event qualifier endpoint."""

    def test_qualifying_event(self, auth_client):
        response = auth_client.post(
            "/api/stickers/check-lootbox", json={"event": "level_complete"}
        )
        assert response.status_code == 200
        assert response.json == {"shouldAward": True, "event": "level_complete"}

    def test_unknown_event(self, auth_client):
        response = auth_client.post(
            "/api/stickers/check-lootbox", json={"event": "random_typo_event"}
        )
        assert response.json == {"shouldAward": False, "event": "random_typo_event"}

    def test_missing_event(self, auth_client):
        response = auth_client.post("/api/stickers/check-lootbox", json={})
        assert response.status_code == 400
        assert "event" in response.json["error"]["details"]

    def test_empty_event(self, auth_client):
        response = auth_client.post("/api/stickers/check-lootbox", json={"event": ""})
        assert response.status_code == 400
