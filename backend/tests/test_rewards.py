"""Tests for rewards profile, collection and mascot endpoints."""

from flowlingo import db
from flowlingo.models import User, UserSticker
from flowlingo.services.sticker_catalog import get_sticker
from flowlingo.services.sticker_service import StickerService


class TestStickerService:
    """Test cases for the collection ledger."""

    def test_award_new_and_existing(self, app, test_user):
        service = StickerService()
        service.award_stickers(test_user["id"], [get_sticker("cat")])
        awarded = service.award_stickers(
            test_user["id"], [get_sticker("cat"), get_sticker("panda")]
        )

        assert [(s["id"], s["count"]) for s in awarded] == [("cat", 2), ("panda", 1)]
        assert UserSticker.query.filter_by(user_id=test_user["id"]).count() == 2

    def test_same_sticker_twice_in_one_box(self, app, test_user):
        awarded = StickerService().award_stickers(
            test_user["id"], [get_sticker("fish"), get_sticker("fish")]
        )
        assert [s["count"] for s in awarded] == [1, 2]

        row = UserSticker.query.filter_by(user_id=test_user["id"]).one()
        assert row.acquired_count == 2

    def test_collection_sorted_rarest_first(self, app, test_user):
        service = StickerService()
        service.award_stickers(
            test_user["id"],
            [get_sticker("dog"), get_sticker("phoenix"), get_sticker("panda")],
        )

        ids = [s["id"] for s in service.get_collection(test_user["id"])]
        assert ids == ["phoenix", "panda", "dog", "dolphin"]


class TestRewardsAPI:
    """Test cases for rewards endpoints."""

    def test_profile(self, auth_client, test_user):
        StickerService().award_stickers(
            test_user["id"], [get_sticker("dog"), get_sticker("dog")]
        )

        response = auth_client.get("/api/rewards/profile")
        assert response.status_code == 200
        data = response.json["data"]
        assert data["unique_stickers"] == 1
        assert data["total_stickers"] == 2
        assert data["catalog_size"] == 16
        assert data["current_mascot"] == "dolphin"
        assert data["current_mascot_emoji"] == "🐬"

    def test_collection_includes_dolphin(self, auth_client):
        response = auth_client.get("/api/rewards/collection")
        assert response.status_code == 200
        assert [s["id"] for s in response.json["data"]["stickers"]] == ["dolphin"]

    def test_change_mascot_to_owned_sticker(self, auth_client, test_user):
        StickerService().award_stickers(test_user["id"], [get_sticker("koala")])

        response = auth_client.post(
            "/api/rewards/change-mascot", json={"sticker_id": "koala"}
        )
        assert response.status_code == 200
        assert response.json["data"]["emoji"] == "🐨"
        assert db.session.get(User, test_user["id"]).mascot_sticker_id == "koala"

    def test_change_mascot_not_owned(self, auth_client):
        response = auth_client.post(
            "/api/rewards/change-mascot", json={"sticker_id": "unicorn"}
        )
        assert response.status_code == 403

    def test_change_mascot_unknown(self, auth_client):
        response = auth_client.post(
            "/api/rewards/change-mascot", json={"sticker_id": "t-rex"}
        )
        assert response.status_code == 404

    def test_change_back_to_dolphin(self, auth_client):
        response = auth_client.post(
            "/api/rewards/change-mascot", json={"sticker_id": "dolphin"}
        )
        assert response.status_code == 200
        assert response.json["data"]["mascot"] == "dolphin"

    def test_mark_seen(self, auth_client, test_user):
        StickerService().award_stickers(
            test_user["id"], [get_sticker("dog"), get_sticker("cat")]
        )

        response = auth_client.post("/api/rewards/mark-seen")
        assert response.status_code == 200
        assert response.json["data"]["updated"] == 2

        catalog = auth_client.get("/api/stickers/catalog").json
        assert not any(s["is_new"] for s in catalog)
