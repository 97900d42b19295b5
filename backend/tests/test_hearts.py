"""Tests for heart consumption and regeneration."""

from datetime import datetime, timedelta

import pytest

from flowlingo import db
from flowlingo.models import User
from flowlingo.services.heart_service import HeartService
from flowlingo.tasks.progress_tasks import regenerate_hearts_async

NOW = datetime(2024, 5, 1, 12, 0, 0)
HOUR = timedelta(hours=1)


@pytest.fixture
def hearts():
    return HeartService(regen_interval=HOUR)


@pytest.fixture
def learner(app, test_user):
    return db.session.get(User, test_user["id"])


class TestTick:
    """Test cases for regeneration bookkeeping."""

    def test_full_hearts_clears_anchor(self, hearts, learner):
        learner.last_heart_lost_at = NOW - HOUR
        assert hearts.tick(learner, NOW) == 5
        assert learner.last_heart_lost_at is None

    def test_missing_anchor_starts_clock(self, hearts, learner):
        learner.hearts = 3
        learner.last_heart_lost_at = None

        assert hearts.tick(learner, NOW) == 3
        assert learner.last_heart_lost_at == NOW

    def test_partial_interval_does_nothing(self, hearts, learner):
        learner.hearts = 3
        learner.last_heart_lost_at = NOW - timedelta(minutes=59)

        assert hearts.tick(learner, NOW) == 3
        assert learner.last_heart_lost_at == NOW - timedelta(minutes=59)

    def test_anchor_advances_by_whole_intervals(self, hearts, learner):
        anchor = NOW - timedelta(hours=2, minutes=30)
        learner.hearts = 2
        learner.last_heart_lost_at = anchor

        assert hearts.tick(learner, NOW) == 4
        assert learner.last_heart_lost_at == anchor + 2 * HOUR
        assert hearts.regen_at(learner) == NOW + timedelta(minutes=30)

    def test_regeneration_caps_at_max(self, hearts, learner):
        learner.hearts = 1
        learner.last_heart_lost_at = NOW - timedelta(hours=10)

        assert hearts.tick(learner, NOW) == 5
        assert learner.last_heart_lost_at is None
        assert hearts.regen_at(learner) is None

    def test_anchor_in_future(self, hearts, learner):
        learner.hearts = 2
        learner.last_heart_lost_at = NOW + HOUR

        assert hearts.tick(learner, NOW) == 2


class TestConsumeHeart:
    """Test cases for spending hearts."""

    def test_consume_from_full(self, hearts, learner):
        result = hearts.consume_heart(learner.id, NOW)

        assert result["success"] is True
        assert result["hearts_remaining"] == 4
        assert result["regen_at"] == (NOW + HOUR).isoformat()
        assert result["next_heart_in"] == 3600

    def test_consume_resets_anchor(self, hearts, learner):
        learner.hearts = 3
        learner.last_heart_lost_at = NOW - timedelta(minutes=40)
        db.session.commit()

        result = hearts.consume_heart(learner.id, NOW)
        assert result["hearts_remaining"] == 2
        assert learner.last_heart_lost_at == NOW

    def test_no_hearts(self, hearts, learner):
        learner.hearts = 0
        learner.last_heart_lost_at = NOW - timedelta(minutes=30)
        db.session.commit()

        result = hearts.consume_heart(learner.id, NOW)
        assert result["success"] is False
        assert result["error"] == "no_hearts"
        assert result["hearts"] == 0
        assert result["next_heart_in"] == 1800

    def test_regenerated_heart_can_be_spent(self, hearts, learner):
        learner.hearts = 0
        learner.last_heart_lost_at = NOW - HOUR
        db.session.commit()

        result = hearts.consume_heart(learner.id, NOW)
        assert result["success"] is True
        assert result["hearts_remaining"] == 0

    def test_unknown_user(self, hearts, app):
        result = hearts.consume_heart(9999, NOW)
        assert result == {"success": False, "error": "user_not_found"}


class TestRegenerateAll:
    """Test cases for the periodic regeneration sweep."""

    def test_updates_users_below_max(self, hearts, learner, other_user):
        learner.hearts = 2
        learner.last_heart_lost_at = NOW - 3 * HOUR
        other = db.session.get(User, other_user["id"])
        other.hearts = 4
        other.last_heart_lost_at = NOW - timedelta(minutes=10)
        db.session.commit()

        assert hearts.regenerate_all(NOW) == 1
        assert learner.hearts == 5
        assert other.hearts == 4

    def test_task(self, learner):
        learner.hearts = 1
        learner.last_heart_lost_at = datetime.utcnow() - timedelta(hours=2)
        db.session.commit()

        result = regenerate_hearts_async.run()

        assert result == {"success": True, "users_updated": 1}
        db.session.expire_all()
        assert db.session.get(User, learner.id).hearts == 3


class TestHeartsAPI:
    """Test cases for heart endpoints."""

    def test_profile_includes_hearts(self, auth_client):
        response = auth_client.get("/api/user/profile")
        assert response.status_code == 200

        data = response.json["data"]
        assert data["hearts"] == 5
        assert data["max_hearts"] == 5
        assert data["regen_at"] is None
        assert data["mascot_emoji"] == "🐬"

    def test_consume_until_empty(self, auth_client):
        for expected in (4, 3, 2, 1, 0):
            response = auth_client.post("/api/user/hearts/consume")
            assert response.status_code == 200
            assert response.json["data"]["hearts_remaining"] == expected

        response = auth_client.post("/api/user/hearts/consume")
        assert response.status_code == 409
        error = response.json["error"]
        assert error["code"] == "NO_HEARTS"
        assert error["details"]["hearts"] == 0
        assert error["details"]["next_heart_in"] > 0

    def test_refill(self, auth_client):
        auth_client.post("/api/user/hearts/consume")
        auth_client.post("/api/user/hearts/consume")

        response = auth_client.post("/api/user/refill-hearts")
        assert response.status_code == 200
        assert response.json["data"]["hearts"] == 5

    def test_refill_disabled_outside_debug(self, app, auth_client):
        app.config["DEBUG"] = False

        response = auth_client.post("/api/user/refill-hearts")
        assert response.status_code == 403
