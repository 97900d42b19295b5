"""Tests for the vocabulary deck and flashcard reviews."""

from datetime import datetime, timedelta

import pytest

from flowlingo import db
from flowlingo.models import User, VocabularyWord, WordStage
from flowlingo.services.vocabulary_service import STARTER_WORDS, VocabularyService

NOW = datetime(2024, 5, 1, 9, 0, 0)


@pytest.fixture
def word(app, test_user):
    created, _ = VocabularyService().create_word(
        test_user["id"], character="你好", pinyin="nǐ hǎo", english="hello"
    )
    return created


class TestVocabularyService:
    """Test cases for deck management and scheduling."""

    def test_create_is_idempotent(self, app, test_user, word):
        again, created = VocabularyService().create_word(
            test_user["id"], character="你好", pinyin="ni hao", english="hi"
        )
        assert created is False
        assert again.id == word.id
        assert again.english == "hello"

    def test_good_review_schedules_a_day_out(self, word):
        result = VocabularyService().review(word, "good", now=NOW)

        assert word.stage == WordStage.REVIEW.value
        assert word.next_review == NOW + timedelta(days=1)
        assert word.times_correct == 1
        assert result["xp"]["amount"] == 2

    def test_again_review_is_wrong(self, word):
        VocabularyService().review(word, "again", now=NOW)

        assert word.stage == WordStage.LEARNING.value
        assert word.times_wrong == 1
        assert word.next_review == NOW + timedelta(minutes=1)

    def test_graduation_counts_word_once(self, word, test_user):
        service = VocabularyService()
        for _ in range(6):
            service.review(word, "good", now=NOW)

        assert word.stage == WordStage.GRADUATED.value
        assert db.session.get(User, test_user["id"]).words_learned == 1

    def test_low_success_rate_blocks_graduation(self, word):
        service = VocabularyService()
        service.review(word, "again", now=NOW)
        service.review(word, "again", now=NOW)
        for _ in range(5):
            service.review(word, "good", now=NOW)

        # 5 of 7 correct is 71%
        assert word.stage == WordStage.REVIEW.value

    def test_unknown_grade(self, word):
        with pytest.raises(ValueError):
            VocabularyService().review(word, "perfect", now=NOW)

    def test_due_words(self, app, test_user, word):
        service = VocabularyService()
        later, _ = service.create_word(
            test_user["id"], character="谢谢", pinyin="xiè xiè", english="thank you"
        )
        service.review(later, "easy", now=datetime.utcnow())

        due = service.due_words(test_user["id"], now=datetime.utcnow() + timedelta(seconds=1))
        assert [w.id for w in due] == [word.id]

    def test_seed_skips_existing(self, app, test_user, word):
        created = VocabularyService().seed_starter_words(test_user["id"])

        assert len(created) == len(STARTER_WORDS) - 1
        assert VocabularyWord.query.filter_by(user_id=test_user["id"]).count() == len(
            STARTER_WORDS
        )


class TestVocabularyAPI:
    """Test cases for vocabulary endpoints."""

    def test_create_and_list(self, auth_client):
        body = {"character": "朋友", "pinyin": "péng yǒu", "english": "friend"}

        response = auth_client.post("/api/vocabulary", json=body)
        assert response.status_code == 201
        assert response.json["data"]["created"] is True

        response = auth_client.post("/api/vocabulary", json=body)
        assert response.status_code == 200
        assert response.json["data"]["created"] is False

        words = auth_client.get("/api/vocabulary").json["data"]["words"]
        assert [w["character"] for w in words] == ["朋友"]

    def test_create_requires_fields(self, auth_client):
        response = auth_client.post("/api/vocabulary", json={"character": "朋友"})
        assert response.status_code == 400
        assert "pinyin" in response.json["error"]["details"]

    def test_review(self, auth_client, word):
        response = auth_client.post(
            f"/api/vocabulary/{word.id}/review", json={"grade": "hard"}
        )
        assert response.status_code == 200
        assert response.json["data"]["word"]["stage"] == "learning"

    def test_review_invalid_grade(self, auth_client, word):
        response = auth_client.post(
            f"/api/vocabulary/{word.id}/review", json={"grade": "meh"}
        )
        assert response.status_code == 400

    def test_other_users_word(self, auth_client, other_user):
        foreign, _ = VocabularyService().create_word(
            other_user["id"], character="家", pinyin="jiā", english="home"
        )

        response = auth_client.post(
            f"/api/vocabulary/{foreign.id}/review", json={"grade": "good"}
        )
        assert response.status_code == 404
        assert auth_client.delete(f"/api/vocabulary/{foreign.id}").status_code == 404

    def test_delete(self, auth_client, word, test_user):
        response = auth_client.delete(f"/api/vocabulary/{word.id}")
        assert response.status_code == 200
        assert VocabularyWord.query.filter_by(user_id=test_user["id"]).count() == 0

    def test_seed(self, auth_client):
        response = auth_client.post("/api/vocabulary/seed")
        assert response.json["data"]["created"] == len(STARTER_WORDS)

        response = auth_client.post("/api/vocabulary/seed")
        assert response.json["data"]["created"] == 0

    def test_due(self, auth_client, word):
        words = auth_client.get("/api/vocabulary/due").json["data"]["words"]
        assert [w["id"] for w in words] == [word.id]
