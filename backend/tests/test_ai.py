"""Tests for AI reading texts, translation and tutor chat."""

import pytest
from openai import OpenAIError

from flowlingo import db
from flowlingo.models import AIUsageLog, Conversation, GeneratedText
from flowlingo.services.ai_tutor import (AITutor, difficulty_for_level,
                                        segment_chinese_text)
from flowlingo.tasks.ai_tasks import generate_text_async
from flowlingo.utils.ai_tracker import calculate_cost


class TestSegmentation:
    """Test cases for tap-to-translate segmentation."""

    def test_punctuation_is_its_own_segment(self):
        segments = segment_chinese_text("你好！我是学生。")

        assert [s["text"] for s in segments] == ["你好", "！", "我是", "学生", "。"]
        assert [s["index"] for s in segments] == [0, 1, 2, 3, 4]
        assert segments[0]["translation"] is None
        assert segments[0]["pinyin"] is None

    def test_three_leftover_characters_stay_together(self):
        assert [s["text"] for s in segment_chinese_text("我爱你")] == ["我爱你"]
        assert [s["text"] for s in segment_chinese_text("一二三四五")] == [
            "一二",
            "三四五",
        ]

    def test_whitespace_dropped(self):
        assert [s["text"] for s in segment_chinese_text("今天 天气\n好")] == [
            "今天",
            "天气",
            "好",
        ]

    def test_empty(self):
        assert segment_chinese_text("") == []


class TestDifficulty:
    @pytest.mark.parametrize(
        "level,expected",
        [(1, "beginner"), (3, "beginner"), (4, "intermediate"), (7, "advanced")],
    )
    def test_difficulty_for_level(self, level, expected):
        assert difficulty_for_level(level) == expected


class TestGenerateText:
    """Test cases for reading text generation."""

    def test_generate_and_cache(self, auth_client, openai_client, test_user):
        body = {"topic": "Food", "difficulty": "beginner", "length": "short"}

        response = auth_client.post("/api/generate-text", json=body)
        assert response.status_code == 200
        data = response.json["data"]
        assert data["content"] == "你好！"
        assert [s["text"] for s in data["segments"]] == ["你好", "！"]
        assert data["cached"] is False
        assert data["xp"]["amount"] == 5

        # Same topic (case-insensitive) comes from the cache
        body["topic"] = "food "
        response = auth_client.post("/api/generate-text", json=body)
        assert response.json["data"]["cached"] is True
        assert "xp" not in response.json["data"]

        assert openai_client.chat.completions.create.call_count == 1
        assert GeneratedText.query.filter_by(user_id=test_user["id"]).count() == 1

    def test_cache_not_shared_between_users(
        self, auth_client, openai_client, test_user, other_user
    ):
        body = {"topic": "Food", "difficulty": "beginner", "length": "short"}
        first = auth_client.post("/api/generate-text", json=body).json["data"]

        result = AITutor().generate_text(other_user["id"], "food", "beginner", "short")

        assert result["cached"] is False
        assert result["id"] != first["id"]
        assert openai_client.chat.completions.create.call_count == 2
        assert GeneratedText.query.filter_by(user_id=other_user["id"]).count() == 1

    def test_usage_is_logged(self, auth_client, openai_client, test_user):
        auth_client.post("/api/generate-text", json={"topic": "travel"})

        log = AIUsageLog.query.one()
        assert log.user_id == test_user["id"]
        assert log.endpoint == "generate_text"
        assert log.total_tokens == 46
        assert log.estimated_cost_usd == calculate_cost("gpt-4o", 12, 34)

    def test_invalid_difficulty(self, auth_client, openai_client):
        response = auth_client.post(
            "/api/generate-text", json={"topic": "food", "difficulty": "expert"}
        )
        assert response.status_code == 400

    def test_no_api_key(self, auth_client, monkeypatch):
        monkeypatch.setattr(
            "flowlingo.services.ai_tutor.get_openai_client", lambda: None
        )

        response = auth_client.post("/api/generate-text", json={"topic": "food"})
        assert response.status_code == 503
        assert response.json["error"]["code"] == "AI_UNAVAILABLE"

    def test_upstream_failure(self, auth_client, openai_client):
        openai_client.chat.completions.create.side_effect = OpenAIError("timeout")

        response = auth_client.post("/api/generate-text", json={"topic": "food"})
        assert response.status_code == 500
        assert GeneratedText.query.count() == 0

    def test_async_task(self, app, test_user, openai_client):
        result = generate_text_async.run(test_user["id"], "weather", "beginner")

        assert result["success"] is True
        assert db.session.get(GeneratedText, result["text_id"]).topic == "weather"

    def test_async_task_without_key(self, app, test_user, monkeypatch):
        monkeypatch.setattr(
            "flowlingo.services.ai_tutor.get_openai_client", lambda: None
        )

        result = generate_text_async.run(test_user["id"], "weather", "beginner")
        assert result["success"] is False


class TestTranslate:
    """Test cases for word translation."""

    def test_translate(self, auth_client, openai_client, make_completion):
        openai_client.chat.completions.create.return_value = make_completion(
            '{"character": "学生", "pinyin": "xuésheng", "english": "student"}'
        )

        response = auth_client.post("/api/translate", json={"text": "学生"})
        assert response.status_code == 200
        assert response.json["data"] == {
            "character": "学生",
            "pinyin": "xuésheng",
            "english": "student",
        }

    def test_invalid_json_reply(self, auth_client, openai_client, make_completion):
        openai_client.chat.completions.create.return_value = make_completion(
            "student"
        )

        response = auth_client.post("/api/translate", json={"text": "学生"})
        assert response.status_code == 500
        assert response.json["error"]["code"] == "SERVER_ERROR"

    @pytest.mark.parametrize("reply", ["[]", '"student"', "42"])
    def test_non_object_json_reply(
        self, auth_client, openai_client, make_completion, reply
    ):
        openai_client.chat.completions.create.return_value = make_completion(reply)

        response = auth_client.post("/api/translate", json={"text": "学生"})
        assert response.status_code == 500
        assert response.json["error"]["code"] == "SERVER_ERROR"

    def test_empty_text(self, auth_client, openai_client):
        response = auth_client.post("/api/translate", json={"text": ""})
        assert response.status_code == 400


class TestConversation:
    """Test cases for tutor conversations."""

    def test_start_and_continue(self, auth_client, openai_client):
        response = auth_client.post("/api/conversation", json={"message": "你好"})
        assert response.status_code == 200
        data = response.json["data"]
        assert data["response"] == "你好！"
        assert data["difficulty"] == "beginner"
        assert [m["role"] for m in data["messages"]] == ["user", "assistant"]

        response = auth_client.post(
            "/api/conversation",
            json={"message": "你叫什么名字？", "conversation_id": data["conversation_id"]},
        )
        assert response.json["data"]["conversation_id"] == data["conversation_id"]
        assert len(response.json["data"]["messages"]) == 4

        # System prompt, two history turns and the new message
        sent = openai_client.chat.completions.create.call_args.kwargs["messages"]
        assert [m["role"] for m in sent] == ["system", "user", "assistant", "user"]
        assert Conversation.query.count() == 1

    def test_other_users_conversation_starts_new(
        self, auth_client, openai_client, other_user
    ):
        foreign = Conversation(user_id=other_user["id"], topic="secret", messages=[])
        db.session.add(foreign)
        db.session.commit()

        response = auth_client.post(
            "/api/conversation",
            json={"message": "你好", "conversation_id": foreign.id},
        )
        assert response.json["data"]["conversation_id"] != foreign.id

    def test_list_conversations(self, auth_client, openai_client):
        auth_client.post("/api/conversation", json={"message": "你好", "topic": "Food"})

        response = auth_client.get("/api/conversations")
        conversations = response.json["data"]["conversations"]
        assert len(conversations) == 1
        assert conversations[0]["topic"] == "Food"
