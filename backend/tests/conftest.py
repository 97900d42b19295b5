"""Pytest configuration and fixtures."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from flowlingo import create_app, db
from flowlingo.models import User

TEST_PASSWORD = "learn-mandarin-123"


@pytest.fixture
def app():
    """Create and configure a test application instance."""
    app = create_app("testing")

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Create a test client."""
    return app.test_client()


@pytest.fixture
def test_user(app):
    """Create a learner with a password login."""
    user = User(email="learner@example.com", username="learner")
    user.set_password(TEST_PASSWORD)
    db.session.add(user)
    db.session.commit()

    db.session.refresh(user)
    return {"id": user.id, "email": user.email}


@pytest.fixture
def other_user(app):
    """A second learner, for ownership checks."""
    user = User(email="other@example.com", username="other")
    user.set_password(TEST_PASSWORD)
    db.session.add(user)
    db.session.commit()
    return {"id": user.id, "email": user.email}


@pytest.fixture
def auth_headers(app, test_user):
    """Get authorization headers with JWT token."""
    # Separate client so the login cookie doesn't leak into `client`
    response = app.test_client().post(
        "/api/auth/login",
        json={"email": test_user["email"], "password": TEST_PASSWORD},
    )
    assert response.status_code == 200
    token = response.json["data"]["token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_client(client, auth_headers):
    """Create an authenticated test client wrapper."""

    class AuthenticatedClient:
        def __init__(self, client, headers):
            self._client = client
            self._headers = headers

        def get(self, *args, **kwargs):
            kwargs.setdefault("headers", {}).update(self._headers)
            return self._client.get(*args, **kwargs)

        def post(self, *args, **kwargs):
            kwargs.setdefault("headers", {}).update(self._headers)
            return self._client.post(*args, **kwargs)

        def put(self, *args, **kwargs):
            kwargs.setdefault("headers", {}).update(self._headers)
            return self._client.put(*args, **kwargs)

        def delete(self, *args, **kwargs):
            kwargs.setdefault("headers", {}).update(self._headers)
            return self._client.delete(*args, **kwargs)

    return AuthenticatedClient(client, auth_headers)


def _completion(content: str, prompt_tokens: int = 12, completion_tokens: int = 34):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
        usage=SimpleNamespace(
            prompt_tokens=prompt_tokens, completion_tokens=completion_tokens
        ),
    )


@pytest.fixture
def make_completion():
    """Factory for chat completions shaped like the OpenAI SDK response."""
    return _completion


@pytest.fixture
def openai_client(monkeypatch):
    """Replace the OpenAI client with a mock returning a canned reply."""
    client = MagicMock()
    client.chat.completions.create.return_value = _completion("你好！")
    monkeypatch.setattr(
        "flowlingo.services.ai_tutor.get_openai_client", lambda: client
    )
    return client
