import os

os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["GEMINI_API_KEY"] = "test-key"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient

from quizgen.database import Base, engine, SessionLocal, init_db
from quizgen.main import app
from quizgen.services.gemini_service import gemini_service
from quizgen.utils.rate_limiter import rate_limiter


def make_questions(count=3, answers=None):
    answers = answers or ["A", "B", "C", "D"]
    return [
        {
            "question": f"Question {i + 1}?",
            "options": ["A", "B", "C", "D"],
            "correctAnswer": answers[i % len(answers)],
            "explanation": f"Because {answers[i % len(answers)]}.",
        }
        for i in range(count)
    ]


class FakeGenerator:
    """Stands in for the Gemini call and records every request"""

    def __init__(self):
        self.calls = []
        self.error = None

    def __call__(self, topic, difficulty, question_count):
        self.calls.append((topic, difficulty, question_count))
        if self.error:
            raise self.error
        return make_questions(question_count)


@pytest.fixture(autouse=True)
def reset_state():
    init_db()
    rate_limiter.reset()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def fake_generator(monkeypatch):
    fake = FakeGenerator()
    monkeypatch.setattr(gemini_service, "generate_quiz", fake)
    return fake


def register(client, email="alice@quizgen.io", password="secret123"):
    response = client.post("/api/auth/register", json={"email": email, "password": password})
    assert response.status_code == 201, response.text
    return response.json()


def auth_header(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def alice(client):
    body = register(client)
    return {"token": body["token"], "user": body["user"], "headers": auth_header(body["token"])}


@pytest.fixture
def bob(client):
    body = register(client, "bob@quizgen.io", "hunter22")
    return {"token": body["token"], "user": body["user"], "headers": auth_header(body["token"])}
