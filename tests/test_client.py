import re
from datetime import timedelta

import httpx
import pytest

from quizgen.client.api_client import ApiError, FormValidationError, QuizApiClient, validate_quiz_form
from quizgen.client.attempt import QuizAttempt
from quizgen.client.messages import GENERIC_MESSAGE, friendly_message
from quizgen.client.session import Session, TokenStore, is_token_expired
from quizgen.utils.security import create_access_token


@pytest.fixture
def store(tmp_path):
    return TokenStore(tmp_path / "token")


@pytest.fixture
def api(client, store):
    return QuizApiClient(client, Session(store=store))


def test_token_store_roundtrip(store):
    assert store.load() is None
    store.save("abc")
    assert store.load() == "abc"
    store.clear()
    assert store.load() is None
    store.clear()


def test_session_from_store_keeps_valid_token(store):
    token = create_access_token("user-1")
    store.save(token)

    session = Session.from_store(store)

    assert session.is_authenticated
    assert session.auth_headers() == {"Authorization": f"Bearer {token}"}


def test_session_from_store_clears_expired_token(store):
    store.save(create_access_token("user-1", expires_delta=timedelta(seconds=-5)))

    session = Session.from_store(store)

    assert not session.is_authenticated
    assert session.auth_headers() == {}
    assert store.load() is None


def test_session_from_store_clears_garbage(store):
    store.save("definitely-not-a-jwt")
    assert not Session.from_store(store).is_authenticated
    assert store.load() is None


def test_is_token_expired_uses_exp_claim():
    token = create_access_token("user-1", expires_delta=timedelta(minutes=5))
    assert not is_token_expired(token)
    assert is_token_expired(token, now=4102444800)


def test_register_and_login_persist_token(api, store):
    user = api.register("erin@quizgen.io", "secret123")
    assert user["email"] == "erin@quizgen.io"
    assert store.load() == api.session.token

    api.logout()
    assert store.load() is None
    assert not api.session.is_authenticated

    api.login("erin@quizgen.io", "secret123")
    assert api.me()["email"] == "erin@quizgen.io"


def test_login_failure_carries_code(api, alice):
    with pytest.raises(ApiError) as excinfo:
        api.login("alice@quizgen.io", "wrong-pass")

    assert excinfo.value.status == 401
    assert excinfo.value.code == "INCORRECT_PASSWORD"
    assert friendly_message(excinfo.value, login=True) == "Incorrect password. Please try again."
    assert not api.session.is_authenticated


def test_me_with_rejected_token_logs_out(api, store):
    api.session.login(create_access_token("00000000-0000-0000-0000-000000000000"))

    with pytest.raises(ApiError):
        api.me()

    assert not api.session.is_authenticated
    assert store.load() is None


def test_generate_take_and_delete(api, fake_generator):
    api.register("erin@quizgen.io", "secret123")

    quiz = api.generate_quiz(" Rust ", "hard", "3")
    assert fake_generator.calls == [("Rust", "hard", 3)]
    assert [q.id for q in api.list_quizzes()] == [quiz.id]

    fetched = api.get_quiz(str(quiz.id))
    attempt = QuizAttempt(fetched.questions)
    for question in fetched.questions:
        attempt.select(question.correct_answer)
        attempt.next()
    assert attempt.result().percentage == 100

    api.delete_quiz(str(quiz.id))
    with pytest.raises(ApiError) as excinfo:
        api.get_quiz(str(quiz.id))
    assert excinfo.value.status == 404


def test_invalid_form_never_reaches_server(api, fake_generator):
    api.register("erin@quizgen.io", "secret123")

    with pytest.raises(FormValidationError) as excinfo:
        api.generate_quiz("Rust", "hard", 25)

    assert str(excinfo.value) == "Please enter a valid number of questions (1-20)"
    assert fake_generator.calls == []


@pytest.mark.parametrize("topic,difficulty,count,message", [
    ("  ", "easy", 5, "Please enter a topic"),
    ("Rust", "", 5, "Please select a difficulty level"),
    ("Rust", "easy", "abc", "Please enter a valid number of questions (1-20)"),
    ("Rust", "easy", 0, "Please enter a valid number of questions (1-20)"),
])
def test_validate_quiz_form(topic, difficulty, count, message):
    with pytest.raises(FormValidationError, match=re.escape(message)):
        validate_quiz_form(topic, difficulty, count)


def test_profile_updates(api):
    api.register("erin@quizgen.io", "secret123")
    assert api.update_email("erin2@quizgen.io")["email"] == "erin2@quizgen.io"
    api.update_password("secret123", "another1")
    api.logout()
    api.login("erin2@quizgen.io", "another1")


def test_network_error_maps_to_generic_message():
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    http = httpx.Client(base_url="http://quizgen.invalid", transport=httpx.MockTransport(refuse))
    api = QuizApiClient(http)

    with pytest.raises(ApiError) as excinfo:
        api.list_quizzes()

    assert excinfo.value.status is None
    assert friendly_message(excinfo.value) == GENERIC_MESSAGE


def client_answering(status, body):
    def respond(request):
        return httpx.Response(status, json=body)

    http = httpx.Client(base_url="http://quizgen.invalid", transport=httpx.MockTransport(respond))
    return QuizApiClient(http)


@pytest.mark.parametrize("server_message,expected", [
    ("Incorrect password", "Incorrect password. Please try again."),
    ("No account found with this email", "Email not found. Please check your email or sign up."),
    ("Something else", "Something else"),
])
def test_login_hint_when_server_sends_no_code(server_message, expected):
    api = client_answering(401, {"success": False, "error": server_message})

    with pytest.raises(ApiError) as excinfo:
        api.login("erin@quizgen.io", "secret123")

    assert excinfo.value.code is None
    assert excinfo.value.status == 401
    assert friendly_message(excinfo.value, login=True) == expected


def test_codeless_error_without_message_is_generic():
    api = client_answering(500, {"success": False})

    with pytest.raises(ApiError) as excinfo:
        api.list_quizzes()

    assert friendly_message(excinfo.value) == GENERIC_MESSAGE
