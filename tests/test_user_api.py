from quizgen.services.auth_service import auth_service


def test_get_profile(client, alice):
    response = client.get("/api/user/profile", headers=alice["headers"])
    assert response.status_code == 200
    assert response.json()["data"]["email"] == "alice@quizgen.io"


def test_update_email(client, alice):
    response = client.put("/api/user/profile", json={"email": "alice.new@quizgen.io"}, headers=alice["headers"])

    assert response.status_code == 200
    assert response.json()["data"]["email"] == "alice.new@quizgen.io"

    login = client.post("/api/auth/login", json={"email": "alice.new@quizgen.io", "password": "secret123"})
    assert login.status_code == 200


def test_update_email_without_changes(client, alice):
    response = client.put("/api/user/profile", json={}, headers=alice["headers"])
    assert response.status_code == 200
    assert response.json()["data"]["email"] == "alice@quizgen.io"


def test_update_email_taken(client, alice, bob):
    response = client.put("/api/user/profile", json={"email": "bob@quizgen.io"}, headers=alice["headers"])
    assert response.status_code == 400
    assert response.json()["code"] == "EMAIL_IN_USE"


def test_update_password(client, alice):
    response = client.put(
        "/api/user/password",
        json={"currentPassword": "secret123", "newPassword": "newsecret"},
        headers=alice["headers"],
    )
    assert response.status_code == 200
    assert response.json() == {"success": True, "data": {}}

    old = client.post("/api/auth/login", json={"email": "alice@quizgen.io", "password": "secret123"})
    new = client.post("/api/auth/login", json={"email": "alice@quizgen.io", "password": "newsecret"})
    assert old.status_code == 401
    assert new.status_code == 200


def test_update_password_wrong_current(client, alice):
    response = client.put(
        "/api/user/password",
        json={"currentPassword": "nope-nope", "newPassword": "newsecret"},
        headers=alice["headers"],
    )
    assert response.status_code == 401
    assert response.json()["error"] == "Current password is incorrect"


def test_update_password_missing_fields(client, alice):
    response = client.put("/api/user/password", json={"newPassword": "newsecret"}, headers=alice["headers"])
    assert response.status_code == 400
    assert response.json()["error"] == "Please provide current password and new password"


def test_update_password_too_short(client, alice):
    response = client.put(
        "/api/user/password",
        json={"currentPassword": "secret123", "newPassword": "abc"},
        headers=alice["headers"],
    )
    assert response.status_code == 400


def test_profile_requires_auth(client):
    assert client.put("/api/user/profile", json={"email": "x@quizgen.io"}).status_code == 401


def test_update_email_race_on_unique_email(client, alice, bob, monkeypatch):
    with monkeypatch.context() as patch:
        patch.setattr(auth_service, "find_by_email", lambda db, email: None)
        response = client.put("/api/user/profile", json={"email": "bob@quizgen.io"}, headers=alice["headers"])

    assert response.status_code == 400
    assert response.json()["code"] == "EMAIL_IN_USE"

    profile = client.get("/api/user/profile", headers=alice["headers"])
    assert profile.json()["data"]["email"] == "alice@quizgen.io"
