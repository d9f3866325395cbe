def test_me_defaults_to_demo_user(client):
    response = client.get("/api/users/me")

    assert response.status_code == 200
    assert response.json()["id"] == "demo-user"


def test_me_uses_identity_headers(client):
    response = client.get(
        "/api/users/me",
        headers={"X-User-Id": "user-42", "X-User-Email": "user42@example.com"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == "user-42"
    assert body["email"] == "user42@example.com"


def test_me_keeps_profile_between_requests(client):
    client.get("/api/users/me", headers={"X-User-Id": "user-7", "X-User-Email": "seven@example.com"})

    response = client.get("/api/users/me", headers={"X-User-Id": "user-7"})

    assert response.json()["email"] == "seven@example.com"


def test_me_rejects_malformed_email(client):
    response = client.get("/api/users/me", headers={"X-User-Id": "user-8", "X-User-Email": "not-an-email"})

    assert response.status_code == 400


def test_me_rejects_email_owned_by_another_user(client):
    client.get("/api/users/me", headers={"X-User-Id": "user-a", "X-User-Email": "shared@example.com"})

    response = client.get("/api/users/me", headers={"X-User-Id": "user-b", "X-User-Email": "shared@example.com"})

    assert response.status_code == 409
    assert client.get("/api/users/me", headers={"X-User-Id": "user-a"}).json()["email"] == "shared@example.com"
    assert client.get("/api/users/me", headers={"X-User-Id": "user-b"}).json()["email"] is None
