from fynd.security import issue_token, verify_token


def test_token_round_trip_carries_identity():
    ident = verify_token(issue_token("user-42", email="a@example.com", role="moderator"))
    assert ident.user_id == "user-42"
    assert ident.email == "a@example.com"
    assert ident.role == "moderator"


def test_tampered_token_is_rejected():
    token = issue_token("user-42")
    assert verify_token(token + "x") is None
    assert verify_token("garbage") is None


def test_bearer_token_authenticates(client):
    token = issue_token("user-7", email="seven@example.com")
    resp = client.post(
        "/api/v1/items",
        json={"title": "Umbrella", "category": "lost"},
        headers={"Authorization": f"Bearer {token}"},
    )
    assert resp.status_code == 201
    assert resp.get_json()["item"]["userId"] == "user-7"


def test_invalid_bearer_token_is_unauthenticated(client):
    resp = client.get("/api/v1/notifications", headers={"Authorization": "Bearer nope", "X-User-Id": "u1"})
    assert resp.status_code == 401


def test_dev_headers_ignored_outside_debug(client, app):
    app.config["DEBUG"] = False
    resp = client.get("/api/v1/notifications", headers={"X-User-Id": "u1"})
    assert resp.status_code == 401
