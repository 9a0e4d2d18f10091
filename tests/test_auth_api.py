from notepad.repositories import user_repo


def test_verify_token_creates_user(client, db):
    r = client.post("/api/auth/verify-token", headers={"Authorization": "Bearer token-alice"})

    assert r.status_code == 200
    body = r.json()
    user = db["user"].find_one({"firebase_uid": "uid-alice"})
    assert body == {
        "valid": True,
        "uid": "uid-alice",
        "email": "alice@example.com",
        "name": "Alice",
        "userId": str(user["_id"]),
    }


def test_verify_token_is_idempotent(client, db):
    first = client.post("/api/auth/verify-token", headers={"Authorization": "Bearer token-alice"}).json()
    second = client.post("/api/auth/verify-token", headers={"Authorization": "Bearer token-alice"}).json()

    assert first["userId"] == second["userId"]
    assert db["user"].count_documents({}) == 1


def test_verify_token_links_existing_email_user(client, db):
    legacy = user_repo.insert_user(email="alice@example.com", name="alice")

    body = client.post("/api/auth/verify-token", headers={"Authorization": "Bearer token-alice"}).json()

    assert body["userId"] == str(legacy["_id"])
    assert db["user"].find_one({"_id": legacy["_id"]})["firebase_uid"] == "uid-alice"


def test_verify_token_rejects_bad_header(client):
    r = client.post("/api/auth/verify-token")
    assert r.status_code == 401
    assert r.json()["message"] == "Invalid authorization header format"

    r = client.post("/api/auth/verify-token", headers={"Authorization": "Basic abc"})
    assert r.status_code == 401


def test_verify_token_rejects_invalid_token(client, db):
    r = client.post("/api/auth/verify-token", headers={"Authorization": "Bearer forged"})

    assert r.status_code == 401
    assert r.json()["message"] == "Invalid token"
    assert db["user"].count_documents({}) == 0


def test_current_user(client):
    r = client.get("/api/auth/user", headers={"Authorization": "Bearer token-bob"})

    assert r.status_code == 200
    body = r.json()
    assert body["firebaseUid"] == "uid-bob"
    assert body["email"] == "bob@example.com"
    assert body["name"] == "Bob"
    assert body["id"]
    assert body["createdAt"]


def test_current_user_requires_token(client):
    assert client.get("/api/auth/user").status_code == 401
    assert client.get("/api/auth/user", headers={"Authorization": "Bearer forged"}).status_code == 401


def test_logout_is_public(client):
    r = client.post("/api/auth/logout")

    assert r.status_code == 200
    assert r.json() == {"message": "Logged out successfully"}
