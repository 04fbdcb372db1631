from buildmarket.auth import create_access_token, verify_token
from buildmarket.users.models import User


def test_register(client):
    response = client.post(
        "/api/auth/register",
        json={
            "username": "builder",
            "email": "builder@example.com",
            "password": "secret123",
            "user_type": "contractor",
            "first_name": "Oleg",
        },
    )
    assert response.status_code == 201
    data = response.json()
    assert data["user"]["username"] == "builder"
    assert data["user"]["user_type"] == "contractor"
    assert data["user"]["is_admin"] is False
    assert "password" not in data["user"]
    assert verify_token(data["token"])["id"] == data["user"]["id"]


def test_register_duplicates(client, register):
    register("builder")
    response = client.post(
        "/api/auth/register",
        json={"username": "builder", "email": "other@example.com", "password": "secret123"},
    )
    assert response.status_code == 400
    response = client.post(
        "/api/auth/register",
        json={"username": "other", "email": "builder@example.com", "password": "secret123"},
    )
    assert response.status_code == 400


def test_register_validation(client):
    response = client.post(
        "/api/auth/register",
        json={"username": "x", "email": "not-an-email", "password": "1"},
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Validation error"
    assert response.json()["errors"]


def test_password_is_hashed(db, register):
    user, _ = register("builder", password="secret123")
    stored = db.query(User).filter(User.id == user["id"]).one().password
    assert stored != "secret123"
    assert stored.startswith("$2")


def test_login_by_username_or_email(client, register):
    register("builder", password="secret123")
    for login in ("builder", "builder@example.com"):
        response = client.post("/api/auth/login", json={"username": login, "password": "secret123"})
        assert response.status_code == 200
        assert response.json()["user"]["username"] == "builder"
        assert response.json()["token"]

    response = client.post("/api/auth/login", json={"username": "builder", "password": "wrong"})
    assert response.status_code == 401
    response = client.post("/api/auth/login", json={"username": "nobody", "password": "secret123"})
    assert response.status_code == 401


def test_token_checks(client, register):
    assert client.get("/api/users/me").status_code == 401
    assert client.get("/api/users/me", headers={"Authorization": "Bearer garbage"}).status_code == 401

    token = create_access_token({"id": 999})
    response = client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401

    token = create_access_token({"sub": "1"})
    response = client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_update_me_ignores_protected_fields(client, register):
    _, headers = register("builder")
    response = client.put(
        "/api/users/me",
        json={"first_name": "Pavel", "phone": "+7 900 000 00 00", "is_admin": True, "rating": 5},
        headers=headers,
    )
    assert response.status_code == 200
    me = client.get("/api/users/me", headers=headers).json()
    assert me["first_name"] == "Pavel"
    assert me["phone"] == "+7 900 000 00 00"
    assert me["is_admin"] is False
    assert me["rating"] == 0


def test_update_me_email_conflict(client, register):
    register("first")
    _, headers = register("second")
    response = client.put("/api/users/me", json={"email": "first@example.com"}, headers=headers)
    assert response.status_code == 400


def test_public_profile_hides_private_fields(client, register):
    user, _ = register("builder")
    data = client.get(f"/api/users/{user['id']}").json()
    assert data["username"] == "builder"
    assert "email" not in data
    assert "wallet_balance" not in data
    assert client.get("/api/users/999").status_code == 404
    assert [u["username"] for u in client.get("/api/users").json()] == ["builder"]


def test_top_users(client, db, register):
    register("person", user_type="individual")
    company, _ = register("firm", user_type="company")
    star, _ = register("star", user_type="contractor")
    db.query(User).filter(User.id == star["id"]).update({"is_top_specialist": True})
    db.query(User).filter(User.id == company["id"]).update({"rating": 5})
    db.commit()

    individuals = client.get("/api/users/top", params={"person_type": "individual"}).json()
    assert [u["username"] for u in individuals] == ["star", "person"]

    for person_type in ("company", "legal"):
        companies = client.get("/api/users/top", params={"person_type": person_type}).json()
        assert [u["username"] for u in companies] == ["firm"]

    everyone = client.get("/api/users/top").json()
    assert [u["username"] for u in everyone][:2] == ["star", "firm"]


def test_platform_stats(client, register, approved_tender, create_tender):
    _, headers = register("owner")
    approved_tender(headers)
    create_tender(headers)

    stats = client.get("/api/stats").json()
    assert stats["active_tenders"] == 1
    assert stats["users"] == 2
    assert stats["listings"] == 0


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_update_me_rejects_null_email(client, register):
    _, headers = register("builder")
    for field in ("email", "user_type"):
        response = client.put("/api/users/me", json={field: None}, headers=headers)
        assert response.status_code == 400, field

    response = client.put("/api/users/me", json={"phone": None}, headers=headers)
    assert response.status_code == 200
    assert client.get("/api/users/me", headers=headers).json()["email"] == "builder@example.com"


def test_serve_runs_uvicorn(monkeypatch):
    import uvicorn

    from buildmarket import main

    calls = []
    monkeypatch.setattr(uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))
    main.serve()
    assert calls == [("buildmarket.main:app", {"host": main.HOST, "port": main.PORT, "log_level": main.LOG_LEVEL.lower()})]
