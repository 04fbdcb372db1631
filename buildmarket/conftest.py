import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from buildmarket import config
from buildmarket.database import get_db, init_db, make_engine
from buildmarket.main import app
from buildmarket.users.models import User


@pytest.fixture
def engine(tmp_path):
    test_engine = make_engine(f"sqlite:///{tmp_path / 'test.db'}")
    init_db(test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory, tmp_path, monkeypatch):
    monkeypatch.setattr(config, "UPLOAD_DIR", str(tmp_path / "uploads"))

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def register(client):
    """Register a user and return (user, auth headers)."""
    def _register(username, password="secret123", **extra):
        response = client.post(
            "/api/auth/register",
            json={
                "username": username,
                "email": f"{username}@example.com",
                "password": password,
                **extra,
            },
        )
        assert response.status_code == 201, response.text
        data = response.json()
        return data["user"], {"Authorization": f"Bearer {data['token']}"}
    return _register


@pytest.fixture
def admin_headers(register, db):
    user, headers = register("moderator")
    db.query(User).filter(User.id == user["id"]).update({"is_admin": True})
    db.commit()
    return headers


TENDER_PAYLOAD = {
    "title": "Roof repair for a country house",
    "description": "Replace the metal roof covering and gutters on a 120 m2 house.",
    "category": "services",
    "subcategory": "repair",
    "budget": 300000,
    "location": "Kazan",
    "person_type": "individual",
    "required_professions": ["roofer"],
}


@pytest.fixture
def tender_payload():
    return dict(TENDER_PAYLOAD)


@pytest.fixture
def create_tender(client, tender_payload):
    def _create(headers, **overrides):
        response = client.post("/api/tenders", json={**tender_payload, **overrides}, headers=headers)
        assert response.status_code == 201, response.text
        return response.json()
    return _create


@pytest.fixture
def approved_tender(client, create_tender, admin_headers):
    """Create a tender and approve it through the moderation endpoint."""
    def _create(headers, **overrides):
        tender = create_tender(headers, **overrides)
        response = client.post(
            f"/api/admin/moderation/tenders/{tender['id']}/approve",
            json={"comment": "ok"},
            headers=admin_headers,
        )
        assert response.status_code == 200, response.text
        return tender
    return _create


BID_PAYLOAD = {
    "amount": 250000,
    "description": "Turnkey roof replacement with a 3 year warranty.",
    "timeframe": 14,
    "documents": ["/api/files/estimate.pdf"],
}


@pytest.fixture
def bid_payload():
    return dict(BID_PAYLOAD)
