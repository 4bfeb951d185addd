import os

os.environ.setdefault("POSTGRES_DSN", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("SESSION_SECRET", "test-session-secret-0123456789abcdef")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("GEOCODING_ENABLED", "false")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient

from shiptrack.db.session import Base, SessionLocal, engine
from shiptrack.main import app
from shiptrack.security.session import encode_session
from shiptrack.services.users import create_user


@pytest.fixture()
def db():
    import shiptrack.db.models  # noqa
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def client(db):
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def alice(db):
    return create_user(db, "alice@example.com", "alice-pw", "Alice")


@pytest.fixture()
def bob(db):
    return create_user(db, "bob@example.com", "bob-pw", "Bob")


@pytest.fixture()
def admin(db):
    return create_user(db, "admin@example.com", "admin-pw", "Admin", is_admin=True)


def cookie_for(user) -> dict:
    return {"Cookie": f"session={encode_session(user.id, user.email, user.is_admin)}"}


def shipment_payload(tracking_number="TRK-1001", **overrides):
    body = {
        "trackingNumber": tracking_number,
        "customerName": "Jane Doe",
        "origin": "Berlin, Germany",
        "destination": "Paris, France",
        "currentLocation": "Cologne, Germany",
        "trackingProgress": "In Transit",
        "shipmentStatus": "On the way",
        "statusColor": "#3b82f6",
        "weight": "2.5",
        "shipmentDate": "2025-01-08",
        "estimatedDeliveryDate": "",
    }
    body.update(overrides)
    return body
