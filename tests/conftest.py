import os

# must be set before airwatch.database builds its engine
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient

from airwatch.database import SessionLocal, engine
from airwatch.main import app
from airwatch.models import APIKey, Base, Device

API_KEY = "test-key"


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    session.add_all([
        APIKey(key=API_KEY, owner="tests", revoked=False),
        APIKey(key="revoked-key", owner="tests", revoked=True),
        Device(device_id="dev-1", name="Living room", location="Home"),
    ])
    session.commit()
    yield session
    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    return TestClient(app)


@pytest.fixture
def auth():
    return {"Authorization": f"Bearer {API_KEY}"}
