import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from splitter.database import Base, get_db
from splitter.main import app

SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def make_user(client):
    def _make(name, email=None):
        res = client.post("/users", json={
            "name": name, "email": email or f"{name.lower()}@example.com"
        })
        assert res.status_code == 201, res.text
        return res.json()["id"]
    return _make


@pytest.fixture
def make_group(client):
    def _make(member_ids, name="Trip"):
        res = client.post("/groups", json={"name": name, "member_ids": member_ids})
        assert res.status_code == 201, res.text
        return res.json()["id"]
    return _make


@pytest.fixture
def setup_group(make_user, make_group):
    uid1 = make_user("Alice")
    uid2 = make_user("Bob")
    gid = make_group([uid1, uid2])
    return gid, uid1, uid2


@pytest.fixture
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
