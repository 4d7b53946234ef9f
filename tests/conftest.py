import os

import pytest

# Set testing environment before the application modules are imported
os.environ["TESTING"] = "1"
os.environ["TEST_DATABASE_URL"] = "sqlite:///./test.db"

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from counseling_app.main import app
from counseling_app.core.database import get_db, get_redis, Base
from counseling_app.core.security import UserRole, create_user_token, get_password_hash
from counseling_app.models.user import User

SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(
    SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False}
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    try:
        db = TestingSessionLocal()
        yield db
    finally:
        db.close()


class FakeRedis:
    """In-memory stand-in for the two Redis commands the rate limiter uses."""

    def __init__(self):
        self.data = {}
        self.ttl = {}

    def incr(self, key):
        self.data[key] = int(self.data.get(key, 0)) + 1
        return self.data[key]

    def expire(self, key, seconds):
        self.ttl[key] = seconds
        return True


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(scope="function")
def test_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session(test_db):
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def client(test_db, fake_redis):
    app.dependency_overrides[get_redis] = lambda: fake_redis
    with TestClient(app, base_url="http://testserver") as test_client:
        yield test_client
    app.dependency_overrides.pop(get_redis, None)


def create_user(db, email: str, role: UserRole, username: str = None) -> User:
    user = User(
        username=username or email.split("@")[0],
        email=email,
        password_hash=get_password_hash("TestPassword123"),
        role=role,
        is_active=True
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_headers(user: User) -> dict:
    token = create_user_token(user.id, user.email, user.role)
    return {"Authorization": f"Bearer {token.access_token}"}


@pytest.fixture
def headers_for():
    return auth_headers


@pytest.fixture
def psychologist(db_session):
    return create_user(db_session, "psikolog@example.com", UserRole.PSYCHOLOGIST)


@pytest.fixture
def other_psychologist(db_session):
    return create_user(db_session, "psikolog2@example.com", UserRole.PSYCHOLOGIST)


@pytest.fixture
def admin(db_session):
    return create_user(db_session, "admin@example.com", UserRole.ADMIN)


@pytest.fixture
def klien(db_session):
    return create_user(db_session, "klien@example.com", UserRole.CLIENT)
