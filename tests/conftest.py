import os

# Must be set before taskboard is imported
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["REFRESH_SECRET_KEY"] = "test-refresh-secret-key"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RABBITMQ_ENABLED"] = "false"

import pytest
from fastapi.testclient import TestClient
from passlib.context import CryptContext
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from taskboard.core import security
from taskboard.core.auth import CurrentUser
from taskboard.core.database import Base, build_engine, get_db, init_db
from taskboard.core.security import create_access_token
from taskboard.main import app
from taskboard.models.user import User, UserRole

API = "/api/v1"


@pytest.fixture(autouse=True)
def fast_password_hashing(monkeypatch):
    """Minimum bcrypt cost keeps the suite quick."""
    monkeypatch.setattr(security, "pwd_context", CryptContext(schemes=["bcrypt"], bcrypt__rounds=4))


@pytest.fixture
def engine():
    test_engine = build_engine("sqlite://", poolclass=StaticPool)
    assert init_db(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def db_session(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    yield session
    session.close()


@pytest.fixture
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    def _make_user(login: str, role: str = "user", password: str = "pw") -> User:
        user = User(
            login=login,
            hashed_password=security.get_password_hash(password),
            role=UserRole(role),
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user
    return _make_user


@pytest.fixture
def admin(make_user):
    return make_user("admin", "admin")


@pytest.fixture
def ivan(make_user):
    return make_user("ivan")


@pytest.fixture
def maria(make_user):
    return make_user("maria")


def as_caller(user: User) -> CurrentUser:
    return CurrentUser.from_user(user)


def auth_headers(user: User) -> dict:
    token = create_access_token(user.id, user.login, user.role.value)
    return {"Authorization": f"Bearer {token}"}
