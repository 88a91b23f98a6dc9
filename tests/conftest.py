"""
Test configuration and fixtures.
"""
import os
import tempfile
import pytest
from typing import Generator
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

# Configure the app before importing it
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET_KEY"] = "test-suite-signing-key-0123456789abcdef"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="contactbook-uploads-")

from contactbook.main import app
from contactbook.core.deps import get_file_store
from contactbook.core.security import hash_password
from contactbook.db.base import Base
from contactbook.db.session import get_db
from contactbook.models.user import User
from contactbook.services.file_store import LocalFileStore


# One in-memory database shared by every connection, rebuilt for each test
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Create a database session on a fresh schema."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def file_store(tmp_path) -> LocalFileStore:
    """Upload store isolated in the test's temporary directory."""
    return LocalFileStore(tmp_path / "uploads")


@pytest.fixture(scope="function")
def client(db: Session, file_store: LocalFileStore) -> Generator[TestClient, None, None]:
    """Create test client with database session and file store overrides."""
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_file_store] = lambda: file_store

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


def _create_user(db: Session, name: str, email: str, role: str) -> User:
    user = User(
        name=name,
        email=email,
        hashed_password=hash_password("testpassword123"),
        role=role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def test_user(db: Session) -> User:
    """Create a regular test user."""
    return _create_user(db, "Test User", "testuser@contactbook.io", "user")


@pytest.fixture
def other_user(db: Session) -> User:
    """Create a second regular user."""
    return _create_user(db, "Other User", "otheruser@contactbook.io", "user")


@pytest.fixture
def admin_user(db: Session) -> User:
    """Create an admin user."""
    return _create_user(db, "Admin User", "admin@contactbook.io", "admin")


def _login(client: TestClient, email: str) -> dict:
    response = client.post(
        "/api/auth/login",
        json={"email": email, "password": "testpassword123"}
    )
    token = response.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(client: TestClient, test_user: User) -> dict:
    """Get auth headers for the regular test user."""
    return _login(client, test_user.email)


@pytest.fixture
def other_headers(client: TestClient, other_user: User) -> dict:
    """Get auth headers for the second regular user."""
    return _login(client, other_user.email)


@pytest.fixture
def admin_headers(client: TestClient, admin_user: User) -> dict:
    """Get auth headers for the admin user."""
    return _login(client, admin_user.email)


VALID_CSV = (
    "correo,nombre,telefono,ciudad,notas\n"
    "ana@correo.com,Ana,123456,Lima,Cliente frecuente\n"
    "bob@correo.com,Bob,987654,Cusco,\n"
    "carla@correo.com,Carla,555000,Arequipa,Llamar en la tarde\n"
)


@pytest.fixture
def valid_csv() -> bytes:
    """A three-row contact file where every row is valid."""
    return VALID_CSV.encode("utf-8")
