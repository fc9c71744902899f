"""
Test configuration for pytest
"""

import pytest
import os
from datetime import datetime, timedelta, timezone
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine
from typing import Generator

# Test environment variables
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["JWT_SECRET_KEY"] = "test-jwt-secret"
os.environ["GEOLOCATION_TIMEOUT_SECONDS"] = "1"

import careshift.models  # noqa: E402,F401
from careshift.core.auth import create_identity_token  # noqa: E402
from careshift.core.permissions import AccessPolicy  # noqa: E402
from careshift.models.user import User, UserRole  # noqa: E402
from careshift.repositories import LocationRegistry, ShiftStore, UserStore  # noqa: E402
from careshift.services.locations import LocationService  # noqa: E402
from careshift.services.shift_lifecycle import ShiftLifecycleManager  # noqa: E402
from careshift.services.statistics import StatisticsAggregator  # noqa: E402


class FakeClock:
    """Deterministic clock; advance() moves it forward"""

    def __init__(self, start: datetime = datetime(2026, 3, 2, 8, 0, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture(scope="function")
def engine():
    """In-memory database shared by every session of one test"""
    test_engine = create_engine(
        "sqlite://",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(test_engine)
    yield test_engine
    SQLModel.metadata.drop_all(test_engine)
    test_engine.dispose()


@pytest.fixture(scope="function")
def db(engine) -> Generator[Session, None, None]:
    """Create a clean database session for each test"""
    with Session(engine) as session:
        yield session


def _make_user(db: Session, name: str, email: str, role: UserRole) -> User:
    user = User(name=name, email=email, role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def careworker(db) -> User:
    return _make_user(db, "Alice Carer", "alice@example.com", UserRole.CAREWORKER)


@pytest.fixture
def other_careworker(db) -> User:
    return _make_user(db, "Bob Carer", "bob@example.com", UserRole.CAREWORKER)


@pytest.fixture
def manager_user(db) -> User:
    return _make_user(db, "Maria Manager", "maria@example.com", UserRole.MANAGER)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def policy() -> AccessPolicy:
    return AccessPolicy()


@pytest.fixture
def lifecycle(db, clock, policy) -> ShiftLifecycleManager:
    shifts = ShiftStore(db)
    users = UserStore(db)
    return ShiftLifecycleManager(
        session=db,
        shifts=shifts,
        users=users,
        locations=LocationRegistry(db),
        statistics=StatisticsAggregator(shifts, users),
        policy=policy,
        clock=clock,
    )


@pytest.fixture
def location_service(db, policy) -> LocationService:
    return LocationService(db, LocationRegistry(db), ShiftStore(db), policy)


@pytest.fixture
def site_fields() -> dict:
    return {
        "name": "Main Site",
        "latitude": 40.7901,
        "longitude": -73.9533,
        "radius": 3,
        "start_time": "08:00",
        "end_time": "18:00",
    }


@pytest.fixture
def client():
    """API client; each one starts the app against a fresh in-memory database"""
    from fastapi.testclient import TestClient
    from careshift.main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers():
    """Build bearer headers for an identity token"""
    def _headers(email: str, name: str = None, picture: str = None) -> dict:
        token = create_identity_token(email, name=name, picture=picture)
        return {"Authorization": f"Bearer {token}"}
    return _headers
