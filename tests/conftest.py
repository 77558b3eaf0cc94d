"""Shared test fixtures."""

from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.pool import StaticPool

from kiosk.core.database import get_session
from kiosk.main import app
from kiosk.models import Attendee
from kiosk.roster.store import AttendeeStore


@pytest.fixture(name="engine")
def engine_fixture():
    """Create an in-memory SQLite database for testing."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    """Create a new database session for each test."""
    with Session(engine) as session:
        yield session


@pytest.fixture(name="store")
def store_fixture(session: Session) -> AttendeeStore:
    """Create an attendee store on the test session."""
    return AttendeeStore(session)


@pytest.fixture(name="client")
def client_fixture(session: Session):
    """Create a test client with the test database session."""

    def get_session_override():
        return session

    app.dependency_overrides[get_session] = get_session_override
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture(name="ada")
def ada_fixture(session: Session) -> Attendee:
    """Create an attendee who has not checked in yet."""
    attendee = Attendee(first_name="Ada", last_name="Lovelace", meal_preference="Vegan")
    session.add(attendee)
    session.commit()
    session.refresh(attendee)
    return attendee


@pytest.fixture(name="checked_in_attendee")
def checked_in_attendee_fixture(session: Session) -> Attendee:
    """Create an attendee who is already checked in."""
    attendee = Attendee(
        first_name="Grace",
        last_name="Hopper",
        checked_in=True,
        checked_in_at=datetime(2026, 5, 1, 9, 15),
    )
    session.add(attendee)
    session.commit()
    session.refresh(attendee)
    return attendee


@pytest.fixture(name="roster")
def roster_fixture(store: AttendeeStore) -> list[int]:
    """Insert a small roster and return the new ids."""
    people = [
        ("Ada", "Lovelace", "Vegan"),
        ("Charles", "Babbage", ""),
        ("Alan", "Turing", "Vegetarian"),
        ("Annie", "Turing", ""),
        ("Lovell", "Jones", "Halal"),
    ]
    return [store.insert(first, last, meal) for first, last, meal in people]
