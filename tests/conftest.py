"""Shared test fixtures."""

from datetime import UTC, datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.pool import StaticPool

from app.core.database import configure_engine, create_db_engine, get_session
from app.main import app
from app.models import Activity, Attendee, Event, EventAttendee


@pytest.fixture(name="engine")
def engine_fixture():
    """Create an in-memory SQLite database for testing."""
    engine = configure_engine(
        create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    """Create a new database session for each test."""
    with Session(engine) as session:
        yield session


@pytest.fixture(name="client")
def client_fixture(session: Session):
    """Create a test client with the test database session."""

    def get_session_override():
        return session

    app.dependency_overrides[get_session] = get_session_override
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture(name="make_attendee")
def make_attendee_fixture(session: Session):
    """Factory creating attendees with unique user ids."""
    counter = {"n": 0}

    def make(**fields) -> Attendee:
        counter["n"] += 1
        n = counter["n"]
        fields.setdefault("user_id", f"user-{n}")
        fields.setdefault("email", f"attendee{n}@example.com")
        attendee = Attendee(**fields)
        session.add(attendee)
        session.commit()
        session.refresh(attendee)
        return attendee

    return make


@pytest.fixture(name="sample_event")
def sample_event_fixture(session: Session) -> Event:
    """Create a sample event for testing."""
    event = Event(
        name="Hackathon",
        begin_date=datetime.now(UTC) + timedelta(days=1),
        end_date=datetime.now(UTC) + timedelta(days=2),
    )
    session.add(event)
    session.commit()
    session.refresh(event)
    return event


@pytest.fixture(name="registered_attendees")
def registered_attendees_fixture(session: Session, sample_event: Event, make_attendee) -> list[Attendee]:
    """Three attendees registered to the sample event."""
    attendees = [make_attendee() for _ in range(3)]
    for attendee in attendees:
        session.add(EventAttendee(event_id=sample_event.id, attendee_id=attendee.id))
    session.commit()
    return attendees


@pytest.fixture(name="sample_activity")
def sample_activity_fixture(session: Session, sample_event: Event) -> Activity:
    activity = Activity(
        event_id=sample_event.id,
        name="Closing ceremony",
        location="Main hall",
        begin_date=datetime.now(UTC) + timedelta(days=2),
        end_date=datetime.now(UTC) + timedelta(days=2, hours=1),
    )
    session.add(activity)
    session.commit()
    session.refresh(activity)
    return activity


@pytest.fixture(name="file_engine")
def file_engine_fixture(tmp_path):
    """A file-backed WAL database shared by several sessions or threads."""
    engine = create_db_engine(f"sqlite:///{tmp_path / 'registration.db'}")
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()
