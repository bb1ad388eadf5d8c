"""Root conftest for all tests.

Provides an isolated in-memory SQLite database per test, the FastAPI app
wired to it, and agenda gateways that talk to the app in-process.
"""

import os
from datetime import date

# Keep settings from resolving a file-backed database while tests import the app
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "development")

import httpx
import pytest
import pytest_asyncio
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from camp_agenda.agenda.gateway import AgendaGateway
from camp_agenda.db.models import Base, Camp, Clinician, Location, StaffMember
from camp_agenda.db.session import get_db
from camp_agenda.main import app


@pytest.fixture(scope="function")
def engine():
    """In-memory SQLite engine shared by every connection of one test."""
    test_engine = create_engine(
        "sqlite://",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture(scope="function")
def db_session(engine):
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def api(engine):
    """The FastAPI app with get_db overridden to use the test engine."""
    testing_session_local = sessionmaker(bind=engine, autocommit=False, autoflush=False)

    def override_get_db():
        session = testing_session_local()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield app
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def http_client(api):
    transport = httpx.ASGITransport(app=api)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def gateway(http_client) -> AgendaGateway:
    return AgendaGateway(client=http_client)


@pytest.fixture
def seeded_camp(db_session) -> dict[str, int]:
    """A three-day camp with one clinician, one location and two staff members.

    Returns:
        Dict of ids: camp_id, clinician_id, location_id, staff_ids (list)
    """
    camp = Camp(
        camp_code="SUMMER-25",
        name="Summer Skills Camp",
        start_date=date(2025, 7, 14),
        end_date=date(2025, 7, 16),
        location="Riverside Sports Complex",
    )
    db_session.add(camp)
    db_session.flush()

    clinician = Clinician(camp_id=camp.id, name="Dana Brooks", role="Head Coach", email="dana@example.com")
    location = Location(camp_id=camp.id, name="Court A", capacity=40, type="court")
    staff = [
        StaffMember(name="Sam Ortiz", role="Trainer", email="sam@example.com"),
        StaffMember(name="Riley Chen", role="Assistant", email="riley@example.com"),
    ]
    db_session.add_all([clinician, location, *staff])
    db_session.commit()

    return {
        "camp_id": camp.id,
        "clinician_id": clinician.id,
        "location_id": location.id,
        "staff_ids": [member.id for member in staff],
    }
