"""
Shared fixtures for the Lifeline test suite.

Every test gets its own SQLite file so the partial unique indexes, savepoints
and server-side increments run against a real database engine. API tests talk
to the app through TestClient with ``get_db`` pointed at the same file.
"""

import os

# Must be set before lifeline is imported: settings and the module engine are built at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["PRIMARY_TIMEZONE"] = "UTC"
os.environ["API_TOKEN"] = ""

from datetime import time
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

from lifeline.models import Base, DonorProfile, Hospital, HospitalAssignment, Role, RoleAssignment, TimeWindow
from lifeline.services.appointments import AppointmentManager, get_appointment_manager
from lifeline.services.db import build_engine, get_db


@pytest.fixture
def db_engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'lifeline-test.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(bind=db_engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db_session(session_factory) -> Generator[Session, None, None]:
    session = session_factory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def hospital(db_session) -> Hospital:
    hospital = Hospital(name="City General", address="1 Main St", phone="555-0100", is_active=True)
    db_session.add(hospital)
    db_session.commit()
    return hospital


@pytest.fixture
def other_hospital(db_session) -> Hospital:
    hospital = Hospital(name="Riverside Clinic", address="9 River Rd", is_active=True)
    db_session.add(hospital)
    db_session.commit()
    return hospital


@pytest.fixture
def time_window(db_session, hospital) -> TimeWindow:
    # Wednesdays 09:00-12:00
    window = TimeWindow(
        hospital_id=hospital.id,
        day_of_week=3,
        start_time=time(9, 0),
        end_time=time(12, 0),
        is_active=True,
    )
    db_session.add(window)
    db_session.commit()
    return window


@pytest.fixture
def donor(db_session) -> DonorProfile:
    profile = DonorProfile(
        id="donor-1",
        first_name="Ada",
        last_name="Okafor",
        email="ada@example.com",
        phone="555-0101",
        blood_type="O+",
    )
    db_session.add(profile)
    db_session.commit()
    return profile


@pytest.fixture
def second_donor(db_session) -> DonorProfile:
    profile = DonorProfile(id="donor-2", first_name="Ben", last_name="Lee", email="ben@example.com", blood_type="O+")
    db_session.add(profile)
    db_session.commit()
    return profile


@pytest.fixture
def agent(db_session, hospital) -> str:
    db_session.add(RoleAssignment(user_id="agent-1", role=Role.AGENT))
    db_session.add(DonorProfile(id="agent-1", first_name="Grace", last_name="Hopper"))
    db_session.add(HospitalAssignment(agent_id="agent-1", hospital_id=hospital.id, is_active=True))
    db_session.commit()
    return "agent-1"


@pytest.fixture
def unassigned_agent(db_session) -> str:
    db_session.add(RoleAssignment(user_id="agent-2", role=Role.AGENT))
    db_session.commit()
    return "agent-2"


@pytest.fixture
def admin(db_session) -> str:
    db_session.add(RoleAssignment(user_id="admin-1", role=Role.ADMIN))
    db_session.commit()
    return "admin-1"


@pytest.fixture
def manager(db_session) -> AppointmentManager:
    return get_appointment_manager(db_session)


@pytest.fixture
def client(session_factory) -> Generator[TestClient, None, None]:
    from lifeline.main import app

    def _get_db() -> Generator[Session, None, None]:
        session = session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
