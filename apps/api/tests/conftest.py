"""
Test configuration and fixtures.

Provides:
- In-memory SQLite engine with the full schema
- Database session with savepoint (rollback after each test)
- Factories for patients, surgeons, cases, plans and theaters
- HTTPX AsyncClient with actor identity headers
"""
import os
import uuid
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator, Callable, Generator

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("ENV", "test")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.orm import Session

from surgiflow.core.deps import get_db
from surgiflow.db.base import Base
from surgiflow.db.enums import SurgicalCaseStatus, TheaterBookingStatus
from surgiflow.db.models import (
    CaseConsent,
    CaseImage,
    CasePlan,
    Patient,
    SurgicalCase,
    Theater,
    TheaterBooking,
    User,
)
from surgiflow.db.session import SessionLocal, engine
from surgiflow.main import app

ACTOR_ID = "user-nurse-1"
ACTOR_ROLE = "NURSE"


# =============================================================================
# Database Fixtures (Savepoint pattern)
# =============================================================================


@pytest.fixture(scope="session", autouse=True)
def create_schema() -> Generator[None, None, None]:
    Base.metadata.create_all(engine)
    yield
    Base.metadata.drop_all(engine)


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """
    Creates a database session inside an outer transaction.

    Application code may call commit(); each commit only releases a SAVEPOINT,
    and the outer transaction is rolled back when the test ends.
    """
    connection = engine.connect()
    transaction = connection.begin()
    session = SessionLocal(bind=connection, join_transaction_mode="create_savepoint")

    yield session

    session.close()
    transaction.rollback()
    connection.close()


# =============================================================================
# Domain Factories
# =============================================================================


@pytest.fixture(scope="function")
def test_patient(db: Session) -> Patient:
    patient = Patient(
        first_name="Ada",
        last_name="Okafor",
        file_number=f"NS-{uuid.uuid4().hex[:6]}",
        allergies="Penicillin",
    )
    db.add(patient)
    db.flush()
    return patient


@pytest.fixture(scope="function")
def test_surgeon(db: Session) -> User:
    surgeon = User(
        display_name="Dr. Test Surgeon",
        email=f"surgeon-{uuid.uuid4().hex[:8]}@test.com",
        role="SURGEON",
        specialization="Plastic Surgery",
    )
    db.add(surgeon)
    db.flush()
    return surgeon


@pytest.fixture(scope="function")
def make_case(db: Session, test_patient: Patient, test_surgeon: User) -> Callable[..., SurgicalCase]:
    """Factory: create a case in any status."""

    def _make(
        status: SurgicalCaseStatus = SurgicalCaseStatus.DRAFT,
        diagnosis: str | None = "Recurrent inguinal hernia",
        **kwargs,
    ) -> SurgicalCase:
        case = SurgicalCase(
            patient_id=test_patient.id,
            primary_surgeon_id=test_surgeon.id,
            status=status.value,
            diagnosis=diagnosis,
            procedure_name=kwargs.pop("procedure_name", "Hernia repair"),
            **kwargs,
        )
        db.add(case)
        db.commit()
        return case

    return _make


@pytest.fixture(scope="function")
def make_plan(db: Session) -> Callable[..., CasePlan]:
    """Factory: attach a case plan (complete by default)."""

    def _make(
        case: SurgicalCase,
        procedure_plan: str | None = "Open mesh repair under general anesthesia",
        risk_factors: str | None = "Smoker, BMI 31",
        pre_op_notes: str | None = "NPO from midnight",
        images: int = 0,
        signed_consents: int = 0,
        unsigned_consents: int = 0,
        **kwargs,
    ) -> CasePlan:
        plan = CasePlan(
            surgical_case_id=case.id,
            procedure_plan=procedure_plan,
            risk_factors=risk_factors,
            pre_op_notes=pre_op_notes,
            **kwargs,
        )
        for i in range(images):
            plan.images.append(CaseImage(file_url=f"s3://photos/{case.id}/{i}.jpg"))
        for i in range(signed_consents):
            plan.consents.append(
                CaseConsent(
                    title=f"Surgical consent {i}",
                    status="SIGNED",
                    signed_at=datetime.now(timezone.utc),
                )
            )
        for i in range(unsigned_consents):
            plan.consents.append(CaseConsent(title=f"Anesthesia consent {i}"))
        db.add(plan)
        db.commit()
        return plan

    return _make


@pytest.fixture(scope="function")
def make_theater(db: Session) -> Callable[..., Theater]:
    def _make(name: str = "Theater A", is_active: bool = True) -> Theater:
        theater = Theater(name=name, type="MAJOR", color_code="#3366ff", is_active=is_active)
        db.add(theater)
        db.commit()
        return theater

    return _make


@pytest.fixture(scope="function")
def make_booking(db: Session) -> Callable[..., TheaterBooking]:
    def _make(
        theater: Theater,
        case: SurgicalCase,
        start_time: datetime,
        duration_minutes: int = 120,
        status: TheaterBookingStatus = TheaterBookingStatus.CONFIRMED,
    ) -> TheaterBooking:
        booking = TheaterBooking(
            theater_id=theater.id,
            surgical_case_id=case.id,
            start_time=start_time,
            end_time=start_time + timedelta(minutes=duration_minutes),
            status=status.value,
        )
        db.add(booking)
        db.commit()
        return booking

    return _make


# =============================================================================
# Client Fixtures
# =============================================================================


@pytest.fixture(scope="function")
async def client(db: Session) -> AsyncGenerator[AsyncClient, None]:
    """AsyncClient without actor headers (for 401 checks)."""

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def actor_client(db: Session) -> AsyncGenerator[AsyncClient, None]:
    """AsyncClient carrying the upstream actor identity headers."""

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers={"X-Actor-Id": ACTOR_ID, "X-Actor-Role": ACTOR_ROLE},
    ) as c:
        yield c

    app.dependency_overrides.clear()
