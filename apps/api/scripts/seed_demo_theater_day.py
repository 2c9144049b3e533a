"""
Seed script to create a demo theater day: theaters, staff, patients and booked cases.
Run with: python -m scripts.seed_demo_theater_day
"""

import os
import random
from datetime import date, datetime, time, timedelta, timezone

from surgiflow.core.config import settings
from surgiflow.db.enums import (
    ConsentStatus,
    ImageTimepoint,
    SurgicalCaseStatus,
    SurgicalUrgency,
    TheaterBookingStatus,
)
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
from surgiflow.db.session import SessionLocal
from surgiflow.utils.datetime_utils import resolve_timezone

# Sample data pools
FIRST_NAMES = [
    "Amara", "Tunde", "Grace", "Kwame", "Lena", "Omar", "Priya", "Mateo",
    "Ines", "Chidi", "Hana", "Samuel", "Zara", "Felix", "Noor", "Elena",
]

LAST_NAMES = [
    "Okafor", "Mensah", "Haddad", "Silva", "Kowalski", "Nakamura", "Adeyemi",
    "Fischer", "Rahman", "Moreau", "Osei", "Lindqvist", "Patel", "Costa",
]

PROCEDURES = [
    ("Rhinoplasty", "Nasal deformity", None),
    ("Abdominoplasty", "Abdominal wall laxity", None),
    ("Carpal tunnel release", "Carpal tunnel syndrome", "RIGHT"),
    ("Breast reduction", "Macromastia", "BILATERAL"),
    ("Blepharoplasty", "Dermatochalasis", "BILATERAL"),
    ("Tendon repair", "Flexor tendon laceration", "LEFT"),
]

THEATERS = [
    ("Theater 1", "MAJOR", "#0ea5e9"),
    ("Theater 2", "MAJOR", "#22c55e"),
    ("Minor Ops", "MINOR", "#f97316"),
]

# Status mix for the day; earlier slots are further along
DAY_STATUSES = [
    SurgicalCaseStatus.COMPLETED,
    SurgicalCaseStatus.RECOVERY,
    SurgicalCaseStatus.IN_THEATER,
    SurgicalCaseStatus.IN_PREP,
    SurgicalCaseStatus.SCHEDULED,
    SurgicalCaseStatus.SCHEDULED,
]


def get_or_create_theaters(db) -> list[Theater]:
    theaters = db.query(Theater).filter(Theater.is_active.is_(True)).all()
    if theaters:
        return theaters
    theaters = [Theater(name=name, type=kind, color_code=color) for name, kind, color in THEATERS]
    db.add_all(theaters)
    db.flush()
    return theaters


def get_or_create_surgeon(db) -> User:
    surgeon = db.query(User).filter(User.role == "SURGEON").first()
    if surgeon:
        return surgeon
    surgeon = User(
        display_name="Dr. Demo Surgeon",
        email="surgeon@surgiflow.test",
        role="SURGEON",
        specialization="Plastic Surgery",
    )
    db.add(surgeon)
    db.flush()
    return surgeon


def create_case(db, surgeon: User, status: SurgicalCaseStatus, idx: int) -> SurgicalCase:
    procedure, diagnosis, side = random.choice(PROCEDURES)
    patient = Patient(
        first_name=random.choice(FIRST_NAMES),
        last_name=random.choice(LAST_NAMES),
        file_number=f"DEMO-{datetime.now(timezone.utc):%Y%m%d}-{idx:03d}",
        allergies=random.choice([None, None, "Penicillin", "Latex"]),
    )
    db.add(patient)
    db.flush()

    case = SurgicalCase(
        patient_id=patient.id,
        primary_surgeon_id=surgeon.id,
        status=status.value,
        urgency=SurgicalUrgency.ELECTIVE.value,
        procedure_name=procedure,
        diagnosis=diagnosis,
        side=side,
    )
    db.add(case)
    db.flush()

    plan = CasePlan(
        surgical_case_id=case.id,
        procedure_plan=f"{procedure} under general anesthesia",
        risk_factors="None documented",
        planned_anesthesia="GENERAL",
        estimated_duration_minutes=random.choice([60, 90, 120]),
        ready_for_surgery=True,
    )
    plan.images.append(
        CaseImage(timepoint=ImageTimepoint.PRE_OP.value, file_url=f"demo/{case.id}/pre-op.jpg")
    )
    plan.consents.append(
        CaseConsent(
            title="Surgical consent",
            status=ConsentStatus.SIGNED.value,
            signed_at=datetime.now(timezone.utc),
        )
    )
    db.add(plan)
    return case


def create_day_bookings(db, theaters: list[Theater], surgeon: User, day: date) -> int:
    tz = resolve_timezone(settings.CLINIC_TIMEZONE)
    created = 0
    for theater in theaters:
        start = datetime.combine(day, time(8, 0)).replace(tzinfo=tz)
        for status in DAY_STATUSES:
            created += 1
            case = create_case(db, surgeon, status, created)
            duration = timedelta(minutes=random.choice([60, 90, 120]))
            booking_status = (
                TheaterBookingStatus.COMPLETED
                if status == SurgicalCaseStatus.COMPLETED
                else TheaterBookingStatus.CONFIRMED
            )
            db.add(
                TheaterBooking(
                    theater_id=theater.id,
                    surgical_case_id=case.id,
                    start_time=start.astimezone(timezone.utc),
                    end_time=(start + duration).astimezone(timezone.utc),
                    status=booking_status.value,
                )
            )
            start += duration + timedelta(minutes=30)
    return created


def main():
    """Main entry point."""
    print("Seeding demo theater day...")

    db = SessionLocal()

    try:
        day_value = os.getenv("SEED_DAY")
        day = date.fromisoformat(day_value) if day_value else date.today()

        theaters = get_or_create_theaters(db)
        print(f"Using theaters: {', '.join(t.name for t in theaters)}")

        surgeon = get_or_create_surgeon(db)
        print(f"Using surgeon: {surgeon.display_name} ({surgeon.id})")

        created = create_day_bookings(db, theaters, surgeon, day)
        db.commit()

        print("\nDemo data seeded successfully!")
        print(f"  - {created} cases booked on {day.isoformat()}")

    except Exception as e:
        print(f"ERROR: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
