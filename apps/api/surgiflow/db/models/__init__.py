"""SQLAlchemy ORM models."""

from surgiflow.db.models.audit import ClinicalAuditEvent
from surgiflow.db.models.checklists import SurgicalChecklist
from surgiflow.db.models.people import Patient, User
from surgiflow.db.models.procedure_records import SurgicalProcedureRecord
from surgiflow.db.models.surgical_cases import (
    CaseConsent,
    CaseImage,
    CasePlan,
    SurgicalCase,
)
from surgiflow.db.models.theaters import Theater, TheaterBooking

__all__ = [
    "CaseConsent",
    "CaseImage",
    "CasePlan",
    "ClinicalAuditEvent",
    "Patient",
    "SurgicalCase",
    "SurgicalChecklist",
    "SurgicalProcedureRecord",
    "Theater",
    "TheaterBooking",
    "User",
]
