"""Enum definitions for application constants."""

from surgiflow.db.enums.audit import AuditEntityType, ClinicalAuditAction
from surgiflow.db.enums.surgical import (
    ChecklistPhase,
    ConsentStatus,
    ImageTimepoint,
    SurgicalCaseStatus,
    SurgicalUrgency,
    TheaterBookingStatus,
    TransitionAction,
)

__all__ = [
    "AuditEntityType",
    "ChecklistPhase",
    "ClinicalAuditAction",
    "ConsentStatus",
    "ImageTimepoint",
    "SurgicalCaseStatus",
    "SurgicalUrgency",
    "TheaterBookingStatus",
    "TransitionAction",
]
