"""Persistence adapters for the surgical workflow engine."""

from surgiflow.repositories.audit_repository import AuditRepository
from surgiflow.repositories.case_plan_repository import CasePlanRepository
from surgiflow.repositories.checklist_repository import SurgicalChecklistRepository
from surgiflow.repositories.procedure_record_repository import ProcedureRecordRepository
from surgiflow.repositories.surgical_case_repository import SurgicalCaseRepository

__all__ = [
    "AuditRepository",
    "CasePlanRepository",
    "ProcedureRecordRepository",
    "SurgicalCaseRepository",
    "SurgicalChecklistRepository",
]
