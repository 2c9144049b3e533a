"""Clinical audit enums."""

from enum import Enum


class ClinicalAuditAction(str, Enum):
    """
    Clinical actions written to the append-only audit log.

    Groups:
    - CASE_*: status transitions and rejected transition attempts
    - CHECKLIST_*: WHO checklist drafts and phase completions
    - TIMELINE_*: operative timestamp writes and rejected writes
    """

    # Case status
    CASE_TRANSITION = "CASE_TRANSITION"
    GATE_REJECTED = "GATE_REJECTED"

    # WHO checklist
    CHECKLIST_PHASE_COMPLETED = "CHECKLIST_PHASE_COMPLETED"
    CHECKLIST_DRAFT_SAVED = "CHECKLIST_DRAFT_SAVED"

    # Operative timeline
    TIMELINE_UPDATED = "TIMELINE_UPDATED"
    TIMELINE_INVALID_ATTEMPT = "TIMELINE_INVALID_ATTEMPT"


class AuditEntityType(str, Enum):
    SURGICAL_CASE = "SurgicalCase"
    SURGICAL_CHECKLIST = "SurgicalChecklist"
    PROCEDURE_RECORD = "SurgicalProcedureRecord"
