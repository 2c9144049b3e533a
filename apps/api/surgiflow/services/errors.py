"""Surgical workflow domain errors.

Every error carries an HTTP status and a JSON-safe `details` dict so the API
exception handler can render it without knowing the concrete type.
"""

from typing import Any


class SurgicalWorkflowError(Exception):
    """Base exception for surgical workflow errors."""

    status_code = 400
    code = "SURGICAL_WORKFLOW_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.code, "message": self.message, **self.details}


class CaseNotFoundError(SurgicalWorkflowError):
    """Surgical case (or a record it needs) does not exist."""

    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, case_id: Any):
        super().__init__(f"Surgical case {case_id} not found", {"case_id": str(case_id)})


class InvalidActionError(SurgicalWorkflowError):
    """Unrecognized transition action token."""

    status_code = 400
    code = "INVALID_ACTION"

    def __init__(self, action: str, allowed: list[str]):
        super().__init__(
            f"Unknown action '{action}'",
            {"action": action, "allowed_actions": allowed},
        )


class InvalidTransitionError(SurgicalWorkflowError):
    """Status pair is not in the transition table."""

    status_code = 409
    code = "INVALID_TRANSITION"

    def __init__(self, from_status: str, to_status: str):
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(
            f"Cannot transition surgical case from {from_status} to {to_status}",
            {"from_status": from_status, "to_status": to_status},
        )


class ReadinessValidationFailedError(SurgicalWorkflowError):
    """Case plan does not meet the requirements for scheduling."""

    status_code = 422
    code = "READINESS_VALIDATION_FAILED"

    def __init__(self, missing_items: list[str]):
        self.missing_items = missing_items
        super().__init__(
            "Case plan is not ready for scheduling",
            {"missing_items": missing_items},
        )


class GateNotSatisfiedError(SurgicalWorkflowError):
    """A checklist phase required by a transition gate is not complete."""

    status_code = 409
    code = "GATE_NOT_SATISFIED"

    def __init__(self, gate: str, missing_items: list[str]):
        self.gate = gate
        self.missing_items = missing_items
        super().__init__(
            f"{gate} checklist must be completed first",
            {"gate": gate, "blocking_category": "CHECKLIST", "missing_items": missing_items},
        )


class ChecklistIncompleteError(SurgicalWorkflowError):
    """Checklist phase submitted with unconfirmed items."""

    status_code = 422
    code = "CHECKLIST_INCOMPLETE"

    def __init__(self, phase: str, unconfirmed_keys: list[str]):
        self.phase = phase
        self.unconfirmed_keys = unconfirmed_keys
        super().__init__(
            f"{phase} checklist has unconfirmed items",
            {"phase": phase, "unconfirmed_keys": unconfirmed_keys},
        )


class ChecklistPhaseFinalizedError(SurgicalWorkflowError):
    """Draft write attempted on a finalized phase."""

    status_code = 409
    code = "CHECKLIST_PHASE_FINALIZED"

    def __init__(self, phase: str):
        self.phase = phase
        super().__init__(f"{phase} checklist is already finalized", {"phase": phase})


class TimelineValidationFailedError(SurgicalWorkflowError):
    """Proposed operative timeline breaks ordering or the future buffer."""

    status_code = 422
    code = "TIMELINE_VALIDATION_FAILED"

    def __init__(self, errors: list[dict[str, str]]):
        self.errors = errors
        super().__init__("Operative timeline validation failed", {"errors": errors})


class ConcurrentUpdateError(SurgicalWorkflowError):
    """Case changed underneath this write."""

    status_code = 409
    code = "CONCURRENT_UPDATE"

    def __init__(self, case_id: Any):
        super().__init__(
            f"Surgical case {case_id} was modified concurrently; reload and retry",
            {"case_id": str(case_id)},
        )
