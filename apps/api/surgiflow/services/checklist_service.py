"""WHO surgical safety checklist tracker."""

import logging
from typing import Any, Iterable, Mapping
from uuid import UUID

from sqlalchemy.orm import Session

from surgiflow.core.checklist_definitions import (
    get_missing_required_keys,
    get_section_completion,
)
from surgiflow.core.structured_logging import build_log_context
from surgiflow.db.enums import AuditEntityType, ChecklistPhase, ClinicalAuditAction
from surgiflow.db.models import SurgicalChecklist
from surgiflow.repositories import SurgicalCaseRepository, SurgicalChecklistRepository
from surgiflow.repositories.checklist_repository import PHASE_COLUMNS
from surgiflow.services import audit_service
from surgiflow.services.errors import (
    CaseNotFoundError,
    ChecklistIncompleteError,
    ChecklistPhaseFinalizedError,
)

logger = logging.getLogger(__name__)


def _as_item_dicts(items: Iterable[Any]) -> list[dict[str, Any]]:
    """Normalize confirmations (dicts or pydantic models) to storable dicts."""
    result = []
    for item in items:
        data = item.model_dump(exclude_none=True) if hasattr(item, "model_dump") else dict(item)
        result.append(data)
    return result


def _phase_status(checklist: SurgicalChecklist | None, phase: ChecklistPhase) -> dict[str, Any]:
    columns = PHASE_COLUMNS[phase]
    if checklist is None:
        return {
            "completed": False,
            "completed_at": None,
            "completed_by_user_id": None,
            "completed_by_role": None,
            "items": [],
        }
    completed_at = getattr(checklist, columns.completed_at)
    return {
        "completed": completed_at is not None,
        "completed_at": completed_at,
        "completed_by_user_id": getattr(checklist, columns.by_user_id),
        "completed_by_role": getattr(checklist, columns.by_role),
        "items": getattr(checklist, columns.items) or [],
    }


def build_checklist_status(
    case_id: UUID, checklist: SurgicalChecklist | None
) -> dict[str, Any]:
    return {
        "case_id": case_id,
        "phases": {phase.value: _phase_status(checklist, phase) for phase in ChecklistPhase},
    }


def build_section_completion(checklist: SurgicalChecklist | None) -> dict[str, dict[str, Any]]:
    """Per-phase progress against the WHO required items."""
    completion = {}
    for phase in ChecklistPhase:
        status = _phase_status(checklist, phase)
        completion[phase.value] = get_section_completion(
            phase, status["items"], status["completed"]
        )
    return completion


class ChecklistService:
    """Completes, drafts and reports WHO checklist phases for a case."""

    def __init__(
        self,
        db: Session,
        case_repo: SurgicalCaseRepository | None = None,
        checklist_repo: SurgicalChecklistRepository | None = None,
    ):
        self.db = db
        self.case_repo = case_repo or SurgicalCaseRepository(db)
        self.checklist_repo = checklist_repo or SurgicalChecklistRepository(db)

    def _require_case(self, case_id: UUID) -> None:
        if not self.case_repo.find_by_id(case_id):
            raise CaseNotFoundError(case_id)

    def get_status(self, case_id: UUID) -> dict[str, Any]:
        """All three phases; a case with no checklist row reports every phase empty."""
        self._require_case(case_id)
        checklist = self.checklist_repo.find_by_case_id(case_id)
        return build_checklist_status(case_id, checklist)

    def complete_phase(
        self,
        case_id: UUID,
        phase: ChecklistPhase,
        items: Iterable[Mapping[str, Any]],
        actor_id: str,
        actor_role: str,
    ) -> dict[str, Any]:
        """
        Finalize a checklist phase.

        Every submitted item must be confirmed. Completing an already finalized
        phase is a no-op at the storage level (timestamp, actor and items are
        kept) but is still audited.

        Raises:
            ChecklistIncompleteError: any item has confirmed=False
            CaseNotFoundError: no such case
        """
        item_dicts = _as_item_dicts(items)
        unconfirmed = [item["key"] for item in item_dicts if not item.get("confirmed")]
        if unconfirmed:
            raise ChecklistIncompleteError(phase.value, unconfirmed)

        self._require_case(case_id)
        checklist, already_completed = self.checklist_repo.complete_phase(
            case_id, phase, item_dicts, actor_id, actor_role
        )

        audit_service.log_event(
            self.db,
            actor_id=actor_id,
            actor_role=actor_role,
            action_type=ClinicalAuditAction.CHECKLIST_PHASE_COMPLETED,
            entity_type=AuditEntityType.SURGICAL_CHECKLIST,
            entity_id=checklist.id,
            case_id=case_id,
            details={
                "case_id": case_id,
                "phase": phase,
                "item_count": len(item_dicts),
                "actor_role": actor_role,
                "already_completed": already_completed,
            },
        )
        self.db.commit()

        logger.info(
            "Checklist phase %s %s",
            phase.value,
            "already completed" if already_completed else "completed",
            extra=build_log_context(
                case_id=str(case_id), actor_id=actor_id, actor_role=actor_role, action=phase.value
            ),
        )
        return build_checklist_status(case_id, checklist)

    def finalize_phase(
        self,
        case_id: UUID,
        phase: ChecklistPhase,
        items: Iterable[Mapping[str, Any]],
        actor_id: str,
        actor_role: str,
    ) -> dict[str, Any]:
        """Complete a phase only if every WHO required item is present and confirmed."""
        item_dicts = _as_item_dicts(items)
        missing_keys = get_missing_required_keys(phase, item_dicts)
        if missing_keys:
            raise ChecklistIncompleteError(phase.value, missing_keys)
        return self.complete_phase(case_id, phase, item_dicts, actor_id, actor_role)

    def save_draft(
        self,
        case_id: UUID,
        phase: ChecklistPhase,
        items: Iterable[Mapping[str, Any]],
        actor_id: str,
        actor_role: str,
    ) -> dict[str, Any]:
        """
        Store partial confirmations for a phase without finalizing it.

        Raises:
            ChecklistPhaseFinalizedError: the phase is already finalized
            CaseNotFoundError: no such case
        """
        item_dicts = _as_item_dicts(items)
        self._require_case(case_id)

        checklist = self.checklist_repo.ensure_exists(case_id)
        if getattr(checklist, PHASE_COLUMNS[phase].completed_at) is not None:
            raise ChecklistPhaseFinalizedError(phase.value)

        checklist = self.checklist_repo.save_draft_items(case_id, phase, item_dicts)
        audit_service.log_event(
            self.db,
            actor_id=actor_id,
            actor_role=actor_role,
            action_type=ClinicalAuditAction.CHECKLIST_DRAFT_SAVED,
            entity_type=AuditEntityType.SURGICAL_CHECKLIST,
            entity_id=checklist.id,
            case_id=case_id,
            details={
                "case_id": case_id,
                "phase": phase,
                "item_count": len(item_dicts),
                "confirmed_count": sum(1 for item in item_dicts if item.get("confirmed")),
            },
        )
        self.db.commit()
        return build_checklist_status(case_id, checklist)
