"""Theater transition orchestration with checklist gates.

Flow for one request:
    action token → case row lock → gate check (checklist read) → state machine → audit → commit

Gates:
- IN_PREP → IN_THEATER requires the SIGN_IN phase to be finalized
- IN_THEATER → RECOVERY requires the SIGN_OUT phase to be finalized

A rejected gate never reaches the state machine. The rejection itself is
audited and committed so the attempt stays on record.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from sqlalchemy.orm import Session

from surgiflow.core.checklist_definitions import get_missing_items
from surgiflow.core.structured_logging import build_log_context
from surgiflow.db.enums import (
    AuditEntityType,
    ChecklistPhase,
    ClinicalAuditAction,
    SurgicalCaseStatus,
    TransitionAction,
)
from surgiflow.repositories import SurgicalCaseRepository, SurgicalChecklistRepository
from surgiflow.repositories.checklist_repository import PHASE_COLUMNS
from surgiflow.services import audit_service
from surgiflow.services.errors import (
    CaseNotFoundError,
    GateNotSatisfiedError,
    InvalidActionError,
)
from surgiflow.services.surgical_case_service import SurgicalCaseService
from surgiflow.utils.datetime_utils import utcnow

logger = logging.getLogger(__name__)

# (from, to) → checklist phase that must be finalized first
TRANSITION_GATES: dict[tuple[SurgicalCaseStatus, SurgicalCaseStatus], ChecklistPhase] = {
    (SurgicalCaseStatus.IN_PREP, SurgicalCaseStatus.IN_THEATER): ChecklistPhase.SIGN_IN,
    (SurgicalCaseStatus.IN_THEATER, SurgicalCaseStatus.RECOVERY): ChecklistPhase.SIGN_OUT,
}


@dataclass
class TransitionResult:
    case_id: UUID
    previous_status: SurgicalCaseStatus
    new_status: SurgicalCaseStatus
    transitioned_at: datetime
    transitioned_by: str


def parse_action(action: str | TransitionAction) -> TransitionAction:
    """Map a raw action token to a TransitionAction."""
    if isinstance(action, TransitionAction):
        return action
    try:
        return TransitionAction(action)
    except ValueError:
        raise InvalidActionError(str(action), [a.value for a in TransitionAction])


class CaseTransitionService:
    """Gate enforcer in front of the case state machine."""

    def __init__(
        self,
        db: Session,
        state_machine: SurgicalCaseService | None = None,
        case_repo: SurgicalCaseRepository | None = None,
        checklist_repo: SurgicalChecklistRepository | None = None,
    ):
        self.db = db
        self.case_repo = case_repo or SurgicalCaseRepository(db)
        self.checklist_repo = checklist_repo or SurgicalChecklistRepository(db)
        self.state_machine = state_machine or SurgicalCaseService(db, case_repo=self.case_repo)

    def _missing_gate_items(self, case_id: UUID, phase: ChecklistPhase) -> list[str] | None:
        """Labels blocking the gate, or None when the phase is finalized."""
        if self.checklist_repo.is_phase_completed(case_id, phase):
            return None
        checklist = self.checklist_repo.find_by_case_id(case_id)
        saved_items = getattr(checklist, PHASE_COLUMNS[phase].items) if checklist else None
        # Every item confirmed in a draft still blocks until the phase is finalized
        return get_missing_items(phase, saved_items) or [f"{phase.value} checklist not finalized"]

    def _reject_gate(
        self,
        case_id: UUID,
        previous: SurgicalCaseStatus,
        action: TransitionAction,
        phase: ChecklistPhase,
        missing: list[str],
        actor_id: str,
        actor_role: str,
    ) -> GateNotSatisfiedError:
        audit_service.log_event(
            self.db,
            actor_id=actor_id,
            actor_role=actor_role,
            action_type=ClinicalAuditAction.GATE_REJECTED,
            entity_type=AuditEntityType.SURGICAL_CASE,
            entity_id=case_id,
            details={
                "action": action,
                "current_status": previous,
                "gate": phase,
                "missing_items": missing,
            },
        )
        self.db.commit()
        logger.warning(
            "Transition blocked by %s checklist gate",
            phase.value,
            extra=build_log_context(
                case_id=str(case_id),
                actor_id=actor_id,
                actor_role=actor_role,
                action=action.value,
            ),
        )
        return GateNotSatisfiedError(phase.value, missing)

    def transition_case(
        self,
        case_id: UUID,
        action: str | TransitionAction,
        actor_id: str,
        actor_role: str,
        reason: str | None = None,
    ) -> TransitionResult:
        """
        Apply a theater workflow action to a case.

        Raises:
            InvalidActionError: unknown action token
            CaseNotFoundError: no such case
            GateNotSatisfiedError: required checklist phase not finalized
            InvalidTransitionError / ReadinessValidationFailedError /
            ConcurrentUpdateError: from the state machine
        """
        parsed = parse_action(action)
        target = parsed.target_status

        # Gate and write are evaluated against the same locked status
        case = self.case_repo.find_by_id(case_id, for_update=True)
        if not case:
            raise CaseNotFoundError(case_id)
        previous = SurgicalCaseStatus(case.status)

        gate = TRANSITION_GATES.get((previous, target))
        if gate is not None:
            missing = self._missing_gate_items(case_id, gate)
            if missing is not None:
                raise self._reject_gate(
                    case_id, previous, parsed, gate, missing, actor_id, actor_role
                )

        updated = self.state_machine.transition_to(
            case_id, target, actor_id, expected_status=previous
        )
        transitioned_at = utcnow()

        audit_service.log_event(
            self.db,
            actor_id=actor_id,
            actor_role=actor_role,
            action_type=ClinicalAuditAction.CASE_TRANSITION,
            entity_type=AuditEntityType.SURGICAL_CASE,
            entity_id=case_id,
            details={
                "previous_status": previous,
                "new_status": target,
                "action": parsed,
                "actor_role": actor_role,
                "reason": reason,
            },
        )
        self.db.commit()

        return TransitionResult(
            case_id=case_id,
            previous_status=previous,
            new_status=SurgicalCaseStatus(updated.status),
            transitioned_at=transitioned_at,
            transitioned_by=actor_id,
        )
