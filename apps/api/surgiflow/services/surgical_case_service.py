"""Surgical case state machine.

Owns the legal status graph for a surgical case and the readiness gate on
PLANNING → READY_FOR_SCHEDULING. Callers write the audit trail.
"""

import logging
from uuid import UUID

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from surgiflow.core.structured_logging import build_log_context
from surgiflow.db.enums import SurgicalCaseStatus
from surgiflow.db.models import SurgicalCase
from surgiflow.repositories import CasePlanRepository, SurgicalCaseRepository
from surgiflow.services.case_plan_readiness import get_readiness_gaps
from surgiflow.services.errors import (
    CaseNotFoundError,
    ConcurrentUpdateError,
    InvalidTransitionError,
    ReadinessValidationFailedError,
)

logger = logging.getLogger(__name__)

S = SurgicalCaseStatus

ALLOWED_TRANSITIONS: dict[SurgicalCaseStatus, frozenset[SurgicalCaseStatus]] = {
    S.DRAFT: frozenset({S.PLANNING, S.CANCELLED}),
    S.PLANNING: frozenset({S.READY_FOR_SCHEDULING, S.DRAFT, S.CANCELLED}),
    S.READY_FOR_SCHEDULING: frozenset({S.SCHEDULED, S.PLANNING, S.CANCELLED}),
    S.SCHEDULED: frozenset({S.IN_PREP, S.READY_FOR_SCHEDULING, S.CANCELLED}),
    S.IN_PREP: frozenset({S.IN_THEATER}),
    S.IN_THEATER: frozenset({S.RECOVERY}),
    S.RECOVERY: frozenset({S.COMPLETED}),
    S.COMPLETED: frozenset(),
    S.CANCELLED: frozenset(),
}

TERMINAL_STATUSES = frozenset({S.COMPLETED, S.CANCELLED})

STATUS_LABELS: dict[SurgicalCaseStatus, str] = {
    S.DRAFT: "Draft",
    S.PLANNING: "Planning",
    S.READY_FOR_SCHEDULING: "Ready for Scheduling",
    S.SCHEDULED: "Scheduled",
    S.IN_PREP: "In Prep",
    S.IN_THEATER: "In Theater",
    S.RECOVERY: "Recovery",
    S.COMPLETED: "Completed",
    S.CANCELLED: "Cancelled",
}


def can_transition(from_status: SurgicalCaseStatus, to_status: SurgicalCaseStatus) -> bool:
    return to_status in ALLOWED_TRANSITIONS.get(from_status, frozenset())


def allowed_transitions(from_status: SurgicalCaseStatus) -> list[SurgicalCaseStatus]:
    """Legal targets from a status, in lifecycle order."""
    targets = ALLOWED_TRANSITIONS.get(from_status, frozenset())
    return [status for status in SurgicalCaseStatus if status in targets]


def is_terminal(status: SurgicalCaseStatus) -> bool:
    return status in TERMINAL_STATUSES


def status_label(status: SurgicalCaseStatus) -> str:
    return STATUS_LABELS[status]


class SurgicalCaseService:
    """Applies status transitions to surgical cases."""

    def __init__(
        self,
        db: Session,
        case_repo: SurgicalCaseRepository | None = None,
        plan_repo: CasePlanRepository | None = None,
    ):
        self.db = db
        self.case_repo = case_repo or SurgicalCaseRepository(db)
        self.plan_repo = plan_repo or CasePlanRepository(db)

    def transition_to(
        self,
        case_id: UUID,
        target_status: SurgicalCaseStatus,
        actor_id: str,
        expected_status: SurgicalCaseStatus | None = None,
    ) -> SurgicalCase:
        """
        Move a case to `target_status`.

        Locks the case row, checks the transition table and (for
        PLANNING → READY_FOR_SCHEDULING) the plan readiness rules, then
        flushes the new status. Does not commit and does not audit.

        `expected_status` is the status a caller validated against; if the
        locked row no longer has it the write is rejected as concurrent.

        Raises:
            CaseNotFoundError, InvalidTransitionError,
            ReadinessValidationFailedError, ConcurrentUpdateError
        """
        case = self.case_repo.find_by_id(case_id, for_update=True)
        if not case:
            raise CaseNotFoundError(case_id)

        current = SurgicalCaseStatus(case.status)
        if expected_status is not None and current != expected_status:
            logger.warning(
                "Surgical case status moved from %s to %s before write",
                expected_status.value,
                current.value,
                extra=build_log_context(
                    case_id=str(case_id), actor_id=actor_id, action=target_status.value
                ),
            )
            raise ConcurrentUpdateError(case_id)

        if not can_transition(current, target_status):
            raise InvalidTransitionError(current.value, target_status.value)

        if current == S.PLANNING and target_status == S.READY_FOR_SCHEDULING:
            gaps = get_readiness_gaps(self.plan_repo.find_by_surgical_case_id(case.id))
            if gaps:
                raise ReadinessValidationFailedError(gaps)

        try:
            self.case_repo.update_status(case, target_status)
        except StaleDataError as exc:
            logger.warning(
                "Stale surgical case write rejected",
                extra=build_log_context(
                    case_id=str(case_id), actor_id=actor_id, action=target_status.value
                ),
            )
            raise ConcurrentUpdateError(case_id) from exc

        logger.info(
            "Surgical case status changed %s -> %s",
            current.value,
            target_status.value,
            extra=build_log_context(
                case_id=str(case_id), actor_id=actor_id, action=target_status.value
            ),
        )
        return case
