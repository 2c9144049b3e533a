"""Operative timeline recorder.

Stores the six intra-operative timestamps on a case's procedure record.
Every write validates the whole proposed timeline; corrections of values
already recorded are allowed as long as ordering still holds. Only the
values a patch writes are held to the past limit.
"""

import logging
from datetime import datetime
from typing import Any, Mapping
from uuid import UUID

from sqlalchemy.orm import Session

from surgiflow.core.config import settings
from surgiflow.core.operative_timeline import (
    TIMELINE_FIELD_ORDER,
    apply_patch,
    compute_durations,
    get_missing_fields,
    timeline_from_record,
    validate_recency,
    validate_timeline,
)
from surgiflow.core.structured_logging import build_log_context
from surgiflow.db.enums import AuditEntityType, ClinicalAuditAction
from surgiflow.repositories import ProcedureRecordRepository, SurgicalCaseRepository
from surgiflow.services import audit_service
from surgiflow.services.errors import CaseNotFoundError, TimelineValidationFailedError

logger = logging.getLogger(__name__)

EMPTY_PATCH_ERROR = {
    "field": "timeline",
    "message": "At least one timeline timestamp must be provided",
}


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def build_timeline_result(
    case_id: UUID, status: str, timeline: Mapping[str, datetime | None]
) -> dict[str, Any]:
    return {
        "case_id": case_id,
        "case_status": status,
        "timeline": dict(timeline),
        "durations": compute_durations(timeline),
        "missing_items": get_missing_fields(status, timeline),
    }


class TimelineService:
    def __init__(
        self,
        db: Session,
        case_repo: SurgicalCaseRepository | None = None,
        record_repo: ProcedureRecordRepository | None = None,
    ):
        self.db = db
        self.case_repo = case_repo or SurgicalCaseRepository(db)
        self.record_repo = record_repo or ProcedureRecordRepository(db)

    def get_timeline(self, case_id: UUID) -> dict[str, Any]:
        case = self.case_repo.find_by_id(case_id)
        if not case:
            raise CaseNotFoundError(case_id)
        record = self.record_repo.find_by_case_id(case_id)
        return build_timeline_result(case_id, case.status, timeline_from_record(record))

    def update_timeline(
        self,
        case_id: UUID,
        patch: Mapping[str, datetime | None],
        actor_id: str,
        actor_role: str,
    ) -> dict[str, Any]:
        """
        Apply a partial timeline update.

        `patch` holds only the fields being written; an explicit None clears a
        field. The case row stays locked from validation through commit.

        Raises:
            CaseNotFoundError: no such case
            TimelineValidationFailedError: empty patch, ordering, future or past-limit violation
        """
        if not patch:
            raise TimelineValidationFailedError([EMPTY_PATCH_ERROR])

        case = self.case_repo.find_by_id(case_id, for_update=True)
        if not case:
            raise CaseNotFoundError(case_id)

        record = self.record_repo.find_by_case_id(case_id)
        current = timeline_from_record(record)
        proposed = apply_patch(current, patch)
        violations = validate_timeline(
            proposed, future_buffer_minutes=settings.TIMELINE_FUTURE_BUFFER_MINUTES
        ) + validate_recency(
            proposed, patch.keys(), past_limit_hours=settings.TIMELINE_PAST_LIMIT_HOURS
        )

        if violations:
            errors = [v.to_dict() for v in violations]
            audit_service.log_event(
                self.db,
                actor_id=actor_id,
                actor_role=actor_role,
                action_type=ClinicalAuditAction.TIMELINE_INVALID_ATTEMPT,
                entity_type=(
                    AuditEntityType.PROCEDURE_RECORD if record else AuditEntityType.SURGICAL_CASE
                ),
                entity_id=record.id if record else case_id,
                case_id=case_id,
                details={
                    "case_id": case_id,
                    "rejected_patch": {field: _iso(value) for field, value in patch.items()},
                    "errors": errors,
                },
            )
            self.db.commit()
            logger.warning(
                "Operative timeline update rejected (%d violations)",
                len(errors),
                extra=build_log_context(
                    case_id=str(case_id),
                    actor_id=actor_id,
                    actor_role=actor_role,
                    action=ClinicalAuditAction.TIMELINE_INVALID_ATTEMPT.value,
                ),
            )
            raise TimelineValidationFailedError(errors)

        changed = [f for f in TIMELINE_FIELD_ORDER if proposed[f] != current[f]]
        if changed and record is None:
            record = self.record_repo.create_for_case(case)

        for field in changed:
            setattr(record, field, proposed[field])
        self.db.flush()

        for field in changed:
            audit_service.log_event(
                self.db,
                actor_id=actor_id,
                actor_role=actor_role,
                action_type=ClinicalAuditAction.TIMELINE_UPDATED,
                entity_type=AuditEntityType.PROCEDURE_RECORD,
                entity_id=record.id,
                case_id=case_id,
                details={
                    "case_id": case_id,
                    "field": field,
                    "old_value": _iso(current[field]),
                    "new_value": _iso(proposed[field]),
                },
            )
        self.db.commit()

        if changed:
            logger.info(
                "Operative timeline updated: %s",
                ", ".join(changed),
                extra=build_log_context(
                    case_id=str(case_id),
                    actor_id=actor_id,
                    actor_role=actor_role,
                    action=ClinicalAuditAction.TIMELINE_UPDATED.value,
                ),
            )
        return build_timeline_result(case_id, case.status, proposed)
