"""Clinical audit sink.

Append-only log of clinical actions (transitions, checklist completions,
timeline writes and rejected attempts).

Guidelines:
- details carry ids, statuses and timestamps only, never patient demographics
- writes run in a SAVEPOINT of the caller's transaction; a failed audit write
  is rolled back to the savepoint and logged, never failing the clinical action
"""

import logging
from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from surgiflow.core.structured_logging import build_log_context
from surgiflow.db.enums import AuditEntityType, ClinicalAuditAction
from surgiflow.db.models import ClinicalAuditEvent
from surgiflow.repositories import AuditRepository

logger = logging.getLogger(__name__)


def _json_safe(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, dict):
        return {k: _json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(v) for v in value]
    if hasattr(value, "value") and isinstance(getattr(value, "value"), str):
        return value.value
    return value


def log_event(
    db: Session,
    *,
    actor_id: str,
    actor_role: str,
    action_type: ClinicalAuditAction,
    entity_type: AuditEntityType,
    entity_id: UUID | str,
    details: dict[str, Any] | None = None,
    case_id: UUID | str | None = None,
) -> ClinicalAuditEvent | None:
    """
    Record one clinical audit event.

    Args:
        db: Database session (caller owns the transaction and commits)
        actor_id: Opaque id of the acting user
        actor_role: Role of the acting user
        action_type: ClinicalAuditAction
        entity_type: Entity the action targets
        entity_id: Id of that entity
        details: Action-specific context; datetimes and UUIDs are serialized
        case_id: Case id for the log context when the entity is not the case

    Returns:
        The event, or None when the write failed.
    """
    try:
        with db.begin_nested():
            return AuditRepository(db).record(
                actor_id=actor_id,
                actor_role=actor_role,
                action_type=action_type.value,
                entity_type=entity_type.value,
                entity_id=str(entity_id),
                details=_json_safe(details) if details is not None else None,
            )
    except SQLAlchemyError:
        logger.exception(
            "Clinical audit write failed",
            extra=build_log_context(
                case_id=str(case_id or entity_id),
                actor_id=actor_id,
                actor_role=actor_role,
                action=action_type.value,
            ),
        )
        return None
