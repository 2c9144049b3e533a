"""Clinical audit repository (append-only)."""

from sqlalchemy.orm import Session

from surgiflow.db.models import ClinicalAuditEvent


class AuditRepository:
    def __init__(self, db: Session):
        self.db = db

    def record(
        self,
        *,
        actor_id: str,
        actor_role: str,
        action_type: str,
        entity_type: str,
        entity_id: str,
        details: dict | None = None,
    ) -> ClinicalAuditEvent:
        event = ClinicalAuditEvent(
            actor_id=actor_id,
            actor_role=actor_role,
            action_type=action_type,
            entity_type=entity_type,
            entity_id=entity_id,
            details=details,
        )
        self.db.add(event)
        self.db.flush()
        return event
