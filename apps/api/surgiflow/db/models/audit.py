"""SQLAlchemy ORM models."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from surgiflow.db.base import Base
from surgiflow.db.types import JSONType
from surgiflow.utils.datetime_utils import utcnow


class ClinicalAuditEvent(Base):
    """
    Append-only clinical action log.

    Records every case transition, checklist phase completion and timeline
    correction, including rejected attempts.

    Security:
    - Actor is an opaque id + role supplied by the upstream auth layer
    - details never carry patient demographics, only ids and field values
    """

    __tablename__ = "clinical_audit_events"
    __table_args__ = (
        Index("idx_clinical_audit_entity", "entity_type", "entity_id", "created_at"),
        Index("idx_clinical_audit_actor_created", "actor_id", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    actor_id: Mapped[str] = mapped_column(String(64), nullable=False)
    actor_role: Mapped[str] = mapped_column(String(50), nullable=False)

    action_type: Mapped[str] = mapped_column(String(50), nullable=False)  # ClinicalAuditAction
    entity_type: Mapped[str] = mapped_column(String(50), nullable=False)  # AuditEntityType
    entity_id: Mapped[str] = mapped_column(String(64), nullable=False)

    details: Mapped[dict | None] = mapped_column(JSONType, nullable=True)

    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
