"""SQLAlchemy ORM models."""

from __future__ import annotations

from typing import TYPE_CHECKING

import uuid
from datetime import datetime

from sqlalchemy import ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from surgiflow.db.base import Base
from surgiflow.utils.datetime_utils import utcnow

if TYPE_CHECKING:
    from surgiflow.db.models import SurgicalCase


class SurgicalProcedureRecord(Base):
    """
    Intra-operative record of a case.

    Created on the first successful timeline write. Holds the six operative
    timestamps; the row is corrected in place, never deleted.
    """

    __tablename__ = "surgical_procedure_records"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    surgical_case_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("surgical_cases.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )

    pre_op_diagnosis: Mapped[str] = mapped_column(Text, nullable=False)
    urgency: Mapped[str] = mapped_column(String(20), nullable=False)

    # Operative timeline
    wheels_in: Mapped[datetime | None] = mapped_column(nullable=True)
    anesthesia_start: Mapped[datetime | None] = mapped_column(nullable=True)
    incision_time: Mapped[datetime | None] = mapped_column(nullable=True)
    closure_time: Mapped[datetime | None] = mapped_column(nullable=True)
    anesthesia_end: Mapped[datetime | None] = mapped_column(nullable=True)
    wheels_out: Mapped[datetime | None] = mapped_column(nullable=True)

    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow, nullable=False)

    surgical_case: Mapped["SurgicalCase"] = relationship(back_populates="procedure_record")
