"""SQLAlchemy ORM models."""

from __future__ import annotations

from typing import TYPE_CHECKING

import uuid
from datetime import datetime

from sqlalchemy import ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from surgiflow.db.base import Base
from surgiflow.db.types import JSONType
from surgiflow.utils.datetime_utils import utcnow

if TYPE_CHECKING:
    from surgiflow.db.models import SurgicalCase


class SurgicalChecklist(Base):
    """
    WHO Surgical Safety Checklist for one case.

    Each phase (sign-in, time-out, sign-out) has its own completion columns.
    Once `<phase>_completed_at` is set the phase is finalized and its items
    and actor columns are never rewritten.
    """

    __tablename__ = "surgical_checklists"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    surgical_case_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("surgical_cases.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )

    # Sign-in (before induction of anaesthesia)
    sign_in_completed_at: Mapped[datetime | None] = mapped_column(nullable=True)
    sign_in_by_user_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    sign_in_by_role: Mapped[str | None] = mapped_column(String(50), nullable=True)
    sign_in_items: Mapped[list | None] = mapped_column(JSONType, nullable=True)

    # Time-out (before skin incision)
    time_out_completed_at: Mapped[datetime | None] = mapped_column(nullable=True)
    time_out_by_user_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    time_out_by_role: Mapped[str | None] = mapped_column(String(50), nullable=True)
    time_out_items: Mapped[list | None] = mapped_column(JSONType, nullable=True)

    # Sign-out (before patient leaves the operating room)
    sign_out_completed_at: Mapped[datetime | None] = mapped_column(nullable=True)
    sign_out_by_user_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    sign_out_by_role: Mapped[str | None] = mapped_column(String(50), nullable=True)
    sign_out_items: Mapped[list | None] = mapped_column(JSONType, nullable=True)

    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow, nullable=False)

    surgical_case: Mapped["SurgicalCase"] = relationship(back_populates="checklist")
