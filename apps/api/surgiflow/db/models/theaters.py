"""SQLAlchemy ORM models."""

from __future__ import annotations

from typing import TYPE_CHECKING

import uuid
from datetime import datetime

from sqlalchemy import Boolean, ForeignKey, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from surgiflow.db.base import Base
from surgiflow.db.enums import TheaterBookingStatus
from surgiflow.utils.datetime_utils import utcnow

if TYPE_CHECKING:
    from surgiflow.db.models import SurgicalCase


class Theater(Base):
    """Operating theater (room) shown on the day board."""

    __tablename__ = "theaters"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    color_code: Mapped[str | None] = mapped_column(String(20), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)

    bookings: Mapped[list["TheaterBooking"]] = relationship(back_populates="theater")


class TheaterBooking(Base):
    """
    Room reservation for a surgical case.

    Bookings are made by the scheduling system; the workflow engine only reads
    them.
    """

    __tablename__ = "theater_bookings"
    __table_args__ = (
        Index("idx_theater_bookings_theater_start", "theater_id", "start_time"),
        Index("idx_theater_bookings_case", "surgical_case_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    theater_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("theaters.id", ondelete="CASCADE"), nullable=False
    )
    surgical_case_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("surgical_cases.id", ondelete="CASCADE"), nullable=False
    )
    start_time: Mapped[datetime] = mapped_column(nullable=False)
    end_time: Mapped[datetime] = mapped_column(nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=TheaterBookingStatus.PROVISIONAL.value
    )

    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)

    theater: Mapped["Theater"] = relationship(back_populates="bookings")
    surgical_case: Mapped["SurgicalCase"] = relationship(back_populates="bookings")
