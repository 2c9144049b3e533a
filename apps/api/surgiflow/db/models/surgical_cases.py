"""SQLAlchemy ORM models."""

from __future__ import annotations

from typing import TYPE_CHECKING

import uuid
from datetime import datetime

from sqlalchemy import (
    Boolean,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from surgiflow.db.base import Base
from surgiflow.db.enums import (
    ConsentStatus,
    ImageTimepoint,
    SurgicalCaseStatus,
    SurgicalUrgency,
)
from surgiflow.utils.datetime_utils import utcnow

if TYPE_CHECKING:
    from surgiflow.db.models import (
        Patient,
        SurgicalChecklist,
        SurgicalProcedureRecord,
        TheaterBooking,
        User,
    )


class SurgicalCase(Base):
    """
    A surgical case from planning through discharge.

    `status` is mutated only through the case state machine. `version` is the
    optimistic concurrency counter: a write from a stale read fails instead of
    silently overwriting a concurrent transition.
    """

    __tablename__ = "surgical_cases"
    __table_args__ = (
        Index("idx_surgical_cases_status", "status"),
        Index("idx_surgical_cases_patient", "patient_id"),
        Index("idx_surgical_cases_surgeon", "primary_surgeon_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    patient_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("patients.id", ondelete="RESTRICT"), nullable=False
    )
    primary_surgeon_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False
    )

    status: Mapped[str] = mapped_column(
        String(32), nullable=False, default=SurgicalCaseStatus.DRAFT.value
    )
    urgency: Mapped[str] = mapped_column(
        String(20), nullable=False, default=SurgicalUrgency.ELECTIVE.value
    )
    diagnosis: Mapped[str | None] = mapped_column(Text, nullable=True)
    procedure_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    side: Mapped[str | None] = mapped_column(String(20), nullable=True)  # LEFT / RIGHT / BILATERAL

    version: Mapped[int] = mapped_column(Integer, nullable=False)

    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    # Relationships
    patient: Mapped["Patient"] = relationship()
    primary_surgeon: Mapped["User"] = relationship()
    case_plan: Mapped["CasePlan | None"] = relationship(
        back_populates="surgical_case", uselist=False
    )
    checklist: Mapped["SurgicalChecklist | None"] = relationship(
        back_populates="surgical_case", uselist=False
    )
    procedure_record: Mapped["SurgicalProcedureRecord | None"] = relationship(
        back_populates="surgical_case", uselist=False
    )
    bookings: Mapped[list["TheaterBooking"]] = relationship(back_populates="surgical_case")


class CasePlan(Base):
    """
    Surgeon's documented plan for a case.

    Read-only for the workflow engine except for the readiness check that gates
    PLANNING → READY_FOR_SCHEDULING.
    """

    __tablename__ = "case_plans"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    surgical_case_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("surgical_cases.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )

    procedure_plan: Mapped[str | None] = mapped_column(Text, nullable=True)
    risk_factors: Mapped[str | None] = mapped_column(Text, nullable=True)
    pre_op_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    planned_anesthesia: Mapped[str | None] = mapped_column(String(100), nullable=True)
    estimated_duration_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    ready_for_surgery: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    surgical_case: Mapped["SurgicalCase"] = relationship(back_populates="case_plan")
    consents: Mapped[list["CaseConsent"]] = relationship(
        back_populates="case_plan", cascade="all, delete-orphan"
    )
    images: Mapped[list["CaseImage"]] = relationship(
        back_populates="case_plan", cascade="all, delete-orphan"
    )


class CaseConsent(Base):
    """Consent form attached to a case plan."""

    __tablename__ = "case_consents"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    case_plan_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("case_plans.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ConsentStatus.PENDING.value
    )
    signed_at: Mapped[datetime | None] = mapped_column(nullable=True)

    case_plan: Mapped["CasePlan"] = relationship(back_populates="consents")


class CaseImage(Base):
    """Clinical photo attached to a case plan."""

    __tablename__ = "case_images"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    case_plan_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("case_plans.id", ondelete="CASCADE"), nullable=False
    )
    timepoint: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ImageTimepoint.PRE_OP.value
    )
    file_url: Mapped[str] = mapped_column(String(1024), nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)

    case_plan: Mapped["CasePlan"] = relationship(back_populates="images")
