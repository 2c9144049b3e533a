"""Schemas for the WHO surgical safety checklist."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from surgiflow.db.enums import ChecklistPhase


class ChecklistItemConfirmation(BaseModel):
    key: str = Field(..., min_length=1, max_length=100)
    label: str = Field(..., min_length=1, max_length=255)
    confirmed: bool
    note: str | None = Field(None, max_length=500)


class ChecklistPhaseRequest(BaseModel):
    phase: ChecklistPhase
    items: list[ChecklistItemConfirmation] = Field(..., min_length=1)


class ChecklistPhaseStatus(BaseModel):
    completed: bool
    completed_at: datetime | None = None
    completed_by_user_id: str | None = None
    completed_by_role: str | None = None
    items: list[ChecklistItemConfirmation] = []


class ChecklistStatusResponse(BaseModel):
    case_id: UUID
    phases: dict[ChecklistPhase, ChecklistPhaseStatus]
