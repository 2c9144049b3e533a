"""Schemas for surgical case transitions."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from surgiflow.db.enums import SurgicalCaseStatus


class TransitionRequest(BaseModel):
    action: str = Field(..., min_length=1, max_length=32)
    reason: str | None = Field(None, max_length=500)


class TransitionResponse(BaseModel):
    case_id: UUID
    previous_status: SurgicalCaseStatus
    new_status: SurgicalCaseStatus
    transitioned_at: datetime
    transitioned_by: str

    model_config = {"from_attributes": True}
