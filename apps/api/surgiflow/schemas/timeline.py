"""Schemas for the operative timeline."""

from datetime import datetime
from uuid import UUID

from pydantic import AwareDatetime, BaseModel, ConfigDict


class TimelinePatch(BaseModel):
    """Partial update; omitted fields are untouched, explicit null clears."""

    model_config = ConfigDict(extra="forbid")

    wheels_in: AwareDatetime | None = None
    anesthesia_start: AwareDatetime | None = None
    incision_time: AwareDatetime | None = None
    closure_time: AwareDatetime | None = None
    anesthesia_end: AwareDatetime | None = None
    wheels_out: AwareDatetime | None = None


class OperativeTimeline(BaseModel):
    wheels_in: datetime | None = None
    anesthesia_start: datetime | None = None
    incision_time: datetime | None = None
    closure_time: datetime | None = None
    anesthesia_end: datetime | None = None
    wheels_out: datetime | None = None


class TimelineDurations(BaseModel):
    or_time_minutes: int | None = None
    surgery_time_minutes: int | None = None
    prep_time_minutes: int | None = None
    close_out_time_minutes: int | None = None
    anesthesia_time_minutes: int | None = None


class TimelineResponse(BaseModel):
    case_id: UUID
    case_status: str
    timeline: OperativeTimeline
    durations: TimelineDurations
    missing_items: list[str]
