"""Schemas for the theater day board."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from surgiflow.schemas.timeline import OperativeTimeline, TimelineDurations


class DayboardPatient(BaseModel):
    id: UUID
    full_name: str
    file_number: str | None
    has_allergies: bool


class DayboardSurgeon(BaseModel):
    id: UUID
    name: str


class DayboardBooking(BaseModel):
    id: UUID
    theater_name: str
    start_time: datetime
    end_time: datetime
    status: str


class DayboardReadiness(BaseModel):
    percentage: int
    checks: dict[str, bool]
    ready_for_surgery: bool


class DayboardBlockers(BaseModel):
    planning_missing_count: int
    plan_ready: bool
    consents_signed_count: int
    consents_total_count: int
    pre_op_photos_count: int


class SectionCompletion(BaseModel):
    total: int
    confirmed: int
    finalized: bool


class DayboardChecklist(BaseModel):
    sign_in_completed: bool
    time_out_completed: bool
    sign_out_completed: bool
    sections: dict[str, SectionCompletion]


class DayboardCase(BaseModel):
    id: UUID
    status: str
    urgency: str
    procedure_name: str | None
    side: str | None
    estimated_duration_minutes: int | None
    patient: DayboardPatient
    primary_surgeon: DayboardSurgeon
    booking: DayboardBooking
    readiness: DayboardReadiness
    blockers: DayboardBlockers
    checklist: DayboardChecklist
    has_procedure_record: bool
    timeline: OperativeTimeline
    durations: TimelineDurations


class DayboardTheater(BaseModel):
    id: UUID
    name: str
    type: str | None
    color_code: str | None
    cases: list[DayboardCase]


class DayboardSummary(BaseModel):
    total_cases: int
    scheduled: int
    in_prep: int
    in_theater: int
    recovery: int
    completed: int
    avg_or_time_minutes: int | None
    delayed_start_count: int
    utilization_by_theater: dict[str, int]


class DayboardResponse(BaseModel):
    date: str
    theaters: list[DayboardTheater]
    summary: DayboardSummary
