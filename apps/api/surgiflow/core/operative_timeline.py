"""
Operative timeline rules.

Canonical chronological order:
    wheels_in → anesthesia_start → incision_time → closure_time
    → anesthesia_end → wheels_out

All timestamps are optional. A partial timeline is valid as long as the
populated values are strictly increasing in canonical order and none lies
beyond the future buffer. Newly written values must also fall inside the
past limit; values already on record are not re-checked against it.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Iterable, Mapping

from surgiflow.db.enums import SurgicalCaseStatus
from surgiflow.services.errors import TimelineValidationFailedError
from surgiflow.utils.datetime_utils import ensure_utc, minutes_between, utcnow

TIMELINE_FIELD_ORDER: tuple[str, ...] = (
    "wheels_in",
    "anesthesia_start",
    "incision_time",
    "closure_time",
    "anesthesia_end",
    "wheels_out",
)

TIMELINE_FIELD_LABELS: dict[str, str] = {
    "wheels_in": "Wheels In",
    "anesthesia_start": "Anesthesia Start",
    "incision_time": "Incision",
    "closure_time": "Closure",
    "anesthesia_end": "Anesthesia End",
    "wheels_out": "Wheels Out",
}

DEFAULT_FUTURE_BUFFER_MINUTES = 5
DEFAULT_PAST_LIMIT_HOURS = 48

# Fields expected to be recorded once a case reaches a status
_IN_THEATER_REQUIRED = ("wheels_in", "anesthesia_start", "incision_time")
REQUIRED_FIELDS_BY_STATUS: dict[SurgicalCaseStatus, tuple[str, ...]] = {
    SurgicalCaseStatus.IN_THEATER: _IN_THEATER_REQUIRED,
    SurgicalCaseStatus.RECOVERY: TIMELINE_FIELD_ORDER,
    SurgicalCaseStatus.COMPLETED: TIMELINE_FIELD_ORDER,
}


@dataclass(frozen=True)
class TimelineViolation:
    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


def empty_timeline() -> dict[str, datetime | None]:
    return {field: None for field in TIMELINE_FIELD_ORDER}


def timeline_from_record(record: Any | None) -> dict[str, datetime | None]:
    """Read the six timestamps off a procedure record (all None without one)."""
    if record is None:
        return empty_timeline()
    return {field: getattr(record, field) for field in TIMELINE_FIELD_ORDER}


def apply_patch(
    current: Mapping[str, datetime | None], patch: Mapping[str, datetime | None]
) -> dict[str, datetime | None]:
    """Overlay patch fields on the current timeline; an explicit None clears a field."""
    unknown = [field for field in patch if field not in TIMELINE_FIELD_LABELS]
    if unknown:
        raise TimelineValidationFailedError(
            [{"field": field, "message": f"Unknown timeline field: {field}"} for field in unknown]
        )

    proposed = dict(current)
    for field, value in patch.items():
        proposed[field] = ensure_utc(value) if value is not None else None
    return proposed


def validate_timeline(
    timeline: Mapping[str, datetime | None],
    *,
    now: datetime | None = None,
    future_buffer_minutes: int = DEFAULT_FUTURE_BUFFER_MINUTES,
) -> list[TimelineViolation]:
    """Return every ordering or future-timestamp violation (empty when valid)."""
    violations: list[TimelineViolation] = []
    future_limit = (now or utcnow()) + timedelta(minutes=future_buffer_minutes)

    for field in TIMELINE_FIELD_ORDER:
        value = timeline.get(field)
        if value is not None and ensure_utc(value) > future_limit:
            violations.append(
                TimelineViolation(field, f"{TIMELINE_FIELD_LABELS[field]} cannot be in the future")
            )

    previous_field: str | None = None
    for field in TIMELINE_FIELD_ORDER:
        value = timeline.get(field)
        if value is None:
            continue
        if previous_field is not None:
            previous = timeline[previous_field]
            if ensure_utc(previous) >= ensure_utc(value):
                violations.append(
                    TimelineViolation(
                        field,
                        f"{TIMELINE_FIELD_LABELS[field]} must be after "
                        f"{TIMELINE_FIELD_LABELS[previous_field]}",
                    )
                )
        previous_field = field

    return violations


def validate_recency(
    timeline: Mapping[str, datetime | None],
    fields: Iterable[str],
    *,
    now: datetime | None = None,
    past_limit_hours: int = DEFAULT_PAST_LIMIT_HOURS,
) -> list[TimelineViolation]:
    """Flag written values older than the past limit (likely a wrong date).

    A limit of 0 disables the check.
    """
    if past_limit_hours <= 0:
        return []
    past_limit = (now or utcnow()) - timedelta(hours=past_limit_hours)
    violations: list[TimelineViolation] = []
    for field in TIMELINE_FIELD_ORDER:
        if field not in fields:
            continue
        value = timeline.get(field)
        if value is not None and ensure_utc(value) < past_limit:
            violations.append(
                TimelineViolation(
                    field,
                    f"{TIMELINE_FIELD_LABELS[field]} is more than {past_limit_hours} hours "
                    "in the past; possible date error",
                )
            )
    return violations


def _span(start: datetime | None, end: datetime | None) -> int | None:
    if start is None or end is None:
        return None
    return minutes_between(start, end)


def compute_durations(timeline: Mapping[str, datetime | None]) -> dict[str, int | None]:
    """Derived durations in whole minutes (None when an endpoint is missing)."""
    return {
        "or_time_minutes": _span(timeline.get("wheels_in"), timeline.get("wheels_out")),
        "surgery_time_minutes": _span(timeline.get("incision_time"), timeline.get("closure_time")),
        "prep_time_minutes": _span(timeline.get("wheels_in"), timeline.get("incision_time")),
        "close_out_time_minutes": _span(timeline.get("closure_time"), timeline.get("wheels_out")),
        "anesthesia_time_minutes": _span(
            timeline.get("anesthesia_start"), timeline.get("anesthesia_end")
        ),
    }


def get_missing_fields(
    status: str | SurgicalCaseStatus, timeline: Mapping[str, datetime | None]
) -> list[str]:
    """Fields that should be recorded for the case status but are still null."""
    try:
        required = REQUIRED_FIELDS_BY_STATUS.get(SurgicalCaseStatus(status), ())
    except ValueError:
        return []
    return [field for field in required if timeline.get(field) is None]
