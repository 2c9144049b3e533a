"""Day board service - per-theater view of one operating day."""

from datetime import date
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from surgiflow.core.config import settings
from surgiflow.core.operative_timeline import compute_durations, timeline_from_record
from surgiflow.db.enums import ConsentStatus, ImageTimepoint, SurgicalCaseStatus, TheaterBookingStatus
from surgiflow.db.models import CasePlan, SurgicalCase, Theater, TheaterBooking
from surgiflow.services.case_plan_readiness import get_readiness_checks
from surgiflow.services.checklist_service import build_section_completion
from surgiflow.utils.datetime_utils import day_window, minutes_between, round_half_up

SUMMARY_STATUS_KEYS: dict[SurgicalCaseStatus, str] = {
    SurgicalCaseStatus.SCHEDULED: "scheduled",
    SurgicalCaseStatus.IN_PREP: "in_prep",
    SurgicalCaseStatus.IN_THEATER: "in_theater",
    SurgicalCaseStatus.RECOVERY: "recovery",
    SurgicalCaseStatus.COMPLETED: "completed",
}


def readiness_percentage(checks: dict[str, bool]) -> int:
    if not checks:
        return 0
    return round_half_up(sum(1 for ok in checks.values() if ok) / len(checks) * 100)


def _planning_blockers(plan: CasePlan | None) -> dict[str, Any]:
    if plan is None:
        return {
            "planning_missing_count": 5,
            "plan_ready": False,
            "consents_signed_count": 0,
            "consents_total_count": 0,
            "pre_op_photos_count": 0,
        }
    pre_op_photos = [i for i in plan.images if i.timepoint == ImageTimepoint.PRE_OP.value]
    signed = [c for c in plan.consents if c.status == ConsentStatus.SIGNED.value]
    missing = sum(
        1
        for present in (
            (plan.procedure_plan or "").strip(),
            (plan.risk_factors or "").strip(),
            (plan.planned_anesthesia or "").strip(),
            pre_op_photos,
            signed,
        )
        if not present
    )
    return {
        "planning_missing_count": missing,
        "plan_ready": plan.ready_for_surgery,
        "consents_signed_count": len(signed),
        "consents_total_count": len(plan.consents),
        "pre_op_photos_count": len(pre_op_photos),
    }


def build_case_card(booking: TheaterBooking) -> dict[str, Any]:
    case = booking.surgical_case
    plan = case.case_plan
    checklist = case.checklist
    record = case.procedure_record
    checks = get_readiness_checks(plan)
    timeline = timeline_from_record(record)

    return {
        "id": case.id,
        "status": case.status,
        "urgency": case.urgency,
        "procedure_name": case.procedure_name,
        "side": case.side,
        "estimated_duration_minutes": plan.estimated_duration_minutes if plan else None,
        "patient": {
            "id": case.patient.id,
            "full_name": case.patient.full_name,
            "file_number": case.patient.file_number,
            "has_allergies": bool((case.patient.allergies or "").strip()),
        },
        "primary_surgeon": {
            "id": case.primary_surgeon.id,
            "name": case.primary_surgeon.display_name,
        },
        "booking": {
            "id": booking.id,
            "theater_name": booking.theater.name,
            "start_time": booking.start_time,
            "end_time": booking.end_time,
            "status": booking.status,
        },
        "readiness": {
            "percentage": readiness_percentage(checks),
            "checks": checks,
            "ready_for_surgery": plan.ready_for_surgery if plan else False,
        },
        "blockers": _planning_blockers(plan),
        "checklist": {
            "sign_in_completed": bool(checklist and checklist.sign_in_completed_at),
            "time_out_completed": bool(checklist and checklist.time_out_completed_at),
            "sign_out_completed": bool(checklist and checklist.sign_out_completed_at),
            "sections": build_section_completion(checklist),
        },
        "has_procedure_record": record is not None,
        "timeline": timeline,
        "durations": compute_durations(timeline),
    }


def build_summary(theaters: list[dict[str, Any]]) -> dict[str, Any]:
    """Board metrics over every case on the board."""
    all_cases = [c for t in theaters for c in t["cases"]]
    summary: dict[str, Any] = {"total_cases": len(all_cases)}
    for status, key in SUMMARY_STATUS_KEYS.items():
        summary[key] = sum(1 for c in all_cases if c["status"] == status.value)

    threshold = settings.DELAYED_START_THRESHOLD_MINUTES
    or_times: list[int] = []
    delayed = 0
    utilization: dict[str, int] = {}

    for theater in theaters:
        theater_minutes: int | None = None
        for card in theater["cases"]:
            wheels_in = card["timeline"]["wheels_in"]
            wheels_out = card["timeline"]["wheels_out"]
            if wheels_in and wheels_out:
                or_minutes = minutes_between(wheels_in, wheels_out)
                or_times.append(or_minutes)
                theater_minutes = (theater_minutes or 0) + or_minutes
            if wheels_in:
                late_by = (wheels_in - card["booking"]["start_time"]).total_seconds() / 60
                if late_by > threshold:
                    delayed += 1
        if theater_minutes is not None:
            utilization[str(theater["id"])] = theater_minutes

    summary["avg_or_time_minutes"] = (
        round_half_up(sum(or_times) / len(or_times)) if or_times else None
    )
    summary["delayed_start_count"] = delayed
    summary["utilization_by_theater"] = utilization
    return summary


class DayboardService:
    """Read-only aggregation of bookings, cases and timelines for one date."""

    def __init__(self, db: Session):
        self.db = db

    def _load_theaters(self, theater_id: UUID | None) -> list[Theater]:
        query = select(Theater).where(Theater.is_active.is_(True))
        if theater_id:
            query = query.where(Theater.id == theater_id)
        return list(self.db.execute(query.order_by(Theater.name)).scalars().all())

    def _load_bookings(self, theater_ids: list[UUID], day: date) -> list[TheaterBooking]:
        if not theater_ids:
            return []
        start, end = day_window(day, settings.CLINIC_TIMEZONE)
        query = (
            select(TheaterBooking)
            .where(
                TheaterBooking.theater_id.in_(theater_ids),
                TheaterBooking.status != TheaterBookingStatus.CANCELLED.value,
                TheaterBooking.start_time >= start,
                TheaterBooking.start_time < end,
            )
            .options(
                selectinload(TheaterBooking.theater),
                selectinload(TheaterBooking.surgical_case).options(
                    selectinload(SurgicalCase.patient),
                    selectinload(SurgicalCase.primary_surgeon),
                    selectinload(SurgicalCase.checklist),
                    selectinload(SurgicalCase.procedure_record),
                    selectinload(SurgicalCase.case_plan).options(
                        selectinload(CasePlan.consents),
                        selectinload(CasePlan.images),
                    ),
                ),
            )
            .order_by(TheaterBooking.start_time)
        )
        return list(self.db.execute(query).scalars().all())

    def get_board(self, day: date, theater_id: UUID | None = None) -> dict[str, Any]:
        """
        Build the board for `day` (local date in the clinic timezone).

        Every active theater is listed, including ones with no bookings.
        """
        theaters = self._load_theaters(theater_id)
        bookings = self._load_bookings([t.id for t in theaters], day)

        cards_by_theater: dict[UUID, list[dict[str, Any]]] = {t.id: [] for t in theaters}
        for booking in bookings:
            cards_by_theater[booking.theater_id].append(build_case_card(booking))

        theater_rows = [
            {
                "id": t.id,
                "name": t.name,
                "type": t.type,
                "color_code": t.color_code,
                "cases": cards_by_theater[t.id],
            }
            for t in theaters
        ]
        return {
            "date": day.isoformat(),
            "theaters": theater_rows,
            "summary": build_summary(theater_rows),
        }
