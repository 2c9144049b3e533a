from datetime import date, datetime, timedelta, timezone

from surgiflow.db.enums import ChecklistPhase, SurgicalCaseStatus as S, TheaterBookingStatus
from surgiflow.db.models import SurgicalProcedureRecord
from surgiflow.repositories import SurgicalChecklistRepository
from surgiflow.services.dayboard_service import DayboardService, readiness_percentage

DAY = date(2026, 3, 2)


def _at(hour: int, minute: int = 0) -> datetime:
    return datetime(DAY.year, DAY.month, DAY.day, hour, minute, tzinfo=timezone.utc)


def _record(db, case, **timestamps) -> SurgicalProcedureRecord:
    record = SurgicalProcedureRecord(
        surgical_case_id=case.id,
        pre_op_diagnosis="Test diagnosis",
        urgency="ELECTIVE",
        **timestamps,
    )
    db.add(record)
    db.commit()
    return record


def test_summary_metrics(db, make_case, make_theater, make_booking):
    theater_a = make_theater("Theater A")
    theater_b = make_theater("Theater B")

    on_time = make_case(status=S.COMPLETED)
    make_booking(theater_a, on_time, _at(8))
    _record(db, on_time, wheels_in=_at(8, 10), wheels_out=_at(9, 10))

    late = make_case(status=S.RECOVERY)
    make_booking(theater_a, late, _at(10))
    _record(db, late, wheels_in=_at(10, 11), wheels_out=_at(11, 51))

    running = make_case(status=S.IN_THEATER)
    make_booking(theater_b, running, _at(9))
    _record(db, running, wheels_in=_at(9, 5))

    board = DayboardService(db).get_board(DAY)
    summary = board["summary"]

    assert summary["total_cases"] == 3
    assert summary["completed"] == 1
    assert summary["recovery"] == 1
    assert summary["in_theater"] == 1
    assert summary["scheduled"] == 0
    assert summary["avg_or_time_minutes"] == 80
    # exactly 10 minutes late is on time; 11 minutes is delayed
    assert summary["delayed_start_count"] == 1
    assert summary["utilization_by_theater"] == {str(theater_a.id): 160}


def test_no_completed_cases_gives_null_average(db, make_case, make_theater, make_booking):
    theater = make_theater()
    make_booking(theater, make_case(status=S.SCHEDULED), _at(8))

    summary = DayboardService(db).get_board(DAY)["summary"]

    assert summary["scheduled"] == 1
    assert summary["avg_or_time_minutes"] is None
    assert summary["utilization_by_theater"] == {}
    assert summary["delayed_start_count"] == 0


def test_theaters_sorted_and_listed_when_empty(db, make_case, make_theater, make_booking):
    make_theater("Theater C")
    make_theater("Theater A")
    make_theater("Closed Theater", is_active=False)

    board = DayboardService(db).get_board(DAY)

    assert [t["name"] for t in board["theaters"]] == ["Theater A", "Theater C"]
    assert all(t["cases"] == [] for t in board["theaters"])
    assert board["summary"]["total_cases"] == 0
    assert board["date"] == "2026-03-02"


def test_bookings_filtered_by_day_and_status(db, make_case, make_theater, make_booking):
    theater = make_theater()
    second = make_case(status=S.SCHEDULED)
    first = make_case(status=S.SCHEDULED)
    make_booking(theater, second, _at(13))
    make_booking(theater, first, _at(7, 30))
    make_booking(theater, make_case(status=S.SCHEDULED), _at(9), status=TheaterBookingStatus.CANCELLED)
    make_booking(theater, make_case(status=S.SCHEDULED), _at(8) + timedelta(days=1))
    make_booking(theater, make_case(status=S.SCHEDULED), _at(23, 59) - timedelta(days=1))

    cases = DayboardService(db).get_board(DAY)["theaters"][0]["cases"]

    assert [c["id"] for c in cases] == [first.id, second.id]


def test_theater_filter(db, make_case, make_theater, make_booking):
    theater_a = make_theater("Theater A")
    theater_b = make_theater("Theater B")
    make_booking(theater_a, make_case(status=S.SCHEDULED), _at(8))
    make_booking(theater_b, make_case(status=S.SCHEDULED), _at(8))

    board = DayboardService(db).get_board(DAY, theater_id=theater_b.id)

    assert [t["id"] for t in board["theaters"]] == [theater_b.id]
    assert board["summary"]["total_cases"] == 1


def test_clinic_timezone_defines_the_day(db, make_case, make_theater, make_booking, monkeypatch):
    from surgiflow.core.config import settings

    monkeypatch.setattr(settings, "CLINIC_TIMEZONE", "Africa/Nairobi")  # UTC+3
    theater = make_theater()
    case = make_case(status=S.SCHEDULED)
    # 22:00 UTC on the previous day is 01:00 local on DAY
    make_booking(theater, case, _at(22) - timedelta(days=1))

    cases = DayboardService(db).get_board(DAY)["theaters"][0]["cases"]

    assert [c["id"] for c in cases] == [case.id]


def test_case_card_readiness(db, make_case, make_plan, make_theater, make_booking):
    theater = make_theater()
    case = make_case(status=S.SCHEDULED)
    make_plan(case, pre_op_notes=None, images=1, signed_consents=1, unsigned_consents=1)
    make_booking(theater, case, _at(8))
    SurgicalChecklistRepository(db).complete_phase(
        case.id, ChecklistPhase.SIGN_IN, [{"key": "k", "label": "K", "confirmed": True}], "u", "NURSE"
    )
    db.commit()

    card = DayboardService(db).get_board(DAY)["theaters"][0]["cases"][0]

    assert card["readiness"]["percentage"] == 80
    assert card["readiness"]["checks"]["pre_op_notes"] is False
    assert card["blockers"]["consents_signed_count"] == 1
    assert card["blockers"]["consents_total_count"] == 2
    assert card["blockers"]["pre_op_photos_count"] == 1
    # planned anesthesia is not set on the plan
    assert card["blockers"]["planning_missing_count"] == 1
    assert card["checklist"]["sign_in_completed"] is True
    assert card["checklist"]["time_out_completed"] is False
    assert card["patient"]["full_name"] == "Ada Okafor"
    assert card["patient"]["has_allergies"] is True
    assert card["primary_surgeon"]["name"] == "Dr. Test Surgeon"
    assert card["has_procedure_record"] is False
    assert card["timeline"]["wheels_in"] is None


def test_case_without_plan_has_zero_readiness(db, make_case, make_theater, make_booking):
    theater = make_theater()
    make_booking(theater, make_case(status=S.SCHEDULED), _at(8))

    card = DayboardService(db).get_board(DAY)["theaters"][0]["cases"][0]

    assert card["readiness"]["percentage"] == 0
    assert card["readiness"]["ready_for_surgery"] is False


def test_readiness_percentage_rounding():
    assert readiness_percentage({"a": True, "b": False, "c": False}) == 33
    assert readiness_percentage({"a": True, "b": True, "c": False}) == 67
    assert readiness_percentage({}) == 0
