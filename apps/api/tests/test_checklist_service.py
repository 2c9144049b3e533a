import uuid

import pytest

from surgiflow.core.checklist_definitions import (
    SIGN_IN_ITEMS,
    TIME_OUT_ITEMS,
    get_items_for_phase,
    get_missing_items,
    get_section_completion,
)
from surgiflow.db.enums import ChecklistPhase, ClinicalAuditAction, SurgicalCaseStatus as S
from surgiflow.db.models import ClinicalAuditEvent, SurgicalChecklist
from surgiflow.repositories import SurgicalChecklistRepository
from surgiflow.services.checklist_service import ChecklistService
from surgiflow.services.errors import (
    CaseNotFoundError,
    ChecklistIncompleteError,
    ChecklistPhaseFinalizedError,
)


def _items(*keys, confirmed=True):
    return [{"key": k, "label": k.replace("_", " ").title(), "confirmed": confirmed} for k in keys]


def _who_items(defs, **overrides):
    return [
        {"key": d.key, "label": d.label, "confirmed": overrides.get(d.key, True)} for d in defs
    ]


def test_status_without_checklist_row(db, make_case):
    case = make_case(status=S.SCHEDULED)

    status = ChecklistService(db).get_status(case.id)

    assert status["case_id"] == case.id
    assert set(status["phases"]) == {"SIGN_IN", "TIME_OUT", "SIGN_OUT"}
    for phase in status["phases"].values():
        assert phase == {
            "completed": False,
            "completed_at": None,
            "completed_by_user_id": None,
            "completed_by_role": None,
            "items": [],
        }
    assert db.query(SurgicalChecklist).count() == 0


def test_status_for_missing_case(db):
    with pytest.raises(CaseNotFoundError):
        ChecklistService(db).get_status(uuid.uuid4())


def test_complete_phase_records_actor_and_items(db, make_case):
    case = make_case(status=S.IN_PREP)
    items = _items("patient_identity", "site_marked")

    status = ChecklistService(db).complete_phase(
        case.id, ChecklistPhase.SIGN_IN, items, "user-7", "NURSE"
    )

    sign_in = status["phases"]["SIGN_IN"]
    assert sign_in["completed"] is True
    assert sign_in["completed_at"] is not None
    assert sign_in["completed_by_user_id"] == "user-7"
    assert sign_in["completed_by_role"] == "NURSE"
    assert sign_in["items"] == items
    assert status["phases"]["TIME_OUT"]["completed"] is False


def test_unconfirmed_item_blocks_completion(db, make_case):
    case = make_case(status=S.IN_PREP)
    items = _items("patient_identity") + _items("site_marked", "allergy_check", confirmed=False)

    with pytest.raises(ChecklistIncompleteError) as exc_info:
        ChecklistService(db).complete_phase(case.id, ChecklistPhase.SIGN_IN, items, "u", "NURSE")

    assert exc_info.value.unconfirmed_keys == ["site_marked", "allergy_check"]
    assert not SurgicalChecklistRepository(db).is_phase_completed(case.id, ChecklistPhase.SIGN_IN)


def test_completing_twice_keeps_first_completion(db, make_case):
    case = make_case(status=S.IN_PREP)
    service = ChecklistService(db)

    first = service.complete_phase(
        case.id, ChecklistPhase.SIGN_IN, _items("patient_identity"), "user-1", "NURSE"
    )
    second = service.complete_phase(
        case.id, ChecklistPhase.SIGN_IN, _items("site_marked"), "user-2", "SURGEON"
    )

    assert second["phases"]["SIGN_IN"]["completed_at"] == first["phases"]["SIGN_IN"]["completed_at"]
    assert second["phases"]["SIGN_IN"]["completed_by_user_id"] == "user-1"
    assert second["phases"]["SIGN_IN"]["items"] == _items("patient_identity")

    events = (
        db.query(ClinicalAuditEvent)
        .filter(ClinicalAuditEvent.action_type == ClinicalAuditAction.CHECKLIST_PHASE_COMPLETED.value)
        .order_by(ClinicalAuditEvent.created_at)
        .all()
    )
    assert [e.details["already_completed"] for e in events] == [False, True]
    assert events[0].details["phase"] == "SIGN_IN"
    assert events[0].details["item_count"] == 1
    assert events[0].entity_type == "SurgicalChecklist"


def test_phases_are_independent(db, make_case):
    case = make_case(status=S.IN_THEATER)
    service = ChecklistService(db)

    service.complete_phase(case.id, ChecklistPhase.TIME_OUT, _items("team_intro"), "u", "NURSE")
    status = service.get_status(case.id)

    assert status["phases"]["TIME_OUT"]["completed"] is True
    assert status["phases"]["SIGN_IN"]["completed"] is False
    assert status["phases"]["SIGN_OUT"]["completed"] is False


def test_draft_saves_partial_confirmations(db, make_case):
    case = make_case(status=S.IN_PREP)
    items = _items("patient_identity") + _items("site_marked", confirmed=False)

    status = ChecklistService(db).save_draft(case.id, ChecklistPhase.SIGN_IN, items, "u", "NURSE")

    assert status["phases"]["SIGN_IN"]["completed"] is False
    assert status["phases"]["SIGN_IN"]["items"] == items
    event = (
        db.query(ClinicalAuditEvent)
        .filter(ClinicalAuditEvent.action_type == ClinicalAuditAction.CHECKLIST_DRAFT_SAVED.value)
        .one()
    )
    assert event.details["confirmed_count"] == 1


def test_draft_rejected_after_finalization(db, make_case):
    case = make_case(status=S.IN_PREP)
    service = ChecklistService(db)
    service.complete_phase(case.id, ChecklistPhase.SIGN_IN, _items("patient_identity"), "u", "NURSE")

    with pytest.raises(ChecklistPhaseFinalizedError):
        service.save_draft(case.id, ChecklistPhase.SIGN_IN, _items("site_marked"), "u", "NURSE")

    status = service.get_status(case.id)
    assert status["phases"]["SIGN_IN"]["items"] == _items("patient_identity")


def test_finalize_requires_every_who_item(db, make_case):
    case = make_case(status=S.IN_PREP)
    items = _who_items(TIME_OUT_ITEMS, antibiotic_prophylaxis=False)[:-1]

    with pytest.raises(ChecklistIncompleteError) as exc_info:
        ChecklistService(db).finalize_phase(case.id, ChecklistPhase.TIME_OUT, items, "u", "NURSE")

    assert exc_info.value.unconfirmed_keys == ["antibiotic_prophylaxis", "equipment_sterile"]


def test_finalize_with_full_who_set(db, make_case):
    case = make_case(status=S.IN_PREP)

    status = ChecklistService(db).finalize_phase(
        case.id, ChecklistPhase.SIGN_IN, _who_items(SIGN_IN_ITEMS), "u", "ANESTHETIST"
    )

    assert status["phases"]["SIGN_IN"]["completed"] is True
    assert len(status["phases"]["SIGN_IN"]["items"]) == len(SIGN_IN_ITEMS)


def test_complete_accepts_pydantic_items(db, make_case):
    from surgiflow.schemas.checklist import ChecklistItemConfirmation

    case = make_case(status=S.IN_PREP)
    items = [ChecklistItemConfirmation(key="patient_identity", label="Identity", confirmed=True)]

    status = ChecklistService(db).complete_phase(case.id, ChecklistPhase.SIGN_IN, items, "u", "NURSE")

    assert status["phases"]["SIGN_IN"]["items"] == [
        {"key": "patient_identity", "label": "Identity", "confirmed": True}
    ]


def test_missing_items_helpers():
    assert get_missing_items(ChecklistPhase.SIGN_IN, None) == [d.label for d in SIGN_IN_ITEMS]

    saved = _who_items(SIGN_IN_ITEMS, pulse_oximeter=False)
    assert get_missing_items(ChecklistPhase.SIGN_IN, saved) == [
        "Pulse oximeter on patient and functioning"
    ]
    assert get_section_completion(ChecklistPhase.SIGN_IN, saved, False) == {
        "total": 8,
        "confirmed": 7,
        "finalized": False,
    }


def test_phase_item_lookup():
    assert get_items_for_phase(ChecklistPhase.SIGN_IN) == SIGN_IN_ITEMS
    assert get_items_for_phase(ChecklistPhase.TIME_OUT) == TIME_OUT_ITEMS
    assert [d.key for d in get_items_for_phase(ChecklistPhase.SIGN_OUT)][0] == "procedure_recorded"
