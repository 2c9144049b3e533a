import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError

from surgiflow.core.structured_logging import build_log_context
from surgiflow.db.enums import AuditEntityType, ClinicalAuditAction, SurgicalCaseStatus
from surgiflow.db.models import ClinicalAuditEvent
from surgiflow.repositories import AuditRepository
from surgiflow.services import audit_service


def test_log_event_serializes_details(db):
    case_id = uuid.uuid4()
    at = datetime(2026, 3, 2, 8, 0, tzinfo=timezone.utc)

    event = audit_service.log_event(
        db,
        actor_id="user-1",
        actor_role="NURSE",
        action_type=ClinicalAuditAction.CASE_TRANSITION,
        entity_type=AuditEntityType.SURGICAL_CASE,
        entity_id=case_id,
        details={"new_status": SurgicalCaseStatus.IN_PREP, "at": at, "case_id": case_id},
    )
    db.commit()

    stored = db.query(ClinicalAuditEvent).filter(ClinicalAuditEvent.id == event.id).one()
    assert stored.entity_id == str(case_id)
    assert stored.entity_type == "SurgicalCase"
    assert stored.action_type == "CASE_TRANSITION"
    assert stored.details == {
        "new_status": "IN_PREP",
        "at": "2026-03-02T08:00:00+00:00",
        "case_id": str(case_id),
    }
    assert stored.created_at.tzinfo is not None


def test_failed_write_is_logged_not_raised(db, monkeypatch, caplog):
    def broken_record(self, **kwargs):
        raise SQLAlchemyError("disk full")

    monkeypatch.setattr(AuditRepository, "record", broken_record)
    case_id = uuid.uuid4()

    with caplog.at_level(logging.ERROR, logger="surgiflow.services.audit_service"):
        result = audit_service.log_event(
            db,
            actor_id="user-1",
            actor_role="NURSE",
            action_type=ClinicalAuditAction.TIMELINE_UPDATED,
            entity_type=AuditEntityType.PROCEDURE_RECORD,
            entity_id=uuid.uuid4(),
            case_id=case_id,
        )

    assert result is None
    record = next(r for r in caplog.records if r.getMessage() == "Clinical audit write failed")
    assert record.case_id == str(case_id)
    assert record.action == "TIMELINE_UPDATED"
    assert record.exc_info is not None


def test_build_log_context_omits_empty_fields():
    assert build_log_context(case_id="c1", actor_role="NURSE") == {
        "case_id": "c1",
        "actor_role": "NURSE",
    }
    assert build_log_context() == {}
