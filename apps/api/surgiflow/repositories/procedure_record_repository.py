"""Procedure record repository."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from surgiflow.db.models import SurgicalCase, SurgicalProcedureRecord

DEFAULT_PRE_OP_DIAGNOSIS = "See case plan"


class ProcedureRecordRepository:
    def __init__(self, db: Session):
        self.db = db

    def find_by_case_id(self, case_id: UUID) -> SurgicalProcedureRecord | None:
        return self.db.execute(
            select(SurgicalProcedureRecord).where(
                SurgicalProcedureRecord.surgical_case_id == case_id
            )
        ).scalar_one_or_none()

    def create_for_case(self, case: SurgicalCase) -> SurgicalProcedureRecord:
        """Create the record seeded from the case (diagnosis, urgency)."""
        diagnosis = (case.diagnosis or "").strip()
        record = SurgicalProcedureRecord(
            surgical_case_id=case.id,
            pre_op_diagnosis=diagnosis or DEFAULT_PRE_OP_DIAGNOSIS,
            urgency=case.urgency,
        )
        self.db.add(record)
        self.db.flush()
        return record
