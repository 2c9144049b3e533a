"""Case plan repository."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from surgiflow.db.models import CasePlan


class CasePlanRepository:
    def __init__(self, db: Session):
        self.db = db

    def find_by_surgical_case_id(self, case_id: UUID) -> CasePlan | None:
        return self.db.execute(
            select(CasePlan).where(CasePlan.surgical_case_id == case_id)
        ).scalar_one_or_none()
