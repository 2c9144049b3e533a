"""Surgical case repository - database operations for cases."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from surgiflow.db.enums import SurgicalCaseStatus
from surgiflow.db.models import SurgicalCase


class SurgicalCaseRepository:
    """Repository for surgical case reads and status writes."""

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, case_id: UUID, *, for_update: bool = False) -> SurgicalCase | None:
        """Get a case by id, optionally holding a row lock until commit."""
        query = select(SurgicalCase).where(SurgicalCase.id == case_id)
        if for_update:
            query = query.with_for_update().execution_options(populate_existing=True)
        return self.db.execute(query).scalar_one_or_none()

    def update_status(self, case: SurgicalCase, status: SurgicalCaseStatus) -> SurgicalCase:
        """Set the status and flush so the version check runs now."""
        case.status = status.value
        self.db.flush()
        return case
