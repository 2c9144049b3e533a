"""WHO surgical checklist repository.

Each checklist phase maps onto its own group of columns on
`surgical_checklists`. Completing a phase is idempotent at the storage level:
once `<phase>_completed_at` is set, later completions leave the row untouched.
"""

from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from surgiflow.db.enums import ChecklistPhase
from surgiflow.db.models import SurgicalChecklist
from surgiflow.utils.datetime_utils import utcnow


@dataclass(frozen=True)
class PhaseColumns:
    completed_at: str
    by_user_id: str
    by_role: str
    items: str


PHASE_COLUMNS: dict[ChecklistPhase, PhaseColumns] = {
    phase: PhaseColumns(
        completed_at=f"{prefix}_completed_at",
        by_user_id=f"{prefix}_by_user_id",
        by_role=f"{prefix}_by_role",
        items=f"{prefix}_items",
    )
    for phase, prefix in (
        (ChecklistPhase.SIGN_IN, "sign_in"),
        (ChecklistPhase.TIME_OUT, "time_out"),
        (ChecklistPhase.SIGN_OUT, "sign_out"),
    )
}


class SurgicalChecklistRepository:
    """Repository for checklist reads and phase writes."""

    def __init__(self, db: Session):
        self.db = db

    def find_by_case_id(
        self, case_id: UUID, *, for_update: bool = False
    ) -> SurgicalChecklist | None:
        query = select(SurgicalChecklist).where(SurgicalChecklist.surgical_case_id == case_id)
        if for_update:
            query = query.with_for_update().execution_options(populate_existing=True)
        return self.db.execute(query).scalar_one_or_none()

    def ensure_exists(self, case_id: UUID) -> SurgicalChecklist:
        """Get the case checklist, creating an empty one on first use."""
        checklist = self.find_by_case_id(case_id, for_update=True)
        if checklist:
            return checklist
        checklist = SurgicalChecklist(surgical_case_id=case_id)
        self.db.add(checklist)
        self.db.flush()
        return checklist

    def is_phase_completed(self, case_id: UUID, phase: ChecklistPhase) -> bool:
        checklist = self.find_by_case_id(case_id)
        if not checklist:
            return False
        return getattr(checklist, PHASE_COLUMNS[phase].completed_at) is not None

    def complete_phase(
        self,
        case_id: UUID,
        phase: ChecklistPhase,
        items: list[dict],
        actor_id: str,
        actor_role: str,
    ) -> tuple[SurgicalChecklist, bool]:
        """
        Finalize a phase.

        Returns (checklist, already_completed). A phase that is already
        finalized keeps its original timestamp, actor and items.
        """
        checklist = self.ensure_exists(case_id)
        columns = PHASE_COLUMNS[phase]
        if getattr(checklist, columns.completed_at) is not None:
            return checklist, True

        setattr(checklist, columns.completed_at, utcnow())
        setattr(checklist, columns.by_user_id, actor_id)
        setattr(checklist, columns.by_role, actor_role)
        setattr(checklist, columns.items, items)
        self.db.flush()
        return checklist, False

    def save_draft_items(
        self, case_id: UUID, phase: ChecklistPhase, items: list[dict]
    ) -> SurgicalChecklist:
        """Store partial confirmations on a phase that is not finalized yet."""
        checklist = self.ensure_exists(case_id)
        setattr(checklist, PHASE_COLUMNS[phase].items, items)
        self.db.flush()
        return checklist
