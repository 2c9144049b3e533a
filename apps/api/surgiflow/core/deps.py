"""FastAPI dependencies for database access, actor identity and services."""

from dataclasses import dataclass
from typing import Generator

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from surgiflow.db.session import SessionLocal
from surgiflow.services.case_transition_service import CaseTransitionService
from surgiflow.services.checklist_service import ChecklistService
from surgiflow.services.dayboard_service import DayboardService
from surgiflow.services.timeline_service import TimelineService

ACTOR_ID_HEADER = "X-Actor-Id"
ACTOR_ROLE_HEADER = "X-Actor-Role"


@dataclass(frozen=True)
class Actor:
    """Authenticated caller as asserted by the upstream auth layer."""

    id: str
    role: str


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency.

    Yields a database session and ensures it's closed after the request.
    Uncommitted work (e.g. after a domain error) is rolled back on close.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_actor(
    actor_id: str | None = Header(None, alias=ACTOR_ID_HEADER),
    actor_role: str | None = Header(None, alias=ACTOR_ROLE_HEADER),
) -> Actor:
    """
    Read the acting user from trusted upstream headers.

    Raises:
        HTTPException 401: either header missing or blank
    """
    if not actor_id or not actor_id.strip() or not actor_role or not actor_role.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Actor identity headers are required",
        )
    return Actor(id=actor_id.strip(), role=actor_role.strip().upper())


def get_transition_service(db: Session = Depends(get_db)) -> CaseTransitionService:
    return CaseTransitionService(db)


def get_checklist_service(db: Session = Depends(get_db)) -> ChecklistService:
    return ChecklistService(db)


def get_timeline_service(db: Session = Depends(get_db)) -> TimelineService:
    return TimelineService(db)


def get_dayboard_service(db: Session = Depends(get_db)) -> DayboardService:
    return DayboardService(db)
