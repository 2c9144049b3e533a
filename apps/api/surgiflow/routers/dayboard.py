"""Theater day board endpoint."""

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from surgiflow.core.deps import Actor, get_actor, get_dayboard_service
from surgiflow.schemas.dayboard import DayboardResponse
from surgiflow.services.dayboard_service import DayboardService

router = APIRouter()


@router.get("/dayboard", response_model=DayboardResponse)
def get_dayboard(
    day: date = Query(..., alias="date", description="Operating day (YYYY-MM-DD, clinic timezone)"),
    theater_id: UUID | None = Query(None),
    actor: Actor = Depends(get_actor),
    service: DayboardService = Depends(get_dayboard_service),
):
    return service.get_board(day, theater_id=theater_id)
