"""Operative timeline endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends

from surgiflow.core.deps import Actor, get_actor, get_timeline_service
from surgiflow.schemas.timeline import TimelinePatch, TimelineResponse
from surgiflow.services.timeline_service import TimelineService

router = APIRouter()


@router.get("/{case_id}/timeline", response_model=TimelineResponse)
def get_timeline(
    case_id: UUID,
    actor: Actor = Depends(get_actor),
    service: TimelineService = Depends(get_timeline_service),
):
    return service.get_timeline(case_id)


@router.patch("/{case_id}/timeline", response_model=TimelineResponse)
def update_timeline(
    case_id: UUID,
    data: TimelinePatch,
    actor: Actor = Depends(get_actor),
    service: TimelineService = Depends(get_timeline_service),
):
    """
    Record or correct operative timestamps.

    Only fields present in the body are written; null clears a field.
    """
    patch = data.model_dump(exclude_unset=True)
    return service.update_timeline(case_id, patch, actor.id, actor.role)
