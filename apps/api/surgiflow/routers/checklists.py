"""WHO surgical safety checklist endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends

from surgiflow.core.deps import Actor, get_actor, get_checklist_service
from surgiflow.schemas.checklist import ChecklistPhaseRequest, ChecklistStatusResponse
from surgiflow.services.checklist_service import ChecklistService

router = APIRouter()


@router.get("/{case_id}/checklist", response_model=ChecklistStatusResponse)
def get_checklist(
    case_id: UUID,
    actor: Actor = Depends(get_actor),
    service: ChecklistService = Depends(get_checklist_service),
):
    return service.get_status(case_id)


@router.post("/{case_id}/checklist/complete", response_model=ChecklistStatusResponse)
def complete_checklist_phase(
    case_id: UUID,
    data: ChecklistPhaseRequest,
    actor: Actor = Depends(get_actor),
    service: ChecklistService = Depends(get_checklist_service),
):
    """Complete a phase; every submitted item must be confirmed."""
    return service.complete_phase(case_id, data.phase, data.items, actor.id, actor.role)


@router.put("/{case_id}/checklist/draft", response_model=ChecklistStatusResponse)
def save_checklist_draft(
    case_id: UUID,
    data: ChecklistPhaseRequest,
    actor: Actor = Depends(get_actor),
    service: ChecklistService = Depends(get_checklist_service),
):
    """Save partial confirmations for a phase that is not finalized."""
    return service.save_draft(case_id, data.phase, data.items, actor.id, actor.role)


@router.post("/{case_id}/checklist/finalize", response_model=ChecklistStatusResponse)
def finalize_checklist_phase(
    case_id: UUID,
    data: ChecklistPhaseRequest,
    actor: Actor = Depends(get_actor),
    service: ChecklistService = Depends(get_checklist_service),
):
    """Complete a phase after checking every WHO required item is confirmed."""
    return service.finalize_phase(case_id, data.phase, data.items, actor.id, actor.role)
