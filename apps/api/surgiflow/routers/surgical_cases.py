"""Surgical case transition endpoints."""

from dataclasses import asdict
from uuid import UUID

from fastapi import APIRouter, Depends

from surgiflow.core.deps import Actor, get_actor, get_transition_service
from surgiflow.schemas.case_transition import TransitionRequest, TransitionResponse
from surgiflow.services.case_transition_service import CaseTransitionService

router = APIRouter()


@router.post("/{case_id}/transitions", response_model=TransitionResponse)
def transition_case(
    case_id: UUID,
    data: TransitionRequest,
    actor: Actor = Depends(get_actor),
    service: CaseTransitionService = Depends(get_transition_service),
):
    """
    Advance a case through the theater workflow.

    Actions: IN_PREP, IN_THEATER, RECOVERY, COMPLETED. Entering theater needs
    a completed Sign-In; leaving it needs a completed Sign-Out.
    """
    result = service.transition_case(
        case_id,
        data.action,
        actor_id=actor.id,
        actor_role=actor.role,
        reason=data.reason,
    )
    return TransitionResponse(**asdict(result))
