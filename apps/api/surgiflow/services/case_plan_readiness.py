"""Case plan readiness rules for PLANNING → READY_FOR_SCHEDULING."""

from surgiflow.db.enums import ConsentStatus
from surgiflow.db.models import CasePlan

MIN_PROCEDURE_PLAN_LENGTH = 10
MIN_RISK_FACTORS_LENGTH = 5
MIN_PRE_OP_NOTES_LENGTH = 5

MISSING_PLAN = "Case plan has not been created"
PROCEDURE_PLAN_TOO_SHORT = (
    f"Procedure plan must be at least {MIN_PROCEDURE_PLAN_LENGTH} characters"
)
RISK_FACTORS_TOO_SHORT = f"Risk factors must be at least {MIN_RISK_FACTORS_LENGTH} characters"
PRE_OP_NOTES_TOO_SHORT = f"Pre-op notes must be at least {MIN_PRE_OP_NOTES_LENGTH} characters"


def _stripped_length(value: str | None) -> int:
    return len((value or "").strip())


def get_readiness_gaps(plan: CasePlan | None) -> list[str]:
    """Return every unmet readiness requirement (empty list when ready)."""
    if plan is None:
        return [MISSING_PLAN]

    gaps: list[str] = []
    if _stripped_length(plan.procedure_plan) < MIN_PROCEDURE_PLAN_LENGTH:
        gaps.append(PROCEDURE_PLAN_TOO_SHORT)
    if _stripped_length(plan.risk_factors) < MIN_RISK_FACTORS_LENGTH:
        gaps.append(RISK_FACTORS_TOO_SHORT)
    if _stripped_length(plan.pre_op_notes) < MIN_PRE_OP_NOTES_LENGTH:
        gaps.append(PRE_OP_NOTES_TOO_SHORT)
    return gaps


def get_readiness_checks(plan: CasePlan | None) -> dict[str, bool]:
    """Planning checklist shown on the day board (five independent checks)."""
    if plan is None:
        return {
            "pre_op_notes": False,
            "risk_factors": False,
            "images": False,
            "signed_consent": False,
            "procedure_plan": False,
        }
    return {
        "pre_op_notes": bool((plan.pre_op_notes or "").strip()),
        "risk_factors": bool((plan.risk_factors or "").strip()),
        "images": len(plan.images) > 0,
        "signed_consent": any(c.status == ConsentStatus.SIGNED.value for c in plan.consents),
        "procedure_plan": bool((plan.procedure_plan or "").strip()),
    }
