"""
Canonical WHO Surgical Safety Checklist item definitions.

Three phases, each with a fixed set of required confirmations:
- SIGN_IN: before induction of anesthesia
- TIME_OUT: before skin incision
- SIGN_OUT: before the patient leaves the operating room

Saved items are plain dicts `{key, label, confirmed, note?}` as stored in the
checklist JSON columns.
"""

from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from surgiflow.db.enums import ChecklistPhase


@dataclass(frozen=True)
class ChecklistItemDefinition:
    key: str
    label: str
    required: bool = True
    help_text: str | None = None


SIGN_IN_ITEMS: tuple[ChecklistItemDefinition, ...] = (
    ChecklistItemDefinition("patient_identity", "Patient identity confirmed (name, DOB, wristband)"),
    ChecklistItemDefinition("site_marked", "Surgical site marked / not applicable"),
    ChecklistItemDefinition("consent_verified", "Consent signed and verified"),
    ChecklistItemDefinition("anesthesia_check", "Anesthesia safety check completed"),
    ChecklistItemDefinition("pulse_oximeter", "Pulse oximeter on patient and functioning"),
    ChecklistItemDefinition("allergy_check", "Known allergies reviewed"),
    ChecklistItemDefinition(
        "airway_risk",
        "Difficult airway / aspiration risk assessed",
        help_text="Equipment and assistance available if needed",
    ),
    ChecklistItemDefinition(
        "blood_loss_risk",
        "Risk of >500ml blood loss assessed",
        help_text="Adequate IV access and fluids planned",
    ),
)

TIME_OUT_ITEMS: tuple[ChecklistItemDefinition, ...] = (
    ChecklistItemDefinition("team_intro", "All team members introduced by name and role"),
    ChecklistItemDefinition(
        "patient_confirm", "Patient name, procedure, and incision site confirmed"
    ),
    ChecklistItemDefinition(
        "antibiotic_prophylaxis", "Antibiotic prophylaxis given within last 60 minutes"
    ),
    ChecklistItemDefinition(
        "critical_events_surgeon", "Anticipated critical events: surgeon reviewed"
    ),
    ChecklistItemDefinition(
        "critical_events_anesthesia", "Anticipated critical events: anesthesia reviewed"
    ),
    ChecklistItemDefinition(
        "critical_events_nursing", "Anticipated critical events: nursing reviewed"
    ),
    ChecklistItemDefinition("imaging_displayed", "Essential imaging displayed"),
    ChecklistItemDefinition(
        "equipment_sterile", "Equipment sterility confirmed (indicator results)"
    ),
)

SIGN_OUT_ITEMS: tuple[ChecklistItemDefinition, ...] = (
    ChecklistItemDefinition("procedure_recorded", "Procedure name / description recorded"),
    ChecklistItemDefinition("instrument_count", "Instrument, sponge, and needle counts correct"),
    ChecklistItemDefinition("specimen_labeled", "Specimen labeled (including patient name)"),
    ChecklistItemDefinition("equipment_issues", "Equipment problems addressed"),
    ChecklistItemDefinition(
        "recovery_plan", "Key concerns for recovery and management reviewed"
    ),
)

PHASE_ITEMS: dict[ChecklistPhase, tuple[ChecklistItemDefinition, ...]] = {
    ChecklistPhase.SIGN_IN: SIGN_IN_ITEMS,
    ChecklistPhase.TIME_OUT: TIME_OUT_ITEMS,
    ChecklistPhase.SIGN_OUT: SIGN_OUT_ITEMS,
}


def get_items_for_phase(phase: ChecklistPhase) -> tuple[ChecklistItemDefinition, ...]:
    return PHASE_ITEMS[phase]


def _confirmed_keys(items: Iterable[Mapping[str, Any]] | None) -> set[str]:
    return {item.get("key") for item in items or () if item.get("confirmed")}


def get_missing_required_keys(
    phase: ChecklistPhase, items: Iterable[Mapping[str, Any]] | None
) -> list[str]:
    """Keys of required items that are absent or unconfirmed, in canonical order."""
    confirmed = _confirmed_keys(items)
    return [d.key for d in get_items_for_phase(phase) if d.required and d.key not in confirmed]


def get_missing_items(
    phase: ChecklistPhase, items: Iterable[Mapping[str, Any]] | None
) -> list[str]:
    """Labels of required items that are absent or unconfirmed.

    With no saved items every required label is returned.
    """
    confirmed = _confirmed_keys(items)
    return [d.label for d in get_items_for_phase(phase) if d.required and d.key not in confirmed]


def get_section_completion(
    phase: ChecklistPhase,
    items: Iterable[Mapping[str, Any]] | None,
    finalized: bool,
) -> dict[str, Any]:
    """Progress for one phase: required total, confirmed count, finalized flag."""
    required = [d for d in get_items_for_phase(phase) if d.required]
    confirmed = _confirmed_keys(items)
    return {
        "total": len(required),
        "confirmed": sum(1 for d in required if d.key in confirmed),
        "finalized": finalized,
    }
