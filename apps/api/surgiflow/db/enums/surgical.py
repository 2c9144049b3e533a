"""Surgical case workflow enums."""

from enum import Enum


class SurgicalCaseStatus(str, Enum):
    """
    Surgical case lifecycle status.

    Flow: draft → planning → ready_for_scheduling → scheduled → in_prep
          → in_theater → recovery → completed
    Any pre-theater status may be cancelled.
    """

    DRAFT = "DRAFT"
    PLANNING = "PLANNING"
    READY_FOR_SCHEDULING = "READY_FOR_SCHEDULING"
    SCHEDULED = "SCHEDULED"
    IN_PREP = "IN_PREP"
    IN_THEATER = "IN_THEATER"
    RECOVERY = "RECOVERY"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class SurgicalUrgency(str, Enum):
    ELECTIVE = "ELECTIVE"
    URGENT = "URGENT"
    EMERGENCY = "EMERGENCY"


class TransitionAction(str, Enum):
    """Action tokens accepted from theater operations (map 1:1 to a target status)."""

    IN_PREP = "IN_PREP"
    IN_THEATER = "IN_THEATER"
    RECOVERY = "RECOVERY"
    COMPLETED = "COMPLETED"

    @property
    def target_status(self) -> SurgicalCaseStatus:
        return SurgicalCaseStatus(self.value)


class ChecklistPhase(str, Enum):
    """WHO Surgical Safety Checklist phases."""

    SIGN_IN = "SIGN_IN"  # Before induction of anesthesia
    TIME_OUT = "TIME_OUT"  # Before skin incision
    SIGN_OUT = "SIGN_OUT"  # Before the patient leaves the OR


class TheaterBookingStatus(str, Enum):
    PROVISIONAL = "PROVISIONAL"
    CONFIRMED = "CONFIRMED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class ConsentStatus(str, Enum):
    PENDING = "PENDING"
    SIGNED = "SIGNED"
    REVOKED = "REVOKED"


class ImageTimepoint(str, Enum):
    PRE_OP = "PRE_OP"
    INTRA_OP = "INTRA_OP"
    POST_OP = "POST_OP"
