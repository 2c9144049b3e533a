"""Structured logging helpers (PHI-safe)."""

import logging
from typing import Any

from surgiflow.core.config import settings


def build_log_context(
    *,
    case_id: str | None = None,
    actor_id: str | None = None,
    actor_role: str | None = None,
    action: str | None = None,
    request_id: str | None = None,
) -> dict[str, Any]:
    """Return a PHI-safe log context dict.

    Only identifiers and workflow vocabulary are allowed here; patient names,
    diagnoses and free-text notes must never reach the logs.
    """
    context: dict[str, Any] = {}
    if case_id:
        context["case_id"] = case_id
    if actor_id:
        context["actor_id"] = actor_id
    if actor_role:
        context["actor_role"] = actor_role
    if action:
        context["action"] = action
    if request_id:
        context["request_id"] = request_id
    return context


def configure_logging() -> None:
    """Configure root logging once for the API process."""
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
