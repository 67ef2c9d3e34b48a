from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Dict

from ..constants import BUDGET_REQUEST_STATUSES, REVIEW_DECISION_STATUSES
from ..models.models import BudgetRequest, utcnow
from .exceptions import InvalidTransition

logger = logging.getLogger(__name__)

BUDGET_REQUEST_TRANSITIONS: Dict[str, set[str]] = {
    "draft": {"processing", "review", "approved", "rejected"},
    "processing": {"review", "approved", "rejected"},
    "review": {"approved", "rejected"},
    "approved": set(),
    "rejected": set(),
}

_UNSET = object()


def can_transition(current_status: str, target_status: str) -> bool:
    if current_status == target_status:
        return True
    return target_status in BUDGET_REQUEST_TRANSITIONS.get(current_status, set())


def apply_status(
    budget_request: BudgetRequest,
    target_status: str,
    *,
    reviewed_by=_UNSET,
    review_notes=_UNSET,
    admin_override: bool = False,
    clock: Callable[[], datetime] = utcnow,
) -> BudgetRequest:
    """Move ``budget_request`` to ``target_status`` and stamp lifecycle timestamps.

    ``submitted_at`` and ``reviewed_at`` are written only while still null, so
    re-applying a status never moves them. ``reviewed_by`` / ``review_notes``
    are written only when passed; ``None`` clears them.
    """
    if target_status not in BUDGET_REQUEST_STATUSES:
        raise InvalidTransition(
            f"Unknown budget request status: {target_status}",
            current_status=budget_request.status,
            target_status=target_status,
        )
    current_status = budget_request.status
    if not can_transition(current_status, target_status):
        if not admin_override:
            raise InvalidTransition(
                f"Cannot transition budget request from {current_status} to {target_status}.",
                current_status=current_status,
                target_status=target_status,
            )
        logger.warning(
            "Administrative override: budget request %s moved from %s to %s",
            budget_request.id,
            current_status,
            target_status,
        )

    now = clock()
    budget_request.status = target_status

    if target_status == "processing" and budget_request.submitted_at is None:
        budget_request.submitted_at = now
    if target_status in REVIEW_DECISION_STATUSES and budget_request.reviewed_at is None:
        budget_request.reviewed_at = now
    if reviewed_by is not _UNSET:
        budget_request.reviewed_by = reviewed_by
    if review_notes is not _UNSET:
        budget_request.review_notes = review_notes

    budget_request.updated_at = now
    return budget_request
