from datetime import datetime

import pytest

from budget_backend.models.models import BudgetRequest
from budget_backend.services.exceptions import InvalidTransition
from budget_backend.services.lifecycle import apply_status, can_transition

FIRST = datetime(2025, 1, 1, 9, 0, 0)
LATER = datetime(2025, 2, 1, 9, 0, 0)


def _request(status="draft", **values) -> BudgetRequest:
    return BudgetRequest(id=1, status=status, **values)


def test_processing_stamps_submitted_at_once():
    budget_request = _request()

    apply_status(budget_request, "processing", clock=lambda: FIRST)
    apply_status(budget_request, "processing", clock=lambda: LATER)

    assert budget_request.status == "processing"
    assert budget_request.submitted_at == FIRST
    assert budget_request.updated_at == LATER


def test_review_has_no_timestamp_side_effect():
    budget_request = _request(status="processing", submitted_at=FIRST)

    apply_status(budget_request, "review", clock=lambda: LATER)

    assert budget_request.status == "review"
    assert budget_request.submitted_at == FIRST
    assert budget_request.reviewed_at is None


@pytest.mark.parametrize("decision", ["approved", "rejected"])
def test_decision_stamps_reviewed_at_once_and_records_reviewer(decision):
    budget_request = _request(status="review")

    apply_status(budget_request, decision, reviewed_by="Manager", review_notes="Looks fine", clock=lambda: FIRST)
    apply_status(budget_request, decision, clock=lambda: LATER)

    assert budget_request.reviewed_at == FIRST
    assert budget_request.reviewed_by == "Manager"
    assert budget_request.review_notes == "Looks fine"


def test_backward_move_requires_override():
    budget_request = _request(status="review")

    with pytest.raises(InvalidTransition, match="from review to draft"):
        apply_status(budget_request, "draft")
    assert budget_request.status == "review"

    apply_status(budget_request, "draft", admin_override=True)
    assert budget_request.status == "draft"


def test_terminal_states_do_not_switch_decisions():
    assert not can_transition("approved", "rejected")
    assert not can_transition("rejected", "processing")
    assert can_transition("approved", "approved")
    assert can_transition("draft", "approved")


def test_unknown_status_is_rejected_even_with_override():
    with pytest.raises(InvalidTransition, match="Unknown budget request status"):
        apply_status(_request(), "archived", admin_override=True)
