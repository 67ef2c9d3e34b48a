"""Field rules for budget requests.

``validate_create`` and ``validate_update`` return a mapping of field name to
message and never raise for bad input. ``validate_submission`` runs against a
persisted draft and raises, since a stored request missing data is unexpected.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

from ..constants import (
    BUDGET_REQUEST_PRIORITIES,
    BUDGET_REQUEST_STATUSES,
    MAX_FISCAL_YEAR,
    MIN_FISCAL_YEAR,
    TEXT_MAX_LENGTH,
    TITLE_MAX_LENGTH,
)
from ..models.models import BudgetRequest
from ..schemas.schemas import BudgetRequestCreate, BudgetRequestUpdate
from .exceptions import IncompleteRequest, InvalidTransition

FieldErrors = Dict[str, str]

NULLABLE_UPDATE_FIELDS = frozenset({"review_notes", "reviewed_by"})


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def _check_text(errors: FieldErrors, field: str, value: Optional[str], label: str, max_length: int) -> None:
    if _is_blank(value):
        errors[field] = f"{label} is required"
    elif len(value) > max_length:
        errors[field] = f"{label} must be at most {max_length} characters"


def _is_positive(value: Any) -> bool:
    try:
        return Decimal(str(value)) > 0
    except (InvalidOperation, ValueError):
        return False


def _check_reference(errors: FieldErrors, field: str, value: Any, label: str) -> None:
    if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
        errors[field] = f"{label} is required"


def _check_fiscal_year(errors: FieldErrors, value: Any) -> None:
    if not isinstance(value, int) or not MIN_FISCAL_YEAR <= value <= MAX_FISCAL_YEAR:
        errors["fiscal_year"] = f"Fiscal year must be between {MIN_FISCAL_YEAR} and {MAX_FISCAL_YEAR}"


def _check_date_range(errors: FieldErrors, start: Optional[date], end: Optional[date]) -> None:
    if start and end and end < start:
        errors["expected_end_date"] = "End date must be after or equal to start date"


def validate_create(payload: BudgetRequestCreate) -> FieldErrors:
    errors: FieldErrors = {}
    _check_text(errors, "title", payload.title, "Title", TITLE_MAX_LENGTH)
    _check_text(errors, "description", payload.description, "Description", TEXT_MAX_LENGTH)
    _check_reference(errors, "department_id", payload.department_id, "Department")
    _check_reference(errors, "category_id", payload.category_id, "Category")
    if not _is_positive(payload.requested_amount):
        errors["requested_amount"] = "Requested amount must be positive"
    _check_text(errors, "justification", payload.justification, "Justification", TEXT_MAX_LENGTH)
    if payload.priority not in BUDGET_REQUEST_PRIORITIES:
        errors["priority"] = f"Priority must be one of: {', '.join(BUDGET_REQUEST_PRIORITIES)}"
    _check_fiscal_year(errors, payload.fiscal_year)
    if payload.expected_start_date is None:
        errors["expected_start_date"] = "Expected start date is required"
    if payload.expected_end_date is None:
        errors["expected_end_date"] = "Expected end date is required"
    _check_date_range(errors, payload.expected_start_date, payload.expected_end_date)
    if _is_blank(payload.submitted_by):
        errors["submitted_by"] = "Submitter name is required"

    if not payload.line_items:
        errors["line_items"] = "At least one line item is required"
    for index, item in enumerate(payload.line_items):
        prefix = f"line_items.{index}"
        if _is_blank(item.description):
            errors[f"{prefix}.description"] = "Line item description is required"
        if not isinstance(item.quantity, int) or item.quantity <= 0:
            errors[f"{prefix}.quantity"] = "Quantity must be positive"
        if not _is_positive(item.unit_price):
            errors[f"{prefix}.unit_price"] = "Unit price must be positive"
    return errors


def validate_update(existing: BudgetRequest, patch: BudgetRequestUpdate) -> FieldErrors:
    """Check only the fields present in ``patch``; dates are checked against merged values."""
    errors: FieldErrors = {}
    changes = patch.changes()

    for field, value in changes.items():
        if value is None and field not in NULLABLE_UPDATE_FIELDS:
            errors[field] = "Field may not be null"

    text_rules = {
        "title": ("Title", TITLE_MAX_LENGTH),
        "description": ("Description", TEXT_MAX_LENGTH),
        "justification": ("Justification", TEXT_MAX_LENGTH),
    }
    for field, (label, max_length) in text_rules.items():
        if changes.get(field) is not None:
            _check_text(errors, field, changes[field], label, max_length)

    if changes.get("department_id") is not None:
        _check_reference(errors, "department_id", changes["department_id"], "Department")
    if changes.get("category_id") is not None:
        _check_reference(errors, "category_id", changes["category_id"], "Category")
    if changes.get("requested_amount") is not None and not _is_positive(changes["requested_amount"]):
        errors["requested_amount"] = "Requested amount must be positive"
    if changes.get("priority") is not None and changes["priority"] not in BUDGET_REQUEST_PRIORITIES:
        errors["priority"] = f"Priority must be one of: {', '.join(BUDGET_REQUEST_PRIORITIES)}"
    if changes.get("status") is not None and changes["status"] not in BUDGET_REQUEST_STATUSES:
        errors["status"] = f"Status must be one of: {', '.join(BUDGET_REQUEST_STATUSES)}"
    if changes.get("fiscal_year") is not None:
        _check_fiscal_year(errors, changes["fiscal_year"])

    if "expected_start_date" in changes or "expected_end_date" in changes:
        start = changes.get("expected_start_date") or existing.expected_start_date
        end = changes.get("expected_end_date") or existing.expected_end_date
        if "expected_end_date" not in errors:
            _check_date_range(errors, start, end)
    return errors


def validate_submission(budget_request: BudgetRequest) -> None:
    if budget_request.status != "draft":
        raise InvalidTransition(
            f"Budget request cannot be submitted. Current status: {budget_request.status}",
            current_status=budget_request.status,
            target_status="processing",
        )
    required_text = (budget_request.title, budget_request.description, budget_request.justification)
    if any(_is_blank(value) for value in required_text):
        raise IncompleteRequest("required fields")
    if budget_request.expected_start_date is None or budget_request.expected_end_date is None:
        raise IncompleteRequest("required fields")
    if _is_blank(budget_request.submitted_by):
        raise IncompleteRequest("submitter information")
