from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from ..models.models import BudgetLineItem, BudgetRequest, utcnow
from ..schemas.schemas import (
    BudgetRequestCreate,
    BudgetRequestFilter,
    BudgetRequestPage,
    BudgetRequestRead,
    BudgetRequestUpdate,
)
from . import lifecycle, reference_data
from .audit import audit_log
from .exceptions import (
    BudgetRequestError,
    BudgetRequestValidationError,
    CategoryNotFound,
    DepartmentNotFound,
)
from .money import quantize_currency
from .reconciliation import ensure_reconciled, line_total
from .validation import validate_create, validate_submission, validate_update

logger = logging.getLogger(__name__)

AUDIT_ENTITY = "BudgetRequest"


def to_read_model(budget_request: BudgetRequest) -> BudgetRequestRead:
    return BudgetRequestRead.model_validate(budget_request)


def _snapshot(budget_request: BudgetRequest, fields: Iterable[str]) -> Dict[str, Any]:
    return {field: getattr(budget_request, field) for field in fields}


def _ensure_references(session: Session, department_id: Optional[int], category_id: Optional[int]) -> None:
    if department_id is not None and reference_data.get_department(session, department_id) is None:
        raise DepartmentNotFound(department_id)
    if category_id is not None and reference_data.get_budget_category(session, category_id) is None:
        raise CategoryNotFound(category_id)


def _commit(session: Session, action: str, request_id: Optional[int]) -> None:
    try:
        session.commit()
    except SQLAlchemyError:
        session.rollback()
        logger.exception("Budget request %s failed for id=%s", action, request_id)
        raise


def create_budget_request(
    session: Session,
    payload: BudgetRequestCreate,
    actor: Optional[str] = None,
) -> BudgetRequestRead:
    errors = validate_create(payload)
    if errors:
        raise BudgetRequestValidationError(errors)
    _ensure_references(session, payload.department_id, payload.category_id)
    ensure_reconciled(payload.requested_amount, payload.line_items)

    budget_request = BudgetRequest(
        title=payload.title,
        description=payload.description,
        department_id=payload.department_id,
        category_id=payload.category_id,
        requested_amount=quantize_currency(payload.requested_amount),
        justification=payload.justification,
        priority=payload.priority,
        status="draft",
        fiscal_year=payload.fiscal_year,
        expected_start_date=payload.expected_start_date,
        expected_end_date=payload.expected_end_date,
        submitted_by=payload.submitted_by,
    )
    for position, item in enumerate(payload.line_items):
        budget_request.line_items.append(
            BudgetLineItem(
                position=position,
                description=item.description,
                quantity=item.quantity,
                unit_price=quantize_currency(item.unit_price),
                total_amount=line_total(item.quantity, item.unit_price),
                notes=item.notes,
            )
        )

    try:
        session.add(budget_request)
        session.flush()
        audit_log(
            db_session=session,
            actor=actor or payload.submitted_by,
            action="budget_request.create",
            target_entity_type=AUDIT_ENTITY,
            target_entity_id=str(budget_request.id),
            after={
                "title": payload.title,
                "requested_amount": budget_request.requested_amount,
                "line_items": len(payload.line_items),
            },
        )
    except SQLAlchemyError:
        session.rollback()
        logger.exception("Budget request insert failed for %r", payload.title)
        raise
    _commit(session, "create", budget_request.id)
    session.refresh(budget_request)
    logger.info(
        "Created budget request %s (%d line items, amount=%s)",
        budget_request.id,
        len(budget_request.line_items),
        budget_request.requested_amount,
    )
    return to_read_model(budget_request)


def get_budget_request(session: Session, request_id: int) -> Optional[BudgetRequestRead]:
    budget_request = session.get(BudgetRequest, request_id)
    if budget_request is None:
        return None
    return to_read_model(budget_request)


def list_budget_requests(session: Session, filters: BudgetRequestFilter) -> BudgetRequestPage:
    query = session.query(BudgetRequest)
    if filters.department_id is not None:
        query = query.filter(BudgetRequest.department_id == filters.department_id)
    if filters.status is not None:
        query = query.filter(BudgetRequest.status == filters.status)
    if filters.fiscal_year is not None:
        query = query.filter(BudgetRequest.fiscal_year == filters.fiscal_year)
    if filters.priority is not None:
        query = query.filter(BudgetRequest.priority == filters.priority)

    total = query.count()
    rows = (
        query.options(selectinload(BudgetRequest.line_items))
        .order_by(BudgetRequest.created_at.desc(), BudgetRequest.id.desc())
        .offset(filters.offset)
        .limit(filters.limit)
        .all()
    )
    return BudgetRequestPage(
        requests=[to_read_model(row) for row in rows],
        total=total,
        has_more=filters.offset + filters.limit < total,
    )


def update_budget_request(
    session: Session,
    request_id: int,
    patch: BudgetRequestUpdate,
    actor: Optional[str] = None,
) -> Optional[BudgetRequestRead]:
    budget_request = session.get(BudgetRequest, request_id)
    if budget_request is None:
        return None

    errors = validate_update(budget_request, patch)
    if errors:
        raise BudgetRequestValidationError(errors)

    changes = patch.changes()
    before = _snapshot(budget_request, changes)
    try:
        _ensure_references(session, changes.get("department_id"), changes.get("category_id"))
        if "requested_amount" in changes and budget_request.line_items:
            ensure_reconciled(changes["requested_amount"], budget_request.line_items)

        target_status = changes.pop("status", None)
        review_fields = {key: changes.pop(key) for key in ("reviewed_by", "review_notes") if key in changes}
        for key, value in changes.items():
            if key == "requested_amount":
                value = quantize_currency(value)
            setattr(budget_request, key, value)

        if target_status is not None:
            lifecycle.apply_status(
                budget_request,
                target_status,
                admin_override=patch.admin_override,
                **review_fields,
            )
        else:
            for key, value in review_fields.items():
                setattr(budget_request, key, value)
            budget_request.updated_at = utcnow()

        audit_log(
            db_session=session,
            actor=actor or patch.reviewed_by,
            action="budget_request.override" if patch.admin_override else "budget_request.update",
            target_entity_type=AUDIT_ENTITY,
            target_entity_id=str(budget_request.id),
            before=before,
            after=patch.changes(),
        )
    except BudgetRequestError:
        session.rollback()
        raise
    _commit(session, "update", request_id)
    session.refresh(budget_request)
    if target_status is not None:
        logger.info("Budget request %s status set to %s", budget_request.id, budget_request.status)
    return to_read_model(budget_request)


def submit_budget_request(
    session: Session,
    request_id: int,
    actor: Optional[str] = None,
) -> Optional[BudgetRequestRead]:
    budget_request = session.get(BudgetRequest, request_id)
    if budget_request is None:
        return None

    validate_submission(budget_request)
    before_status = budget_request.status
    lifecycle.apply_status(budget_request, "processing")
    audit_log(
        db_session=session,
        actor=actor or budget_request.submitted_by,
        action="budget_request.submit",
        target_entity_type=AUDIT_ENTITY,
        target_entity_id=str(budget_request.id),
        before={"status": before_status},
        after={"status": budget_request.status, "submitted_at": budget_request.submitted_at},
    )
    _commit(session, "submit", request_id)
    session.refresh(budget_request)
    logger.info("Budget request %s submitted by %s", budget_request.id, budget_request.submitted_by)
    return to_read_model(budget_request)
