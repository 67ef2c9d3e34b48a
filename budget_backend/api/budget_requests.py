from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from ..api.dependencies import get_db
from ..constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from ..schemas.schemas import (
    BudgetRequestCreate,
    BudgetRequestFilter,
    BudgetRequestPage,
    BudgetRequestPriority,
    BudgetRequestRead,
    BudgetRequestStatus,
    BudgetRequestUpdate,
)
from ..services import budget_requests as budget_request_service

router = APIRouter(prefix="/budget-requests", tags=["budget-requests"])


def _not_found(request_id: int) -> HTTPException:
    return HTTPException(status_code=404, detail=f"Budget request {request_id} not found")


@router.get("", response_model=BudgetRequestPage)
def list_budget_requests(
    department_id: Optional[int] = None,
    status_filter: Optional[BudgetRequestStatus] = Query(default=None, alias="status"),
    fiscal_year: Optional[int] = None,
    priority: Optional[BudgetRequestPriority] = None,
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
) -> BudgetRequestPage:
    filters = BudgetRequestFilter(
        department_id=department_id,
        status=status_filter,
        fiscal_year=fiscal_year,
        priority=priority,
        limit=limit,
        offset=offset,
    )
    return budget_request_service.list_budget_requests(db, filters)


@router.post("", response_model=BudgetRequestRead, status_code=status.HTTP_201_CREATED)
def create_budget_request(
    payload: BudgetRequestCreate,
    db: Session = Depends(get_db),
) -> BudgetRequestRead:
    return budget_request_service.create_budget_request(db, payload)


@router.get("/{request_id}", response_model=BudgetRequestRead)
def get_budget_request(request_id: int, db: Session = Depends(get_db)) -> BudgetRequestRead:
    budget_request = budget_request_service.get_budget_request(db, request_id)
    if budget_request is None:
        raise _not_found(request_id)
    return budget_request


@router.patch("/{request_id}", response_model=BudgetRequestRead)
def update_budget_request(
    request_id: int,
    payload: BudgetRequestUpdate,
    db: Session = Depends(get_db),
) -> BudgetRequestRead:
    budget_request = budget_request_service.update_budget_request(db, request_id, payload)
    if budget_request is None:
        raise _not_found(request_id)
    return budget_request


@router.post("/{request_id}/submit", response_model=BudgetRequestRead)
def submit_budget_request(request_id: int, db: Session = Depends(get_db)) -> BudgetRequestRead:
    budget_request = budget_request_service.submit_budget_request(db, request_id)
    if budget_request is None:
        raise _not_found(request_id)
    return budget_request
