from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..api.dependencies import get_db
from ..schemas.schemas import BudgetCategoryRead, DepartmentRead
from ..services import reference_data

router = APIRouter(tags=["reference-data"])


@router.get("/departments", response_model=List[DepartmentRead])
def list_departments(db: Session = Depends(get_db)):
    return reference_data.list_departments(db)


@router.get("/budget-categories", response_model=List[BudgetCategoryRead])
def list_budget_categories(db: Session = Depends(get_db)):
    return reference_data.list_budget_categories(db)
