from __future__ import annotations

from typing import List, Optional

from sqlalchemy.orm import Session

from ..models.models import BudgetCategory, Department
from ..schemas.schemas import BudgetCategoryCreate, DepartmentCreate


def list_departments(session: Session) -> List[Department]:
    return session.query(Department).order_by(Department.name.asc(), Department.id.asc()).all()


def list_budget_categories(session: Session) -> List[BudgetCategory]:
    return session.query(BudgetCategory).order_by(BudgetCategory.name.asc(), BudgetCategory.id.asc()).all()


def get_department(session: Session, department_id: int) -> Optional[Department]:
    return session.get(Department, department_id)


def get_budget_category(session: Session, category_id: int) -> Optional[BudgetCategory]:
    return session.get(BudgetCategory, category_id)


def create_department(session: Session, payload: DepartmentCreate) -> Department:
    department = Department(**payload.model_dump())
    session.add(department)
    session.commit()
    session.refresh(department)
    return department


def create_budget_category(session: Session, payload: BudgetCategoryCreate) -> BudgetCategory:
    category = BudgetCategory(**payload.model_dump())
    session.add(category)
    session.commit()
    session.refresh(category)
    return category


def ensure_department(session: Session, payload: DepartmentCreate) -> Department:
    existing = session.query(Department).filter(Department.code == payload.code).first()
    if existing:
        return existing
    return create_department(session, payload)


def ensure_budget_category(session: Session, payload: BudgetCategoryCreate) -> BudgetCategory:
    existing = session.query(BudgetCategory).filter(BudgetCategory.code == payload.code).first()
    if existing:
        return existing
    return create_budget_category(session, payload)
