from datetime import datetime, timezone

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship as orm_relationship

from ..constants import BUDGET_REQUEST_PRIORITIES, BUDGET_REQUEST_STATUSES
from ..database import Base


def utcnow():
    return datetime.now(timezone.utc)


def _in_clause(column: str, values) -> str:
    quoted = ", ".join(f"'{value}'" for value in values)
    return f"{column} IN ({quoted})"


class Department(Base):
    __tablename__ = "departments"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    code = Column(String(20), unique=True, index=True, nullable=False)
    description = Column(Text, nullable=True)
    head_name = Column(String(100), nullable=False)
    contact_email = Column(String, nullable=False)
    contact_phone = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    budget_requests = orm_relationship("BudgetRequest", back_populates="department")


class BudgetCategory(Base):
    __tablename__ = "budget_categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    code = Column(String(20), unique=True, index=True, nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    budget_requests = orm_relationship("BudgetRequest", back_populates="category")


class BudgetRequest(Base):
    __tablename__ = "budget_requests"
    __table_args__ = (
        CheckConstraint(_in_clause("status", BUDGET_REQUEST_STATUSES), name="ck_budget_requests_status"),
        CheckConstraint(_in_clause("priority", BUDGET_REQUEST_PRIORITIES), name="ck_budget_requests_priority"),
    )

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    department_id = Column(Integer, ForeignKey("departments.id"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("budget_categories.id"), nullable=False, index=True)
    requested_amount = Column(Numeric(12, 2), nullable=False)
    justification = Column(Text, nullable=False)
    priority = Column(String(16), nullable=False, index=True)
    status = Column(String(16), nullable=False, default="draft", index=True)
    fiscal_year = Column(Integer, nullable=False, index=True)
    expected_start_date = Column(Date, nullable=False)
    expected_end_date = Column(Date, nullable=False)
    submitted_by = Column(String, nullable=False)
    submitted_at = Column(DateTime(timezone=True), nullable=True)
    reviewed_by = Column(String, nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    review_notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    department = orm_relationship("Department", back_populates="budget_requests")
    category = orm_relationship("BudgetCategory", back_populates="budget_requests")
    line_items = orm_relationship(
        "BudgetLineItem",
        back_populates="budget_request",
        cascade="all, delete-orphan",
        order_by="BudgetLineItem.position",
    )


class BudgetLineItem(Base):
    __tablename__ = "budget_line_items"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_budget_line_items_quantity_positive"),
        CheckConstraint("unit_price > 0", name="ck_budget_line_items_unit_price_positive"),
    )

    id = Column(Integer, primary_key=True, index=True)
    budget_request_id = Column(
        Integer, ForeignKey("budget_requests.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position = Column(Integer, nullable=False, default=0)
    description = Column(Text, nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)
    total_amount = Column(Numeric(12, 2), nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    budget_request = orm_relationship("BudgetRequest", back_populates="line_items")


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True)
    timestamp = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    actor = Column(String, nullable=True)
    action = Column(String, nullable=False, index=True)
    target_entity_type = Column(String, nullable=True)
    target_entity_id = Column(String, nullable=True)
    before = Column(Text, nullable=True)
    after = Column(Text, nullable=True)
