from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, List, Literal, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, EmailStr, Field

from ..constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from ..services.money import to_number

BudgetRequestStatus = Literal["draft", "processing", "review", "approved", "rejected"]
BudgetRequestPriority = Literal["low", "medium", "high", "critical"]

# Stored decimals always leave the service through money.to_number.
Amount = Annotated[float, BeforeValidator(to_number)]


class DepartmentCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    code: str = Field(min_length=1, max_length=20)
    description: Optional[str] = None
    head_name: str = Field(min_length=1, max_length=100)
    contact_email: EmailStr
    contact_phone: Optional[str] = None


class DepartmentRead(BaseModel):
    id: int
    name: str
    code: str
    description: Optional[str]
    head_name: str
    contact_email: str
    contact_phone: Optional[str]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BudgetCategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    code: str = Field(min_length=1, max_length=20)
    description: Optional[str] = None


class BudgetCategoryRead(BaseModel):
    id: int
    name: str
    code: str
    description: Optional[str]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BudgetLineItemCreate(BaseModel):
    description: str = ""
    quantity: int
    unit_price: Decimal
    notes: Optional[str] = None


class BudgetLineItemRead(BaseModel):
    id: int
    budget_request_id: int
    description: str
    quantity: int
    unit_price: Amount
    total_amount: Amount
    notes: Optional[str]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BudgetRequestCreate(BaseModel):
    """Create payload; only types are enforced here, business rules live in services.validation."""

    title: str = ""
    description: str = ""
    department_id: int
    category_id: int
    requested_amount: Decimal
    justification: str = ""
    priority: str
    fiscal_year: int
    expected_start_date: Optional[date] = None
    expected_end_date: Optional[date] = None
    submitted_by: str = ""
    line_items: List[BudgetLineItemCreate] = []


class BudgetRequestUpdate(BaseModel):
    """Partial update. Fields left out of the payload keep their stored value;
    ``model_fields_set`` tells an omitted field apart from an explicit null."""

    title: Optional[str] = None
    description: Optional[str] = None
    department_id: Optional[int] = None
    category_id: Optional[int] = None
    requested_amount: Optional[Decimal] = None
    justification: Optional[str] = None
    priority: Optional[str] = None
    fiscal_year: Optional[int] = None
    expected_start_date: Optional[date] = None
    expected_end_date: Optional[date] = None
    status: Optional[str] = None
    review_notes: Optional[str] = None
    reviewed_by: Optional[str] = None
    admin_override: bool = False

    def changes(self) -> dict:
        data = self.model_dump(exclude_unset=True)
        data.pop("admin_override", None)
        return data


class BudgetRequestRead(BaseModel):
    id: int
    title: str
    description: str
    department_id: int
    category_id: int
    requested_amount: Amount
    justification: str
    priority: BudgetRequestPriority
    status: BudgetRequestStatus
    fiscal_year: int
    expected_start_date: date
    expected_end_date: date
    submitted_by: str
    submitted_at: Optional[datetime]
    reviewed_by: Optional[str]
    reviewed_at: Optional[datetime]
    review_notes: Optional[str]
    created_at: datetime
    updated_at: datetime
    line_items: List[BudgetLineItemRead] = []

    model_config = ConfigDict(from_attributes=True)


class BudgetRequestFilter(BaseModel):
    department_id: Optional[int] = None
    status: Optional[BudgetRequestStatus] = None
    fiscal_year: Optional[int] = None
    priority: Optional[BudgetRequestPriority] = None
    limit: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    offset: int = Field(default=0, ge=0)


class BudgetRequestPage(BaseModel):
    requests: List[BudgetRequestRead]
    total: int
    has_more: bool = Field(alias="hasMore")

    model_config = ConfigDict(populate_by_name=True)
