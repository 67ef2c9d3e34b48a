import sys
from collections.abc import Callable, Generator
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from budget_backend.api.dependencies import get_db  # noqa: E402
from budget_backend.config import Settings  # noqa: E402
from budget_backend.database import Base, build_engine, build_session_factory  # noqa: E402
from budget_backend.main import create_app  # noqa: E402
# Import the full models module so all tables (including audit_logs) register with Base metadata.
from budget_backend.models import models as _all_models  # noqa: E402,F401
from budget_backend.models.models import BudgetCategory, BudgetRequest, Department  # noqa: E402
from budget_backend.schemas.schemas import BudgetLineItemCreate, BudgetRequestCreate  # noqa: E402


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'test.db'}",
        auto_create_tables=False,
        log_level="WARNING",
    )


@pytest.fixture
def db_session(test_settings: Settings) -> Generator[Session, None, None]:
    """Provide a fresh SQLite database for each test."""
    engine = build_engine(test_settings)
    Base.metadata.create_all(engine)
    SessionLocal = build_session_factory(engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture
def app(test_settings: Settings, db_session: Session) -> Generator[FastAPI, None, None]:
    application = create_app(test_settings)

    def _override_get_db():
        try:
            yield db_session
        finally:
            pass

    application.dependency_overrides[get_db] = _override_get_db
    yield application
    application.dependency_overrides.clear()
    application.state.engine.dispose()


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    test_client = TestClient(app)
    try:
        yield test_client
    finally:
        test_client.close()


@pytest.fixture
def create_department(db_session: Session) -> Callable[..., Department]:
    counter = {"value": 0}

    def _create(name: str = "Test Department", code: str | None = None) -> Department:
        counter["value"] += 1
        department = Department(
            name=name,
            code=code or f"DEPT{counter['value']}",
            description="Department used in tests",
            head_name="John Doe",
            contact_email="john.doe@example.gov",
            contact_phone="123-456-7890",
        )
        db_session.add(department)
        db_session.commit()
        return department

    return _create


@pytest.fixture
def create_category(db_session: Session) -> Callable[..., BudgetCategory]:
    counter = {"value": 0}

    def _create(name: str = "Test Category", code: str | None = None) -> BudgetCategory:
        counter["value"] += 1
        category = BudgetCategory(
            name=name,
            code=code or f"CAT{counter['value']}",
            description="Category used in tests",
        )
        db_session.add(category)
        db_session.commit()
        return category

    return _create


@pytest.fixture
def department(create_department) -> Department:
    return create_department()


@pytest.fixture
def category(create_category) -> BudgetCategory:
    return create_category()


@pytest.fixture
def make_create_payload(department: Department, category: BudgetCategory) -> Callable[..., BudgetRequestCreate]:
    """Build a valid create payload: 10 x 100.00 + 5 x 300.00 = 2500.00."""

    def _make(**overrides: Any) -> BudgetRequestCreate:
        data: dict[str, Any] = {
            "title": "Test Budget Request",
            "description": "A budget request for testing purposes",
            "department_id": department.id,
            "category_id": category.id,
            "requested_amount": Decimal("2500.00"),
            "justification": "This is needed for testing our budget system",
            "priority": "medium",
            "fiscal_year": 2024,
            "expected_start_date": date(2024, 1, 1),
            "expected_end_date": date(2024, 12, 31),
            "submitted_by": "Test User",
            "line_items": [
                BudgetLineItemCreate(
                    description="Test Item 1", quantity=10, unit_price=Decimal("100.00"), notes="First test item"
                ),
                BudgetLineItemCreate(description="Test Item 2", quantity=5, unit_price=Decimal("300.00"), notes=None),
            ],
        }
        data.update(overrides)
        return BudgetRequestCreate(**data)

    return _make


@pytest.fixture
def insert_budget_request(
    db_session: Session, department: Department, category: BudgetCategory
) -> Callable[..., BudgetRequest]:
    """Insert a request row directly, bypassing the service, to stage arbitrary states."""

    def _insert(**overrides: Any) -> BudgetRequest:
        values: dict[str, Any] = {
            "title": "Stored Budget Request",
            "description": "Stored description",
            "department_id": department.id,
            "category_id": category.id,
            "requested_amount": Decimal("50000.00"),
            "justification": "Stored justification",
            "priority": "medium",
            "status": "draft",
            "fiscal_year": 2024,
            "expected_start_date": date(2024, 1, 1),
            "expected_end_date": date(2024, 12, 31),
            "submitted_by": "Test User",
        }
        values.update(overrides)
        budget_request = BudgetRequest(**values)
        db_session.add(budget_request)
        db_session.commit()
        return budget_request

    return _insert
