#!/usr/bin/env python
"""
Seed script to populate the database with reference data for local development.

Usage:
    python scripts/seed_data.py --sample-requests 3
"""

import argparse
import logging
from datetime import date
from decimal import Decimal

from budget_backend.config import get_settings
from budget_backend.constants import DEFAULT_BUDGET_CATEGORIES, DEFAULT_DEPARTMENTS
from budget_backend.core.logging import configure_logging
from budget_backend.database import Base, build_engine, build_session_factory
from budget_backend.models import models as _all_models  # noqa: F401
from budget_backend.schemas.schemas import (
    BudgetCategoryCreate,
    BudgetLineItemCreate,
    BudgetRequestCreate,
    DepartmentCreate,
)
from budget_backend.services import budget_requests as budget_request_service
from budget_backend.services import reference_data

logger = logging.getLogger("seed_data")


def seed_reference_data(session) -> None:
    for entry in DEFAULT_DEPARTMENTS:
        reference_data.ensure_department(session, DepartmentCreate(**entry))
    for entry in DEFAULT_BUDGET_CATEGORIES:
        reference_data.ensure_budget_category(session, BudgetCategoryCreate(**entry))


def create_sample_request(session, index: int) -> None:
    department = reference_data.list_departments(session)[index % len(DEFAULT_DEPARTMENTS)]
    category = reference_data.list_budget_categories(session)[index % len(DEFAULT_BUDGET_CATEGORIES)]
    year = date.today().year + 1
    payload = BudgetRequestCreate(
        title=f"Sample request {index + 1}",
        description="Replacement of aging field laptops for inspection staff.",
        department_id=department.id,
        category_id=category.id,
        requested_amount=Decimal("4800.00"),
        justification="Current devices are out of warranty and failing.",
        priority="medium",
        fiscal_year=year,
        expected_start_date=date(year, 1, 1),
        expected_end_date=date(year, 6, 30),
        submitted_by="Seed Script",
        line_items=[
            BudgetLineItemCreate(description="Rugged laptop", quantity=4, unit_price=Decimal("1100.00")),
            BudgetLineItemCreate(description="Docking station", quantity=2, unit_price=Decimal("200.00")),
        ],
    )
    budget_request_service.create_budget_request(session, payload)


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed departments, categories and sample budget requests.")
    parser.add_argument("--sample-requests", type=int, default=0, help="Number of draft requests to create.")
    args = parser.parse_args()

    settings = get_settings()
    configure_logging(settings.log_level, settings.log_format)
    engine = build_engine(settings)
    Base.metadata.create_all(bind=engine)
    session_factory = build_session_factory(engine)
    try:
        with session_factory() as session:
            seed_reference_data(session)
            for index in range(args.sample_requests):
                create_sample_request(session, index)
        logger.info("Seeded reference data and %d sample requests.", args.sample_requests)
    finally:
        engine.dispose()


if __name__ == "__main__":
    main()
