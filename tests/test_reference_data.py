import pytest
from pydantic import ValidationError

from budget_backend.schemas.schemas import BudgetCategoryCreate, DepartmentCreate
from budget_backend.services import reference_data


def test_departments_listed_by_name(client, create_department):
    create_department(name="Public Works")
    create_department(name="Finance")
    create_department(name="Information Technology")

    resp = client.get("/departments")

    assert resp.status_code == 200
    assert [entry["name"] for entry in resp.json()] == ["Finance", "Information Technology", "Public Works"]
    assert resp.json()[0]["contact_email"] == "john.doe@example.gov"


def test_categories_listed_by_name(client, create_category):
    create_category(name="Training")
    create_category(name="Capital Equipment")

    resp = client.get("/budget-categories")

    assert resp.status_code == 200
    assert [entry["name"] for entry in resp.json()] == ["Capital Equipment", "Training"]


def test_empty_reference_lists(client):
    assert client.get("/departments").json() == []
    assert client.get("/budget-categories").json() == []


def test_ensure_helpers_are_idempotent_on_code(db_session):
    payload = DepartmentCreate(
        name="Finance",
        code="FIN",
        head_name="Dana Whitfield",
        contact_email="finance@example.gov",
    )

    first = reference_data.ensure_department(db_session, payload)
    second = reference_data.ensure_department(db_session, payload)
    category = reference_data.ensure_budget_category(db_session, BudgetCategoryCreate(name="Operations", code="OPS"))

    assert first.id == second.id
    assert len(reference_data.list_departments(db_session)) == 1
    assert reference_data.get_budget_category(db_session, category.id).code == "OPS"


def test_department_input_requires_valid_email():
    with pytest.raises(ValidationError):
        DepartmentCreate(name="Finance", code="FIN", head_name="Dana", contact_email="not-an-email")


def test_healthcheck(client):
    resp = client.get("/healthcheck")

    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"
