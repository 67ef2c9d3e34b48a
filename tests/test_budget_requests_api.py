from budget_backend.models.models import BudgetLineItem, BudgetRequest


def _create_body(department, category, **overrides):
    body = {
        "title": "Field laptops",
        "description": "Replace inspection laptops",
        "department_id": department.id,
        "category_id": category.id,
        "requested_amount": 2500.00,
        "justification": "Devices are out of warranty",
        "priority": "high",
        "fiscal_year": 2025,
        "expected_start_date": "2025-01-01",
        "expected_end_date": "2025-06-30",
        "submitted_by": "Alex Kim",
        "line_items": [
            {"description": "Laptop", "quantity": 10, "unit_price": 100.00, "notes": "Standard issue"},
            {"description": "Dock", "quantity": 5, "unit_price": 300.00, "notes": None},
        ],
    }
    body.update(overrides)
    return body


def test_budget_request_lifecycle_over_http(client, department, category):
    resp = client.post("/budget-requests", json=_create_body(department, category))
    assert resp.status_code == 201
    data = resp.json()
    request_id = data["id"]
    assert data["status"] == "draft"
    assert data["requested_amount"] == 2500.0
    assert [item["total_amount"] for item in data["line_items"]] == [1000.0, 1500.0]
    assert resp.headers["X-Request-ID"]

    resp = client.get(f"/budget-requests/{request_id}")
    assert resp.status_code == 200
    assert resp.json()["expected_end_date"] == "2025-06-30"

    resp = client.post(f"/budget-requests/{request_id}/submit")
    assert resp.status_code == 200
    assert resp.json()["status"] == "processing"
    assert resp.json()["submitted_at"] is not None

    resp = client.post(f"/budget-requests/{request_id}/submit")
    assert resp.status_code == 409
    assert "processing" in resp.json()["detail"]

    approval = {"status": "approved", "reviewed_by": "Manager"}
    resp = client.patch(f"/budget-requests/{request_id}", json=approval)
    assert resp.status_code == 200
    reviewed_at = resp.json()["reviewed_at"]
    assert reviewed_at is not None

    resp = client.patch(f"/budget-requests/{request_id}", json=approval)
    assert resp.status_code == 200
    assert resp.json()["reviewed_at"] == reviewed_at


def test_create_returns_field_errors(client, department, category):
    body = _create_body(department, category, title="", line_items=[])

    resp = client.post("/budget-requests", json=body)

    assert resp.status_code == 422
    assert set(resp.json()["errors"]) == {"title", "line_items"}


def test_create_with_unknown_references_returns_404(client, db_session, department, category):
    resp = client.post("/budget-requests", json=_create_body(department, category, department_id=4242))
    assert resp.status_code == 404
    assert "Department not found" in resp.json()["detail"]

    resp = client.post("/budget-requests", json=_create_body(department, category, category_id=4242))
    assert resp.status_code == 404
    assert "Budget category not found" in resp.json()["detail"]

    assert db_session.query(BudgetRequest).count() == 0
    assert db_session.query(BudgetLineItem).count() == 0


def test_create_with_amount_mismatch_returns_400(client, department, category):
    resp = client.post("/budget-requests", json=_create_body(department, category, requested_amount=3000))

    assert resp.status_code == 400
    assert "does not match" in resp.json()["detail"]


def test_missing_request_returns_404(client):
    assert client.get("/budget-requests/999").status_code == 404
    assert client.patch("/budget-requests/999", json={"title": "x"}).status_code == 404
    assert client.post("/budget-requests/999/submit").status_code == 404


def test_update_invalid_transition_returns_409(client, insert_budget_request):
    stored = insert_budget_request(status="rejected")

    resp = client.patch(f"/budget-requests/{stored.id}", json={"status": "processing"})

    assert resp.status_code == 409


def test_list_reports_total_and_has_more(client, insert_budget_request):
    for _ in range(3):
        insert_budget_request(status="review")
    insert_budget_request(status="draft")

    resp = client.get("/budget-requests", params={"status": "review", "limit": 2})
    assert resp.status_code == 200
    data = resp.json()
    assert len(data["requests"]) == 2
    assert data["total"] == 3
    assert data["hasMore"] is True
    assert all(isinstance(entry["requested_amount"], float) for entry in data["requests"])

    resp = client.get("/budget-requests", params={"limit": 101})
    assert resp.status_code == 422
    resp = client.get("/budget-requests", params={"offset": -1})
    assert resp.status_code == 422
