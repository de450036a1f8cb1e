"""
Tests for Budgets and Summary API endpoints
"""


def _budget(client, category, limit, month=3, year=2026):
    return client.post(
        "/api/v1/budgets/",
        json={"category": category, "limit": limit, "month": month, "year": year},
    )


def _expense(client, category, amount, date):
    return client.post(
        "/api/v1/transactions/",
        json={"type": "expense", "category": category, "amount": amount, "date": date},
    )


def test_upsert_budget(authenticated_client):
    created = _budget(authenticated_client, "Food", "5000")
    assert created.status_code == 201
    assert created.json()["limit"] == "5000.00"

    updated = _budget(authenticated_client, "Food", "6000")
    assert updated.status_code == 201
    assert updated.json()["id"] == created.json()["id"]

    listed = authenticated_client.get("/api/v1/budgets/", params={"month": 3, "year": 2026}).json()
    assert len(listed) == 1
    assert listed[0]["limit"] == "6000.00"


def test_upsert_budget_validation(authenticated_client):
    response = _budget(authenticated_client, " ", "100")
    assert response.status_code == 400
    assert response.json()["detail"] == "Category is required"

    response = _budget(authenticated_client, "Food", "-1")
    assert response.status_code == 400


def test_delete_budget(authenticated_client):
    budget_id = _budget(authenticated_client, "Food", "100").json()["id"]

    assert authenticated_client.delete(f"/api/v1/budgets/{budget_id}").status_code == 200
    assert authenticated_client.delete(f"/api/v1/budgets/{budget_id}").status_code == 404


def test_groups(authenticated_client):
    data = authenticated_client.get("/api/v1/budgets/groups").json()

    assert data["groups"][0] == "Food"
    assert data["groups"][-1] == "Other"
    assert data["version"] >= 1


def test_progress(authenticated_client):
    _expense(authenticated_client, "Zomato", "300", "2026-03-03T13:00:00")
    _expense(authenticated_client, "Rent payment", "1200", "2026-03-01T10:00:00")
    _budget(authenticated_client, "Food", "250")
    _budget(authenticated_client, "Rent", "1500")
    _budget(authenticated_client, "Shopping", "0")

    response = authenticated_client.get("/api/v1/budgets/progress", params={"month": 3, "year": 2026})

    assert response.status_code == 200
    assert response.json() == [
        {"category": "Food", "limit": "250.00", "spent": "300.00", "percent": 120.0, "status": "exceeded"},
        {"category": "Rent", "limit": "1500.00", "spent": "1200.00", "percent": 80.0, "status": "warning"},
    ]


def test_progress_rejects_bad_month(authenticated_client):
    assert authenticated_client.get("/api/v1/budgets/progress", params={"month": 13}).status_code == 422


def test_summary_and_charts(authenticated_client):
    authenticated_client.post(
        "/api/v1/transactions/",
        json={"type": "income", "category": "Salary", "amount": "1000", "date": "2026-03-01T09:00:00"},
    )
    _expense(authenticated_client, "Swiggy", "900", "2026-03-02T20:00:00")
    _budget(authenticated_client, "Food", "1000")

    summary = authenticated_client.get("/api/v1/summary/", params={"month": 3, "year": 2026}).json()
    assert summary["income"] == "1000.00"
    assert summary["expense"] == "900.00"
    assert summary["balance"] == "100.00"
    assert summary["savings_rate"] == 10.0
    assert summary["warning"] == 1
    assert summary["currency"] == "INR"

    charts = authenticated_client.get(
        "/api/v1/summary/charts", params={"month": 3, "year": 2026, "months": 2},
    ).json()
    assert charts["expenses_by_category"] == [{"category": "Food", "amount": "900.00"}]
    assert [b["key"] for b in charts["income_vs_expense"]] == ["2026-02", "2026-03"]
    assert charts["budget_progress"][0]["status"] == "warning"


def test_period_year_out_of_range(authenticated_client):
    progress = authenticated_client.get("/api/v1/budgets/progress", params={"month": 12, "year": 9999})
    assert progress.status_code == 422

    summary = authenticated_client.get("/api/v1/summary/", params={"month": 12, "year": 9999})
    assert summary.status_code == 422

    last = authenticated_client.get("/api/v1/budgets/progress", params={"month": 12, "year": 9998})
    assert last.status_code == 200
    assert last.json() == []


def test_charts_window_before_year_one(authenticated_client):
    response = authenticated_client.get("/api/v1/summary/charts", params={"month": 1, "year": 1})
    assert response.status_code == 422

    single = authenticated_client.get("/api/v1/summary/charts", params={"month": 1, "year": 1, "months": 1})
    assert single.status_code == 200
    assert [b["key"] for b in single.json()["income_vs_expense"]] == ["0001-01"]
