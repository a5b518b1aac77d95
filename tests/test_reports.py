from __future__ import annotations

from familybudget.models import today_local

from conftest import add_txn


def _january(client, headers, categories):
    add_txn(client, headers, categories["Food"]["id"], 2500, "2024-01-05", "Groceries")
    add_txn(client, headers, categories["Monthly Bills & EMIs"]["id"], 1200, "2024-01-10", "Electricity")
    add_txn(client, headers, categories["Salary"]["id"], 50000, "2024-01-01", "Salary")


def test_monthly_summary(client, auth_headers, categories):
    _january(client, auth_headers, categories)
    add_txn(client, auth_headers, categories["Food"]["id"], 999, "2024-02-01")

    r = client.get("/api/reports/monthly/2024/1", headers=auth_headers)
    assert r.status_code == 200
    assert r.json() == {
        "total_income": 50000,
        "total_expenses": 3700,
        "total_savings": 46300,
        "savings_percentage": 92.6,
    }


def test_empty_month_is_all_zero(client, auth_headers):
    r = client.get("/api/reports/monthly/2023/6", headers=auth_headers)
    assert r.json() == {
        "total_income": 0,
        "total_expenses": 0,
        "total_savings": 0,
        "savings_percentage": 0,
    }


def test_overspent_month_has_negative_savings(client, auth_headers, categories):
    add_txn(client, auth_headers, categories["Salary"]["id"], 1000, "2024-03-01")
    add_txn(client, auth_headers, categories["Food"]["id"], 1500, "2024-03-02")
    body = client.get("/api/reports/monthly/2024/3", headers=auth_headers).json()
    assert body["total_savings"] == -500
    assert body["savings_percentage"] == -50


def test_invalid_month_is_rejected(client, auth_headers):
    assert client.get("/api/reports/monthly/2024/13", headers=auth_headers).status_code == 400
    assert client.get("/api/reports/monthly/2024/0", headers=auth_headers).status_code == 400


def test_annual_report_is_zero_filled(client, auth_headers, categories):
    _january(client, auth_headers, categories)
    add_txn(client, auth_headers, categories["Food"]["id"], 300, "2024-07-15")
    add_txn(client, auth_headers, categories["Salary"]["id"], 7777, "2023-12-31")

    body = client.get("/api/reports/annual/2024", headers=auth_headers).json()
    assert body["year"] == 2024
    months = body["monthly_data"]
    assert [m["month"] for m in months] == list(range(1, 13))
    assert months[0] == {"month": 1, "monthly_income": 50000, "monthly_expenses": 3700, "monthly_savings": 46300}
    assert months[6]["monthly_expenses"] == 300
    assert months[6]["monthly_savings"] == -300
    assert months[1] == {"month": 2, "monthly_income": 0, "monthly_expenses": 0, "monthly_savings": 0}
    assert body["total_annual_income"] == 50000
    assert body["total_annual_expenses"] == 4000
    assert body["total_annual_savings"] == 46000


def test_category_breakdown(client, auth_headers, categories):
    _january(client, auth_headers, categories)
    add_txn(client, auth_headers, categories["Food"]["id"], 500, "2024-01-20")
    add_txn(client, auth_headers, categories["Food"]["id"], 100, "2024-03-01")

    params = {"start_date": "2024-01-01", "end_date": "2024-01-31"}
    rows = client.get("/api/reports/category-breakdown", headers=auth_headers, params=params).json()
    assert [r["category_name"] for r in rows] == ["Salary", "Food", "Monthly Bills & EMIs"]
    food = rows[1]
    assert food["total_amount"] == 3000
    assert food["transaction_count"] == 2

    params["type"] = "expense"
    rows = client.get("/api/reports/category-breakdown", headers=auth_headers, params=params).json()
    assert [r["category_name"] for r in rows] == ["Food", "Monthly Bills & EMIs"]

    bad = {"start_date": "2024-02-01", "end_date": "2024-01-01"}
    assert client.get("/api/reports/category-breakdown", headers=auth_headers, params=bad).status_code == 400


def test_dashboard_overview_uses_current_month(client, auth_headers, categories):
    today = today_local().isoformat()
    add_txn(client, auth_headers, categories["Salary"]["id"], 2000, today)
    add_txn(client, auth_headers, categories["Food"]["id"], 500, today)
    add_txn(client, auth_headers, categories["Food"]["id"], 900, "2000-01-01")

    body = client.get("/api/reports/dashboard-overview", headers=auth_headers).json()
    assert body["total_income"] == 2000
    assert body["total_expenses"] == 500
    assert body["savings_percentage"] == 75


def test_quick_stats_and_recent_activity(client, auth_headers, categories):
    _january(client, auth_headers, categories)

    stats = client.get("/api/reports/quick-stats", headers=auth_headers).json()
    assert stats["total_transactions"] == 3
    assert stats["active_categories"] == len(categories)
    assert stats["budget_limits_set"] == 0

    recent = client.get("/api/reports/recent-activity", headers=auth_headers, params={"limit": 2}).json()
    assert [t["description"] for t in recent] == ["Electricity", "Groceries"]
    assert recent[0]["added_by_user_name"] == "Anna Smith"
