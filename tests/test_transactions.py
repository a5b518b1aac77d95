from __future__ import annotations

import uuid

from conftest import add_txn


def test_create_normalizes_sign_by_category_type(client, auth_headers, categories):
    expense = add_txn(client, auth_headers, categories["Food"]["id"], 2500, "2024-01-05", "Groceries")
    assert expense["amount"] == -2500
    assert expense["category_name"] == "Food"
    assert expense["category_type"] == "expense"
    assert expense["added_by_user_name"] == "Anna Smith"

    income = add_txn(client, auth_headers, categories["Salary"]["id"], -50000, "2024-01-01", "Salary")
    assert income["amount"] == 50000


def test_create_validation(client, auth_headers, categories):
    r = client.post(
        "/api/transactions",
        headers=auth_headers,
        json={"amount": 10, "category_id": "not-a-uuid", "transaction_date": "2024-01-01"},
    )
    assert r.status_code == 400

    r = client.post(
        "/api/transactions",
        headers=auth_headers,
        json={"amount": 0, "category_id": categories["Food"]["id"], "transaction_date": "2024-01-01"},
    )
    assert r.status_code == 400

    r = client.post(
        "/api/transactions",
        headers=auth_headers,
        json={"amount": 10, "category_id": categories["Food"]["id"]},
    )
    assert r.status_code == 400

    r = client.post(
        "/api/transactions",
        headers=auth_headers,
        json={
            "amount": 10,
            "category_id": categories["Food"]["id"],
            "transaction_date": "2024-01-01",
            "is_recurring": True,
        },
    )
    assert r.status_code == 400


def test_create_with_unknown_category_is_not_found(client, auth_headers):
    r = client.post(
        "/api/transactions",
        headers=auth_headers,
        json={"amount": 10, "category_id": str(uuid.uuid4()), "transaction_date": "2024-01-01"},
    )
    assert r.status_code == 404
    assert r.json()["detail"] == "Category not found"


def test_list_filters_and_ordering(client, auth_headers, categories):
    add_txn(client, auth_headers, categories["Food"]["id"], 100, "2024-01-05", "Bakery")
    add_txn(client, auth_headers, categories["Entertainment"]["id"], 800, "2024-01-12", "Movie Tickets")
    add_txn(client, auth_headers, categories["Food"]["id"], 300, "2024-02-02", "Market")

    r = client.get("/api/transactions", headers=auth_headers)
    assert r.status_code == 200
    assert r.headers["X-Total-Count"] == "3"
    dates = [t["transaction_date"] for t in r.json()]
    assert dates == ["2024-02-02", "2024-01-12", "2024-01-05"]

    r = client.get(
        "/api/transactions",
        headers=auth_headers,
        params={"start_date": "2024-01-01", "end_date": "2024-01-31"},
    )
    assert {t["description"] for t in r.json()} == {"Bakery", "Movie Tickets"}

    r = client.get("/api/transactions", headers=auth_headers, params={"category_id": categories["Food"]["id"]})
    assert len(r.json()) == 2

    # search hits description or category name
    r = client.get("/api/transactions", headers=auth_headers, params={"search": "movie"})
    assert [t["description"] for t in r.json()] == ["Movie Tickets"]
    r = client.get("/api/transactions", headers=auth_headers, params={"search": "food"})
    assert len(r.json()) == 2

    r = client.get("/api/transactions", headers=auth_headers, params={"page": 2, "page_size": 2})
    assert [t["description"] for t in r.json()] == ["Bakery"]


def test_recent_limits_results(client, auth_headers, categories):
    for day in range(1, 13):
        add_txn(client, auth_headers, categories["Food"]["id"], day, f"2024-03-{day:02d}")
    rows = client.get("/api/transactions/recent", headers=auth_headers).json()
    assert len(rows) == 10
    assert rows[0]["transaction_date"] == "2024-03-12"


def test_update_transaction(client, auth_headers, categories):
    tx = add_txn(client, auth_headers, categories["Food"]["id"], 100, "2024-01-05", "Bakery")

    r = client.put(
        f"/api/transactions/{tx['id']}",
        headers=auth_headers,
        json={"amount": 150, "description": "Bakery and coffee"},
    )
    assert r.status_code == 200, r.text
    assert r.json()["amount"] == -150
    assert r.json()["description"] == "Bakery and coffee"

    # moving to an income category flips the stored sign
    r = client.put(
        f"/api/transactions/{tx['id']}",
        headers=auth_headers,
        json={"category_id": categories["Other Income"]["id"]},
    )
    assert r.json()["amount"] == 150
    assert r.json()["category_type"] == "income"

    r = client.put(
        f"/api/transactions/{tx['id']}",
        headers=auth_headers,
        json={"is_recurring": True, "recurrence_pattern": "monthly"},
    )
    assert r.json()["is_recurring"] is True
    assert r.json()["recurrence_pattern"] == "monthly"


def test_update_and_delete_missing_transaction(client, auth_headers):
    missing = uuid.uuid4()
    assert client.put(f"/api/transactions/{missing}", headers=auth_headers, json={"amount": 1}).status_code == 404
    assert client.delete(f"/api/transactions/{missing}", headers=auth_headers).status_code == 404


def test_delete_transaction(client, auth_headers, categories):
    tx = add_txn(client, auth_headers, categories["Food"]["id"], 100, "2024-01-05")
    assert client.delete(f"/api/transactions/{tx['id']}", headers=auth_headers).status_code == 204
    assert client.get(f"/api/transactions/{tx['id']}", headers=auth_headers).status_code == 404
