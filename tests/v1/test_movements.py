"""Tests for ledger endpoints."""

from fastapi import status
from fastapi.testclient import TestClient

from tutorbook.models import Student


def _movement(client: TestClient, student_id: str, kind: str, amount: str, when: str, **extra):
    payload = {"student_id": student_id, "kind": kind, "amount": amount, "date": when}
    payload.update(extra)
    return client.post("/api/v1/movements/", json=payload)


def test_create_and_list_movements(client: TestClient, db_student: Student) -> None:
    r = _movement(client, db_student.id, "debt", "100", "2025-01-05T17:00:00")
    assert r.status_code == status.HTTP_201_CREATED
    assert r.json()["month_key"] == "2025-01"
    r = _movement(
        client, db_student.id, "payment", "40", "2025-01-10T18:00:00", payer="mother"
    )
    assert r.json()["payer"] == "mother"

    rows = client.get(
        "/api/v1/movements/", params={"student_id": db_student.id, "month": "2025-01"}
    ).json()
    assert [row["kind"] for row in rows] == ["debt", "payment"]

    totals = client.get(
        f"/api/v1/movements/students/{db_student.id}/totals", params={"month": "2025-01"}
    ).json()
    assert totals == {"debt": "100.00", "paid": "40.00", "pending": "60.00"}


def test_invalid_movements_return_422(client: TestClient, db_student: Student) -> None:
    r = _movement(client, db_student.id, "debt", "0", "2025-01-05T17:00:00")
    assert r.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert r.json()["error"] == "ValidationError"

    r = _movement(client, db_student.id, "refund", "10", "2025-01-05T17:00:00")
    assert r.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    r = _movement(client, db_student.id, "debt", "1e30", "2025-01-05T17:00:00")
    assert r.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert r.json()["error"] == "ValidationError"

    r = client.post("/api/v1/movements/", json={"kind": "debt", "amount": "10"})
    assert r.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    assert client.get("/api/v1/movements/").json() == []


def test_totals_status_and_history(client: TestClient, db_student: Student) -> None:
    _movement(client, db_student.id, "debt", "50", "2025-01-05T17:00:00")
    _movement(client, "s-unknown", "debt", "500", "2025-01-05T17:00:00")

    rows = client.get("/api/v1/movements/totals", params={"month": "2025-01"}).json()
    assert [row["name"] for row in rows] == ["Lucía Gómez"]

    buckets = client.get("/api/v1/movements/status", params={"month": "2025-01"}).json()
    assert buckets["settled"] == []
    assert buckets["owing"][0]["pending"] == "50.00"

    history = client.get(
        f"/api/v1/movements/students/{db_student.id}/history", params={"year": 2025}
    ).json()
    assert [row["month_key"] for row in history] == ["2025-01"]

    balance = client.get(
        f"/api/v1/movements/students/{db_student.id}/running-balance",
        params={"month": "2025-01"},
    ).json()
    assert balance[0]["balance"] == "50.00"


def test_bad_month_query_is_rejected(client: TestClient) -> None:
    r = client.get("/api/v1/movements/totals", params={"month": "2025-13"})
    assert r.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_delete_and_undo(client: TestClient, db_student: Student) -> None:
    first = _movement(client, db_student.id, "payment", "10", "2025-01-03T17:00:00").json()
    _movement(client, db_student.id, "payment", "20", "2025-01-09T17:00:00")

    r = client.post(
        "/api/v1/movements/undo-last",
        json={"student_id": db_student.id, "kind": "payment", "month_key": "2025-01"},
    )
    assert r.status_code == status.HTTP_200_OK
    assert r.json()["amount"] == "20.00"

    assert client.delete(f"/api/v1/movements/{first['id']}").status_code == 204
    assert client.delete(f"/api/v1/movements/{first['id']}").status_code == 404

    r = client.post(
        "/api/v1/movements/undo-last",
        json={"student_id": db_student.id, "kind": "payment", "month_key": "2025-01"},
    )
    assert r.status_code == status.HTTP_404_NOT_FOUND


def test_clear_month_and_clean_orphans(client: TestClient, db_student: Student) -> None:
    _movement(client, db_student.id, "debt", "10", "2025-01-03T17:00:00")
    _movement(client, db_student.id, "debt", "10", "2025-02-03T17:00:00")
    _movement(client, "s-unknown", "debt", "10", "2025-02-03T17:00:00")

    assert client.delete("/api/v1/movements/months/2025-01").json() == {"removed": 1}
    assert client.post("/api/v1/movements/clean-orphans").json() == {"removed": 1}
    assert len(client.get("/api/v1/movements/").json()) == 1
