"""Integration tests for API endpoints"""

import pytest
import uuid
from decimal import Decimal
from fastapi.testclient import TestClient


@pytest.fixture
def allocation_payload():
    """Sample portfolio and loans: NY banned by bank 2, facility 1 capped at 0.0625"""
    return {
        "banks": [{"id": 1, "name": "Chase"}, {"id": 2, "name": "Bank of America"}],
        "facilities": [
            {"id": 1, "amount": 1000, "interest_rate": 0.0625, "bank_id": 1},
            {"id": 2, "amount": 500, "interest_rate": 0.125, "bank_id": 1},
            {"id": 3, "amount": 2000, "interest_rate": 0.078125, "bank_id": 2},
        ],
        "covenants": [
            {"bank_id": 2, "facility_id": None, "max_default_likelihood": None, "banned_state": "NY"},
            {"bank_id": 1, "facility_id": 1, "max_default_likelihood": 0.0625},
            {"bank_id": 1, "facility_id": 2, "banned_state": "CA"},
        ],
        "loans": [
            {"id": 1, "interest_rate": 0.25, "amount": 640, "default_likelihood": 0.03125, "state": "TX"},
            {"id": 2, "interest_rate": 0.25, "amount": 320, "default_likelihood": 0.125, "state": "NY"},
            {"id": 3, "interest_rate": 0.5, "amount": 512, "default_likelihood": 0.0625, "state": "CA"},
            {"id": 4, "interest_rate": 0.25, "amount": 1024, "default_likelihood": 0.0625, "state": "TX"},
            {"id": 5, "interest_rate": 0.5, "amount": 256, "default_likelihood": 0.25, "state": "NY"},
        ],
    }


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient, allocation_payload):
    """Test Prometheus metrics endpoint"""
    client.post("/v1/allocations", json=allocation_payload)

    response = client.get("/metrics")
    assert response.status_code == 200
    assert "loan_allocator_loans_total" in response.text
    assert "loan_allocator_rejections_total" in response.text


def test_request_id_header(client: TestClient):
    response = client.get("/health")
    assert response.headers["X-Request-ID"]


def test_request_id_header_reuses_caller_id(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "batch-42"})
    assert response.headers["X-Request-ID"] == "batch-42"


def test_metrics_label_run_lookups_by_route_template(client: TestClient):
    """Looking up many runs adds no per-id latency series"""
    run_ids = [str(uuid.uuid4()) for _ in range(5)]
    for run_id in run_ids:
        assert client.get(f"/v1/allocations/{run_id}").status_code == 404

    text = client.get("/metrics").text
    series = [
        line for line in text.splitlines()
        if line.startswith("http_request_duration_seconds_count")
        and "/v1/allocations/{run_id}" in line
        and 'status="404"' in line
    ]
    assert len(series) == 1
    assert not any(run_id in text for run_id in run_ids)


def test_create_allocation(client: TestClient, allocation_payload):
    """Test POST /v1/allocations assigns loans first-fit by facility rate"""
    response = client.post("/v1/allocations", json=allocation_payload)

    assert response.status_code == 200
    data = response.json()
    assert data["loan_count"] == 5
    assert data["assigned_count"] == 4
    assert data["unassigned_count"] == 1
    assert data["assignments"] == [
        {"loan_id": 1, "facility_id": 1},
        {"loan_id": 2, "facility_id": 2},
        {"loan_id": 3, "facility_id": 3},
        {"loan_id": 4, "facility_id": 3},
    ]
    assert [(y["facility_id"], Decimal(y["expected_yield"])) for y in data["yields"]] == [
        (1, Decimal("95")),
        (2, Decimal("-10")),
        (3, Decimal("264")),
    ]
    assert data["rejections"] == []


def test_create_allocation_with_rejections(client: TestClient, allocation_payload):
    allocation_payload["include_rejections"] = True

    response = client.post("/v1/allocations", json=allocation_payload)

    assert response.status_code == 200
    rejections = response.json()["rejections"]
    assert len(rejections) == 7
    assert rejections[0]["loan_id"] == 2
    assert rejections[0]["facility_id"] == 1
    assert rejections[0]["reason"] == "default_likelihood"


def test_create_allocation_unknown_bank(client: TestClient, allocation_payload):
    """Facilities must reference a submitted bank"""
    allocation_payload["facilities"][0]["bank_id"] = 99

    response = client.post("/v1/allocations", json=allocation_payload)

    assert response.status_code == 422
    assert "unknown bank" in response.json()["detail"]


def test_create_allocation_invalid_loan(client: TestClient, allocation_payload):
    allocation_payload["loans"][0]["default_likelihood"] = 1.5

    response = client.post("/v1/allocations", json=allocation_payload)

    assert response.status_code == 422


def test_get_allocation(client: TestClient, allocation_payload):
    """Test GET /v1/allocations/{run_id} returns the stored run"""
    run_id = client.post("/v1/allocations", json=allocation_payload).json()["run_id"]

    response = client.get(f"/v1/allocations/{run_id}")

    assert response.status_code == 200
    data = response.json()
    assert data["run_id"] == run_id
    assert data["loan_count"] == 5
    assert [(a["loan_id"], a["facility_id"]) for a in data["assignments"]] == [(1, 1), (2, 2), (3, 3), (4, 3)]
    assert [Decimal(y["expected_yield"]) for y in data["yields"]] == [Decimal("95"), Decimal("-10"), Decimal("264")]


def test_get_allocation_not_found(client: TestClient):
    """Test GET /v1/allocations/{run_id} with unknown ID"""
    fake_uuid = "00000000-0000-0000-0000-000000000000"
    response = client.get(f"/v1/allocations/{fake_uuid}")
    assert response.status_code == 404


def test_get_allocation_invalid_id(client: TestClient):
    response = client.get("/v1/allocations/not-a-uuid")
    assert response.status_code == 400


def test_list_allocations(client: TestClient, allocation_payload):
    """Test GET /v1/allocations lists stored runs"""
    first = client.post("/v1/allocations", json=allocation_payload).json()["run_id"]
    allocation_payload["loans"] = allocation_payload["loans"][:1]
    second = client.post("/v1/allocations", json=allocation_payload).json()["run_id"]

    response = client.get("/v1/allocations?limit=5")

    assert response.status_code == 200
    runs = response.json()["runs"]
    assert {run["run_id"] for run in runs} == {first, second}
    assert {run["run_id"]: run["assigned_count"] for run in runs} == {first: 4, second: 1}
