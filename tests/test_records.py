"""tests for payment record endpoints"""
import pytest

from app.core.config import settings
from app.schemas import READ_ONLY_MESSAGE
from conftest import ADMIN_EMAIL

RECORDS_URL = f"{settings.API_V1_STR}/records/"


def record_payload(**overrides):
    payload = {
        "salesperson": "V01 - Maria Perez",
        "client_code": "C-1001",
        "client_name": "Distribuidora Norte",
        "invoice": "F-000123",
        "amount": 150.5,
        "payment_method": "transfer",
        "issuing_bank": "Banco Uno",
        "receiving_bank": "Banco Dos",
        "reference": "REF-0001",
        "collection_type": "partial",
        "payment_date": "2026-10-15",
        "notes": "first instalment",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def created_record(client, auth_headers):
    response = client.post(RECORDS_URL, headers=auth_headers, json=record_payload())
    assert response.status_code == 201
    return response.json()


def test_create_record(client, auth_headers, created_record):
    assert created_record["created_by"] == "agent@example.com"
    assert created_record["invoice"] == "F-000123"
    assert float(created_record["amount"]) == 150.5


def test_create_record_unauthorized(client):
    response = client.post(RECORDS_URL, json=record_payload())
    assert response.status_code == 401


def test_create_record_duplicate_reference(client, auth_headers, created_record):
    response = client.post(RECORDS_URL, headers=auth_headers, json=record_payload(invoice="F-000999"))
    assert response.status_code == 400
    assert "Reference" in response.json()["detail"]


def test_create_record_rejects_non_positive_amount(client, auth_headers):
    response = client.post(RECORDS_URL, headers=auth_headers, json=record_payload(amount=0))
    assert response.status_code == 422


def test_list_only_own_records(client, auth_headers, admin_auth_headers, created_record):
    client.post(RECORDS_URL, headers=admin_auth_headers, json=record_payload(reference="REF-ADMIN"))

    data = client.get(RECORDS_URL, headers=auth_headers).json()
    assert data["total"] == 1
    assert [r["reference"] for r in data["items"]] == ["REF-0001"]

    admin_data = client.get(RECORDS_URL, headers=admin_auth_headers).json()
    assert admin_data["total"] == 2


def test_delete_own_record(client, auth_headers, created_record):
    response = client.delete(f"{RECORDS_URL}{created_record['id']}", headers=auth_headers)
    assert response.status_code == 200

    assert client.get(RECORDS_URL, headers=auth_headers).json()["total"] == 0
    response = client.delete(f"{RECORDS_URL}{created_record['id']}", headers=auth_headers)
    assert response.status_code == 404


def test_reference_reusable_after_delete(client, auth_headers, created_record):
    client.delete(f"{RECORDS_URL}{created_record['id']}", headers=auth_headers)
    response = client.post(RECORDS_URL, headers=auth_headers, json=record_payload())
    assert response.status_code == 201


def test_cannot_delete_someone_elses_record(client, admin_auth_headers, auth_headers, db_session):
    admin_record = client.post(RECORDS_URL, headers=admin_auth_headers, json=record_payload(reference="REF-ADMIN")).json()

    response = client.delete(f"{RECORDS_URL}{admin_record['id']}", headers=auth_headers)
    assert response.status_code == 403


def test_admin_can_delete_any_record(client, admin_auth_headers, created_record):
    response = client.delete(f"{RECORDS_URL}{created_record['id']}", headers=admin_auth_headers)
    assert response.status_code == 200


def test_read_only_mode_blocks_writes_but_not_reads(client, auth_headers, created_record, test_admin, db_gate):
    db_gate.enable({"mode": "read-only", "allowAdmins": False}, ADMIN_EMAIL)

    assert client.get(RECORDS_URL, headers=auth_headers).status_code == 200

    response = client.post(RECORDS_URL, headers=auth_headers, json=record_payload(reference="REF-0002"))
    assert response.status_code == 503
    assert response.json()["detail"] == READ_ONLY_MESSAGE

    response = client.delete(f"{RECORDS_URL}{created_record['id']}", headers=auth_headers)
    assert response.status_code == 503


def test_full_mode_blocks_reads(client, auth_headers, test_admin, db_gate):
    db_gate.enable({"mode": "full", "message": "Back at 14:00", "until": "2030-01-15T14:00:00Z"}, ADMIN_EMAIL)

    response = client.get(RECORDS_URL, headers=auth_headers)
    assert response.status_code == 503
    data = response.json()
    assert data["detail"] == "Back at 14:00 (until 2030-01-15 14:00 UTC)"
    assert data["until"].startswith("2030-01-15T14:00:00")


def test_admin_bypasses_full_mode(client, admin_auth_headers, db_gate):
    db_gate.enable({"mode": "full", "allowAdmins": True}, ADMIN_EMAIL)

    response = client.post(RECORDS_URL, headers=admin_auth_headers, json=record_payload())
    assert response.status_code == 201
    assert client.get(RECORDS_URL, headers=admin_auth_headers).status_code == 200


def test_disable_reopens_writes(client, auth_headers, test_admin, db_gate):
    db_gate.enable({"mode": "full"}, ADMIN_EMAIL)
    assert client.post(RECORDS_URL, headers=auth_headers, json=record_payload()).status_code == 503

    db_gate.disable(ADMIN_EMAIL)
    assert client.post(RECORDS_URL, headers=auth_headers, json=record_payload()).status_code == 201
