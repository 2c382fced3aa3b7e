"""
Tests for department endpoints
"""
import pytest
from fastapi import status
from sqlalchemy.orm import Session
from orgchart.core.config import AuditConfig, settings
from orgchart.core.deps import get_audit_config
from orgchart.models.audit_log import AuditLog
from orgchart.models.employee import Employee


@pytest.fixture
def sales(client, auth_headers):
    response = client.post("/api/v1/departments", json={"name": "Sales"}, headers=auth_headers)
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()


def test_department_crud_records_audit_entries(client, db: Session, auth_headers, sales):
    """Create, update and delete each leave one audit entry"""
    response = client.patch(
        f"/api/v1/departments/{sales['id']}",
        json={"name": "Field Sales", "department_order": 3},
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["name"] == "Field Sales"

    response = client.delete(f"/api/v1/departments/{sales['id']}", headers=auth_headers)
    assert response.status_code == status.HTTP_204_NO_CONTENT

    actions = [entry.action for entry in db.query(AuditLog).order_by(AuditLog.created_at).all()]
    assert sorted(actions) == ["create", "delete", "update"]

    update = db.query(AuditLog).filter(AuditLog.action == "update").one()
    assert update.before_data["name"] == "Sales"
    assert update.after_data["name"] == "Field Sales"
    assert update.change_summary == "Department Sales was updated (Name)"


def test_mutations_require_authentication(client, sales):
    response = client.post("/api/v1/departments", json={"name": "Legal"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED

    response = client.delete(f"/api/v1/departments/{sales['id']}")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_reads_are_public(client, sales):
    response = client.get("/api/v1/departments")
    assert response.status_code == status.HTTP_200_OK
    assert [d["name"] for d in response.json()] == ["Sales"]

    response = client.get(f"/api/v1/departments/{sales['id']}")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["created_at"].endswith("Z")


def test_duplicate_name_rejected_case_insensitively(client, auth_headers, sales):
    response = client.post("/api/v1/departments", json={"name": "sales"}, headers=auth_headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_unknown_parent_rejected(client, auth_headers):
    response = client.post("/api/v1/departments", json={"name": "Legal", "parent_id": "missing"}, headers=auth_headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_parent_cycle_rejected(client, auth_headers, sales):
    child = client.post(
        "/api/v1/departments", json={"name": "Inside Sales", "parent_id": sales["id"], "level": 2}, headers=auth_headers
    ).json()

    response = client.patch(f"/api/v1/departments/{sales['id']}", json={"parent_id": child["id"]}, headers=auth_headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST

    response = client.get("/api/v1/departments", params={"parent_id": sales["id"]})
    assert [d["name"] for d in response.json()] == ["Inside Sales"]


def test_delete_blocked_while_referenced(client, db: Session, auth_headers, sales):
    db.add(Employee(name="Taro", department_id=sales["id"]))
    db.commit()

    response = client.delete(f"/api/v1/departments/{sales['id']}", headers=auth_headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert db.query(AuditLog).filter(AuditLog.action == "delete").count() == 0


def test_update_unknown_department_is_404(client, auth_headers):
    response = client.patch("/api/v1/departments/missing", json={"name": "X"}, headers=auth_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND

    response = client.get("/api/v1/departments/missing")
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_mutation_still_succeeds_when_audit_disabled(client, db: Session, auth_headers):
    client.app.dependency_overrides[get_audit_config] = lambda: AuditConfig(
        organization_id=settings.ORGANIZATION_ID, enable_audit_log=False
    )
    response = client.post("/api/v1/departments", json={"name": "Legal"}, headers=auth_headers)

    assert response.status_code == status.HTTP_201_CREATED
    assert db.query(AuditLog).count() == 0
