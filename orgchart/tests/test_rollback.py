"""
Tests for rolling back audit log entries
"""
import pytest

from orgchart.core.config import AuditConfig
from orgchart.core.exceptions import AuditErrorCode
from orgchart.models.audit_log import AuditAction, AuditLog, TargetType
from orgchart.repositories.entity_repository import DepartmentRepository, EmployeeRepository
from orgchart.schemas.department import DepartmentCreate
from orgchart.schemas.employee import EmployeeCreate, EmployeeUpdate
from orgchart.services.department_service import create_department, delete_department
from orgchart.services.employee_service import create_employee, delete_employee, update_employee
from orgchart.services.rollback_service import RollbackEngine, RollbackState


def _latest(db, action, target_type="employee"):
    return (
        db.query(AuditLog)
        .filter(AuditLog.action == action, AuditLog.target_type == target_type)
        .order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
        .first()
    )


@pytest.fixture
def department(db, context, recorder):
    return create_department(db, DepartmentCreate(name="Sales"), context, recorder)


@pytest.fixture
def employee(db, context, recorder, department):
    return create_employee(
        db,
        EmployeeCreate(name="Taro", email="taro@example.com", department_id=department.id, position="Member"),
        context,
        recorder,
    )


def test_rollback_of_create_deletes_entity(db, rollback_engine, context, employee):
    employee_id = employee.id
    entry = _latest(db, "create")
    assert entry.target_id == employee_id

    result = rollback_engine.rollback(context, entry.id)

    assert result
    assert result.state == RollbackState.RECORDED
    assert not EmployeeRepository(db).exists(employee_id)


def test_rollback_of_update_restores_before_snapshot(db, rollback_engine, context, recorder, employee):
    update_employee(db, employee.id, EmployeeUpdate(position="Lead", email="lead@example.com"), context, recorder)
    entry = _latest(db, "update")

    result = rollback_engine.rollback(context, entry.id)

    assert result.success
    restored = EmployeeRepository(db).get(employee.id)
    assert restored["position"] == "Member"
    assert restored["email"] == "taro@example.com"


def test_rollback_of_delete_recreates_with_same_id(db, rollback_engine, context, recorder, employee):
    employee_id, department_id = employee.id, employee.department_id
    delete_employee(db, employee_id, context, recorder)
    entry = _latest(db, "delete")

    result = rollback_engine.rollback(context, entry.id)

    assert result
    assert result.target_id == employee_id
    recreated = EmployeeRepository(db).get(employee_id)
    assert recreated["name"] == "Taro"
    assert recreated["department_id"] == department_id


def test_rollback_entry_swaps_snapshots_and_references_original(db, rollback_engine, context, recorder, employee):
    update_employee(db, employee.id, EmployeeUpdate(position="Lead"), context, recorder)
    entry = _latest(db, "update")

    result = rollback_engine.rollback(context, entry.id)
    rollback_entry = result.rollback_entry

    assert rollback_entry.action == "rollback"
    assert rollback_entry.target_type == "employee"
    assert rollback_entry.target_id == employee.id
    assert rollback_entry.before_data == entry.after_data
    assert rollback_entry.after_data == entry.before_data
    assert rollback_entry.meta_json == {"original_entry_id": entry.id}
    assert entry.id in rollback_entry.change_summary


def test_rollback_of_department_delete(db, rollback_engine, context, recorder):
    department = create_department(db, DepartmentCreate(name="Legal", level=2), context, recorder)
    department_id = department.id
    delete_department(db, department_id, context, recorder)

    result = rollback_engine.rollback(context, _latest(db, "delete", "department").id)

    assert result
    assert DepartmentRepository(db).get(department_id)["level"] == 2


def test_login_entry_is_unsupported_and_touches_nothing(db, store, identity, context, recorder, audit_config):
    class ExplodingRepository:
        def __getattr__(self, name):
            raise AssertionError(f"repository.{name} must not be called")

    entry = recorder.record(context, AuditAction.LOGIN, TargetType.EMPLOYEE, "e1")
    engine = RollbackEngine(store, {TargetType.EMPLOYEE: ExplodingRepository()}, recorder, audit_config)

    result = engine.rollback(context, entry.id)

    assert not result
    assert result.state == RollbackState.REJECTED
    assert result.error_code == AuditErrorCode.UNSUPPORTED_ACTION


def test_rollback_entries_cannot_be_rolled_back(db, rollback_engine, context, employee):
    first = rollback_engine.rollback(context, _latest(db, "create").id)

    result = rollback_engine.rollback(context, first.rollback_entry.id)

    assert result.error_code == AuditErrorCode.UNSUPPORTED_ACTION


def test_update_without_before_snapshot_is_rejected(rollback_engine, recorder, context):
    entry = recorder.record(context, AuditAction.UPDATE, TargetType.EMPLOYEE, "e1", "Taro", after_data={"name": "Taro"})

    result = rollback_engine.rollback(context, entry.id)

    assert result.error_code == AuditErrorCode.MISSING_SNAPSHOT


def test_unsupported_target_type(rollback_engine, recorder, context):
    entry = recorder.record(context, AuditAction.UPDATE, TargetType.ROLE, "r1", "Manager", before_data={"name": "A"}, after_data={"name": "B"})

    result = rollback_engine.rollback(context, entry.id)

    assert result.error_code == AuditErrorCode.UNSUPPORTED_TARGET_TYPE
    assert rollback_engine.can_rollback(entry) is False


def test_disabled_rollback_is_rejected_first(db, engine_for, context, employee):
    engine = engine_for(AuditConfig(organization_id="org_test", enable_rollback=False))
    entry = _latest(db, "create")

    result = engine.rollback(context, entry.id)

    assert result.error_code == AuditErrorCode.FEATURE_DISABLED
    assert engine.can_rollback(entry) is False
    assert EmployeeRepository(db).exists(employee.id)


def test_unknown_entry_is_not_found(rollback_engine, context):
    assert rollback_engine.rollback(context, "missing").error_code == AuditErrorCode.NOT_FOUND


def test_anonymous_caller_is_unauthenticated(db, rollback_engine, anonymous_context, employee):
    result = rollback_engine.rollback(anonymous_context, _latest(db, "create").id)

    assert result.error_code == AuditErrorCode.UNAUTHENTICATED
    assert EmployeeRepository(db).exists(employee.id)


def test_empty_entry_id_is_a_caller_error(rollback_engine, context):
    with pytest.raises(ValueError):
        rollback_engine.rollback(context, "")


def test_rollback_of_create_for_vanished_entity_is_storage_failure(db, rollback_engine, context, recorder, employee):
    create_entry = _latest(db, "create")
    delete_employee(db, create_entry.target_id, context, recorder)

    result = rollback_engine.rollback(context, create_entry.id)

    assert result.error_code == AuditErrorCode.STORAGE_FAILURE


def test_recreate_with_missing_foreign_key_is_storage_failure(db, rollback_engine, context, recorder, employee, department):
    employee_id, department_id = employee.id, department.id
    delete_employee(db, employee_id, context, recorder)
    employee_delete = _latest(db, "delete")
    delete_department(db, department_id, context, recorder)

    result = rollback_engine.rollback(context, employee_delete.id)

    assert result.error_code == AuditErrorCode.STORAGE_FAILURE
    assert not EmployeeRepository(db).exists(employee_id)


def test_applied_rollback_stands_when_recording_fails(db, rollback_engine, context, employee, monkeypatch):
    employee_id = employee.id
    monkeypatch.setattr(rollback_engine.recorder, "record", lambda *args, **kwargs: None)

    result = rollback_engine.rollback(context, _latest(db, "create").id)

    assert result
    assert result.state == RollbackState.APPLIED
    assert result.rollback_entry is None
    assert not EmployeeRepository(db).exists(employee_id)


def test_can_rollback_for_mutations(db, rollback_engine, employee):
    assert rollback_engine.can_rollback(_latest(db, "create")) is True
