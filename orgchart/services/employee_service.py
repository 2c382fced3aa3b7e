"""
Employee service - business logic for employee management
"""
import logging
from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from typing import Iterable, List, Optional
from orgchart.core.actor import AuditContext
from orgchart.models.audit_log import AuditAction
from orgchart.models.department import Department
from orgchart.models.employee import Employee
from orgchart.repositories.entity_repository import EmployeeRepository
from orgchart.schemas.employee import EmployeeCreate, EmployeeUpdate
from orgchart.services.audit_service import AuditRecorder

logger = logging.getLogger(__name__)


def _ensure_departments(db: Session, department_ids: Iterable[Optional[str]]) -> None:
    """Every referenced department (primary or concurrent) must exist"""
    for department_id in department_ids:
        if department_id is None:
            continue
        if not db.query(Department).filter(Department.id == department_id).first():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Department with id {department_id} not found"
            )


def create_employee(
    db: Session,
    employee_data: EmployeeCreate,
    context: AuditContext,
    recorder: AuditRecorder
) -> Employee:
    """
    Create a new employee and record it in the audit log

    Raises:
        HTTPException: If a referenced department does not exist
    """
    _ensure_departments(db, [employee_data.department_id, *(employee_data.departments or [])])

    repository = EmployeeRepository(db)
    employee_id = repository.create(employee_data.model_dump())

    recorder.record_employee_action(context, AuditAction.CREATE, repository.get(employee_id))
    return get_employee(db, employee_id)


def list_employees(
    db: Session,
    skip: int = 0,
    limit: int = 100,
    department_id: Optional[str] = None
) -> List[Employee]:
    """List employees, optionally only those whose primary department matches"""
    query = db.query(Employee)
    if department_id is not None:
        query = query.filter(Employee.department_id == department_id)
    return query.order_by(Employee.name, Employee.id).offset(skip).limit(limit).all()


def get_employee(db: Session, employee_id: str) -> Optional[Employee]:
    """Get an employee by ID"""
    return db.query(Employee).filter(Employee.id == employee_id).first()


def update_employee(
    db: Session,
    employee_id: str,
    employee_data: EmployeeUpdate,
    context: AuditContext,
    recorder: AuditRecorder
) -> Employee:
    """
    Update an employee (transfer, concurrent posts, profile fields)

    Raises:
        HTTPException: If a referenced department does not exist
        EntityNotFoundError: If the employee does not exist
    """
    repository = EmployeeRepository(db)
    before = repository.get(employee_id)

    changes = employee_data.model_dump(exclude_unset=True)
    _ensure_departments(db, [changes.get("department_id"), *(changes.get("departments") or [])])

    repository.update(employee_id, changes)
    after = repository.get(employee_id)
    if after.get("department_id") != before.get("department_id"):
        logger.info("Employee %s moved from %s to %s", employee_id, before.get("department_id"), after.get("department_id"))

    recorder.record_employee_action(context, AuditAction.UPDATE, after, before_data=before)
    return get_employee(db, employee_id)


def delete_employee(
    db: Session,
    employee_id: str,
    context: AuditContext,
    recorder: AuditRecorder
) -> None:
    """
    Delete an employee

    Raises:
        EntityNotFoundError: If the employee does not exist
    """
    repository = EmployeeRepository(db)
    before = repository.get(employee_id)
    repository.delete(employee_id)
    recorder.record_employee_action(context, AuditAction.DELETE, before, before_data=before)
