"""
Department service - business logic for department management
"""
from sqlalchemy.orm import Session
from sqlalchemy import func
from fastapi import HTTPException, status
from typing import List, Optional
from orgchart.core.actor import AuditContext
from orgchart.models.audit_log import AuditAction
from orgchart.models.department import Department
from orgchart.models.employee import Employee
from orgchart.repositories.entity_repository import DepartmentRepository
from orgchart.schemas.department import DepartmentCreate, DepartmentUpdate
from orgchart.services.audit_service import AuditRecorder


def _ensure_unique_name(db: Session, name: str, exclude_id: Optional[str] = None) -> None:
    """Department names are unique case-insensitively"""
    query = db.query(Department).filter(func.lower(Department.name) == func.lower(name))
    if exclude_id is not None:
        query = query.filter(Department.id != exclude_id)
    if query.first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Department with name '{name}' already exists"
        )


def _check_parent_cycle(db: Session, department_id: str, parent_id: str) -> bool:
    """
    Check if setting parent_id would create a cycle

    Returns:
        True if cycle would be created, False otherwise
    """
    if department_id == parent_id:
        return True

    visited = set()
    current_id = parent_id
    while current_id is not None:
        if current_id == department_id:
            return True
        if current_id in visited:
            break
        visited.add(current_id)
        parent = db.query(Department).filter(Department.id == current_id).first()
        if not parent:
            break
        current_id = parent.parent_id

    return False


def _ensure_parent(db: Session, parent_id: Optional[str], department_id: Optional[str] = None) -> None:
    if parent_id is None:
        return
    if not get_department(db, parent_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Parent department with id {parent_id} not found"
        )
    if department_id is not None and _check_parent_cycle(db, department_id, parent_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot set parent department: would create invalid hierarchy"
        )


def create_department(
    db: Session,
    department_data: DepartmentCreate,
    context: AuditContext,
    recorder: AuditRecorder
) -> Department:
    """
    Create a new department and record it in the audit log

    Raises:
        HTTPException: If the name already exists or the parent is unknown
    """
    _ensure_unique_name(db, department_data.name)
    _ensure_parent(db, department_data.parent_id)

    repository = DepartmentRepository(db)
    department_id = repository.create(department_data.model_dump())

    recorder.record_department_action(context, AuditAction.CREATE, repository.get(department_id))
    return get_department(db, department_id)


def list_departments(
    db: Session,
    skip: int = 0,
    limit: int = 100,
    parent_id: Optional[str] = None
) -> List[Department]:
    """List departments in display order, optionally only the children of one parent"""
    query = db.query(Department)
    if parent_id is not None:
        query = query.filter(Department.parent_id == parent_id)
    return (
        query.order_by(Department.level, Department.department_order, Department.name)
        .offset(skip)
        .limit(limit)
        .all()
    )


def get_department(db: Session, department_id: str) -> Optional[Department]:
    """Get a department by ID"""
    return db.query(Department).filter(Department.id == department_id).first()


def update_department(
    db: Session,
    department_id: str,
    department_data: DepartmentUpdate,
    context: AuditContext,
    recorder: AuditRecorder
) -> Department:
    """
    Update a department and record the before/after snapshots

    Raises:
        HTTPException: If the name conflicts or the new parent is invalid
        EntityNotFoundError: If the department does not exist
    """
    repository = DepartmentRepository(db)
    before = repository.get(department_id)

    changes = department_data.model_dump(exclude_unset=True)
    if changes.get("name") is not None:
        _ensure_unique_name(db, changes["name"], exclude_id=department_id)
    if "parent_id" in changes:
        _ensure_parent(db, changes["parent_id"], department_id)

    repository.update(department_id, changes)

    recorder.record_department_action(
        context, AuditAction.UPDATE, repository.get(department_id), before_data=before
    )
    return get_department(db, department_id)


def delete_department(
    db: Session,
    department_id: str,
    context: AuditContext,
    recorder: AuditRecorder
) -> None:
    """
    Delete a department that nothing references any more

    Raises:
        HTTPException: If employees or child departments still reference it
        EntityNotFoundError: If the department does not exist
    """
    repository = DepartmentRepository(db)
    before = repository.get(department_id)

    if db.query(Employee).filter(Employee.department_id == department_id).first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Department still has employees"
        )
    if db.query(Department).filter(Department.parent_id == department_id).first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Department still has child departments"
        )

    repository.delete(department_id)
    recorder.record_department_action(context, AuditAction.DELETE, before, before_data=before)
