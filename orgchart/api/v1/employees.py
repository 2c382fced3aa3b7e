"""
Employee management endpoints
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from orgchart.core.actor import Actor, AuditContext
from orgchart.core.deps import get_audit_context, get_audit_recorder, get_db, require_actor
from orgchart.schemas.employee import EmployeeCreate, EmployeeUpdate, EmployeeOut
from orgchart.services.audit_service import AuditRecorder
from orgchart.services.employee_service import (
    create_employee,
    delete_employee,
    get_employee,
    list_employees,
    update_employee,
)

router = APIRouter()


@router.post("", response_model=EmployeeOut, status_code=201)
def create_employee_endpoint(
    employee_data: EmployeeCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_actor),
    context: AuditContext = Depends(get_audit_context),
    recorder: AuditRecorder = Depends(get_audit_recorder),
):
    """Create a new employee"""
    return create_employee(db, employee_data, context, recorder)


@router.get("", response_model=List[EmployeeOut])
def list_employees_endpoint(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    department_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """List employees, optionally filtered by primary department"""
    return list_employees(db, skip=skip, limit=limit, department_id=department_id)


@router.get("/{employee_id}", response_model=EmployeeOut)
def get_employee_endpoint(
    employee_id: str,
    db: Session = Depends(get_db),
):
    """Get an employee by ID"""
    employee = get_employee(db, employee_id)
    if not employee:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Employee with id {employee_id} not found"
        )
    return employee


@router.patch("/{employee_id}", response_model=EmployeeOut)
def update_employee_endpoint(
    employee_id: str,
    employee_data: EmployeeUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_actor),
    context: AuditContext = Depends(get_audit_context),
    recorder: AuditRecorder = Depends(get_audit_recorder),
):
    """Update an employee (transfer, concurrent posts, profile fields)"""
    return update_employee(db, employee_id, employee_data, context, recorder)


@router.delete("/{employee_id}", status_code=204)
def delete_employee_endpoint(
    employee_id: str,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_actor),
    context: AuditContext = Depends(get_audit_context),
    recorder: AuditRecorder = Depends(get_audit_recorder),
):
    """Delete an employee"""
    delete_employee(db, employee_id, context, recorder)
    return None
