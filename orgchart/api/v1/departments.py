"""
Department management endpoints
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from orgchart.core.actor import Actor, AuditContext
from orgchart.core.deps import get_audit_context, get_audit_recorder, get_db, require_actor
from orgchart.schemas.department import DepartmentCreate, DepartmentUpdate, DepartmentOut
from orgchart.services.audit_service import AuditRecorder
from orgchart.services.department_service import (
    create_department,
    delete_department,
    get_department,
    list_departments,
    update_department,
)

router = APIRouter()


@router.post("", response_model=DepartmentOut, status_code=201)
def create_department_endpoint(
    department_data: DepartmentCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_actor),
    context: AuditContext = Depends(get_audit_context),
    recorder: AuditRecorder = Depends(get_audit_recorder),
):
    """Create a new department"""
    return create_department(db, department_data, context, recorder)


@router.get("", response_model=List[DepartmentOut])
def list_departments_endpoint(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    parent_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """List departments in org chart order"""
    return list_departments(db, skip=skip, limit=limit, parent_id=parent_id)


@router.get("/{department_id}", response_model=DepartmentOut)
def get_department_endpoint(
    department_id: str,
    db: Session = Depends(get_db),
):
    """Get a department by ID"""
    department = get_department(db, department_id)
    if not department:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Department with id {department_id} not found"
        )
    return department


@router.patch("/{department_id}", response_model=DepartmentOut)
def update_department_endpoint(
    department_id: str,
    department_data: DepartmentUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_actor),
    context: AuditContext = Depends(get_audit_context),
    recorder: AuditRecorder = Depends(get_audit_recorder),
):
    """Update a department (rename, move under another parent, reorder)"""
    return update_department(db, department_id, department_data, context, recorder)


@router.delete("/{department_id}", status_code=204)
def delete_department_endpoint(
    department_id: str,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_actor),
    context: AuditContext = Depends(get_audit_context),
    recorder: AuditRecorder = Depends(get_audit_recorder),
):
    """Delete a department without employees or child departments"""
    delete_department(db, department_id, context, recorder)
    return None
