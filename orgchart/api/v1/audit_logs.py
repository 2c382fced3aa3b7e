"""
Audit log endpoints - history browsing, external recording and rollback
"""
from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Response, status
from orgchart.core.actor import Actor, AuditContext
from orgchart.core.deps import (
    get_audit_context,
    get_audit_query_service,
    get_audit_recorder,
    get_rollback_engine,
    require_actor,
)
from orgchart.models.audit_log import AuditAction, AuditLog, TargetType
from orgchart.schemas.audit import (
    AuditLogCountOut,
    AuditLogCreate,
    AuditLogFilter,
    AuditLogOut,
    AuditLogPage,
    RecordResultOut,
    RollbackOut,
)
from orgchart.services.audit_query_service import AuditQueryService
from orgchart.services.audit_service import AuditRecorder
from orgchart.services.rollback_service import RollbackEngine

router = APIRouter()


def _to_out(entry: AuditLog, engine: RollbackEngine) -> AuditLogOut:
    out = AuditLogOut.model_validate(entry)
    return out.model_copy(update={"can_rollback": engine.can_rollback(entry)})


@router.get("", response_model=List[AuditLogOut])
def list_audit_logs_endpoint(
    offset: int = Query(0),
    limit: Optional[int] = Query(None),
    action: Optional[AuditAction] = Query(None),
    target_type: Optional[TargetType] = Query(None),
    actor_email: Optional[str] = Query(None),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    context: AuditContext = Depends(get_audit_context),
    service: AuditQueryService = Depends(get_audit_query_service),
    engine: RollbackEngine = Depends(get_rollback_engine),
):
    """
    List audit log entries, newest first

    Anonymous callers get an empty list rather than an error.
    """
    page = AuditLogPage(
        offset=offset,
        limit=limit,
        action=action,
        target_type=target_type,
        actor_email=actor_email,
        start_date=start_date,
        end_date=end_date,
    )
    return [_to_out(entry, engine) for entry in service.list(context, page)]


@router.get("/count", response_model=AuditLogCountOut)
def count_audit_logs_endpoint(
    action: Optional[AuditAction] = Query(None),
    target_type: Optional[TargetType] = Query(None),
    actor_email: Optional[str] = Query(None),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    context: AuditContext = Depends(get_audit_context),
    service: AuditQueryService = Depends(get_audit_query_service),
):
    """Total entries matching the filters, for pagination controls"""
    flt = AuditLogFilter(
        action=action,
        target_type=target_type,
        actor_email=actor_email,
        start_date=start_date,
        end_date=end_date,
    )
    return AuditLogCountOut(count=service.count(context, flt))


@router.post("", response_model=RecordResultOut, status_code=201)
def record_audit_log_endpoint(
    payload: AuditLogCreate,
    response: Response,
    context: AuditContext = Depends(get_audit_context),
    recorder: AuditRecorder = Depends(get_audit_recorder),
    engine: RollbackEngine = Depends(get_rollback_engine),
):
    """
    Record an entry on behalf of an external mutation handler

    Returns 202 with recorded=false when the entry was not recorded.
    """
    entry = recorder.record(
        context,
        action=payload.action,
        target_type=payload.target_type,
        target_id=payload.target_id,
        target_name=payload.target_name,
        before_data=payload.before_data,
        after_data=payload.after_data,
        change_summary=payload.change_summary,
        metadata=payload.metadata,
    )
    if entry is None:
        response.status_code = status.HTTP_202_ACCEPTED
        return RecordResultOut(recorded=False)
    return RecordResultOut(recorded=True, entry=_to_out(entry, engine))


@router.get("/{entry_id}", response_model=AuditLogOut)
def get_audit_log_endpoint(
    entry_id: str,
    context: AuditContext = Depends(get_audit_context),
    service: AuditQueryService = Depends(get_audit_query_service),
    engine: RollbackEngine = Depends(get_rollback_engine),
):
    """Get one entry with its before/after snapshots"""
    return _to_out(service.get_by_id(context, entry_id), engine)


@router.post("/{entry_id}/rollback", response_model=RollbackOut)
def rollback_audit_log_endpoint(
    entry_id: str,
    actor: Actor = Depends(require_actor),
    context: AuditContext = Depends(get_audit_context),
    engine: RollbackEngine = Depends(get_rollback_engine),
):
    """
    Undo the recorded action

    Rejections surface as the matching error code (see AUDIT_ERROR_STATUS).
    """
    result = engine.rollback(context, entry_id)
    if not result:
        raise result.error
    return RollbackOut(
        success=True,
        state=result.state.value,
        original_entry_id=entry_id,
        target_id=result.target_id,
        rollback_entry_id=result.rollback_entry.id if result.rollback_entry is not None else None,
    )
