"""
Audit log schemas
"""
from datetime import datetime
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field, field_serializer, ConfigDict
from orgchart.models.audit_log import AuditAction, TargetType
from orgchart.utils.datetime_utils import iso_8601_utc


class AuditLogFilter(BaseModel):
    """Conjunctive filter shared by listing and counting"""
    action: Optional[AuditAction] = Field(None, description="Only entries with this action")
    target_type: Optional[TargetType] = Field(None, description="Only entries for this target type")
    actor_email: Optional[str] = Field(None, description="Only entries recorded for this actor")
    start_date: Optional[datetime] = Field(None, description="Inclusive lower bound on created_at")
    end_date: Optional[datetime] = Field(None, description="Inclusive upper bound on created_at")


class AuditLogPage(AuditLogFilter):
    """Filter plus paging; limit defaults to the configured page size"""
    offset: int = Field(default=0, description="Number of entries to skip (negative means 0)")
    limit: Optional[int] = Field(default=None, description="Page size, clamped to the configured maximum")


class AuditLogCreate(BaseModel):
    """Entry submitted by an external mutation handler"""
    action: AuditAction
    target_type: TargetType
    target_id: Optional[str] = None
    target_name: Optional[str] = None
    before_data: Optional[Dict[str, Any]] = None
    after_data: Optional[Dict[str, Any]] = None
    change_summary: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None


class AuditLogOut(BaseModel):
    """Schema for audit log output. Datetimes in UTC (Z)."""
    id: str
    organization_id: str
    user_email: str
    user_name: str
    action: str
    target_type: str
    target_id: Optional[str] = None
    target_name: Optional[str] = None
    before_data: Optional[Dict[str, Any]] = None
    after_data: Optional[Dict[str, Any]] = None
    change_summary: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    session_id: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = Field(None, validation_alias="meta_json")
    created_at: datetime
    can_rollback: bool = False

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("created_at", when_used="always")
    def _ser_datetime(self, dt):
        return iso_8601_utc(dt) if dt is not None else None


class AuditLogCountOut(BaseModel):
    count: int


class RecordResultOut(BaseModel):
    recorded: bool
    entry: Optional[AuditLogOut] = None


class RollbackOut(BaseModel):
    success: bool
    state: str
    original_entry_id: str
    target_id: Optional[str] = None
    rollback_entry_id: Optional[str] = None
