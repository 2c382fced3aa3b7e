"""
Audit log model

Entries are append-only: once flushed, an entry is never updated or deleted.
"""
import enum
from sqlalchemy import Column, String, Text, DateTime, JSON, Index, event
from orgchart.db.base import Base, generate_uuid


class AuditAction(str, enum.Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    ROLLBACK = "rollback"
    LOGIN = "login"
    LOGOUT = "logout"


class TargetType(str, enum.Enum):
    EMPLOYEE = "employee"
    DEPARTMENT = "department"
    ROLE = "role"
    EDITOR = "editor"
    SYSTEM = "system"


# Actions whose entries must carry a snapshot and may be rolled back
MUTATING_ACTIONS = frozenset({AuditAction.CREATE, AuditAction.UPDATE, AuditAction.DELETE})


class AuditLog(Base):
    __tablename__ = "org_chart_audit_logs"
    __table_args__ = (
        Index("ix_org_chart_audit_logs_org_created", "organization_id", "created_at", "id"),
    )

    id = Column(String(36), primary_key=True, index=True, default=generate_uuid)
    organization_id = Column(String, nullable=False, index=True)
    user_email = Column(String, nullable=False, index=True)
    user_name = Column(String, nullable=False)
    action = Column(String, nullable=False, index=True)
    target_type = Column(String, nullable=False, index=True)
    target_id = Column(String, nullable=True)
    target_name = Column(String, nullable=True)
    before_data = Column(JSON, nullable=True)
    after_data = Column(JSON, nullable=True)
    change_summary = Column(Text, nullable=True)
    ip_address = Column(String, nullable=True)
    user_agent = Column(String, nullable=True)
    session_id = Column(String, nullable=True)
    # "metadata" is reserved on declarative classes
    meta_json = Column("metadata", JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)


class AuditLogImmutableError(RuntimeError):
    pass


@event.listens_for(AuditLog, "before_update")
def _reject_update(mapper, connection, target):
    raise AuditLogImmutableError(f"Audit log entry {target.id} is append-only and cannot be updated")


@event.listens_for(AuditLog, "before_delete")
def _reject_delete(mapper, connection, target):
    raise AuditLogImmutableError(f"Audit log entry {target.id} is append-only and cannot be deleted")
