"""
Persistent log store - append-only storage for audit log entries
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from orgchart.core.exceptions import StorageFailureError
from orgchart.models.audit_log import AuditLog
from orgchart.utils.datetime_utils import ensure_utc, now_utc

logger = logging.getLogger(__name__)


class AuditLogStore:
    def __init__(self, db: Session):
        self.db = db

    def _next_created_at(self, organization_id: str) -> datetime:
        """Current time, but never earlier than the tenant's latest entry"""
        latest = (
            self.db.query(func.max(AuditLog.created_at))
            .filter(AuditLog.organization_id == organization_id)
            .scalar()
        )
        created_at = now_utc()
        latest = ensure_utc(latest)
        if latest is not None and latest > created_at:
            return latest
        return created_at

    def insert(self, values: Dict[str, Any]) -> AuditLog:
        """Persist a new entry; id and created_at are assigned here"""
        try:
            entry = AuditLog(**values)
            entry.created_at = self._next_created_at(entry.organization_id)
            self.db.add(entry)
            self.db.commit()
            self.db.refresh(entry)
            return entry
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StorageFailureError("Failed to persist audit log entry") from exc

    def _filtered(
        self,
        organization_id: str,
        action: Optional[str] = None,
        target_type: Optional[str] = None,
        actor_email: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> Query:
        query = self.db.query(AuditLog).filter(AuditLog.organization_id == organization_id)
        if action:
            query = query.filter(AuditLog.action == action)
        if target_type:
            query = query.filter(AuditLog.target_type == target_type)
        if actor_email:
            query = query.filter(AuditLog.user_email == actor_email)
        if start_date is not None:
            query = query.filter(AuditLog.created_at >= start_date)
        if end_date is not None:
            query = query.filter(AuditLog.created_at <= end_date)
        return query

    def query(self, organization_id: str, offset: int, limit: int, **filters) -> List[AuditLog]:
        """Newest first; ties broken by id so paging is deterministic"""
        try:
            return (
                self._filtered(organization_id, **filters)
                .order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
                .offset(offset)
                .limit(limit)
                .all()
            )
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StorageFailureError("Failed to query audit log") from exc

    def count(self, organization_id: str, **filters) -> int:
        try:
            return self._filtered(organization_id, **filters).count()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StorageFailureError("Failed to count audit log entries") from exc

    def get_by_id(self, organization_id: str, entry_id: str) -> Optional[AuditLog]:
        try:
            return (
                self.db.query(AuditLog)
                .filter(AuditLog.organization_id == organization_id, AuditLog.id == entry_id)
                .first()
            )
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StorageFailureError("Failed to load audit log entry") from exc
