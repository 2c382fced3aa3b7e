"""
Audit query service - tenant-scoped, filtered, paginated reads
"""
import logging
from typing import Any, Dict, List, Optional

from orgchart.core.actor import AuditContext
from orgchart.core.config import AuditConfig
from orgchart.core.exceptions import NotFoundError, UnauthenticatedError
from orgchart.models.audit_log import AuditLog
from orgchart.repositories.audit_log_store import AuditLogStore
from orgchart.schemas.audit import AuditLogFilter, AuditLogPage
from orgchart.utils.datetime_utils import ensure_utc

logger = logging.getLogger(__name__)


class AuditQueryService:
    def __init__(self, store: AuditLogStore, config: AuditConfig):
        self.store = store
        self.config = config

    def clamp_page(self, offset: Optional[int], limit: Optional[int]) -> tuple:
        offset = max(offset or 0, 0)
        if limit is None:
            limit = self.config.page_size
        limit = max(1, min(limit, self.config.max_page_size))
        return offset, limit

    @staticmethod
    def _filters(flt: AuditLogFilter) -> Dict[str, Any]:
        return {
            "action": flt.action.value if flt.action else None,
            "target_type": flt.target_type.value if flt.target_type else None,
            "actor_email": flt.actor_email or None,
            "start_date": ensure_utc(flt.start_date),
            "end_date": ensure_utc(flt.end_date),
        }

    def list(self, context: AuditContext, page: Optional[AuditLogPage] = None) -> List[AuditLog]:
        """
        List entries newest first

        Unauthenticated callers get an empty list; storage errors propagate
        as StorageFailureError.
        """
        if not context.is_authenticated:
            logger.debug("No authenticated actor for audit log retrieval")
            return []

        page = page or AuditLogPage()
        offset, limit = self.clamp_page(page.offset, page.limit)
        return self.store.query(context.organization_id, offset, limit, **self._filters(page))

    def count(self, context: AuditContext, flt: Optional[AuditLogFilter] = None) -> int:
        """Total entries matching the filter (paging fields are ignored)"""
        if not context.is_authenticated:
            return 0
        return self.store.count(context.organization_id, **self._filters(flt or AuditLogFilter()))

    def get_by_id(self, context: AuditContext, entry_id: str) -> AuditLog:
        if not context.is_authenticated:
            raise UnauthenticatedError()
        entry = self.store.get_by_id(context.organization_id, entry_id)
        if entry is None:
            raise NotFoundError(f"Audit log entry {entry_id} not found")
        return entry
