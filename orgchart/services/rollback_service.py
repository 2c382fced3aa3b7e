"""
Rollback engine - applies the inverse of a recorded create/update/delete

Rollback is local to one entity: it overwrites the entity with the recorded
snapshot without checking for changes made after the entry was written, so
an intervening update by someone else is silently lost.
"""
import enum
import logging
from typing import Any, Dict, Mapping, Optional

from orgchart.core.actor import AuditContext
from orgchart.core.config import AuditConfig
from orgchart.core.exceptions import (
    AuditError,
    AuditErrorCode,
    EntityNotFoundError,
    FeatureDisabledError,
    MissingSnapshotError,
    NotFoundError,
    StorageFailureError,
    UnauthenticatedError,
    UnsupportedActionError,
    UnsupportedTargetTypeError,
)
from orgchart.models.audit_log import AuditAction, AuditLog, MUTATING_ACTIONS, TargetType
from orgchart.repositories.audit_log_store import AuditLogStore
from orgchart.repositories.entity_repository import EntityRepository
from orgchart.services.audit_service import AuditRecorder, ORIGINAL_ENTRY_KEY
from orgchart.services.snapshot_differ import generate_rollback_summary

logger = logging.getLogger(__name__)


class RollbackState(str, enum.Enum):
    FETCHED = "fetched"
    VALIDATED = "validated"
    APPLIED = "applied"
    RECORDED = "recorded"
    REJECTED = "rejected"


class RollbackResult:
    """Outcome of a rollback; truthy on success"""

    def __init__(
        self,
        entry_id: str,
        state: RollbackState,
        error: Optional[AuditError] = None,
        target_id: Optional[str] = None,
        rollback_entry: Optional[AuditLog] = None,
    ):
        self.entry_id = entry_id
        self.state = state
        self.error = error
        self.target_id = target_id
        self.rollback_entry = rollback_entry

    @property
    def success(self) -> bool:
        return self.error is None and self.state in (RollbackState.APPLIED, RollbackState.RECORDED)

    @property
    def error_code(self) -> Optional[AuditErrorCode]:
        return self.error.code if self.error is not None else None

    def __bool__(self) -> bool:
        return self.success

    def __repr__(self) -> str:
        return f"RollbackResult(entry_id={self.entry_id!r}, state={self.state.value}, error={self.error_code})"


class RollbackEngine:
    def __init__(
        self,
        store: AuditLogStore,
        repositories: Mapping[TargetType, EntityRepository],
        recorder: AuditRecorder,
        config: AuditConfig,
    ):
        self.store = store
        self.repositories = dict(repositories)
        self.recorder = recorder
        self.config = config

    def can_rollback(self, entry: AuditLog) -> bool:
        """Whether the UI should offer rollback for this entry"""
        return (
            self.config.enable_rollback
            and entry.action in {a.value for a in MUTATING_ACTIONS}
            and entry.target_type in {t.value for t in self.repositories}
        )

    def _validate(self, entry: AuditLog) -> EntityRepository:
        if not self.config.enable_rollback:
            raise FeatureDisabledError("Rollback is disabled")

        if entry.action not in {a.value for a in MUTATING_ACTIONS}:
            raise UnsupportedActionError(f"Action '{entry.action}' cannot be rolled back")

        if entry.action in (AuditAction.UPDATE.value, AuditAction.DELETE.value) and entry.before_data is None:
            raise MissingSnapshotError(f"Audit log entry {entry.id} has no prior snapshot")

        try:
            repository = self.repositories[TargetType(entry.target_type)]
        except (ValueError, KeyError):
            raise UnsupportedTargetTypeError(f"Rollback of {entry.target_type} is not supported")
        return repository

    @staticmethod
    def _apply(entry: AuditLog, repository: EntityRepository) -> Optional[str]:
        """Run the inverse operation and return the id of the affected entity"""
        before: Dict[str, Any] = entry.before_data or {}
        try:
            if entry.action == AuditAction.CREATE.value:
                repository.delete(entry.target_id)
                return entry.target_id
            if entry.action == AuditAction.UPDATE.value:
                repository.update(entry.target_id, before)
                return entry.target_id
            return repository.create(before)
        except (EntityNotFoundError, StorageFailureError) as exc:
            raise StorageFailureError(f"Rollback of audit log entry {entry.id} failed: {exc}") from exc

    def rollback(self, context: AuditContext, entry_id: str) -> RollbackResult:
        """
        Reverse a recorded action and record the rollback as a new entry

        Every rejection is returned with its taxonomy code; only contract
        violations (no entry id) raise.
        """
        if not entry_id:
            raise ValueError("entry_id is required")

        try:
            if not context.is_authenticated:
                raise UnauthenticatedError()
            entry = self.store.get_by_id(context.organization_id, entry_id)
            if entry is None:
                raise NotFoundError(f"Audit log entry {entry_id} not found")
        except AuditError as exc:
            logger.warning("Rollback of %s rejected: %s", entry_id, exc.code.value)
            return RollbackResult(entry_id, RollbackState.REJECTED, error=exc)

        state = RollbackState.FETCHED
        try:
            repository = self._validate(entry)
            state = RollbackState.VALIDATED
            target_id = self._apply(entry, repository)
        except AuditError as exc:
            logger.warning("Rollback of %s rejected in state %s: %s", entry_id, state.value, exc.code.value)
            return RollbackResult(entry_id, RollbackState.REJECTED, error=exc)

        logger.info("Rolled back %s %s %s (audit log %s)", entry.action, entry.target_type, target_id, entry_id)

        # Recording is best-effort; the applied rollback stands either way
        rollback_entry = self.recorder.record(
            context,
            action=AuditAction.ROLLBACK,
            target_type=TargetType(entry.target_type),
            target_id=target_id,
            target_name=entry.target_name,
            before_data=entry.after_data,
            after_data=entry.before_data,
            change_summary=generate_rollback_summary(entry_id, self.config.locale),
            metadata={ORIGINAL_ENTRY_KEY: entry_id},
        )
        state = RollbackState.RECORDED if rollback_entry is not None else RollbackState.APPLIED
        return RollbackResult(entry_id, state, target_id=target_id, rollback_entry=rollback_entry)
