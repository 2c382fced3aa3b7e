"""
Audit domain error taxonomy
"""
import enum
from typing import Optional


class AuditErrorCode(str, enum.Enum):
    FEATURE_DISABLED = "feature_disabled"
    UNAUTHENTICATED = "unauthenticated"
    NOT_FOUND = "not_found"
    UNSUPPORTED_ACTION = "unsupported_action"
    UNSUPPORTED_TARGET_TYPE = "unsupported_target_type"
    MISSING_SNAPSHOT = "missing_snapshot"
    STORAGE_FAILURE = "storage_failure"
    NETWORK_FAILURE = "network_failure"


class AuditError(Exception):
    """Base class for audit/rollback failures carrying a taxonomy code"""

    code: AuditErrorCode = AuditErrorCode.STORAGE_FAILURE
    default_message = "Audit operation failed"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class FeatureDisabledError(AuditError):
    code = AuditErrorCode.FEATURE_DISABLED
    default_message = "Feature is disabled"


class UnauthenticatedError(AuditError):
    code = AuditErrorCode.UNAUTHENTICATED
    default_message = "Authentication required"


class NotFoundError(AuditError):
    code = AuditErrorCode.NOT_FOUND
    default_message = "Audit log entry not found"


class EntityNotFoundError(NotFoundError):
    default_message = "Entity not found"


class UnsupportedActionError(AuditError):
    code = AuditErrorCode.UNSUPPORTED_ACTION
    default_message = "This action cannot be rolled back"


class UnsupportedTargetTypeError(AuditError):
    code = AuditErrorCode.UNSUPPORTED_TARGET_TYPE
    default_message = "Rollback is not supported for this target type"


class MissingSnapshotError(AuditError):
    code = AuditErrorCode.MISSING_SNAPSHOT
    default_message = "No prior snapshot recorded; cannot roll back"


class StorageFailureError(AuditError):
    code = AuditErrorCode.STORAGE_FAILURE
    default_message = "Storage operation failed"


class NetworkFailureError(AuditError):
    code = AuditErrorCode.NETWORK_FAILURE
    default_message = "Network lookup failed"
