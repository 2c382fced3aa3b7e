"""
Audit logging service

Recording never interrupts the mutation it describes: every failure is logged
and reported to the caller as "not recorded" (None).
"""
import logging
from typing import Any, Mapping, Optional

from orgchart.core.actor import AuditContext
from orgchart.core.config import AuditConfig
from orgchart.models.audit_log import AuditAction, AuditLog, MUTATING_ACTIONS, TargetType
from orgchart.repositories.audit_log_store import AuditLogStore
from orgchart.services.identity_cache import IdentityContextCache
from orgchart.services.snapshot_differ import generate_change_summary
from orgchart.utils.json_serializer import sanitize_snapshot, to_json_safe

logger = logging.getLogger(__name__)

ORIGINAL_ENTRY_KEY = "original_entry_id"


class AuditRecorder:
    def __init__(self, store: AuditLogStore, identity: IdentityContextCache, config: AuditConfig):
        self.store = store
        self.identity = identity
        self.config = config

    def record(
        self,
        context: AuditContext,
        action: AuditAction,
        target_type: TargetType,
        target_id: Optional[str] = None,
        target_name: Optional[str] = None,
        before_data: Optional[Mapping[str, Any]] = None,
        after_data: Optional[Mapping[str, Any]] = None,
        change_summary: Optional[str] = None,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> Optional[AuditLog]:
        """
        Create an audit log entry

        Args:
            context: Request context carrying the actor and provenance
            action: Action performed (create, update, delete, rollback, login, logout)
            target_type: Kind of entity affected
            target_id: ID of the affected entity (optional)
            target_name: Display name of the affected entity (optional)
            before_data: Snapshot before the action (None for create)
            after_data: Snapshot after the action (None for delete)
            change_summary: Summary text; generated from the snapshots when omitted
            metadata: Action-specific context

        Returns:
            The persisted AuditLog, or None when nothing was recorded
        """
        if not self.config.enable_audit_log:
            logger.debug("Audit log disabled by feature flag")
            return None

        if context.actor is None:
            logger.debug("No authenticated actor, skipping audit log")
            return None

        try:
            action = AuditAction(action)
            target_type = TargetType(target_type)
        except ValueError as exc:
            logger.warning("Refusing audit entry with unknown action or target type: %s", exc)
            return None

        if action in MUTATING_ACTIONS and before_data is None and after_data is None:
            logger.warning("Refusing %s audit entry for %s %s without snapshots", action.value, target_type.value, target_id)
            return None

        if action == AuditAction.ROLLBACK and not (metadata or {}).get(ORIGINAL_ENTRY_KEY):
            logger.warning("Refusing rollback audit entry without %s", ORIGINAL_ENTRY_KEY)
            return None

        try:
            ip_address = context.ip_address or self.identity.get_network_origin()

            if change_summary is None:
                change_summary = generate_change_summary(
                    action, target_type, target_name, before_data, after_data, self.config.locale
                )

            entry = self.store.insert({
                "organization_id": context.organization_id,
                "user_email": context.actor.email,
                "user_name": context.actor.display_name or context.actor.email,
                "action": action.value,
                "target_type": target_type.value,
                "target_id": None if target_id is None else str(target_id),
                "target_name": target_name,
                "before_data": sanitize_snapshot(before_data),
                "after_data": sanitize_snapshot(after_data),
                "change_summary": change_summary,
                "ip_address": ip_address,
                "user_agent": context.user_agent,
                "session_id": context.session_id,
                "meta_json": to_json_safe(dict(metadata)) if metadata is not None else None,
            })
        except Exception:
            logger.exception("Audit log exception: %s %s %s", action.value, target_type.value, target_id)
            return None

        logger.debug("Audit log recorded: %s %s %s", action.value, target_type.value, target_name)
        return entry

    def _record_entity_action(
        self,
        context: AuditContext,
        target_type: TargetType,
        action: AuditAction,
        entity: Mapping[str, Any],
        before_data: Optional[Mapping[str, Any]],
    ) -> Optional[AuditLog]:
        return self.record(
            context,
            action=action,
            target_type=target_type,
            target_id=entity.get("id"),
            target_name=entity.get("name"),
            before_data=before_data,
            after_data=None if action == AuditAction.DELETE.value else entity,
        )

    def record_employee_action(
        self,
        context: AuditContext,
        action: AuditAction,
        employee: Mapping[str, Any],
        before_data: Optional[Mapping[str, Any]] = None,
    ) -> Optional[AuditLog]:
        """Record an employee mutation; the employee snapshot is the after state unless deleted"""
        return self._record_entity_action(context, TargetType.EMPLOYEE, action, employee, before_data)

    def record_department_action(
        self,
        context: AuditContext,
        action: AuditAction,
        department: Mapping[str, Any],
        before_data: Optional[Mapping[str, Any]] = None,
    ) -> Optional[AuditLog]:
        """Record a department mutation; the department snapshot is the after state unless deleted"""
        return self._record_entity_action(context, TargetType.DEPARTMENT, action, department, before_data)
