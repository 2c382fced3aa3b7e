"""
Database models
"""
from orgchart.models.department import Department
from orgchart.models.employee import Employee
from orgchart.models.audit_log import AuditLog, AuditAction, TargetType, MUTATING_ACTIONS

__all__ = [
    "Department",
    "Employee",
    "AuditLog",
    "AuditAction",
    "TargetType",
    "MUTATING_ACTIONS",
]
