"""
Entity repositories - snapshot-level CRUD over the org chart tables
"""
import logging
from typing import Any, Dict, Mapping, Optional, Protocol, Type

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from orgchart.core.exceptions import EntityNotFoundError, StorageFailureError
from orgchart.db.base import Base
from orgchart.models.audit_log import TargetType
from orgchart.models.department import Department
from orgchart.models.employee import Employee
from orgchart.utils.json_serializer import to_json_safe

logger = logging.getLogger(__name__)

# Managed by the database, never written from a snapshot
READ_ONLY_FIELDS = frozenset({"created_at", "updated_at"})


class EntityRepository(Protocol):
    def get(self, entity_id: str) -> Dict[str, Any]:
        ...

    def create(self, snapshot: Mapping[str, Any]) -> str:
        ...

    def update(self, entity_id: str, snapshot: Mapping[str, Any]) -> None:
        ...

    def delete(self, entity_id: str) -> None:
        ...


class SqlAlchemyEntityRepository:
    """
    Generic repository over one mapped model

    Snapshots are ordered dicts in table column order. Every write commits;
    on failure the session is rolled back and StorageFailureError is raised.
    """

    model: Type[Base] = None
    label = "entity"

    def __init__(self, db: Session):
        self.db = db

    @property
    def columns(self):
        return [column.name for column in self.model.__table__.columns]

    def to_snapshot(self, instance) -> Dict[str, Any]:
        return {name: to_json_safe(getattr(instance, name)) for name in self.columns}

    def _writable(self, snapshot: Mapping[str, Any]) -> Dict[str, Any]:
        return {
            key: value
            for key, value in snapshot.items()
            if key in self.columns and key not in READ_ONLY_FIELDS
        }

    def _load(self, entity_id: str):
        try:
            instance = self.db.query(self.model).filter(self.model.id == entity_id).first()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StorageFailureError(f"Failed to load {self.label} {entity_id}") from exc
        if instance is None:
            raise EntityNotFoundError(f"{self.label.capitalize()} with id {entity_id} not found")
        return instance

    def _commit(self, message: str) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("%s: %s", message, exc)
            raise StorageFailureError(message) from exc

    def exists(self, entity_id: Optional[str]) -> bool:
        if not entity_id:
            return False
        try:
            self._load(entity_id)
        except EntityNotFoundError:
            return False
        return True

    def get(self, entity_id: str) -> Dict[str, Any]:
        return self.to_snapshot(self._load(entity_id))

    def create(self, snapshot: Mapping[str, Any]) -> str:
        """
        Insert a new row from a snapshot and return its id

        The snapshot's id is reused only while no row holds it.
        """
        payload = self._writable(snapshot)
        if "id" in payload and (not payload["id"] or self.exists(payload["id"])):
            payload.pop("id")

        instance = self.model(**payload)
        self.db.add(instance)
        self._commit(f"Failed to create {self.label}")
        self.db.refresh(instance)
        return instance.id

    def update(self, entity_id: str, snapshot: Mapping[str, Any]) -> None:
        """Overwrite every known field present in the snapshot"""
        instance = self._load(entity_id)
        for key, value in self._writable(snapshot).items():
            if key == "id":
                continue
            setattr(instance, key, value)
        self._commit(f"Failed to update {self.label} {entity_id}")

    def delete(self, entity_id: str) -> None:
        instance = self._load(entity_id)
        self.db.delete(instance)
        self._commit(f"Failed to delete {self.label} {entity_id}")


class EmployeeRepository(SqlAlchemyEntityRepository):
    model = Employee
    label = "employee"


class DepartmentRepository(SqlAlchemyEntityRepository):
    model = Department
    label = "department"


def build_entity_repositories(db: Session) -> Dict[TargetType, EntityRepository]:
    """Registry of the target types that support rollback"""
    return {
        TargetType.EMPLOYEE: EmployeeRepository(db),
        TargetType.DEPARTMENT: DepartmentRepository(db),
    }
