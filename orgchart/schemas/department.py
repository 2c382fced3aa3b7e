"""
Department schemas
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_serializer, ConfigDict
from orgchart.utils.datetime_utils import iso_8601_utc


class DepartmentCreate(BaseModel):
    """Schema for creating a department"""
    name: str = Field(..., min_length=1, description="Department name")
    parent_id: Optional[str] = Field(None, description="Parent department ID")
    level: int = Field(default=1, ge=1, description="Depth in the org chart (1 = top level)")
    department_order: int = Field(default=0, description="Display order among siblings")


class DepartmentUpdate(BaseModel):
    """Schema for updating a department"""
    name: Optional[str] = Field(None, min_length=1, description="Department name")
    parent_id: Optional[str] = Field(None, description="Parent department ID")
    level: Optional[int] = Field(None, ge=1, description="Depth in the org chart")
    department_order: Optional[int] = Field(None, description="Display order among siblings")


class DepartmentOut(BaseModel):
    """Schema for department output. Datetimes in UTC (Z)."""
    id: str
    name: str
    parent_id: Optional[str] = None
    level: int
    department_order: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("created_at", "updated_at", when_used="always")
    def _ser_datetime(self, dt):
        return iso_8601_utc(dt) if dt is not None else None
