"""
Employee schemas
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, field_serializer, ConfigDict
from orgchart.utils.datetime_utils import iso_8601_utc


class EmployeeCreate(BaseModel):
    """Schema for creating an employee"""
    name: str = Field(..., min_length=1, description="Employee name")
    email: Optional[str] = Field(None, description="Employee email")
    department_id: Optional[str] = Field(None, description="Primary department ID")
    position: Optional[str] = Field(None, description="Position title")
    role_id: Optional[str] = Field(None, description="Role ID")
    employment_type: Optional[str] = Field(None, description="Employment type")
    chatwork_account_id: Optional[str] = Field(None, description="ChatWork account ID")
    departments: Optional[List[str]] = Field(None, description="Concurrent department IDs")


class EmployeeUpdate(BaseModel):
    """Schema for updating an employee"""
    name: Optional[str] = Field(None, min_length=1, description="Employee name")
    email: Optional[str] = Field(None, description="Employee email")
    department_id: Optional[str] = Field(None, description="Primary department ID")
    position: Optional[str] = Field(None, description="Position title")
    role_id: Optional[str] = Field(None, description="Role ID")
    employment_type: Optional[str] = Field(None, description="Employment type")
    chatwork_account_id: Optional[str] = Field(None, description="ChatWork account ID")
    departments: Optional[List[str]] = Field(None, description="Concurrent department IDs")


class EmployeeOut(BaseModel):
    """Schema for employee output. Datetimes in UTC (Z)."""
    id: str
    name: str
    email: Optional[str] = None
    department_id: Optional[str] = None
    position: Optional[str] = None
    role_id: Optional[str] = None
    employment_type: Optional[str] = None
    chatwork_account_id: Optional[str] = None
    departments: Optional[List[str]] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("created_at", "updated_at", when_used="always")
    def _ser_datetime(self, dt):
        return iso_8601_utc(dt) if dt is not None else None
