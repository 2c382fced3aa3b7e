"""
Employee model
"""
from sqlalchemy import Column, String, DateTime, ForeignKey, JSON
from sqlalchemy.sql import func
from orgchart.db.base import Base, generate_uuid


class Employee(Base):
    __tablename__ = "employees"

    id = Column(String(36), primary_key=True, index=True, default=generate_uuid)
    name = Column(String, nullable=False)
    email = Column(String, nullable=True, index=True)
    department_id = Column(String(36), ForeignKey("departments.id"), nullable=True, index=True)
    position = Column(String, nullable=True)
    role_id = Column(String, nullable=True)
    employment_type = Column(String, nullable=True)
    chatwork_account_id = Column(String, nullable=True)
    departments = Column(JSON, nullable=True)  # concurrent department ids
    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), onupdate=func.current_timestamp(), nullable=False)
