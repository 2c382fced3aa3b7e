"""
Department model
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, text
from orgchart.db.base import Base, generate_uuid


class Department(Base):
    __tablename__ = "departments"

    id = Column(String(36), primary_key=True, index=True, default=generate_uuid)
    name = Column(String, nullable=False, index=True)
    parent_id = Column(String(36), ForeignKey("departments.id"), nullable=True, index=True)
    level = Column(Integer, default=1, nullable=False)
    department_order = Column(Integer, default=0, nullable=False)  # sibling display order
    created_at = Column(DateTime(timezone=True), server_default=text("CURRENT_TIMESTAMP"), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=text("CURRENT_TIMESTAMP"),
        onupdate=text("CURRENT_TIMESTAMP"),
        nullable=False,
    )
