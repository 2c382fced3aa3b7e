"""
Declarative base for all ORM models
"""
import uuid

from sqlalchemy.orm import declarative_base

Base = declarative_base()


def generate_uuid() -> str:
    """Primary key default for string-keyed tables"""
    return str(uuid.uuid4())
