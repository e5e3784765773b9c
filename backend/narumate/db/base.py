"""
Declarative base and shared columns for all models.
"""
import uuid
from sqlalchemy import Column, String, DateTime
from sqlalchemy.dialects import mysql
from sqlalchemy.orm import declarative_base
from narumate.core.utils import utcnow

Base = declarative_base()

# MySQL DATETIME drops fractional seconds unless fsp is given
Timestamp = DateTime(timezone=True).with_variant(mysql.DATETIME(fsp=6), "mysql")


def generate_id() -> str:
    """Primary keys are uuid4 strings so they stay portable across backends."""
    return str(uuid.uuid4())


class BaseModel(Base):
    """Abstract model with an opaque id and a row-creation timestamp."""
    __abstract__ = True

    id = Column(String(36), primary_key=True, default=generate_id)
    created_at = Column(Timestamp, default=utcnow, nullable=False)
