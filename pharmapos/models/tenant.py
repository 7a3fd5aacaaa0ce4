# pharmapos/models/tenant.py
import uuid

from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from pharmapos.db.base import Base


class Tenant(Base):
    """Organisation pharmaceutique : frontière d'isolation principale"""
    __tablename__ = "tenants"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(200), nullable=False)
    status = Column(String(20), nullable=False, default="active", comment="active, trial, suspended")
    created_at = Column(DateTime, server_default=func.now())

    branches = relationship("Branch", back_populates="tenant", cascade="all, delete-orphan")
    subscriptions = relationship("Subscription", back_populates="tenant", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Tenant {self.name}>"
