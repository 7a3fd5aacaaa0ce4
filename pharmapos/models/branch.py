# pharmapos/models/branch.py
from sqlalchemy import (
    Column,
    ForeignKey,
    Integer,
    Boolean,
    String,
    DateTime,
    Index,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from pharmapos.db.base import Base
from pharmapos.models.mixins import TenantScopedMixin


class Branch(TenantScopedMixin, Base):
    """Succursale physique d'un tenant"""
    __tablename__ = "branches"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    address = Column(String(500), nullable=True)
    status = Column(String(20), nullable=False, default="active")
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    tenant = relationship("Tenant", back_populates="branches")
    user_assignments = relationship("UserBranch", back_populates="branch")

    def __repr__(self):
        return f"<Branch {self.name}>"


class UserBranch(Base):
    """Affectation d'un utilisateur à une succursale"""
    __tablename__ = "user_branches"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    branch_id = Column(Integer, ForeignKey("branches.id", ondelete="CASCADE"), nullable=False)
    user_role = Column(String(50), nullable=False, comment="TenantAdmin, Pharmacist, Cashier")
    permission = Column(String(20), nullable=False, default="read", comment="read, write, admin")
    # Désactivation logique plutôt que suppression
    is_active = Column(Boolean, default=True, nullable=False)
    assigned_at = Column(DateTime, server_default=func.now())

    branch = relationship("Branch", back_populates="user_assignments")
    user = relationship("User", back_populates="branch_assignments")

    __table_args__ = (
        Index("idx_user_branches_user_active", "user_id", "is_active"),
    )
