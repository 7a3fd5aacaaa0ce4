# pharmapos/models/user.py
import uuid

from sqlalchemy import Column, ForeignKey, Integer, Boolean, String, DateTime, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from pharmapos.db.base import Base
from pharmapos.models.mixins import TenantScopedMixin, BranchScopedMixin


class User(TenantScopedMixin, BranchScopedMixin, Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    # Les rôles globaux (SuperAdmin, Operations) n'ont ni tenant ni succursale
    tenant_id = Column(String(36), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=True, index=True)
    branch_id = Column(Integer, ForeignKey("branches.id", ondelete="SET NULL"), nullable=True, index=True)
    email = Column(String(255), nullable=False, unique=True)
    full_name = Column(String(200), nullable=True)
    role = Column(String(50), nullable=False, comment="SuperAdmin, Operations, TenantAdmin, Pharmacist, Cashier")
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    branch_assignments = relationship("UserBranch", back_populates="user")
    sessions = relationship(
        "UserSession",
        back_populates="user",
        foreign_keys="UserSession.user_id",
    )

    def __repr__(self):
        return f"<User {self.email} ({self.role})>"


class UserSession(Base):
    """Session utilisateur, y compris les sessions d'emprunt d'identité"""
    __tablename__ = "user_sessions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    token = Column(String(500), nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    expires_at = Column(DateTime, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    # Emprunt d'identité
    is_impersonated = Column(Boolean, default=False, nullable=False)
    impersonated_by_user_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    impersonated_at = Column(DateTime, nullable=True)

    user = relationship("User", back_populates="sessions", foreign_keys=[user_id])

    __table_args__ = (
        Index("idx_user_sessions_user_active", "user_id", "is_active"),
    )
