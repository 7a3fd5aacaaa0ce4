# pharmapos/models/sale.py
from datetime import datetime

from sqlalchemy import Column, ForeignKey, Integer, String, DateTime, Numeric

from pharmapos.db.base import Base
from pharmapos.models.mixins import TenantScopedMixin, BranchScopedMixin


class Sale(TenantScopedMixin, BranchScopedMixin, Base):
    __tablename__ = "sales"

    id = Column(Integer, primary_key=True, index=True)
    cashier_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    total = Column(Numeric(12, 2), nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
