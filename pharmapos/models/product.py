# pharmapos/models/product.py
from sqlalchemy import Column, Integer, Boolean, String, DateTime, Numeric
from sqlalchemy.sql import func

from pharmapos.db.base import Base
from pharmapos.models.mixins import TenantScopedMixin, BranchScopedMixin


class Product(TenantScopedMixin, BranchScopedMixin, Base):
    """Article d'inventaire d'une succursale"""
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    sku = Column(String(100), nullable=True, index=True)
    quantity = Column(Integer, nullable=False, default=0)
    unit_price = Column(Numeric(12, 2), nullable=False, default=0)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
