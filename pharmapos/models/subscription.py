# pharmapos/models/subscription.py
from sqlalchemy import Column, ForeignKey, Integer, Boolean, String, DateTime, Numeric, Text, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from pharmapos.db.base import Base
from pharmapos.models.mixins import TenantScopedMixin


class SubscriptionStatus:
    ACTIVE = "active"
    GRACE_PERIOD = "grace_period"
    CANCELLED = "cancelled"
    EXPIRED = "expired"

    # Statuts qui ouvrent l'accès
    EFFECTIVE = (ACTIVE, GRACE_PERIOD)


# Limite de plan illimitée
UNLIMITED = -1


class SubscriptionPlan(Base):
    """
    Plan d'abonnement. Les limites sont figées par version de plan : un
    changement d'offre pointe l'abonnement vers un autre plan.
    """
    __tablename__ = "subscription_plans"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    price = Column(Numeric(12, 2), nullable=False, default=0)
    max_users = Column(Integer, nullable=False, default=UNLIMITED)
    max_branches = Column(Integer, nullable=False, default=UNLIMITED)
    max_products = Column(Integer, nullable=False, default=UNLIMITED)
    max_transactions = Column(Integer, nullable=False, default=UNLIMITED)
    max_storage_gb = Column(Integer, nullable=False, default=UNLIMITED)
    features = Column(Text, nullable=True, comment="Liste JSON des fonctionnalités incluses")
    is_active = Column(Boolean, default=True, nullable=False)

    subscriptions = relationship("Subscription", back_populates="plan")

    def __repr__(self):
        return f"<SubscriptionPlan {self.name}>"


class Subscription(TenantScopedMixin, Base):
    __tablename__ = "subscriptions"

    id = Column(Integer, primary_key=True, index=True)
    plan_id = Column(Integer, ForeignKey("subscription_plans.id"), nullable=False)
    status = Column(String(20), nullable=False, default=SubscriptionStatus.ACTIVE,
                    comment="active, grace_period, cancelled, expired")
    start_date = Column(DateTime, nullable=False, server_default=func.now())
    end_date = Column(DateTime, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    tenant = relationship("Tenant", back_populates="subscriptions")
    plan = relationship("SubscriptionPlan", back_populates="subscriptions")

    __table_args__ = (
        Index("idx_subscriptions_tenant_status", "tenant_id", "status"),
    )
