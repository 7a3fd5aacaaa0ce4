# pharmapos/services/usage_service.py
from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from pharmapos.models.branch import Branch
from pharmapos.models.product import Product
from pharmapos.models.sale import Sale
from pharmapos.models.subscription import SubscriptionPlan, UNLIMITED
from pharmapos.models.user import User
from pharmapos.schemas.subscription import UsageMetric, UsageMetrics


def _month_bounds(now: datetime):
    start = datetime(now.year, now.month, 1)
    if now.month == 12:
        end = datetime(now.year + 1, 1, 1)
    else:
        end = datetime(now.year, now.month + 1, 1)
    return start, end


def _metric(current: int, limit: Optional[int]) -> UsageMetric:
    if limit is None or limit == UNLIMITED:
        return UsageMetric(current=current, limit=None, percentage=0.0)
    percentage = (current / limit * 100) if limit > 0 else 100.0
    return UsageMetric(current=current, limit=limit, percentage=round(percentage, 2))


def get_usage_metrics(
    db: Session,
    tenant_id: str,
    plan: Optional[SubscriptionPlan] = None,
    now: Optional[datetime] = None,
) -> UsageMetrics:
    """
    Compteurs d'usage courants d'un tenant :
    - utilisateurs actifs
    - produits actifs
    - transactions (ventes) du mois calendaire en cours
    - succursales actives
    """
    month_start, month_end = _month_bounds(now or datetime.utcnow())

    user_count = db.query(func.count(User.id)).filter(
        User.tenant_id == tenant_id, User.is_active.is_(True)
    ).scalar() or 0

    product_count = db.query(func.count(Product.id)).filter(
        Product.tenant_id == tenant_id, Product.is_active.is_(True)
    ).scalar() or 0

    transaction_count = db.query(func.count(Sale.id)).filter(
        Sale.tenant_id == tenant_id,
        Sale.created_at >= month_start,
        Sale.created_at < month_end,
    ).scalar() or 0

    branch_count = db.query(func.count(Branch.id)).filter(
        Branch.tenant_id == tenant_id, Branch.is_active.is_(True)
    ).scalar() or 0

    return UsageMetrics(
        tenant_id=tenant_id,
        users=_metric(user_count, plan.max_users if plan else None),
        products=_metric(product_count, plan.max_products if plan else None),
        transactions=_metric(transaction_count, plan.max_transactions if plan else None),
        branches=_metric(branch_count, plan.max_branches if plan else None),
    )


def is_approaching_limit(metric: UsageMetric, threshold: float = 0.9) -> bool:
    if metric.limit is None:
        return False
    return metric.percentage >= threshold * 100
