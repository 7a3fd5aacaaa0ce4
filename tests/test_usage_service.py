"""
Tests des compteurs d'usage par tenant.
"""

from datetime import datetime

from pharmapos.core.roles import Role
from pharmapos.schemas.subscription import UsageMetric
from pharmapos.services.usage_service import get_usage_metrics, is_approaching_limit


def test_counts_only_active_rows_of_the_tenant(db, build):
    tenant = build.tenant()
    other = build.tenant("Autre")
    branch = build.branch(tenant)
    build.branch(tenant, is_active=False)
    build.branch(other)

    build.user(tenant, Role.TENANT_ADMIN)
    build.user(tenant, Role.CASHIER)
    build.user(tenant, Role.CASHIER, is_active=False)
    build.user(other, Role.CASHIER)

    build.product(tenant, branch)
    build.product(tenant, branch, is_active=False)
    build.product(other)

    usage = get_usage_metrics(db, tenant.id)

    assert usage.tenant_id == tenant.id
    assert usage.users.current == 2
    assert usage.products.current == 1
    assert usage.branches.current == 1
    assert usage.users.limit is None


def test_transactions_cover_current_month_only(db, build):
    tenant = build.tenant()
    now = datetime(2026, 12, 15, 10, 0)
    build.sale(tenant, created_at=datetime(2026, 12, 1, 0, 0))
    build.sale(tenant, created_at=datetime(2026, 12, 31, 23, 59))
    build.sale(tenant, created_at=datetime(2026, 11, 30, 23, 59))
    build.sale(tenant, created_at=datetime(2027, 1, 1, 0, 0))

    usage = get_usage_metrics(db, tenant.id, now=now)

    assert usage.transactions.current == 2


def test_plan_limits_fill_limit_and_percentage(db, build):
    tenant = build.tenant()
    plan = build.plan(max_users=4, max_products=-1)
    build.user(tenant, Role.TENANT_ADMIN)

    usage = get_usage_metrics(db, tenant.id, plan)

    assert usage.users.limit == 4
    assert usage.users.percentage == 25.0
    assert usage.products.limit is None
    assert usage.products.percentage == 0.0


def test_is_approaching_limit():
    assert is_approaching_limit(UsageMetric(current=9, limit=10, percentage=90.0))
    assert not is_approaching_limit(UsageMetric(current=5, limit=10, percentage=50.0))
    assert not is_approaching_limit(UsageMetric(current=500, limit=None))
