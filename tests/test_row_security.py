"""
Tests des filtres de sécurité ligne (tenant / succursale).
"""

import pytest

from pharmapos.core.permissions import permissions_for
from pharmapos.core.roles import Role
from pharmapos.models import Product, SubscriptionPlan, User
from pharmapos.schemas.security import SecurityContext
from pharmapos.services.row_security import (
    apply_branch_filter,
    apply_branch_scope,
    apply_tenant_filter,
    can_access_branch,
    can_access_tenant,
    scoped_query,
)


def make_context(role, tenant=None, branch=None, user_id="u-test"):
    return SecurityContext(
        user_id=user_id,
        role=role,
        tenant_id=tenant.id if tenant else None,
        branch_id=branch.id if branch else None,
        permissions=permissions_for(role),
    )


@pytest.fixture
def two_tenants(build):
    tenant_a = build.tenant("A")
    tenant_b = build.tenant("B")
    a1 = build.branch(tenant_a, "A1")
    a2 = build.branch(tenant_a, "A2")
    b1 = build.branch(tenant_b, "B1")
    for branch, tenant in ((a1, tenant_a), (a1, tenant_a), (a2, tenant_a), (b1, tenant_b)):
        build.product(tenant, branch)
    return tenant_a, tenant_b, a1, a2, b1


class TestTenantFilter:

    @pytest.mark.parametrize("role", [Role.TENANT_ADMIN, Role.PHARMACIST, Role.CASHIER])
    def test_never_returns_foreign_tenant_rows(self, db, two_tenants, role):
        tenant_a, _, a1, _, _ = two_tenants
        rows = apply_tenant_filter(db.query(Product), make_context(role, tenant_a, a1)).all()
        assert len(rows) == 3
        assert all(row.tenant_id == tenant_a.id for row in rows)

    @pytest.mark.parametrize("role", [Role.SUPER_ADMIN, Role.OPERATIONS])
    def test_global_roles_see_all_tenants(self, db, two_tenants, role):
        rows = apply_tenant_filter(db.query(Product), make_context(role)).all()
        assert len(rows) == 4

    def test_missing_tenant_yields_no_rows(self, db, two_tenants):
        rows = apply_tenant_filter(db.query(Product), make_context(Role.CASHIER)).all()
        assert rows == []

    def test_entity_without_tenant_is_untouched(self, db, build, two_tenants):
        tenant_a = two_tenants[0]
        build.plan("Starter")
        query = apply_tenant_filter(db.query(SubscriptionPlan), make_context(Role.CASHIER, tenant_a))
        assert query.count() == 1


class TestBranchFilter:

    def test_branch_roles_see_only_own_branch(self, db, two_tenants):
        tenant_a, _, a1, _, _ = two_tenants
        rows = scoped_query(db, Product, make_context(Role.CASHIER, tenant_a, a1)).all()
        assert len(rows) == 2
        assert {row.branch_id for row in rows} == {a1.id}

    def test_tenant_admin_sees_all_branches_of_tenant(self, db, two_tenants):
        tenant_a, _, a1, a2, _ = two_tenants
        rows = scoped_query(db, Product, make_context(Role.TENANT_ADMIN, tenant_a, a1)).all()
        assert {row.branch_id for row in rows} == {a1.id, a2.id}

    def test_missing_branch_yields_no_rows(self, db, two_tenants):
        tenant_a = two_tenants[0]
        query = apply_branch_filter(db.query(Product), make_context(Role.PHARMACIST, tenant_a))
        assert query.all() == []

    def test_entity_without_branch_is_untouched(self, db, build, two_tenants):
        tenant_a, _, a1, _, _ = two_tenants
        build.user(tenant_a, Role.CASHIER)
        build.plan("Starter")
        query = apply_branch_filter(db.query(SubscriptionPlan), make_context(Role.CASHIER, tenant_a, a1))
        assert query.count() == 1
        users = apply_tenant_filter(db.query(User), make_context(Role.CASHIER, tenant_a, a1)).all()
        assert len(users) == 1


class TestBranchScope:

    def test_restricts_to_assigned_branches(self, db, two_tenants):
        _, _, a1, a2, _ = two_tenants
        rows = apply_branch_scope(db.query(Product), Role.CASHIER, [a2.id]).all()
        assert {row.branch_id for row in rows} == {a2.id}

    @pytest.mark.parametrize("branch_ids", [None, []])
    def test_no_scope_returns_nothing(self, db, two_tenants, branch_ids):
        assert apply_branch_scope(db.query(Product), Role.PHARMACIST, branch_ids).all() == []

    def test_tenant_admin_is_unscoped(self, db, two_tenants):
        assert apply_branch_scope(db.query(Product), "TenantAdmin", None).count() == 4


class TestPointChecks:

    def test_can_access_tenant(self, two_tenants):
        tenant_a, tenant_b, _, _, _ = two_tenants
        assert can_access_tenant(make_context(Role.CASHIER, tenant_a), tenant_a.id)
        assert not can_access_tenant(make_context(Role.CASHIER, tenant_a), tenant_b.id)
        assert can_access_tenant(make_context(Role.OPERATIONS), tenant_b.id)
        assert not can_access_tenant(make_context(Role.CASHIER), None)

    def test_can_access_branch(self, db, two_tenants):
        tenant_a, _, a1, a2, b1 = two_tenants
        admin = make_context(Role.TENANT_ADMIN, tenant_a)
        assert can_access_branch(db, admin, a2.id)
        assert not can_access_branch(db, admin, b1.id)
        assert can_access_branch(db, admin, None)

        cashier = make_context(Role.CASHIER, tenant_a, a1)
        assert can_access_branch(db, cashier, a1.id)
        assert not can_access_branch(db, cashier, a2.id)

        assert can_access_branch(db, make_context(Role.SUPER_ADMIN), b1.id)
