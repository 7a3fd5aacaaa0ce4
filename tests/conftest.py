"""
Fixtures partagées : base SQLite en mémoire, constructeurs de données,
client HTTP de test.
"""

import json
import os
from datetime import datetime, timedelta

# Base de test avant tout import du paquet
os.environ["SQLALCHEMY_DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from pharmapos.core.roles import Role
from pharmapos.core.security import create_access_token
from pharmapos.db.init_db import init_db
from pharmapos.main import create_app
from pharmapos.models import (
    Branch,
    Product,
    Sale,
    Subscription,
    SubscriptionPlan,
    Tenant,
    User,
    UserBranch,
    UserSession,
)


# ============================================================================
# DATABASE FIXTURES
# ============================================================================


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


# ============================================================================
# DATA BUILDERS
# ============================================================================


class DataBuilder:
    """Crée et valide (commit) des lignes de test"""

    def __init__(self, db):
        self.db = db
        self._counter = 0

    def _save(self, obj):
        self.db.add(obj)
        self.db.commit()
        return obj

    def _next(self) -> int:
        self._counter += 1
        return self._counter

    def tenant(self, name="Pharmacie Centrale"):
        return self._save(Tenant(name=name))

    def branch(self, tenant, name=None, is_active=True):
        return self._save(Branch(
            tenant_id=tenant.id,
            name=name or f"Succursale {self._next()}",
            is_active=is_active,
        ))

    def user(self, tenant=None, role=Role.CASHIER, branch=None, is_active=True):
        role_value = role.value if isinstance(role, Role) else role
        return self._save(User(
            tenant_id=tenant.id if tenant else None,
            branch_id=branch.id if branch else None,
            email=f"user{self._next()}@pharma.test",
            full_name="Utilisateur Test",
            role=role_value,
            is_active=is_active,
        ))

    def assign(self, user, branch, permission="write", is_active=True):
        return self._save(UserBranch(
            user_id=user.id,
            branch_id=branch.id,
            user_role=user.role,
            permission=permission,
            is_active=is_active,
        ))

    def plan(self, name="Professional", features=("All Features",), raw_features=None,
             max_users=-1, max_products=-1, max_transactions=-1, max_branches=-1):
        return self._save(SubscriptionPlan(
            name=name,
            price=0,
            max_users=max_users,
            max_products=max_products,
            max_transactions=max_transactions,
            max_branches=max_branches,
            max_storage_gb=-1,
            features=raw_features if raw_features is not None else json.dumps(list(features)),
        ))

    def subscription(self, tenant, plan, status="active", end_date=None):
        return self._save(Subscription(
            tenant_id=tenant.id,
            plan_id=plan.id,
            status=status,
            start_date=datetime(2026, 1, 1),
            end_date=end_date or datetime(2027, 1, 31),
        ))

    def product(self, tenant, branch=None, name=None, is_active=True):
        return self._save(Product(
            tenant_id=tenant.id,
            branch_id=branch.id if branch else None,
            name=name or f"Produit {self._next()}",
            is_active=is_active,
        ))

    def sale(self, tenant, branch=None, created_at=None):
        return self._save(Sale(
            tenant_id=tenant.id,
            branch_id=branch.id if branch else None,
            total=100,
            created_at=created_at or datetime.utcnow(),
        ))

    def session(self, user, impersonated_by=None, expires_in=timedelta(hours=1), is_active=True):
        return self._save(UserSession(
            user_id=user.id,
            token=f"token-{self._next()}",
            expires_at=datetime.utcnow() + expires_in,
            is_active=is_active,
            is_impersonated=impersonated_by is not None,
            impersonated_by_user_id=impersonated_by.id if impersonated_by else None,
        ))


@pytest.fixture
def build(db):
    return DataBuilder(db)


# ============================================================================
# HTTP FIXTURES
# ============================================================================


def auth_headers(user) -> dict:
    token = create_access_token({"sub": user.id, "role": user.role, "tenant_id": user.tenant_id})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def app(session_factory):
    return create_app(session_factory=session_factory)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth():
    return auth_headers
