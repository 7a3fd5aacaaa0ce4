# pharmapos/models/mixins.py
"""
Capacités de portée des entités.

Une entité cloisonnée par tenant hérite de TenantScopedMixin, une entité
cloisonnée par succursale hérite de BranchScopedMixin. Les filtres de
sécurité ligne s'appuient uniquement sur ces classes.
"""
from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import declared_attr


class TenantScopedMixin:

    @declared_attr
    def tenant_id(cls):
        return Column(String(36), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)


class BranchScopedMixin:

    @declared_attr
    def branch_id(cls):
        return Column(Integer, ForeignKey("branches.id", ondelete="SET NULL"), nullable=True, index=True)


def is_tenant_scoped(entity) -> bool:
    return isinstance(entity, type) and issubclass(entity, TenantScopedMixin)


def is_branch_scoped(entity) -> bool:
    return isinstance(entity, type) and issubclass(entity, BranchScopedMixin)
