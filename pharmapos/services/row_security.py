# pharmapos/services/row_security.py
"""
Filtres de sécurité ligne (tenant / succursale) sur les requêtes SQLAlchemy.

Règle commune : une portée introuvable ne renvoie jamais toutes les lignes,
la requête est alors vidée.
"""
from typing import Iterable, Optional
import logging

from sqlalchemy import false
from sqlalchemy.orm import Query, Session

from pharmapos.core.roles import GLOBAL_ROLES, Role, parse_role
from pharmapos.models.branch import Branch
from pharmapos.models.mixins import is_branch_scoped, is_tenant_scoped
from pharmapos.schemas.security import SecurityContext

logger = logging.getLogger(__name__)


def query_entity(query: Query):
    """Entité mappée ciblée par la requête"""
    descriptions = query.column_descriptions
    if not descriptions:
        return None
    return descriptions[0].get("entity")


def apply_tenant_filter(query: Query, context: SecurityContext) -> Query:
    # Rôles globaux : visibilité sur tous les tenants
    if context.role in GLOBAL_ROLES:
        return query

    entity = query_entity(query)
    if not is_tenant_scoped(entity):
        return query

    if not context.tenant_id:
        logger.warning(f"Aucun tenant pour {context.user_id}, résultat vidé ({entity.__name__})")
        return query.filter(false())

    return query.filter(entity.tenant_id == context.tenant_id)


def apply_branch_filter(query: Query, context: SecurityContext) -> Query:
    # TenantAdmin : toutes les succursales du tenant (le filtre tenant suffit)
    if context.role in GLOBAL_ROLES or context.role == Role.TENANT_ADMIN:
        return query

    entity = query_entity(query)
    if not is_branch_scoped(entity):
        return query

    if context.branch_id is None:
        logger.warning(f"Aucune succursale pour {context.user_id}, résultat vidé ({entity.__name__})")
        return query.filter(false())

    return query.filter(entity.branch_id == context.branch_id)


def apply_branch_scope(query: Query, role, branch_ids: Optional[Iterable[int]]) -> Query:
    """
    Restreint la requête aux succursales affectées par l'isolation par
    succursale (request.state.user_branch_ids).
    """
    role = parse_role(role)
    if role in GLOBAL_ROLES or role == Role.TENANT_ADMIN:
        return query

    entity = query_entity(query)
    if not is_branch_scoped(entity):
        return query

    branch_ids = list(branch_ids or [])
    if not branch_ids:
        # Pas de contexte succursale : aucune ligne plutôt qu'une fuite
        return query.filter(false())

    return query.filter(entity.branch_id.in_(branch_ids))


def scoped_query(db: Session, entity, context: SecurityContext) -> Query:
    """Requête sur l'entité avec filtres tenant puis succursale"""
    return apply_branch_filter(apply_tenant_filter(db.query(entity), context), context)


# =====================================
# CONTRÔLES PONCTUELS
# =====================================

def can_access_tenant(context: SecurityContext, tenant_id: str) -> bool:
    if context.role in GLOBAL_ROLES:
        return True
    return context.tenant_id is not None and context.tenant_id == tenant_id


def can_access_branch(db: Session, context: SecurityContext, branch_id: Optional[int]) -> bool:
    if context.role in GLOBAL_ROLES:
        return True

    if context.role == Role.TENANT_ADMIN:
        if branch_id is None:
            return True
        branch = db.get(Branch, branch_id)
        return branch is not None and branch.tenant_id == context.tenant_id

    return context.branch_id is not None and context.branch_id == branch_id
