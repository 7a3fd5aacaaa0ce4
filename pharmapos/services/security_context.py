# pharmapos/services/security_context.py
from datetime import datetime
import logging

from sqlalchemy.orm import Session

from pharmapos.core.exceptions import Unauthorized
from pharmapos.core.permissions import IMPERSONATE_USER, permissions_for
from pharmapos.core.roles import parse_role
from pharmapos.models.user import User, UserSession
from pharmapos.schemas.security import SecurityContext

logger = logging.getLogger(__name__)


def get_active_session(db: Session, user_id: str):
    """Session active et non expirée la plus récente de l'utilisateur"""
    return (
        db.query(UserSession)
        .filter(
            UserSession.user_id == user_id,
            UserSession.is_active.is_(True),
            UserSession.expires_at > datetime.utcnow(),
        )
        .order_by(UserSession.created_at.desc(), UserSession.id.desc())
        .first()
    )


def resolve_security_context(db: Session, user_id: str) -> SecurityContext:
    """
    Construit le contexte de sécurité de l'utilisateur (lecture seule).

    En cas d'emprunt d'identité, le contexte reste celui de l'utilisateur
    emprunté ; seule la permission d'emprunt est ajoutée pour permettre d'en
    sortir.
    """
    if not user_id:
        raise Unauthorized("Utilisateur non authentifié")

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise Unauthorized("Compte utilisateur introuvable")
    if not user.is_active:
        raise Unauthorized("Compte utilisateur désactivé")

    role = parse_role(user.role)
    if role is None:
        raise Unauthorized(f"Rôle inconnu : {user.role}")

    permissions = set(permissions_for(role))
    is_impersonated = False
    impersonated_by_user_id = None

    session = get_active_session(db, user_id)
    if session is not None and session.is_impersonated:
        is_impersonated = True
        impersonated_by_user_id = session.impersonated_by_user_id
        if impersonated_by_user_id:
            impersonator = db.query(User).filter(User.id == impersonated_by_user_id).first()
            if impersonator is not None:
                permissions.add(IMPERSONATE_USER)

    context = SecurityContext(
        user_id=user.id,
        role=role,
        tenant_id=user.tenant_id,
        branch_id=user.branch_id,
        is_impersonated=is_impersonated,
        impersonated_by_user_id=impersonated_by_user_id,
        permissions=frozenset(permissions),
    )
    logger.debug(f"Contexte de sécurité établi pour {context.user_id} ({context.role.value})")
    return context
