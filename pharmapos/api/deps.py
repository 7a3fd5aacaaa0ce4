# pharmapos/api/deps.py

from fastapi import Depends, HTTPException, status, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from pharmapos.core.exceptions import Unauthorized
from pharmapos.core.permissions import has_permission
from pharmapos.core.roles import Role, hierarchy_level
from pharmapos.core.security import decode_access_token
from pharmapos.db.session import get_db
from pharmapos.schemas.security import SecurityContext
from pharmapos.services.security_context import resolve_security_context

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")


# ======================================================
# AUTHENTIFICATION UTILISATEUR
# ======================================================

def get_current_user_id(token: str = Depends(oauth2_scheme)) -> str:
    """Identifiant de l'utilisateur courant depuis le token JWT"""

    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Token invalide ou expiré",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = decode_access_token(token)
    if not payload or not payload.get("sub"):
        raise credentials_exception

    return payload["sub"]


# ======================================================
# CONTEXTE DE SÉCURITÉ
# ======================================================

def get_security_context(
    request: Request,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
) -> SecurityContext:
    """
    Contexte établi par le contrôle d'abonnement, sinon résolu à nouveau
    """
    context = getattr(request.state, "security_context", None)
    if context is not None and context.user_id == user_id:
        return context

    try:
        return resolve_security_context(db, user_id)
    except Unauthorized as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )


# ======================================================
# ROLES & PERMISSIONS
# ======================================================

def require_permission(*permissions: str):
    """Vérifie que le contexte possède toutes les permissions demandées"""

    def permission_checker(
        context: SecurityContext = Depends(get_security_context)
    ) -> SecurityContext:

        for permission in permissions:
            if not has_permission(context, permission):
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail=f"Permission requise : {permission}"
                )

        return context

    return permission_checker


def require_minimum_role(minimum_role: Role):
    """Vérifie le niveau hiérarchique du rôle"""

    def role_checker(
        context: SecurityContext = Depends(get_security_context)
    ) -> SecurityContext:

        if hierarchy_level(context.role) > hierarchy_level(minimum_role):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Rôle minimum requis : {minimum_role.value}"
            )

        return context

    return role_checker


__all__ = [
    "get_db",
    "get_current_user_id",
    "get_security_context",
    "require_permission",
    "require_minimum_role",
    "oauth2_scheme"
]
