# pharmapos/middleware/branch_isolation.py
from typing import Dict, List, Optional
import logging

from fastapi import Request
from fastapi.responses import PlainTextResponse
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware

from pharmapos.core.config import settings
from pharmapos.core.exceptions import BranchAccessDenied, status_code_for
from pharmapos.core.paths import matches_any_prefix
from pharmapos.core.roles import Role, parse_role
from pharmapos.core.security import read_token_claims
from pharmapos.db.session import get_session_factory
from pharmapos.models.branch import UserBranch

logger = logging.getLogger(__name__)

# Niveaux d'accès requis -> droits d'affectation qui les satisfont
BRANCH_PERMISSION_LEVELS = {
    "read": {"read", "write", "admin"},
    "write": {"write", "admin"},
    "admin": {"admin"},
}


class BranchIsolationMiddleware(BaseHTTPMiddleware):
    """
    Restreint les utilisateurs non administrateurs aux succursales qui leur
    sont affectées. Sans affectation active, la requête est refusée avant
    tout filtrage de données.
    """

    async def dispatch(self, request: Request, call_next):
        path = request.url.path

        if self._is_excluded(path):
            return await call_next(request)

        claims = read_token_claims(request) or {}
        user_id = claims.get("sub")
        role = parse_role(claims.get("role"))

        # Les tenant admins ne sont pas soumis à l'isolation
        if not user_id or role == Role.TENANT_ADMIN:
            return await call_next(request)

        session_factory = get_session_factory(request)
        assignments = await run_in_threadpool(self._load_assignments, session_factory, user_id)

        try:
            self._require_assignments(assignments, user_id)
        except BranchAccessDenied as e:
            logger.warning(f"Accès refusé à {path} : {e}")
            return PlainTextResponse(
                "Accès refusé : aucune affectation de succursale",
                status_code=status_code_for(e.error_code),
            )

        request.state.user_branch_ids = [branch_id for branch_id, _ in assignments]
        request.state.branch_permissions = dict(assignments)

        return await call_next(request)

    @staticmethod
    def _is_excluded(path: str) -> bool:
        if not (path == "/api" or path.startswith("/api/")):
            return True
        return matches_any_prefix(path, settings.BRANCH_ISOLATION_SKIP_PATHS)

    @staticmethod
    def _require_assignments(assignments, user_id: str):
        if not assignments:
            raise BranchAccessDenied(f"aucune succursale affectée à {user_id}")

    @staticmethod
    def _load_assignments(session_factory, user_id: str):
        db = session_factory()
        try:
            rows = (
                db.query(UserBranch.branch_id, UserBranch.permission)
                .filter(UserBranch.user_id == user_id, UserBranch.is_active.is_(True))
                .all()
            )
            return [(branch_id, permission) for branch_id, permission in rows]
        finally:
            db.close()


def get_user_branch_ids(request: Request) -> List[int]:
    return list(getattr(request.state, "user_branch_ids", None) or [])


def get_branch_permissions(request: Request) -> Dict[int, str]:
    return dict(getattr(request.state, "branch_permissions", None) or {})


def has_branch_permission(request: Request, branch_id: Optional[int], required: str) -> bool:
    """Droit read / write / admin sur une succursale affectée"""
    claims = read_token_claims(request) or {}
    if parse_role(claims.get("role")) == Role.TENANT_ADMIN:
        return True

    permission = get_branch_permissions(request).get(branch_id)
    if permission is None:
        return False
    return permission in BRANCH_PERMISSION_LEVELS.get(required, set())
