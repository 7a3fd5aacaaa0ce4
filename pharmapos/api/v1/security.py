# pharmapos/api/v1/security.py
from fastapi import APIRouter, Depends, Request

from pharmapos.api.deps import get_security_context, require_minimum_role
from pharmapos.core.roles import Role, display_name, manageable_roles
from pharmapos.middleware.branch_isolation import get_user_branch_ids
from pharmapos.schemas.security import (
    ManageableRolesResponse,
    SecurityContext,
    SecurityContextResponse,
)

router = APIRouter(prefix="/api/security", tags=["Security"])


@router.get("/context", response_model=SecurityContextResponse)
def read_security_context(
    request: Request,
    context: SecurityContext = Depends(get_security_context)
):
    """Contexte de sécurité de l'utilisateur courant"""
    return SecurityContextResponse(
        user_id=context.user_id,
        role=context.role,
        role_display_name=display_name(context.role),
        tenant_id=context.tenant_id,
        branch_id=context.branch_id,
        is_impersonated=context.is_impersonated,
        impersonated_by_user_id=context.impersonated_by_user_id,
        permissions=sorted(context.permissions),
        branch_ids=get_user_branch_ids(request),
    )


@router.get("/manageable-roles", response_model=ManageableRolesResponse)
def read_manageable_roles(
    context: SecurityContext = Depends(require_minimum_role(Role.PHARMACIST))
):
    return ManageableRolesResponse(role=context.role, manageable_roles=manageable_roles(context.role))
