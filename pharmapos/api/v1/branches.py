# pharmapos/api/v1/branches.py
from typing import List

from fastapi import APIRouter, Depends, Request
from sqlalchemy import false
from sqlalchemy.orm import Session

from pharmapos.api.deps import get_db, get_security_context
from pharmapos.core.roles import GLOBAL_ROLES, Role
from pharmapos.middleware.branch_isolation import get_user_branch_ids
from pharmapos.models.branch import Branch
from pharmapos.schemas.security import SecurityContext
from pharmapos.schemas.user import BranchResponse
from pharmapos.services.row_security import apply_tenant_filter

router = APIRouter(prefix="/api/branches", tags=["Branches"])


@router.get("/", response_model=List[BranchResponse])
def list_branches(
    request: Request,
    db: Session = Depends(get_db),
    context: SecurityContext = Depends(get_security_context)
):
    query = apply_tenant_filter(db.query(Branch).filter(Branch.is_active.is_(True)), context)

    # Hors administrateurs : uniquement les succursales affectées
    if context.role not in GLOBAL_ROLES and context.role != Role.TENANT_ADMIN:
        branch_ids = get_user_branch_ids(request)
        query = query.filter(Branch.id.in_(branch_ids)) if branch_ids else query.filter(false())

    return query.order_by(Branch.name).all()
