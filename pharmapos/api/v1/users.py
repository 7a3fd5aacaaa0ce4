# pharmapos/api/v1/users.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from pharmapos.api.deps import get_db, require_permission
from pharmapos.core.permissions import USER_READ
from pharmapos.models.user import User
from pharmapos.schemas.security import SecurityContext
from pharmapos.schemas.user import UserResponse
from pharmapos.services.row_security import apply_tenant_filter

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.get("/", response_model=List[UserResponse])
def list_users(
    db: Session = Depends(get_db),
    context: SecurityContext = Depends(require_permission(USER_READ))
):
    """Utilisateurs visibles dans le périmètre tenant de l'appelant"""
    query = apply_tenant_filter(db.query(User), context)
    return query.order_by(User.email).all()
