# pharmapos/schemas/security.py
from typing import FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from pharmapos.core.roles import Role


class SecurityContext(BaseModel):
    """
    Instantané des capacités de l'utilisateur pour une requête.
    Reconstruit à chaque requête, jamais persisté.
    """
    user_id: str
    role: Role
    tenant_id: Optional[str] = None
    branch_id: Optional[int] = None
    is_impersonated: bool = False
    impersonated_by_user_id: Optional[str] = None
    permissions: FrozenSet[str] = Field(default_factory=frozenset)

    model_config = ConfigDict(frozen=True)


class SecurityContextResponse(BaseModel):
    user_id: str
    role: Role
    role_display_name: str
    tenant_id: Optional[str] = None
    branch_id: Optional[int] = None
    is_impersonated: bool
    impersonated_by_user_id: Optional[str] = None
    permissions: List[str]
    branch_ids: List[int] = Field(default_factory=list, description="Succursales affectées (isolation)")


class ManageableRolesResponse(BaseModel):
    role: Role
    manageable_roles: List[Role]
