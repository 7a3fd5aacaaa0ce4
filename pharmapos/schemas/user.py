# pharmapos/schemas/user.py
from typing import Optional

from pydantic import BaseModel, ConfigDict


class UserResponse(BaseModel):
    id: str
    email: str
    full_name: Optional[str] = None
    role: str
    tenant_id: Optional[str] = None
    branch_id: Optional[int] = None
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class BranchResponse(BaseModel):
    id: int
    tenant_id: str
    name: str
    address: Optional[str] = None
    status: str

    model_config = ConfigDict(from_attributes=True)
