# pharmapos/schemas/product.py
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    sku: Optional[str] = Field(None, max_length=100)
    branch_id: int = Field(..., description="Succursale détentrice du stock")
    quantity: int = Field(default=0, ge=0)
    unit_price: Decimal = Field(default=Decimal("0.00"), ge=Decimal("0.00"))


class ProductResponse(BaseModel):
    id: int
    tenant_id: str
    branch_id: Optional[int] = None
    name: str
    sku: Optional[str] = None
    quantity: int
    unit_price: Decimal

    model_config = ConfigDict(from_attributes=True)
