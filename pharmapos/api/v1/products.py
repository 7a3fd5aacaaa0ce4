# pharmapos/api/v1/products.py
from typing import List
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from pharmapos.api.deps import get_db, require_permission
from pharmapos.core.permissions import INVENTORY_CREATE, INVENTORY_READ
from pharmapos.middleware.branch_isolation import get_user_branch_ids, has_branch_permission
from pharmapos.models.branch import Branch
from pharmapos.models.product import Product
from pharmapos.schemas.product import ProductCreate, ProductResponse
from pharmapos.schemas.security import SecurityContext
from pharmapos.services.row_security import apply_branch_scope, apply_tenant_filter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/products", tags=["Products"])


# =========================
# LIST PRODUCTS
# =========================
@router.get("/", response_model=List[ProductResponse])
def list_products(
    request: Request,
    db: Session = Depends(get_db),
    context: SecurityContext = Depends(require_permission(INVENTORY_READ))
):
    query = db.query(Product).filter(Product.is_active.is_(True))
    query = apply_tenant_filter(query, context)
    query = apply_branch_scope(query, context.role, get_user_branch_ids(request))
    return query.order_by(Product.name).all()


# =========================
# CREATE PRODUCT
# =========================
@router.post("/", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create_product(
    product_data: ProductCreate,
    request: Request,
    db: Session = Depends(get_db),
    context: SecurityContext = Depends(require_permission(INVENTORY_CREATE))
):
    """
    Crée un produit dans une succursale du tenant courant.
    """
    if not context.tenant_id:
        raise HTTPException(status_code=400, detail="Utilisateur non associé à un tenant")

    branch = db.get(Branch, product_data.branch_id)
    if branch is None or branch.tenant_id != context.tenant_id:
        raise HTTPException(status_code=404, detail="Succursale introuvable")

    if not has_branch_permission(request, branch.id, "write"):
        raise HTTPException(status_code=403, detail="Droit d'écriture requis sur cette succursale")

    product = Product(
        tenant_id=context.tenant_id,
        branch_id=product_data.branch_id,
        name=product_data.name,
        sku=product_data.sku,
        quantity=product_data.quantity,
        unit_price=product_data.unit_price,
    )
    db.add(product)
    db.flush()
    db.refresh(product)

    logger.info(f"Produit {product.id} créé par {context.user_id} (succursale {product.branch_id})")
    return product
