# =====================================================
# tempcontrol/api/products.py - Product Catalog Routes
# =====================================================
from typing import List, Optional
from decimal import Decimal
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
import uuid

from tempcontrol.auth.dependencies import get_audit_context, require_permission
from tempcontrol.auth.permissions import PRODUCT_READ, PRODUCT_WRITE
from tempcontrol.database.connection import get_db
from tempcontrol.models.user import User
from tempcontrol.schemas.common import ApiResponse
from tempcontrol.schemas.product import (
    ProductCheckRequest,
    ProductCheckResponse,
    ProductCreate,
    ProductResponse,
    ProductUpdate,
)
from tempcontrol.services.audit import AuditContext
from tempcontrol.services.product_service import ProductService

products_router = APIRouter(prefix="/api/products", tags=["Products"])


@products_router.get("", response_model=ApiResponse[List[ProductResponse]])
def list_products(
    is_active: Optional[bool] = Query(None, description="Filter by active flag"),
    db: Session = Depends(get_db),
    _: User = Depends(require_permission(PRODUCT_READ)),
):
    products = ProductService(db).list_products(is_active)
    return ApiResponse.ok([ProductResponse.model_validate(p) for p in products])


@products_router.get("/code/{product_code}", response_model=ApiResponse[ProductResponse])
def get_product_by_code(
    product_code: str,
    db: Session = Depends(get_db),
    _: User = Depends(require_permission(PRODUCT_READ)),
):
    product = ProductService(db).get_by_code(product_code)
    return ApiResponse.ok(ProductResponse.model_validate(product))


@products_router.get("/code/{product_code}/check", response_model=ApiResponse[ProductCheckResponse])
def check_product_temperature(
    product_code: str,
    temperature: Decimal = Query(..., description="Measured temperature °C"),
    db: Session = Depends(get_db),
    _: User = Depends(require_permission(PRODUCT_READ)),
):
    """Verifica una lettura contro il range del prodotto, senza salvarla."""
    request = ProductCheckRequest(temperature=temperature)
    product, in_range, severity = ProductService(db).check_temperature(product_code, request.temperature)
    return ApiResponse.ok(
        ProductCheckResponse(
            product_code=product.product_code,
            temperature=float(request.temperature),
            is_in_range=in_range,
            severity=severity.value,
        )
    )


@products_router.get("/{product_id}", response_model=ApiResponse[ProductResponse])
def get_product(
    product_id: uuid.UUID,
    db: Session = Depends(get_db),
    _: User = Depends(require_permission(PRODUCT_READ)),
):
    product = ProductService(db).get_product(product_id)
    return ApiResponse.ok(ProductResponse.model_validate(product))


@products_router.post(
    "",
    response_model=ApiResponse[ProductResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_product(
    data: ProductCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(PRODUCT_WRITE)),
    context: AuditContext = Depends(get_audit_context),
):
    product = ProductService(db, context).create_product(data, current_user)
    return ApiResponse.ok(ProductResponse.model_validate(product), "Product created successfully")


@products_router.put("/{product_id}", response_model=ApiResponse[ProductResponse])
def update_product(
    product_id: uuid.UUID,
    data: ProductUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(PRODUCT_WRITE)),
    context: AuditContext = Depends(get_audit_context),
):
    product = ProductService(db, context).update_product(product_id, data, current_user)
    return ApiResponse.ok(ProductResponse.model_validate(product), "Product updated successfully")


@products_router.delete("/{product_id}", response_model=ApiResponse[None])
def delete_product(
    product_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(PRODUCT_WRITE)),
    context: AuditContext = Depends(get_audit_context),
):
    """Prodotti con letture vengono disattivati invece che eliminati."""
    _, disabled = ProductService(db, context).delete_product(product_id, current_user)
    message = "Product disabled (has temperature records)" if disabled else "Product deleted successfully"
    return ApiResponse.ok(message=message)


@products_router.patch("/{product_id}/toggle-active", response_model=ApiResponse[ProductResponse])
def toggle_product_active(
    product_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(PRODUCT_WRITE)),
    context: AuditContext = Depends(get_audit_context),
):
    product = ProductService(db, context).toggle_active(product_id, current_user)
    state = "activated" if product.is_active else "deactivated"
    return ApiResponse.ok(ProductResponse.model_validate(product), f"Product {state}")
