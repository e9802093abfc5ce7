# =====================================================
# tempcontrol/services/product_service.py - Product Catalog
# =====================================================
from typing import List, Optional, Tuple
from decimal import Decimal
from sqlalchemy.orm import Session
import logging
import uuid

from tempcontrol.models.enums import AlertSeverity
from tempcontrol.models.product import Product
from tempcontrol.models.user import User
from tempcontrol.database.exceptions import (
    DuplicateEntityError,
    EntityNotFoundError,
    ValidationError,
)
from tempcontrol.repositories.product_repository import normalize_product_code
from tempcontrol.schemas.product import ProductCreate, ProductUpdate
from .audit import AuditContext, record_change, snapshot
from .unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)

TEMPERATURE_LIMIT = Decimal("100")
MAX_DEFROST_MINUTES = 1440


def validate_product_fields(
    product_code: Optional[str],
    product_name: Optional[str],
    min_temperature: Decimal,
    max_temperature: Decimal,
    max_defrost_time_minutes: int,
) -> List[str]:
    """Regole di validazione prodotto, ritorna un messaggio per regola violata"""
    errors = []

    if not product_code or not product_code.strip():
        errors.append("Product code is required")
    elif len(product_code.strip()) > 20:
        errors.append("Product code cannot exceed 20 characters")

    if not product_name or not product_name.strip():
        errors.append("Product name is required")
    elif len(product_name.strip()) > 200:
        errors.append("Product name cannot exceed 200 characters")

    if min_temperature >= max_temperature:
        errors.append("Minimum temperature must be lower than maximum temperature")

    if min_temperature < -TEMPERATURE_LIMIT or min_temperature > TEMPERATURE_LIMIT:
        errors.append("Minimum temperature must be between -100°C and 100°C")

    if max_temperature < -TEMPERATURE_LIMIT or max_temperature > TEMPERATURE_LIMIT:
        errors.append("Maximum temperature must be between -100°C and 100°C")

    if max_defrost_time_minutes <= 0:
        errors.append("Maximum defrost time must be greater than 0 minutes")
    elif max_defrost_time_minutes > MAX_DEFROST_MINUTES:
        errors.append("Maximum defrost time cannot exceed 1440 minutes (24 hours)")

    return errors


class ProductService:
    """Use case del catalogo prodotti"""

    def __init__(self, db: Session, context: Optional[AuditContext] = None):
        self.uow = UnitOfWork(db)
        self.repos = self.uow.repositories
        self.context = context

    # ==========================================
    # QUERIES
    # ==========================================

    def list_products(self, is_active: Optional[bool] = None) -> List[Product]:
        products = self.repos.products.list_products()
        if is_active is None:
            return products
        return [product for product in products if product.is_active == is_active]

    def get_product(self, product_id: uuid.UUID) -> Product:
        return self.repos.products.get_or_raise(product_id)

    def get_by_code(self, product_code: str) -> Product:
        if not product_code or not product_code.strip():
            raise ValidationError("Product code is required")
        product = self.repos.products.get_by_code(product_code)
        if product is None:
            raise EntityNotFoundError(f"Product with code '{normalize_product_code(product_code)}' not found")
        return product

    def check_temperature(self, product_code: str, temperature: Decimal) -> Tuple[Product, bool, AlertSeverity]:
        """Esito della policy di range per una lettura, senza salvarla"""
        product = self.get_by_code(product_code)
        return product, product.is_temperature_in_range(temperature), product.get_alert_severity(temperature)

    # ==========================================
    # COMMANDS
    # ==========================================

    def create_product(self, data: ProductCreate, user: User) -> Product:
        errors = validate_product_fields(
            data.product_code,
            data.product_name,
            data.min_temperature,
            data.max_temperature,
            data.max_defrost_time_minutes,
        )
        if errors:
            raise ValidationError("Validation failed", errors)

        with self.uow.transaction():
            code = normalize_product_code(data.product_code)
            if self.repos.products.code_exists(code):
                raise DuplicateEntityError(f"A product with code '{code}' already exists")

            product = Product(
                product_code=code,
                product_name=data.product_name.strip(),
                min_temperature=data.min_temperature,
                max_temperature=data.max_temperature,
                max_defrost_time_minutes=data.max_defrost_time_minutes,
                description=data.description.strip() if data.description else None,
                category=data.category.strip() if data.category else None,
                is_active=True,
            )
            self.repos.products.add(product)
            record_change(self.repos.audit_logs, "Create", product, user.id, context=self.context)

        logger.info("Product %s created by user %s", product.product_code, user.id)
        return product

    def update_product(self, product_id: uuid.UUID, data: ProductUpdate, user: User) -> Product:
        with self.uow.transaction():
            product = self.repos.products.get_or_raise(product_id)
            old_values = snapshot(product)

            errors = validate_product_fields(
                data.product_code if data.product_code is not None else product.product_code,
                data.product_name if data.product_name is not None else product.product_name,
                data.min_temperature if data.min_temperature is not None else product.min_temperature,
                data.max_temperature if data.max_temperature is not None else product.max_temperature,
                data.max_defrost_time_minutes if data.max_defrost_time_minutes is not None
                else product.max_defrost_time_minutes,
            )
            if errors:
                raise ValidationError("Validation failed", errors)

            if data.product_code is not None:
                code = normalize_product_code(data.product_code)
                if code != product.product_code:
                    if self.repos.products.code_exists(code, exclude_id=product.id):
                        raise DuplicateEntityError(f"Another product with code '{code}' already exists")
                    product.product_code = code

            if data.product_name is not None:
                product.product_name = data.product_name.strip()
            if data.min_temperature is not None:
                product.min_temperature = data.min_temperature
            if data.max_temperature is not None:
                product.max_temperature = data.max_temperature
            if data.max_defrost_time_minutes is not None:
                product.max_defrost_time_minutes = data.max_defrost_time_minutes
            if data.description is not None:
                product.description = data.description.strip()
            if data.category is not None:
                product.category = data.category.strip()
            if data.is_active is not None:
                product.is_active = data.is_active

            self.repos.products.update(product)
            record_change(self.repos.audit_logs, "Update", product, user.id, old_values, self.context)

        logger.info("Product %s updated by user %s", product.product_code, user.id)
        return product

    def delete_product(self, product_id: uuid.UUID, user: User) -> Tuple[Product, bool]:
        """
        Rimuove un prodotto dal catalogo.

        Se è referenziato da letture viene solo disattivato (is_active=False),
        altrimenti soft-deleted. Ritorna (product, disattivato).
        """
        with self.uow.transaction():
            product = self.repos.products.get_or_raise(product_id)
            old_values = snapshot(product)

            if self.repos.products.has_records(product):
                product.is_active = False
                self.repos.products.update(product)
                record_change(self.repos.audit_logs, "Deactivate", product, user.id, old_values, self.context)
                disabled = True
            else:
                self.repos.products.soft_delete(product)
                record_change(self.repos.audit_logs, "Delete", product, user.id, old_values, self.context)
                disabled = False

        if disabled:
            logger.info("Product %s disabled by user %s (has temperature records)", product.product_code, user.id)
        else:
            logger.info("Product %s deleted by user %s", product.product_code, user.id)
        return product, disabled

    def toggle_active(self, product_id: uuid.UUID, user: User) -> Product:
        with self.uow.transaction():
            product = self.repos.products.get_or_raise(product_id)
            old_values = snapshot(product)
            product.is_active = not product.is_active
            self.repos.products.update(product)
            record_change(self.repos.audit_logs, "Update", product, user.id, old_values, self.context)

        logger.info("Product %s active=%s by user %s", product.product_code, product.is_active, user.id)
        return product
