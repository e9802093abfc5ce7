# =====================================================
# tempcontrol/repositories/product_repository.py
# =====================================================
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import asc, exists, select

from tempcontrol.models.product import Product
from tempcontrol.models.temperature_record import TemperatureRecord
from .base import BaseRepository, not_deleted


def normalize_product_code(code: str) -> str:
    """Codici prodotto salvati trim + upper-case"""
    return (code or "").strip().upper()


class ProductRepository(BaseRepository[Product]):
    """Repository per il catalogo prodotti"""

    def __init__(self, db: Session):
        super().__init__(Product, db)

    def get_by_code(self, product_code: str) -> Optional[Product]:
        """Get product by code (case-insensitive sul codice normalizzato)"""
        stmt = self.query().where(Product.product_code == normalize_product_code(product_code))
        return self.db.execute(stmt).scalar_one_or_none()

    def list_products(self, active_only: bool = False) -> List[Product]:
        """Prodotti ordinati per codice"""
        stmt = self.query()
        if active_only:
            stmt = stmt.where(Product.is_active.is_(True))
        stmt = stmt.order_by(asc(Product.product_code))
        return list(self.db.execute(stmt).scalars().all())

    def code_exists(self, product_code: str, exclude_id=None) -> bool:
        """Check unicità codice; include le righe soft-deleted (vincolo unique sul DB)"""
        stmt = select(Product.id).where(Product.product_code == normalize_product_code(product_code))
        if exclude_id is not None:
            stmt = stmt.where(Product.id != exclude_id)
        return self.db.execute(stmt).first() is not None

    def has_records(self, product: Product) -> bool:
        """True se qualche lettura attiva referenzia il prodotto"""
        stmt = select(
            exists().where(
                TemperatureRecord.product_id == product.id,
                not_deleted(TemperatureRecord),
            )
        )
        return bool(self.db.execute(stmt).scalar())
