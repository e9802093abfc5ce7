# =====================================================
# tempcontrol/models/product.py - SQLAlchemy 2.0
# =====================================================
from sqlalchemy import String, Text, Numeric, Integer, Boolean, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from decimal import Decimal
from typing import List, Optional

from .base import BaseModel
from .enums import AlertSeverity
from tempcontrol.services import range_policy

# Forward references
from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from .temperature_record import TemperatureRecord


class Product(BaseModel):
    """
    Product model - catalogo prodotti con range di temperatura ammesso.

    Il range (min/max) è la policy usata per validare le letture
    e classificare gli alert.
    """

    __tablename__ = "products"

    # ==========================================
    # IDENTITY
    # ==========================================

    product_code: Mapped[str] = mapped_column(String(20), unique=True, index=True)
    product_name: Mapped[str] = mapped_column(String(200))
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    category: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    # ==========================================
    # RANGE POLICY
    # ==========================================

    min_temperature: Mapped[Decimal] = mapped_column(Numeric(5, 2))
    max_temperature: Mapped[Decimal] = mapped_column(Numeric(5, 2))
    max_defrost_time_minutes: Mapped[int] = mapped_column(Integer)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)

    # ==========================================
    # RELATIONSHIPS
    # ==========================================

    temperature_records: Mapped[List["TemperatureRecord"]] = relationship(
        "TemperatureRecord",
        back_populates="product"
    )

    # ==========================================
    # CONSTRAINTS
    # ==========================================

    __table_args__ = (
        CheckConstraint('min_temperature < max_temperature', name='chk_product_range_order'),
        CheckConstraint('min_temperature BETWEEN -100 AND 100', name='chk_product_min_temperature'),
        CheckConstraint('max_temperature BETWEEN -100 AND 100', name='chk_product_max_temperature'),
        CheckConstraint(
            'max_defrost_time_minutes BETWEEN 1 AND 1440',
            name='chk_product_defrost_time'
        ),
    )

    # ==========================================
    # BUSINESS LOGIC
    # ==========================================

    def __str__(self) -> str:
        return f"Product(code={self.product_code}, range=[{self.min_temperature}, {self.max_temperature}])"

    def is_temperature_in_range(self, temperature) -> bool:
        """Verifica se la temperatura è nel range ammesso (estremi inclusi)"""
        return range_policy.is_in_range(temperature, self.min_temperature, self.max_temperature)

    def get_alert_severity(self, temperature) -> AlertSeverity:
        """Severità dell'alert per una temperatura"""
        return range_policy.classify(temperature, self.min_temperature, self.max_temperature)
