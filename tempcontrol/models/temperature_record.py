# =====================================================
# tempcontrol/models/temperature_record.py - SQLAlchemy 2.0
# =====================================================
from sqlalchemy import String, Text, Numeric, Integer, Boolean, Time, ForeignKey, CheckConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from datetime import date, datetime, time
from decimal import Decimal
from typing import List, Optional
import uuid

from .base import BaseModel

# Forward references
from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from .product import Product
    from .temperature_form import TemperatureControlForm
    from .temperature_alert import TemperatureAlert


def minutes_between(start: Optional[time], end: Optional[time]) -> Optional[int]:
    """Minuti interi (troncati verso zero) tra due orari, None se manca un estremo"""
    if start is None or end is None:
        return None
    delta = datetime.combine(date.min, end) - datetime.combine(date.min, start)
    return int(delta.total_seconds() / 60)


class TemperatureRecord(BaseModel):
    """
    Lettura di temperatura per un carrello (car) all'interno di un form.

    Il product_code è conservato anche se il prodotto viene rimosso,
    per tracciabilità.
    """

    __tablename__ = "temperature_records"

    # ==========================================
    # FOREIGN KEYS & RELATIONSHIPS
    # ==========================================

    form_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("temperature_forms.id", ondelete="CASCADE"),
        index=True
    )

    product_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("products.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )

    form: Mapped["TemperatureControlForm"] = relationship(
        "TemperatureControlForm",
        back_populates="temperature_records"
    )

    product: Mapped[Optional["Product"]] = relationship(
        "Product",
        back_populates="temperature_records"
    )

    alerts: Mapped[List["TemperatureAlert"]] = relationship(
        "TemperatureAlert",
        back_populates="record"
    )

    # ==========================================
    # READING
    # ==========================================

    car_number: Mapped[int] = mapped_column(Integer)
    product_code: Mapped[str] = mapped_column(String(20), index=True)
    product_temperature: Mapped[Decimal] = mapped_column(Numeric(5, 2))

    defrost_start_time: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    consumption_start_time: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    consumption_end_time: Mapped[Optional[time]] = mapped_column(Time, nullable=True)

    observations: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    record_order: Mapped[int] = mapped_column(Integer, default=0)

    has_alert: Mapped[bool] = mapped_column(Boolean, default=False)

    # ==========================================
    # CONSTRAINTS
    # ==========================================

    __table_args__ = (
        CheckConstraint('car_number >= 1', name='chk_record_car_number_positive'),
        CheckConstraint('product_temperature BETWEEN -100 AND 100', name='chk_record_temperature_range'),
    )

    # ==========================================
    # BUSINESS LOGIC
    # ==========================================

    def __str__(self) -> str:
        return f"TemperatureRecord(car={self.car_number}, product={self.product_code}, temp={self.product_temperature})"

    @property
    def defrost_duration_minutes(self) -> Optional[int]:
        """Durata scongelamento: inizio consumo - inizio scongelamento"""
        return minutes_between(self.defrost_start_time, self.consumption_start_time)

    @property
    def consumption_duration_minutes(self) -> Optional[int]:
        """Durata consumo: fine consumo - inizio consumo"""
        return minutes_between(self.consumption_start_time, self.consumption_end_time)

    @property
    def product_name(self) -> str:
        return self.product.product_name if self.product is not None else ""

    def validate_temperature(self) -> bool:
        """True se nel range del prodotto (o se il prodotto non è disponibile)"""
        if self.product is None:
            return True
        return self.product.is_temperature_in_range(self.product_temperature)
