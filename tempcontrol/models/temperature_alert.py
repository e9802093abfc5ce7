# =====================================================
# tempcontrol/models/temperature_alert.py - SQLAlchemy 2.0
# =====================================================
from sqlalchemy import String, Text, Numeric, Boolean, ForeignKey, CheckConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from datetime import datetime
from decimal import Decimal
from typing import Optional
import uuid

from .base import BaseModel, utcnow
from .enums import AlertSeverity, enum_values
from tempcontrol.database.exceptions import InvalidStateError

# Forward references
from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from .temperature_form import TemperatureControlForm
    from .temperature_record import TemperatureRecord
    from .user import User


class TemperatureAlert(BaseModel):
    """
    Alert per temperatura fuori range.

    expected_min/max sono uno snapshot del range del prodotto al momento
    della creazione: non seguono modifiche successive al catalogo.
    """

    __tablename__ = "temperature_alerts"

    # ==========================================
    # FOREIGN KEYS & RELATIONSHIPS
    # ==========================================

    form_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("temperature_forms.id", ondelete="CASCADE"),
        index=True
    )

    record_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("temperature_records.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )

    acknowledged_by_user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True
    )

    form: Mapped["TemperatureControlForm"] = relationship(
        "TemperatureControlForm",
        back_populates="alerts"
    )

    record: Mapped[Optional["TemperatureRecord"]] = relationship(
        "TemperatureRecord",
        back_populates="alerts"
    )

    acknowledged_by_user: Mapped[Optional["User"]] = relationship(
        "User",
        foreign_keys=[acknowledged_by_user_id]
    )

    # ==========================================
    # ALERT INFO
    # ==========================================

    severity: Mapped[str] = mapped_column(String(20), index=True)
    message: Mapped[str] = mapped_column(Text)

    # ==========================================
    # ALERT VALUES (snapshot)
    # ==========================================

    temperature: Mapped[Decimal] = mapped_column(Numeric(5, 2))
    expected_min_temperature: Mapped[Decimal] = mapped_column(Numeric(5, 2))
    expected_max_temperature: Mapped[Decimal] = mapped_column(Numeric(5, 2))

    # ==========================================
    # STATUS TRACKING
    # ==========================================

    is_acknowledged: Mapped[bool] = mapped_column(Boolean, default=False, index=True)
    acknowledged_at: Mapped[Optional[datetime]] = mapped_column(nullable=True)

    # ==========================================
    # CONSTRAINTS
    # ==========================================

    __table_args__ = (
        CheckConstraint(
            f"severity IN ({enum_values(AlertSeverity)})",
            name='chk_alert_severity_valid'
        ),
    )

    # ==========================================
    # BUSINESS LOGIC
    # ==========================================

    def __str__(self) -> str:
        return f"TemperatureAlert(severity={self.severity}, acknowledged={self.is_acknowledged})"

    @property
    def alert_severity(self) -> AlertSeverity:
        return AlertSeverity(self.severity)

    @property
    def is_critical(self) -> bool:
        return self.alert_severity.is_critical

    def acknowledge(self, user_id: uuid.UUID) -> None:
        """Riconosce l'alert. Transizione a senso unico."""
        if self.is_acknowledged:
            raise InvalidStateError("acknowledge", "Acknowledged")
        self.is_acknowledged = True
        self.acknowledged_by_user_id = user_id
        self.acknowledged_at = utcnow()
