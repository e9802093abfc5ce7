# =====================================================
# tempcontrol/models/temperature_form.py - SQLAlchemy 2.0
# =====================================================
from sqlalchemy import String, Text, Integer, Date, ForeignKey, CheckConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from datetime import date, datetime
from typing import List, Optional
import uuid

from .base import BaseModel, exclude_deleted, utcnow
from .enums import FormStatus, enum_values
from tempcontrol.database.exceptions import InvalidStateError, ValidationError

# Forward references
from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from .user import User
    from .temperature_record import TemperatureRecord
    from .temperature_alert import TemperatureAlert

FORM_NUMBER_PREFIX = "TEMP"

EDITABLE_STATUSES = (FormStatus.DRAFT, FormStatus.REJECTED)
REVIEW_OUTCOMES = (FormStatus.REVIEWED, FormStatus.REJECTED)


def form_number_prefix(day: date) -> str:
    """Prefisso del numero form per un giorno: TEMP-YYYYMMDD-"""
    return f"{FORM_NUMBER_PREFIX}-{day.strftime('%Y%m%d')}-"


class TemperatureControlForm(BaseModel):
    """
    Form di controllo temperatura.

    Raggruppa le letture di una spedizione. Il ciclo di vita è:
    Draft/Rejected -> (modifiche) -> Completed -> (revisione) -> Reviewed | Rejected.
    Archived è terminale e si raggiunge solo per assegnazione amministrativa.
    """

    __tablename__ = "temperature_forms"

    # ==========================================
    # IDENTITY
    # ==========================================

    form_number: Mapped[str] = mapped_column(String(30), unique=True, index=True)

    # ==========================================
    # HEADER
    # ==========================================

    destination: Mapped[str] = mapped_column(String(200))
    defrost_date: Mapped[date] = mapped_column(Date)
    production_date: Mapped[date] = mapped_column(Date)
    status: Mapped[str] = mapped_column(String(20), default=FormStatus.DRAFT.value, index=True)

    observations: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    attachment_urls: Mapped[Optional[str]] = mapped_column(Text, nullable=True)  # JSON array
    geo_location: Mapped[Optional[str]] = mapped_column(Text, nullable=True)  # JSON lat/long

    # Firme digitali (blob opachi)
    created_by_signature: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    reviewed_by_signature: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # ==========================================
    # USERS
    # ==========================================

    created_by_user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="RESTRICT"),
        index=True
    )

    reviewed_by_user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True
    )

    reviewed_at: Mapped[Optional[datetime]] = mapped_column(nullable=True)
    review_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Optimistic concurrency
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    # ==========================================
    # RELATIONSHIPS
    # ==========================================

    created_by_user: Mapped["User"] = relationship(
        "User",
        foreign_keys=[created_by_user_id]
    )

    reviewed_by_user: Mapped[Optional["User"]] = relationship(
        "User",
        foreign_keys=[reviewed_by_user_id]
    )

    temperature_records: Mapped[List["TemperatureRecord"]] = relationship(
        "TemperatureRecord",
        back_populates="form",
        cascade="all, delete-orphan",
        order_by="TemperatureRecord.record_order"
    )

    alerts: Mapped[List["TemperatureAlert"]] = relationship(
        "TemperatureAlert",
        back_populates="form",
        cascade="all, delete-orphan"
    )

    # ==========================================
    # CONSTRAINTS
    # ==========================================

    __table_args__ = (
        CheckConstraint(
            f"status IN ({enum_values(FormStatus)})",
            name='chk_form_status_valid'
        ),
    )

    __mapper_args__ = {"version_id_col": version}

    # ==========================================
    # LIFECYCLE
    # ==========================================

    def __str__(self) -> str:
        return f"TemperatureControlForm(number={self.form_number}, status={self.status})"

    @property
    def form_status(self) -> FormStatus:
        # status è None su un'istanza transient non ancora flushata
        return FormStatus(self.status or FormStatus.DRAFT.value)

    def can_be_edited(self) -> bool:
        """Modificabile solo in Draft o Rejected"""
        return self.form_status in EDITABLE_STATUSES

    def can_be_reviewed(self) -> bool:
        """Revisionabile solo in Completed"""
        return self.form_status == FormStatus.COMPLETED

    def ensure_editable(self, operation: str = "edit") -> None:
        """Guard usata da ogni componente che modifica il form"""
        if not self.can_be_edited():
            raise InvalidStateError(operation, self.status)

    def ensure_reviewable(self) -> None:
        if not self.can_be_reviewed():
            raise InvalidStateError("review", self.status)

    def generate_form_number(self, sequence_number: int) -> None:
        """Numero form TEMP-YYYYMMDD-NNNN dalla data di creazione"""
        created = self.created_at or utcnow()
        self.form_number = f"{form_number_prefix(created.date())}{sequence_number:04d}"

    def complete(self) -> None:
        """Draft/Rejected -> Completed"""
        self.ensure_editable("submit")
        if not self.active_records:
            raise ValidationError("A form without temperature records cannot be submitted")
        self.status = FormStatus.COMPLETED.value

    def review(
        self,
        outcome: FormStatus,
        reviewer_id: uuid.UUID,
        notes: Optional[str] = None,
        signature: Optional[str] = None,
    ) -> None:
        """Completed -> Reviewed | Rejected, con timbro del revisore"""
        self.ensure_reviewable()
        if outcome not in REVIEW_OUTCOMES:
            raise ValidationError("Review status must be 'Reviewed' or 'Rejected'")
        self.status = outcome.value
        self.reviewed_by_user_id = reviewer_id
        self.reviewed_at = utcnow()
        self.review_notes = notes
        self.reviewed_by_signature = signature

    def archive(self) -> None:
        """Ritiro logico del form"""
        self.status = FormStatus.ARCHIVED.value

    # ==========================================
    # COLLECTION HELPERS
    # ==========================================

    @property
    def active_records(self) -> List["TemperatureRecord"]:
        return exclude_deleted(self.temperature_records)

    @property
    def active_alerts(self) -> List["TemperatureAlert"]:
        return exclude_deleted(self.alerts)

    @property
    def has_alerts(self) -> bool:
        return len(self.active_alerts) > 0

    def next_record_order(self) -> int:
        orders = [record.record_order for record in self.active_records]
        return max(orders) + 1 if orders else 1
