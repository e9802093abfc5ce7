# =====================================================
# tempcontrol/repositories/form_repository.py
# =====================================================
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session, selectinload
from sqlalchemy import desc, select
from datetime import date, datetime, time
import uuid

from tempcontrol.models.temperature_form import TemperatureControlForm, form_number_prefix
from tempcontrol.models.temperature_record import TemperatureRecord
from .base import BaseRepository


def day_bounds(day: date) -> Tuple[datetime, datetime]:
    """[inizio giorno, fine giorno] inclusivo"""
    return datetime.combine(day, time.min), datetime.combine(day, time.max)


class FormRepository(BaseRepository[TemperatureControlForm]):
    """Repository per i form di controllo temperatura (aggregate root)"""

    def __init__(self, db: Session):
        super().__init__(TemperatureControlForm, db)

    def _with_details(self, stmt):
        return stmt.options(
            selectinload(TemperatureControlForm.temperature_records).selectinload(TemperatureRecord.product),
            selectinload(TemperatureControlForm.alerts),
            selectinload(TemperatureControlForm.created_by_user),
            selectinload(TemperatureControlForm.reviewed_by_user),
        )

    def get_with_details(self, form_id: uuid.UUID) -> Optional[TemperatureControlForm]:
        """Form con letture, prodotti, alert e utenti già caricati"""
        stmt = self._with_details(self.query().where(TemperatureControlForm.id == form_id))
        return self.db.execute(stmt).scalar_one_or_none()

    def next_sequence_number(self, day: date) -> int:
        """
        Prossimo progressivo per il giorno.

        Considera anche i form soft-deleted: il numero è unique sul DB.
        """
        prefix = form_number_prefix(day)
        stmt = select(TemperatureControlForm.form_number).where(
            TemperatureControlForm.form_number.like(f"{prefix}%")
        )
        highest = 0
        for form_number in self.db.execute(stmt).scalars():
            suffix = form_number[len(prefix):]
            if suffix.isdigit():
                highest = max(highest, int(suffix))
        return highest + 1

    def list_paged(
        self,
        page: int = 1,
        page_size: int = 20,
        status: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        destination: Optional[str] = None,
        created_by_user_id: Optional[uuid.UUID] = None,
    ) -> Tuple[List[TemperatureControlForm], int]:
        """Lista paginata con filtri, più recenti prima"""
        stmt = self.query()
        if status:
            stmt = stmt.where(TemperatureControlForm.status == status)
        if start_date:
            stmt = stmt.where(TemperatureControlForm.created_at >= day_bounds(start_date)[0])
        if end_date:
            stmt = stmt.where(TemperatureControlForm.created_at <= day_bounds(end_date)[1])
        if destination:
            stmt = stmt.where(TemperatureControlForm.destination.ilike(f"%{destination}%"))
        if created_by_user_id:
            stmt = stmt.where(TemperatureControlForm.created_by_user_id == created_by_user_id)
        stmt = self._with_details(stmt).order_by(desc(TemperatureControlForm.created_at))
        return self.paginate(stmt, page, page_size)

    def list_created_between(self, start: datetime, end: datetime) -> List[TemperatureControlForm]:
        """Form creati in [start, end] con dettagli, per i report"""
        stmt = self._with_details(
            self.query().where(
                TemperatureControlForm.created_at >= start,
                TemperatureControlForm.created_at <= end,
            )
        ).order_by(TemperatureControlForm.created_at)
        return list(self.db.execute(stmt).scalars().all())
