# =====================================================
# tempcontrol/repositories/record_repository.py
# =====================================================
from typing import Optional
from sqlalchemy.orm import Session
import uuid

from tempcontrol.models.temperature_record import TemperatureRecord
from .base import BaseRepository


class RecordRepository(BaseRepository[TemperatureRecord]):
    """Repository per le letture di temperatura"""

    def __init__(self, db: Session):
        super().__init__(TemperatureRecord, db)

    def get_for_form(self, form_id: uuid.UUID, record_id: uuid.UUID) -> Optional[TemperatureRecord]:
        """Lettura solo se appartiene al form indicato"""
        stmt = self.query().where(
            TemperatureRecord.id == record_id,
            TemperatureRecord.form_id == form_id,
        )
        return self.db.execute(stmt).scalar_one_or_none()
