# =====================================================
# tempcontrol/repositories/alert_repository.py
# =====================================================
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session
from sqlalchemy import desc
import uuid

from tempcontrol.models.temperature_alert import TemperatureAlert
from .base import BaseRepository


class AlertRepository(BaseRepository[TemperatureAlert]):
    """Repository per gli alert di temperatura"""

    def __init__(self, db: Session):
        super().__init__(TemperatureAlert, db)

    def get_by_form(self, form_id: uuid.UUID) -> List[TemperatureAlert]:
        """Alert di un form, più recenti prima"""
        stmt = self.query().where(TemperatureAlert.form_id == form_id).order_by(
            desc(TemperatureAlert.created_at)
        )
        return list(self.db.execute(stmt).scalars().all())

    def list_paged(
        self,
        page: int = 1,
        page_size: int = 20,
        is_acknowledged: Optional[bool] = None,
        severity: Optional[str] = None,
        form_id: Optional[uuid.UUID] = None,
    ) -> Tuple[List[TemperatureAlert], int]:
        """Lista globale filtrata, più recenti prima"""
        stmt = self.query()
        if is_acknowledged is not None:
            stmt = stmt.where(TemperatureAlert.is_acknowledged.is_(is_acknowledged))
        if severity:
            stmt = stmt.where(TemperatureAlert.severity == severity)
        if form_id:
            stmt = stmt.where(TemperatureAlert.form_id == form_id)
        stmt = stmt.order_by(desc(TemperatureAlert.created_at))
        return self.paginate(stmt, page, page_size)

