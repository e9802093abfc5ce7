# =====================================================
# tempcontrol/services/alert_service.py - Temperature Alerts
# =====================================================
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session
import logging
import uuid

from tempcontrol.models.enums import AlertSeverity
from tempcontrol.models.temperature_alert import TemperatureAlert
from tempcontrol.models.user import User
from tempcontrol.database.exceptions import EntityNotFoundError, ValidationError
from .audit import AuditContext, record_change, snapshot
from .unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class AlertService:
    """Consultazione e presa in carico degli alert"""

    def __init__(self, db: Session, context: Optional[AuditContext] = None):
        self.uow = UnitOfWork(db)
        self.repos = self.uow.repositories
        self.context = context

    def list_alerts(
        self,
        page: int = 1,
        page_size: int = 20,
        is_acknowledged: Optional[bool] = None,
        severity: Optional[str] = None,
        form_id: Optional[uuid.UUID] = None,
    ) -> Tuple[List[TemperatureAlert], int]:
        if severity is not None:
            try:
                severity = AlertSeverity(severity).value
            except ValueError:
                raise ValidationError(
                    f"Severity must be one of: {', '.join(s.value for s in AlertSeverity)}"
                )
        return self.repos.alerts.list_paged(
            page=page,
            page_size=page_size,
            is_acknowledged=is_acknowledged,
            severity=severity,
            form_id=form_id,
        )

    def acknowledge(self, alert_id: uuid.UUID, user: User) -> TemperatureAlert:
        """Presa in carico, una sola volta per alert"""
        with self.uow.transaction():
            alert = self.repos.alerts.get_or_raise(alert_id)
            old_values = snapshot(alert)
            alert.acknowledge(user.id)
            self.repos.alerts.update(alert)
            record_change(self.repos.audit_logs, "Acknowledge", alert, user.id, old_values, self.context)

        logger.info("Alert %s acknowledged by user %s", alert_id, user.id)
        return alert

    def acknowledge_all(self, form_id: uuid.UUID, user: User) -> int:
        """Prende in carico tutti gli alert aperti di un form"""
        with self.uow.transaction():
            if not self.repos.forms.exists(form_id):
                raise EntityNotFoundError(f"Temperature form with id {form_id} not found")
            pending = [alert for alert in self.repos.alerts.get_by_form(form_id) if not alert.is_acknowledged]
            for alert in pending:
                old_values = snapshot(alert)
                alert.acknowledge(user.id)
                record_change(self.repos.audit_logs, "Acknowledge", alert, user.id, old_values, self.context)

        logger.info("%d alerts on form %s acknowledged by user %s", len(pending), form_id, user.id)
        return len(pending)
