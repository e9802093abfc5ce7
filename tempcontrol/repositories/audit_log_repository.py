# =====================================================
# tempcontrol/repositories/audit_log_repository.py
# =====================================================
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import desc
import uuid

from tempcontrol.models.audit_log import AuditLog
from .base import BaseRepository


class AuditLogRepository(BaseRepository[AuditLog]):
    """Repository per AuditLog con query per tracciabilità"""

    def __init__(self, db: Session):
        super().__init__(AuditLog, db)

    def record(
        self,
        action: str,
        entity_name: str,
        entity_id: Optional[uuid.UUID],
        user_id: Optional[uuid.UUID] = None,
        old_values: Optional[Dict[str, Any]] = None,
        new_values: Optional[Dict[str, Any]] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> AuditLog:
        """Aggiunge una voce di audit nella transazione corrente"""
        return self.add(AuditLog(
            action=action,
            entity_name=entity_name,
            entity_id=entity_id,
            user_id=user_id,
            old_values=old_values,
            new_values=new_values,
            ip_address=ip_address,
            user_agent=user_agent,
        ))

    def get_by_entity(self, entity_name: str, entity_id: uuid.UUID) -> List[AuditLog]:
        """Storico di una entity, più recente prima"""
        stmt = self.query().where(
            AuditLog.entity_name == entity_name,
            AuditLog.entity_id == entity_id,
        ).order_by(desc(AuditLog.created_at))
        return list(self.db.execute(stmt).scalars().all())

