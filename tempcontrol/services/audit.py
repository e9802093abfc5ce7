# =====================================================
# tempcontrol/services/audit.py - Audit trail helper
# =====================================================
from dataclasses import dataclass
from typing import Any, Dict, Optional

from tempcontrol.models.base import BaseModel
from tempcontrol.repositories.audit_log_repository import AuditLogRepository


@dataclass
class AuditContext:
    """Informazioni sul client che ha originato la modifica"""
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None


def snapshot(entity: Optional[BaseModel]) -> Optional[Dict[str, Any]]:
    return entity.to_dict() if entity is not None else None


def record_change(
    audit_logs: AuditLogRepository,
    action: str,
    entity: BaseModel,
    user_id=None,
    old_values: Optional[Dict[str, Any]] = None,
    context: Optional[AuditContext] = None,
    removed: bool = False,
):
    """
    Scrive l'audit log per una entity nella transazione corrente.

    Con removed=True la entity sta per essere cancellata fisicamente:
    new_values resta vuoto.
    """
    context = context or AuditContext()
    return audit_logs.record(
        action=action,
        entity_name=type(entity).__name__,
        entity_id=entity.id,
        user_id=user_id,
        old_values=old_values,
        new_values=None if removed else snapshot(entity),
        ip_address=context.ip_address,
        user_agent=context.user_agent,
    )
