# =====================================================
# tempcontrol/models/audit_log.py - SIMPLIFIED
# =====================================================
from sqlalchemy import String, Text, ForeignKey, JSON, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.ext.mutable import MutableDict
from typing import Optional, Dict, Any
import uuid

from .base import BaseModel

# Forward references
from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from .user import User


class AuditLog(BaseModel):
    """
    AuditLog model - chi ha cambiato cosa e quando.

    Scritto dai service nella stessa transazione della modifica.
    """

    __tablename__ = "audit_logs"

    # ==========================================
    # FOREIGN KEYS & RELATIONSHIPS
    # ==========================================

    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )

    user: Mapped[Optional["User"]] = relationship("User")

    # ==========================================
    # WHAT HAPPENED
    # ==========================================

    action: Mapped[str] = mapped_column(String(50), index=True)  # "Create", "Update", "Delete", "Submit"...
    entity_name: Mapped[str] = mapped_column(String(100), index=True)  # "TemperatureControlForm", "Product"
    entity_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid(as_uuid=True), nullable=True, index=True)

    # ==========================================
    # CHANGE DETAILS
    # ==========================================

    old_values: Mapped[Optional[Dict[str, Any]]] = mapped_column(
        MutableDict.as_mutable(JSON()),
        nullable=True
    )

    new_values: Mapped[Optional[Dict[str, Any]]] = mapped_column(
        MutableDict.as_mutable(JSON()),
        nullable=True
    )

    # ==========================================
    # CONTEXT
    # ==========================================

    ip_address: Mapped[Optional[str]] = mapped_column(String(45), nullable=True)
    user_agent: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __str__(self) -> str:
        return f"AuditLog(action={self.action}, entity={self.entity_name}:{self.entity_id})"

    @property
    def has_changes(self) -> bool:
        return self.old_values is not None or self.new_values is not None
