# =====================================================
# tempcontrol/models/base.py
# =====================================================
from sqlalchemy import Boolean, Uuid, false, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, Any, Iterable, List, Optional, TypeVar
import uuid


def utcnow() -> datetime:
    """Timestamp UTC naive, formato usato da tutte le colonne datetime"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    """SQLAlchemy 2.0 declarative base"""
    pass


class BaseModel(Base):
    """
    Base model per tutte le entity.

    Fornisce:
    - id UUID
    - created_at / updated_at automatici
    - coppia soft-delete is_deleted / deleted_at
    """

    __abstract__ = True

    # Primary key con UUID
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4
    )

    # Timestamps automatici
    created_at: Mapped[datetime] = mapped_column(
        default=utcnow,
        server_default=func.now(),
        index=True
    )

    updated_at: Mapped[datetime] = mapped_column(
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow
    )

    # Soft delete
    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False, server_default=false(), index=True)
    deleted_at: Mapped[Optional[datetime]] = mapped_column(nullable=True)

    def __repr__(self) -> str:
        """Rappresentazione debug"""
        return f"<{self.__class__.__name__}(id={self.id})>"

    def soft_delete(self) -> None:
        """Marca la riga come eliminata senza rimuoverla"""
        self.is_deleted = True
        self.deleted_at = utcnow()

    def to_dict(self) -> Dict[str, Any]:
        """Converte in dizionario JSON-friendly (usato dall'audit log)"""
        result = {}
        for column in self.__table__.columns:
            value = getattr(self, column.key, None)
            if isinstance(value, uuid.UUID):
                result[column.key] = str(value)
            elif isinstance(value, datetime):
                result[column.key] = value.isoformat()
            elif isinstance(value, Decimal):
                result[column.key] = str(value)
            elif hasattr(value, "isoformat"):
                result[column.key] = value.isoformat()
            else:
                result[column.key] = value
        return result


ModelType = TypeVar("ModelType", bound=BaseModel)


def exclude_deleted(items: Iterable[ModelType]) -> List[ModelType]:
    """Filtra le righe soft-deleted da una collection già caricata"""
    return [item for item in items if not item.is_deleted]
