# =====================================================
# tempcontrol/repositories/__init__.py - Export tutti i repository
# =====================================================

from .base import BaseRepository, not_deleted, normalize_paging, total_pages
from .user_repository import UserRepository
from .product_repository import ProductRepository
from .form_repository import FormRepository
from .record_repository import RecordRepository
from .alert_repository import AlertRepository
from .audit_log_repository import AuditLogRepository

__all__ = [
    "BaseRepository",
    "not_deleted",
    "normalize_paging",
    "total_pages",
    "UserRepository",
    "ProductRepository",
    "FormRepository",
    "RecordRepository",
    "AlertRepository",
    "AuditLogRepository",
]
