# =====================================================
# tempcontrol/models/__init__.py
# =====================================================
"""
Models package initialization.

Import all models to ensure they are registered with SQLAlchemy metadata.
This is CRITICAL for foreign key resolution during create_all() operations.

IMPORTANT: Every time you add a new model, import it here!
"""
import logging

# Base model MUST be imported first
from .base import Base, BaseModel, exclude_deleted, utcnow
from .enums import FormStatus, AlertSeverity, UserRole, SEVERITY_RANK

# Core business models (order matters for foreign keys)
from .user import User
from .product import Product
from .temperature_form import TemperatureControlForm
from .temperature_record import TemperatureRecord
from .temperature_alert import TemperatureAlert
from .audit_log import AuditLog

logger = logging.getLogger(__name__)

__all__ = [
    # Base
    "Base",
    "BaseModel",
    "exclude_deleted",
    "utcnow",

    # Enums
    "FormStatus",
    "AlertSeverity",
    "UserRole",
    "SEVERITY_RANK",

    # Core models
    "User",
    "Product",
    "TemperatureControlForm",
    "TemperatureRecord",
    "TemperatureAlert",
    "AuditLog",
]


def verify_models_registered() -> int:
    """
    Utility function to verify all models are properly registered
    with SQLAlchemy metadata. Useful for debugging.
    """
    tables = BaseModel.metadata.tables
    logger.info("Registered tables: %d", len(tables))
    for table_name in sorted(tables.keys()):
        logger.info("  - %s", table_name)
    return len(tables)
