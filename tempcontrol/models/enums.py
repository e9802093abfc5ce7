# =====================================================
# tempcontrol/models/enums.py - Enum di dominio
# =====================================================
from enum import Enum


class FormStatus(str, Enum):
    """Stato del form di controllo temperatura"""
    DRAFT = "Draft"            # in compilazione
    COMPLETED = "Completed"    # pronto per la revisione
    REVIEWED = "Reviewed"      # approvato dal supervisor
    REJECTED = "Rejected"      # richiede correzioni
    ARCHIVED = "Archived"      # ritirato


class AlertSeverity(str, Enum):
    """Severità alert, in ordine crescente di deviazione"""
    INFO = "Info"
    WARNING = "Warning"
    CRITICAL = "Critical"
    EMERGENCY = "Emergency"

    @property
    def rank(self) -> int:
        return SEVERITY_RANK[self]

    @property
    def is_critical(self) -> bool:
        """Critical ed Emergency contano come alert critici nei report"""
        return self in (AlertSeverity.CRITICAL, AlertSeverity.EMERGENCY)


SEVERITY_RANK = {
    AlertSeverity.INFO: 0,
    AlertSeverity.WARNING: 1,
    AlertSeverity.CRITICAL: 2,
    AlertSeverity.EMERGENCY: 3,
}


class UserRole(str, Enum):
    """Ruoli utente (set chiuso)"""
    OPERATOR = "Operator"            # crea e modifica form
    SUPERVISOR = "Supervisor"        # rivede e approva form
    ADMINISTRATOR = "Administrator"  # controllo totale
    AUDITOR = "Auditor"              # sola lettura per report


def enum_values(enum_cls) -> str:
    """Lista SQL dei valori, per i CheckConstraint"""
    return ", ".join(f"'{member.value}'" for member in enum_cls)
