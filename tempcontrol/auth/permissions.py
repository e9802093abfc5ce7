# =====================================================
# tempcontrol/auth/permissions.py - Role Permission Matrix
# =====================================================
"""
Tabella statica ruolo -> operazioni ammesse.

Ogni endpoint dichiara l'operazione che esegue e la verifica avviene
prima di entrare nel service (vedi auth/dependencies.require_permission).
"""
from typing import Dict, FrozenSet, Union

from tempcontrol.models.enums import UserRole
from tempcontrol.database.exceptions import AuthorizationError

PRODUCT_READ = "product:read"
PRODUCT_WRITE = "product:write"
FORM_READ = "form:read"
FORM_WRITE = "form:write"
FORM_REVIEW = "form:review"
FORM_DELETE = "form:delete"
FORM_ARCHIVE = "form:archive"
ALERT_READ = "alert:read"
ALERT_ACKNOWLEDGE = "alert:acknowledge"
REPORT_READ = "report:read"

_READ_ONLY = frozenset({PRODUCT_READ, FORM_READ, ALERT_READ, REPORT_READ})

PERMISSIONS: Dict[UserRole, FrozenSet[str]] = {
    UserRole.AUDITOR: _READ_ONLY,
    UserRole.OPERATOR: _READ_ONLY | {FORM_WRITE},
    UserRole.SUPERVISOR: _READ_ONLY | {FORM_WRITE, FORM_REVIEW, ALERT_ACKNOWLEDGE},
    UserRole.ADMINISTRATOR: _READ_ONLY | {
        PRODUCT_WRITE,
        FORM_WRITE,
        FORM_REVIEW,
        FORM_DELETE,
        FORM_ARCHIVE,
        ALERT_ACKNOWLEDGE,
    },
}

ALL_OPERATIONS = frozenset().union(*PERMISSIONS.values())


def _as_role(role: Union[UserRole, str]) -> UserRole:
    return role if isinstance(role, UserRole) else UserRole(role)


def has_permission(role: Union[UserRole, str], operation: str) -> bool:
    """True se il ruolo può eseguire l'operazione"""
    try:
        user_role = _as_role(role)
    except ValueError:
        return False
    return operation in PERMISSIONS.get(user_role, frozenset())


def check_permission(role: Union[UserRole, str], operation: str) -> None:
    """Solleva AuthorizationError se il ruolo non può eseguire l'operazione"""
    if operation not in ALL_OPERATIONS:
        raise ValueError(f"Unknown operation: {operation}")
    if not has_permission(role, operation):
        raise AuthorizationError(f"Role '{role.value if isinstance(role, UserRole) else role}' is not allowed to perform '{operation}'")
