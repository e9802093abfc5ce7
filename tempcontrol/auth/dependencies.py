# =====================================================
# tempcontrol/auth/dependencies.py - Authentication Dependencies
# =====================================================
from typing import Callable, Optional
from fastapi import Depends, Query, Request
from sqlalchemy.orm import Session

from tempcontrol.auth.config import bearer_transport, read_access_token
from tempcontrol.auth.permissions import check_permission
from tempcontrol.database.connection import get_db
from tempcontrol.database.exceptions import AuthenticationError
from tempcontrol.models.user import User
from tempcontrol.repositories.base import DEFAULT_PAGE_SIZE, normalize_paging
from tempcontrol.repositories.user_repository import UserRepository
from tempcontrol.services.audit import AuditContext

# =====================================================
# CURRENT USER
# =====================================================


def get_current_user(
    token: Optional[str] = Depends(bearer_transport.scheme),
    db: Session = Depends(get_db),
) -> User:
    """
    Utente dal bearer JWT.

    Raises:
        AuthenticationError: token assente, non valido o utente disattivato
    """
    if not token:
        raise AuthenticationError("Not authenticated")

    payload = read_access_token(token)
    user = UserRepository(db).get_by_id(payload["sub"])
    if user is None or not user.is_active:
        raise AuthenticationError("User not found or inactive")
    return user

# =====================================================
# ROLE-BASED DEPENDENCIES
# =====================================================


def require_permission(operation: str) -> Callable[..., User]:
    """
    Dependency factory: verifica l'operazione sulla tabella dei permessi.

    Usage:
        user: User = Depends(require_permission(FORM_WRITE))
    """
    def dependency(current_user: User = Depends(get_current_user)) -> User:
        check_permission(current_user.role, operation)
        return current_user

    return dependency

# =====================================================
# REQUEST CONTEXT
# =====================================================


def get_audit_context(request: Request) -> AuditContext:
    """IP e user agent del client per l'audit log"""
    return AuditContext(
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )

# =====================================================
# QUERY PARAMETER DEPENDENCIES
# =====================================================


def pagination_params(
    page: int = Query(1, description="Page number (min 1)"),
    page_size: int = Query(DEFAULT_PAGE_SIZE, description="Items per page (1..100)"),
) -> dict:
    """
    Dependency per parametri paginazione.

    Valori fuori range vengono riportati nei limiti invece di essere rifiutati.
    """
    page, page_size = normalize_paging(page, page_size)
    return {
        "page": page,
        "page_size": page_size,
    }
