# =====================================================
# tempcontrol/auth/routes.py - Authentication Routes
# =====================================================
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from tempcontrol.auth.dependencies import get_audit_context, get_current_user
from tempcontrol.auth.schemas import LoginRequest, LoginResponse, RefreshTokenRequest, UserRead
from tempcontrol.database.connection import get_db
from tempcontrol.models.user import User
from tempcontrol.schemas.common import ApiResponse
from tempcontrol.services.audit import AuditContext
from tempcontrol.services.auth_service import AuthService, TokenPair

# =====================================================
# ROUTER SETUP
# =====================================================

auth_router = APIRouter(prefix="/api/auth", tags=["Authentication"])


def _login_response(tokens: TokenPair) -> LoginResponse:
    return LoginResponse(
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        expires_at=tokens.expires_at,
        user=UserRead.model_validate(tokens.user),
    )


@auth_router.post("/login", response_model=ApiResponse[LoginResponse], summary="Login con email e password")
def login(
    credentials: LoginRequest,
    db: Session = Depends(get_db),
    context: AuditContext = Depends(get_audit_context),
):
    """Restituisce access token JWT e refresh token."""
    tokens = AuthService(db, context).login(credentials.email, credentials.password)
    return ApiResponse.ok(_login_response(tokens), "Login successful")


@auth_router.post("/refresh-token", response_model=ApiResponse[LoginResponse], summary="Rinnovo sessione")
def refresh_token(
    request: RefreshTokenRequest,
    db: Session = Depends(get_db),
):
    """Ruota il refresh token: quello usato non è più valido."""
    tokens = AuthService(db).refresh(request.refresh_token)
    return ApiResponse.ok(_login_response(tokens))


@auth_router.post("/logout", response_model=ApiResponse[None], summary="Logout")
def logout(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    context: AuditContext = Depends(get_audit_context),
):
    AuthService(db, context).logout(current_user)
    return ApiResponse.ok(message="Logged out")


@auth_router.get("/me", response_model=ApiResponse[UserRead], summary="Profilo utente corrente")
def get_me(current_user: User = Depends(get_current_user)):
    """Restituisce il profilo dell'utente correntemente loggato."""
    return ApiResponse.ok(UserRead.model_validate(current_user))
