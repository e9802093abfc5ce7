# =====================================================
# tempcontrol/models/user.py - SQLAlchemy 2.0
# =====================================================
from sqlalchemy import String, Boolean, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column
from passlib.context import CryptContext
from datetime import datetime, timedelta
from typing import Any, Dict, Optional
import base64
import secrets

from .base import BaseModel, utcnow
from .enums import UserRole, enum_values

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

SENSITIVE_FIELDS = ("hashed_password", "refresh_token", "refresh_token_expires_at")


class User(BaseModel):
    """
    User model - operatori, supervisor, amministratori e auditor.

    Il refresh token è uno solo per utente: ogni login o refresh
    lo sostituisce, il logout lo cancella.
    """

    __tablename__ = "users"

    # ==========================================
    # CREDENTIALS
    # ==========================================

    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    hashed_password: Mapped[str] = mapped_column(String(255))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    # ==========================================
    # PROFILE
    # ==========================================

    name: Mapped[str] = mapped_column(String(200))
    role: Mapped[str] = mapped_column(String(20), default=UserRole.OPERATOR.value)
    phone_number: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    department: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    # ==========================================
    # SESSION TRACKING
    # ==========================================

    last_login_at: Mapped[Optional[datetime]] = mapped_column(nullable=True)
    refresh_token: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, unique=True, index=True)
    refresh_token_expires_at: Mapped[Optional[datetime]] = mapped_column(nullable=True)

    # ==========================================
    # CONSTRAINTS
    # ==========================================

    __table_args__ = (
        CheckConstraint(
            f"role IN ({enum_values(UserRole)})",
            name='chk_user_role_valid'
        ),
    )

    # ==========================================
    # PASSWORD MANAGEMENT METHODS
    # ==========================================

    def set_password(self, password: str) -> None:
        """
        Hash e imposta password.

        Args:
            password: Password in plain text da hashare
        """
        self.hashed_password = pwd_context.hash(password)

    def verify_password(self, password: str) -> bool:
        """
        Verifica password confrontando con hash.

        Args:
            password: Password in plain text da verificare

        Returns:
            bool: True se password corretta
        """
        if not self.hashed_password:
            return False
        return pwd_context.verify(password, self.hashed_password)

    # ==========================================
    # BUSINESS LOGIC METHODS
    # ==========================================

    def __str__(self) -> str:
        return f"User(email={self.email}, role={self.role})"

    def to_dict(self) -> Dict[str, Any]:
        """Come BaseModel.to_dict ma senza hash e token"""
        data = super().to_dict()
        for field in SENSITIVE_FIELDS:
            data.pop(field, None)
        return data

    @property
    def user_role(self) -> UserRole:
        return UserRole(self.role or UserRole.OPERATOR.value)

    @property
    def is_admin(self) -> bool:
        return self.user_role == UserRole.ADMINISTRATOR

    # ==========================================
    # SECURITY METHODS
    # ==========================================

    def update_last_login(self) -> None:
        """Aggiorna timestamp ultimo login"""
        self.last_login_at = utcnow()

    def issue_refresh_token(self, lifetime: timedelta, nbytes: int = 32) -> str:
        """Genera un nuovo refresh token opaco (base64 di nbytes casuali), invalidando il precedente"""
        token = base64.b64encode(secrets.token_bytes(nbytes)).decode("ascii")
        self.refresh_token = token
        self.refresh_token_expires_at = utcnow() + lifetime
        return token

    def has_valid_refresh_token(self, token: str) -> bool:
        if not self.refresh_token or self.refresh_token_expires_at is None:
            return False
        if not secrets.compare_digest(self.refresh_token, token):
            return False
        return self.refresh_token_expires_at > utcnow()

    def clear_refresh_token(self) -> None:
        self.refresh_token = None
        self.refresh_token_expires_at = None
