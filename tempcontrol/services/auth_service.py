# =====================================================
# tempcontrol/services/auth_service.py - Login & Session Refresh
# =====================================================
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional
from sqlalchemy.orm import Session
import logging

from tempcontrol import config
from tempcontrol.auth.config import create_access_token
from tempcontrol.models.user import User
from tempcontrol.database.exceptions import AuthenticationError
from .audit import AuditContext, record_change
from .unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


@dataclass
class TokenPair:
    access_token: str
    refresh_token: str
    expires_at: datetime
    user: User


class AuthService:
    """
    Autenticazione con password e rotazione del refresh token.

    Ogni login e ogni refresh emettono un nuovo refresh token e invalidano
    il precedente; il logout lo cancella.
    """

    def __init__(self, db: Session, context: Optional[AuditContext] = None):
        self.uow = UnitOfWork(db)
        self.repos = self.uow.repositories
        self.context = context

    @staticmethod
    def refresh_token_lifetime() -> timedelta:
        return timedelta(days=config.REFRESH_TOKEN_EXPIRE_DAYS)

    def _issue_tokens(self, user: User) -> TokenPair:
        refresh_token = user.issue_refresh_token(self.refresh_token_lifetime(), config.REFRESH_TOKEN_BYTES)
        access_token, expires_at = create_access_token(user)
        return TokenPair(access_token, refresh_token, expires_at, user)

    def login(self, email: str, password: str) -> TokenPair:
        with self.uow.transaction():
            user = self.repos.users.get_by_email(email)
            if user is None or not user.verify_password(password):
                logger.warning("Failed login attempt for %s", email)
                raise AuthenticationError("Invalid credentials")
            if not user.is_active:
                raise AuthenticationError("User is inactive")

            tokens = self._issue_tokens(user)
            user.update_last_login()
            self.repos.users.update(user)
            record_change(self.repos.audit_logs, "Login", user, user.id, context=self.context)

        logger.info("User %s logged in", user.email)
        return tokens

    def refresh(self, refresh_token: str) -> TokenPair:
        with self.uow.transaction():
            user = self.repos.users.get_by_refresh_token(refresh_token) if refresh_token else None
            if user is None or not user.has_valid_refresh_token(refresh_token):
                raise AuthenticationError("Invalid or expired refresh token")
            if not user.is_active:
                raise AuthenticationError("User is inactive")

            tokens = self._issue_tokens(user)
            self.repos.users.update(user)

        logger.debug("Session refreshed for user %s", user.id)
        return tokens

    def logout(self, user: User) -> None:
        with self.uow.transaction():
            user.clear_refresh_token()
            self.repos.users.update(user)
            record_change(self.repos.audit_logs, "Logout", user, user.id, context=self.context)

        logger.info("User %s logged out", user.email)
