# tempcontrol/repositories/user_repository.py
"""
UserRepository - Repository pattern per gestione utenti.

RESPONSABILITÀ:
- Lookup per autenticazione (email, refresh token)
- Creazione utenti con password hashata tramite i metodi del model
"""

from typing import Optional, Dict, Any
from sqlalchemy.orm import Session

from tempcontrol.models.user import User
from tempcontrol.database.exceptions import DuplicateEntityError
from .base import BaseRepository


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


class UserRepository(BaseRepository[User]):
    """Repository per operazioni su User model"""

    def __init__(self, db: Session):
        super().__init__(User, db)

    def create(self, user_data: Dict[str, Any]) -> User:
        """
        Crea un nuovo utente.

        Args:
            user_data: Dictionary con i dati dell'utente
                      Include 'password' in plain text che verrà hashata

        Raises:
            DuplicateEntityError: Se email già esistente
        """
        user_data_copy = user_data.copy()
        password = user_data_copy.pop('password', None)
        user_data_copy['email'] = normalize_email(user_data_copy.get('email'))

        if self.get_by_email(user_data_copy['email'], include_deleted=True):
            raise DuplicateEntityError(f"User with email '{user_data_copy['email']}' already exists")

        user = User(**user_data_copy)
        if password:
            user.set_password(password)
        return self.add(user)

    def get_by_email(self, email: str, include_deleted: bool = False) -> Optional[User]:
        stmt = self.query(include_deleted).where(User.email == normalize_email(email))
        return self.db.execute(stmt).scalar_one_or_none()

    def get_by_refresh_token(self, refresh_token: str) -> Optional[User]:
        stmt = self.query().where(User.refresh_token == refresh_token)
        return self.db.execute(stmt).scalar_one_or_none()

