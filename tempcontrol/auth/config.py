# =====================================================
# tempcontrol/auth/config.py - JWT Configuration
# =====================================================
"""
Token di accesso JWT tramite gli helper di FastAPI-Users.

Il refresh token invece è opaco, salvato sull'utente e ruotato a ogni uso
(vedi services/auth_service.py).
"""
from datetime import datetime, timedelta
from typing import Any, Dict, Tuple
import uuid

import jwt
from fastapi_users.authentication import BearerTransport
from fastapi_users.jwt import decode_jwt, generate_jwt

from tempcontrol import config
from tempcontrol.database.exceptions import AuthenticationError
from tempcontrol.models.base import utcnow
from tempcontrol.models.user import User

# =====================================================
# TRANSPORT
# =====================================================

# Bearer token transport (Authorization: Bearer <token>)
bearer_transport = BearerTransport(tokenUrl="api/auth/login")

# =====================================================
# ACCESS TOKENS
# =====================================================


def access_token_lifetime() -> timedelta:
    return timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES)


def create_access_token(user: User) -> Tuple[str, datetime]:
    """Genera JWT con id, email, nome e ruolo. Ritorna (token, scadenza)"""
    lifetime = access_token_lifetime()
    data = {
        "sub": str(user.id),
        "email": user.email,
        "name": user.name,
        "role": user.role,
        "aud": config.JWT_AUDIENCE,
    }
    token = generate_jwt(
        data,
        config.JWT_SECRET_STR,
        lifetime_seconds=int(lifetime.total_seconds()),
        algorithm=config.JWT_ALGORITHM,
    )
    return token, utcnow() + lifetime


def read_access_token(token: str) -> Dict[str, Any]:
    """Decodifica e valida il JWT, AuthenticationError se non valido o scaduto"""
    try:
        payload = decode_jwt(
            token,
            config.JWT_SECRET_STR,
            config.JWT_AUDIENCE,
            algorithms=[config.JWT_ALGORITHM],
        )
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Access token expired")
    except jwt.PyJWTError:
        raise AuthenticationError("Invalid access token")

    try:
        payload["sub"] = uuid.UUID(payload["sub"])
    except (KeyError, ValueError, TypeError):
        raise AuthenticationError("Invalid access token")
    return payload
