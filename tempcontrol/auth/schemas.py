# =====================================================
# tempcontrol/auth/schemas.py - Authentication Schemas
# =====================================================
import uuid
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field, field_validator

from tempcontrol.models.enums import UserRole

# =====================================================
# USER SCHEMAS
# =====================================================


class UserRead(BaseModel):
    """Schema per leggere dati utente (response API)."""

    id: uuid.UUID
    email: EmailStr
    name: str
    role: str
    is_active: bool = True
    phone_number: Optional[str] = None
    department: Optional[str] = None
    last_login_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UserCreate(BaseModel):
    """Schema per creare nuovo utente (seed, amministrazione)."""

    email: EmailStr
    password: str = Field(..., min_length=8, max_length=100)
    name: str = Field(..., min_length=1, max_length=200)
    role: UserRole = UserRole.OPERATOR
    phone_number: Optional[str] = Field(None, max_length=20)
    department: Optional[str] = Field(None, max_length=100)

    @field_validator('phone_number')
    @classmethod
    def validate_phone(cls, v):
        """Validazione formato telefono."""
        if v is not None:
            cleaned = ''.join(filter(str.isdigit, v))
            if len(cleaned) < 8 or len(cleaned) > 15:
                raise ValueError('Phone number must be between 8 and 15 digits')
        return v

# =====================================================
# AUTHENTICATION REQUEST/RESPONSE SCHEMAS
# =====================================================


class LoginRequest(BaseModel):
    """Credenziali di accesso."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class RefreshTokenRequest(BaseModel):
    """Schema per refresh token."""

    refresh_token: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    """Schema per response login e refresh."""

    access_token: str
    token_type: str = "bearer"
    refresh_token: str
    expires_at: datetime
    user: UserRead
