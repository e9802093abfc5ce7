# =====================================================
# tempcontrol/config.py - Environment Configuration
# =====================================================
import os
import logging
from typing import List, Optional

logger = logging.getLogger(__name__)

# =====================================================
# APPLICATION
# =====================================================

ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
VERSION: str = os.getenv("VERSION", "1.0.0")
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")


def get_cors_origins() -> List[str]:
    """Origini CORS separate da virgola, '*' in development"""
    raw = os.getenv("CORS_ORIGINS", "*")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


# =====================================================
# DATABASE
# =====================================================

def get_database_url() -> str:
    """Costruisce URL database da environment variables"""
    explicit_url = os.getenv("DATABASE_URL")
    if explicit_url:
        return explicit_url

    DB_USER = os.getenv("DB_USER", "postgres")
    DB_PASSWORD = os.getenv("DB_PASSWORD", "password")
    DB_HOST = os.getenv("DB_HOST", "localhost")
    DB_PORT = os.getenv("DB_PORT", "5432")
    DB_NAME = os.getenv("DB_NAME", "temperature_control")

    return f"postgresql+psycopg2://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}"


DB_ECHO: bool = os.getenv("DB_ECHO", "false").lower() == "true"

# =====================================================
# JWT
# =====================================================

JWT_SECRET: Optional[str] = os.getenv("JWT_SECRET")
if not JWT_SECRET:
    if ENVIRONMENT == "production":
        raise ValueError("JWT_SECRET environment variable must be set in production")
    JWT_SECRET = "dev-secret-key-change-in-production"
    logger.warning("Using default JWT secret for development only")
JWT_SECRET_STR: str = str(JWT_SECRET)

JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
JWT_AUDIENCE: List[str] = ["temperature-control:auth"]

# Token expiration times
ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))
REFRESH_TOKEN_EXPIRE_DAYS: int = int(os.getenv("REFRESH_TOKEN_EXPIRE_DAYS", "7"))
REFRESH_TOKEN_BYTES: int = 32

# =====================================================
# REPORTS
# =====================================================

STATISTICS_DEFAULT_DAYS: int = 30
TOP_PRODUCTS_LIMIT: int = 10
