# =====================================================
# tempcontrol/seed.py - Demo data
# =====================================================
"""
Dati iniziali per sviluppo e demo: un utente per ruolo e il catalogo prodotti.

Eseguito solo se la tabella utenti è vuota:

    python -m tempcontrol.seed
"""
from decimal import Decimal
from sqlalchemy.orm import Session
import logging
import os

from tempcontrol.auth.schemas import UserCreate
from tempcontrol.logging_config import configure_logging
from tempcontrol.models.enums import UserRole
from tempcontrol.models.product import Product
from tempcontrol.services.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)

DEFAULT_PASSWORD = os.getenv("SEED_PASSWORD", "SecurePass123!")

DEMO_USERS = [
    {"email": "admin@temp.com", "name": "System Administrator", "role": UserRole.ADMINISTRATOR,
     "department": "IT", "phone_number": "+1234567890"},
    {"email": "supervisor@temp.com", "name": "Quality Supervisor", "role": UserRole.SUPERVISOR,
     "department": "Quality", "phone_number": "+1234567891"},
    {"email": "operator@temp.com", "name": "Plant Operator", "role": UserRole.OPERATOR,
     "department": "Production", "phone_number": "+1234567892"},
    {"email": "auditor@temp.com", "name": "Quality Auditor", "role": UserRole.AUDITOR,
     "department": "Audit", "phone_number": "+1234567893"},
]

# (code, name, min, max, max defrost minutes, category)
DEMO_PRODUCTS = [
    ("160", "Frozen Product 160", "-25", "-10", 120, "Frozen Premium"),
    ("101", "Frozen Product 101", "-25", "-12", 90, "Frozen Standard"),
    ("IFK", "IFK - Special Frozen Product", "-22", "-10", 100, "Frozen Special"),
    ("IFG", "IFG - Gourmet Frozen Product", "-24", "-11", 110, "Frozen Gourmet"),
    ("202", "Frozen Product 202", "-23", "-13", 95, "Frozen Standard"),
    ("303", "Frozen Product 303", "-25", "-15", 85, "Frozen Export"),
]


def seed_database(db: Session, password: str = DEFAULT_PASSWORD) -> bool:
    """Ritorna False se il database contiene già utenti"""
    uow = UnitOfWork(db)
    repos = uow.repositories

    if repos.users.count() > 0:
        logger.info("Database already contains users, skipping seed")
        return False

    with uow.transaction():
        for user_data in DEMO_USERS:
            user = UserCreate(**user_data, password=password)
            repos.users.create(user.model_dump(mode="json"))

        for code, name, min_temp, max_temp, defrost_minutes, category in DEMO_PRODUCTS:
            repos.products.add(Product(
                product_code=code,
                product_name=name,
                min_temperature=Decimal(min_temp),
                max_temperature=Decimal(max_temp),
                max_defrost_time_minutes=defrost_minutes,
                category=category,
                is_active=True,
            ))

    logger.info("Seeded %d users and %d products", len(DEMO_USERS), len(DEMO_PRODUCTS))
    return True


if __name__ == "__main__":
    from tempcontrol.database.connection import DatabaseSession

    configure_logging()
    with DatabaseSession() as session:
        seed_database(session)
