# =====================================================
# test/conftest.py - Shared pytest configuration
# =====================================================
"""
Configurazione condivisa per tutti i test.

Il database di test è SQLite in-memory (StaticPool), ricreato per ogni
test. TEST_DATABASE_URL permette di puntare a un altro database.
"""

import os

# Environment di test prima di importare tempcontrol (config letta all'import)
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite://")
os.environ.setdefault("DATABASE_URL", TEST_DATABASE_URL)
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
from datetime import date, datetime
from decimal import Decimal
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

# Import ALL models to ensure they're registered with SQLAlchemy
from tempcontrol.models import Base, Product, UserRole
from tempcontrol.auth.config import create_access_token
from tempcontrol.database.connection import build_engine, get_db
from tempcontrol.repositories.user_repository import UserRepository
from tempcontrol.schemas.form import TemperatureFormCreate, TemperatureRecordCreate

TEST_PASSWORD = "TestPassword123!"

# =====================================================
# DATABASE
# =====================================================


@pytest.fixture(scope="function")
def engine():
    """Engine pulito per ogni test"""
    test_engine = build_engine(TEST_DATABASE_URL)
    Base.metadata.create_all(test_engine)
    yield test_engine
    Base.metadata.drop_all(test_engine)
    test_engine.dispose()


@pytest.fixture(scope="function")
def test_db(engine):
    """Session di test, stessa configurazione di SessionLocal"""
    TestSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestSession()
    yield session
    session.close()

# =====================================================
# CLOCK
# =====================================================


class FixedClock:
    """Orologio controllabile per numerazione form e report"""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock():
    return FixedClock(datetime(2025, 6, 13, 9, 30))

# =====================================================
# USERS
# =====================================================


def _create_user(db, email: str, name: str, role: UserRole):
    user = UserRepository(db).create({
        "email": email,
        "name": name,
        "role": role.value,
        "password": TEST_PASSWORD,
        "is_active": True,
    })
    db.commit()
    return user


@pytest.fixture
def admin_user(test_db):
    return _create_user(test_db, "admin@test.com", "Test Administrator", UserRole.ADMINISTRATOR)


@pytest.fixture
def supervisor_user(test_db):
    return _create_user(test_db, "supervisor@test.com", "Test Supervisor", UserRole.SUPERVISOR)


@pytest.fixture
def operator_user(test_db):
    return _create_user(test_db, "operator@test.com", "Test Operator", UserRole.OPERATOR)


@pytest.fixture
def other_operator(test_db):
    return _create_user(test_db, "operator2@test.com", "Second Operator", UserRole.OPERATOR)


@pytest.fixture
def auditor_user(test_db):
    return _create_user(test_db, "auditor@test.com", "Test Auditor", UserRole.AUDITOR)

# =====================================================
# CATALOG & FORMS
# =====================================================


@pytest.fixture
def product(test_db):
    """Prodotto 160 con range [-25, -10]"""
    frozen = Product(
        product_code="160",
        product_name="Frozen Product 160",
        min_temperature=Decimal("-25"),
        max_temperature=Decimal("-10"),
        max_defrost_time_minutes=120,
        category="Frozen Premium",
        is_active=True,
    )
    test_db.add(frozen)
    test_db.commit()
    return frozen


@pytest.fixture
def form_data():
    return TemperatureFormCreate(
        destination="Central Canning Plant",
        defrost_date=date(2025, 6, 12),
        production_date=date(2025, 6, 13),
    )


def record_data(temperature: str, car_number: int = 1, product_code: str = "160") -> TemperatureRecordCreate:
    return TemperatureRecordCreate(
        car_number=car_number,
        product_code=product_code,
        product_temperature=Decimal(temperature),
    )


@pytest.fixture
def make_record():
    return record_data

# =====================================================
# API CLIENT
# =====================================================


@pytest.fixture
def client(test_db):
    """TestClient con get_db sostituito dalla session di test"""
    from tempcontrol.main import app

    def override_get_db():
        yield test_db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def bearer(user) -> dict:
    token, _ = create_access_token(user)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers():
    return bearer
