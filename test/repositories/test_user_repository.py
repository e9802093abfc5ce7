# =====================================================
# test/repositories/test_user_repository.py
# =====================================================
"""
Test per UserRepository: creazione, lookup per email e refresh token.

Usa conftest.py per setup condiviso e import automatici.
"""

import base64
import pytest
from datetime import timedelta

from tempcontrol.models import User, UserRole
from tempcontrol.repositories.user_repository import UserRepository, normalize_email
from tempcontrol.database.exceptions import DuplicateEntityError

# =====================================================
# FIXTURES
# =====================================================

@pytest.fixture
def user_repository(test_db):
    """Create UserRepository instance"""
    return UserRepository(test_db)

@pytest.fixture
def sample_user_data():
    """Sample user data for testing"""
    return {
        "email": "Test@Example.com ",
        "password": "SecurePassword123!",
        "name": "John Doe",
        "role": UserRole.OPERATOR.value,
        "department": "Production",
        "is_active": True,
    }

# =====================================================
# TEST CREATE
# =====================================================

class TestUserCreate:
    """Test creazione utenti"""

    def test_create_user_success(self, user_repository, sample_user_data):
        """Test creating a new user"""
        # Act
        user = user_repository.create(sample_user_data)

        # Assert
        assert user.id is not None
        assert user.email == "test@example.com"
        assert user.name == "John Doe"
        assert user.user_role == UserRole.OPERATOR
        assert user.hashed_password != sample_user_data["password"]
        assert user.verify_password("SecurePassword123!")
        assert not user.verify_password("wrong")

        print(f"✅ User created with ID: {user.id}")

    def test_create_duplicate_email(self, user_repository, sample_user_data):
        """Email duplicata (anche con case diverso) rifiutata"""
        user_repository.create(sample_user_data)

        with pytest.raises(DuplicateEntityError):
            user_repository.create({**sample_user_data, "email": "TEST@example.com"})

    def test_to_dict_hides_secrets(self, user_repository, sample_user_data):
        user = user_repository.create(sample_user_data)
        user.issue_refresh_token(timedelta(days=7))

        data = user.to_dict()

        assert data["email"] == "test@example.com"
        assert "hashed_password" not in data
        assert "refresh_token" not in data
        assert "refresh_token_expires_at" not in data

# =====================================================
# TEST LOOKUPS
# =====================================================

class TestUserLookups:
    """Test query specifiche"""

    def test_get_by_email_normalized(self, user_repository, sample_user_data):
        user = user_repository.create(sample_user_data)

        found = user_repository.get_by_email("  TEST@EXAMPLE.COM")

        assert found is not None
        assert found.id == user.id

    def test_get_by_email_skips_deleted(self, user_repository, sample_user_data):
        user = user_repository.create(sample_user_data)
        user_repository.soft_delete(user)

        assert user_repository.get_by_email("test@example.com") is None
        assert user_repository.get_by_email("test@example.com", include_deleted=True).id == user.id

    def test_get_by_refresh_token(self, user_repository, sample_user_data):
        user = user_repository.create(sample_user_data)
        token = user.issue_refresh_token(timedelta(days=7))
        user_repository.update(user)

        assert user_repository.get_by_refresh_token(token).id == user.id
        assert user.has_valid_refresh_token(token)
        assert not user.has_valid_refresh_token("other-token")

    def test_normalize_email(self):
        assert normalize_email("  Mixed@Case.COM ") == "mixed@case.com"
        assert normalize_email(None) == ""

    def test_refresh_token_is_base64_of_32_bytes(self, sample_user_data):
        user = User(email="x@example.com", name="X")
        token = user.issue_refresh_token(timedelta(days=7))

        assert len(token) == 44
        assert len(base64.b64decode(token, validate=True)) == 32
        assert token != user.issue_refresh_token(timedelta(days=7))
