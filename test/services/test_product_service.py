# test/services/test_product_service.py
# =====================================================
"""
Test per ProductService: validazione, unicità codice, disattivazione.
"""

import pytest
from decimal import Decimal

from tempcontrol.database.exceptions import DuplicateEntityError, EntityNotFoundError, ValidationError
from tempcontrol.models import AlertSeverity, Product
from tempcontrol.schemas.product import ProductCreate, ProductUpdate
from tempcontrol.services.form_service import FormService
from tempcontrol.services.product_service import ProductService, validate_product_fields


@pytest.fixture
def product_service(test_db):
    return ProductService(test_db)


def product_payload(**overrides) -> ProductCreate:
    data = {
        "product_code": "ifk",
        "product_name": "IFK - Special Frozen Product",
        "min_temperature": Decimal("-22"),
        "max_temperature": Decimal("-10"),
        "max_defrost_time_minutes": 100,
    }
    data.update(overrides)
    return ProductCreate(**data)

# =====================================================
# TEST VALIDATION RULES
# =====================================================


class TestProductValidation:

    def test_valid_fields(self):
        assert validate_product_fields("160", "Frozen", Decimal("-25"), Decimal("-10"), 120) == []

    def test_each_violated_rule_reported(self):
        errors = validate_product_fields("", " ", Decimal("-5"), Decimal("-10"), 0)

        assert "Product code is required" in errors
        assert "Product name is required" in errors
        assert "Minimum temperature must be lower than maximum temperature" in errors
        assert "Maximum defrost time must be greater than 0 minutes" in errors

    def test_temperature_limits(self):
        errors = validate_product_fields("160", "Frozen", Decimal("-101"), Decimal("101"), 1441)

        assert "Minimum temperature must be between -100°C and 100°C" in errors
        assert "Maximum temperature must be between -100°C and 100°C" in errors
        assert "Maximum defrost time cannot exceed 1440 minutes (24 hours)" in errors

    def test_code_length(self):
        errors = validate_product_fields("X" * 21, "Frozen", Decimal("-25"), Decimal("-10"), 120)
        assert errors == ["Product code cannot exceed 20 characters"]

# =====================================================
# TEST COMMANDS
# =====================================================


class TestProductCommands:

    def test_create_normalizes_code(self, product_service, admin_user):
        product = product_service.create_product(product_payload(product_code="  ifk "), admin_user)

        assert product.product_code == "IFK"
        assert product.is_active is True

    def test_create_invalid_range(self, product_service, admin_user):
        with pytest.raises(ValidationError) as exc_info:
            product_service.create_product(
                product_payload(min_temperature=Decimal("-5"), max_temperature=Decimal("-10")), admin_user
            )
        assert "Minimum temperature must be lower than maximum temperature" in exc_info.value.errors

    def test_duplicate_code_case_insensitive(self, product_service, admin_user, product):
        with pytest.raises(DuplicateEntityError):
            product_service.create_product(product_payload(product_code="160"), admin_user)

    def test_update_to_existing_code(self, product_service, admin_user, product):
        other = product_service.create_product(product_payload(), admin_user)

        with pytest.raises(DuplicateEntityError):
            product_service.update_product(other.id, ProductUpdate(product_code="160"), admin_user)

    def test_update_validates_merged_range(self, product_service, admin_user, product):
        with pytest.raises(ValidationError):
            product_service.update_product(product.id, ProductUpdate(min_temperature=Decimal("-5")), admin_user)

    def test_update_fields(self, product_service, admin_user, product):
        updated = product_service.update_product(
            product.id, ProductUpdate(product_name="Renamed", max_temperature=Decimal("-12")), admin_user
        )

        assert updated.product_name == "Renamed"
        assert updated.max_temperature == Decimal("-12")
        assert updated.min_temperature == Decimal("-25")

    def test_toggle_active(self, product_service, admin_user, product):
        assert product_service.toggle_active(product.id, admin_user).is_active is False
        assert product_service.toggle_active(product.id, admin_user).is_active is True

# =====================================================
# TEST DELETE
# =====================================================


class TestProductDelete:

    def test_unused_product_is_soft_deleted(self, test_db, product_service, admin_user, product):
        _, disabled = product_service.delete_product(product.id, admin_user)

        assert disabled is False
        assert test_db.get(Product, product.id).is_deleted is True
        with pytest.raises(EntityNotFoundError):
            product_service.get_product(product.id)

    def test_product_with_records_is_disabled(
        self, test_db, product_service, admin_user, operator_user, product, form_data, make_record
    ):
        forms = FormService(test_db)
        form = forms.create_form(form_data, operator_user)
        forms.add_record(form.id, make_record("-18"), operator_user)

        deleted, disabled = product_service.delete_product(product.id, admin_user)

        assert disabled is True
        assert deleted.is_active is False
        assert deleted.is_deleted is False
        assert product_service.get_product(product.id).product_code == "160"

# =====================================================
# TEST QUERIES
# =====================================================


class TestProductQueries:

    def test_get_by_code_is_case_insensitive(self, product_service, admin_user):
        product_service.create_product(product_payload(), admin_user)
        assert product_service.get_by_code("ifk").product_code == "IFK"

    def test_get_by_unknown_code(self, product_service):
        with pytest.raises(EntityNotFoundError):
            product_service.get_by_code("NOPE")

    def test_list_filters_active_flag(self, product_service, admin_user, product):
        other = product_service.create_product(product_payload(), admin_user)
        product_service.toggle_active(other.id, admin_user)

        assert [p.product_code for p in product_service.list_products()] == ["160", "IFK"]
        assert [p.product_code for p in product_service.list_products(is_active=True)] == ["160"]
        assert [p.product_code for p in product_service.list_products(is_active=False)] == ["IFK"]

    def test_check_temperature(self, product_service, product):
        checked, in_range, severity = product_service.check_temperature("160", Decimal("-9.5"))

        assert checked.id == product.id
        assert in_range is False
        assert severity == AlertSeverity.CRITICAL
