# test/auth/test_permissions.py
# =====================================================
"""
Test per la matrice ruolo -> operazioni.
"""

import pytest

from tempcontrol.auth import permissions as perms
from tempcontrol.auth.permissions import check_permission, has_permission
from tempcontrol.database.exceptions import AuthorizationError
from tempcontrol.models.enums import UserRole

READ_OPERATIONS = [perms.PRODUCT_READ, perms.FORM_READ, perms.ALERT_READ, perms.REPORT_READ]


class TestPermissionMatrix:

    @pytest.mark.parametrize("role", list(UserRole))
    @pytest.mark.parametrize("operation", READ_OPERATIONS)
    def test_every_role_can_read(self, role, operation):
        assert has_permission(role, operation)

    @pytest.mark.parametrize("role,operation,allowed", [
        (UserRole.AUDITOR, perms.FORM_WRITE, False),
        (UserRole.OPERATOR, perms.FORM_WRITE, True),
        (UserRole.OPERATOR, perms.FORM_REVIEW, False),
        (UserRole.OPERATOR, perms.ALERT_ACKNOWLEDGE, False),
        (UserRole.OPERATOR, perms.PRODUCT_WRITE, False),
        (UserRole.SUPERVISOR, perms.FORM_REVIEW, True),
        (UserRole.SUPERVISOR, perms.ALERT_ACKNOWLEDGE, True),
        (UserRole.SUPERVISOR, perms.PRODUCT_WRITE, False),
        (UserRole.SUPERVISOR, perms.FORM_DELETE, False),
        (UserRole.SUPERVISOR, perms.FORM_ARCHIVE, False),
        (UserRole.ADMINISTRATOR, perms.PRODUCT_WRITE, True),
        (UserRole.ADMINISTRATOR, perms.FORM_DELETE, True),
        (UserRole.ADMINISTRATOR, perms.FORM_ARCHIVE, True),
    ])
    def test_role_operation(self, role, operation, allowed):
        assert has_permission(role, operation) is allowed

    def test_accepts_role_strings(self):
        assert has_permission("Administrator", perms.PRODUCT_WRITE)
        assert not has_permission("Operator", perms.PRODUCT_WRITE)

    def test_unknown_role_has_no_permissions(self):
        assert not has_permission("Guest", perms.FORM_READ)


class TestCheckPermission:

    def test_allowed_does_not_raise(self):
        check_permission(UserRole.SUPERVISOR, perms.FORM_REVIEW)

    def test_denied_raises_authorization_error(self):
        with pytest.raises(AuthorizationError) as exc_info:
            check_permission(UserRole.OPERATOR, perms.PRODUCT_WRITE)
        assert "Operator" in str(exc_info.value)

    def test_unknown_operation(self):
        with pytest.raises(ValueError):
            check_permission(UserRole.ADMINISTRATOR, "product:explode")
