# test/services/test_range_policy.py
# =====================================================
"""
Test per la policy di range dei prodotti: classificazione e range inclusivo.
"""

import pytest
from decimal import Decimal

from tempcontrol.models import AlertSeverity, Product
from tempcontrol.services import range_policy

MIN = Decimal("-25")
MAX = Decimal("-10")

# =====================================================
# TEST CLASSIFY
# =====================================================


class TestClassify:
    """Bande di severità su range [-25, -10]"""

    @pytest.mark.parametrize("temperature,expected", [
        ("-18", AlertSeverity.INFO),
        ("-25", AlertSeverity.WARNING),
        ("-10", AlertSeverity.WARNING),
        ("-24", AlertSeverity.WARNING),
        ("-11", AlertSeverity.WARNING),
        ("-9.5", AlertSeverity.CRITICAL),
        ("-29", AlertSeverity.CRITICAL),
        ("-31", AlertSeverity.EMERGENCY),
        ("-4", AlertSeverity.EMERGENCY),
    ])
    def test_classify_bands(self, temperature, expected):
        assert range_policy.classify(Decimal(temperature), MIN, MAX) == expected

    def test_emergency_and_critical_offsets(self):
        """min-6 è un'emergenza, min-4 solo critico"""
        assert range_policy.classify(MIN - 6, MIN, MAX) == AlertSeverity.EMERGENCY
        assert range_policy.classify(MIN - 4, MIN, MAX) == AlertSeverity.CRITICAL
        assert range_policy.classify(MAX + 6, MIN, MAX) == AlertSeverity.EMERGENCY
        assert range_policy.classify(MAX + 4, MIN, MAX) == AlertSeverity.CRITICAL

    def test_exactly_five_degrees_out_is_critical(self):
        assert range_policy.classify(MIN - 5, MIN, MAX) == AlertSeverity.CRITICAL
        assert range_policy.classify(MAX + 5, MIN, MAX) == AlertSeverity.CRITICAL

    def test_emergency_implies_five_degrees_beyond_boundary(self):
        for step in range(-400, 401):
            temperature = Decimal(step) / 10
            severity = range_policy.classify(temperature, MIN, MAX)
            if severity == AlertSeverity.EMERGENCY:
                assert temperature < MIN - 5 or temperature > MAX + 5

    def test_accepts_floats_and_strings(self):
        assert range_policy.classify(-9.5, -25, -10) == AlertSeverity.CRITICAL
        assert range_policy.classify("-18", "-25", "-10") == AlertSeverity.INFO

# =====================================================
# TEST IS_IN_RANGE
# =====================================================


class TestIsInRange:

    def test_boundaries_are_inclusive(self):
        assert range_policy.is_in_range(MIN, MIN, MAX)
        assert range_policy.is_in_range(MAX, MIN, MAX)

    def test_outside_range(self):
        assert not range_policy.is_in_range(Decimal("-25.01"), MIN, MAX)
        assert not range_policy.is_in_range(Decimal("-9.99"), MIN, MAX)

    def test_in_range_iff_not_critical_or_worse(self):
        for step in range(-400, 401):
            temperature = Decimal(step) / 10
            in_range = range_policy.is_in_range(temperature, MIN, MAX)
            severity = range_policy.classify(temperature, MIN, MAX)
            assert in_range == (not severity.is_critical)

# =====================================================
# TEST PRODUCT DELEGATION & MESSAGES
# =====================================================


class TestProductRange:

    def test_product_delegates_to_policy(self):
        product = Product(product_code="160", min_temperature=MIN, max_temperature=MAX)

        assert product.is_temperature_in_range(Decimal("-18"))
        assert not product.is_temperature_in_range(Decimal("-9.5"))
        assert product.get_alert_severity(Decimal("-9.5")) == AlertSeverity.CRITICAL

    def test_describe_deviation_mentions_violated_limit(self):
        above = range_policy.describe_deviation("160", Decimal("-9.5"), MIN, MAX, AlertSeverity.CRITICAL)
        below = range_policy.describe_deviation("160", Decimal("-31"), MIN, MAX, AlertSeverity.EMERGENCY)

        assert above.startswith("Critical")
        assert "above the maximum of -10" in above
        assert "160" in above
        assert below.startswith("Emergency")
        assert "below the minimum of -25" in below
