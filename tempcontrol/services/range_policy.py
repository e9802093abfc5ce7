# =====================================================
# tempcontrol/services/range_policy.py - Product Range Policy
# =====================================================
"""
Classificazione di una lettura rispetto al range del prodotto.

Funzioni pure, nessun accesso al database: usate dal model Product,
dal TemperatureRecord e dal servizio che crea gli alert.
"""
from decimal import Decimal
from typing import Union

from tempcontrol.models.enums import AlertSeverity

Number = Union[Decimal, int, float, str]

# Banda assoluta oltre la quale la deviazione è un'emergenza
EMERGENCY_OFFSET = Decimal("5")
# Frazione dell'ampiezza del range considerata "vicino al limite"
WARNING_MARGIN_RATIO = Decimal("0.1")


def to_decimal(value: Number) -> Decimal:
    """Converte in Decimal passando da str per evitare artefatti binari dei float"""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def is_in_range(temperature: Number, min_temperature: Number, max_temperature: Number) -> bool:
    """True se min <= temperature <= max (estremi inclusi)"""
    t = to_decimal(temperature)
    return to_decimal(min_temperature) <= t <= to_decimal(max_temperature)


def classify(temperature: Number, min_temperature: Number, max_temperature: Number) -> AlertSeverity:
    """
    Severità della lettura rispetto al range [min, max].

    L'ordine dei controlli è significativo: le bande possono sovrapporsi
    quando il range è stretto e vince il primo match.
    """
    t = to_decimal(temperature)
    low = to_decimal(min_temperature)
    high = to_decimal(max_temperature)

    if t < low - EMERGENCY_OFFSET or t > high + EMERGENCY_OFFSET:
        return AlertSeverity.EMERGENCY

    if t < low or t > high:
        return AlertSeverity.CRITICAL

    margin = (high - low) * WARNING_MARGIN_RATIO
    if t < low + margin or t > high - margin:
        return AlertSeverity.WARNING

    return AlertSeverity.INFO


def describe_deviation(
    product_code: str,
    temperature: Number,
    min_temperature: Number,
    max_temperature: Number,
    severity: AlertSeverity,
) -> str:
    """Messaggio leggibile per l'alert"""
    t = to_decimal(temperature)
    low = to_decimal(min_temperature)
    high = to_decimal(max_temperature)
    if t < low:
        direction = f"below the minimum of {low}°C"
    elif t > high:
        direction = f"above the maximum of {high}°C"
    else:
        direction = f"close to the allowed range [{low}°C, {high}°C]"
    return f"{severity.value}: product {product_code} recorded {t}°C, {direction}"
