# =====================================================
# tempcontrol/services/report_service.py - Aggregation & Reporting
# =====================================================
"""
Aggregazioni read-side sui form.

daily_summary e range_statistics sono funzioni pure su liste di form già
caricate: le righe soft-deleted vengono escluse qui, così ogni chiamante
ottiene gli stessi numeri. ReportService si occupa solo di caricare i dati.
"""
from collections import Counter, OrderedDict
from datetime import date, datetime, time, timedelta
from decimal import Decimal, ROUND_HALF_EVEN
from typing import Callable, Iterable, List, Optional
from sqlalchemy.orm import Session
import logging

from tempcontrol import config
from tempcontrol.models.base import exclude_deleted, utcnow
from tempcontrol.models.enums import AlertSeverity, FormStatus
from tempcontrol.models.temperature_form import TemperatureControlForm
from tempcontrol.schemas.report import (
    DailyCount,
    DailyReport,
    DateRange,
    ProductCount,
    ProductUsageSummary,
    RangeStatistics,
    StatusCount,
    UserFormSummary,
)
from .unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")


def round2(value: Decimal) -> float:
    return float(value.quantize(TWO_PLACES, rounding=ROUND_HALF_EVEN))


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min)


def end_of_day(day: date) -> datetime:
    return datetime.combine(day, time.max)


def _live_forms(forms: Iterable[TemperatureControlForm]) -> List[TemperatureControlForm]:
    return exclude_deleted(forms)


def _count_status(forms: List[TemperatureControlForm], status: FormStatus) -> int:
    return sum(1 for form in forms if form.form_status == status)


# =====================================================
# DAILY SUMMARY
# =====================================================

def daily_summary(
    forms: Iterable[TemperatureControlForm],
    day: date,
    generated_at: Optional[datetime] = None,
) -> DailyReport:
    """Riepilogo dei form del giorno: stati, letture, alert, utenti e prodotti"""
    forms = _live_forms(forms)
    records = [record for form in forms for record in form.active_records]
    alerts = [alert for form in forms for alert in form.active_alerts]

    severity_counts = Counter(alert.severity for alert in alerts)
    alerts_by_severity = {severity.value: severity_counts.get(severity.value, 0) for severity in AlertSeverity}

    # Raggruppamento per utente creatore, ordine di prima apparizione
    by_user = OrderedDict()
    for form in forms:
        summary = by_user.get(form.created_by_user_id)
        if summary is None:
            user_name = form.created_by_user.name if form.created_by_user else ""
            summary = UserFormSummary(user_id=form.created_by_user_id, user_name=user_name)
            by_user[form.created_by_user_id] = summary
        summary.total_forms += 1
        field = f"{form.form_status.value.lower()}_forms"
        setattr(summary, field, getattr(summary, field) + 1)
    forms_by_user = sorted(by_user.values(), key=lambda s: s.total_forms, reverse=True)

    # Utilizzo prodotti: solo letture con prodotto ancora collegato
    by_product = OrderedDict()
    for record in records:
        if record.product is None:
            continue
        by_product.setdefault(record.product_code, []).append(record)
    product_usage = []
    for product_code, product_records in by_product.items():
        temperatures = [Decimal(record.product_temperature) for record in product_records]
        product_usage.append(ProductUsageSummary(
            product_code=product_code,
            product_name=product_records[0].product_name,
            total_records=len(product_records),
            records_with_alerts=sum(1 for record in product_records if record.has_alert),
            average_temperature=round2(sum(temperatures) / len(temperatures)),
            min_temperature=float(min(temperatures)),
            max_temperature=float(max(temperatures)),
        ))
    product_usage.sort(key=lambda p: p.total_records, reverse=True)

    return DailyReport(
        date=day,
        total_forms=len(forms),
        draft_forms=_count_status(forms, FormStatus.DRAFT),
        completed_forms=_count_status(forms, FormStatus.COMPLETED),
        reviewed_forms=_count_status(forms, FormStatus.REVIEWED),
        rejected_forms=_count_status(forms, FormStatus.REJECTED),
        archived_forms=_count_status(forms, FormStatus.ARCHIVED),
        total_records=len(records),
        records_with_alerts=sum(1 for record in records if record.has_alert),
        total_alerts=len(alerts),
        alerts_by_severity=alerts_by_severity,
        critical_alerts=sum(1 for alert in alerts if alert.is_critical),
        emergency_alerts=severity_counts.get(AlertSeverity.EMERGENCY.value, 0),
        forms_by_user=forms_by_user,
        product_usage=product_usage,
        generated_at=generated_at or utcnow(),
    )


# =====================================================
# RANGE STATISTICS
# =====================================================

def range_statistics(
    forms: Iterable[TemperatureControlForm],
    start: datetime,
    end: datetime,
    top_products_limit: int = config.TOP_PRODUCTS_LIMIT,
) -> RangeStatistics:
    """Statistiche su [start, end]: medie e tassi valgono 0 senza form"""
    forms = _live_forms(forms)
    total_forms = len(forms)
    total_records = sum(len(form.active_records) for form in forms)
    alerts = [alert for form in forms for alert in form.active_alerts]
    forms_with_alerts = sum(1 for form in forms if form.has_alerts)

    if total_forms:
        average_records = round2(Decimal(total_records) / Decimal(total_forms))
        alert_rate = round2(Decimal(forms_with_alerts) / Decimal(total_forms) * 100)
    else:
        average_records = 0.0
        alert_rate = 0.0

    status_counts = Counter(form.form_status.value for form in forms)
    forms_by_status = [StatusCount(status=status, count=count) for status, count in status_counts.items()]

    forms_per_day = Counter(form.created_at.date() for form in forms)
    alerts_per_day = Counter(alert.created_at.date() for alert in alerts)

    # A parità di conteggio vince il prodotto incontrato per primo
    product_counts = Counter(
        record.product_code
        for form in forms
        for record in form.active_records
        if record.product_code
    )

    return RangeStatistics(
        total_forms=total_forms,
        pending_review=_count_status(forms, FormStatus.COMPLETED),
        total_records=total_records,
        total_alerts=len(alerts),
        critical_alerts=sum(1 for alert in alerts if alert.is_critical),
        average_records_per_form=average_records,
        alert_rate=alert_rate,
        forms_by_status=forms_by_status,
        forms_by_day=[DailyCount(date=day, count=count) for day, count in sorted(forms_per_day.items())],
        alerts_by_day=[DailyCount(date=day, count=count) for day, count in sorted(alerts_per_day.items())],
        top_products=[
            ProductCount(product_code=code, count=count)
            for code, count in product_counts.most_common(top_products_limit)
        ],
        date_range=DateRange(start_date=start, end_date=end),
    )


# =====================================================
# LOADERS
# =====================================================

class ReportService:
    """Carica i form dal database e delega alle aggregazioni pure"""

    def __init__(self, db: Session, clock: Callable[[], datetime] = utcnow):
        self.repos = UnitOfWork(db).repositories
        self.clock = clock

    def get_daily_report(self, day: Optional[date] = None) -> DailyReport:
        day = day or self.clock().date()
        forms = self.repos.forms.list_created_between(start_of_day(day), end_of_day(day))
        logger.debug("Daily report for %s over %d forms", day, len(forms))
        return daily_summary(forms, day, generated_at=self.clock())

    def get_statistics(self, start: Optional[datetime] = None, end: Optional[datetime] = None) -> RangeStatistics:
        today = self.clock().date()
        start = start or start_of_day(today - timedelta(days=config.STATISTICS_DEFAULT_DAYS))
        end = end or end_of_day(today)
        forms = self.repos.forms.list_created_between(start, end)
        logger.debug("Statistics from %s to %s over %d forms", start, end, len(forms))
        return range_statistics(forms, start, end)
