# test/services/test_report_service.py
# =====================================================
"""
Test per le aggregazioni dei report (giornaliero e statistiche).
"""

import pytest
from datetime import date, datetime
from decimal import Decimal

from tempcontrol.models import FormStatus
from tempcontrol.schemas.form import FormReviewRequest
from tempcontrol.services.form_service import FormService
from tempcontrol.services.report_service import (
    ReportService,
    daily_summary,
    end_of_day,
    range_statistics,
    round2,
    start_of_day,
)

DAY = date(2025, 6, 13)


@pytest.fixture
def report_service(test_db, clock):
    return ReportService(test_db, clock=clock)


@pytest.fixture
def populated(test_db, clock, form_data, operator_user, supervisor_user, product, make_record):
    """Tre form del 13/06: uno revisionato con alert, uno in bozza, uno vuoto"""
    forms = FormService(test_db, clock=clock)

    reviewed = forms.create_form(form_data, operator_user)
    forms.add_record(reviewed.id, make_record("-18", car_number=1), operator_user)
    forms.add_record(reviewed.id, make_record("-9.5", car_number=2), operator_user)
    forms.submit_form(reviewed.id, operator_user)
    forms.review_form(reviewed.id, FormReviewRequest(status=FormStatus.REVIEWED), supervisor_user)

    draft = forms.create_form(form_data, operator_user)
    forms.add_record(draft.id, make_record("-20", car_number=1), operator_user)

    forms.create_form(form_data, supervisor_user)
    return forms


class TestHelpers:

    def test_round2_half_even(self):
        assert round2(Decimal("1.005")) == 1.0
        assert round2(Decimal("1.015")) == 1.02
        assert round2(Decimal("3.125")) == 3.12
        assert round2(Decimal("2") / Decimal("3")) == 0.67

    def test_day_bounds(self):
        assert start_of_day(DAY) == datetime(2025, 6, 13, 0, 0)
        assert end_of_day(DAY).date() == DAY
        assert end_of_day(DAY) > datetime(2025, 6, 13, 23, 59, 59)


class TestEmptyWindows:

    def test_statistics_without_forms(self):
        stats = range_statistics([], start_of_day(DAY), end_of_day(DAY))

        assert stats.total_forms == 0
        assert stats.average_records_per_form == 0
        assert stats.alert_rate == 0
        assert stats.top_products == []

    def test_daily_summary_without_forms(self):
        report = daily_summary([], DAY)

        assert report.total_forms == 0
        assert report.total_alerts == 0
        assert report.alerts_by_severity == {"Info": 0, "Warning": 0, "Critical": 0, "Emergency": 0}
        assert report.forms_by_user == []


class TestDailyReport:

    def test_counts(self, report_service, populated):
        report = report_service.get_daily_report(DAY)

        assert report.date == DAY
        assert report.total_forms == 3
        assert report.draft_forms == 2
        assert report.reviewed_forms == 1
        assert report.total_records == 3
        assert report.records_with_alerts == 1
        assert report.total_alerts == 1
        assert report.critical_alerts == 1
        assert report.emergency_alerts == 0
        assert report.alerts_by_severity["Critical"] == 1

    def test_forms_by_user(self, report_service, populated, operator_user):
        report = report_service.get_daily_report(DAY)

        top = report.forms_by_user[0]
        assert top.user_id == operator_user.id
        assert top.total_forms == 2
        assert top.reviewed_forms == 1
        assert top.draft_forms == 1

    def test_product_usage(self, report_service, populated):
        usage = report_service.get_daily_report(DAY).product_usage

        assert len(usage) == 1
        assert usage[0].product_code == "160"
        assert usage[0].total_records == 3
        assert usage[0].records_with_alerts == 1
        assert usage[0].average_temperature == -15.83
        assert usage[0].min_temperature == -20.0
        assert usage[0].max_temperature == -9.5

    def test_other_day_is_empty(self, report_service, populated):
        assert report_service.get_daily_report(date(2025, 6, 14)).total_forms == 0

    def test_defaults_to_clock_day(self, report_service, populated):
        assert report_service.get_daily_report().total_forms == 3


class TestStatistics:

    def test_window_statistics(self, report_service, populated):
        stats = report_service.get_statistics(start_of_day(DAY), end_of_day(DAY))

        assert stats.total_forms == 3
        assert stats.total_records == 3
        assert stats.total_alerts == 1
        assert stats.critical_alerts == 1
        assert stats.pending_review == 0
        assert stats.average_records_per_form == 1.0
        assert stats.alert_rate == 33.33
        assert {s.status: s.count for s in stats.forms_by_status} == {"Reviewed": 1, "Draft": 2}
        assert [(d.date, d.count) for d in stats.forms_by_day] == [(DAY, 3)]
        assert stats.top_products[0].product_code == "160"
        assert stats.top_products[0].count == 3

    def test_default_window_covers_last_30_days(self, report_service, populated):
        stats = report_service.get_statistics()

        assert stats.total_forms == 3
        assert stats.date_range.start_date == datetime(2025, 5, 14, 0, 0)
        assert stats.date_range.end_date.date() == DAY

    def test_window_excludes_other_days(self, report_service, populated):
        stats = report_service.get_statistics(start_of_day(date(2025, 6, 1)), end_of_day(date(2025, 6, 12)))
        assert stats.total_forms == 0
        assert stats.alert_rate == 0
