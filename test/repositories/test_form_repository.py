# test/repositories/test_form_repository.py
# =====================================================
"""
Test per FormRepository: numerazione, filtri, paginazione.
"""

import pytest
from datetime import date, datetime

from tempcontrol.models import TemperatureControlForm
from tempcontrol.repositories.base import normalize_paging, total_pages
from tempcontrol.repositories.form_repository import FormRepository, day_bounds


@pytest.fixture
def form_repository(test_db):
    return FormRepository(test_db)


@pytest.fixture
def make_form(test_db, form_repository, operator_user):
    def factory(number: str, created_at: datetime, destination: str = "Central Plant", status: str = "Draft"):
        form = TemperatureControlForm(
            form_number=number,
            destination=destination,
            defrost_date=created_at.date(),
            production_date=created_at.date(),
            status=status,
            created_by_user_id=operator_user.id,
            created_at=created_at,
        )
        form_repository.add(form)
        test_db.commit()
        return form
    return factory


class TestPagingHelpers:

    @pytest.mark.parametrize("page,page_size,expected", [
        (1, 20, (1, 20)),
        (0, 20, (1, 20)),
        (-3, 500, (1, 100)),
        (2, 0, (2, 20)),
        (2, -5, (2, 1)),
    ])
    def test_normalize_paging(self, page, page_size, expected):
        assert normalize_paging(page, page_size) == expected

    def test_total_pages(self):
        assert total_pages(0, 20) == 0
        assert total_pages(20, 20) == 1
        assert total_pages(21, 20) == 2

    def test_day_bounds(self):
        start, end = day_bounds(date(2025, 6, 13))
        assert start == datetime(2025, 6, 13)
        assert end.date() == date(2025, 6, 13)


class TestFormNumbers:

    def test_next_sequence_number(self, form_repository, make_form):
        day = date(2025, 6, 13)
        assert form_repository.next_sequence_number(day) == 1

        make_form("TEMP-20250613-0001", datetime(2025, 6, 13, 8))
        make_form("TEMP-20250613-0007", datetime(2025, 6, 13, 9))
        make_form("TEMP-20250614-0001", datetime(2025, 6, 14, 9))

        assert form_repository.next_sequence_number(day) == 8
        assert form_repository.next_sequence_number(date(2025, 6, 14)) == 2


class TestFormListing:

    def test_newest_first_and_paging(self, form_repository, make_form):
        make_form("TEMP-20250611-0001", datetime(2025, 6, 11, 8))
        make_form("TEMP-20250612-0001", datetime(2025, 6, 12, 8))
        make_form("TEMP-20250613-0001", datetime(2025, 6, 13, 8))

        items, total = form_repository.list_paged(page=1, page_size=2)

        assert total == 3
        assert [f.form_number for f in items] == ["TEMP-20250613-0001", "TEMP-20250612-0001"]

        items, _ = form_repository.list_paged(page=2, page_size=2)
        assert [f.form_number for f in items] == ["TEMP-20250611-0001"]

    def test_filters(self, form_repository, make_form, operator_user):
        make_form("TEMP-20250611-0001", datetime(2025, 6, 11, 23, 59), destination="North Plant")
        make_form("TEMP-20250612-0001", datetime(2025, 6, 12, 8), destination="South Plant", status="Completed")
        make_form("TEMP-20250613-0001", datetime(2025, 6, 13, 0, 0), destination="North Warehouse")

        _, total = form_repository.list_paged(status="Completed")
        assert total == 1

        items, _ = form_repository.list_paged(destination="north")
        assert {f.form_number for f in items} == {"TEMP-20250611-0001", "TEMP-20250613-0001"}

        items, _ = form_repository.list_paged(start_date=date(2025, 6, 12), end_date=date(2025, 6, 12))
        assert [f.form_number for f in items] == ["TEMP-20250612-0001"]

        items, _ = form_repository.list_paged(end_date=date(2025, 6, 11))
        assert [f.form_number for f in items] == ["TEMP-20250611-0001"]

        _, total = form_repository.list_paged(created_by_user_id=operator_user.id)
        assert total == 3

    def test_soft_deleted_forms_hidden(self, form_repository, make_form):
        form = make_form("TEMP-20250613-0001", datetime(2025, 6, 13, 8))
        form_repository.soft_delete(form)

        _, total = form_repository.list_paged()
        assert total == 0
        assert form_repository.get_with_details(form.id) is None

    def test_list_created_between(self, form_repository, make_form):
        make_form("TEMP-20250612-0001", datetime(2025, 6, 12, 23, 59, 59))
        inside = make_form("TEMP-20250613-0001", datetime(2025, 6, 13, 12))

        start, end = day_bounds(date(2025, 6, 13))
        assert [f.id for f in form_repository.list_created_between(start, end)] == [inside.id]
