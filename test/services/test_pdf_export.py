# test/services/test_pdf_export.py
# =====================================================
"""
Test per l'export PDF dei form.
"""

import pytest
from datetime import datetime
from decimal import Decimal

from tempcontrol.models import FormStatus
from tempcontrol.schemas.form import FormReviewRequest, TemperatureRecordCreate
from tempcontrol.services.form_service import FormService
from tempcontrol.services.pdf_export import build_form_document, render_form_pdf


@pytest.fixture
def forms(test_db, clock):
    return FormService(test_db, clock=clock)


@pytest.fixture
def exported_form(forms, form_data, operator_user, product, make_record):
    form = forms.create_form(form_data, operator_user)
    # Ordine di inserimento diverso dal record_order
    forms.add_record(form.id, TemperatureRecordCreate(
        car_number=2, product_code="160", product_temperature=Decimal("-9.5"), record_order=2
    ), operator_user)
    forms.add_record(form.id, TemperatureRecordCreate(
        car_number=1, product_code="160", product_temperature=Decimal("-31"), record_order=1
    ), operator_user)
    forms.add_record(form.id, TemperatureRecordCreate(
        car_number=3, product_code="160", product_temperature=Decimal("-18"), record_order=3
    ), operator_user)
    return forms.get_form(form.id)


class TestFormDocument:

    def test_records_sorted_by_order(self, exported_form):
        document = build_form_document(exported_form)

        assert [row.car_number for row in document.records] == [1, 2, 3]
        assert [row.out_of_range for row in document.records] == [True, True, False]
        assert document.records[0].temperature == "-31.0"
        assert document.records[0].product == "160 Frozen Product 160"

    def test_alerts_sorted_by_severity(self, exported_form):
        document = build_form_document(exported_form)

        assert len(document.alert_messages) == 2
        assert document.alert_messages[0].startswith("Emergency")
        assert document.alert_messages[1].startswith("Critical")

    def test_header_fields(self, exported_form):
        document = build_form_document(exported_form, generated_at=datetime(2025, 6, 13, 12, 0))

        assert document.form_number == "TEMP-20250613-0001"
        assert document.destination == "Central Canning Plant"
        assert document.defrost_date == "12/06/2025"
        assert document.created_by == "Test Operator"
        assert document.generated_at == "13/06/2025 12:00"
        assert document.filename == "TemperatureForm_TEMP-20250613-0001.pdf"
        assert document.observations is None

    def test_review_block_only_when_reviewed(self, forms, exported_form, operator_user, supervisor_user):
        assert build_form_document(exported_form).reviewed_by is None

        forms.submit_form(exported_form.id, operator_user)
        reviewed = forms.review_form(
            exported_form.id, FormReviewRequest(status=FormStatus.REVIEWED, review_notes="  "), supervisor_user
        )

        document = build_form_document(reviewed)
        assert document.reviewed_by == "Test Supervisor"
        assert document.review_notes is None


class TestRenderPdf:

    def test_renders_pdf_bytes(self, exported_form):
        content = render_form_pdf(build_form_document(exported_form))

        assert content.startswith(b"%PDF")
        assert len(content) > 1000

    def test_many_records_span_pages(self, forms, form_data, operator_user, product, make_record):
        form = forms.create_form(form_data, operator_user)
        for car in range(1, 61):
            forms.add_record(form.id, make_record("-18", car_number=car), operator_user)

        document = build_form_document(forms.get_form(form.id))
        content = render_form_pdf(document)

        assert len(document.records) == 60
        assert content.startswith(b"%PDF")
        assert b"/Count 2" in content
