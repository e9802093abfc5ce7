# test/services/test_alert_service.py
# =====================================================
"""
Test per AlertService: filtri e presa in carico.
"""

import pytest
import uuid

from tempcontrol.database.exceptions import EntityNotFoundError, InvalidStateError, ValidationError
from tempcontrol.repositories import AuditLogRepository
from tempcontrol.services.alert_service import AlertService
from tempcontrol.services.form_service import FormService


@pytest.fixture
def alert_service(test_db):
    return AlertService(test_db)


@pytest.fixture
def form_with_alerts(test_db, form_data, operator_user, product, make_record):
    """Form con un alert Critical, uno Emergency e una lettura nel range"""
    forms = FormService(test_db)
    form = forms.create_form(form_data, operator_user)
    forms.add_record(form.id, make_record("-9.5", car_number=1), operator_user)
    forms.add_record(form.id, make_record("-31", car_number=2), operator_user)
    forms.add_record(form.id, make_record("-18", car_number=3), operator_user)
    return form


class TestAlertQueries:

    def test_list_all(self, alert_service, form_with_alerts):
        alerts, total = alert_service.list_alerts()
        assert total == 2
        assert {a.severity for a in alerts} == {"Critical", "Emergency"}

    def test_filter_by_severity(self, alert_service, form_with_alerts):
        alerts, total = alert_service.list_alerts(severity="Emergency")
        assert total == 1
        assert alerts[0].severity == "Emergency"

    def test_unknown_severity_rejected(self, alert_service):
        with pytest.raises(ValidationError):
            alert_service.list_alerts(severity="Severe")

    def test_filter_by_form_and_acknowledged(self, alert_service, form_with_alerts, supervisor_user):
        alerts, _ = alert_service.list_alerts(form_id=form_with_alerts.id)
        alert_service.acknowledge(alerts[0].id, supervisor_user)

        _, pending = alert_service.list_alerts(is_acknowledged=False)
        _, done = alert_service.list_alerts(is_acknowledged=True)
        assert pending == 1
        assert done == 1

    def test_paging(self, alert_service, form_with_alerts):
        alerts, total = alert_service.list_alerts(page=2, page_size=1)
        assert total == 2
        assert len(alerts) == 1


class TestAcknowledge:

    def test_acknowledge_stamps_user(self, test_db, alert_service, form_with_alerts, supervisor_user):
        alerts, _ = alert_service.list_alerts()

        alert = alert_service.acknowledge(alerts[0].id, supervisor_user)

        assert alert.is_acknowledged is True
        assert alert.acknowledged_by_user_id == supervisor_user.id
        assert alert.acknowledged_at is not None
        entries = AuditLogRepository(test_db).get_by_entity("TemperatureAlert", alert.id)
        assert [entry.action for entry in entries] == ["Acknowledge"]

    def test_acknowledge_twice_fails(self, alert_service, form_with_alerts, supervisor_user):
        alerts, _ = alert_service.list_alerts()
        alert_service.acknowledge(alerts[0].id, supervisor_user)

        with pytest.raises(InvalidStateError):
            alert_service.acknowledge(alerts[0].id, supervisor_user)

    def test_acknowledge_missing_alert(self, alert_service, supervisor_user):
        with pytest.raises(EntityNotFoundError):
            alert_service.acknowledge(uuid.uuid4(), supervisor_user)

    def test_acknowledge_all(self, alert_service, form_with_alerts, supervisor_user):
        alerts, _ = alert_service.list_alerts()
        alert_service.acknowledge(alerts[0].id, supervisor_user)

        count = alert_service.acknowledge_all(form_with_alerts.id, supervisor_user)

        assert count == 1
        _, pending = alert_service.list_alerts(is_acknowledged=False)
        assert pending == 0

    def test_acknowledge_all_missing_form(self, alert_service, supervisor_user):
        with pytest.raises(EntityNotFoundError):
            alert_service.acknowledge_all(uuid.uuid4(), supervisor_user)
