# =====================================================
# tempcontrol/services/form_service.py - Form Lifecycle
# =====================================================
"""
Use case dei form di controllo temperatura e delle relative letture.

Ogni modifica passa dalle guard del model (ensure_editable / ensure_reviewable):
il service aggiunge solo i controlli che dipendono dall'utente.
"""
from typing import Callable, List, Optional, Tuple
from datetime import datetime
from sqlalchemy.orm import Session
import logging
import uuid

from tempcontrol.auth.permissions import FORM_ARCHIVE, has_permission
from tempcontrol.models.base import exclude_deleted, utcnow
from tempcontrol.models.enums import FormStatus
from tempcontrol.models.product import Product
from tempcontrol.models.temperature_alert import TemperatureAlert
from tempcontrol.models.temperature_form import TemperatureControlForm
from tempcontrol.models.temperature_record import TemperatureRecord
from tempcontrol.models.user import User
from tempcontrol.database.exceptions import (
    AuthorizationError,
    ConcurrencyError,
    EntityNotFoundError,
    InvalidStateError,
    ValidationError,
)
from tempcontrol.schemas.form import (
    FormReviewRequest,
    TemperatureFormCreate,
    TemperatureFormUpdate,
    TemperatureRecordCreate,
    TemperatureRecordUpdate,
)
from . import range_policy
from .audit import AuditContext, record_change, snapshot
from .unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)

FORM_HEADER_FIELDS = (
    "destination",
    "defrost_date",
    "production_date",
    "observations",
    "created_by_signature",
    "attachment_urls",
    "geo_location",
)
REQUIRED_HEADER_FIELDS = ("destination", "defrost_date", "production_date")


def build_alert(
    form: TemperatureControlForm,
    record: TemperatureRecord,
    product: Product,
    created_at: Optional[datetime] = None,
) -> Optional[TemperatureAlert]:
    """
    Applica la policy di range alla lettura.

    Imposta has_alert e, se fuori range, ritorna il nuovo alert con
    lo snapshot del range corrente del prodotto.
    """
    in_range = product.is_temperature_in_range(record.product_temperature)
    record.has_alert = not in_range
    if in_range:
        return None

    severity = product.get_alert_severity(record.product_temperature)
    return TemperatureAlert(
        form=form,
        record=record,
        severity=severity.value,
        message=range_policy.describe_deviation(
            product.product_code,
            record.product_temperature,
            product.min_temperature,
            product.max_temperature,
            severity,
        ),
        temperature=record.product_temperature,
        expected_min_temperature=product.min_temperature,
        expected_max_temperature=product.max_temperature,
        is_acknowledged=False,
        created_at=created_at or utcnow(),
    )


class FormService:
    """Use case dei form: creazione, modifica, invio, revisione, eliminazione"""

    def __init__(
        self,
        db: Session,
        context: Optional[AuditContext] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.uow = UnitOfWork(db)
        self.repos = self.uow.repositories
        self.context = context
        self.clock = clock

    # ==========================================
    # QUERIES
    # ==========================================

    def get_form(self, form_id: uuid.UUID) -> TemperatureControlForm:
        form = self.repos.forms.get_with_details(form_id)
        if form is None:
            raise EntityNotFoundError(f"Temperature form with id {form_id} not found")
        return form

    def list_forms(self, page: int = 1, page_size: int = 20, **filters) -> Tuple[List[TemperatureControlForm], int]:
        return self.repos.forms.list_paged(page=page, page_size=page_size, **filters)

    def list_form_alerts(self, form_id: uuid.UUID) -> List[TemperatureAlert]:
        self.get_form(form_id)
        return self.repos.alerts.get_by_form(form_id)

    # ==========================================
    # GUARDS
    # ==========================================

    @staticmethod
    def _ensure_owner_or_admin(form: TemperatureControlForm, user: User) -> None:
        """Solo il creatore o un amministratore può modificare il form"""
        if form.created_by_user_id != user.id and not user.is_admin:
            raise AuthorizationError("Only the creator or an administrator can modify this form")

    @staticmethod
    def _ensure_version(form: TemperatureControlForm, expected_version: Optional[int]) -> None:
        if expected_version is not None and expected_version != form.version:
            raise ConcurrencyError(
                f"Temperature form {form.form_number} was modified by another user "
                f"(version {form.version}, expected {expected_version})"
            )

    def _get_active_product(self, product_code: str) -> Product:
        product = self.repos.products.get_by_code(product_code)
        if product is None:
            raise ValidationError(f"Product with code '{product_code}' not found")
        if not product.is_active:
            raise ValidationError(f"Product '{product.product_code}' is not active")
        return product

    # ==========================================
    # FORM COMMANDS
    # ==========================================

    def create_form(self, data: TemperatureFormCreate, user: User) -> TemperatureControlForm:
        """Nuovo form in Draft con numero TEMP-YYYYMMDD-NNNN"""
        with self.uow.transaction():
            now = self.clock()
            form = TemperatureControlForm(
                destination=data.destination,
                defrost_date=data.defrost_date,
                production_date=data.production_date,
                observations=data.observations,
                geo_location=data.geo_location,
                attachment_urls=data.attachment_urls,
                status=FormStatus.DRAFT.value,
                created_by_user_id=user.id,
                created_at=now,
                updated_at=now,
            )
            form.generate_form_number(self.repos.forms.next_sequence_number(now.date()))
            self.repos.forms.add(form)
            record_change(self.repos.audit_logs, "Create", form, user.id, context=self.context)

        logger.info("Temperature form %s created by user %s", form.form_number, user.id)
        return self.get_form(form.id)

    def update_form(self, form_id: uuid.UUID, data: TemperatureFormUpdate, user: User) -> TemperatureControlForm:
        """
        Modifica intestazione e/o stato.

        Lo stato può diventare Draft o Completed (invio), oppure Archived
        per chi ha il permesso di archiviazione.
        """
        with self.uow.transaction():
            form = self.get_form(form_id)
            self._ensure_version(form, data.version)
            old_values = snapshot(form)

            target = data.status
            archiving = target == FormStatus.ARCHIVED and target != form.form_status

            if archiving:
                if not has_permission(user.role, FORM_ARCHIVE):
                    raise AuthorizationError("Only administrators can archive a form")
                if form.form_status == FormStatus.ARCHIVED:
                    raise InvalidStateError("archive", form.status)
            else:
                form.ensure_editable("edit")
                self._ensure_owner_or_admin(form, user)

            changes = data.model_dump(exclude_unset=True, include=set(FORM_HEADER_FIELDS))
            if changes and archiving:
                form.ensure_editable("edit")
            for field, value in changes.items():
                if value is None and field in REQUIRED_HEADER_FIELDS:
                    continue
                setattr(form, field, value)

            if target is not None and target != form.form_status:
                if target == FormStatus.ARCHIVED:
                    form.archive()
                elif target == FormStatus.COMPLETED:
                    form.complete()
                elif target == FormStatus.DRAFT:
                    form.status = FormStatus.DRAFT.value
                else:
                    raise ValidationError("Status can only be changed to Draft, Completed or Archived")

            form.updated_at = self.clock()
            self.repos.forms.update(form)
            record_change(self.repos.audit_logs, "Update", form, user.id, old_values, self.context)

        logger.info("Temperature form %s updated by user %s", form.form_number, user.id)
        return self.get_form(form.id)

    def submit_form(self, form_id: uuid.UUID, user: User) -> TemperatureControlForm:
        """Draft/Rejected -> Completed, pronto per la revisione"""
        with self.uow.transaction():
            form = self.get_form(form_id)
            self._ensure_owner_or_admin(form, user)
            old_values = snapshot(form)
            form.complete()
            self.repos.forms.update(form)
            record_change(self.repos.audit_logs, "Submit", form, user.id, old_values, self.context)

        logger.info("Temperature form %s submitted by user %s", form.form_number, user.id)
        return self.get_form(form.id)

    def review_form(self, form_id: uuid.UUID, data: FormReviewRequest, user: User) -> TemperatureControlForm:
        """Completed -> Reviewed | Rejected"""
        with self.uow.transaction():
            form = self.get_form(form_id)
            old_values = snapshot(form)
            form.review(data.status, user.id, data.review_notes, data.reviewed_by_signature)
            self.repos.forms.update(form)
            record_change(self.repos.audit_logs, "Review", form, user.id, old_values, self.context)

        outcome = "approved" if data.status == FormStatus.REVIEWED else "rejected"
        logger.info("Temperature form %s %s by user %s", form.form_number, outcome, user.id)
        return self.get_form(form.id)

    def delete_form(self, form_id: uuid.UUID, user: User) -> bool:
        """
        Elimina un form.

        Il form viene rimosso fisicamente solo se non ha mai avuto letture
        (anche soft-deleted), altrimenti passa ad Archived. Ritorna True se rimosso.
        """
        with self.uow.transaction():
            form = self.get_form(form_id)
            form_number = form.form_number
            if not form.temperature_records:
                record_change(
                    self.repos.audit_logs, "Delete", form, user.id, snapshot(form), self.context, removed=True
                )
                self.repos.forms.hard_delete(form)
                removed = True
            else:
                old_values = snapshot(form)
                form.archive()
                self.repos.forms.update(form)
                record_change(self.repos.audit_logs, "Archive", form, user.id, old_values, self.context)
                removed = False

        logger.info(
            "Temperature form %s %s by user %s", form_number, "deleted" if removed else "archived", user.id
        )
        return removed

    # ==========================================
    # RECORD COMMANDS
    # ==========================================

    def _get_editable_form(self, form_id: uuid.UUID, user: User, operation: str) -> TemperatureControlForm:
        form = self.get_form(form_id)
        form.ensure_editable(operation)
        self._ensure_owner_or_admin(form, user)
        return form

    def _get_record(self, form: TemperatureControlForm, record_id: uuid.UUID) -> TemperatureRecord:
        record = self.repos.records.get_for_form(form.id, record_id)
        if record is None:
            raise EntityNotFoundError(f"Temperature record with id {record_id} not found in form {form.form_number}")
        return record

    def add_record(self, form_id: uuid.UUID, data: TemperatureRecordCreate, user: User) -> TemperatureRecord:
        """Aggiunge una lettura e, se fuori range, il relativo alert"""
        with self.uow.transaction():
            form = self._get_editable_form(form_id, user, "add record")
            product = self._get_active_product(data.product_code)
            record_order = data.record_order if data.record_order is not None else form.next_record_order()

            record = TemperatureRecord(
                form=form,
                product=product,
                car_number=data.car_number,
                product_code=product.product_code,
                product_temperature=data.product_temperature,
                defrost_start_time=data.defrost_start_time,
                consumption_start_time=data.consumption_start_time,
                consumption_end_time=data.consumption_end_time,
                observations=data.observations,
                record_order=record_order,
                created_at=self.clock(),
            )
            alert = build_alert(form, record, product, self.clock())
            self.repos.records.add(record)
            if alert is not None:
                self.repos.alerts.add(alert)
            form.updated_at = self.clock()
            record_change(self.repos.audit_logs, "Create", record, user.id, context=self.context)

        if alert is not None:
            logger.warning(
                "Out of range reading on form %s: product %s at %s°C (%s)",
                form.form_number, record.product_code, record.product_temperature, alert.severity,
            )
        return record

    def update_record(
        self,
        form_id: uuid.UUID,
        record_id: uuid.UUID,
        data: TemperatureRecordUpdate,
        user: User,
    ) -> TemperatureRecord:
        """Sostituisce i dati della lettura e rivaluta il range"""
        with self.uow.transaction():
            form = self._get_editable_form(form_id, user, "update record")
            record = self._get_record(form, record_id)
            old_values = snapshot(record)
            product = self._get_active_product(data.product_code)

            record.product = product
            record.product_code = product.product_code
            record.car_number = data.car_number
            record.product_temperature = data.product_temperature
            record.defrost_start_time = data.defrost_start_time
            record.consumption_start_time = data.consumption_start_time
            record.consumption_end_time = data.consumption_end_time
            record.observations = data.observations
            if data.record_order is not None:
                record.record_order = data.record_order

            for previous in exclude_deleted(record.alerts):
                previous.soft_delete()

            alert = build_alert(form, record, product, self.clock())
            self.repos.records.update(record)
            if alert is not None:
                self.repos.alerts.add(alert)
            form.updated_at = self.clock()
            record_change(self.repos.audit_logs, "Update", record, user.id, old_values, self.context)

        logger.info("Temperature record %s on form %s updated by user %s", record.id, form.form_number, user.id)
        return record

    def delete_record(self, form_id: uuid.UUID, record_id: uuid.UUID, user: User) -> None:
        """Soft delete della lettura e dei suoi alert"""
        with self.uow.transaction():
            form = self._get_editable_form(form_id, user, "delete record")
            record = self._get_record(form, record_id)
            old_values = snapshot(record)
            for alert in exclude_deleted(record.alerts):
                alert.soft_delete()
            self.repos.records.soft_delete(record)
            form.updated_at = self.clock()
            record_change(self.repos.audit_logs, "Delete", record, user.id, old_values, self.context)

        logger.info("Temperature record %s on form %s deleted by user %s", record_id, form.form_number, user.id)
