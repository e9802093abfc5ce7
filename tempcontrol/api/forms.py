# =====================================================
# tempcontrol/api/forms.py - Temperature Form Routes
# =====================================================
from typing import List, Optional
from datetime import date
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
import uuid

from tempcontrol.auth.dependencies import get_audit_context, pagination_params, require_permission
from tempcontrol.auth.permissions import ALERT_READ, FORM_DELETE, FORM_READ, FORM_REVIEW, FORM_WRITE
from tempcontrol.database.connection import get_db
from tempcontrol.models.enums import FormStatus
from tempcontrol.models.user import User
from tempcontrol.schemas.alert import TemperatureAlertResponse
from tempcontrol.schemas.common import ApiResponse, PagedResponse
from tempcontrol.schemas.form import (
    FormReviewRequest,
    TemperatureFormCreate,
    TemperatureFormResponse,
    TemperatureFormUpdate,
    TemperatureRecordCreate,
    TemperatureRecordResponse,
    TemperatureRecordUpdate,
)
from tempcontrol.services.audit import AuditContext
from tempcontrol.services.form_service import FormService

forms_router = APIRouter(prefix="/api/temperatureforms", tags=["Temperature Forms"])

# =====================================================
# FORMS
# =====================================================


@forms_router.get("", response_model=ApiResponse[PagedResponse[TemperatureFormResponse]])
def list_forms(
    form_status: Optional[FormStatus] = Query(None, alias="status"),
    start_date: Optional[date] = Query(None, description="Created on or after (whole day)"),
    end_date: Optional[date] = Query(None, description="Created on or before (whole day)"),
    destination: Optional[str] = Query(None, description="Destination substring"),
    created_by_user_id: Optional[uuid.UUID] = None,
    paging: dict = Depends(pagination_params),
    db: Session = Depends(get_db),
    _: User = Depends(require_permission(FORM_READ)),
):
    """Lista paginata, più recenti prima."""
    forms, total_count = FormService(db).list_forms(
        status=form_status.value if form_status else None,
        start_date=start_date,
        end_date=end_date,
        destination=destination,
        created_by_user_id=created_by_user_id,
        **paging,
    )
    return ApiResponse.ok(
        PagedResponse.build(
            [TemperatureFormResponse.from_form(form) for form in forms],
            total_count,
            paging["page"],
            paging["page_size"],
        )
    )


@forms_router.get("/{form_id}", response_model=ApiResponse[TemperatureFormResponse])
def get_form(
    form_id: uuid.UUID,
    db: Session = Depends(get_db),
    _: User = Depends(require_permission(FORM_READ)),
):
    form = FormService(db).get_form(form_id)
    return ApiResponse.ok(TemperatureFormResponse.from_form(form))


@forms_router.post(
    "",
    response_model=ApiResponse[TemperatureFormResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_form(
    data: TemperatureFormCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(FORM_WRITE)),
    context: AuditContext = Depends(get_audit_context),
):
    form = FormService(db, context).create_form(data, current_user)
    return ApiResponse.ok(TemperatureFormResponse.from_form(form), "Temperature form created successfully")


@forms_router.put("/{form_id}", response_model=ApiResponse[TemperatureFormResponse])
def update_form(
    form_id: uuid.UUID,
    data: TemperatureFormUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(FORM_WRITE)),
    context: AuditContext = Depends(get_audit_context),
):
    form = FormService(db, context).update_form(form_id, data, current_user)
    return ApiResponse.ok(TemperatureFormResponse.from_form(form), "Temperature form updated successfully")


@forms_router.delete("/{form_id}", response_model=ApiResponse[None])
def delete_form(
    form_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(FORM_DELETE)),
    context: AuditContext = Depends(get_audit_context),
):
    """Form con letture vengono archiviati invece che eliminati."""
    removed = FormService(db, context).delete_form(form_id, current_user)
    message = "Temperature form deleted successfully" if removed else "Temperature form archived (has records)"
    return ApiResponse.ok(message=message)


@forms_router.post("/{form_id}/submit", response_model=ApiResponse[TemperatureFormResponse])
def submit_form(
    form_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(FORM_WRITE)),
    context: AuditContext = Depends(get_audit_context),
):
    form = FormService(db, context).submit_form(form_id, current_user)
    return ApiResponse.ok(TemperatureFormResponse.from_form(form), "Temperature form submitted for review")


@forms_router.patch("/{form_id}/review", response_model=ApiResponse[TemperatureFormResponse])
def review_form(
    form_id: uuid.UUID,
    data: FormReviewRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(FORM_REVIEW)),
    context: AuditContext = Depends(get_audit_context),
):
    form = FormService(db, context).review_form(form_id, data, current_user)
    return ApiResponse.ok(TemperatureFormResponse.from_form(form), f"Temperature form {form.status.lower()}")

# =====================================================
# RECORDS & ALERTS
# =====================================================


@forms_router.post(
    "/{form_id}/records",
    response_model=ApiResponse[TemperatureRecordResponse],
    status_code=status.HTTP_201_CREATED,
)
def add_record(
    form_id: uuid.UUID,
    data: TemperatureRecordCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(FORM_WRITE)),
    context: AuditContext = Depends(get_audit_context),
):
    record = FormService(db, context).add_record(form_id, data, current_user)
    return ApiResponse.ok(TemperatureRecordResponse.model_validate(record), "Temperature record added")


@forms_router.put("/{form_id}/records/{record_id}", response_model=ApiResponse[TemperatureRecordResponse])
def update_record(
    form_id: uuid.UUID,
    record_id: uuid.UUID,
    data: TemperatureRecordUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(FORM_WRITE)),
    context: AuditContext = Depends(get_audit_context),
):
    record = FormService(db, context).update_record(form_id, record_id, data, current_user)
    return ApiResponse.ok(TemperatureRecordResponse.model_validate(record), "Temperature record updated")


@forms_router.delete("/{form_id}/records/{record_id}", response_model=ApiResponse[None])
def delete_record(
    form_id: uuid.UUID,
    record_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(FORM_WRITE)),
    context: AuditContext = Depends(get_audit_context),
):
    FormService(db, context).delete_record(form_id, record_id, current_user)
    return ApiResponse.ok(message="Temperature record deleted")


@forms_router.get("/{form_id}/alerts", response_model=ApiResponse[List[TemperatureAlertResponse]])
def list_form_alerts(
    form_id: uuid.UUID,
    db: Session = Depends(get_db),
    _: User = Depends(require_permission(ALERT_READ)),
):
    alerts = FormService(db).list_form_alerts(form_id)
    return ApiResponse.ok([TemperatureAlertResponse.model_validate(alert) for alert in alerts])
