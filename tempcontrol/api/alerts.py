# =====================================================
# tempcontrol/api/alerts.py - Alert Routes
# =====================================================
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
import uuid

from tempcontrol.auth.dependencies import get_audit_context, pagination_params, require_permission
from tempcontrol.auth.permissions import ALERT_ACKNOWLEDGE, ALERT_READ
from tempcontrol.database.connection import get_db
from tempcontrol.models.user import User
from tempcontrol.schemas.alert import AcknowledgeAllRequest, AcknowledgeAllResponse, TemperatureAlertResponse
from tempcontrol.schemas.common import ApiResponse, PagedResponse
from tempcontrol.services.alert_service import AlertService
from tempcontrol.services.audit import AuditContext

alerts_router = APIRouter(prefix="/api/alerts", tags=["Alerts"])


@alerts_router.get("", response_model=ApiResponse[PagedResponse[TemperatureAlertResponse]])
def list_alerts(
    is_acknowledged: Optional[bool] = None,
    severity: Optional[str] = Query(None, description="Info, Warning, Critical or Emergency"),
    form_id: Optional[uuid.UUID] = None,
    paging: dict = Depends(pagination_params),
    db: Session = Depends(get_db),
    _: User = Depends(require_permission(ALERT_READ)),
):
    alerts, total_count = AlertService(db).list_alerts(
        is_acknowledged=is_acknowledged,
        severity=severity,
        form_id=form_id,
        **paging,
    )
    return ApiResponse.ok(
        PagedResponse.build(
            [TemperatureAlertResponse.model_validate(alert) for alert in alerts],
            total_count,
            paging["page"],
            paging["page_size"],
        )
    )


@alerts_router.post("/acknowledge-all", response_model=ApiResponse[AcknowledgeAllResponse])
def acknowledge_all_alerts(
    request: AcknowledgeAllRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(ALERT_ACKNOWLEDGE)),
    context: AuditContext = Depends(get_audit_context),
):
    count = AlertService(db, context).acknowledge_all(request.form_id, current_user)
    return ApiResponse.ok(
        AcknowledgeAllResponse(form_id=request.form_id, acknowledged_count=count),
        f"{count} alerts acknowledged",
    )


@alerts_router.post("/{alert_id}/acknowledge", response_model=ApiResponse[TemperatureAlertResponse])
def acknowledge_alert(
    alert_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(ALERT_ACKNOWLEDGE)),
    context: AuditContext = Depends(get_audit_context),
):
    alert = AlertService(db, context).acknowledge(alert_id, current_user)
    return ApiResponse.ok(TemperatureAlertResponse.model_validate(alert), "Alert acknowledged")
