# =====================================================
# tempcontrol/api/reports.py - Reports & PDF Export
# =====================================================
from typing import Optional
from datetime import date
from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session
import logging
import uuid

from tempcontrol.auth.dependencies import require_permission
from tempcontrol.auth.permissions import REPORT_READ
from tempcontrol.database.connection import get_db
from tempcontrol.database.exceptions import ValidationError
from tempcontrol.models.user import User
from tempcontrol.schemas.common import ApiResponse
from tempcontrol.schemas.report import DailyReport, RangeStatistics
from tempcontrol.services.form_service import FormService
from tempcontrol.services.pdf_export import build_form_document, render_form_pdf
from tempcontrol.services.report_service import ReportService, end_of_day, start_of_day

logger = logging.getLogger(__name__)

reports_router = APIRouter(prefix="/api/reports", tags=["Reports"])


@reports_router.get("/daily", response_model=ApiResponse[DailyReport])
def get_daily_report(
    report_date: Optional[date] = Query(None, alias="date", description="Day to summarize, default today"),
    db: Session = Depends(get_db),
    _: User = Depends(require_permission(REPORT_READ)),
):
    return ApiResponse.ok(ReportService(db).get_daily_report(report_date))


@reports_router.get("/statistics", response_model=ApiResponse[RangeStatistics])
def get_statistics(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    _: User = Depends(require_permission(REPORT_READ)),
):
    """Statistiche sul periodo, default ultimi 30 giorni."""
    if start_date and end_date and start_date > end_date:
        raise ValidationError("start_date must be before end_date")
    statistics = ReportService(db).get_statistics(
        start_of_day(start_date) if start_date else None,
        end_of_day(end_date) if end_date else None,
    )
    return ApiResponse.ok(statistics)


@reports_router.get("/export/{form_id}/pdf", response_class=Response)
def export_form_pdf(
    form_id: uuid.UUID,
    db: Session = Depends(get_db),
    _: User = Depends(require_permission(REPORT_READ)),
):
    form = FormService(db).get_form(form_id)
    document = build_form_document(form)
    content = render_form_pdf(document)
    logger.info("PDF export of form %s (%d bytes)", form.form_number, len(content))
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{document.filename}"'},
    )
