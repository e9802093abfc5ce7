# =====================================================
# tempcontrol/schemas/report.py - Report Schemas
# =====================================================
from pydantic import BaseModel, Field
from typing import Dict, List, Optional
from datetime import date, datetime
import uuid


class UserFormSummary(BaseModel):
    user_id: uuid.UUID
    user_name: str
    total_forms: int = 0
    draft_forms: int = 0
    completed_forms: int = 0
    reviewed_forms: int = 0
    rejected_forms: int = 0
    archived_forms: int = 0


class ProductUsageSummary(BaseModel):
    product_code: str
    product_name: str
    total_records: int
    records_with_alerts: int
    average_temperature: float
    min_temperature: float
    max_temperature: float


class DailyReport(BaseModel):
    """Riepilogo dei form creati in un giorno"""
    date: date
    total_forms: int
    draft_forms: int
    completed_forms: int
    reviewed_forms: int
    rejected_forms: int
    archived_forms: int
    total_records: int
    records_with_alerts: int
    total_alerts: int
    alerts_by_severity: Dict[str, int] = Field(default_factory=dict)
    critical_alerts: int
    emergency_alerts: int
    forms_by_user: List[UserFormSummary] = Field(default_factory=list)
    product_usage: List[ProductUsageSummary] = Field(default_factory=list)
    generated_at: datetime


class StatusCount(BaseModel):
    status: str
    count: int


class DailyCount(BaseModel):
    date: date
    count: int


class ProductCount(BaseModel):
    product_code: str
    count: int


class DateRange(BaseModel):
    start_date: datetime
    end_date: datetime


class RangeStatistics(BaseModel):
    """Statistiche aggregate su un intervallo"""
    total_forms: int
    pending_review: int
    total_records: int
    total_alerts: int
    critical_alerts: int
    average_records_per_form: float
    alert_rate: float
    forms_by_status: List[StatusCount] = Field(default_factory=list)
    forms_by_day: List[DailyCount] = Field(default_factory=list)
    alerts_by_day: List[DailyCount] = Field(default_factory=list)
    top_products: List[ProductCount] = Field(default_factory=list)
    date_range: Optional[DateRange] = None
