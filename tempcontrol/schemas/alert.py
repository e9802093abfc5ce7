# =====================================================
# tempcontrol/schemas/alert.py - Pydantic Schemas
# =====================================================
from pydantic import BaseModel
from typing import Optional
from datetime import datetime
import uuid


class TemperatureAlertResponse(BaseModel):
    """Schema for alert API responses"""
    id: uuid.UUID
    form_id: uuid.UUID
    record_id: Optional[uuid.UUID] = None
    severity: str
    message: str
    temperature: float
    expected_min_temperature: float
    expected_max_temperature: float
    is_acknowledged: bool
    acknowledged_at: Optional[datetime] = None
    acknowledged_by_user_id: Optional[uuid.UUID] = None
    created_at: datetime

    class Config:
        from_attributes = True


class AcknowledgeAllRequest(BaseModel):
    """Riconosce tutti gli alert aperti di un form"""
    form_id: uuid.UUID


class AcknowledgeAllResponse(BaseModel):
    form_id: uuid.UUID
    acknowledged_count: int
