# =====================================================
# tempcontrol/schemas/form.py - Pydantic Schemas
# =====================================================
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import List, Optional
from datetime import date, datetime, time
from decimal import Decimal
import uuid

from tempcontrol.models.enums import FormStatus

# =====================================================
# TEMPERATURE RECORDS
# =====================================================


class TemperatureRecordBase(BaseModel):
    """Base schema for TemperatureRecord"""
    car_number: int = Field(..., ge=1, description="Car (batch unit) number")
    product_code: str = Field(..., min_length=1, max_length=20, description="Product code")
    product_temperature: Decimal = Field(..., description="Measured temperature °C")
    defrost_start_time: Optional[time] = None
    consumption_start_time: Optional[time] = None
    consumption_end_time: Optional[time] = None
    observations: Optional[str] = None

    @field_validator('product_temperature')
    @classmethod
    def validate_temperature(cls, v):
        if v < -100 or v > 100:
            raise ValueError('Temperature must be between -100°C and 100°C')
        return v

    @field_validator('product_code')
    @classmethod
    def normalize_code(cls, v):
        v = v.strip().upper()
        if not v:
            raise ValueError('Product code is required')
        return v


class TemperatureRecordCreate(TemperatureRecordBase):
    """Schema for adding a record to a form"""
    record_order: Optional[int] = Field(None, ge=0)


class TemperatureRecordUpdate(TemperatureRecordBase):
    """Schema for replacing a record"""
    record_order: Optional[int] = Field(None, ge=0)


class TemperatureRecordResponse(BaseModel):
    """Schema for record API responses"""
    id: uuid.UUID
    form_id: uuid.UUID
    car_number: int
    product_code: str
    product_name: str = ""
    product_temperature: float
    defrost_start_time: Optional[time] = None
    consumption_start_time: Optional[time] = None
    consumption_end_time: Optional[time] = None
    observations: Optional[str] = None
    record_order: int
    has_alert: bool
    defrost_duration_minutes: Optional[int] = None
    consumption_duration_minutes: Optional[int] = None

    class Config:
        from_attributes = True

# =====================================================
# FORMS
# =====================================================


class TemperatureFormCreate(BaseModel):
    """Schema for creating a form"""
    destination: str = Field(..., max_length=200, description="Destination")
    defrost_date: date
    production_date: date
    observations: Optional[str] = None
    geo_location: Optional[str] = None
    attachment_urls: Optional[str] = None

    @field_validator('destination')
    @classmethod
    def validate_destination(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Destination is required')
        return v


class TemperatureFormUpdate(BaseModel):
    """Schema for updating a form, only provided fields change"""
    destination: Optional[str] = Field(None, max_length=200)
    defrost_date: Optional[date] = None
    production_date: Optional[date] = None
    status: Optional[FormStatus] = None
    observations: Optional[str] = None
    created_by_signature: Optional[str] = None
    attachment_urls: Optional[str] = None
    geo_location: Optional[str] = None
    version: Optional[int] = Field(None, description="Version read by the client, for conflict detection")

    @field_validator('destination')
    @classmethod
    def validate_destination(cls, v):
        if v is not None and not v.strip():
            raise ValueError('Destination cannot be empty')
        return v.strip() if v is not None else v


class FormReviewRequest(BaseModel):
    """Schema for reviewing a completed form"""
    status: FormStatus
    review_notes: Optional[str] = None
    reviewed_by_signature: Optional[str] = None

    @model_validator(mode='after')
    def validate_outcome(self):
        if self.status not in (FormStatus.REVIEWED, FormStatus.REJECTED):
            raise ValueError("Review status must be 'Reviewed' or 'Rejected'")
        return self


class TemperatureFormResponse(BaseModel):
    """Schema for form API responses"""
    id: uuid.UUID
    form_number: str
    destination: str
    defrost_date: date
    production_date: date
    status: str
    created_by_signature: Optional[str] = None
    reviewed_by_signature: Optional[str] = None
    created_by_user_id: uuid.UUID
    created_by_user_name: str = ""
    reviewed_by_user_id: Optional[uuid.UUID] = None
    reviewed_by_user_name: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    review_notes: Optional[str] = None
    observations: Optional[str] = None
    attachment_urls: Optional[str] = None
    geo_location: Optional[str] = None
    version: int
    created_at: datetime
    updated_at: Optional[datetime] = None
    temperature_records: List[TemperatureRecordResponse] = Field(default_factory=list)
    alert_count: int = 0

    class Config:
        from_attributes = True

    @classmethod
    def from_form(cls, form) -> "TemperatureFormResponse":
        """Mappa il model escludendo letture e alert soft-deleted"""
        return cls(
            id=form.id,
            form_number=form.form_number,
            destination=form.destination,
            defrost_date=form.defrost_date,
            production_date=form.production_date,
            status=form.status,
            created_by_signature=form.created_by_signature,
            reviewed_by_signature=form.reviewed_by_signature,
            created_by_user_id=form.created_by_user_id,
            created_by_user_name=form.created_by_user.name if form.created_by_user else "",
            reviewed_by_user_id=form.reviewed_by_user_id,
            reviewed_by_user_name=form.reviewed_by_user.name if form.reviewed_by_user else None,
            reviewed_at=form.reviewed_at,
            review_notes=form.review_notes,
            observations=form.observations,
            attachment_urls=form.attachment_urls,
            geo_location=form.geo_location,
            version=form.version,
            created_at=form.created_at,
            updated_at=form.updated_at,
            temperature_records=[
                TemperatureRecordResponse.model_validate(record) for record in form.active_records
            ],
            alert_count=len(form.active_alerts),
        )
