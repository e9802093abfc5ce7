# =====================================================
# tempcontrol/schemas/product.py - Pydantic Schemas
# =====================================================
from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime
from decimal import Decimal
import uuid


class ProductBase(BaseModel):
    """Base schema for Product"""
    product_code: str = Field(..., description="Unique product code (stored upper-case)")
    product_name: str = Field(..., description="Product name")
    min_temperature: Decimal = Field(..., description="Minimum allowed temperature °C")
    max_temperature: Decimal = Field(..., description="Maximum allowed temperature °C")
    max_defrost_time_minutes: int = Field(..., description="Maximum defrost time in minutes")
    description: Optional[str] = None
    category: Optional[str] = Field(None, max_length=100)


class ProductCreate(ProductBase):
    """Schema for creating product. Business rules are checked by ProductService."""
    pass


class ProductUpdate(BaseModel):
    """Schema for updating product, only provided fields change"""
    product_code: Optional[str] = None
    product_name: Optional[str] = None
    min_temperature: Optional[Decimal] = None
    max_temperature: Optional[Decimal] = None
    max_defrost_time_minutes: Optional[int] = None
    description: Optional[str] = None
    category: Optional[str] = Field(None, max_length=100)
    is_active: Optional[bool] = None


class ProductResponse(BaseModel):
    """Schema for product API responses"""
    id: uuid.UUID
    product_code: str
    product_name: str
    min_temperature: float
    max_temperature: float
    max_defrost_time_minutes: int
    description: Optional[str] = None
    category: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProductCheckRequest(BaseModel):
    """Verifica di una temperatura contro il range del prodotto"""
    temperature: Decimal

    @field_validator('temperature')
    @classmethod
    def validate_temperature(cls, v):
        if v < -100 or v > 100:
            raise ValueError('Temperature must be between -100°C and 100°C')
        return v


class ProductCheckResponse(BaseModel):
    product_code: str
    temperature: float
    is_in_range: bool
    severity: str
