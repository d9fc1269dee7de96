"""
Company schemas
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator, field_serializer, ConfigDict


class CompanyCreate(BaseModel):
    """Schema for creating a company"""
    company_name: str = Field(..., min_length=1, max_length=500, description="Company name (unique)")
    company_address: str = Field(..., min_length=1, max_length=1000)
    city_id: Optional[int] = Field(None, description="City ID")
    country_id: Optional[int] = Field(None, description="Country ID")
    ice_number: str = Field(..., min_length=1, max_length=50, description="Common company identifier")
    cnss_number: str = Field(..., min_length=1, max_length=50, description="Social security number")
    if_number: str = Field(..., min_length=1, max_length=50, description="Tax identifier")
    rc_number: str = Field(..., min_length=1, max_length=50, description="Trade register number")
    rib_number: str = Field(..., min_length=1, max_length=50, description="Bank account identifier")
    phone_number: str = Field(..., min_length=1, max_length=30)
    email: str = Field(..., min_length=3, max_length=255, description="Company email (unique)")
    is_cabinet_expert: bool = Field(default=False, description="Accounting firm managing other companies")

    @field_validator("company_name", "company_address")
    @classmethod
    def strip_text(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Value cannot be blank")
        return v

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        v = v.strip().lower()
        if "@" not in v:
            raise ValueError("Invalid email address")
        return v


class CompanyUpdate(BaseModel):
    """Schema for updating a company; omitted fields are left unchanged"""
    company_name: Optional[str] = Field(None, min_length=1, max_length=500)
    company_address: Optional[str] = Field(None, min_length=1, max_length=1000)
    city_id: Optional[int] = None
    country_id: Optional[int] = None
    ice_number: Optional[str] = Field(None, min_length=1, max_length=50)
    cnss_number: Optional[str] = Field(None, min_length=1, max_length=50)
    if_number: Optional[str] = Field(None, min_length=1, max_length=50)
    rc_number: Optional[str] = Field(None, min_length=1, max_length=50)
    rib_number: Optional[str] = Field(None, min_length=1, max_length=50)
    phone_number: Optional[str] = Field(None, min_length=1, max_length=30)
    email: Optional[str] = Field(None, min_length=3, max_length=255)
    is_cabinet_expert: Optional[bool] = None

    @field_validator("company_name", "company_address")
    @classmethod
    def strip_text(cls, v):
        if v is None:
            return None
        v = v.strip()
        if not v:
            raise ValueError("Value cannot be blank")
        return v

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        if v is None:
            return None
        v = v.strip().lower()
        if "@" not in v:
            raise ValueError("Invalid email address")
        return v


class CompanyOut(BaseModel):
    """Schema for company output"""
    id: int
    company_name: str
    company_address: str
    city_id: Optional[int] = None
    city_name: Optional[str] = None
    country_id: Optional[int] = None
    country_name: Optional[str] = None
    ice_number: str
    cnss_number: str
    if_number: str
    rc_number: str
    rib_number: str
    phone_number: str
    email: str
    is_cabinet_expert: bool
    employee_count: int = 0
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("created_at", when_used="always")
    @classmethod
    def _ser_datetime(cls, dt):
        from app.utils.datetime_utils import iso_8601_utc
        return iso_8601_utc(dt)
