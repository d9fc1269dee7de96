"""
Referential (lookup) schemas
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator, field_serializer, ConfigDict


def _strip_required(v):
    if v is None:
        return None
    v = v.strip()
    if not v:
        raise ValueError("Value cannot be blank")
    return v


class NamedCreate(BaseModel):
    """Schema for creating a simple lookup row (status, gender, ...)"""
    name: str = Field(..., min_length=1, max_length=100, description="Display name (unique)")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        return _strip_required(v)


class NamedUpdate(BaseModel):
    """Schema for renaming a simple lookup row"""
    name: Optional[str] = Field(None, min_length=1, max_length=100, description="Display name")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        return _strip_required(v)


class NamedOut(BaseModel):
    """Schema for simple lookup output"""
    id: int
    name: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("created_at", when_used="always")
    @classmethod
    def _ser_datetime(cls, dt):
        from app.utils.datetime_utils import iso_8601_utc
        return iso_8601_utc(dt)


class CountryCreate(BaseModel):
    """Schema for creating a country"""
    country_name: str = Field(..., min_length=1, max_length=500)
    country_name_ar: Optional[str] = Field(None, max_length=500, description="Arabic name")
    country_code: str = Field(..., min_length=2, max_length=3, description="ISO code (unique)")
    country_phone_code: str = Field(..., min_length=1, max_length=10, description="e.g. +212")
    nationality: str = Field(..., min_length=1, max_length=500)

    @field_validator("country_name", "nationality")
    @classmethod
    def strip_text(cls, v):
        return _strip_required(v)

    @field_validator("country_code")
    @classmethod
    def normalize_code(cls, v):
        return _strip_required(v).upper()


class CountryUpdate(BaseModel):
    """Schema for updating a country"""
    country_name: Optional[str] = Field(None, min_length=1, max_length=500)
    country_name_ar: Optional[str] = Field(None, max_length=500)
    country_code: Optional[str] = Field(None, min_length=2, max_length=3)
    country_phone_code: Optional[str] = Field(None, min_length=1, max_length=10)
    nationality: Optional[str] = Field(None, min_length=1, max_length=500)

    @field_validator("country_name", "nationality")
    @classmethod
    def strip_text(cls, v):
        return _strip_required(v)

    @field_validator("country_code")
    @classmethod
    def normalize_code(cls, v):
        return None if v is None else _strip_required(v).upper()


class CountryOut(BaseModel):
    """Schema for country output"""
    id: int
    country_name: str
    country_name_ar: Optional[str] = None
    country_code: str
    country_phone_code: str
    nationality: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("created_at", when_used="always")
    @classmethod
    def _ser_datetime(cls, dt):
        from app.utils.datetime_utils import iso_8601_utc
        return iso_8601_utc(dt)


class CityCreate(BaseModel):
    """Schema for creating a city"""
    city_name: str = Field(..., min_length=1, max_length=500, description="Unique within its country")
    country_id: int = Field(..., description="Country ID")

    @field_validator("city_name")
    @classmethod
    def strip_name(cls, v):
        return _strip_required(v)


class CityUpdate(BaseModel):
    """Schema for updating a city"""
    city_name: Optional[str] = Field(None, min_length=1, max_length=500)
    country_id: Optional[int] = None

    @field_validator("city_name")
    @classmethod
    def strip_name(cls, v):
        return _strip_required(v)


class CityOut(BaseModel):
    """Schema for city output"""
    id: int
    city_name: str
    country_id: int
    country_name: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("created_at", when_used="always")
    @classmethod
    def _ser_datetime(cls, dt):
        from app.utils.datetime_utils import iso_8601_utc
        return iso_8601_utc(dt)
