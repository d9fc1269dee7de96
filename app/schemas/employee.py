"""
Employee schemas
"""
from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator, field_serializer, ConfigDict


class EmployeeCreate(BaseModel):
    """Schema for creating an employee"""
    first_name: str = Field(..., min_length=1, max_length=200)
    last_name: str = Field(..., min_length=1, max_length=200)
    cin_number: str = Field(..., min_length=1, max_length=50, description="National ID number (unique)")
    date_of_birth: date
    phone: str = Field(..., min_length=1, max_length=30)
    email: str = Field(..., min_length=3, max_length=255)
    company_id: int = Field(..., description="Employer company ID")
    manager_id: Optional[int] = Field(None, description="Manager employee ID")
    status_id: Optional[int] = None
    gender_id: Optional[int] = None
    nationality_id: Optional[int] = None
    education_level_id: Optional[int] = None
    marital_status_id: Optional[int] = None
    cnss_number: Optional[str] = Field(None, max_length=50)
    cimr_number: Optional[str] = Field(None, max_length=50)
    create_user_account: bool = Field(default=False, description="Also create a login for this employee")

    @field_validator("first_name", "last_name", "cin_number")
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


class EmployeeUpdate(BaseModel):
    """Schema for updating an employee; omitted fields are left unchanged"""
    first_name: Optional[str] = Field(None, min_length=1, max_length=200)
    last_name: Optional[str] = Field(None, min_length=1, max_length=200)
    cin_number: Optional[str] = Field(None, min_length=1, max_length=50)
    date_of_birth: Optional[date] = None
    phone: Optional[str] = Field(None, min_length=1, max_length=30)
    email: Optional[str] = Field(None, min_length=3, max_length=255)
    company_id: Optional[int] = None
    manager_id: Optional[int] = None
    status_id: Optional[int] = None
    gender_id: Optional[int] = None
    nationality_id: Optional[int] = None
    education_level_id: Optional[int] = None
    marital_status_id: Optional[int] = None
    cnss_number: Optional[str] = Field(None, max_length=50)
    cimr_number: Optional[str] = Field(None, max_length=50)

    @field_validator("first_name", "last_name", "cin_number")
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


class EmployeeOut(BaseModel):
    """Schema for employee output with resolved lookup names"""
    id: int
    first_name: str
    last_name: str
    cin_number: str
    date_of_birth: date
    phone: str
    email: str
    company_id: int
    company_name: Optional[str] = None
    manager_id: Optional[int] = None
    manager_full_name: Optional[str] = None
    status_id: Optional[int] = None
    status_name: Optional[str] = None
    gender_id: Optional[int] = None
    gender_name: Optional[str] = None
    nationality_id: Optional[int] = None
    nationality_name: Optional[str] = None
    education_level_id: Optional[int] = None
    education_level_name: Optional[str] = None
    marital_status_id: Optional[int] = None
    marital_status_name: Optional[str] = None
    cnss_number: Optional[str] = None
    cimr_number: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("created_at", when_used="always")
    @classmethod
    def _ser_datetime(cls, dt):
        from app.utils.datetime_utils import iso_8601_utc
        return iso_8601_utc(dt)


class EmployeeCreateResponse(EmployeeOut):
    """Created employee; account credentials are only ever returned here"""
    user_id: Optional[int] = None
    username: Optional[str] = None
    temporary_password: Optional[str] = None
