"""
Event log models

Append-only audit trail of field and relation changes. Each row records
what changed (event_name), from what and to what (label plus optional id on
each side), who did it and when. Event names come from a closed catalog per
entity kind so the trail stays machine-queryable.
"""
import enum

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, event

from app.db.base import Base
from app.utils.datetime_utils import now_utc


class CompanyEventName(str, enum.Enum):
    # Identity
    COMPANY_CREATED = "Company_Created"
    COMPANY_UPDATED = "Company_Updated"
    COMPANY_DELETED = "Company_Deleted"
    COMPANY_NAME_CHANGED = "CompanyName_Changed"
    LEGAL_FORM_CHANGED = "LegalForm_Changed"
    FOUNDING_DATE_CHANGED = "FoundingDate_Changed"

    # Contact details
    EMAIL_CHANGED = "Email_Changed"
    PHONE_CHANGED = "Phone_Changed"
    ADDRESS_CHANGED = "Address_Changed"
    CITY_CHANGED = "City_Changed"
    COUNTRY_CHANGED = "Country_Changed"

    # Status
    STATUS_CHANGED = "Status_Changed"
    LICENCE_CHANGED = "Licence_Changed"

    # Legal and tax identifiers
    ICE_CHANGED = "ICE_Changed"
    IF_CHANGED = "IF_Changed"
    RC_CHANGED = "RC_Changed"
    RIB_CHANGED = "RIB_Changed"
    CNSS_CHANGED = "CNSS_Changed"
    IS_CABINET_EXPERT_CHANGED = "IsCabinetExpert_Changed"

    # Relations
    ACCOUNTANT_CHANGED = "Accountant_Changed"
    CABINET_LINKED = "Cabinet_Linked"
    CABINET_UNLINKED = "Cabinet_Unlinked"


class EmployeeEventName(str, enum.Enum):
    # Personal information
    FIRST_NAME_CHANGED = "FirstName_Changed"
    LAST_NAME_CHANGED = "LastName_Changed"
    CIN_CHANGED = "CIN_Changed"
    DATE_OF_BIRTH_CHANGED = "DateOfBirth_Changed"
    PHONE_CHANGED = "Phone_Changed"
    EMAIL_CHANGED = "Email_Changed"

    # Status and lookups
    STATUS_CHANGED = "Status_Changed"
    GENDER_CHANGED = "Gender_Changed"
    NATIONALITY_CHANGED = "Nationality_Changed"
    EDUCATION_LEVEL_CHANGED = "EducationLevel_Changed"
    MARITAL_STATUS_CHANGED = "MaritalStatus_Changed"

    # Organisation
    DEPARTMENT_CHANGED = "Department_Changed"
    MANAGER_CHANGED = "Manager_Changed"
    COMPANY_CHANGED = "Company_Changed"

    # Contract and position
    CONTRACT_CREATED = "Contract_Created"
    CONTRACT_UPDATED = "Contract_Updated"
    CONTRACT_TERMINATED = "Contract_Terminated"
    CONTRACT_DELETED = "Contract_Deleted"
    JOB_POSITION_CHANGED = "JobPosition_Changed"
    CONTRACT_TYPE_CHANGED = "ContractType_Changed"

    # Salary
    SALARY_CREATED = "Salary_Created"
    SALARY_UPDATED = "Salary_Updated"
    SALARY_DELETED = "Salary_Deleted"
    SALARY_COMPONENT_ADDED = "SalaryComponent_Added"
    SALARY_COMPONENT_UPDATED = "SalaryComponent_Updated"
    SALARY_COMPONENT_DELETED = "SalaryComponent_Deleted"

    # Address
    ADDRESS_CREATED = "Address_Created"
    ADDRESS_UPDATED = "Address_Updated"

    # Social security identifiers
    CNSS_CHANGED = "CNSS_Changed"
    CIMR_CHANGED = "CIMR_Changed"

    # Lifecycle
    EMPLOYEE_CREATED = "Employee_Created"
    EMPLOYEE_DELETED = "Employee_Deleted"


class CompanyEventLog(Base):
    __tablename__ = "company_event_logs"

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False, index=True)
    event_name = Column(String(100), nullable=False, index=True)
    old_value = Column(Text, nullable=True)
    old_value_id = Column(Integer, nullable=True)
    new_value = Column(Text, nullable=True)
    new_value_id = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=now_utc, index=True)
    created_by = Column(Integer, nullable=False)


class EmployeeEventLog(Base):
    __tablename__ = "employee_event_logs"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    event_name = Column(String(100), nullable=False, index=True)
    old_value = Column(Text, nullable=True)
    old_value_id = Column(Integer, nullable=True)
    new_value = Column(Text, nullable=True)
    new_value_id = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=now_utc, index=True)
    created_by = Column(Integer, nullable=False)


class ImmutableEventLogError(RuntimeError):
    pass


def _refuse_mutation(mapper, connection, target):
    raise ImmutableEventLogError(
        f"{type(target).__name__} rows are append-only (id={target.id})"
    )


for _model in (CompanyEventLog, EmployeeEventLog):
    event.listen(_model, "before_update", _refuse_mutation)
    event.listen(_model, "before_delete", _refuse_mutation)
