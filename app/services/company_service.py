"""
Company service - business logic for client companies

Every mutation and its event log rows are written in one transaction.
"""
import logging
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.errors import ConflictError, DependencyError, NotFoundError, ValidationError
from app.db.query import active, exists_active, get_active, name_taken, not_deleted, soft_delete
from app.db.session import transaction
from app.models.company import Company
from app.models.contract import ContractType, JobPosition
from app.models.employee import Employee
from app.models.event_log import CompanyEventLog, CompanyEventName
from app.models.referential import City, Country
from app.schemas.company import CompanyCreate, CompanyOut, CompanyUpdate
from app.schemas.event_log import EventHistoryItem
from app.services.event_feed_service import entity_history
from app.services.event_log_service import company_events

logger = logging.getLogger(__name__)

# Scalar column -> event logged when it changes
SCALAR_EVENTS = {
    "company_name": CompanyEventName.COMPANY_NAME_CHANGED,
    "company_address": CompanyEventName.ADDRESS_CHANGED,
    "email": CompanyEventName.EMAIL_CHANGED,
    "phone_number": CompanyEventName.PHONE_CHANGED,
    "ice_number": CompanyEventName.ICE_CHANGED,
    "cnss_number": CompanyEventName.CNSS_CHANGED,
    "if_number": CompanyEventName.IF_CHANGED,
    "rc_number": CompanyEventName.RC_CHANGED,
    "rib_number": CompanyEventName.RIB_CHANGED,
    "is_cabinet_expert": CompanyEventName.IS_CABINET_EXPERT_CHANGED,
}


def _city_name(db: Session, city_id: Optional[int]) -> Optional[str]:
    if city_id is None:
        return None
    city = db.query(City).filter(City.id == city_id).first()
    return city.city_name if city else None


def _country_name(db: Session, country_id: Optional[int]) -> Optional[str]:
    if country_id is None:
        return None
    country = db.query(Country).filter(Country.id == country_id).first()
    return country.country_name if country else None


def _employee_count(db: Session, company_id: int) -> int:
    return active(db, Employee).filter(Employee.company_id == company_id).count()


def to_company_out(db: Session, company: Company) -> CompanyOut:
    return CompanyOut(
        id=company.id,
        company_name=company.company_name,
        company_address=company.company_address,
        city_id=company.city_id,
        city_name=_city_name(db, company.city_id),
        country_id=company.country_id,
        country_name=_country_name(db, company.country_id),
        ice_number=company.ice_number,
        cnss_number=company.cnss_number,
        if_number=company.if_number,
        rc_number=company.rc_number,
        rib_number=company.rib_number,
        phone_number=company.phone_number,
        email=company.email,
        is_cabinet_expert=company.is_cabinet_expert,
        employee_count=_employee_count(db, company.id),
        created_at=company.created_at,
    )


def list_companies(db: Session) -> List[CompanyOut]:
    """Active companies with city/country names and head count"""
    employee_counts = dict(
        db.query(Employee.company_id, func.count(Employee.id))
        .filter(*not_deleted(Employee))
        .group_by(Employee.company_id)
        .all()
    )
    rows = (
        db.query(Company, City.city_name, Country.country_name)
        .outerjoin(City, City.id == Company.city_id)
        .outerjoin(Country, Country.id == Company.country_id)
        .filter(*not_deleted(Company))
        .order_by(Company.company_name.asc())
        .all()
    )
    return [
        CompanyOut(
            id=company.id,
            company_name=company.company_name,
            company_address=company.company_address,
            city_id=company.city_id,
            city_name=city_name,
            country_id=company.country_id,
            country_name=country_name,
            ice_number=company.ice_number,
            cnss_number=company.cnss_number,
            if_number=company.if_number,
            rc_number=company.rc_number,
            rib_number=company.rib_number,
            phone_number=company.phone_number,
            email=company.email,
            is_cabinet_expert=company.is_cabinet_expert,
            employee_count=employee_counts.get(company.id, 0),
            created_at=company.created_at,
        )
        for company, city_name, country_name in rows
    ]


def get_company(db: Session, company_id: int) -> Company:
    """
    Raises:
        NotFoundError: If no active company has this id
    """
    company = get_active(db, Company, company_id)
    if not company:
        raise NotFoundError(f"Company with id {company_id} not found")
    return company


def _check_location(db: Session, city_id: Optional[int], country_id: Optional[int]) -> None:
    if country_id is not None and get_active(db, Country, country_id) is None:
        raise NotFoundError(f"Country with id {country_id} not found")
    if city_id is not None:
        city = get_active(db, City, city_id)
        if city is None:
            raise NotFoundError(f"City with id {city_id} not found")
        if country_id is not None and city.country_id != country_id:
            raise ValidationError(f"City {city_id} does not belong to country {country_id}")


def _check_unique(db: Session, name: Optional[str], email: Optional[str], exclude_id: Optional[int] = None) -> None:
    if name is not None and name_taken(db, Company, Company.company_name, name, exclude_id=exclude_id):
        raise ConflictError(f"Company '{name}' already exists")
    if email is not None and name_taken(db, Company, Company.email, email, exclude_id=exclude_id):
        raise ConflictError(f"A company with email '{email}' already exists")


def create_company(db: Session, company_data: CompanyCreate, actor_id: int) -> Company:
    """
    Create a company and log Company_Created

    Raises:
        ConflictError: If name or email is already used by an active company
        NotFoundError: If the city or country does not exist
        ValidationError: If the city is not in the given country
    """
    _check_unique(db, company_data.company_name, company_data.email)
    _check_location(db, company_data.city_id, company_data.country_id)

    company = Company(**company_data.model_dump(), created_by=actor_id)
    with transaction(db):
        db.add(company)
        db.flush()
        company_events.log_simple_event(
            db, company.id, CompanyEventName.COMPANY_CREATED,
            None, company.company_name, actor_id=actor_id,
        )
    db.refresh(company)

    logger.info("Company %s created by user %s", company.id, actor_id)
    return company


def update_company(db: Session, company_id: int, company_data: CompanyUpdate, actor_id: int) -> Company:
    """
    Merge the non-null fields into a company, logging one event per changed field

    City and country changes are logged as relation events (id and name on
    both sides); other fields as simple events.
    """
    company = get_company(db, company_id)
    changes = {
        field: value
        for field, value in company_data.model_dump(exclude_none=True).items()
        if getattr(company, field) != value
    }
    if not changes:
        return company

    _check_unique(db, changes.get("company_name"), changes.get("email"), exclude_id=company.id)
    if "city_id" in changes or "country_id" in changes:
        _check_location(
            db,
            changes.get("city_id", company.city_id),
            changes.get("country_id", company.country_id),
        )

    with transaction(db):
        for field, event_name in SCALAR_EVENTS.items():
            if field in changes:
                company_events.log_simple_event(
                    db, company.id, event_name,
                    getattr(company, field), changes[field], actor_id=actor_id,
                )

        if "city_id" in changes:
            company_events.log_relation_event(
                db, company.id, CompanyEventName.CITY_CHANGED,
                company.city_id, _city_name(db, company.city_id),
                changes["city_id"], _city_name(db, changes["city_id"]),
                actor_id=actor_id,
            )
        if "country_id" in changes:
            company_events.log_relation_event(
                db, company.id, CompanyEventName.COUNTRY_CHANGED,
                company.country_id, _country_name(db, company.country_id),
                changes["country_id"], _country_name(db, changes["country_id"]),
                actor_id=actor_id,
            )

        for field, value in changes.items():
            setattr(company, field, value)
        company.touch(actor_id)

    db.refresh(company)
    return company


def delete_company(db: Session, company_id: int, actor_id: int) -> None:
    """
    Soft-delete a company and log Company_Deleted

    Raises:
        DependencyError: If the company still has active employees, job
            positions or contract types
    """
    company = get_company(db, company_id)

    if exists_active(db, Employee, Employee.company_id == company.id):
        raise DependencyError(
            f"Company '{company.company_name}' still has active employees"
        )
    for model, label in ((JobPosition, "job positions"), (ContractType, "contract types")):
        if exists_active(db, model, model.company_id == company.id):
            raise DependencyError(
                f"Company '{company.company_name}' still has active {label}"
            )

    with transaction(db):
        soft_delete(company, actor_id)
        company_events.log_simple_event(
            db, company.id, CompanyEventName.COMPANY_DELETED,
            company.company_name, None, actor_id=actor_id,
        )

    logger.info("Company %s deleted by user %s", company_id, actor_id)


def company_history(db: Session, company_id: int) -> List[EventHistoryItem]:
    """Events of a company, newest first"""
    get_company(db, company_id)
    return entity_history(db, CompanyEventLog, "company_id", company_id)
