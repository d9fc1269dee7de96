"""
Referential service - CRUD for lookup tables

Every lookup (marital statuses, nationalities, genders, education levels,
statuses, countries, cities, and the company-owned job positions and
contract types) follows the same rules, so one implementation
is driven by a `LookupConfig` per table:

- reads only see active (not soft-deleted) rows
- names are unique among active rows, case-insensitively, optionally within
  a scope (a city name is unique within its country)
- foreign keys must point at active rows
- a row cannot be deleted while active rows still reference it
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Type

from pydantic import BaseModel
from sqlalchemy import and_
from sqlalchemy.orm import Session

from app.core.errors import ConflictError, DependencyError, NotFoundError
from app.db.query import active, exists_active, get_active, name_taken, not_deleted, soft_delete
from app.models.company import Company
from app.models.contract import ContractType, EmployeeContract, JobPosition
from app.models.employee import Employee
from app.models.referential import (
    City,
    Country,
    EducationLevel,
    Gender,
    MaritalStatus,
    Nationality,
    Status,
)
from app.schemas.referential import CityOut

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LookupConfig:
    model: Type
    label: str
    # Columns unique among active rows; the first one orders listings
    unique_columns: Tuple[str, ...] = ("name",)
    # Columns that narrow the uniqueness check (same value = same scope)
    scope_columns: Tuple[str, ...] = ()
    # (column, referenced model, label) that must point at an active row
    references: Tuple[Tuple[str, Type, str], ...] = ()
    # (dependent model, foreign key column, label) that block a delete
    dependents: Tuple[Tuple[Type, str, str], ...] = ()


def _employee_lookup(model: Type, label: str, fk_column: str) -> LookupConfig:
    return LookupConfig(model=model, label=label, dependents=((Employee, fk_column, "employees"),))


MARITAL_STATUSES = _employee_lookup(MaritalStatus, "Marital status", "marital_status_id")
NATIONALITIES = _employee_lookup(Nationality, "Nationality", "nationality_id")
GENDERS = _employee_lookup(Gender, "Gender", "gender_id")
EDUCATION_LEVELS = _employee_lookup(EducationLevel, "Education level", "education_level_id")
STATUSES = _employee_lookup(Status, "Status", "status_id")

COUNTRIES = LookupConfig(
    model=Country,
    label="Country",
    unique_columns=("country_name", "country_code"),
    dependents=(
        (City, "country_id", "cities"),
        (Company, "country_id", "companies"),
    ),
)

CITIES = LookupConfig(
    model=City,
    label="City",
    unique_columns=("city_name",),
    scope_columns=("country_id",),
    references=(("country_id", Country, "Country"),),
    dependents=((Company, "city_id", "companies"),),
)

JOB_POSITIONS = LookupConfig(
    model=JobPosition,
    label="Job position",
    scope_columns=("company_id",),
    references=(("company_id", Company, "Company"),),
    dependents=((EmployeeContract, "job_position_id", "contracts"),),
)

CONTRACT_TYPES = LookupConfig(
    model=ContractType,
    label="Contract type",
    unique_columns=("contract_type_name",),
    scope_columns=("company_id",),
    references=(("company_id", Company, "Company"),),
    dependents=((EmployeeContract, "contract_type_id", "contracts"),),
)


def list_rows(db: Session, config: LookupConfig, **filters: Any) -> List[Any]:
    """Active rows matching `filters` (column=value), ordered by their display column"""
    order_column = getattr(config.model, config.unique_columns[0])
    return active(db, config.model).filter_by(**filters).order_by(order_column.asc()).all()


def get_row(db: Session, config: LookupConfig, row_id: int) -> Any:
    """
    Get one active row

    Raises:
        NotFoundError: If no active row has this id
    """
    row = get_active(db, config.model, row_id)
    if row is None:
        raise NotFoundError(f"{config.label} with id {row_id} not found")
    return row


def _check_references(db: Session, config: LookupConfig, values: Dict[str, Any]) -> None:
    for column, ref_model, ref_label in config.references:
        ref_id = values.get(column)
        if ref_id is not None and get_active(db, ref_model, ref_id) is None:
            raise NotFoundError(f"{ref_label} with id {ref_id} not found")


def _check_unique(
    db: Session,
    config: LookupConfig,
    values: Dict[str, Any],
    exclude_id: Optional[int] = None,
) -> None:
    model = config.model
    scope = [getattr(model, col) == values.get(col) for col in config.scope_columns]
    for column in config.unique_columns:
        value = values.get(column)
        if value is None:
            continue
        if name_taken(db, model, getattr(model, column), value, exclude_id=exclude_id, scope=scope):
            raise ConflictError(f"{config.label} '{value}' already exists")


def create_row(db: Session, config: LookupConfig, data: BaseModel, actor_id: int) -> Any:
    """
    Create a lookup row

    Raises:
        NotFoundError: If a referenced row is missing
        ConflictError: If a unique value is already used by an active row
    """
    values = data.model_dump()
    _check_references(db, config, values)
    _check_unique(db, config, values)

    row = config.model(**values, created_by=actor_id)
    db.add(row)
    db.commit()
    db.refresh(row)

    logger.info("%s %s created by user %s", config.label, row.id, actor_id)
    return row


def update_row(
    db: Session,
    config: LookupConfig,
    row_id: int,
    data: BaseModel,
    actor_id: int,
) -> Any:
    """
    Merge the non-null fields of `data` into an active row

    Uniqueness is checked against the merged values so that moving a city to
    another country is validated in the target country.
    """
    row = get_row(db, config, row_id)
    changes = data.model_dump(exclude_none=True)
    if not changes:
        return row

    merged = {col: getattr(row, col) for col in config.unique_columns + config.scope_columns}
    merged.update(changes)
    _check_references(db, config, changes)
    _check_unique(db, config, merged, exclude_id=row.id)

    for field, value in changes.items():
        setattr(row, field, value)
    row.touch(actor_id)
    db.commit()
    db.refresh(row)
    return row


def delete_row(db: Session, config: LookupConfig, row_id: int, actor_id: int) -> None:
    """
    Soft-delete a row

    Raises:
        NotFoundError: If no active row has this id
        DependencyError: If active rows still reference it
    """
    row = get_row(db, config, row_id)

    for dep_model, fk_column, dep_label in config.dependents:
        if exists_active(db, dep_model, getattr(dep_model, fk_column) == row.id):
            raise DependencyError(
                f"{config.label} {row_id} cannot be deleted: it is still used by active {dep_label}"
            )

    soft_delete(row, actor_id)
    db.commit()
    logger.info("%s %s deleted by user %s", config.label, row_id, actor_id)


def city_out(db: Session, city: City) -> CityOut:
    """City with its country name resolved"""
    country = get_active(db, Country, city.country_id)
    return CityOut(
        id=city.id,
        city_name=city.city_name,
        country_id=city.country_id,
        country_name=country.country_name if country else None,
        created_at=city.created_at,
    )


def list_cities(db: Session, country_id: Optional[int] = None) -> List[CityOut]:
    """Active cities with country names, optionally for one country"""
    query = (
        db.query(City, Country.country_name)
        .outerjoin(Country, and_(Country.id == City.country_id, *not_deleted(Country)))
        .filter(*not_deleted(City))
    )
    if country_id is not None:
        query = query.filter(City.country_id == country_id)

    return [
        CityOut(
            id=city.id,
            city_name=city.city_name,
            country_id=city.country_id,
            country_name=country_name,
            created_at=city.created_at,
        )
        for city, country_name in query.order_by(City.city_name.asc()).all()
    ]
