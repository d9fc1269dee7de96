"""
Pytest configuration and fixtures
"""
import os

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-with-at-least-32-characters")

from datetime import date
from typing import Iterable

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.db.base import Base
from app.core.deps import get_db
from app.core.security import create_access_token, hash_password
from app.models import (
    City,
    Company,
    Country,
    Employee,
    ContractType,
    EmployeeContract,
    JobPosition,
    Permission,
    Role,
    RolePermission,
    User,
    UserRole,
)  # noqa: F401  (registers every model on Base.metadata)


# Use in-memory SQLite for testing
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


# Enable foreign keys for SQLite
@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db():
    """Create a fresh database for each test"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db):
    """Test client fixture with database override"""
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def create_user_with_permissions(
    db: Session,
    email: str,
    permissions: Iterable[str] = (),
    password: str = "Secret123!",
    role_name: str = None,
    is_active: bool = True,
) -> User:
    """Create a user holding one role that grants exactly `permissions`"""
    user = User(
        email=email,
        username=email.split("@", 1)[0],
        password_hash=hash_password(password),
        is_active=is_active,
    )
    db.add(user)
    db.flush()

    role = Role(name=role_name or f"ROLE_{user.id}", description="test role")
    db.add(role)
    db.flush()

    for name in permissions:
        permission = db.query(Permission).filter(Permission.name == name).first()
        if permission is None:
            permission = Permission(name=name, description=name)
            db.add(permission)
            db.flush()
        db.add(RolePermission(role_id=role.id, permission_id=permission.id))

    db.add(UserRole(user_id=user.id, role_id=role.id))
    db.commit()
    db.refresh(user)
    return user


def auth_headers(user: User) -> dict:
    """Bearer header for a user (permissions are resolved from the database)"""
    token = create_access_token(user_id=user.id, email=user.email)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_user(db: Session) -> User:
    """User holding every catalog permission, created by the startup bootstrap"""
    from app.db.init_db import bootstrap_initial_admin

    return bootstrap_initial_admin(db)


@pytest.fixture
def admin_headers(admin_user) -> dict:
    return auth_headers(admin_user)


@pytest.fixture
def country(db: Session) -> Country:
    morocco = Country(
        country_name="Morocco",
        country_name_ar="المغرب",
        country_code="MA",
        country_phone_code="+212",
        nationality="Moroccan",
    )
    db.add(morocco)
    db.commit()
    db.refresh(morocco)
    return morocco


@pytest.fixture
def city(db: Session, country) -> City:
    casablanca = City(city_name="Casablanca", country_id=country.id)
    db.add(casablanca)
    db.commit()
    db.refresh(casablanca)
    return casablanca


def make_company(db: Session, name: str, **overrides) -> Company:
    values = dict(
        company_name=name,
        company_address="1 Bd Zerktouni",
        ice_number="ICE001",
        cnss_number="CNSS001",
        if_number="IF001",
        rc_number="RC001",
        rib_number="RIB001",
        phone_number="+212500000000",
        email=f"{name.lower().replace(' ', '')}@example.ma",
        is_cabinet_expert=False,
    )
    values.update(overrides)
    company = Company(**values)
    db.add(company)
    db.commit()
    db.refresh(company)
    return company


def make_employee(db: Session, company: Company, first_name: str, last_name: str, **overrides) -> Employee:
    values = dict(
        first_name=first_name,
        last_name=last_name,
        cin_number=f"CIN-{first_name}-{last_name}",
        date_of_birth=date(1990, 1, 1),
        phone="+212600000000",
        email=f"{first_name.lower()}.{last_name.lower()}@example.ma",
        company_id=company.id,
    )
    values.update(overrides)
    employee = Employee(**values)
    db.add(employee)
    db.commit()
    db.refresh(employee)
    return employee


@pytest.fixture
def company(db: Session, city, country) -> Company:
    return make_company(db, "Atlas Conseil", city_id=city.id, country_id=country.id)


def make_contract(
    db: Session,
    employee: Employee,
    job_position: JobPosition,
    contract_type: ContractType,
    start_date: date = date(2024, 1, 1),
    **overrides,
) -> EmployeeContract:
    values = dict(
        employee_id=employee.id,
        company_id=employee.company_id,
        job_position_id=job_position.id,
        contract_type_id=contract_type.id,
        start_date=start_date,
    )
    values.update(overrides)
    contract = EmployeeContract(**values)
    db.add(contract)
    db.commit()
    db.refresh(contract)
    return contract


@pytest.fixture
def employee(db: Session, company) -> Employee:
    return make_employee(db, company, "Youssef", "Bennani")


@pytest.fixture
def job_position(db: Session, company) -> JobPosition:
    position = JobPosition(name="Comptable", company_id=company.id)
    db.add(position)
    db.commit()
    db.refresh(position)
    return position


@pytest.fixture
def contract_type(db: Session, company) -> ContractType:
    cdi = ContractType(contract_type_name="CDI", company_id=company.id)
    db.add(cdi)
    db.commit()
    db.refresh(cdi)
    return cdi
