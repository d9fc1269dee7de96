"""
Country endpoints
"""
from typing import List
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from app.constants import CREATE_COUNTRY, DELETE_COUNTRY, EDIT_COUNTRY, READ_COUNTRIES, VIEW_COUNTRY
from app.core.deps import Principal, get_db
from app.core.permissions import require_permissions
from app.schemas.referential import CountryCreate, CountryOut, CountryUpdate
from app.services.referential_service import (
    COUNTRIES,
    create_row,
    delete_row,
    get_row,
    list_rows,
    update_row,
)

router = APIRouter()


@router.get("", response_model=List[CountryOut])
async def list_countries_endpoint(
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(READ_COUNTRIES))
):
    return list_rows(db, COUNTRIES)


@router.get("/{country_id}", response_model=CountryOut)
async def get_country_endpoint(
    country_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(VIEW_COUNTRY))
):
    return get_row(db, COUNTRIES, country_id)


@router.post("", response_model=CountryOut, status_code=201)
async def create_country_endpoint(
    data: CountryCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(CREATE_COUNTRY))
):
    """Create a country; name and ISO code are unique among active countries"""
    return create_row(db, COUNTRIES, data, principal.user_id)


@router.put("/{country_id}", response_model=CountryOut)
async def update_country_endpoint(
    country_id: int,
    data: CountryUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(EDIT_COUNTRY))
):
    return update_row(db, COUNTRIES, country_id, data, principal.user_id)


@router.delete("/{country_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_country_endpoint(
    country_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(DELETE_COUNTRY))
):
    """Soft-delete a country; refused while active cities or companies use it"""
    delete_row(db, COUNTRIES, country_id, principal.user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
