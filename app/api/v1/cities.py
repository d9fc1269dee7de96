"""
City endpoints
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
from app.constants import CREATE_CITY, DELETE_CITY, EDIT_CITY, READ_CITIES, VIEW_CITY
from app.core.deps import Principal, get_db
from app.core.permissions import require_permissions
from app.schemas.referential import CityCreate, CityOut, CityUpdate
from app.services.referential_service import (
    CITIES,
    COUNTRIES,
    city_out,
    create_row,
    delete_row,
    get_row,
    list_cities,
    update_row,
)

router = APIRouter()


@router.get("", response_model=List[CityOut])
async def list_cities_endpoint(
    country_id: Optional[int] = Query(None, description="Only cities of this country"),
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(READ_CITIES))
):
    return list_cities(db, country_id=country_id)


@router.get("/country/{country_id}", response_model=List[CityOut])
async def list_country_cities_endpoint(
    country_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(READ_CITIES))
):
    """Cities of one country (404 when the country does not exist)"""
    get_row(db, COUNTRIES, country_id)
    return list_cities(db, country_id=country_id)


@router.get("/{city_id}", response_model=CityOut)
async def get_city_endpoint(
    city_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(VIEW_CITY))
):
    return city_out(db, get_row(db, CITIES, city_id))


@router.post("", response_model=CityOut, status_code=201)
async def create_city_endpoint(
    data: CityCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(CREATE_CITY))
):
    """Create a city; the name is unique within its country"""
    return city_out(db, create_row(db, CITIES, data, principal.user_id))


@router.put("/{city_id}", response_model=CityOut)
async def update_city_endpoint(
    city_id: int,
    data: CityUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(EDIT_CITY))
):
    return city_out(db, update_row(db, CITIES, city_id, data, principal.user_id))


@router.delete("/{city_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_city_endpoint(
    city_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permissions(DELETE_CITY))
):
    """Soft-delete a city; refused while active companies use it"""
    delete_row(db, CITIES, city_id, principal.user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
