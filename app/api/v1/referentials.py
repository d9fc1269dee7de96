"""
Simple lookup endpoints

Marital statuses, nationalities, genders, education levels and statuses
share one router shape; `build_lookup_router` produces one router per table,
guarded by that table's READ/CREATE/EDIT/DELETE permissions.
"""
from typing import List
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from app.constants import lookup_permissions
from app.core.deps import Principal, get_db
from app.core.permissions import require_permissions
from app.schemas.referential import NamedCreate, NamedOut, NamedUpdate
from app.services import referential_service
from app.services.referential_service import LookupConfig


def build_lookup_router(config: LookupConfig, resource: str) -> APIRouter:
    """CRUD router for a name-only lookup table"""
    names = lookup_permissions(resource)
    router = APIRouter()

    @router.get("", response_model=List[NamedOut])
    async def list_lookup_endpoint(
        db: Session = Depends(get_db),
        principal: Principal = Depends(require_permissions(names["read"]))
    ):
        return referential_service.list_rows(db, config)

    @router.get("/{row_id}", response_model=NamedOut)
    async def get_lookup_endpoint(
        row_id: int,
        db: Session = Depends(get_db),
        principal: Principal = Depends(require_permissions(names["read"]))
    ):
        return referential_service.get_row(db, config, row_id)

    @router.post("", response_model=NamedOut, status_code=201)
    async def create_lookup_endpoint(
        data: NamedCreate,
        db: Session = Depends(get_db),
        principal: Principal = Depends(require_permissions(names["create"]))
    ):
        return referential_service.create_row(db, config, data, principal.user_id)

    @router.put("/{row_id}", response_model=NamedOut)
    async def update_lookup_endpoint(
        row_id: int,
        data: NamedUpdate,
        db: Session = Depends(get_db),
        principal: Principal = Depends(require_permissions(names["edit"]))
    ):
        return referential_service.update_row(db, config, row_id, data, principal.user_id)

    @router.delete("/{row_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_lookup_endpoint(
        row_id: int,
        db: Session = Depends(get_db),
        principal: Principal = Depends(require_permissions(names["delete"]))
    ):
        referential_service.delete_row(db, config, row_id, principal.user_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return router


marital_statuses_router = build_lookup_router(referential_service.MARITAL_STATUSES, "MARITAL_STATUSES")
nationalities_router = build_lookup_router(referential_service.NATIONALITIES, "NATIONALITIES")
genders_router = build_lookup_router(referential_service.GENDERS, "GENDERS")
education_levels_router = build_lookup_router(referential_service.EDUCATION_LEVELS, "EDUCATION_LEVELS")
statuses_router = build_lookup_router(referential_service.STATUSES, "STATUSES")
