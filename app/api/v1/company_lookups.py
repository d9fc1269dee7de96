"""
Company-owned lookup endpoints

Job positions and contract types belong to one company: names are unique
within it and `/by-company/{company_id}` lists a company's rows.
"""
from typing import List, Type
from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel
from sqlalchemy.orm import Session
from app.constants import lookup_permissions
from app.core.deps import Principal, get_db
from app.core.permissions import require_permissions
from app.schemas.contract import (
    ContractTypeCreate,
    ContractTypeOut,
    ContractTypeUpdate,
    JobPositionCreate,
    JobPositionOut,
    JobPositionUpdate,
)
from app.services import referential_service
from app.services.company_service import get_company
from app.services.referential_service import LookupConfig


def build_company_lookup_router(
    config: LookupConfig,
    resource: str,
    create_schema: Type[BaseModel],
    update_schema: Type[BaseModel],
    out_schema: Type[BaseModel],
) -> APIRouter:
    names = lookup_permissions(resource)
    router = APIRouter()

    @router.get("", response_model=List[out_schema])
    async def list_company_lookup_endpoint(
        db: Session = Depends(get_db),
        principal: Principal = Depends(require_permissions(names["read"]))
    ):
        return referential_service.list_rows(db, config)

    @router.get("/by-company/{company_id}", response_model=List[out_schema])
    async def list_by_company_endpoint(
        company_id: int,
        db: Session = Depends(get_db),
        principal: Principal = Depends(require_permissions(names["read"]))
    ):
        """Rows of one company (404 when the company does not exist)"""
        get_company(db, company_id)
        return referential_service.list_rows(db, config, company_id=company_id)

    @router.get("/{row_id}", response_model=out_schema)
    async def get_company_lookup_endpoint(
        row_id: int,
        db: Session = Depends(get_db),
        principal: Principal = Depends(require_permissions(names["read"]))
    ):
        return referential_service.get_row(db, config, row_id)

    @router.post("", response_model=out_schema, status_code=201)
    async def create_company_lookup_endpoint(
        data: create_schema,
        db: Session = Depends(get_db),
        principal: Principal = Depends(require_permissions(names["create"]))
    ):
        return referential_service.create_row(db, config, data, principal.user_id)

    @router.put("/{row_id}", response_model=out_schema)
    async def update_company_lookup_endpoint(
        row_id: int,
        data: update_schema,
        db: Session = Depends(get_db),
        principal: Principal = Depends(require_permissions(names["edit"]))
    ):
        return referential_service.update_row(db, config, row_id, data, principal.user_id)

    @router.delete("/{row_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_company_lookup_endpoint(
        row_id: int,
        db: Session = Depends(get_db),
        principal: Principal = Depends(require_permissions(names["delete"]))
    ):
        """Soft-delete a row; refused while active contracts use it"""
        referential_service.delete_row(db, config, row_id, principal.user_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return router


job_positions_router = build_company_lookup_router(
    referential_service.JOB_POSITIONS, "JOB_POSITIONS",
    JobPositionCreate, JobPositionUpdate, JobPositionOut,
)
contract_types_router = build_company_lookup_router(
    referential_service.CONTRACT_TYPES, "CONTRACT_TYPES",
    ContractTypeCreate, ContractTypeUpdate, ContractTypeOut,
)
