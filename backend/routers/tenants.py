from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
from database import get_db
from schemas.tenant import Tenant, TenantCreate
from crud import tenant as tenant_crud
from utils.auth_utils import get_current_db_user

router = APIRouter(
    prefix="/tenants",
    tags=["Tenants"],
    dependencies=[Depends(get_current_db_user)],
)


@router.post("/", response_model=Tenant, status_code=status.HTTP_201_CREATED)
def create_tenant(tenant: TenantCreate, db: Session = Depends(get_db)):
    """Creates a tenant together with its default chart of accounts."""
    try:
        return tenant_crud.create_tenant(db, tenant)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("/", response_model=List[Tenant])
def get_tenants(db: Session = Depends(get_db)):
    return tenant_crud.get_tenants(db)


@router.get("/{tenant_id}", response_model=Tenant)
def get_tenant(tenant_id: str, db: Session = Depends(get_db)):
    tenant = tenant_crud.get_tenant(db, tenant_id)
    if tenant is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tenant not found")
    return tenant
