import logging
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload
from models.tenant import Tenant
from schemas.tenant import TenantCreate
from crud import asset_type as crud_asset_type
from crud import chart_of_accounts as crud_chart_of_accounts

logger = logging.getLogger("tenants")


def get_tenants(db: Session) -> List[Tenant]:
    return db.query(Tenant).options(joinedload(Tenant.default_asset_type)).order_by(Tenant.name.asc()).all()


def get_tenant(db: Session, tenant_id: str) -> Optional[Tenant]:
    return db.query(Tenant).options(joinedload(Tenant.default_asset_type)).filter(Tenant.id == tenant_id).first()


def get_tenant_by_name(db: Session, name: str) -> Optional[Tenant]:
    return db.query(Tenant).filter(Tenant.name == name).first()


def create_tenant(db: Session, tenant: TenantCreate) -> Tenant:
    """
    Creates a tenant with the default asset type and the default chart of accounts.
    Everything is committed together.
    """
    if get_tenant_by_name(db, tenant.name):
        raise ValueError(f"Tenant '{tenant.name}' already exists")

    try:
        default_asset_type = crud_asset_type.get_or_create_default_asset_type(db)
        db_tenant = Tenant(name=tenant.name, default_asset_type_id=default_asset_type.id)
        db.add(db_tenant)
        db.flush()

        crud_chart_of_accounts.initialize_default_accounts(db, db_tenant.id, default_asset_type.id)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"Tenant {db_tenant.id} '{db_tenant.name}' created")
    return get_tenant(db, db_tenant.id)
