from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from database import get_db
from schemas.asset_type import AssetType
from schemas.lookups import Lookups
from models.chart_of_accounts import AccountType
from models.journal_entry import TransactionStatus
from crud import asset_type as asset_type_crud
from utils.auth_utils import get_current_db_user
from utils.export_utils import ExportFormat, ExportType

router = APIRouter(
    tags=["Lookups"],
    dependencies=[Depends(get_current_db_user)],
)


def _lookup_values(enum_cls):
    return [{"key": member.name, "name": member.value} for member in enum_cls]


@router.get("/lookups", response_model=Lookups)
def get_lookups(db: Session = Depends(get_db)):
    """Values the client needs to populate its pick lists."""
    return {
        "account_types": _lookup_values(AccountType),
        "asset_types": asset_type_crud.get_asset_types(db),
        "transaction_statuses": _lookup_values(TransactionStatus),
        "export_formats": _lookup_values(ExportFormat),
        "export_types": _lookup_values(ExportType),
    }


@router.get("/asset-types", response_model=List[AssetType])
def get_asset_types(db: Session = Depends(get_db)):
    return asset_type_crud.get_asset_types(db)
