from typing import List, Optional

from sqlalchemy.orm import Session
from models.asset_type import AssetType

DEFAULT_ASSET_TYPE = {
    "name": "USD",
    "description_short": "US Dollar",
    "description_long": "United States Dollar",
    "symbol": "$",
}


def get_asset_types(db: Session) -> List[AssetType]:
    return db.query(AssetType).order_by(AssetType.id.asc()).all()


def get_asset_type(db: Session, asset_type_id: int) -> Optional[AssetType]:
    return db.query(AssetType).filter(AssetType.id == asset_type_id).first()


def get_or_create_default_asset_type(db: Session) -> AssetType:
    """Returns the default (USD) asset type, adding it to the session if missing. Does not commit."""
    asset_type = db.query(AssetType).filter(AssetType.name == DEFAULT_ASSET_TYPE["name"]).first()
    if asset_type is None:
        asset_type = AssetType(**DEFAULT_ASSET_TYPE)
        db.add(asset_type)
        db.flush()
    return asset_type
