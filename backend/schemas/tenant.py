from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from .asset_type import AssetType


class TenantCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)


class Tenant(BaseModel):
    id: str
    name: str
    default_asset_type: Optional[AssetType] = None
    created_at: datetime

    class Config:
        from_attributes = True
