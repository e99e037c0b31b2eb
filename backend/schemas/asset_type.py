from pydantic import BaseModel
from typing import Optional


class AssetType(BaseModel):
    id: int
    name: str
    description_short: Optional[str] = None
    description_long: Optional[str] = None
    symbol: Optional[str] = None

    class Config:
        from_attributes = True
