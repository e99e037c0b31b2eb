from pydantic import BaseModel
from typing import List

from .asset_type import AssetType


class LookupValue(BaseModel):
    key: str
    name: str


class Lookups(BaseModel):
    account_types: List[LookupValue]
    asset_types: List[AssetType]
    transaction_statuses: List[LookupValue]
    export_formats: List[LookupValue]
    export_types: List[LookupValue]
