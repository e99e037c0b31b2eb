from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from models.chart_of_accounts import AccountType, BalanceType
from .asset_type import AssetType


class AccountBase(BaseModel):
    account_number: int = Field(..., ge=1)
    name: str = Field(..., min_length=1, max_length=100)
    account_type: AccountType
    description: Optional[str] = None
    asset_type_id: Optional[int] = None
    is_active: bool = True


class AccountCreate(AccountBase):
    pass


class AccountUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    account_type: Optional[AccountType] = None
    description: Optional[str] = None
    asset_type_id: Optional[int] = None
    is_active: Optional[bool] = None


class AccountSummary(BaseModel):
    id: int
    account_number: int
    name: str
    account_type: AccountType

    class Config:
        from_attributes = True


class Account(AccountBase):
    id: int
    tenant_id: str
    normal_balance: BalanceType
    asset_type: Optional[AssetType] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
