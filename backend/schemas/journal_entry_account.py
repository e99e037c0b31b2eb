from pydantic import BaseModel, Field, model_validator
from decimal import Decimal
from typing import Optional

from .asset_type import AssetType
from .chart_of_accounts import AccountSummary


class JournalEntryAccountBase(BaseModel):
    account_id: int
    debit: Decimal = Field(Decimal("0"), ge=0, decimal_places=4)
    credit: Decimal = Field(Decimal("0"), ge=0, decimal_places=4)


class JournalEntryAccountCreate(JournalEntryAccountBase):
    # Falls back to the account's (then the tenant's) asset type when omitted
    asset_type_id: Optional[int] = None

    @model_validator(mode='after')
    def check_debit_or_credit(self):
        if self.debit > 0 and self.credit > 0:
            raise ValueError('A line may carry a debit or a credit, not both.')
        if self.debit == 0 and self.credit == 0:
            raise ValueError('A line must carry a non-zero debit or credit.')
        return self


class JournalEntryAccount(JournalEntryAccountBase):
    id: int
    asset_type_id: int
    account: AccountSummary
    asset_type: AssetType
    amount: Decimal

    class Config:
        from_attributes = True
