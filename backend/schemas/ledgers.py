from pydantic import BaseModel
from datetime import date
from decimal import Decimal
from typing import List

from models.chart_of_accounts import AccountType, BalanceType


class GeneralLedgerEntry(BaseModel):
    date: date
    entry_id: int
    description: str
    asset_type: str
    debit: Decimal = Decimal(0)
    credit: Decimal = Decimal(0)
    balance: Decimal


class GeneralLedgerAccount(BaseModel):
    account_id: int
    account_number: int
    name: str
    account_type: AccountType
    normal_balance: BalanceType
    opening_balance: Decimal
    entries: List[GeneralLedgerEntry]
    closing_balance: Decimal


class GeneralLedger(BaseModel):
    title: str
    start_date: date
    end_date: date
    accounts: List[GeneralLedgerAccount]
