from pydantic import BaseModel
from typing import List
from datetime import date
from decimal import Decimal

from models.chart_of_accounts import AccountType, BalanceType


class AccountBalance(BaseModel):
    account_id: int
    account_number: int
    name: str
    account_type: AccountType
    normal_balance: BalanceType
    total_debits: Decimal
    total_credits: Decimal
    # Signed in the account's normal direction
    balance: Decimal


class ProfitAndLoss(BaseModel):
    start_date: date
    end_date: date
    revenue: List[AccountBalance]
    total_revenue: Decimal
    expenses: List[AccountBalance]
    total_expenses: Decimal
    net_income: Decimal


class BalanceSheet(BaseModel):
    start_date: date
    end_date: date
    assets: List[AccountBalance]
    total_assets: Decimal
    liabilities: List[AccountBalance]
    total_liabilities: Decimal
    equity: List[AccountBalance]
    retained_earnings: Decimal
    net_income: Decimal
    total_equity: Decimal
    total_liabilities_and_equity: Decimal
