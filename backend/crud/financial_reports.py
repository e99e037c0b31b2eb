from collections import defaultdict
from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from models.chart_of_accounts import Account, AccountType, BalanceType
from models.journal_entry import JournalEntry, TransactionStatus
from models.journal_entry_account import JournalEntryAccount
from schemas.financial_reports import AccountBalance, ProfitAndLoss, BalanceSheet
from schemas.ledgers import GeneralLedger, GeneralLedgerAccount, GeneralLedgerEntry
from crud.journal_entry import effective_date

ZERO = Decimal(0)


def _signed_balance(account: Account, debits: Decimal, credits: Decimal) -> Decimal:
    if account.normal_balance == BalanceType.DEBIT:
        return debits - credits
    return credits - debits


def _posted_totals(
    db: Session,
    tenant_id: str,
    end_date: date,
    start_date: Optional[date] = None
) -> Dict[int, Tuple[Decimal, Decimal]]:
    """Sum of posted debits and credits per account, keyed by account id."""
    query = db.query(
        JournalEntryAccount.account_id,
        func.coalesce(func.sum(JournalEntryAccount.debit), 0),
        func.coalesce(func.sum(JournalEntryAccount.credit), 0),
    ).join(JournalEntry, JournalEntryAccount.journal_entry_id == JournalEntry.id).filter(
        JournalEntry.tenant_id == tenant_id,
        JournalEntry.status == TransactionStatus.POSTED,
        effective_date <= end_date
    )

    if start_date:
        query = query.filter(effective_date >= start_date)

    rows = query.group_by(JournalEntryAccount.account_id).all()
    return {account_id: (Decimal(debits), Decimal(credits)) for account_id, debits, credits in rows}


def get_account_balances(
    db: Session,
    tenant_id: str,
    end_date: date,
    start_date: Optional[date] = None,
    account_types: Optional[List[AccountType]] = None
) -> List[AccountBalance]:
    """
    Balances of the tenant's accounts from posted journal entries.

    Without a `start_date` the balance is cumulative up to `end_date`;
    with one it only covers activity inside the range.
    """
    totals = _posted_totals(db, tenant_id, end_date, start_date)

    query = db.query(Account).filter(Account.tenant_id == tenant_id)
    if account_types:
        query = query.filter(Account.account_type.in_(account_types))

    balances = []
    for account in query.order_by(Account.account_number.asc()).all():
        debits, credits = totals.get(account.id, (ZERO, ZERO))
        # Inactive accounts without activity are left out of reports
        if not account.is_active and debits == ZERO and credits == ZERO:
            continue
        balances.append(AccountBalance(
            account_id=account.id,
            account_number=account.account_number,
            name=account.name,
            account_type=account.account_type,
            normal_balance=account.normal_balance,
            total_debits=debits,
            total_credits=credits,
            balance=_signed_balance(account, debits, credits),
        ))
    return balances


def _net_income(balances: List[AccountBalance]) -> Decimal:
    revenue = sum((b.balance for b in balances if b.account_type == AccountType.REVENUE), ZERO)
    expenses = sum((b.balance for b in balances if b.account_type == AccountType.EXPENSE), ZERO)
    return revenue - expenses


def get_profit_and_loss(db: Session, tenant_id: str, start_date: date, end_date: date) -> ProfitAndLoss:
    balances = get_account_balances(
        db, tenant_id, end_date, start_date,
        account_types=[AccountType.REVENUE, AccountType.EXPENSE]
    )

    revenue = [b for b in balances if b.account_type == AccountType.REVENUE]
    expenses = [b for b in balances if b.account_type == AccountType.EXPENSE]
    total_revenue = sum((b.balance for b in revenue), ZERO)
    total_expenses = sum((b.balance for b in expenses), ZERO)

    return ProfitAndLoss(
        start_date=start_date,
        end_date=end_date,
        revenue=revenue,
        total_revenue=total_revenue,
        expenses=expenses,
        total_expenses=total_expenses,
        net_income=total_revenue - total_expenses
    )


def get_balance_sheet(db: Session, tenant_id: str, start_date: date, end_date: date) -> BalanceSheet:
    # 1. Permanent accounts carry their full history up to the end date
    balances = get_account_balances(db, tenant_id, end_date)
    assets = [b for b in balances if b.account_type == AccountType.ASSET]
    liabilities = [b for b in balances if b.account_type == AccountType.LIABILITY]
    equity = [b for b in balances if b.account_type == AccountType.EQUITY]

    # 2. Income before the period rolls into retained earnings
    prior_balances = get_account_balances(
        db, tenant_id, start_date - timedelta(days=1),
        account_types=[AccountType.REVENUE, AccountType.EXPENSE]
    )
    retained_earnings = _net_income(prior_balances)

    # 3. Income within the period
    period_balances = get_account_balances(
        db, tenant_id, end_date, start_date,
        account_types=[AccountType.REVENUE, AccountType.EXPENSE]
    )
    net_income = _net_income(period_balances)

    total_assets = sum((b.balance for b in assets), ZERO)
    total_liabilities = sum((b.balance for b in liabilities), ZERO)
    total_equity = sum((b.balance for b in equity), ZERO) + retained_earnings + net_income

    return BalanceSheet(
        start_date=start_date,
        end_date=end_date,
        assets=assets,
        total_assets=total_assets,
        liabilities=liabilities,
        total_liabilities=total_liabilities,
        equity=equity,
        retained_earnings=retained_earnings,
        net_income=net_income,
        total_equity=total_equity,
        total_liabilities_and_equity=total_liabilities + total_equity
    )


def get_general_ledger(db: Session, tenant_id: str, start_date: date, end_date: date) -> GeneralLedger:
    # Opening balances are everything posted before the start date
    opening_totals = _posted_totals(db, tenant_id, start_date - timedelta(days=1))

    lines = db.query(JournalEntryAccount).join(
        JournalEntry, JournalEntryAccount.journal_entry_id == JournalEntry.id
    ).options(
        joinedload(JournalEntryAccount.journal_entry),
        joinedload(JournalEntryAccount.asset_type),
    ).filter(
        JournalEntry.tenant_id == tenant_id,
        JournalEntry.status == TransactionStatus.POSTED,
        effective_date >= start_date,
        effective_date <= end_date
    ).order_by(effective_date.asc(), JournalEntry.entry_id.asc(), JournalEntryAccount.id.asc()).all()

    lines_by_account = defaultdict(list)
    for line in lines:
        lines_by_account[line.account_id].append(line)

    accounts = db.query(Account).filter(Account.tenant_id == tenant_id).order_by(Account.account_number.asc()).all()

    ledger_accounts = []
    for account in accounts:
        debits, credits = opening_totals.get(account.id, (ZERO, ZERO))
        opening_balance = _signed_balance(account, debits, credits)
        account_lines = lines_by_account.get(account.id, [])

        if not account_lines and opening_balance == ZERO:
            continue

        balance = opening_balance
        entries = []
        for line in account_lines:
            debit = Decimal(line.debit or 0)
            credit = Decimal(line.credit or 0)
            balance += _signed_balance(account, debit, credit)
            entries.append(GeneralLedgerEntry(
                date=line.journal_entry.effective_date,
                entry_id=line.journal_entry.entry_id,
                description=line.journal_entry.description,
                asset_type=line.asset_type.name,
                debit=debit,
                credit=credit,
                balance=balance
            ))

        ledger_accounts.append(GeneralLedgerAccount(
            account_id=account.id,
            account_number=account.account_number,
            name=account.name,
            account_type=account.account_type,
            normal_balance=account.normal_balance,
            opening_balance=opening_balance,
            entries=entries,
            closing_balance=balance
        ))

    return GeneralLedger(
        title="General Ledger",
        start_date=start_date,
        end_date=end_date,
        accounts=ledger_accounts
    )
