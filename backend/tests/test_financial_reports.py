from datetime import date
from decimal import Decimal

import pytest

from crud import financial_reports as crud_financial_reports
from crud import journal_entry as journal_entry_crud

CASH = 1010
ACCOUNTS_RECEIVABLE = 1100
INVENTORY = 1200
OWNERS_EQUITY = 3000
CONSULTING_REVENUE = 4010
SALES_REVENUE = 4100
OPERATING_EXPENSES = 6000


@pytest.fixture
def books(db, user, accounts, make_entry):
    """
    January: owner invests 1000, 300 of sales on account.
    February: 500 consulting revenue, 200 of expenses, and a pending entry
    that must not show up anywhere.
    """
    def record(entry_date, debit_account, credit_account, amount, post=True):
        entry = journal_entry_crud.create_journal_entry(db, make_entry(
            [(accounts[debit_account], amount, "0"), (accounts[credit_account], "0", amount)],
            entry_date=entry_date
        ))
        if post:
            journal_entry_crud.post_journal_entry(db, entry.id, entry_date, user.id)
        return entry

    record(date(2026, 1, 10), CASH, OWNERS_EQUITY, "1000.00")
    record(date(2026, 1, 20), ACCOUNTS_RECEIVABLE, SALES_REVENUE, "300.00")
    record(date(2026, 2, 5), CASH, CONSULTING_REVENUE, "500.00")
    record(date(2026, 2, 15), OPERATING_EXPENSES, CASH, "200.00")
    record(date(2026, 2, 20), CASH, CONSULTING_REVENUE, "999.00", post=False)
    return accounts


def _by_number(balances):
    return {b.account_number: b.balance for b in balances}


def test_account_balances_are_cumulative_and_signed(db, tenant, books):
    balances = _by_number(crud_financial_reports.get_account_balances(db, tenant.id, date(2026, 2, 28)))

    assert balances[CASH] == Decimal("1300")
    assert balances[OWNERS_EQUITY] == Decimal("1000")
    assert balances[CONSULTING_REVENUE] == Decimal("500")
    assert balances[OPERATING_EXPENSES] == Decimal("200")
    assert balances[INVENTORY] == Decimal("0")


def test_account_balances_within_range(db, tenant, books):
    balances = _by_number(crud_financial_reports.get_account_balances(
        db, tenant.id, date(2026, 2, 28), start_date=date(2026, 2, 1)
    ))

    assert balances[CASH] == Decimal("300")
    assert balances[SALES_REVENUE] == Decimal("0")


def test_profit_and_loss(db, tenant, books):
    report = crud_financial_reports.get_profit_and_loss(db, tenant.id, date(2026, 2, 1), date(2026, 2, 28))

    assert report.total_revenue == Decimal("500")
    assert report.total_expenses == Decimal("200")
    assert report.net_income == Decimal("300")
    assert {b.account_number for b in report.revenue} == {CONSULTING_REVENUE, SALES_REVENUE}


def test_balance_sheet_balances(db, tenant, books):
    sheet = crud_financial_reports.get_balance_sheet(db, tenant.id, date(2026, 2, 1), date(2026, 2, 28))

    assert sheet.total_assets == Decimal("1600")
    assert sheet.total_liabilities == Decimal("0")
    assert sheet.retained_earnings == Decimal("300")
    assert sheet.net_income == Decimal("300")
    assert sheet.total_equity == Decimal("1600")
    assert sheet.total_assets == sheet.total_liabilities_and_equity


def test_general_ledger_running_balance(db, tenant, books):
    ledger = crud_financial_reports.get_general_ledger(db, tenant.id, date(2026, 2, 1), date(2026, 2, 28))
    by_number = {account.account_number: account for account in ledger.accounts}

    cash = by_number[CASH]
    assert cash.opening_balance == Decimal("1000")
    assert [line.balance for line in cash.entries] == [Decimal("1500"), Decimal("1300")]
    assert [line.debit for line in cash.entries] == [Decimal("500"), Decimal("0")]
    assert cash.closing_balance == Decimal("1300")

    # Accounts with an opening balance stay in the ledger without activity
    assert by_number[ACCOUNTS_RECEIVABLE].entries == []
    assert by_number[ACCOUNTS_RECEIVABLE].closing_balance == Decimal("300")
    assert INVENTORY not in by_number


def test_reports_are_isolated_per_tenant(db, other_tenant, books):
    sheet = crud_financial_reports.get_balance_sheet(db, other_tenant.id, date(2026, 2, 1), date(2026, 2, 28))

    assert sheet.total_assets == Decimal("0")
    assert crud_financial_reports.get_general_ledger(
        db, other_tenant.id, date(2026, 1, 1), date(2026, 2, 28)
    ).accounts == []


def test_report_endpoints(client, auth_headers, books):
    params = {"start_date": "2026-02-01", "end_date": "2026-02-28"}

    pnl = client.get("/financial-reports/profit-and-loss", params=params, headers=auth_headers)
    sheet = client.get("/financial-reports/balance-sheet", params=params, headers=auth_headers)
    ledger = client.get("/financial-reports/ledger", params=params, headers=auth_headers)

    assert pnl.status_code == 200
    assert Decimal(pnl.json()["net_income"]) == Decimal("300")
    assert sheet.status_code == 200
    assert Decimal(sheet.json()["total_liabilities_and_equity"]) == Decimal("1600")
    assert ledger.status_code == 200
    assert ledger.json()["title"] == "General Ledger"


def test_report_rejects_reversed_range(client, auth_headers):
    response = client.get(
        "/financial-reports/profit-and-loss",
        params={"start_date": "2026-03-01", "end_date": "2026-02-01"},
        headers=auth_headers
    )

    assert response.status_code == 400
