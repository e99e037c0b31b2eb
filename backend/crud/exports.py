from datetime import date

from sqlalchemy.orm import Session

from crud import financial_reports as crud_financial_reports
from crud.journal_entry import get_journal_entries
from utils.export_utils import ExportTable, ExportType
from utils.pagination import Pagination

EXPORT_PAGE_SIZE = 500


def _journal_entries_table(db: Session, tenant_id: str, start_date: date, end_date: date) -> ExportTable:
    table = ExportTable(
        title="Journal Entries",
        headers=["Entry", "Date", "Status", "Description", "Account", "Asset Type", "Debit", "Credit"],
    )

    page_number = 1
    while True:
        page = get_journal_entries(
            db, tenant_id, start_date, end_date,
            Pagination(page_number=page_number, page_size=EXPORT_PAGE_SIZE)
        )
        for entry in page.results:
            for line in entry.accounts:
                table.rows.append([
                    entry.entry_id,
                    entry.effective_date,
                    entry.status,
                    entry.description,
                    f"{line.account.account_number} {line.account.name}",
                    line.asset_type.name,
                    line.debit,
                    line.credit,
                ])
        if page_number * EXPORT_PAGE_SIZE >= page.total:
            break
        page_number += 1

    return table


def _ledger_table(db: Session, tenant_id: str, start_date: date, end_date: date) -> ExportTable:
    ledger = crud_financial_reports.get_general_ledger(db, tenant_id, start_date, end_date)
    table = ExportTable(
        title=ledger.title,
        headers=["Account", "Date", "Entry", "Description", "Asset Type", "Debit", "Credit", "Balance"],
    )

    for account in ledger.accounts:
        label = f"{account.account_number} {account.name}"
        table.rows.append([label, None, None, "Opening balance", None, None, None, account.opening_balance])
        for line in account.entries:
            table.rows.append([
                label, line.date, line.entry_id, line.description,
                line.asset_type, line.debit, line.credit, line.balance
            ])
        table.rows.append([label, None, None, "Closing balance", None, None, None, account.closing_balance])

    return table


def _balance_sheet_table(db: Session, tenant_id: str, start_date: date, end_date: date) -> ExportTable:
    sheet = crud_financial_reports.get_balance_sheet(db, tenant_id, start_date, end_date)
    table = ExportTable(title="Balance Sheet", headers=["Section", "Account", "Balance"])

    for section, balances, total in (
        ("Assets", sheet.assets, sheet.total_assets),
        ("Liabilities", sheet.liabilities, sheet.total_liabilities),
    ):
        for b in balances:
            table.rows.append([section, f"{b.account_number} {b.name}", b.balance])
        table.rows.append([section, f"Total {section}", total])

    for b in sheet.equity:
        table.rows.append(["Equity", f"{b.account_number} {b.name}", b.balance])
    table.rows.append(["Equity", "Retained Earnings", sheet.retained_earnings])
    table.rows.append(["Equity", "Net Income", sheet.net_income])
    table.rows.append(["Equity", "Total Equity", sheet.total_equity])
    table.rows.append(["", "Total Liabilities and Equity", sheet.total_liabilities_and_equity])

    return table


def _profit_and_loss_table(db: Session, tenant_id: str, start_date: date, end_date: date) -> ExportTable:
    report = crud_financial_reports.get_profit_and_loss(db, tenant_id, start_date, end_date)
    table = ExportTable(title="Profit and Loss", headers=["Section", "Account", "Balance"])

    for b in report.revenue:
        table.rows.append(["Revenue", f"{b.account_number} {b.name}", b.balance])
    table.rows.append(["Revenue", "Total Revenue", report.total_revenue])
    for b in report.expenses:
        table.rows.append(["Expenses", f"{b.account_number} {b.name}", b.balance])
    table.rows.append(["Expenses", "Total Expenses", report.total_expenses])
    table.rows.append(["", "Net Income", report.net_income])

    return table


_BUILDERS = {
    ExportType.JOURNAL_ENTRIES: _journal_entries_table,
    ExportType.LEDGER: _ledger_table,
    ExportType.BALANCE_SHEET: _balance_sheet_table,
    ExportType.PROFIT_AND_LOSS: _profit_and_loss_table,
}


def build_export_table(
    db: Session,
    tenant_id: str,
    export_type: ExportType,
    start_date: date,
    end_date: date
) -> ExportTable:
    if start_date > end_date:
        raise ValueError("Start date cannot be after the end date")

    try:
        builder = _BUILDERS[ExportType(export_type)]
    except ValueError:
        raise ValueError(f"Unsupported export type: {export_type}")

    table = builder(db, tenant_id, start_date, end_date)
    table.subtitle = f"{start_date.isoformat()} to {end_date.isoformat()}"
    return table
