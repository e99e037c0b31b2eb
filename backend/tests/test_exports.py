import csv
import io
from datetime import date, timedelta
from decimal import Decimal

import pytest
from openpyxl import load_workbook

from crud import journal_entry as journal_entry_crud
from crud.exports import build_export_table
from utils.auth_utils import create_signed_token
from utils.export_utils import ExportFormat, ExportType, get_mime_type_from_format, write_export
from utils.formatting import format_currency

CASH = 1010
CONSULTING_REVENUE = 4010


@pytest.fixture
def posted_entry(db, user, accounts, make_entry):
    entry = journal_entry_crud.create_journal_entry(db, make_entry(
        [(accounts[CASH], "1250.00", "0"), (accounts[CONSULTING_REVENUE], "0", "1250.00")],
        entry_date=date(2026, 4, 2),
        description="Workshop fee"
    ))
    return journal_entry_crud.post_journal_entry(db, entry.id, date(2026, 4, 3), user.id)


def _request_export(client, auth_headers, export_type, export_format):
    response = client.post("/export-download/request", headers=auth_headers, json={
        "export_type": export_type,
        "export_format": export_format,
        "start_date": "2026-04-01",
        "end_date": "2026-04-30",
    })
    assert response.status_code == 200, response.text
    return response.json()


def test_csv_download(client, auth_headers, posted_entry):
    descriptor = _request_export(client, auth_headers, "JOURNAL_ENTRIES", "CSV")

    assert descriptor["file_name"] == "journal_entries_2026-04-01_2026-04-30.csv"
    assert descriptor["mime_type"] == "text/csv"

    response = client.get("/export-download", params={"token": descriptor["token"]})

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert response.headers["content-disposition"] == f'attachment; filename="{descriptor["file_name"]}"'
    rows = list(csv.reader(io.StringIO(response.text)))
    assert rows[0] == ["Entry", "Date", "Status", "Description", "Account", "Asset Type", "Debit", "Credit"]
    assert rows[1][:4] == ["1", "2026-04-03", "Posted", "Workshop fee"]
    assert rows[1][6] == "1250.00"


def test_xlsx_download(client, auth_headers, posted_entry):
    descriptor = _request_export(client, auth_headers, "BALANCE_SHEET", "XLSX")

    response = client.get("/export-download", params={"token": descriptor["token"]})

    assert response.status_code == 200
    assert response.headers["content-type"] == get_mime_type_from_format(ExportFormat.XLSX)
    ws = load_workbook(io.BytesIO(response.content)).active
    assert ws.cell(row=1, column=1).value == "Balance Sheet"
    assert ws.cell(row=4, column=1).value == "Section"


def test_pdf_download(client, auth_headers, posted_entry):
    descriptor = _request_export(client, auth_headers, "LEDGER", "PDF")

    response = client.get("/export-download", params={"token": descriptor["token"]})

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.content.startswith(b"%PDF")


def test_unknown_format_is_rejected(client, auth_headers):
    response = client.post("/export-download/request", headers=auth_headers, json={
        "export_type": "LEDGER",
        "export_format": "DOCX",
        "start_date": "2026-04-01",
        "end_date": "2026-04-30",
    })

    assert response.status_code == 422
    with pytest.raises(ValueError):
        get_mime_type_from_format("DOCX")


def test_invalid_tokens_are_rejected(client, auth_headers, make_token):
    expired = create_signed_token({"sub": "user-1"}, timedelta(seconds=-1), audience="export-download")

    assert client.get("/export-download", params={"token": "not-a-token"}).status_code == 401
    assert client.get("/export-download", params={"token": expired}).status_code == 401
    # A sign-in token is not an export token
    assert client.get("/export-download", params={"token": make_token()}).status_code == 401


def test_export_token_cannot_authenticate_api_calls(client, auth_headers):
    descriptor = _request_export(client, auth_headers, "PROFIT_AND_LOSS", "CSV")
    headers = dict(auth_headers, Authorization=f"Bearer {descriptor['token']}")

    assert client.get("/journal-entries/next-entry-id", headers=headers).status_code == 401


def test_profit_and_loss_table(db, tenant, posted_entry):
    table = build_export_table(db, tenant.id, ExportType.PROFIT_AND_LOSS, date(2026, 4, 1), date(2026, 4, 30))

    assert table.subtitle == "2026-04-01 to 2026-04-30"
    assert ["", "Net Income", Decimal("1250")] in table.rows
    assert write_export(table, "CSV").startswith(b"Section,Account,Balance")


def test_export_table_rejects_reversed_range(db, tenant):
    with pytest.raises(ValueError):
        build_export_table(db, tenant.id, ExportType.LEDGER, date(2026, 5, 1), date(2026, 4, 1))


def test_format_currency():
    assert format_currency(Decimal("1234567.891"), "$") == "$1,234,567.89"
    assert format_currency(Decimal("-42"), "$") == "-$42.00"
    assert format_currency(None) == "0.00"
