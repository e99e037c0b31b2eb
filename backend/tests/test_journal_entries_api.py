from datetime import timedelta
from decimal import Decimal

import pytest

from crud.chart_of_accounts import get_account_by_number
from models.journal_entry import JournalEntry

CASH = 1010
CONSULTING_REVENUE = 4010
OPERATING_EXPENSES = 6000


@pytest.fixture
def entry_payload(accounts):
    return {
        "entry_date": "2026-01-05",
        "description": "Consulting invoice",
        "note": "January retainer",
        "accounts": [
            {"account_id": accounts[CASH].id, "debit": "150.00"},
            {"account_id": accounts[CONSULTING_REVENUE].id, "credit": "150.00"},
        ],
    }


def _create(client, auth_headers, payload):
    response = client.post("/journal-entries/", json=payload, headers=auth_headers)
    assert response.status_code == 201, response.text
    return response.json()


def test_create_journal_entry(client, auth_headers, entry_payload):
    body = _create(client, auth_headers, entry_payload)

    assert body["entry_id"] == 1
    assert body["status"] == "Pending"
    assert body["created_by"]["username"] == "alice"
    assert Decimal(body["total_debits"]) == Decimal("150")
    assert [line["account"]["account_number"] for line in body["accounts"]] == [CASH, CONSULTING_REVENUE]
    assert body["accounts"][0]["asset_type"]["name"] == "USD"


def test_create_rejects_unbalanced_entry(client, auth_headers, entry_payload):
    entry_payload["accounts"][1]["credit"] = "100.00"

    response = client.post("/journal-entries/", json=entry_payload, headers=auth_headers)

    assert response.status_code == 400
    assert "not balanced" in response.json()["detail"]


def test_create_rejects_line_with_debit_and_credit(client, auth_headers, entry_payload):
    entry_payload["accounts"][0]["credit"] = "150.00"

    response = client.post("/journal-entries/", json=entry_payload, headers=auth_headers)

    assert response.status_code == 422


def test_create_rejects_other_tenants_account(client, db, auth_headers, entry_payload, other_tenant):
    foreign_cash = get_account_by_number(db, CASH, other_tenant.id)
    entry_payload["accounts"][0]["account_id"] = foreign_cash.id

    response = client.post("/journal-entries/", json=entry_payload, headers=auth_headers)

    assert response.status_code == 400


def test_create_rejects_duplicate_entry_number(client, db, auth_headers, entry_payload):
    entry_payload["entry_id"] = 5
    _create(client, auth_headers, entry_payload)

    response = client.post("/journal-entries/", json=entry_payload, headers=auth_headers)

    assert response.status_code == 409
    assert "already in use" in response.json()["detail"]
    assert db.query(JournalEntry).count() == 1
    assert client.get("/journal-entries/next-entry-id", headers=auth_headers).json() == {"next_entry_id": 6}


def test_create_rejects_unknown_asset_type(client, db, auth_headers, entry_payload):
    for line in entry_payload["accounts"]:
        line["asset_type_id"] = 9999

    response = client.post("/journal-entries/", json=entry_payload, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["detail"] == "Asset type 9999 does not exist."
    assert db.query(JournalEntry).count() == 0


def test_requires_tenant_header(client, auth_headers, entry_payload):
    headers = {"Authorization": auth_headers["Authorization"]}

    response = client.get("/journal-entries/next-entry-id", headers=headers)

    assert response.status_code == 400


def test_requires_bearer_token(client, tenant):
    response = client.get("/journal-entries/next-entry-id", headers={"X-Tenant-ID": tenant.id})

    assert response.status_code == 401


def test_rejects_expired_token(client, tenant, make_token):
    token = make_token(expires_in=timedelta(minutes=-1))
    response = client.get(
        "/journal-entries/next-entry-id",
        headers={"Authorization": f"Bearer {token}", "X-Tenant-ID": tenant.id}
    )

    assert response.status_code == 401
    assert response.json()["detail"] == "Token has expired"


def test_rejects_token_without_subject(client, tenant, make_token):
    token = make_token(claims={"username": "nobody"})
    response = client.get(
        "/journal-entries/next-entry-id",
        headers={"Authorization": f"Bearer {token}", "X-Tenant-ID": tenant.id}
    )

    assert response.status_code == 401


def test_next_entry_id(client, auth_headers, entry_payload):
    assert client.get("/journal-entries/next-entry-id", headers=auth_headers).json() == {"next_entry_id": 1}

    _create(client, auth_headers, entry_payload)

    assert client.get("/journal-entries/next-entry-id", headers=auth_headers).json() == {"next_entry_id": 2}


def test_list_and_pending(client, auth_headers, entry_payload):
    _create(client, auth_headers, entry_payload)
    entry_payload["entry_date"] = "2026-01-09"
    _create(client, auth_headers, entry_payload)

    listed = client.get(
        "/journal-entries/",
        params={"start_date": "2026-01-01", "end_date": "2026-01-31", "page_size": 1},
        headers=auth_headers
    )
    pending = client.get("/journal-entries/pending", headers=auth_headers)

    assert listed.status_code == 200
    assert listed.json()["total"] == 2
    assert listed.json()["page_size"] == 1
    assert [e["entry_id"] for e in listed.json()["results"]] == [2]
    assert pending.json()["total"] == 2


def test_list_validates_paging_and_range(client, auth_headers):
    bad_page = client.get(
        "/journal-entries/",
        params={"start_date": "2026-01-01", "end_date": "2026-01-31", "page_number": 0},
        headers=auth_headers
    )
    reversed_range = client.get(
        "/journal-entries/",
        params={"start_date": "2026-02-01", "end_date": "2026-01-01"},
        headers=auth_headers
    )

    assert bad_page.status_code == 422
    assert reversed_range.status_code == 400


def test_get_update_post_lifecycle(client, auth_headers, accounts, entry_payload):
    created = _create(client, auth_headers, entry_payload)
    entry_url = f"/journal-entries/{created['entry_id']}"

    fetched = client.get(entry_url, headers=auth_headers)
    assert fetched.status_code == 200
    assert fetched.json()["note"] == "January retainer"

    updated = client.put(entry_url, headers=auth_headers, json={
        "entry_date": "2026-01-06",
        "description": "Printer paper",
        "accounts": [
            {"account_id": accounts[OPERATING_EXPENSES].id, "debit": "25.00"},
            {"account_id": accounts[CASH].id, "credit": "25.00"},
        ],
    })
    assert updated.status_code == 200
    assert updated.json()["description"] == "Printer paper"
    assert updated.json()["updated_by"]["id"] == "user-1"
    assert Decimal(updated.json()["total_credits"]) == Decimal("25")

    posted = client.put(f"{entry_url}/post", headers=auth_headers, json={"post_date": "2026-01-07"})
    assert posted.status_code == 200
    assert posted.json()["status"] == "Posted"
    assert posted.json()["post_date"] == "2026-01-07"
    assert posted.json()["posted_by"]["username"] == "alice"

    again = client.put(f"{entry_url}/post", headers=auth_headers, json={"post_date": "2026-01-08"})
    assert again.status_code == 400


def test_cancel_removes_entry_from_listing(client, auth_headers, entry_payload):
    created = _create(client, auth_headers, entry_payload)

    canceled = client.delete(f"/journal-entries/{created['entry_id']}", headers=auth_headers)
    listed = client.get(
        "/journal-entries/",
        params={"start_date": "2026-01-01", "end_date": "2026-01-31"},
        headers=auth_headers
    )

    assert canceled.status_code == 200
    assert canceled.json()["status"] == "Canceled"
    assert canceled.json()["canceled_by"]["id"] == "user-1"
    assert listed.json()["total"] == 0

    posted = client.put(
        f"/journal-entries/{created['entry_id']}/post", headers=auth_headers, json={"post_date": "2026-01-07"}
    )
    assert posted.status_code == 400


def test_missing_entry_returns_404(client, auth_headers):
    assert client.get("/journal-entries/99", headers=auth_headers).status_code == 404
    assert client.put(
        "/journal-entries/99/post", headers=auth_headers, json={"post_date": "2026-01-07"}
    ).status_code == 404
    assert client.delete("/journal-entries/99", headers=auth_headers).status_code == 404


def test_entries_are_isolated_between_tenants(client, auth_headers, entry_payload, other_tenant):
    created = _create(client, auth_headers, entry_payload)
    other_headers = dict(auth_headers, **{"X-Tenant-ID": other_tenant.id})

    assert client.get(f"/journal-entries/{created['entry_id']}", headers=other_headers).status_code == 404
    assert client.get("/journal-entries/pending", headers=other_headers).json()["total"] == 0
    assert client.get("/journal-entries/next-entry-id", headers=other_headers).json() == {"next_entry_id": 1}
