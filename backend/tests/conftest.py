import os
from datetime import date, timedelta
from decimal import Decimal

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["LOG_TO_FILE"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, get_db
from main import app
from crud import chart_of_accounts as chart_of_accounts_crud
from crud import tenant as tenant_crud
from crud.users import ensure_user
from models.journal_entry import JournalEntry
from models.journal_entry_account import JournalEntryAccount
from schemas.tenant import TenantCreate
from utils.auth_utils import create_signed_token

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

USER_CLAIMS = {"sub": "user-1", "username": "alice", "email": "alice@example.com"}


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def user(db):
    return ensure_user(db, USER_CLAIMS)


@pytest.fixture
def tenant(db):
    return tenant_crud.create_tenant(db, TenantCreate(name="Acme Consulting"))


@pytest.fixture
def other_tenant(db):
    return tenant_crud.create_tenant(db, TenantCreate(name="Globex"))


@pytest.fixture
def accounts(db, tenant):
    """The tenant's default chart of accounts keyed by account number."""
    return {a.account_number: a for a in chart_of_accounts_crud.get_accounts(db, tenant.id)}


@pytest.fixture
def make_entry(tenant, user):
    """Builds an unsaved journal entry from (account, debit, credit) tuples."""
    def _make_entry(lines, entry_date=date(2026, 1, 5), description="Consulting invoice", **kwargs):
        values = {"tenant_id": tenant.id, "created_by_id": user.id}
        values.update(kwargs)
        return JournalEntry(
            entry_date=entry_date,
            description=description,
            accounts=[
                JournalEntryAccount(
                    account_id=account.id,
                    asset_type_id=tenant.default_asset_type_id,
                    debit=Decimal(debit),
                    credit=Decimal(credit),
                )
                for account, debit, credit in lines
            ],
            **values
        )
    return _make_entry


@pytest.fixture
def make_token():
    def _make_token(claims=None, expires_in=timedelta(minutes=5)):
        return create_signed_token(USER_CLAIMS if claims is None else claims, expires_in)
    return _make_token


@pytest.fixture
def auth_headers(tenant, make_token):
    return {
        "Authorization": f"Bearer {make_token()}",
        "X-Tenant-ID": tenant.id,
    }
