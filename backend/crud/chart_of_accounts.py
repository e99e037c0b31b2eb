import logging
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload
from models.chart_of_accounts import Account, AccountType
from models.journal_entry_account import JournalEntryAccount
from schemas.chart_of_accounts import AccountCreate, AccountUpdate

logger = logging.getLogger("chart_of_accounts")

DEFAULT_ACCOUNTS = [
    {"account_number": 1010, "name": "Cash", "account_type": AccountType.ASSET},
    {"account_number": 1100, "name": "Accounts Receivable", "account_type": AccountType.ASSET},
    {"account_number": 1200, "name": "Inventory", "account_type": AccountType.ASSET},
    {"account_number": 2000, "name": "Accounts Payable", "account_type": AccountType.LIABILITY},
    {"account_number": 2100, "name": "Credit Card", "account_type": AccountType.LIABILITY},
    {"account_number": 3000, "name": "Owner's Equity", "account_type": AccountType.EQUITY},
    {"account_number": 4010, "name": "Consulting Revenue", "account_type": AccountType.REVENUE},
    {"account_number": 4100, "name": "Sales Revenue", "account_type": AccountType.REVENUE},
    {"account_number": 5000, "name": "Cost of Goods Sold", "account_type": AccountType.EXPENSE},
    {"account_number": 6000, "name": "Operating Expenses", "account_type": AccountType.EXPENSE},
]


def get_account(db: Session, account_id: int, tenant_id: str) -> Optional[Account]:
    return db.query(Account).options(joinedload(Account.asset_type)).filter(
        Account.id == account_id,
        Account.tenant_id == tenant_id
    ).first()


def get_account_by_number(db: Session, account_number: int, tenant_id: str) -> Optional[Account]:
    return db.query(Account).filter(
        Account.account_number == account_number,
        Account.tenant_id == tenant_id
    ).first()


def get_accounts(
    db: Session,
    tenant_id: str,
    account_type: Optional[AccountType] = None,
    include_inactive: bool = False
) -> List[Account]:
    query = db.query(Account).options(joinedload(Account.asset_type)).filter(Account.tenant_id == tenant_id)

    if not include_inactive:
        query = query.filter(Account.is_active.is_(True))
    if account_type:
        query = query.filter(Account.account_type == account_type)

    return query.order_by(Account.account_number.asc()).all()


def is_account_in_use(db: Session, account_id: int) -> bool:
    return db.query(JournalEntryAccount.id).filter(
        JournalEntryAccount.account_id == account_id
    ).first() is not None


def create_account(db: Session, account: AccountCreate, tenant_id: str, commit: bool = True) -> Account:
    if get_account_by_number(db, account.account_number, tenant_id):
        raise ValueError(f"Account with number {account.account_number} already exists")

    db_account = Account(**account.model_dump(), tenant_id=tenant_id)
    db.add(db_account)
    if commit:
        db.commit()
        db.refresh(db_account)
        logger.info(f"Account {db_account.account_number} '{db_account.name}' created for tenant {tenant_id}")
    else:
        db.flush()
    return db_account


def update_account(db: Session, account_id: int, account_update: AccountUpdate, tenant_id: str) -> Optional[Account]:
    db_account = get_account(db, account_id, tenant_id)
    if not db_account:
        return None

    update_data = account_update.model_dump(exclude_unset=True)
    in_use = is_account_in_use(db, account_id)

    # Referenced accounts keep their type and stay active
    if 'account_type' in update_data and update_data['account_type'] != db_account.account_type and in_use:
        raise ValueError("Cannot change account type for an account that is in use by journal entries.")
    if update_data.get('is_active') is False and in_use:
        raise ValueError("Cannot deactivate account because it is referenced by journal entries.")

    for key, value in update_data.items():
        setattr(db_account, key, value)

    db.commit()
    db.refresh(db_account)
    return db_account


def deactivate_account(db: Session, account_id: int, tenant_id: str) -> bool:
    db_account = get_account(db, account_id, tenant_id)
    if not db_account:
        return False

    if is_account_in_use(db, account_id):
        raise ValueError("Cannot delete account because it is referenced by journal entries.")

    # Soft delete by setting is_active to False
    db_account.is_active = False
    db.commit()
    logger.info(f"Account {db_account.account_number} deactivated for tenant {tenant_id}")
    return True


def initialize_default_accounts(db: Session, tenant_id: str, asset_type_id: Optional[int] = None) -> List[Account]:
    """Initialize default chart of accounts for a new tenant. Leaves the commit to the caller."""
    created = []
    for account_data in DEFAULT_ACCOUNTS:
        existing = get_account_by_number(db, account_data["account_number"], tenant_id)
        if not existing:
            created.append(create_account(
                db,
                AccountCreate(**account_data, asset_type_id=asset_type_id),
                tenant_id,
                commit=False
            ))
    return created
