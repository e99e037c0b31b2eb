import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional

import pytz
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload, selectinload

from models.tenant import Tenant
from models.journal_entry import JournalEntry, TransactionStatus
from models.journal_entry_account import JournalEntryAccount
from crud.audit_log import create_audit_log
from schemas.audit_log import AuditLogCreate
from utils import sqlalchemy_to_dict
from utils.pagination import Pagination, PagedResult, get_paged

logger = logging.getLogger("journal_entries")

# Post date wins over entry date once an entry has been posted
effective_date = func.coalesce(JournalEntry.post_date, JournalEntry.entry_date)


def _line_options():
    return selectinload(JournalEntry.accounts).options(
        joinedload(JournalEntryAccount.account),
        joinedload(JournalEntryAccount.asset_type),
    )


def _detailed_options():
    return (
        joinedload(JournalEntry.tenant),
        joinedload(JournalEntry.created_by),
        joinedload(JournalEntry.updated_by),
        joinedload(JournalEntry.posted_by),
        joinedload(JournalEntry.canceled_by),
        _line_options(),
    )


def _list_options():
    return (
        joinedload(JournalEntry.created_by),
        joinedload(JournalEntry.posted_by),
        _line_options(),
    )


def _audit(db: Session, entry: JournalEntry, user_id: str, action: str, old_values: Optional[Dict[str, Any]] = None):
    create_audit_log(db=db, log_entry=AuditLogCreate(
        tenant_id=entry.tenant_id,
        table_name=JournalEntry.__tablename__,
        record_id=str(entry.id),
        changed_by=user_id,
        action=action,
        old_values=old_values,
        new_values=_snapshot(entry),
    ))


def _snapshot(entry: JournalEntry) -> Dict[str, Any]:
    values = sqlalchemy_to_dict(entry)
    values["accounts"] = [sqlalchemy_to_dict(line) for line in entry.accounts]
    return values


def create_journal_entry(db: Session, entry: JournalEntry) -> JournalEntry:
    """
    Persists a new, balanced journal entry and its lines.

    The tenant check, entry number assignment and insert share one transaction;
    any failure inside it is rolled back and re-raised as is.
    """
    if entry is None:
        raise ValueError("Journal Entry cannot be null")

    if not entry.is_balanced:
        logger.warning(
            f"Rejected unbalanced journal entry for tenant {entry.tenant_id} "
            f"(debits {entry.total_debits}, credits {entry.total_credits})"
        )
        raise ValueError("Journal Entry is not balanced! It cannot be persisted in this state.")

    try:
        tenant = db.query(Tenant).filter(Tenant.id == entry.tenant_id).first()
        if tenant is None:
            raise ValueError(f"Journal Entry specifies a non-existent Tenant (ID {entry.tenant_id}).")

        if not entry.entry_id:
            entry.entry_id = get_next_entry_id(db, entry.tenant_id)

        entry.status = TransactionStatus.PENDING
        db.add(entry)
        db.flush()
        _audit(db, entry, entry.created_by_id, "INSERT")
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"Journal entry {entry.entry_id} created for tenant {entry.tenant_id} by user {entry.created_by_id}")
    return get_detailed_by_id(db, entry.id)


def get_by_id(db: Session, journal_entry_id: int) -> Optional[JournalEntry]:
    return db.query(JournalEntry).options(joinedload(JournalEntry.tenant)).filter(
        JournalEntry.id == journal_entry_id
    ).one_or_none()


def get_by_tenant_and_entry_id(db: Session, tenant_id: str, entry_id: int) -> Optional[JournalEntry]:
    return db.query(JournalEntry).options(joinedload(JournalEntry.tenant)).filter(
        JournalEntry.tenant_id == tenant_id,
        JournalEntry.entry_id == entry_id
    ).one_or_none()


def get_detailed_by_id(db: Session, journal_entry_id: int) -> Optional[JournalEntry]:
    return db.query(JournalEntry).options(*_detailed_options()).filter(
        JournalEntry.id == journal_entry_id
    ).one_or_none()


def get_detailed_by_tenant_and_entry_id(db: Session, tenant_id: str, entry_id: int) -> Optional[JournalEntry]:
    return db.query(JournalEntry).options(*_detailed_options()).filter(
        JournalEntry.tenant_id == tenant_id,
        JournalEntry.entry_id == entry_id
    ).one_or_none()


def get_journal_entries(
    db: Session,
    tenant_id: str,
    start_date: date,
    end_date: date,
    pagination: Pagination
) -> PagedResult:
    """
    Non-canceled entries whose effective date falls within [start_date, end_date].
    """
    query = db.query(JournalEntry).options(*_list_options()).filter(
        JournalEntry.tenant_id == tenant_id,
        JournalEntry.status != TransactionStatus.CANCELED,
        effective_date >= start_date,
        effective_date <= end_date
    ).order_by(effective_date.desc(), JournalEntry.entry_id.asc())

    return get_paged(query, pagination)


def get_next_entry_id(db: Session, tenant_id: str) -> int:
    # Not safe against concurrent creation on its own; the unique
    # (tenant_id, entry_id) constraint rejects a colliding insert.
    max_entry_id = db.query(func.max(JournalEntry.entry_id)).filter(
        JournalEntry.tenant_id == tenant_id
    ).scalar() or 0
    return max_entry_id + 1


def get_pending_journal_entries(db: Session, tenant_id: str, pagination: Pagination) -> PagedResult:
    query = db.query(JournalEntry).options(*_list_options()).filter(
        JournalEntry.tenant_id == tenant_id,
        JournalEntry.status == TransactionStatus.PENDING
    ).order_by(JournalEntry.entry_date.desc(), JournalEntry.entry_id.asc())

    return get_paged(query, pagination)


def post_journal_entry(
    db: Session,
    journal_entry_id: int,
    post_date: date,
    posted_by_user_id: str,
    note: Optional[str] = None
) -> Optional[JournalEntry]:
    entry = get_detailed_by_id(db, journal_entry_id)

    if entry is None:
        return None

    if entry.status != TransactionStatus.PENDING:
        raise ValueError(f"Journal Entry {entry.entry_id} is {entry.status.value} and cannot be posted.")

    old_values = _snapshot(entry)

    entry.post_date = post_date
    entry.posted_by_id = posted_by_user_id
    entry.status = TransactionStatus.POSTED
    entry.updated_at = datetime.now(pytz.utc)
    entry.updated_by_id = posted_by_user_id

    if note and note.strip() and note != entry.note:
        entry.note = note

    try:
        _audit(db, entry, posted_by_user_id, "UPDATE", old_values)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"Journal entry {entry.entry_id} posted for tenant {entry.tenant_id} by user {posted_by_user_id}")
    return get_detailed_by_id(db, journal_entry_id)


def update_journal_entry(
    db: Session,
    journal_entry_id: int,
    values: Dict[str, Any],
    lines: List[JournalEntryAccount],
    updated_by_user_id: str
) -> Optional[JournalEntry]:
    """
    Replaces the editable fields and all lines of a pending entry.

    `values` may carry entry_date, description, note and check_number.
    """
    entry = get_detailed_by_id(db, journal_entry_id)

    if entry is None:
        return None

    if entry.status != TransactionStatus.PENDING:
        raise ValueError(f"Journal Entry {entry.entry_id} is {entry.status.value} and can no longer be edited.")

    old_values = _snapshot(entry)

    try:
        for key in ("entry_date", "description", "note", "check_number"):
            if key in values:
                setattr(entry, key, values[key])

        entry.accounts = lines
        if not entry.is_balanced:
            raise ValueError("Journal Entry is not balanced! It cannot be persisted in this state.")

        entry.updated_at = datetime.now(pytz.utc)
        entry.updated_by_id = updated_by_user_id
        db.flush()
        _audit(db, entry, updated_by_user_id, "UPDATE", old_values)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"Journal entry {entry.entry_id} updated for tenant {entry.tenant_id} by user {updated_by_user_id}")
    return get_detailed_by_id(db, journal_entry_id)


def cancel_journal_entry(db: Session, journal_entry_id: int, canceled_by_user_id: str) -> Optional[JournalEntry]:
    entry = get_detailed_by_id(db, journal_entry_id)

    if entry is None:
        return None

    if entry.status != TransactionStatus.PENDING:
        raise ValueError(f"Journal Entry {entry.entry_id} is {entry.status.value} and cannot be canceled.")

    old_values = _snapshot(entry)
    now = datetime.now(pytz.utc)

    entry.status = TransactionStatus.CANCELED
    entry.canceled_at = now
    entry.canceled_by_id = canceled_by_user_id
    entry.updated_at = now
    entry.updated_by_id = canceled_by_user_id

    try:
        _audit(db, entry, canceled_by_user_id, "UPDATE", old_values)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"Journal entry {entry.entry_id} canceled for tenant {entry.tenant_id} by user {canceled_by_user_id}")
    return get_detailed_by_id(db, journal_entry_id)
