from datetime import date
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from database import get_db
from crud import asset_type as asset_type_crud
from crud import journal_entry as journal_entry_crud
from crud import chart_of_accounts as chart_of_accounts_crud
from crud import tenant as tenant_crud
from models.journal_entry import JournalEntry as JournalEntryModel
from models.journal_entry_account import JournalEntryAccount as JournalEntryAccountModel
from models.users import User
from schemas.journal_entry import (
    JournalEntry,
    JournalEntryCreate,
    JournalEntryDetailed,
    JournalEntryPost,
    JournalEntryUpdate,
    NextEntryId,
)
from schemas.journal_entry_account import JournalEntryAccountCreate
from utils.auth_utils import get_current_db_user
from utils.pagination import Page, Pagination, get_pagination
from utils.tenancy import get_tenant_id

router = APIRouter(
    prefix="/journal-entries",
    tags=["Journal Entries"],
)


def _build_lines(db: Session, tenant_id: str, lines: List[JournalEntryAccountCreate]) -> List[JournalEntryAccountModel]:
    """
    Turns request lines into ORM lines for the tenant.

    The asset type is taken from the line, then the account, then the tenant default.
    """
    tenant = tenant_crud.get_tenant(db, tenant_id)
    if tenant is None:
        raise ValueError(f"Journal Entry specifies a non-existent Tenant (ID {tenant_id}).")

    db_lines = []
    for line in lines:
        account = chart_of_accounts_crud.get_account(db, line.account_id, tenant_id)
        if account is None:
            raise ValueError(f"Account {line.account_id} does not exist for this tenant.")
        if not account.is_active:
            raise ValueError(f"Account {account.account_number} is inactive.")

        if line.asset_type_id is not None and asset_type_crud.get_asset_type(db, line.asset_type_id) is None:
            raise ValueError(f"Asset type {line.asset_type_id} does not exist.")

        db_lines.append(JournalEntryAccountModel(
            account_id=account.id,
            asset_type_id=line.asset_type_id or account.asset_type_id or tenant.default_asset_type_id,
            debit=line.debit,
            credit=line.credit,
        ))
    return db_lines


def _get_entry_or_404(db: Session, tenant_id: str, entry_id: int) -> JournalEntryModel:
    db_entry = journal_entry_crud.get_by_tenant_and_entry_id(db, tenant_id, entry_id)
    if db_entry is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Journal entry not found")
    return db_entry


@router.post("/", response_model=JournalEntryDetailed, status_code=status.HTTP_201_CREATED)
def create_journal_entry(
    entry: JournalEntryCreate,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
    user: User = Depends(get_current_db_user)
):
    try:
        db_entry = JournalEntryModel(
            tenant_id=tenant_id,
            entry_id=entry.entry_id,
            entry_date=entry.entry_date,
            description=entry.description,
            note=entry.note,
            check_number=entry.check_number,
            created_by_id=user.id,
            accounts=_build_lines(db, tenant_id, entry.accounts),
        )
        return journal_entry_crud.create_journal_entry(db=db, entry=db_entry)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except IntegrityError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Journal entry number is already in use for this tenant"
        )


@router.get("/", response_model=Page[JournalEntry])
def get_journal_entries(
    start_date: date,
    end_date: date,
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
    user: User = Depends(get_current_db_user)
):
    """
    Non-canceled journal entries whose effective date falls in the range,
    newest first.
    """
    if start_date > end_date:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Start date cannot be after the end date")

    return journal_entry_crud.get_journal_entries(
        db=db,
        tenant_id=tenant_id,
        start_date=start_date,
        end_date=end_date,
        pagination=pagination
    )


@router.get("/pending", response_model=Page[JournalEntry])
def get_pending_journal_entries(
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
    user: User = Depends(get_current_db_user)
):
    return journal_entry_crud.get_pending_journal_entries(db=db, tenant_id=tenant_id, pagination=pagination)


@router.get("/next-entry-id", response_model=NextEntryId)
def get_next_entry_id(
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
    user: User = Depends(get_current_db_user)
):
    return {"next_entry_id": journal_entry_crud.get_next_entry_id(db, tenant_id)}


@router.get("/{entry_id}", response_model=JournalEntryDetailed)
def get_journal_entry(
    entry_id: int,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
    user: User = Depends(get_current_db_user)
):
    db_entry = journal_entry_crud.get_detailed_by_tenant_and_entry_id(db, tenant_id, entry_id)
    if db_entry is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Journal entry not found")
    return db_entry


@router.put("/{entry_id}", response_model=JournalEntryDetailed)
def update_journal_entry(
    entry_id: int,
    entry: JournalEntryUpdate,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
    user: User = Depends(get_current_db_user)
):
    db_entry = _get_entry_or_404(db, tenant_id, entry_id)
    try:
        return journal_entry_crud.update_journal_entry(
            db=db,
            journal_entry_id=db_entry.id,
            values=entry.model_dump(exclude={"accounts"}),
            lines=_build_lines(db, tenant_id, entry.accounts),
            updated_by_user_id=user.id
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.put("/{entry_id}/post", response_model=JournalEntryDetailed)
def post_journal_entry(
    entry_id: int,
    post: JournalEntryPost,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
    user: User = Depends(get_current_db_user)
):
    db_entry = _get_entry_or_404(db, tenant_id, entry_id)
    try:
        return journal_entry_crud.post_journal_entry(
            db=db,
            journal_entry_id=db_entry.id,
            post_date=post.post_date,
            posted_by_user_id=user.id,
            note=post.note
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.delete("/{entry_id}", response_model=JournalEntryDetailed)
def cancel_journal_entry(
    entry_id: int,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
    user: User = Depends(get_current_db_user)
):
    """Pending entries are canceled rather than removed."""
    db_entry = _get_entry_or_404(db, tenant_id, entry_id)
    try:
        return journal_entry_crud.cancel_journal_entry(db=db, journal_entry_id=db_entry.id, canceled_by_user_id=user.id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
