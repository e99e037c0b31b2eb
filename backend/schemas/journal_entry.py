from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import date, datetime
from decimal import Decimal

from models.journal_entry import TransactionStatus
from .journal_entry_account import JournalEntryAccountCreate, JournalEntryAccount
from .users import UserSummary


class JournalEntryBase(BaseModel):
    entry_date: date
    description: str = Field(..., min_length=1, max_length=2048)
    note: Optional[str] = None
    check_number: Optional[int] = None


class JournalEntryCreate(JournalEntryBase):
    # Assigned from the tenant's sequence when omitted
    entry_id: Optional[int] = Field(None, ge=1)
    accounts: List[JournalEntryAccountCreate] = Field(..., min_length=2)


class JournalEntryUpdate(JournalEntryBase):
    accounts: List[JournalEntryAccountCreate] = Field(..., min_length=2)


class JournalEntryPost(BaseModel):
    post_date: date
    note: Optional[str] = None


class NextEntryId(BaseModel):
    next_entry_id: int


class JournalEntry(JournalEntryBase):
    id: int
    tenant_id: str
    entry_id: int
    post_date: Optional[date] = None
    status: TransactionStatus
    total_debits: Decimal
    total_credits: Decimal
    created_at: datetime
    created_by: Optional[UserSummary] = None
    updated_at: Optional[datetime] = None
    posted_by: Optional[UserSummary] = None
    accounts: List[JournalEntryAccount] = []

    class Config:
        from_attributes = True


class JournalEntryDetailed(JournalEntry):
    """Full view returned after a mutation or a single-entry lookup."""
    updated_by: Optional[UserSummary] = None
    canceled_at: Optional[datetime] = None
    canceled_by: Optional[UserSummary] = None
