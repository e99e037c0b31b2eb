import enum
from decimal import Decimal

from sqlalchemy import Column, Integer, String, Text, Date, DateTime, Enum, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import utc_now


class TransactionStatus(enum.Enum):
    PENDING = "Pending"
    POSTED = "Posted"
    CANCELED = "Canceled"


class JournalEntry(Base):
    __tablename__ = "journal_entries"
    __table_args__ = (UniqueConstraint('tenant_id', 'entry_id', name='_tenant_entry_id_uc'),)

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String(36), ForeignKey("tenants.id"), nullable=False, index=True)
    entry_id = Column(Integer, nullable=False, index=True)  # Tenant-specific sequential number
    entry_date = Column(Date, nullable=False)
    post_date = Column(Date, nullable=True)
    status = Column(Enum(TransactionStatus), default=TransactionStatus.PENDING, nullable=False)
    description = Column(String(2048), nullable=False)
    note = Column(Text, nullable=True)
    check_number = Column(Integer, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    created_by_id = Column(String(64), ForeignKey("users.id"), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=True)
    updated_by_id = Column(String(64), ForeignKey("users.id"), nullable=True)
    posted_by_id = Column(String(64), ForeignKey("users.id"), nullable=True)
    canceled_at = Column(DateTime(timezone=True), nullable=True)
    canceled_by_id = Column(String(64), ForeignKey("users.id"), nullable=True)

    # Relationships
    tenant = relationship("Tenant")
    created_by = relationship("User", foreign_keys=[created_by_id])
    updated_by = relationship("User", foreign_keys=[updated_by_id])
    posted_by = relationship("User", foreign_keys=[posted_by_id])
    canceled_by = relationship("User", foreign_keys=[canceled_by_id])
    accounts = relationship(
        "JournalEntryAccount",
        back_populates="journal_entry",
        cascade="all, delete-orphan",
        order_by="JournalEntryAccount.id",
    )

    @property
    def total_debits(self) -> Decimal:
        return sum((Decimal(line.debit or 0) for line in self.accounts), Decimal(0))

    @property
    def total_credits(self) -> Decimal:
        return sum((Decimal(line.credit or 0) for line in self.accounts), Decimal(0))

    @property
    def is_balanced(self) -> bool:
        """
        Debits equal credits and the entry actually moves an amount.

        A zero-total entry is treated as unbalanced so empty entries are never persisted.
        """
        total_debits = self.total_debits
        return total_debits > 0 and total_debits == self.total_credits

    @property
    def effective_date(self):
        return self.post_date or self.entry_date

    def __repr__(self):
        return f"<JournalEntry(tenant_id={self.tenant_id}, entry_id={self.entry_id}, status={self.status})>"
