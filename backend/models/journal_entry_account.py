from decimal import Decimal

from sqlalchemy import Column, Integer, Numeric, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from database import Base


class JournalEntryAccount(Base):
    __tablename__ = "journal_entry_accounts"

    id = Column(Integer, primary_key=True, index=True)
    journal_entry_id = Column(Integer, ForeignKey("journal_entries.id", ondelete="CASCADE"), nullable=False, index=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False, index=True)
    asset_type_id = Column(Integer, ForeignKey("asset_types.id"), nullable=False)
    debit = Column(Numeric(19, 4), CheckConstraint('debit >= 0'), nullable=False, default=0)
    credit = Column(Numeric(19, 4), CheckConstraint('credit >= 0'), nullable=False, default=0)

    # Relationships
    journal_entry = relationship("JournalEntry", back_populates="accounts")
    account = relationship("Account")
    asset_type = relationship("AssetType")

    __table_args__ = (
        CheckConstraint(
            '(debit > 0 AND credit = 0) OR (debit = 0 AND credit > 0) OR (debit = 0 AND credit = 0)',
            name='check_debit_or_credit_exclusive'
        ),
    )

    @property
    def amount(self) -> Decimal:
        """Signed amount: positive for a debit, negative for a credit."""
        return Decimal(self.debit or 0) - Decimal(self.credit or 0)
