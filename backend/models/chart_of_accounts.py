import enum

from sqlalchemy import Column, Integer, String, Text, Boolean, Enum, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import TimestampMixin


class AccountType(enum.Enum):
    ASSET = "Asset"
    LIABILITY = "Liability"
    EQUITY = "Equity"
    REVENUE = "Revenue"
    EXPENSE = "Expense"


class BalanceType(enum.Enum):
    DEBIT = "Debit"
    CREDIT = "Credit"


DEBIT_NORMAL_ACCOUNT_TYPES = (AccountType.ASSET, AccountType.EXPENSE)


class Account(Base, TimestampMixin):
    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String(36), ForeignKey("tenants.id"), nullable=False, index=True)
    account_number = Column(Integer, nullable=False, index=True)
    name = Column(String(100), nullable=False)
    account_type = Column(Enum(AccountType), nullable=False)
    description = Column(Text, nullable=True)
    asset_type_id = Column(Integer, ForeignKey("asset_types.id"), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    tenant = relationship("Tenant", back_populates="accounts")
    asset_type = relationship("AssetType")

    __table_args__ = (
        UniqueConstraint('tenant_id', 'account_number', name='_tenant_account_number_uc'),
    )

    @property
    def normal_balance(self) -> BalanceType:
        if self.account_type in DEBIT_NORMAL_ACCOUNT_TYPES:
            return BalanceType.DEBIT
        return BalanceType.CREDIT

    def __repr__(self):
        return f"<Account(tenant_id={self.tenant_id}, account_number={self.account_number}, name={self.name})>"
