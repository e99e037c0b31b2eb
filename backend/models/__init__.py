from models.asset_type import AssetType
from models.tenant import Tenant
from models.users import User
from models.chart_of_accounts import Account, AccountType, BalanceType
from models.journal_entry import JournalEntry, TransactionStatus
from models.journal_entry_account import JournalEntryAccount
from models.audit_log import AuditLog

__all__ = ['Account', 'AccountType', 'AssetType', 'AuditLog', 'BalanceType', 'JournalEntry', 'JournalEntryAccount', 'Tenant', 'TransactionStatus', 'User',]
