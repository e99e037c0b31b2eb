from sqlalchemy import Column, Integer, String, DateTime, JSON
from database import Base
from models.audit_mixin import utc_now


class AuditLog(Base):
    __tablename__ = "audit_log"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String(36), index=True, nullable=True)
    table_name = Column(String, nullable=False)
    record_id = Column(String, nullable=False, index=True)
    changed_at = Column(DateTime(timezone=True), default=utc_now)
    changed_by = Column(String, nullable=False)
    action = Column(String, nullable=False)  # e.g., 'INSERT', 'UPDATE'
    old_values = Column(JSON)
    new_values = Column(JSON)
