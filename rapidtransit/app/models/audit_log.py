"""
Audit Log Database Model.

Tracks security events and parcel operations for compliance.
"""

from sqlalchemy import Column, Integer, String, DateTime, JSON
from rapidtransit.app.db.session import Base
from rapidtransit.app.models.base import utcnow


class AuditLog(Base):
    """
    Audit log model.

    Events logged:
    - USER_CREATED / LOGIN_SUCCESS / LOGIN_FAILED / TOKEN_REVOKED
    - PARCEL_CREATED / PARCEL_STATUS_CHANGED
    - TRANSPORT_CREATED
    """
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Who performed the action (None for system actions)
    actor_id = Column(Integer, index=True, nullable=True)
    actor_username = Column(String(100), nullable=True)

    # What action was performed
    action = Column(String(100), nullable=False, index=True)

    # Additional context (JSON for flexibility)
    meta_data = Column(JSON, nullable=True)

    # IP address for login tracking
    ip_address = Column(String(50), nullable=True)

    timestamp = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

    def __repr__(self):
        return f"<AuditLog(id={self.id}, action='{self.action}', actor={self.actor_username})>"
