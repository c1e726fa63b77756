"""
Dead Letter Queue (DLQ) Model.

Records background tasks that failed, currently outbound SMS sends.
Rows are written for inspection only; nothing consumes or retries them.
"""

from sqlalchemy import Column, Integer, String, Text, DateTime, JSON, Enum
from rapidtransit.app.db.session import Base
from rapidtransit.app.models.base import utcnow
import enum


class DLQStatus(str, enum.Enum):
    FAILED = "FAILED"


class DeadLetterQueue(Base):
    """
    Dead Letter Queue table.
    Captures failed background tasks.
    """
    __tablename__ = "dead_letter_queue"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    task_name = Column(String(100), nullable=False, index=True)
    error_message = Column(Text, nullable=False)
    payload = Column(JSON, nullable=True)  # Task arguments

    status = Column(Enum(DLQStatus), default=DLQStatus.FAILED, nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    def __repr__(self):
        return f"<DLQ(id={self.id}, task='{self.task_name}', status='{self.status}')>"
