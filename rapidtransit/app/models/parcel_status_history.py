"""
Parcel status history model.

Append-only audit trail: one row per status a parcel has held, including
the initial pending row written at booking time.
"""

from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey, Enum
from rapidtransit.app.db.session import Base
from rapidtransit.app.models.base import utcnow, enum_values
from rapidtransit.app.models.parcel_enums import ParcelStatus


class ParcelStatusHistory(Base):
    __tablename__ = "parcel_status_history"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    parcel_id = Column(Integer, ForeignKey("parcels.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(Enum(ParcelStatus, values_callable=enum_values, native_enum=False, length=32), nullable=False)
    location = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    timestamp = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

    def __repr__(self):
        return f"<ParcelStatusHistory(id={self.id}, parcel={self.parcel_id}, status='{self.status.value}')>"
