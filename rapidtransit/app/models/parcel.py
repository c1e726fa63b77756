"""
Parcel database model.

A parcel is one booking: who sends it, who receives it, where it goes and
where it is in its lifecycle.
"""

from sqlalchemy import Column, Integer, String, Text, Numeric, DateTime, ForeignKey, Enum
from rapidtransit.app.db.session import Base
from rapidtransit.app.models.base import utcnow, enum_values
from rapidtransit.app.models.parcel_enums import ParcelStatus, ParcelSize, ParcelPriority


class Parcel(Base):
    """
    Parcel model.

    Invariants maintained by the lifecycle service:
    - tracking_number is assigned once at creation and never changes
    - status always equals the status of the newest history record
    - picked_up_at / delivered_at are stamped on collected / delivered
    """
    __tablename__ = "parcels"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    tracking_number = Column(String(32), unique=True, nullable=False, index=True)

    # Sender
    sender_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    sender_name = Column(String(200), nullable=False)
    sender_phone = Column(String(32), nullable=False)
    pickup_address = Column(Text, nullable=False)

    # Recipient
    recipient_name = Column(String(200), nullable=False)
    recipient_phone = Column(String(32), nullable=False)
    delivery_address = Column(Text, nullable=False)

    # Classification
    parcel_size = Column(Enum(ParcelSize, values_callable=enum_values, native_enum=False, length=16), nullable=False)
    priority = Column(Enum(ParcelPriority, values_callable=enum_values, native_enum=False, length=16), nullable=False)
    description = Column(Text, nullable=True)
    estimated_cost = Column(Numeric(10, 2, asdecimal=False), nullable=False)

    # Lifecycle
    status = Column(
        Enum(ParcelStatus, values_callable=enum_values, native_enum=False, length=32),
        default=ParcelStatus.PENDING,
        nullable=False,
        index=True,
    )
    transport_id = Column(Integer, ForeignKey("transports.id"), nullable=True, index=True)
    scheduled_pickup_at = Column(DateTime(timezone=True), nullable=True)
    picked_up_at = Column(DateTime(timezone=True), nullable=True)
    delivered_at = Column(DateTime(timezone=True), nullable=True)
    estimated_delivery_at = Column(DateTime(timezone=True), nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    def __repr__(self):
        return f"<Parcel(id={self.id}, tracking='{self.tracking_number}', status='{self.status.value}')>"
