"""
Transport database model.

A scheduled vehicle run between two places. Parcels may reference one;
capacity counters are informational.
"""

from sqlalchemy import Column, Integer, String, Text, DateTime, Enum, CheckConstraint
from rapidtransit.app.db.session import Base
from rapidtransit.app.models.base import utcnow, enum_values
from rapidtransit.app.models.parcel_enums import TransportStatus


class Transport(Base):
    __tablename__ = "transports"
    __table_args__ = (
        CheckConstraint("available_capacity >= 0", name="ck_transport_available_non_negative"),
        CheckConstraint("available_capacity <= capacity", name="ck_transport_available_within_capacity"),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    operator = Column(String(100), nullable=False)  # Golden Arrow, Intercape, ...
    vehicle_number = Column(String(50), nullable=False)
    route_from = Column(String(100), nullable=False, index=True)
    route_to = Column(String(100), nullable=False, index=True)
    departure_time = Column(DateTime(timezone=True), nullable=False)
    arrival_time = Column(DateTime(timezone=True), nullable=False)

    capacity = Column(Integer, nullable=False, default=50)
    available_capacity = Column(Integer, nullable=False, default=50)
    status = Column(
        Enum(TransportStatus, values_callable=enum_values, native_enum=False, length=16),
        default=TransportStatus.SCHEDULED,
        nullable=False,
        index=True,
    )
    current_location = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    def __repr__(self):
        return f"<Transport(id={self.id}, {self.route_from}->{self.route_to}, status='{self.status.value}')>"
