"""
Parcel and transport enumerations.

Wire values are lower-case and must stay stable; clients and stored
history rows depend on them verbatim.
"""

import enum


class ParcelStatus(str, enum.Enum):
    """
    Parcel status enumeration.

    Nominal flow:
        pending -> collected -> in_transit -> out_for_delivery -> delivered
        in_transit / out_for_delivery may become delayed
        pending / collected may become cancelled
    """
    PENDING = "pending"
    COLLECTED = "collected"
    IN_TRANSIT = "in_transit"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    DELAYED = "delayed"
    CANCELLED = "cancelled"


class ParcelSize(str, enum.Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class ParcelPriority(str, enum.Enum):
    STANDARD = "standard"
    EXPRESS = "express"
    NEXT_TRANSPORT = "next_transport"


class TransportStatus(str, enum.Enum):
    SCHEDULED = "scheduled"
    IN_TRANSIT = "in_transit"
    ARRIVED = "arrived"
    CANCELLED = "cancelled"
