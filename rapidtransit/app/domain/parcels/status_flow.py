"""
Nominal parcel status flow.

Status updates are not rejected when they leave this graph; the table is
used to flag unusual jumps (for example delivered -> pending) in logs.
"""

from typing import Dict, FrozenSet

from rapidtransit.app.models.parcel_enums import ParcelStatus

STATUS_FLOW: Dict[ParcelStatus, FrozenSet[ParcelStatus]] = {
    ParcelStatus.PENDING: frozenset({ParcelStatus.COLLECTED, ParcelStatus.CANCELLED}),
    ParcelStatus.COLLECTED: frozenset({ParcelStatus.IN_TRANSIT, ParcelStatus.CANCELLED}),
    ParcelStatus.IN_TRANSIT: frozenset({ParcelStatus.OUT_FOR_DELIVERY, ParcelStatus.DELAYED}),
    ParcelStatus.DELAYED: frozenset({ParcelStatus.IN_TRANSIT, ParcelStatus.OUT_FOR_DELIVERY}),
    ParcelStatus.OUT_FOR_DELIVERY: frozenset({ParcelStatus.DELIVERED, ParcelStatus.DELAYED}),
    ParcelStatus.DELIVERED: frozenset(),
    ParcelStatus.CANCELLED: frozenset(),
}


def is_standard_transition(current: ParcelStatus, new: ParcelStatus) -> bool:
    return new in STATUS_FLOW.get(current, frozenset())
