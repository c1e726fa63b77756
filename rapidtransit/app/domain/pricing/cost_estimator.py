"""
Parcel Cost Estimator.

cost = base * size multiplier * priority multiplier * max(1, distance / 100)

Unknown sizes or priorities price at the baseline multiplier of 1.
"""

from typing import Optional, Union

from rapidtransit.app.models.parcel_enums import ParcelSize, ParcelPriority

BASE_COST = 25
DEFAULT_DISTANCE_KM = 100

SIZE_MULTIPLIERS = {
    ParcelSize.SMALL.value: 1,
    ParcelSize.MEDIUM.value: 1.5,
    ParcelSize.LARGE.value: 2.5,
}

PRIORITY_MULTIPLIERS = {
    ParcelPriority.STANDARD.value: 1,
    ParcelPriority.EXPRESS.value: 1.5,
    ParcelPriority.NEXT_TRANSPORT.value: 2,
}


def _key(value: Union[str, ParcelSize, ParcelPriority, None]) -> Optional[str]:
    return value.value if hasattr(value, "value") else value


def estimate(
    size: Union[str, ParcelSize, None],
    priority: Union[str, ParcelPriority, None],
    distance_km: Optional[float] = None,
) -> float:
    """Estimated price in currency units, rounded to cents."""
    if distance_km is None:
        distance_km = DEFAULT_DISTANCE_KM

    distance_multiplier = max(1, distance_km / 100)
    cost = (
        BASE_COST
        * SIZE_MULTIPLIERS.get(_key(size), 1)
        * PRIORITY_MULTIPLIERS.get(_key(priority), 1)
        * distance_multiplier
    )
    return round(cost, 2)
