"""
Recipient SMS message templates.
"""

from typing import Optional

from rapidtransit.app.core.config import settings
from rapidtransit.app.models.parcel_enums import ParcelStatus


def compose_message(
    status: str,
    tracking_number: str,
    recipient_name: str,
    location: Optional[str] = None,
    tracking_url_base: Optional[str] = None,
) -> str:
    """
    Build the text message sent to a parcel recipient on a status change.

    Only the in_transit and delayed templates carry the location suffix.
    Statuses without a template (pending, cancelled, anything unknown) get
    a generic update with a tracking link.
    """
    status = status.value if isinstance(status, ParcelStatus) else str(status)
    track_link = f"{tracking_url_base or settings.tracking_url_base}/{tracking_number}"
    at_location = f" at {location}" if location else ""

    templates = {
        ParcelStatus.COLLECTED.value: (
            f"Hi {recipient_name}, your parcel {tracking_number} has been collected "
            f"and is now in transit via RapidTransit."
        ),
        ParcelStatus.IN_TRANSIT.value: (
            f"Update: Your parcel {tracking_number} is currently in transit{at_location}. "
            f"Track: {track_link}"
        ),
        ParcelStatus.OUT_FOR_DELIVERY.value: (
            f"Great news {recipient_name}! Your parcel {tracking_number} is out for delivery "
            f"and will arrive shortly."
        ),
        ParcelStatus.DELIVERED.value: (
            f"Delivered! Your parcel {tracking_number} has been successfully delivered. "
            f"Thank you for using RapidTransit!"
        ),
        ParcelStatus.DELAYED.value: (
            f"Update: Your parcel {tracking_number} is experiencing a slight delay{at_location}. "
            f"We'll keep you updated."
        ),
    }

    return templates.get(
        status,
        f"Update on your parcel {tracking_number}: Status changed to {status}. Track: {track_link}",
    )
