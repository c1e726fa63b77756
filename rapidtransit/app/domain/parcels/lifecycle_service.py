"""
Parcel Lifecycle Service (Domain Logic).

Creates bookings and moves parcels through their statuses. Every status a
parcel takes is written to its history in the same transaction as the
parcel row, and only after that commit is the recipient SMS dispatched.
"""

import logging
import time
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from rapidtransit.app.core.exceptions import (
    ParcelValidationError,
    ResourceNotFoundError,
    TrackingNumberConflictError,
)
from rapidtransit.app.domain.parcels.status_flow import is_standard_transition
from rapidtransit.app.domain.pricing.cost_estimator import estimate
from rapidtransit.app.models.base import utcnow
from rapidtransit.app.models.parcel import Parcel
from rapidtransit.app.models.parcel_enums import ParcelStatus
from rapidtransit.app.models.transport import Transport
from rapidtransit.app.schemas.parcel import ParcelCreate
from rapidtransit.app.services.message_composer import compose_message
from rapidtransit.app.services.parcel_store import ParcelStore
from rapidtransit.app.services.sms_dispatcher import SmsDispatcher

logger = logging.getLogger("rapidtransit.lifecycle")

BOOKING_CREATED_NOTE = "Parcel booking created"

_last_counter = 0


def generate_tracking_number() -> str:
    """
    RT-<year>-<low six digits of a microsecond creation counter>.

    Only the low six digits reach the tracking number, so numbers can
    repeat after a million microseconds. The unique constraint on
    tracking_number is the guard, surfaced as TrackingNumberConflictError.
    """
    global _last_counter
    _last_counter = max(_last_counter + 1, time.time_ns() // 1_000)
    return f"RT-{utcnow().year:04d}-{_last_counter % 1_000_000:06d}"


def _validation_errors(exc: PydanticValidationError) -> list:
    return [
        {"loc": list(err.get("loc", [])), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]


class ParcelLifecycleService:

    @staticmethod
    async def create_parcel(
        db: AsyncSession,
        data: Union[ParcelCreate, Mapping[str, Any]],
        sender_id: int,
        sender_name: str,
    ) -> Parcel:
        """
        Book a parcel and write its initial pending history record.

        Raises:
            ParcelValidationError: required fields missing or malformed
            TrackingNumberConflictError: generated tracking number already taken
        """
        if not isinstance(data, ParcelCreate):
            try:
                data = ParcelCreate.model_validate(data)
            except PydanticValidationError as exc:
                raise ParcelValidationError("Invalid parcel data", _validation_errors(exc)) from exc

        if data.transport_id is not None and await db.get(Transport, data.transport_id) is None:
            raise ParcelValidationError(
                "Invalid parcel data",
                [{"loc": ["transport_id"], "msg": f"Transport {data.transport_id} does not exist", "type": "value_error"}],
            )

        tracking_number = generate_tracking_number()
        parcel = Parcel(
            tracking_number=tracking_number,
            sender_id=sender_id,
            sender_name=sender_name,
            sender_phone=data.sender_phone,
            pickup_address=data.pickup_address,
            recipient_name=data.recipient_name,
            recipient_phone=data.recipient_phone,
            delivery_address=data.delivery_address,
            parcel_size=data.parcel_size,
            priority=data.priority,
            description=data.description,
            estimated_cost=estimate(data.parcel_size, data.priority, data.distance_km),
            status=ParcelStatus.PENDING,
            transport_id=data.transport_id,
            scheduled_pickup_at=data.scheduled_pickup_at,
            estimated_delivery_at=data.estimated_delivery_at,
        )

        try:
            await ParcelStore.insert_parcel(db, parcel)
            await ParcelStore.insert_history(
                db, parcel.id, ParcelStatus.PENDING, notes=BOOKING_CREATED_NOTE
            )
            await db.commit()
        except IntegrityError as exc:
            await db.rollback()
            if await ParcelStore.get_by_tracking_number(db, tracking_number) is not None:
                logger.warning("Tracking number collision on %s", tracking_number)
                raise TrackingNumberConflictError(tracking_number) from exc
            raise

        logger.info("Parcel %s booked by user %s", tracking_number, sender_id)
        return parcel

    @staticmethod
    async def update_status(
        db: AsyncSession,
        parcel_id: int,
        new_status: Union[ParcelStatus, str],
        dispatcher: SmsDispatcher,
        notes: Optional[str] = None,
        location: Optional[str] = None,
    ) -> Parcel:
        """
        Move a parcel to a new status and notify the recipient.

        Any status may follow any other; jumps outside the nominal flow are
        only logged. The parcel update and the history row commit together;
        the SMS is dispatched afterwards and its outcome never affects the
        result of this call.

        Raises:
            ParcelValidationError: unknown status value
            ResourceNotFoundError: no parcel with this id (nothing is written)
        """
        try:
            new_status = ParcelStatus(new_status)
        except ValueError as exc:
            raise ParcelValidationError(f"Unknown parcel status '{new_status}'") from exc

        parcel = await ParcelStore.get_parcel(db, parcel_id)
        if parcel is None:
            raise ResourceNotFoundError("Parcel", parcel_id)

        previous_status = parcel.status
        if not is_standard_transition(previous_status, new_status):
            logger.warning(
                "Non-standard status change for parcel %s: %s -> %s",
                parcel.tracking_number, previous_status.value, new_status.value,
            )

        now = utcnow()
        fields = {"status": new_status, "updated_at": now}
        if new_status == ParcelStatus.DELIVERED:
            fields["delivered_at"] = now
        elif new_status == ParcelStatus.COLLECTED:
            fields["picked_up_at"] = now

        ParcelStore.update_fields(parcel, fields)
        await ParcelStore.insert_history(db, parcel.id, new_status, notes=notes, location=location)
        await db.commit()

        logger.info(
            "Parcel %s status %s -> %s",
            parcel.tracking_number, previous_status.value, new_status.value,
        )

        try:
            message = compose_message(
                new_status, parcel.tracking_number, parcel.recipient_name, location or notes
            )
            dispatcher.dispatch(parcel.recipient_phone, message, parcel_id=parcel.id)
        except Exception:
            logger.exception("Could not dispatch SMS for parcel %s", parcel.tracking_number)

        return parcel
