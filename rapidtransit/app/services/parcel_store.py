"""
Parcel persistence operations.

Plain reads and writes over parcels and their status history. Writes only
add or flush; committing is left to the caller so that a parcel update and
its history row land in one transaction.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import select, desc, func, case
from sqlalchemy.ext.asyncio import AsyncSession

from rapidtransit.app.models.parcel import Parcel
from rapidtransit.app.models.parcel_enums import ParcelStatus
from rapidtransit.app.models.parcel_status_history import ParcelStatusHistory


class ParcelStore:

    @staticmethod
    async def insert_parcel(db: AsyncSession, parcel: Parcel) -> Parcel:
        db.add(parcel)
        await db.flush()
        return parcel

    @staticmethod
    async def get_parcel(db: AsyncSession, parcel_id: int) -> Optional[Parcel]:
        result = await db.execute(select(Parcel).where(Parcel.id == parcel_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_tracking_number(db: AsyncSession, tracking_number: str) -> Optional[Parcel]:
        result = await db.execute(
            select(Parcel).where(Parcel.tracking_number == tracking_number)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def list_for_sender(db: AsyncSession, sender_id: int) -> List[Parcel]:
        result = await db.execute(
            select(Parcel)
            .where(Parcel.sender_id == sender_id)
            .order_by(desc(Parcel.created_at), desc(Parcel.id))
        )
        return list(result.scalars().all())

    @staticmethod
    def update_fields(parcel: Parcel, fields: Dict[str, Any]) -> Parcel:
        for field, value in fields.items():
            setattr(parcel, field, value)
        return parcel

    @staticmethod
    async def insert_history(
        db: AsyncSession,
        parcel_id: int,
        status: ParcelStatus,
        notes: Optional[str] = None,
        location: Optional[str] = None,
    ) -> ParcelStatusHistory:
        entry = ParcelStatusHistory(
            parcel_id=parcel_id,
            status=status,
            notes=notes,
            location=location,
        )
        db.add(entry)
        await db.flush()
        return entry

    @staticmethod
    async def list_history(db: AsyncSession, parcel_id: int) -> List[ParcelStatusHistory]:
        """Status history, newest first."""
        result = await db.execute(
            select(ParcelStatusHistory)
            .where(ParcelStatusHistory.parcel_id == parcel_id)
            .order_by(desc(ParcelStatusHistory.timestamp), desc(ParcelStatusHistory.id))
        )
        return list(result.scalars().all())

    @staticmethod
    async def sender_stats(db: AsyncSession, sender_id: int) -> Dict[str, int]:
        """Counts of a sender's parcels for the dashboard."""
        def count_status(status: ParcelStatus):
            return func.coalesce(func.sum(case((Parcel.status == status, 1), else_=0)), 0)

        result = await db.execute(
            select(
                func.count(Parcel.id),
                count_status(ParcelStatus.IN_TRANSIT),
                count_status(ParcelStatus.DELIVERED),
                count_status(ParcelStatus.PENDING),
            ).where(Parcel.sender_id == sender_id)
        )
        total, in_transit, delivered, pending = result.one()
        return {
            "total": int(total or 0),
            "in_transit": int(in_transit),
            "delivered": int(delivered),
            "pending": int(pending),
        }
