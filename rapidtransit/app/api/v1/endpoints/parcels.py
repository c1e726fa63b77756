"""
Parcel Booking API Endpoints.

Customers book and view their own parcels; operators and admins move
parcels through their lifecycle.
"""

from typing import List
from fastapi import APIRouter, Depends, status, Path
from sqlalchemy.ext.asyncio import AsyncSession
from rapidtransit.app.db.session import get_db
from rapidtransit.app.core.dependencies import get_current_user
from rapidtransit.app.core.exceptions import ResourceNotFoundError
from rapidtransit.app.core.guards import require_role, OwnershipGuard, STAFF_ROLES
from rapidtransit.app.domain.parcels.lifecycle_service import ParcelLifecycleService
from rapidtransit.app.models.notification import NotificationType
from rapidtransit.app.schemas.parcel import (
    ParcelCreate,
    ParcelStatusUpdate,
    ParcelResponse,
    StatusHistoryResponse,
    DashboardStats,
)
from rapidtransit.app.services.audit import log_event, AuditAction
from rapidtransit.app.services.notification_service import NotificationService
from rapidtransit.app.services.parcel_store import ParcelStore
from rapidtransit.app.services.sms_dispatcher import SmsDispatcher, get_sms_dispatcher

router = APIRouter(prefix="/parcels", tags=["Parcels"])
dashboard_router = APIRouter(prefix="/dashboard", tags=["Dashboard"])
ownership_guard = OwnershipGuard()


async def _get_owned_parcel(db: AsyncSession, parcel_id: int, current_user: dict):
    parcel = await ParcelStore.get_parcel(db, parcel_id)
    if parcel is None:
        raise ResourceNotFoundError("Parcel", parcel_id)
    ownership_guard.enforce(parcel.sender_id, current_user, "parcel")
    return parcel


@router.post("", response_model=ParcelResponse, status_code=status.HTTP_201_CREATED)
async def create_parcel(
    parcel_data: ParcelCreate,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Book a new parcel for the current user.

    The tracking number and estimated cost are assigned by the server.
    A tracking-number collision returns 409 and is safe to retry.
    """
    parcel = await ParcelLifecycleService.create_parcel(
        db,
        parcel_data,
        sender_id=current_user["user_id"],
        sender_name=current_user["display_name"],
    )

    await NotificationService.create_notification(
        db,
        user_id=current_user["user_id"],
        title=f"Parcel {parcel.tracking_number} created",
        message=f"Your parcel to {parcel.delivery_address} has been successfully booked.",
        type=NotificationType.SUCCESS,
        parcel_id=parcel.id,
    )
    await db.commit()

    await log_event(
        db=db,
        action=AuditAction.PARCEL_CREATED,
        actor_id=current_user["user_id"],
        actor_username=current_user.get("sub"),
        metadata={
            "parcel_id": parcel.id,
            "tracking_number": parcel.tracking_number,
            "estimated_cost": parcel.estimated_cost,
        }
    )

    return ParcelResponse.model_validate(parcel)


@router.get("", response_model=List[ParcelResponse])
async def list_my_parcels(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """List the current user's parcels, newest first."""
    parcels = await ParcelStore.list_for_sender(db, current_user["user_id"])
    return [ParcelResponse.model_validate(p) for p in parcels]


@router.get("/{parcel_id}", response_model=ParcelResponse)
async def get_parcel(
    parcel_id: int = Path(..., description="Parcel ID"),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Get one parcel. Customers can only view their own."""
    parcel = await _get_owned_parcel(db, parcel_id, current_user)
    return ParcelResponse.model_validate(parcel)


@router.get("/{parcel_id}/history", response_model=List[StatusHistoryResponse])
async def get_parcel_history(
    parcel_id: int = Path(..., description="Parcel ID"),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Status history of a parcel, newest first."""
    parcel = await _get_owned_parcel(db, parcel_id, current_user)
    history = await ParcelStore.list_history(db, parcel.id)
    return [StatusHistoryResponse.model_validate(h) for h in history]


@router.patch("/{parcel_id}/status", response_model=ParcelResponse)
async def update_parcel_status(
    status_data: ParcelStatusUpdate,
    parcel_id: int = Path(..., description="Parcel ID"),
    current_user: dict = Depends(require_role(STAFF_ROLES)),
    db: AsyncSession = Depends(get_db),
    dispatcher: SmsDispatcher = Depends(get_sms_dispatcher)
):
    """
    Move a parcel to a new status (operators and admins).

    The recipient SMS is sent in the background; its outcome does not
    affect this response.
    """
    parcel = await ParcelLifecycleService.update_status(
        db,
        parcel_id,
        status_data.status,
        dispatcher=dispatcher,
        notes=status_data.notes,
        location=status_data.location,
    )

    await log_event(
        db=db,
        action=AuditAction.PARCEL_STATUS_CHANGED,
        actor_id=current_user["user_id"],
        actor_username=current_user.get("sub"),
        metadata={
            "parcel_id": parcel.id,
            "tracking_number": parcel.tracking_number,
            "status": parcel.status.value,
        }
    )

    return ParcelResponse.model_validate(parcel)


@dashboard_router.get("/stats", response_model=DashboardStats)
async def get_dashboard_stats(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Parcel counts for the current user's dashboard."""
    stats = await ParcelStore.sender_stats(db, current_user["user_id"])
    return DashboardStats(**stats)
