"""
Transport Schedule API Endpoints.

Anyone can browse scheduled runs; operators and admins manage them.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query, Path
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, asc
from rapidtransit.app.db.session import get_db
from rapidtransit.app.core.exceptions import ResourceNotFoundError
from rapidtransit.app.core.guards import require_role, STAFF_ROLES
from rapidtransit.app.models.base import utcnow
from rapidtransit.app.models.parcel_enums import TransportStatus
from rapidtransit.app.models.transport import Transport
from rapidtransit.app.schemas.transport import TransportCreate, TransportCapacityUpdate, TransportResponse
from rapidtransit.app.services.audit import log_event, AuditAction

router = APIRouter(prefix="/transports", tags=["Transports"])


def _contains(text: str) -> str:
    """Substring LIKE pattern; % and _ in the input match literally."""
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


@router.get("", response_model=List[TransportResponse])
async def list_transports(
    route_from: Optional[str] = Query(None, alias="from"),
    route_to: Optional[str] = Query(None, alias="to"),
    db: AsyncSession = Depends(get_db)
):
    """
    List transports ordered by departure.

    With both `from` and `to`, only scheduled runs whose route endpoints
    contain those strings are returned.
    """
    query = select(Transport)
    if route_from and route_to:
        query = query.where(
            Transport.route_from.ilike(_contains(route_from), escape="\\"),
            Transport.route_to.ilike(_contains(route_to), escape="\\"),
            Transport.status == TransportStatus.SCHEDULED
        )
    query = query.order_by(asc(Transport.departure_time))

    result = await db.execute(query)
    return [TransportResponse.model_validate(t) for t in result.scalars().all()]


@router.post("", response_model=TransportResponse, status_code=status.HTTP_201_CREATED)
async def create_transport(
    transport_data: TransportCreate,
    current_user: dict = Depends(require_role(STAFF_ROLES)),
    db: AsyncSession = Depends(get_db)
):
    """Schedule a transport run (operators and admins)."""
    transport = Transport(**transport_data.model_dump())
    db.add(transport)
    await db.commit()
    await db.refresh(transport)

    await log_event(
        db=db,
        action=AuditAction.TRANSPORT_CREATED,
        actor_id=current_user["user_id"],
        actor_username=current_user.get("sub"),
        metadata={
            "transport_id": transport.id,
            "route": f"{transport.route_from} -> {transport.route_to}",
        }
    )

    return TransportResponse.model_validate(transport)


@router.patch("/{transport_id}/capacity", response_model=TransportResponse)
async def update_transport_capacity(
    capacity_data: TransportCapacityUpdate,
    transport_id: int = Path(..., description="Transport ID"),
    current_user: dict = Depends(require_role(STAFF_ROLES)),
    db: AsyncSession = Depends(get_db)
):
    """Set the remaining capacity of a transport."""
    result = await db.execute(select(Transport).where(Transport.id == transport_id))
    transport = result.scalar_one_or_none()

    if not transport:
        raise ResourceNotFoundError("Transport", transport_id)

    if capacity_data.available_capacity > transport.capacity:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"available_capacity cannot exceed capacity ({transport.capacity})"
        )

    transport.available_capacity = capacity_data.available_capacity
    transport.updated_at = utcnow()
    await db.commit()
    await db.refresh(transport)

    return TransportResponse.model_validate(transport)
