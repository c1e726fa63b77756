"""
Public tracking and pricing endpoints (no authentication).
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from rapidtransit.app.db.session import get_db
from rapidtransit.app.core.exceptions import ResourceNotFoundError
from rapidtransit.app.domain.pricing.cost_estimator import estimate
from rapidtransit.app.schemas.parcel import (
    TrackingResponse,
    ParcelResponse,
    StatusHistoryResponse,
    CostEstimateRequest,
    CostEstimateResponse,
)
from rapidtransit.app.services.parcel_store import ParcelStore

router = APIRouter(tags=["Tracking"])


@router.get("/track/{tracking_number}", response_model=TrackingResponse)
async def track_parcel(
    tracking_number: str,
    db: AsyncSession = Depends(get_db)
):
    """Look up a parcel by tracking number with its status history."""
    parcel = await ParcelStore.get_by_tracking_number(db, tracking_number)
    if parcel is None:
        raise ResourceNotFoundError("Parcel", tracking_number)

    history = await ParcelStore.list_history(db, parcel.id)
    return TrackingResponse(
        parcel=ParcelResponse.model_validate(parcel),
        status_history=[StatusHistoryResponse.model_validate(h) for h in history],
    )


@router.post("/estimate-cost", response_model=CostEstimateResponse)
async def estimate_cost(request: CostEstimateRequest):
    """Price a parcel before booking."""
    return CostEstimateResponse(
        estimated_cost=estimate(request.parcel_size, request.priority, request.distance)
    )
