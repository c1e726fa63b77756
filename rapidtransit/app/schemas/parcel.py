"""
Parcel Pydantic schemas.

Defines request and response models for parcel booking and tracking.
"""

from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Optional, List
from rapidtransit.app.models.parcel_enums import ParcelStatus, ParcelSize, ParcelPriority


class ParcelCreate(BaseModel):
    """Schema for booking a new parcel. Sender identity comes from the auth token."""
    sender_phone: str = Field(..., min_length=1, max_length=32)
    pickup_address: str = Field(..., min_length=1)
    recipient_name: str = Field(..., min_length=1, max_length=200)
    recipient_phone: str = Field(..., min_length=1, max_length=32)
    delivery_address: str = Field(..., min_length=1)
    parcel_size: ParcelSize
    priority: ParcelPriority
    description: Optional[str] = None
    distance_km: Optional[float] = Field(None, gt=0, description="Route distance used for pricing (defaults to 100)")
    transport_id: Optional[int] = None
    scheduled_pickup_at: Optional[datetime] = None
    estimated_delivery_at: Optional[datetime] = None


class ParcelStatusUpdate(BaseModel):
    """Schema for moving a parcel to a new status."""
    status: ParcelStatus
    notes: Optional[str] = None
    location: Optional[str] = None


class ParcelResponse(BaseModel):
    """Schema for parcel response."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    tracking_number: str
    sender_id: int
    sender_name: str
    sender_phone: str
    pickup_address: str
    recipient_name: str
    recipient_phone: str
    delivery_address: str
    parcel_size: ParcelSize
    priority: ParcelPriority
    description: Optional[str]
    estimated_cost: float
    status: ParcelStatus
    transport_id: Optional[int]
    scheduled_pickup_at: Optional[datetime]
    picked_up_at: Optional[datetime]
    delivered_at: Optional[datetime]
    estimated_delivery_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime


class StatusHistoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    parcel_id: int
    status: ParcelStatus
    location: Optional[str]
    notes: Optional[str]
    timestamp: datetime


class TrackingResponse(BaseModel):
    """Public tracking view: the parcel and its history, newest first."""
    parcel: ParcelResponse
    status_history: List[StatusHistoryResponse]


class CostEstimateRequest(BaseModel):
    # Missing or unknown sizes/priorities are priced at baseline
    parcel_size: Optional[str] = None
    priority: Optional[str] = None
    distance: Optional[float] = Field(None, gt=0)


class CostEstimateResponse(BaseModel):
    estimated_cost: float


class DashboardStats(BaseModel):
    total: int
    in_transit: int
    delivered: int
    pending: int
