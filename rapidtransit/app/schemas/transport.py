"""
Transport Pydantic schemas.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator
from datetime import datetime
from typing import Optional
from rapidtransit.app.models.parcel_enums import TransportStatus


class TransportCreate(BaseModel):
    """Schema for scheduling a transport run."""
    operator: str = Field(..., min_length=1, max_length=100)
    vehicle_number: str = Field(..., min_length=1, max_length=50)
    route_from: str = Field(..., min_length=1, max_length=100)
    route_to: str = Field(..., min_length=1, max_length=100)
    departure_time: datetime
    arrival_time: datetime
    capacity: int = Field(default=50, ge=1)
    available_capacity: Optional[int] = Field(default=None, ge=0)
    status: TransportStatus = TransportStatus.SCHEDULED
    current_location: Optional[str] = None

    @model_validator(mode="after")
    def check_capacity_and_times(self):
        if self.available_capacity is None:
            self.available_capacity = self.capacity
        if self.available_capacity > self.capacity:
            raise ValueError("available_capacity cannot exceed capacity")
        if self.arrival_time < self.departure_time:
            raise ValueError("arrival_time cannot be before departure_time")
        return self


class TransportCapacityUpdate(BaseModel):
    available_capacity: int = Field(..., ge=0)


class TransportResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    operator: str
    vehicle_number: str
    route_from: str
    route_to: str
    departure_time: datetime
    arrival_time: datetime
    capacity: int
    available_capacity: int
    status: TransportStatus
    current_location: Optional[str]
    created_at: datetime
    updated_at: datetime
