"""
API v1 Router.

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter
from rapidtransit.app.api.v1.endpoints import auth, parcels, tracking, transports, notifications

router = APIRouter()

router.include_router(auth.router)

# Parcel booking, lifecycle and dashboard
router.include_router(parcels.router)
router.include_router(parcels.dashboard_router)

# Public tracking and cost estimate
router.include_router(tracking.router)

router.include_router(transports.router)
router.include_router(notifications.router)
