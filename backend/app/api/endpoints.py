"""API endpoints for ride comparison."""

import logging

from fastapi import APIRouter, HTTPException, Depends

from app.models import (
    BookingConfirmation,
    BookingRequest,
    CountryConfig,
    RideComparisonResponse,
    TripRequest,
)
from app.services import get_ride_comparator
from app.services.booking import book_ride
from app.services.ride_comparator import RideComparatorInterface
from app.config import settings
from app.database import get_db_manager

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Ride Comparison"])


def get_comparator() -> RideComparatorInterface:
    """
    Dependency injection for the ride comparator.
    Returns any implementation of RideComparatorInterface.
    """
    return get_ride_comparator()


@router.post(
    "/rides/compare",
    response_model=RideComparisonResponse,
    response_model_exclude_none=True,
)
def compare_rides(
    request: TripRequest,
    comparator: RideComparatorInterface = Depends(get_comparator)
) -> RideComparisonResponse:
    """
    Compare fare estimates of all providers available for a trip.

    Declared sync so the optional Uber API call runs in the threadpool.

    Raises:
        HTTPException: 400 for invalid trips, 500 for unexpected failures
    """
    try:
        return comparator.compare_rides(request)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.exception("Error comparing rides")
        raise HTTPException(status_code=500, detail="Failed to get ride estimates")


@router.post("/rides/book", response_model=BookingConfirmation)
async def book(request: BookingRequest) -> BookingConfirmation:
    """Book one of the compared rides."""
    try:
        confirmation = book_ride(request)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    logger.info(f"Booked {confirmation.ride_id} as {confirmation.booking_id}")
    return confirmation


@router.get("/countries")
async def list_countries():
    """List every supported country with its currency and providers."""
    configs = settings.get_country_configs()
    return {
        "countries": [c.model_dump(by_alias=True) for c in configs.values()],
        "default_country": settings.DEFAULT_COUNTRY,
        "total_countries": len(configs),
    }


@router.get("/countries/{code}", response_model=CountryConfig)
async def get_country(code: str) -> CountryConfig:
    """Resolve a country code; unknown codes get the default country."""
    return settings.resolve_country(code)


@router.get("/health")
async def health_check():
    """Health check endpoint including database status."""
    db_status = "healthy"
    try:
        countries_count = len(get_db_manager().get_all_countries())
    except Exception as e:
        db_status = f"unhealthy: {str(e)}"
        countries_count = 0

    return {
        "status": "healthy",
        "service": settings.API_TITLE,
        "datastore_status": db_status,
        "countries_count": countries_count,
        "uber_api": "enabled" if settings.uber_api_enabled() else "mock",
    }
