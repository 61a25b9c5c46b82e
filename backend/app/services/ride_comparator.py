"""Ride comparison service combining all provider estimators."""

import logging
import random
from typing import List, Optional, Protocol, runtime_checkable

from app.cache import get_quote_cache
from app.config import settings
from app.models import RideComparisonResponse, RideEstimate, TripRequest
from app.services.estimators import BaseRideEstimator, build_estimators
from app.services.geo import calculate_distance, estimate_duration
from app.services.uber_client import UberPriceClient

logger = logging.getLogger(__name__)


@runtime_checkable
class RideComparatorInterface(Protocol):
    """
    Interface for ride comparison.
    Endpoints depend on this protocol rather than a concrete comparator.
    """

    def compare_rides(self, request: TripRequest) -> RideComparisonResponse:
        """Compare estimates of every provider available for a trip."""
        ...


class RideComparator:
    """
    Gathers estimates from every provider and keeps those offered in the
    trip's country.

    A provider that fails is logged and skipped, so one broken estimator
    never hides the others.
    """

    def __init__(self, estimators: List[BaseRideEstimator]):
        self.estimators = estimators

    def compare_rides(self, request: TripRequest) -> RideComparisonResponse:
        """
        Build the comparison for one trip.

        Args:
            request: Validated trip request

        Returns:
            Trip distance (m), duration (min) and the eligible estimates
        """
        country = settings.resolve_country(request.country)

        distance = calculate_distance(
            request.pickup.latitude,
            request.pickup.longitude,
            request.dropoff.latitude,
            request.dropoff.longitude,
        )
        duration = estimate_duration(distance)

        all_estimates: List[RideEstimate] = []
        for estimator in self.estimators:
            try:
                all_estimates.extend(
                    estimator.estimate(distance, duration, country, trip=request)
                )
            except Exception:
                logger.exception(f"{estimator.provider} estimator failed; skipping provider")

        available = [e for e in all_estimates if country.offers(e.provider)]

        logger.debug(
            f"Compared {len(available)} of {len(all_estimates)} estimates "
            f"for {country.code} trip of {distance} m"
        )

        return RideComparisonResponse(
            trip_distance=distance,
            trip_duration=duration,
            estimates=available,
        )


def create_ride_comparator(rng: Optional[random.Random] = None) -> RideComparator:
    """Build a comparator wired to the configured Uber API, if any."""
    uber_client = None
    if settings.uber_api_enabled():
        uber_client = UberPriceClient(
            settings.UBER_SERVER_TOKEN,
            base_url=settings.UBER_API_URL,
            timeout=settings.UBER_API_TIMEOUT,
            cache=get_quote_cache(),
        )
    else:
        logger.info("No Uber API token provided, using mock Uber estimates")

    return RideComparator(build_estimators(rng=rng, uber_client=uber_client))


# Singleton instance for default comparator
_default_comparator: Optional[RideComparatorInterface] = None


def get_ride_comparator() -> RideComparatorInterface:
    """
    Get the default ride comparator instance (Singleton pattern).

    Returns:
        Ride comparator implementing RideComparatorInterface
    """
    global _default_comparator
    if _default_comparator is None:
        _default_comparator = create_ride_comparator()
    return _default_comparator
