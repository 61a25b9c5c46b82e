"""Per-provider fare estimators."""

import logging
import math
import random
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional, Protocol, Tuple, runtime_checkable

from app.models import CountryConfig, Provider, RideCategory, RideEstimate, TripRequest
from app.services.geo import round_half_up
from app.services.uber_client import UberAPIError, UberPriceClient

logger = logging.getLogger(__name__)

METERS_PER_MILE = 1609.344
DEFAULT_CAPACITY = 4


@dataclass(frozen=True)
class TierProfile:
    """Constants for one service tier of a provider."""
    ride_id: str
    service_name: str
    description: str
    category: RideCategory
    # Multiplier on the provider base price before surge and country level
    uplift: float
    # (low, high) multipliers for the quoted range; None means price-1 .. price+2
    range_factors: Optional[Tuple[float, float]]
    eta_min: int
    eta_span: int
    rating_min: float
    rating_span: float


@dataclass(frozen=True)
class ProviderProfile:
    """Pricing constants for one provider."""
    provider: Provider
    per_km_rate: float
    flat_fee: float
    # Surge applies when a uniform draw exceeds this value
    surge_threshold: float
    surge_min: float
    surge_span: float
    tiers: Tuple[TierProfile, ...]

    def base_price(self, distance_m: int) -> int:
        return round_half_up(distance_m / 1000 * self.per_km_rate + self.flat_fee)


PROVIDER_PROFILES: Dict[Provider, ProviderProfile] = {
    Provider.UBER: ProviderProfile(
        provider=Provider.UBER,
        per_km_rate=3.5,
        flat_fee=5.0,
        surge_threshold=0.7,
        surge_min=1.2,
        surge_span=0.8,
        tiers=(
            TierProfile("uber-x", "UberX", "Affordable everyday rides",
                        RideCategory.ECONOMY, 1.0, None, 2, 4, 4.7, 0.3),
            TierProfile("uber-comfort", "Uber Comfort", "Newer cars, extra space",
                        RideCategory.PREMIUM, 1.35, (1.25, 1.5), 3, 3, 4.8, 0.2),
        ),
    ),
    Provider.BOLT: ProviderProfile(
        provider=Provider.BOLT,
        per_km_rate=3.2,
        flat_fee=4.5,
        surge_threshold=0.8,
        surge_min=1.1,
        surge_span=0.4,
        tiers=(
            TierProfile("bolt-standard", "Bolt", "Fast & affordable",
                        RideCategory.ECONOMY, 1.0, None, 4, 4, 4.5, 0.4),
            TierProfile("bolt-comfort", "Bolt Comfort", "More comfortable rides",
                        RideCategory.PREMIUM, 1.25, (1.15, 1.35), 5, 3, 4.6, 0.3),
        ),
    ),
    Provider.YANGO: ProviderProfile(
        provider=Provider.YANGO,
        per_km_rate=3.0,
        flat_fee=4.0,
        surge_threshold=0.85,
        surge_min=1.05,
        surge_span=0.3,
        tiers=(
            TierProfile("yango-economy", "Economy", "Budget-friendly option",
                        RideCategory.ECONOMY, 1.0, None, 6, 5, 4.3, 0.5),
            TierProfile("yango-comfort", "Comfort", "More comfort for your journey",
                        RideCategory.PREMIUM, 1.3, (1.2, 1.4), 7, 4, 4.4, 0.4),
        ),
    ),
}


@runtime_checkable
class RideEstimatorInterface(Protocol):
    """Contract shared by all provider estimators."""

    provider: Provider

    def estimate(
        self,
        distance_m: int,
        duration_min: int,
        country: CountryConfig,
        trip: Optional[TripRequest] = None,
    ) -> List[RideEstimate]:
        """Produce the service tiers offered for a trip."""
        ...


class BaseRideEstimator(ABC):
    """Abstract base class for provider estimators."""

    provider: Provider

    @abstractmethod
    def estimate(
        self,
        distance_m: int,
        duration_min: int,
        country: CountryConfig,
        trip: Optional[TripRequest] = None,
    ) -> List[RideEstimate]:
        pass


class MockRideEstimator(BaseRideEstimator):
    """
    Synthesizes estimates from a provider's constant table.

    One surge value is drawn per call and shared by every tier. Randomness
    comes from the injected ``rng`` so results can be reproduced in tests.
    """

    def __init__(self, profile: ProviderProfile, rng: Optional[random.Random] = None):
        self.profile = profile
        self.provider = profile.provider
        self.rng = rng or random.Random()

    def draw_surge(self) -> float:
        p = self.profile
        if self.rng.random() > p.surge_threshold:
            return p.surge_min + self.rng.random() * p.surge_span
        return 1.0

    def _draw_eta(self, tier: TierProfile) -> int:
        return math.floor(self.rng.random() * tier.eta_span) + tier.eta_min

    def _draw_rating(self, tier: TierProfile) -> float:
        return round(tier.rating_min + self.rng.random() * tier.rating_span, 2)

    def estimate(
        self,
        distance_m: int,
        duration_min: int,
        country: CountryConfig,
        trip: Optional[TripRequest] = None,
    ) -> List[RideEstimate]:
        base_price = self.profile.base_price(distance_m)
        surge = self.draw_surge()

        def scaled(factor: float) -> int:
            # Order matters at .5 boundaries: ((base * factor) * surge) * multiplier
            return round_half_up(base_price * factor * surge * country.price_multiplier)

        estimates = []
        for tier in self.profile.tiers:
            price = scaled(tier.uplift)
            if tier.range_factors is None:
                low, high = price - 1, price + 2
            else:
                low, high = scaled(tier.range_factors[0]), scaled(tier.range_factors[1])

            eta = self._draw_eta(tier)
            estimates.append(RideEstimate(
                id=tier.ride_id,
                provider=self.provider,
                service_name=tier.service_name,
                description=tier.description,
                price=price,
                price_range=f"{country.currency_symbol}{low}-{high}",
                currency=country.currency,
                arrival_time=f"{eta} min away",
                capacity=DEFAULT_CAPACITY,
                category=tier.category,
                estimated_duration=duration_min,
                distance=distance_m,
                surge=surge if surge > 1.0 else None,
                rating=self._draw_rating(tier),
                eta=eta,
            ))
        return estimates


UBER_DESCRIPTIONS = {
    "UberX": "Affordable everyday rides",
    "UberXL": "Larger vehicles for groups",
    "Uber Comfort": "Newer cars, extra space",
    "UberBLACK": "Premium rides with professional drivers",
    "UberSUV": "Premium SUVs for larger groups",
}


def uber_description(display_name: str) -> str:
    return UBER_DESCRIPTIONS.get(display_name, "Ride with Uber")


def uber_category(display_name: str) -> RideCategory:
    if "BLACK" in display_name or "SUV" in display_name:
        return RideCategory.LUXURY
    if "Comfort" in display_name or "XL" in display_name:
        return RideCategory.PREMIUM
    return RideCategory.ECONOMY


def _price_from_quote(item: dict) -> float:
    if item.get("high_estimate"):
        return float(item["high_estimate"])
    # "$15-18" -> 18
    numbers = re.findall(r"\d+(?:\.\d+)?", item.get("estimate") or "")
    return float(numbers[-1]) if numbers else 0.0


class UberRideEstimator(MockRideEstimator):
    """
    Uber estimator that prefers live quotes from the Uber API.

    Without a client, or whenever the API call fails, it falls back to
    the synthesized estimates.
    """

    def __init__(
        self,
        profile: ProviderProfile,
        rng: Optional[random.Random] = None,
        client: Optional[UberPriceClient] = None,
    ):
        super().__init__(profile, rng)
        self.client = client

    def estimate(
        self,
        distance_m: int,
        duration_min: int,
        country: CountryConfig,
        trip: Optional[TripRequest] = None,
    ) -> List[RideEstimate]:
        if self.client is None or trip is None:
            return super().estimate(distance_m, duration_min, country, trip)

        try:
            prices = self.client.get_prices(trip.pickup, trip.dropoff)
            return [
                self._from_quote(item, index, distance_m, duration_min)
                for index, item in enumerate(prices)
            ]
        except UberAPIError as e:
            logger.warning(f"{e}; using mock Uber estimates")
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Unexpected Uber API payload ({e}); using mock Uber estimates")

        return super().estimate(distance_m, duration_min, country, trip)

    def _from_quote(self, item: dict, index: int, distance_m: int, duration_min: int) -> RideEstimate:
        display_name = item.get("display_name") or "UberX"
        if item.get("low_estimate") is not None and item.get("high_estimate") is not None:
            fallback_range = f"${item['low_estimate']}-{item['high_estimate']}"
        else:
            fallback_range = ""

        # The API reports seconds and miles
        duration = item.get("duration")
        distance = item.get("distance")
        eta = math.floor(self.rng.random() * 5) + 2

        return RideEstimate(
            id=f"uber-{index}",
            provider=Provider.UBER,
            service_name=item.get("localized_display_name") or display_name,
            description=uber_description(display_name),
            price=_price_from_quote(item),
            price_range=item.get("estimate") or fallback_range,
            currency=item.get("currency_code") or "USD",
            arrival_time=f"{eta} min away",
            capacity=DEFAULT_CAPACITY,
            category=uber_category(display_name),
            estimated_duration=round_half_up(duration / 60) if duration else duration_min,
            distance=round_half_up(distance * METERS_PER_MILE) if distance else distance_m,
            surge=item.get("surge_multiplier") if (item.get("surge_multiplier") or 1.0) > 1.0 else None,
            eta=eta,
        )


def build_estimators(
    rng: Optional[random.Random] = None,
    uber_client: Optional[UberPriceClient] = None,
) -> List[BaseRideEstimator]:
    """Create one estimator per provider, sharing a random source."""
    rng = rng or random.Random()
    return [
        UberRideEstimator(PROVIDER_PROFILES[Provider.UBER], rng, uber_client),
        MockRideEstimator(PROVIDER_PROFILES[Provider.BOLT], rng),
        MockRideEstimator(PROVIDER_PROFILES[Provider.YANGO], rng),
    ]
