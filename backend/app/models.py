"""Models for the RideCompare fare estimation service."""

import math
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class Provider(str, Enum):
    UBER = "uber"
    BOLT = "bolt"
    YANGO = "yango"

    def __str__(self):
        return self.value


class RideCategory(str, Enum):
    ECONOMY = "economy"
    PREMIUM = "premium"
    LUXURY = "luxury"

    def __str__(self):
        return self.value


class CamelModel(BaseModel):
    """Base model exchanging camelCase JSON with the web client."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Location(CamelModel):
    """A geocoded point chosen by the user."""
    model_config = ConfigDict(frozen=True)

    address: str = Field(..., min_length=1, description="Human readable address")
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)

    @field_validator('latitude', 'longitude', mode='before')
    @classmethod
    def validate_coordinate(cls, v):
        # Reject "40.7" and true/false, which pydantic would otherwise coerce
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise ValueError("Coordinate must be a number")
        try:
            finite = math.isfinite(v)
        except OverflowError:
            # Integers too large for a float
            raise ValueError("Coordinate must be a number") from None
        if not finite:
            raise ValueError("Coordinate must be finite")
        return v

    @field_validator('address')
    @classmethod
    def validate_address(cls, v):
        if not v.strip():
            raise ValueError("Address is required")
        return v


class TripRequest(CamelModel):
    """Request model for ride comparison."""
    pickup: Location
    dropoff: Location
    country: Optional[str] = Field(None, description="ISO country code")


class CountryConfig(CamelModel):
    """Currency, provider availability and price level of one country."""
    model_config = ConfigDict(frozen=True)

    code: str
    name: str
    currency: str
    currency_symbol: str
    services: List[Provider]
    price_multiplier: float = Field(..., gt=0)

    def offers(self, provider: Provider) -> bool:
        return provider in self.services


class RideEstimate(CamelModel):
    """One provider service tier with its estimated fare."""
    id: str
    provider: Provider
    service_name: str
    description: str
    price: float
    price_range: str
    currency: str = "USD"
    arrival_time: str
    capacity: int
    category: RideCategory = RideCategory.ECONOMY
    estimated_duration: int = Field(..., description="Trip duration in minutes")
    distance: int = Field(..., description="Trip distance in meters")
    surge: Optional[float] = Field(None, ge=1.0)
    rating: Optional[float] = None
    eta: Optional[int] = Field(None, description="Minutes until pickup")


class RideComparisonResponse(CamelModel):
    """Response model for ride comparison."""
    trip_distance: int = Field(..., description="Trip distance in meters")
    trip_duration: int = Field(..., description="Trip duration in minutes")
    estimates: List[RideEstimate]


class BookingRequest(CamelModel):
    """Request to book one of the compared rides."""
    ride_id: str = Field(..., min_length=1)
    pickup: Location
    dropoff: Location
    payment_method: str = "card"


class BookingConfirmation(CamelModel):
    """Simulated booking acknowledgement."""
    booking_id: str
    ride_id: str
    provider: Provider
    status: str = "confirmed"
    payment_method: str
    pickup: Location
    dropoff: Location
    eta: int
    arrival_time: str
