"""Simulated ride booking."""

import random
import uuid
from typing import Optional

from app.models import BookingConfirmation, BookingRequest, Provider


class UnknownRideError(ValueError):
    """Raised when a ride id does not belong to any known provider."""


def provider_for_ride(ride_id: str) -> Provider:
    """Derive the provider from a ride id such as ``bolt-comfort``."""
    prefix = ride_id.split("-", 1)[0].lower()
    try:
        return Provider(prefix)
    except ValueError:
        raise UnknownRideError(f"Unknown ride id: {ride_id}") from None


def book_ride(request: BookingRequest, rng: Optional[random.Random] = None) -> BookingConfirmation:
    """
    Confirm a booking for a previously compared ride.

    Nothing is sent to the provider; the confirmation only echoes the
    request with a booking id and a pickup ETA.
    """
    provider = provider_for_ride(request.ride_id)
    rng = rng or random.Random()
    eta = rng.randint(2, 8)

    return BookingConfirmation(
        booking_id=f"{provider.value}-booking-{uuid.uuid4().hex[:8]}",
        ride_id=request.ride_id,
        provider=provider,
        payment_method=request.payment_method,
        pickup=request.pickup,
        dropoff=request.dropoff,
        eta=eta,
        arrival_time=f"{eta} min away",
    )
