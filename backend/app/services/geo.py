"""Great-circle distance and trip duration helpers."""

import math

EARTH_RADIUS_M = 6371e3

# Minutes per meter. Equivalent to roughly 4 km/h; kept because existing
# clients display durations computed with it.
MINUTES_PER_METER = 0.25


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with halves going up (not to even)."""
    return int(math.floor(value + 0.5))


def calculate_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> int:
    """
    Haversine distance between two points given in degrees.

    Returns:
        Distance in whole meters
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    a = min(a, 1.0)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return round_half_up(EARTH_RADIUS_M * c)


def estimate_duration(distance_m: int) -> int:
    """Trip duration in minutes for a distance in meters."""
    return round_half_up(distance_m * MINUTES_PER_METER)
