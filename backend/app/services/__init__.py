"""Services package for RideCompare."""

from .ride_comparator import (
    get_ride_comparator,
    RideComparatorInterface,
    RideComparator
)

__all__ = [
    'get_ride_comparator',
    'RideComparatorInterface',
    'RideComparator'
]
