"""Domain types describing the cars sounds are selected for."""

from .car import CarContext, DEFAULT_CAR_TYPES

__all__ = [
    "CarContext",
    "DEFAULT_CAR_TYPES",
]
