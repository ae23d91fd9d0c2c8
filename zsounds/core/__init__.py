"""Core configuration, domain types and shared utilities."""

from .config import Settings, get_settings
from .log import configure_logging
from .ontology import CarContext, DEFAULT_CAR_TYPES
from .rng import RandomSource, SeededRNG

__all__ = [
    "Settings",
    "get_settings",
    "configure_logging",
    "CarContext",
    "DEFAULT_CAR_TYPES",
    "RandomSource",
    "SeededRNG",
]
