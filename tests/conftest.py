"""Pytest fixtures for test suite."""

import pytest
from pathlib import Path
from typing import Any, Iterable

from zsounds.core.ontology import CarContext
from zsounds.rules import ConfigRegistry, RuleEngine
from zsounds.core.rng import SeededRNG


# =============================================================================
# Helpers
# =============================================================================


class ScriptedRNG:
    """Random source that returns a fixed sequence of values."""

    def __init__(self, values: Iterable[float]):
        self.values = list(values)

    def random(self) -> float:
        return self.values.pop(0)


# =============================================================================
# Core Fixtures
# =============================================================================


@pytest.fixture
def data_dir() -> Path:
    """Path to the bundled sample configuration."""
    return Path(__file__).parent.parent / "zsounds" / "data"


@pytest.fixture
def sound_tokens() -> dict[str, Any]:
    """Sound section with one sound per slot type used in tests."""
    return {
        "horn1": {"type": "HornHit", "filename": "horn1.ogg"},
        "horn2": {"type": "HornHit", "filename": "horn2.ogg"},
        "bell": {"type": "Bell", "filename": "bell.ogg"},
        "idle": {"type": "EngineLoop", "filename": "idle.ogg", "minPitch": 0.5, "maxPitch": 1.5},
    }


@pytest.fixture
def rule_tokens() -> dict[str, Any]:
    """Rule section: a DE6-only horn choice under ``main``."""
    return {
        "main": {
            "type": "AllOf",
            "rules": [
                {
                    "type": "If",
                    "property": "CarType",
                    "value": "DE6",
                    "rule": {
                        "type": "OneOf",
                        "rules": [{"type": "Sound", "name": "horn1"}],
                        "weights": [1],
                    },
                },
            ],
        },
    }


@pytest.fixture
def registry(rule_tokens: dict, sound_tokens: dict) -> ConfigRegistry:
    """Validated registry built from the rule and sound fixtures."""
    return ConfigRegistry.from_mapping(rule_tokens, sound_tokens)


@pytest.fixture
def seeded_rng() -> SeededRNG:
    """Reproducible random source."""
    return SeededRNG(seed=1234, name="test")


@pytest.fixture
def engine(seeded_rng: SeededRNG) -> RuleEngine:
    """Rule engine with a seeded random source and no attribute provider."""
    return RuleEngine(rng=seeded_rng)


@pytest.fixture
def de6() -> CarContext:
    """A DE6 locomotive."""
    return CarContext(car_type="DE6", car_id="car-de6")


@pytest.fixture
def de2() -> CarContext:
    """A DE2 locomotive."""
    return CarContext(car_type="DE2", car_id="car-de2")


@pytest.fixture
def scripted_rng():
    """Factory for random sources that replay given values."""
    return ScriptedRNG
