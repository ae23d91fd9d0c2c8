"""Sound selection service: owns the active registry and evaluates cars against it."""

from __future__ import annotations

import logging
import threading
from functools import lru_cache
from pathlib import Path
from typing import Iterable

from zsounds.core.config import get_settings
from zsounds.core.ontology import CarContext
from zsounds.errors import EvaluationError
from zsounds.providers import load_attribute_provider
from zsounds.sounds import SoundSet
from .engine import RuleEngine
from .loader import load_config
from .registry import ConfigRegistry

logger = logging.getLogger(__name__)


class SoundSelector:
    """Selects sounds for cars using the currently active registry.

    Reloading builds a complete new registry first and only then swaps it
    in, so a failed load leaves the previous registry active and evaluations
    already running keep the registry they started with.
    """

    def __init__(
        self,
        registry: ConfigRegistry | None = None,
        engine: RuleEngine | None = None,
        root_rule: str = "root",
    ):
        self.engine = engine or RuleEngine()
        self.root_rule = root_rule
        self._registry = registry
        self._lock = threading.Lock()

    @property
    def registry(self) -> ConfigRegistry:
        """The active registry."""
        registry = self._registry
        if registry is None:
            raise EvaluationError("No sound configuration has been loaded")
        return registry

    @property
    def loaded(self) -> bool:
        return self._registry is not None

    def reload(self, registry: ConfigRegistry) -> ConfigRegistry | None:
        """Make ``registry`` the active registry.

        Returns:
            The registry that was replaced, if any.
        """
        with self._lock:
            previous, self._registry = self._registry, registry
        logger.info(
            "Activated sound registry with %d rules and %d sounds",
            len(registry.rules),
            len(registry.sounds),
        )
        return previous

    def load(
        self,
        path: str | Path,
        known_car_types: Iterable[str] | None = None,
    ) -> ConfigRegistry:
        """Load a config file or directory and activate it.

        Raises:
            ParseError: If a document is malformed.
            ValidationError: If the rules do not resolve.
        """
        registry = load_config(path, known_car_types)
        self.reload(registry)
        return registry

    def apply(self, root_rule: str, car: CarContext, sound_set: SoundSet) -> None:
        """Apply a named rule for one car into an existing sound set."""
        self.engine.apply_named(root_rule, self.registry, car, sound_set)

    def select(self, car: CarContext, root_rule: str | None = None) -> SoundSet:
        """Evaluate the root rule (or ``root_rule``) for one car."""
        return self.engine.select(root_rule or self.root_rule, self.registry, car)


@lru_cache
def get_selector() -> SoundSelector:
    """Get the process-wide selector, configured from settings."""
    settings = get_settings()
    engine = RuleEngine(attribute_provider=load_attribute_provider(settings.skin_provider))
    selector = SoundSelector(engine=engine, root_rule=settings.root_rule)
    selector.load(settings.config_path, settings.known_car_types)
    return selector
