"""Rule evaluation: walk a validated rule tree and fill a sound set."""

from __future__ import annotations

import logging
from functools import lru_cache

from zsounds.core.config import get_settings
from zsounds.core.ontology import CarContext
from zsounds.core.rng import RandomSource, SeededRNG
from zsounds.errors import EvaluationError
from zsounds.providers import AttributeProvider
from zsounds.sounds import SoundSet
from .registry import ConfigRegistry
from .schema import (
    AllOfRule,
    IfProperty,
    IfRule,
    OneOfRule,
    RefRule,
    RuleNode,
    SoundRule,
)

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_default_rng() -> SeededRNG:
    """Process-wide random source for ``OneOf`` choices."""
    return SeededRNG(seed=get_settings().random_seed, name="one_of")


class RuleEngine:
    """Applies rule trees to cars.

    The engine holds no per-car state: one engine can serve many threads as
    long as each evaluation gets its own ``SoundSet``.
    """

    def __init__(
        self,
        rng: RandomSource | None = None,
        attribute_provider: AttributeProvider | None = None,
    ):
        self.rng = rng if rng is not None else get_default_rng()
        self.attribute_provider = attribute_provider

    def apply(
        self,
        node: RuleNode,
        registry: ConfigRegistry,
        car: CarContext,
        sound_set: SoundSet,
    ) -> None:
        """Apply a rule tree, writing selected sounds into ``sound_set``.

        The registry must have been validated.

        Raises:
            EvaluationError: If a name does not resolve.
        """
        if isinstance(node, AllOfRule):
            for rule in node.rules:
                self.apply(rule, registry, car, sound_set)

        elif isinstance(node, OneOfRule):
            choice = self._choose(node)
            if choice is not None:
                self.apply(choice, registry, car, sound_set)

        elif isinstance(node, IfRule):
            if self._applicable(node, car):
                self.apply(node.rule, registry, car, sound_set)

        elif isinstance(node, RefRule):
            target = registry.get_rule(node.name)
            if target is None:
                logger.error("Rule %r is not defined; was the registry validated?", node.name)
                raise EvaluationError(f'Reference to unknown rule "{node.name}"')
            self.apply(target, registry, car, sound_set)

        elif isinstance(node, SoundRule):
            sound = registry.get_sound(node.name)
            if sound is None:
                logger.error("Sound %r is not defined; was the registry validated?", node.name)
                raise EvaluationError(f'Reference to unknown sound "{node.name}"')
            sound.apply(sound_set)

        else:
            raise TypeError(f"Unhandled rule node {type(node).__name__}")

    def apply_named(
        self,
        root_rule: str,
        registry: ConfigRegistry,
        car: CarContext,
        sound_set: SoundSet,
    ) -> None:
        """Apply the named rule ``root_rule`` as if through a ``Ref``."""
        self.apply(RefRule(name=root_rule), registry, car, sound_set)

    def select(self, root_rule: str, registry: ConfigRegistry, car: CarContext) -> SoundSet:
        """Evaluate ``root_rule`` for one car into a fresh sound set."""
        sound_set = SoundSet()
        self.apply_named(root_rule, registry, car, sound_set)
        logger.debug("Selected sounds for %s %s: %s", car.car_type, car.car_id, sound_set.names())
        return sound_set

    def _choose(self, node: OneOfRule) -> RuleNode | None:
        """Pick the first rule whose threshold is at or above a uniform draw."""
        r = self.rng.random()
        thresholds = node.thresholds
        index = next((i for i, t in enumerate(thresholds) if r <= t), None)
        logger.debug(
            "OneOf weights=%s thresholds=%s random=%s index=%s",
            node.weights,
            thresholds,
            r,
            index,
        )
        if index is None:
            return None
        return node.rules[index]

    def _applicable(self, node: IfRule, car: CarContext) -> bool:
        """Check an ``If`` rule's condition against the car."""
        if node.property == IfProperty.CAR_TYPE:
            actual = car.car_type
        elif node.property == IfProperty.SKIN_NAME:
            if self.attribute_provider is None:
                return False
            actual = self.attribute_provider.lookup(car.car_id)
        else:
            raise TypeError(f"Unhandled If property {node.property!r}")

        return actual is not None and actual.lower() == node.value.lower()
