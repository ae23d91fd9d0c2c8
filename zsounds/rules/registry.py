"""Registry of named rules and named sounds.

A registry is built once from a configuration document, validated as a
whole, and then only read. Reconfiguring means building a new registry and
swapping it in (see ``SoundSelector.reload``).
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from zsounds.core.ontology import DEFAULT_CAR_TYPES
from zsounds.errors import ParseError
from zsounds.sounds import SoundDefinition, parse_sounds
from .formatting import describe_rule, indent
from .parser import parse_rules
from .schema import RuleNode
from .validation import validate_registry

logger = logging.getLogger(__name__)


class ConfigRegistry(BaseModel):
    """Named rules and sounds used to resolve ``Ref`` and ``Sound`` nodes.

    ``known_car_types`` holds the lower-cased car type tags an ``If CarType``
    rule may test for.
    """

    model_config = ConfigDict(frozen=True)

    rules: dict[str, RuleNode] = Field(default_factory=dict)
    sounds: dict[str, SoundDefinition] = Field(default_factory=dict)
    known_car_types: frozenset[str] = Field(
        default_factory=lambda: frozenset(t.lower() for t in DEFAULT_CAR_TYPES)
    )

    @field_validator("known_car_types", mode="before")
    @classmethod
    def _lower_car_types(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple, set, frozenset)):
            return frozenset(str(v).lower() for v in value)
        return value

    @classmethod
    def from_mapping(
        cls,
        rules: dict[str, Any] | None,
        sounds: dict[str, Any] | None,
        known_car_types: Iterable[str] | None = None,
    ) -> ConfigRegistry:
        """Parse rule and sound tokens into a validated registry.

        Raises:
            ParseError: If any token is malformed.
            ValidationError: If the parsed rules do not resolve.
        """
        data: dict[str, Any] = {
            "rules": parse_rules(rules),
            "sounds": parse_sounds(sounds),
        }
        if known_car_types is not None:
            data["known_car_types"] = list(known_car_types)

        try:
            registry = cls(**data)
        except PydanticValidationError as e:
            raise ParseError.from_pydantic(e) from e
        registry.validate_all()

        logger.info(
            "Loaded sound registry with %d rules and %d sounds",
            len(registry.rules),
            len(registry.sounds),
        )
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Sound rules:\n%s", registry.describe())
        return registry

    @classmethod
    def from_document(
        cls,
        document: dict[str, Any],
        known_car_types: Iterable[str] | None = None,
    ) -> ConfigRegistry:
        """Build a registry from a ``{"sounds": ..., "rules": ...}`` document."""
        if not isinstance(document, dict):
            raise ParseError("A sound configuration must be a mapping")
        return cls.from_mapping(
            document.get("rules"),
            document.get("sounds"),
            known_car_types,
        )

    def validate_all(self) -> ConfigRegistry:
        """Run the validation pass over every named rule."""
        validate_registry(self)
        return self

    def get_rule(self, name: str) -> RuleNode | None:
        """Get a named rule."""
        return self.rules.get(name)

    def get_sound(self, name: str) -> SoundDefinition | None:
        """Get a named sound."""
        return self.sounds.get(name)

    def describe(self) -> str:
        """Render every named rule as indented text."""
        return "\n".join(
            f"{name}:\n{indent(describe_rule(node), 2)}" for name, node in self.rules.items()
        )
