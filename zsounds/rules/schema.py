"""Pydantic models for the sound rule tree.

A rule tree is a closed union of five node types:

- ``AllOfRule``: apply every child in order
- ``OneOfRule``: apply one child picked at random by weight
- ``IfRule``: apply the child only when a car property matches
- ``RefRule``: apply a named rule from the registry
- ``SoundRule``: apply a named sound from the registry

Ref and Sound nodes hold names only. The registry owns what the names point to.
"""

from __future__ import annotations

import math
from enum import Enum
from functools import cached_property
from itertools import accumulate
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


# =============================================================================
# Tags
# =============================================================================

class RuleType(str, Enum):
    """Rule node type tags as written in configuration."""
    ALL_OF = "AllOf"
    ONE_OF = "OneOf"
    IF = "If"
    SOUND = "Sound"
    REF = "Ref"

    @classmethod
    def lookup(cls, name: str) -> RuleType | None:
        """Case-insensitive lookup of a configuration tag."""
        return _RULE_TYPES.get(name.lower())


class IfProperty(str, Enum):
    """Car properties an ``If`` rule can test."""
    CAR_TYPE = "CarType"
    SKIN_NAME = "SkinName"

    @classmethod
    def lookup(cls, name: str) -> IfProperty | None:
        """Case-insensitive lookup of a configuration tag."""
        return _IF_PROPERTIES.get(name.lower())


_RULE_TYPES = {t.value.lower(): t for t in RuleType}
_IF_PROPERTIES = {p.value.lower(): p for p in IfProperty}


# =============================================================================
# Rule Nodes
# =============================================================================

class AllOfRule(BaseModel):
    """Sequential composition. An empty rule list is a no-op."""
    model_config = ConfigDict(frozen=True)

    type: Literal["AllOf"] = "AllOf"
    rules: list[RuleNode] = Field(default_factory=list, description="Rules applied in order")


class OneOfRule(BaseModel):
    """Weighted random choice between sub-rules.

    ``weights`` defaults to 1 per rule. ``thresholds[i]`` is the cumulative
    weight up to and including rule ``i`` divided by the total weight.
    """
    model_config = ConfigDict(frozen=True)

    type: Literal["OneOf"] = "OneOf"
    rules: list[RuleNode] = Field(..., description="Candidate rules")
    weights: list[float] | None = Field(None, description="Relative weight of each rule")

    @model_validator(mode="before")
    @classmethod
    def _default_weights(cls, data: Any) -> Any:
        if not isinstance(data, dict) or data.get("weights") is not None:
            return data
        if isinstance(data.get("rules"), list):
            data = {**data, "weights": [1.0] * len(data["rules"])}
        return data

    @model_validator(mode="after")
    def _check_weights(self) -> OneOfRule:
        if not self.rules:
            raise ValueError("OneOf rule requires at least one sub-rule")
        if self.weights is None:
            raise ValueError("OneOf rule requires weights")
        if len(self.weights) != len(self.rules):
            raise ValueError(
                f"Found {len(self.weights)} weights for {len(self.rules)} rules in OneOf rule"
            )
        for weight in self.weights:
            if not math.isfinite(weight) or weight <= 0:
                raise ValueError(f"OneOf weights must be positive numbers, got {weight}")
        if not math.isfinite(sum(self.weights)):
            raise ValueError("OneOf weights are too large to add up")
        return self

    @cached_property
    def thresholds(self) -> list[float]:
        total = sum(self.weights)
        thresholds = [partial / total for partial in accumulate(self.weights)]
        # Rounding can leave the last entry just below 1.0
        thresholds[-1] = 1.0
        return thresholds

    @property
    def total_weight(self) -> float:
        return sum(self.weights)


class IfRule(BaseModel):
    """Apply ``rule`` only when the car's ``property`` equals ``value``.

    Comparison is case-insensitive.
    """
    model_config = ConfigDict(frozen=True)

    type: Literal["If"] = "If"
    property: IfProperty = Field(..., description="Car property to test")
    value: str = Field(..., description="Expected property value")
    rule: RuleNode = Field(..., description="Rule applied when the test passes")


class RefRule(BaseModel):
    """Reference to a named rule."""
    model_config = ConfigDict(frozen=True)

    type: Literal["Ref"] = "Ref"
    name: str = Field(..., description="Name of a rule in the registry")


class SoundRule(BaseModel):
    """Reference to a named sound definition."""
    model_config = ConfigDict(frozen=True)

    type: Literal["Sound"] = "Sound"
    name: str = Field(..., description="Name of a sound in the registry")


RuleNode = Annotated[
    AllOfRule | OneOfRule | IfRule | RefRule | SoundRule,
    Field(discriminator="type"),
]


# Enable forward references for recursive types
AllOfRule.model_rebuild()
OneOfRule.model_rebuild()
IfRule.model_rebuild()
