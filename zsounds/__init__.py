"""
ZSounds rule engine

Selects replacement sounds for each locomotive from a declarative rule tree.
Rules are written as YAML/JSON documents, parsed into typed nodes, validated
against a registry of named rules and sounds, and evaluated per car.

Example:
    >>> from zsounds import CarContext, load_config, RuleEngine
    >>> registry = load_config("zsounds/data")
    >>> sounds = RuleEngine().select("root", registry, CarContext(car_type="DE6"))
"""

__version__ = "0.3.0"

from .errors import ConfigError, ParseError, ValidationError, EvaluationError
from .core import CarContext, SeededRNG, Settings, get_settings, configure_logging
from .sounds import SoundType, SoundDefinition, SoundSet
from .rules import (
    ConfigRegistry,
    ConfigLoader,
    RuleEngine,
    SoundSelector,
    describe_rule,
    get_selector,
    load_config,
    parse_rule,
)

__all__ = [
    "ConfigError",
    "ParseError",
    "ValidationError",
    "EvaluationError",
    "CarContext",
    "SeededRNG",
    "Settings",
    "get_settings",
    "configure_logging",
    "SoundType",
    "SoundDefinition",
    "SoundSet",
    "ConfigRegistry",
    "ConfigLoader",
    "RuleEngine",
    "SoundSelector",
    "describe_rule",
    "get_selector",
    "load_config",
    "parse_rule",
]
