"""Sound rules - parsing, validation, registry and evaluation."""

from .schema import (
    RuleType,
    IfProperty,
    AllOfRule,
    OneOfRule,
    IfRule,
    RefRule,
    SoundRule,
    RuleNode,
)
from .parser import parse_rule, parse_rules
from .validation import validate_rule, validate_registry, find_ref_cycle, iter_refs
from .formatting import describe_rule, indent
from .registry import ConfigRegistry
from .engine import RuleEngine, get_default_rng
from .loader import ConfigLoader, load_config
from .service import SoundSelector, get_selector

__all__ = [
    # Schema
    "RuleType",
    "IfProperty",
    "AllOfRule",
    "OneOfRule",
    "IfRule",
    "RefRule",
    "SoundRule",
    "RuleNode",
    # Parsing / validation
    "parse_rule",
    "parse_rules",
    "validate_rule",
    "validate_registry",
    "find_ref_cycle",
    "iter_refs",
    # Formatting
    "describe_rule",
    "indent",
    # Registry / engine
    "ConfigRegistry",
    "RuleEngine",
    "get_default_rng",
    # Loading / service
    "ConfigLoader",
    "load_config",
    "SoundSelector",
    "get_selector",
]
