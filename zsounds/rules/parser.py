"""Rule grammar: turn configuration tokens into rule nodes.

A token is either a bare string (shorthand for a ``Ref``) or a mapping with a
``type`` tag. Parsing is fail-fast: the first malformed token raises
``ParseError`` with the path of the offending entry.
"""

from __future__ import annotations

from typing import Any, Callable

from pydantic import ValidationError as PydanticValidationError

from zsounds.errors import ParseError
from .schema import (
    AllOfRule,
    IfProperty,
    IfRule,
    OneOfRule,
    RefRule,
    RuleNode,
    RuleType,
    SoundRule,
)


def parse_rule(token: Any, path: str = "rule") -> RuleNode:
    """Parse a single rule token.

    Args:
        token: A string (rule name) or a mapping with a ``type`` field.
        path: Location of the token, used in error messages.

    Returns:
        The parsed rule node.

    Raises:
        ParseError: If the token shape or type tag is not recognized.
    """
    if isinstance(token, str):
        return RefRule(name=token)

    if isinstance(token, dict):
        tag = _get_string(token, "type", path)
        rule_type = RuleType.lookup(tag)
        if rule_type is None:
            raise ParseError(f"Unknown rule type {tag!r}", path)
        return _PARSERS[rule_type](token, path)

    raise ParseError(f"Found {_describe_token(token)} where a rule was expected", path)


def parse_rules(section: dict[str, Any] | None) -> dict[str, RuleNode]:
    """Parse a whole ``rules`` section, failing on the first bad entry."""
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ParseError("The rules section must be a mapping", "rules")
    for name in section:
        if not isinstance(name, str):
            raise ParseError(f"Rule names must be strings, got {type(name).__name__}", f"rules.{name}")
    return {name: parse_rule(token, f"rules.{name}") for name, token in section.items()}


# =============================================================================
# Per-type parsers
# =============================================================================

def _parse_all_of(token: dict, path: str) -> AllOfRule:
    rules = [
        parse_rule(child, f"{path}.rules[{i}]")
        for i, child in enumerate(_get_list(token, "rules", path, required=False))
    ]
    sounds = [
        SoundRule(name=_expect_string(name, f"{path}.sounds[{i}]"))
        for i, name in enumerate(_get_list(token, "sounds", path, required=False))
    ]
    return AllOfRule(rules=rules + sounds)


def _parse_one_of(token: dict, path: str) -> OneOfRule:
    rules = [
        parse_rule(child, f"{path}.rules[{i}]")
        for i, child in enumerate(_get_list(token, "rules", path))
    ]

    weights = None
    if token.get("weights") is not None:
        weights = [
            _expect_number(weight, f"{path}.weights[{i}]")
            for i, weight in enumerate(_get_list(token, "weights", path))
        ]

    try:
        return OneOfRule(rules=rules, weights=weights)
    except PydanticValidationError as e:
        raise ParseError.from_pydantic(e, path) from e


def _parse_if(token: dict, path: str) -> IfRule:
    prop_name = _get_string(token, "property", path)
    prop = IfProperty.lookup(prop_name)
    if prop is None:
        raise ParseError(f"Unknown If property {prop_name!r}", f"{path}.property")

    if "rule" not in token or token["rule"] is None:
        raise ParseError("Missing required field: rule", path)

    return IfRule(
        property=prop,
        value=_get_string(token, "value", path),
        rule=parse_rule(token["rule"], f"{path}.rule"),
    )


def _parse_ref(token: dict, path: str) -> RefRule:
    return RefRule(name=_get_string(token, "name", path))


def _parse_sound(token: dict, path: str) -> SoundRule:
    return SoundRule(name=_get_string(token, "name", path))


_PARSERS: dict[RuleType, Callable[[dict, str], RuleNode]] = {
    RuleType.ALL_OF: _parse_all_of,
    RuleType.ONE_OF: _parse_one_of,
    RuleType.IF: _parse_if,
    RuleType.SOUND: _parse_sound,
    RuleType.REF: _parse_ref,
}


# =============================================================================
# Field helpers
# =============================================================================

def _describe_token(token: Any) -> str:
    if token is None:
        return "null"
    if isinstance(token, bool):
        return "boolean"
    if isinstance(token, (int, float)):
        return "number"
    if isinstance(token, list):
        return "list"
    return type(token).__name__


def _get_string(token: dict, key: str, path: str) -> str:
    if token.get(key) is None:
        raise ParseError(f"Missing required field: {key}", path)
    return _expect_string(token[key], f"{path}.{key}")


def _get_list(token: dict, key: str, path: str, required: bool = True) -> list:
    value = token.get(key)
    if value is None:
        if required:
            raise ParseError(f"Missing required field: {key}", path)
        return []
    if not isinstance(value, list):
        raise ParseError(f"Found {_describe_token(value)} where a list was expected", f"{path}.{key}")
    return value


def _expect_string(value: Any, path: str) -> str:
    if not isinstance(value, str):
        raise ParseError(f"Found {_describe_token(value)} where a string was expected", path)
    return value


def _expect_number(value: Any, path: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ParseError(f"Found {_describe_token(value)} where a number was expected", path)
    return float(value)
