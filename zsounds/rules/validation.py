"""Validation pass over parsed rule trees.

Checks that every ``Ref`` and ``Sound`` name resolves in the registry, that
every ``If CarType`` value is a known car type, and that named rules do not
reference each other in a cycle. Runs once, after the whole registry has
been parsed, so forward references between named rules resolve.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterator, Mapping

from zsounds.errors import ValidationError
from .schema import (
    AllOfRule,
    IfProperty,
    IfRule,
    OneOfRule,
    RefRule,
    RuleNode,
    SoundRule,
)

if TYPE_CHECKING:
    from .registry import ConfigRegistry


def validate_rule(node: RuleNode, registry: ConfigRegistry, path: str = "rule") -> None:
    """Validate a rule tree against a registry.

    Raises:
        ValidationError: On the first unresolved name or unknown car type.
    """
    if isinstance(node, (AllOfRule, OneOfRule)):
        for i, child in enumerate(node.rules):
            validate_rule(child, registry, f"{path}.rules[{i}]")

    elif isinstance(node, IfRule):
        if node.property == IfProperty.CAR_TYPE:
            if node.value.lower() not in registry.known_car_types:
                raise ValidationError(f"Unknown value for CarType: {node.value}", path)
        # SkinName values are open-ended and only known at evaluation time
        validate_rule(node.rule, registry, f"{path}.rule")

    elif isinstance(node, RefRule):
        if node.name not in registry.rules:
            raise ValidationError(f'Reference to unknown rule "{node.name}"', path)

    elif isinstance(node, SoundRule):
        if node.name not in registry.sounds:
            raise ValidationError(f'Reference to unknown sound "{node.name}"', path)

    else:
        raise TypeError(f"Unhandled rule node {type(node).__name__}")


def iter_refs(node: RuleNode) -> Iterator[str]:
    """Yield the names of every ``Ref`` inside a rule tree, in tree order."""
    if isinstance(node, (AllOfRule, OneOfRule)):
        for child in node.rules:
            yield from iter_refs(child)
    elif isinstance(node, IfRule):
        yield from iter_refs(node.rule)
    elif isinstance(node, RefRule):
        yield node.name


def find_ref_cycle(rules: Mapping[str, RuleNode]) -> list[str] | None:
    """Find a cycle in the graph of named rules that reference each other.

    Every cycle counts, including ones that are only reachable through an
    ``If`` or ``OneOf`` branch.

    Returns:
        The cycle as a list of rule names starting and ending with the same
        name, or None if the graph is acyclic.
    """
    edges = {name: [ref for ref in iter_refs(node) if ref in rules] for name, node in rules.items()}
    visited: set[str] = set()

    for start in rules:
        if start in visited:
            continue
        # Iterative DFS; stack holds (name, iterator over its references)
        stack: list[tuple[str, Iterator[str]]] = [(start, iter(edges[start]))]
        on_stack = {start}
        visited.add(start)
        while stack:
            name, children = stack[-1]
            child = next(children, None)
            if child is None:
                stack.pop()
                on_stack.discard(name)
                continue
            if child in on_stack:
                path = [entry for entry, _ in stack]
                return path[path.index(child):] + [child]
            if child not in visited:
                visited.add(child)
                on_stack.add(child)
                stack.append((child, iter(edges[child])))

    return None


def validate_registry(registry: ConfigRegistry) -> None:
    """Validate every named rule, then check for reference cycles.

    Raises:
        ValidationError: On the first problem found.
    """
    for name, node in registry.rules.items():
        validate_rule(node, registry, f"rules.{name}")

    cycle = find_ref_cycle(registry.rules)
    if cycle:
        raise ValidationError(
            "Rules reference each other in a cycle: " + " -> ".join(cycle),
            f"rules.{cycle[0]}",
        )
