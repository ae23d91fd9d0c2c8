"""Human-readable rendering of rule trees, used in logs and debugging."""

from __future__ import annotations

from .schema import AllOfRule, IfRule, OneOfRule, RefRule, RuleNode, SoundRule


def indent(text: str, width: int) -> str:
    """Prefix every line of ``text`` with ``width`` spaces."""
    prefix = " " * width
    return "\n".join(prefix + line for line in text.split("\n"))


def format_weight(weight: float) -> str:
    """Render a weight without a trailing ``.0`` for whole numbers."""
    return f"{weight:g}"


def describe_rule(node: RuleNode) -> str:
    """Render a rule tree as indented text.

    Example:
        AllOf:
          If CarType = DE6:
            OneOf:
              1/2: Sound "horn1"
              1/2: Sound "horn2"
    """
    if isinstance(node, AllOfRule):
        if not node.rules:
            return "AllOf: (empty)"
        return "AllOf:\n" + indent("\n".join(describe_rule(r) for r in node.rules), 2)

    if isinstance(node, OneOfRule):
        total = format_weight(node.total_weight)
        lines = [
            f"{format_weight(weight)}/{total}: {describe_rule(rule)}"
            for rule, weight in zip(node.rules, node.weights)
        ]
        return "OneOf:\n" + indent("\n".join(lines), 2)

    if isinstance(node, IfRule):
        return f"If {node.property.value} = {node.value}:\n" + indent(describe_rule(node.rule), 2)

    if isinstance(node, RefRule):
        return f'Ref "{node.name}"'

    if isinstance(node, SoundRule):
        return f'Sound "{node.name}"'

    raise TypeError(f"Unhandled rule node {type(node).__name__}")
