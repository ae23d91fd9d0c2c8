"""Error types raised while loading and evaluating sound rules."""

from __future__ import annotations

from pydantic import ValidationError as PydanticValidationError


class ConfigError(Exception):
    """Raised when a sound configuration cannot be loaded.

    ``path`` locates the offending entry inside the configuration document,
    e.g. ``rules.main.rules[0]``.
    """

    def __init__(self, message: str, path: str | None = None):
        self.message = message
        self.path = path

        full_msg = message
        if path:
            full_msg = f"{full_msg} (at {path})"

        super().__init__(full_msg)


class ParseError(ConfigError):
    """A rule or sound token has the wrong shape or an unknown tag."""

    @classmethod
    def from_pydantic(cls, exc: PydanticValidationError, path: str | None = None) -> ParseError:
        """Wrap a pydantic validation failure, keeping the first field error."""
        errors = exc.errors()
        if not errors:
            return cls(str(exc), path)

        first = errors[0]
        loc = ".".join(str(part) for part in first.get("loc", ()))
        if loc:
            path = f"{path}.{loc}" if path else loc
        message = first.get("msg", str(exc))
        # Custom validators surface as "Value error, <message>"
        message = message.removeprefix("Value error, ")
        return cls(message, path)


class ValidationError(ConfigError):
    """A parsed rule tree refers to something the registry does not define."""


class EvaluationError(RuntimeError):
    """A rule tree could not be applied.

    Evaluation assumes validated input, so this always signals a broken
    contract rather than a recoverable condition.
    """
