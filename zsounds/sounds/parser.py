"""Parse sound tokens from a configuration document."""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError as PydanticValidationError

from zsounds.errors import ParseError
from .schema import SoundDefinition


def parse_sound(name: str, token: Any, path: str | None = None) -> SoundDefinition:
    """Parse one entry of the ``sounds`` section.

    Args:
        name: Registry name of the sound (the key in the ``sounds`` section).
        token: The mapping found under that key.
        path: Location of the token, used in error messages.

    Raises:
        ParseError: If the token is not a mapping or fails validation.
    """
    path = path or f"sounds.{name}"
    if not isinstance(token, dict):
        raise ParseError(f"Found {type(token).__name__} where a sound was expected", path)

    try:
        return SoundDefinition.model_validate({**token, "name": name})
    except PydanticValidationError as e:
        raise ParseError.from_pydantic(e, path) from e


def parse_sounds(section: dict[str, Any] | None) -> dict[str, SoundDefinition]:
    """Parse a whole ``sounds`` section, failing on the first bad entry."""
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ParseError("The sounds section must be a mapping", "sounds")
    for name in section:
        if not isinstance(name, str):
            raise ParseError(f"Sound names must be strings, got {type(name).__name__}", f"sounds.{name}")
    return {name: parse_sound(name, token) for name, token in section.items()}
