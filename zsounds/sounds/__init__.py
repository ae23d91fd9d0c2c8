"""Sound definitions, the sound set accumulator, and sound token parsing."""

from .schema import SoundType, SoundDefinition, SoundSet
from .parser import parse_sound, parse_sounds

__all__ = [
    "SoundType",
    "SoundDefinition",
    "SoundSet",
    "parse_sound",
    "parse_sounds",
]
