"""Optional car attribute providers."""

from .skins import (
    AttributeProvider,
    SkinProvider,
    StaticAttributeProvider,
    load_attribute_provider,
)

__all__ = [
    "AttributeProvider",
    "SkinProvider",
    "StaticAttributeProvider",
    "load_attribute_provider",
]
