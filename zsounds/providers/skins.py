"""
Car attribute providers used by ``If SkinName`` rules.

A provider answers one question: which skin is a given car wearing. The
skin manager that knows the answer lives outside this package, so it is
reached through a narrow ``lookup`` call instead of by reading its state.
"""

from __future__ import annotations

import importlib
import logging
import threading
from typing import Any, Callable, Mapping, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class AttributeProvider(Protocol):
    """Resolves a car identifier to a string attribute."""

    def lookup(self, car_id: str) -> str | None:
        ...


class SkinProvider:
    """Thread-safe cached view of a skin manager's car -> skin mapping.

    Args:
        source: Called with no arguments; returns the current mapping of car
            id to skin name, or None while the skin manager is unavailable.
    """

    def __init__(self, source: Callable[[], Mapping[str, str] | None]):
        self._source = source
        self._skins: dict[str, str] | None = None
        self._lock = threading.RLock()
        self._hits = 0
        self._misses = 0

    def lookup(self, car_id: str) -> str | None:
        """Get the skin name for a car, or None if unknown."""
        skins = self._get_skins()
        if skins is None:
            return None
        return skins.get(car_id)

    def invalidate(self) -> bool:
        """Drop the cached mapping so the next lookup refetches it.

        Returns:
            True if a mapping was cached
        """
        with self._lock:
            had_cache = self._skins is not None
            self._skins = None
            return had_cache

    def _get_skins(self) -> dict[str, str] | None:
        with self._lock:
            if self._skins is not None:
                self._hits += 1
                return self._skins

            self._misses += 1
            skins = self._source()
            # Not cached: the skin manager may become available later
            if skins is None:
                return None
            self._skins = dict(skins)
            return self._skins

    def get_stats(self) -> dict[str, Any]:
        """Get cache statistics."""
        with self._lock:
            total = self._hits + self._misses
            return {
                "cached": self._skins is not None,
                "size": len(self._skins) if self._skins is not None else 0,
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": self._hits / total if total > 0 else 0.0,
            }


class StaticAttributeProvider:
    """Provider backed by a fixed mapping."""

    def __init__(self, values: Mapping[str, str]):
        self._values = dict(values)

    def lookup(self, car_id: str) -> str | None:
        return self._values.get(car_id)


def load_attribute_provider(dotted_name: str | None) -> AttributeProvider | None:
    """Resolve an attribute provider from a ``"package.module:attribute"`` name.

    A class, or a callable that is not itself a provider, is called with no
    arguments to build one. Anything missing is logged and treated as no
    provider, so ``If SkinName`` rules simply never match.
    """
    if not dotted_name:
        return None

    module_name, _, attr_name = dotted_name.partition(":")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        logger.warning("Attribute provider module %r not available: %s", module_name, e)
        return None

    target = getattr(module, attr_name or "provider", None)
    if target is None:
        logger.warning("Attribute provider %r not found in %r", attr_name, module_name)
        return None

    if isinstance(target, type) or (callable(target) and not isinstance(target, AttributeProvider)):
        target = target()

    if not isinstance(target, AttributeProvider):
        logger.warning("%r does not provide a lookup(car_id) method", dotted_name)
        return None

    logger.info("Using attribute provider %s", dotted_name)
    return target
