"""YAML/JSON sound configuration loader.

A configuration document has two sections::

    sounds:
      horn1: {type: HornHit, filename: horn1.ogg}
    rules:
      root: {type: AllOf, sounds: [horn1]}

Several documents can be loaded and merged before the registry is built.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable

import yaml

from zsounds.errors import ParseError
from .registry import ConfigRegistry

logger = logging.getLogger(__name__)

CONFIG_SUFFIXES = (".yaml", ".yml", ".json")


class ConfigLoader:
    """Loads and merges sound configuration documents from files or directories."""

    def __init__(self, config_dir: str | Path | None = None):
        self.config_dir = Path(config_dir) if config_dir else None
        self._sounds: dict[str, Any] = {}
        self._rules: dict[str, Any] = {}

    def load_file(self, path: str | Path) -> dict[str, Any]:
        """Load a single YAML or JSON document and merge it.

        Returns:
            The raw document.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                content = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ParseError(f"Invalid document: {e}", str(path)) from e

        if content is None:
            content = {}
        if not isinstance(content, dict):
            raise ParseError("A sound configuration must be a mapping", str(path))

        self.merge(content, source=str(path))
        return content

    def load_directory(self, path: str | Path | None = None) -> list[Path]:
        """Load every config document in a directory, in file name order.

        Returns:
            The files that were loaded.
        """
        path = Path(path) if path else self.config_dir
        if not path:
            raise ValueError("No config directory specified")
        if not path.exists():
            raise FileNotFoundError(f"Config directory not found: {path}")

        files = sorted(p for p in path.iterdir() if p.suffix.lower() in CONFIG_SUFFIXES)
        for config_file in files:
            self.load_file(config_file)
        return files

    def merge(self, document: dict[str, Any], source: str = "<document>") -> None:
        """Merge a document's sections; later names replace earlier ones."""
        for section_name, target in (("sounds", self._sounds), ("rules", self._rules)):
            section = document.get(section_name)
            if section is None:
                continue
            if not isinstance(section, dict):
                raise ParseError(f"The {section_name} section must be a mapping", source)

            for name, token in section.items():
                if name in target:
                    logger.info("%s overrides %s %r", source, section_name[:-1], name)
                target[name] = token

    def build_registry(self, known_car_types: Iterable[str] | None = None) -> ConfigRegistry:
        """Parse and validate everything loaded so far."""
        return ConfigRegistry.from_mapping(self._rules, self._sounds, known_car_types)

    def get_document(self) -> dict[str, Any]:
        """The merged document."""
        return {"sounds": dict(self._sounds), "rules": dict(self._rules)}


def load_config(
    path: str | Path,
    known_car_types: Iterable[str] | None = None,
) -> ConfigRegistry:
    """Load a config file or directory into a validated registry."""
    path = Path(path)
    loader = ConfigLoader()
    if path.is_dir():
        loader.load_directory(path)
    else:
        loader.load_file(path)
    return loader.build_registry(known_car_types)
