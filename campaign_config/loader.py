"""
Configuration Loader (``campaign_config.loader``).

Responsibility
--------------
Loads a YAML configuration file and parses it into an immutable
``Configuration``.  This is boundary tooling: engines never call it.  The
single public entry point for runtime config is
``campaign_config.get_active_config()``.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Root that is not a mapping, or a ``values`` section that is not a
  mapping  -> ``InvalidConfigurationError``.

File format
-----------
Either a flat mapping of names to values, or a mapping with a ``values``
section (other top-level keys such as ``name``/``description`` are
metadata and ignored)::

    name: default
    values:
      platform_fee: "0.13"
      time_zone: America/New_York
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from campaign_config.configuration import Configuration
from campaign_kernel.exceptions import InvalidConfigurationError


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Postconditions:
        - Returns a ``dict`` (empty if the YAML document is empty).
    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        InvalidConfigurationError: if the document root is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidConfigurationError(str(path), type(data).__name__, "root must be a mapping")
    return data


def parse_configuration(data: dict[str, Any], source: str | None = None) -> Configuration:
    """Build a ``Configuration`` from a parsed YAML document."""
    if "values" in data:
        values = data["values"] or {}
        if not isinstance(values, dict):
            raise InvalidConfigurationError("values", values, "must be a mapping")
    else:
        values = data
    return Configuration(values, source=source)


def load_configuration(path: Path) -> Configuration:
    path = Path(path)
    return parse_configuration(load_yaml_file(path), source=str(path))
