"""
Configuration -- immutable named-value lookup.

Platform-wide values (platform fee, time zone, notification windows,
contact addresses) are read through a ``Configuration`` the boundary
layer loads once.  Values are looked up by name like a hash:

    config["platform_fee"]              -> value or None
    config["platform_fee", "time_zone"] -> tuple of values, so it can be
                                           unpacked into a call with *
    config.fetch("platform_fee")        -> value, or
                                           ConfigurationKeyNotFoundError

There is no in-place assignment: ``with_values`` returns a new instance.
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Any

from campaign_kernel.exceptions import ConfigurationKeyNotFoundError


class Configuration(Mapping[str, Any]):
    """Read-only mapping of configuration names to values."""

    def __init__(self, values: Mapping[str, Any] | None = None, source: str | None = None):
        self._values: Mapping[str, Any] = MappingProxyType(
            {str(k): v for k, v in (values or {}).items()}
        )
        self._source = source

    @property
    def source(self) -> str | None:
        """Where the values were loaded from, for audit records."""
        return self._source

    def __getitem__(self, keys: str | tuple[str, ...]) -> Any:
        if isinstance(keys, tuple):
            return tuple(self._values.get(key) for key in keys)
        return self._values.get(keys)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def fetch(self, key: str) -> Any:
        """Return the value for ``key``; a missing key is an error."""
        if key not in self._values:
            raise ConfigurationKeyNotFoundError(key)
        return self._values[key]

    def with_values(self, **values: Any) -> Configuration:
        merged = dict(self._values)
        merged.update(values)
        return Configuration(merged, source=self._source)

    @property
    def checksum(self) -> str:
        """SHA-256 of the canonical JSON form of the values."""
        canonical = json.dumps(dict(self._values), sort_keys=True, default=str)
        return hashlib.sha256(canonical.encode("utf-8")).hexdigest()

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Configuration):
            return dict(self._values) == dict(other._values)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Configuration({dict(self._values)!r})"
