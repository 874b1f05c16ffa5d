"""
campaign_config -- single public entrypoint for engine configuration.

Responsibility:
    Provides the ONLY way to obtain configuration at runtime through
    ``get_active_config()``.  Engines never read files, environment
    variables or databases for configuration; the boundary layer calls
    this once, translates the result with ``bridges.engine_settings_from``
    and injects the frozen settings.

Architecture position:
    Configuration -- sits above ``campaign_kernel`` and beside
    ``campaign_engines``.  The kernel and the engines MUST NEVER import
    from ``campaign_config``.

Failure modes:
    - ``FileNotFoundError`` -- the requested configuration file is missing.
    - ``yaml.YAMLError`` -- malformed YAML.
    - ``InvalidConfigurationError`` -- structurally invalid document.

Audit relevance:
    Every successful ``get_active_config()`` call emits a
    ``CAMPAIGN_CONFIG_TRACE`` log entry with the source path, key count and
    checksum, tying each engine decision to the configuration in force.
"""

from __future__ import annotations

from pathlib import Path

from campaign_config.bridges import engine_settings_from
from campaign_config.configuration import Configuration
from campaign_config.loader import load_configuration
from campaign_kernel.logging_config import get_logger

_logger = get_logger("config")

# Bundled configuration
DEFAULT_CONFIG_PATH = Path(__file__).parent / "sets" / "default.yaml"

__all__ = [
    "Configuration",
    "DEFAULT_CONFIG_PATH",
    "engine_settings_from",
    "get_active_config",
]


def get_active_config(path: Path | None = None) -> Configuration:
    """The ONLY public configuration entrypoint.

    Non-goals:
        Does NOT cache across calls; the caller loads once at startup and
        holds the returned value for the life of the process.

    Args:
        path: Override the configuration file.  Defaults to the bundled
            ``sets/default.yaml``.
    """
    config = load_configuration(Path(path) if path is not None else DEFAULT_CONFIG_PATH)

    _logger.info(
        "CAMPAIGN_CONFIG_TRACE",
        extra={
            "trace_type": "CAMPAIGN_CONFIG_TRACE",
            "source": config.source,
            "key_count": len(config),
            "checksum": config.checksum,
        },
    )
    return config
