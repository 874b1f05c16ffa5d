"""
Typed Exception Hierarchy for the Campaign Kernel.

===============================================================================
WHAT RAISES AND WHAT DOES NOT
===============================================================================

The funding engine is a set of total functions over already-loaded
entities. Missing data is NOT an error:

  - absent ProjectTotal rollup  -> totals read as zero
  - absent online_date          -> expires_at is None, never expired
  - absent payouts              -> project is not paid

Invalid numerics (negative goal, zero goal) are accepted and produce
degenerate but defined output (progress == 0).

What remains are boundary failures, raised with a typed class and a
machine-readable ``code`` so callers never parse messages:

    try:
        project = find_by_permalink(projects, "foo")
    except ProjectNotFoundError as e:
        api_response(status=404, code=e.code, permalink=e.permalink)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    CampaignKernelError (base)
    |
    +-- LookupFailedError
    |   +-- ProjectNotFoundError
    |
    +-- ConfigurationError
        +-- ConfigurationKeyNotFoundError
        +-- InvalidConfigurationError
"""


class CampaignKernelError(Exception):
    """
    Base exception for all campaign kernel errors.

    All subclasses carry a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "CAMPAIGN_KERNEL_ERROR"


# Lookup exceptions


class LookupFailedError(CampaignKernelError):
    """Base exception for collaborator lookups that found nothing."""

    code: str = "LOOKUP_FAILED"


class ProjectNotFoundError(LookupFailedError):
    """No visible project matches the given permalink."""

    code: str = "PROJECT_NOT_FOUND"

    def __init__(self, permalink: str):
        self.permalink = permalink
        super().__init__(f"Project not found: {permalink}")


# Configuration exceptions


class ConfigurationError(CampaignKernelError):
    """Base exception for configuration errors."""

    code: str = "CONFIGURATION_ERROR"


class ConfigurationKeyNotFoundError(ConfigurationError):
    """A required configuration key is not defined."""

    code: str = "CONFIGURATION_KEY_NOT_FOUND"

    def __init__(self, key: str):
        self.key = key
        super().__init__(f'No "{key}" configuration defined.')


class InvalidConfigurationError(ConfigurationError):
    """A configuration value cannot be interpreted."""

    code: str = "INVALID_CONFIGURATION"

    def __init__(self, key: str, value: object, reason: str):
        self.key = key
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid configuration {key}={value!r}: {reason}")
