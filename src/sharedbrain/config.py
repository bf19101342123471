"""Configuration management for sharedbrain.

This module contains all configurable constants for the backlink generator.
Magic values are documented here rather than scattered throughout the codebase.
"""

import os
from datetime import UTC, time
from typing import Literal, get_args


class ConfigurationError(Exception):
    """Raised when a configuration value is invalid."""

    pass


# =============================================================================
# Documents
# =============================================================================

# Only files with this extension are picked up from the source directory.
# Identity keys always carry exactly one copy of it.
MARKDOWN_EXTENSION = ".md"

# A line containing exactly this opens and closes the TOML metadata block.
METADATA_DELIMITER = "+++"

# Date-named documents (2020-04-19.md) without an explicit date get this
# time of day, in UTC.
DEFAULT_TIME_OF_DAY = time(21, 0, 0, tzinfo=UTC)


# =============================================================================
# Output
# =============================================================================

# Output links point at sibling directories, the way Hugo lays out pages.
LINK_PREFIX = "../"
LINK_SUFFIX = "/"

BACKLINKS_HEADING = "Backlinks"

# Sub-bullet indentation for the quoted context under each backlink.
CONTEXT_INDENT = "    "


# =============================================================================
# Stub date inference
# =============================================================================

# How a stub document picks a date from the documents linking to it:
#   first    - the first dated source in discovery order
#   earliest - the oldest source date
#   latest   - the most recent source date
StubDatePolicy = Literal["first", "earliest", "latest"]
STUB_DATE_POLICIES: tuple[str, ...] = get_args(StubDatePolicy)
DEFAULT_STUB_DATE_POLICY: StubDatePolicy = "first"


# =============================================================================
# Environment
# =============================================================================

LOG_LEVEL_ENV = "SHAREDBRAIN_LOG_LEVEL"
STUB_DATE_POLICY_ENV = "SHAREDBRAIN_STUB_DATE_POLICY"


def get_log_level() -> str:
    """Get the log level name from the environment (default INFO)."""
    return os.environ.get(LOG_LEVEL_ENV, "INFO").upper()


def get_stub_date_policy() -> StubDatePolicy:
    """Get the stub date inference policy.

    Reads SHAREDBRAIN_STUB_DATE_POLICY, falling back to "first".

    Raises:
        ConfigurationError: If the environment names an unknown policy.
    """
    value = os.environ.get(STUB_DATE_POLICY_ENV)
    if not value:
        return DEFAULT_STUB_DATE_POLICY

    policy = value.strip().lower()
    if policy not in STUB_DATE_POLICIES:
        raise ConfigurationError(
            f"Invalid {STUB_DATE_POLICY_ENV}={value!r}. "
            f"Expected one of: {', '.join(STUB_DATE_POLICIES)}"
        )
    return policy  # type: ignore[return-value]
