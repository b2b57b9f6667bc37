"""Runtime configuration model for Zipcar.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os

from core.constants import (
    DEFAULT_COMPRESSION_LEVEL,
    DEFAULT_LOG_LEVEL,
    FALSE_VALUES,
    MAX_COMPRESSION_LEVEL,
    MIN_COMPRESSION_LEVEL,
    TRUE_VALUES,
)
from core.errors import ZipcarConfigError


@dataclass(frozen=True)
class ZipcarConfig:
    """Validated runtime configuration.

    Attributes:
        compression_level: Deflate level used when rewriting archives.
        atomic_rewrite: Write rewrites to a temp file and replace the original.
        log_level: Minimum level for structured log output.
    """

    compression_level: int = DEFAULT_COMPRESSION_LEVEL
    atomic_rewrite: bool = False
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls) -> "ZipcarConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            ZipcarConfigError: If environment values are invalid.
        """
        level_value = os.getenv("ZIPCAR_COMPRESSION_LEVEL", str(DEFAULT_COMPRESSION_LEVEL))
        atomic_value = os.getenv("ZIPCAR_ATOMIC_REWRITE", "false")
        log_level_value = os.getenv("ZIPCAR_LOG_LEVEL", DEFAULT_LOG_LEVEL)
        return cls(
            compression_level=_parse_compression_level(level_value),
            atomic_rewrite=_parse_bool("ZIPCAR_ATOMIC_REWRITE", atomic_value),
            log_level=_parse_log_level(log_level_value),
        )


def _parse_compression_level(raw_value: str) -> int:
    """Parse the deflate compression level environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Parsed compression level.

    Raises:
        ZipcarConfigError: If value is not an integer in the deflate range.
    """
    try:
        level = int(raw_value)
    except ValueError as error:
        raise ZipcarConfigError(
            "Invalid ZIPCAR_COMPRESSION_LEVEL value: "
            f"expected integer, got '{raw_value}'. "
            "Set ZIPCAR_COMPRESSION_LEVEL to a number between 0 and 9."
        ) from error
    if not MIN_COMPRESSION_LEVEL <= level <= MAX_COMPRESSION_LEVEL:
        raise ZipcarConfigError(
            f"Invalid ZIPCAR_COMPRESSION_LEVEL value: {level} is out of range. "
            f"Use a value between {MIN_COMPRESSION_LEVEL} and {MAX_COMPRESSION_LEVEL}."
        )
    return level


def _parse_bool(variable_name: str, raw_value: str) -> bool:
    """Parse a boolean flag environment value."""
    normalized = raw_value.strip().lower()
    if normalized in TRUE_VALUES:
        return True
    if normalized in FALSE_VALUES:
        return False
    raise ZipcarConfigError(
        f"Invalid {variable_name} value: expected a boolean, got '{raw_value}'. "
        "Use one of true/false, 1/0, yes/no, on/off."
    )


def _parse_log_level(raw_value: str) -> str:
    """Parse and normalize the log level name."""
    level_name = raw_value.strip().upper()
    if not isinstance(logging.getLevelName(level_name), int):
        raise ZipcarConfigError(
            f"Invalid ZIPCAR_LOG_LEVEL value: '{raw_value}' is not a logging level. "
            "Use DEBUG, INFO, WARNING, or ERROR."
        )
    return level_name
