"""Core constants used across Zipcar modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

STORE_KEY_PREFIX = "/"
LEGACY_CID_VERSION = 0
MODERN_NAME_BASE = "base32"
RAW_CODEC = "raw"
LEGACY_CODEC = "dag-pb"
HASH_FUNCTION = "sha2-256"
DEFAULT_COMPRESSION_LEVEL = 6
MIN_COMPRESSION_LEVEL = 0
MAX_COMPRESSION_LEVEL = 9
DEFAULT_LOG_LEVEL = "INFO"
ARCHIVE_FILE_MODE = 0o644
TEMP_ARCHIVE_SUFFIX = ".zcar.tmp"
TRUE_VALUES = ("1", "true", "yes", "on")
FALSE_VALUES = ("0", "false", "no", "off", "")
