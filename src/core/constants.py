"""Core constants used across bytetrie modules.

This module centralizes arena layout values and config defaults.
Keeping values here avoids magic literals in trie logic.
"""

from __future__ import annotations

BYTE_FANOUT = 256
ROOT_HANDLE = 0
EMPTY_CHILD = -1
NODE_HANDLE_DTYPE = "int32"
ELEMENT_BYTE_DTYPE = "uint8"
DEFAULT_INITIAL_NODE_CAPACITY = 64
DEFAULT_GROWTH_FACTOR = 2
MIN_GROWTH_FACTOR = 2
DEFAULT_PRUNE_ON_REMOVE = True
DEFAULT_LOG_LEVEL = "warning"
SUPPORTED_LOG_LEVELS = ("debug", "info", "warning", "error")
TRUE_FLAG_VALUES = ("1", "true", "yes", "on")
FALSE_FLAG_VALUES = ("0", "false", "no", "off")
