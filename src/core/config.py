"""Runtime configuration model for bytetrie.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os

from core.constants import (
    DEFAULT_GROWTH_FACTOR,
    DEFAULT_INITIAL_NODE_CAPACITY,
    DEFAULT_LOG_LEVEL,
    DEFAULT_PRUNE_ON_REMOVE,
    FALSE_FLAG_VALUES,
    MIN_GROWTH_FACTOR,
    SUPPORTED_LOG_LEVELS,
    TRUE_FLAG_VALUES,
)
from core.errors import ByteTrieConfigError


@dataclass(frozen=True)
class ByteTrieConfig:
    """Validated runtime configuration.

    Attributes:
        initial_node_capacity: Node rows allocated when a trie is created.
        growth_factor: Capacity multiplier applied when the arena is full.
        prune_on_remove: Release valueless, childless nodes after remove.
        log_level: Minimum structlog level for lifecycle events.
    """

    initial_node_capacity: int = DEFAULT_INITIAL_NODE_CAPACITY
    growth_factor: int = DEFAULT_GROWTH_FACTOR
    prune_on_remove: bool = DEFAULT_PRUNE_ON_REMOVE
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls) -> "ByteTrieConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            ByteTrieConfigError: If environment values are invalid.
        """
        capacity = _parse_positive_int(
            "BYTETRIE_INITIAL_CAPACITY",
            os.getenv("BYTETRIE_INITIAL_CAPACITY", str(DEFAULT_INITIAL_NODE_CAPACITY)),
            minimum=1,
        )
        growth_factor = _parse_positive_int(
            "BYTETRIE_GROWTH_FACTOR",
            os.getenv("BYTETRIE_GROWTH_FACTOR", str(DEFAULT_GROWTH_FACTOR)),
            minimum=MIN_GROWTH_FACTOR,
        )
        prune_on_remove = _parse_flag(
            "BYTETRIE_PRUNE_ON_REMOVE",
            os.getenv("BYTETRIE_PRUNE_ON_REMOVE"),
            default=DEFAULT_PRUNE_ON_REMOVE,
        )
        log_level = _parse_log_level(os.getenv("BYTETRIE_LOG_LEVEL", DEFAULT_LOG_LEVEL))
        return cls(
            initial_node_capacity=capacity,
            growth_factor=growth_factor,
            prune_on_remove=prune_on_remove,
            log_level=log_level,
        )


def _parse_positive_int(name: str, raw_value: str, minimum: int) -> int:
    """Parse an integer environment value with a lower bound.

    Args:
        name: Environment variable name, used in error text.
        raw_value: Raw string from environment.
        minimum: Smallest accepted value.

    Returns:
        Parsed integer.

    Raises:
        ByteTrieConfigError: If value is not an integer or is too small.
    """
    try:
        value = int(raw_value)
    except ValueError as error:
        raise ByteTrieConfigError(
            f"Invalid {name} value: expected integer, got '{raw_value}'. "
            f"Set {name} to a numeric value."
        ) from error
    if value < minimum:
        raise ByteTrieConfigError(
            f"Invalid {name} value: expected at least {minimum}, got {value}."
        )
    return value


def _parse_flag(name: str, raw_value: str | None, default: bool) -> bool:
    """Parse a boolean flag environment value."""
    if raw_value is None or not raw_value.strip():
        return default
    normalized = raw_value.strip().lower()
    if normalized in TRUE_FLAG_VALUES:
        return True
    if normalized in FALSE_FLAG_VALUES:
        return False
    raise ByteTrieConfigError(
        f"Invalid {name} value: expected one of "
        f"{', '.join(TRUE_FLAG_VALUES + FALSE_FLAG_VALUES)}, got '{raw_value}'."
    )


def _parse_log_level(raw_value: str) -> str:
    normalized = raw_value.strip().lower()
    if normalized not in SUPPORTED_LOG_LEVELS:
        raise ByteTrieConfigError(
            f"Invalid BYTETRIE_LOG_LEVEL value: expected one of "
            f"{', '.join(SUPPORTED_LOG_LEVELS)}, got '{raw_value}'."
        )
    return normalized
