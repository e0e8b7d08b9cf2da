"""
Configuration: Per-Instance Counted Multiset Settings

There is no process-wide configuration. Each multiset carries its own
CountedSetConfig (DEFAULT_CONFIG unless given one).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from text_search.core.errors import ConfigError, raise_for
from text_search.core.types import KEY_BITS, key_bounds


_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


@dataclass(frozen=True, slots=True)
class CountedSetConfig:
    """
    Counted multiset configuration.

    Attributes:
        key_bits: Signed key width; keys outside the range are rejected
        validate_keys: Range-check keys (type is always checked)
        log_operations: Emit DEBUG records for set algebra
    """
    key_bits: int = KEY_BITS
    validate_keys: bool = True
    log_operations: bool = False

    def validate(self) -> Optional[str]:
        if self.key_bits < 1 or self.key_bits > KEY_BITS:
            return f"key_bits must be in [1, {KEY_BITS}], got {self.key_bits}"
        return None

    def ensure_valid(self) -> "CountedSetConfig":
        """Return self, or raise ConfigFault if validate() reports a problem."""
        reason = self.validate()
        if reason is not None:
            raise_for(ConfigError.invalid("key_bits", self.key_bits, reason))
        return self

    @property
    def bounds(self) -> tuple[int, int]:
        return key_bounds(self.key_bits)

    @classmethod
    def from_env(cls) -> "CountedSetConfig":
        return cls(
            key_bits=int(os.getenv("TEXTSEARCH_KEY_BITS", str(KEY_BITS))),
            validate_keys=_env_flag("TEXTSEARCH_VALIDATE_KEYS", True),
            log_operations=_env_flag("TEXTSEARCH_LOG_OPERATIONS", False),
        ).ensure_valid()


DEFAULT_CONFIG = CountedSetConfig()
