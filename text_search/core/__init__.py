"""
Core Module: Types, Errors, Configuration and Protocols

Foundational abstractions shared by the collections and the CLI.
"""

from text_search.core.types import (
    INT64_MAX,
    INT64_MIN,
    Entry,
    PostingKey,
    RankedEntry,
    coerce_key,
    key_bounds,
    validate_key,
)
from text_search.core.errors import (
    AllocationFault,
    ConfigError,
    ConfigFault,
    Err,
    ErrorCode,
    InvalidKeyFault,
    KeyDomainError,
    KeyTypeFault,
    Ok,
    OperandError,
    OperandTypeFault,
    ResourceError,
    Result,
    TextSearchError,
    TextSearchFault,
)
from text_search.core.config import DEFAULT_CONFIG, CountedSetConfig
from text_search.core.protocols import CountedSetProtocol

__all__ = [
    # Types
    "INT64_MAX",
    "INT64_MIN",
    "Entry",
    "PostingKey",
    "RankedEntry",
    "coerce_key",
    "key_bounds",
    "validate_key",
    # Errors
    "AllocationFault",
    "ConfigError",
    "ConfigFault",
    "Err",
    "ErrorCode",
    "InvalidKeyFault",
    "KeyDomainError",
    "KeyTypeFault",
    "Ok",
    "OperandError",
    "OperandTypeFault",
    "ResourceError",
    "Result",
    "TextSearchError",
    "TextSearchFault",
    # Config
    "DEFAULT_CONFIG",
    "CountedSetConfig",
    # Protocols
    "CountedSetProtocol",
]
