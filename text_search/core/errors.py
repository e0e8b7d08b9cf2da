"""
Result Monad & Error Types for the Counted Multiset

Two layers of error handling:
    - Validation helpers return Result[T, TextSearchError] (Ok / Err) so
      callers can inspect why a key or config was rejected without try/except.
    - The container API raises a TextSearchFault at its boundary, wrapping the
      structured TextSearchError that caused it.

Every container operation is total over the int64 key domain. The only
faults are out-of-domain input and allocation failure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import (
    Any,
    Callable,
    Generic,
    Literal,
    NoReturn,
    Optional,
    TypeVar,
    Union,
    final,
)


# =============================================================================
# TYPE VARIABLES
# =============================================================================
T = TypeVar("T")  # Success value type
E = TypeVar("E")  # Error type
U = TypeVar("U")  # Transform result type


# =============================================================================
# RESULT MONAD: SUCCESS VARIANT
# =============================================================================
@final
@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """
    Success variant of Result.

    Example:
        result = validate_key(42)
        if result.is_ok():
            key = result.unwrap()
    """
    _value: T

    def is_ok(self) -> Literal[True]:
        return True

    def is_err(self) -> Literal[False]:
        return False

    def unwrap(self) -> T:
        return self._value

    def unwrap_or(self, default: T) -> T:
        return self._value

    def unwrap_or_else(self, f: Callable[[], T]) -> T:
        return self._value

    def expect(self, msg: str) -> T:
        return self._value

    def map(self, fn: Callable[[T], U]) -> "Ok[U]":
        """Apply fn to the wrapped value."""
        return Ok(fn(self._value))

    def map_err(self, fn: Callable[[Any], Any]) -> "Ok[T]":
        return self

    def flat_map(self, fn: Callable[[T], "Result[U, Any]"]) -> "Result[U, Any]":
        """Chain a fallible step, e.g. ``validate_key(k).flat_map(check_range)``."""
        return fn(self._value)

    def and_then(self, fn: Callable[[T], "Result[U, Any]"]) -> "Result[U, Any]":
        return fn(self._value)

    @property
    def value(self) -> T:
        return self._value

    @property
    def error(self) -> None:
        return None

    def __repr__(self) -> str:
        return f"Ok({self._value!r})"

    def __bool__(self) -> Literal[True]:
        return True


# =============================================================================
# RESULT MONAD: ERROR VARIANT
# =============================================================================
@final
@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """
    Error variant of Result.

    Carries a TextSearchError (or any error payload). unwrap() on an Err is
    a programming error and raises.
    """
    _error: E

    def is_ok(self) -> Literal[False]:
        return False

    def is_err(self) -> Literal[True]:
        return True

    def unwrap(self) -> NoReturn:
        raise RuntimeError(f"Called unwrap() on Err: {self._error}")

    def unwrap_or(self, default: T) -> T:
        return default

    def unwrap_or_else(self, f: Callable[[], T]) -> T:
        return f()

    def expect(self, msg: str) -> NoReturn:
        raise RuntimeError(f"{msg}: {self._error}")

    def map(self, fn: Callable[[Any], U]) -> "Err[E]":
        return self

    def map_err(self, fn: Callable[[E], U]) -> "Err[U]":
        """Transform the error payload."""
        return Err(fn(self._error))

    def flat_map(self, fn: Callable[[Any], "Result[U, E]"]) -> "Err[E]":
        return self

    def and_then(self, fn: Callable[[Any], "Result[U, E]"]) -> "Err[E]":
        return self

    @property
    def value(self) -> None:
        return None

    @property
    def error(self) -> E:
        return self._error

    def __repr__(self) -> str:
        return f"Err({self._error!r})"

    def __bool__(self) -> Literal[False]:
        return False


# Union type for pattern matching
Result = Union[Ok[T], Err[E]]


# =============================================================================
# ERROR TAXONOMY
# =============================================================================
class ErrorCode(Enum):
    """
    Canonical error codes.

    Ranges:
        1000-1999: Key domain errors
        2000-2999: Operand errors (set algebra)
        5000-5999: Configuration errors
        9000-9999: Internal errors
    """
    # Key errors (1000-1999)
    KEY_INVALID_TYPE = 1001
    KEY_OUT_OF_RANGE = 1002

    # Operand errors (2000-2999)
    OPERAND_INVALID_TYPE = 2001

    # Configuration errors (5000-5999)
    CONFIG_INVALID = 5001

    # Internal errors (9000-9999)
    ALLOCATION_FAILED = 9001
    INVARIANT_VIOLATED = 9002


@dataclass(frozen=True, slots=True)
class TextSearchError:
    """
    Base error type for all text_search operations.

    Structured error with a code, a human-readable message, machine-readable
    details, an optional cause chain and a UTC timestamp.
    """
    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)
    cause: Optional["TextSearchError"] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __str__(self) -> str:
        return f"[{self.code.name}] {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Serialize for logging."""
        return {
            "code": self.code.value,
            "code_name": self.code.name,
            "message": self.message,
            "details": self.details,
            "cause": self.cause.to_dict() if self.cause else None,
            "timestamp": self.timestamp.isoformat(),
        }

    def with_cause(self, cause: "TextSearchError") -> "TextSearchError":
        """Return a copy of this error chained to ``cause``."""
        return type(self)(
            code=self.code,
            message=self.message,
            details=self.details,
            cause=cause,
            timestamp=self.timestamp,
        )


class KeyDomainError(TextSearchError):
    """A key is not a representable posting key."""

    @classmethod
    def invalid_type(cls, key: Any) -> "KeyDomainError":
        type_name = type(key).__name__
        return cls(
            code=ErrorCode.KEY_INVALID_TYPE,
            message=f"Key must be an integer, got {type_name}",
            details={"type": type_name},
        )

    @classmethod
    def out_of_range(cls, key: int, low: int, high: int) -> "KeyDomainError":
        return cls(
            code=ErrorCode.KEY_OUT_OF_RANGE,
            message=f"Key {key} outside [{low}, {high}]",
            details={"key": key, "min": low, "max": high},
        )


class OperandError(TextSearchError):
    """Set algebra was given something that is not a counted multiset."""

    @classmethod
    def invalid_type(cls, operation: str, operand: Any) -> "OperandError":
        type_name = type(operand).__name__
        return cls(
            code=ErrorCode.OPERAND_INVALID_TYPE,
            message=f"{operation}() expects a CountedMultiset, got {type_name}",
            details={"operation": operation, "type": type_name},
        )


class ConfigError(TextSearchError):
    """Error in configuration."""

    @classmethod
    def invalid(cls, param: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID,
            message=f"Invalid config '{param}': {reason}",
            details={"param": param, "value": value, "reason": reason},
        )


class ResourceError(TextSearchError):
    """Unrecoverable internal condition."""

    @classmethod
    def allocation_failed(cls, operation: str, size: int) -> "ResourceError":
        return cls(
            code=ErrorCode.ALLOCATION_FAILED,
            message=f"Out of memory during {operation} (entries={size})",
            details={"operation": operation, "entries": size},
        )

    @classmethod
    def invariant_violated(cls, key: Any, count: int) -> "ResourceError":
        return cls(
            code=ErrorCode.INVARIANT_VIOLATED,
            message=f"Non-positive count {count} for key {key}",
            details={"key": key, "count": count},
        )


# =============================================================================
# RAISED FAULTS
# =============================================================================
class TextSearchFault(Exception):
    """Raised at the container boundary; wraps a TextSearchError."""

    def __init__(self, error: TextSearchError) -> None:
        super().__init__(str(error))
        self.error = error

    @property
    def code(self) -> ErrorCode:
        return self.error.code


class InvalidKeyFault(TextSearchFault, ValueError):
    """Key is an integer but outside the configured signed range."""


class KeyTypeFault(TextSearchFault, TypeError):
    """Key is not an integer."""


class OperandTypeFault(TextSearchFault, TypeError):
    """Operand of union/intersect/minus is not a counted multiset."""


class ConfigFault(TextSearchFault, ValueError):
    """Configuration failed validation."""


class AllocationFault(TextSearchFault, MemoryError):
    """Storage for a new entry could not be allocated. Not recoverable."""


def raise_for(error: TextSearchError) -> NoReturn:
    """Raise the fault class matching ``error.code``."""
    if error.code is ErrorCode.KEY_INVALID_TYPE:
        raise KeyTypeFault(error)
    if error.code is ErrorCode.KEY_OUT_OF_RANGE:
        raise InvalidKeyFault(error)
    if error.code is ErrorCode.OPERAND_INVALID_TYPE:
        raise OperandTypeFault(error)
    if error.code is ErrorCode.CONFIG_INVALID:
        raise ConfigFault(error)
    if error.code is ErrorCode.ALLOCATION_FAILED:
        raise AllocationFault(error)
    raise TextSearchFault(error)
