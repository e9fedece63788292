"""Canonical result model shared by the HTTP and gRPC providers."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Generic, Optional, TypeVar

if TYPE_CHECKING:
    from flagd_provider.exceptions import FlagdProviderError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Reason(str, Enum):
    """Why a particular value was returned for a flag."""

    STATIC = "static"
    DEFAULT = "default"
    TARGETING_MATCH = "targeting_match"
    SPLIT = "split"
    CACHED = "cached"
    DISABLED = "disabled"
    ERROR = "error"
    UNKNOWN = "unknown"


class ErrorCode(str, Enum):
    FLAG_NOT_FOUND = "flag_not_found"
    PROVIDER_NOT_READY = "provider_not_ready"
    UNEXPECTED_ERROR = "unexpected_error"


class ProviderState(str, Enum):
    NOT_READY = "not_ready"
    READY = "ready"


class NumericKind(str, Enum):
    """Which numeric RPC a number resolution is routed to."""

    INT = "int"
    FLOAT = "float"

    @classmethod
    def of(cls, default: Any) -> "NumericKind":
        """Infer the kind from the caller's default value.

        Booleans are not treated as integers.
        """
        if isinstance(default, int) and not isinstance(default, bool):
            return cls.INT
        return cls.FLOAT


def to_reason(reason: Optional[str]) -> Reason:
    """Map a wire reason string onto `Reason`, ignoring case.

    Absent or unrecognised values map to `Reason.UNKNOWN`.
    """
    if not reason:
        return Reason.UNKNOWN
    try:
        return Reason(reason.lower())
    except ValueError:
        logger.warning(f"Unrecognised evaluation reason '{reason}', using 'unknown'")
        return Reason.UNKNOWN


@dataclass(frozen=True)
class ResolutionDetails:
    """A resolved flag value.

    Attributes:
        value: Resolved value (bool, str, int, float or dict)
        variant: Name of the selected variant, if any
        reason: Why this value was returned
        flag_metadata: Auxiliary data returned alongside the value
    """

    value: Any
    variant: Optional[str] = None
    reason: Reason = Reason.UNKNOWN
    flag_metadata: Optional[dict[str, Any]] = None


@dataclass(frozen=True)
class Result(Generic[T]):
    """Tagged outcome of a provider call: either a value or an error."""

    value: Optional[T] = None
    error: Optional["FlagdProviderError"] = None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: "FlagdProviderError") -> "Result[T]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def error_code(self) -> Optional[ErrorCode]:
        return self.error.error_code if self.error is not None else None

    def unwrap(self) -> T:
        """Return the value, raising the carried error on failure."""
        if self.error is not None:
            raise self.error
        return self.value
