"""flagd feature flag providers.

Resolves flag values from a flagd evaluation service over HTTP/JSON or
gRPC, with one result model and one error taxonomy for both transports.
"""

__version__ = "0.1.0"

from .config import Config
from .exceptions import (
    FlagdProviderError,
    FlagNotFoundError,
    ProviderNotReadyError,
    RemoteEvaluationError,
    UnexpectedError,
)
from .grpc_provider import GrpcProvider
from .http_provider import HttpProvider
from .models import (
    ErrorCode,
    NumericKind,
    ProviderState,
    Reason,
    ResolutionDetails,
    Result,
    to_reason,
)
from .provider import AbstractProvider

__all__ = [
    "AbstractProvider",
    "Config",
    "ErrorCode",
    "FlagNotFoundError",
    "FlagdProviderError",
    "GrpcProvider",
    "HttpProvider",
    "NumericKind",
    "ProviderNotReadyError",
    "ProviderState",
    "Reason",
    "RemoteEvaluationError",
    "ResolutionDetails",
    "Result",
    "UnexpectedError",
    "to_reason",
]
