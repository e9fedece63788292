"""Provider interface shared by the flagd transports.

Both transports expose the same operations and return the same result and
error shapes, so callers can swap one for the other.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Optional

from flagd_provider.config import Config
from flagd_provider.exceptions import ProviderNotReadyError
from flagd_provider.models import (
    NumericKind,
    ProviderState,
    ResolutionDetails,
    Result,
)

EvaluationContext = Mapping[str, Any]


class AbstractProvider(ABC):
    """Abstract base class for flagd providers.

    A provider is constructed with a `Config` in the NOT_READY state and
    becomes READY through a successful `initialize` call, which creates its
    transport handle.
    """

    name: str = "Flagd"

    def __init__(self, config: Optional[Config] = None) -> None:
        self.config = config or Config()
        self.domain: Optional[str] = None
        self.state = ProviderState.NOT_READY

    @property
    def is_ready(self) -> bool:
        return self.state == ProviderState.READY

    @abstractmethod
    def initialize(
        self, domain: Optional[str] = None, context: Optional[EvaluationContext] = None
    ) -> Result["AbstractProvider"]:
        """Create the transport handle and mark the provider ready.

        Args:
            domain: Optional label for the provider
            context: Evaluation context, accepted for interface compatibility

        Returns:
            Result carrying this provider, or a provider_not_ready error
        """

    def shutdown(self) -> None:
        """Nothing to release, the transport handle lives for the process."""

    @abstractmethod
    def resolve_boolean_value(
        self, key: str, default: bool, context: Optional[EvaluationContext] = None
    ) -> Result[ResolutionDetails]:
        pass

    @abstractmethod
    def resolve_string_value(
        self, key: str, default: str, context: Optional[EvaluationContext] = None
    ) -> Result[ResolutionDetails]:
        pass

    @abstractmethod
    def resolve_number_value(
        self,
        key: str,
        default: int | float,
        context: Optional[EvaluationContext] = None,
        kind: Optional[NumericKind] = None,
    ) -> Result[ResolutionDetails]:
        pass

    @abstractmethod
    def resolve_map_value(
        self, key: str, default: dict, context: Optional[EvaluationContext] = None
    ) -> Result[ResolutionDetails]:
        pass

    def resolve_object_value(
        self, key: str, default: dict, context: Optional[EvaluationContext] = None
    ) -> Result[ResolutionDetails]:
        return self.resolve_map_value(key, default, context)

    def _ensure_ready(self) -> None:
        if not self.is_ready:
            raise ProviderNotReadyError(
                f"{self.name} provider must be initialized before resolving flags"
            )
