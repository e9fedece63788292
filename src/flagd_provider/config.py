"""Connection settings shared by the HTTP and gRPC flagd providers."""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Any

from flagd_provider.constants import ConfigDefaults, EnvKey

logger = logging.getLogger(__name__)


def _str_to_bool(value: str | None) -> bool:
    """Convert string to boolean."""
    if value is None:
        return False
    return value.lower() in ("true", "1", "yes", "on")


@dataclass(frozen=True)
class Config:
    """Immutable connection parameters for a flagd instance.

    Attributes:
        host: Hostname or IP address of the flagd instance
        port: Port number of the flagd instance
        tls: Whether to connect over TLS
        cert_path: Optional path to a PEM-encoded CA certificate
        retry_opts: Transport retry settings, see `flagd_provider.network.retry`
        transport_opts: Options handed through to the transport client
        connect_timeout: Seconds the gRPC provider waits for its channel
    """

    host: str = ConfigDefaults.HOST
    port: int = ConfigDefaults.PORT
    tls: bool = ConfigDefaults.TLS
    cert_path: str | None = None
    retry_opts: Mapping[str, Any] = field(default_factory=dict, hash=False)
    transport_opts: Mapping[str, Any] = field(default_factory=dict, hash=False)
    connect_timeout: float = ConfigDefaults.CONNECT_TIMEOUT

    def __post_init__(self) -> None:
        if isinstance(self.port, bool) or not isinstance(self.port, int):
            raise ValueError(f"Port must be an integer, got {self.port!r}")
        if self.port <= 0:
            raise ValueError(f"Port must be greater than 0, got {self.port}")
        # read-only copies of the caller's mappings
        object.__setattr__(self, "retry_opts", MappingProxyType(dict(self.retry_opts)))
        object.__setattr__(
            self, "transport_opts", MappingProxyType(dict(self.transport_opts))
        )

    @classmethod
    def new(cls, **options: Any) -> "Config":
        """Build a config, applying defaults for unset options.

        Options passed as None are treated as unset.

        Raises:
            TypeError: If an unknown option is passed.
            ValueError: If the port is not a positive integer.
        """
        known = {f.name for f in fields(cls)}
        unknown = set(options) - known
        if unknown:
            raise TypeError(f"Unknown config options: {', '.join(sorted(unknown))}")
        return cls(**{k: v for k, v in options.items() if v is not None})

    @classmethod
    def from_env(cls, **overrides: Any) -> "Config":
        """Build a config from FLAGD_* environment variables.

        Explicit keyword overrides take precedence over the environment.
        """
        port = os.environ.get(EnvKey.PORT)
        tls = os.environ.get(EnvKey.TLS)
        connect_timeout = os.environ.get(EnvKey.CONNECT_TIMEOUT)
        options: dict[str, Any] = {
            "host": os.environ.get(EnvKey.HOST),
            "port": int(port) if port else None,
            "tls": _str_to_bool(tls) if tls is not None else None,
            "cert_path": os.environ.get(EnvKey.CERT_PATH),
            "connect_timeout": float(connect_timeout) if connect_timeout else None,
        }
        options.update(overrides)
        config = cls.new(**options)
        logger.debug(f"Loaded flagd config for {config.connection_target} from env")
        return config

    @property
    def base_url(self) -> str:
        """Base URL, including scheme, for the HTTP provider."""
        scheme = "https" if self.tls else "http"
        return f"{scheme}://{self.host}:{self.port}"

    @property
    def connection_target(self) -> str:
        """Network target for the gRPC provider."""
        return f"{self.host}:{self.port}"
