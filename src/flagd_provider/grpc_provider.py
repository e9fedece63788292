"""flagd provider over the gRPC evaluation API."""

import logging
from typing import Any, Optional

import grpc

from flagd_provider.config import Config
from flagd_provider.constants import FlagdService
from flagd_provider.credentials import (
    CertificateLoader,
    build_channel_credentials,
    load_pem_certificate,
)
from flagd_provider.exceptions import (
    FlagNotFoundError,
    ProviderNotReadyError,
    UnexpectedError,
)
from flagd_provider.models import (
    NumericKind,
    ProviderState,
    ResolutionDetails,
    Result,
    to_reason,
)
from flagd_provider.network.retry import get_grpc_service_config
from flagd_provider.proto.evaluation import METHODS, EvaluationStub
from flagd_provider.proto.struct_codec import decode_value, encode_context
from flagd_provider.provider import AbstractProvider, EvaluationContext

logger = logging.getLogger(__name__)

NUMERIC_METHODS = {
    NumericKind.INT: FlagdService.RESOLVE_INT,
    NumericKind.FLOAT: FlagdService.RESOLVE_FLOAT,
}


def _describe_rpc_error(error: Exception) -> str:
    code = getattr(error, "code", None)
    details = getattr(error, "details", None)
    if callable(code) and callable(details):
        return f"{code()}: {details()}"
    return str(error) or error.__class__.__name__


class GrpcProvider(AbstractProvider):
    """flagd provider using the gRPC evaluation API.

    Any failed RPC is reported as flag_not_found, because the response schema
    carries no structured error code.

    Attributes:
        channel (grpc.Channel | None): Channel opened by `initialize`.
        stub (EvaluationStub | None): Stub bound to `channel`.

    Example:
        ```python
        provider = GrpcProvider(Config.new(host="flagd", tls=True))
        result = provider.initialize()
        if not result.ok:
            raise result.error

        provider.resolve_number_value("max-items", 10)  # ResolveInt
        provider.resolve_number_value("ratio", 0.5)  # ResolveFloat
        ```
    """

    name = "FlagdGRPC"

    def __init__(
        self,
        config: Optional[Config] = None,
        certificate_loader: CertificateLoader = load_pem_certificate,
    ) -> None:
        """Initialize the provider.

        Args:
            config: Connection settings. Defaults to `Config()`.
            certificate_loader: Turns `config.cert_path` into PEM trust roots.
        """
        super().__init__(config)
        self.certificate_loader = certificate_loader
        self.channel: Optional[grpc.Channel] = None
        self.stub: Optional[EvaluationStub] = None

    def initialize(
        self, domain: Optional[str] = None, context: Optional[EvaluationContext] = None
    ) -> Result["GrpcProvider"]:
        target = self.config.connection_target
        try:
            credentials = build_channel_credentials(
                self.config, self.certificate_loader
            )
        except (OSError, ValueError) as e:
            logger.error(
                f"Failed to load TLS certificate '{self.config.cert_path}': {e}"
            )
            return Result.failure(
                ProviderNotReadyError(
                    f"Failed to load TLS certificate for {target}", original_error=e
                )
            )

        channel = self._open_channel(target, credentials)
        try:
            grpc.channel_ready_future(channel).result(
                timeout=self.config.connect_timeout
            )
        except grpc.FutureTimeoutError as e:
            channel.close()
            logger.error(f"Unable to connect to flagd at {target}")
            return Result.failure(
                ProviderNotReadyError(
                    f"Unable to connect to flagd at {target}", original_error=e
                )
            )

        previous_channel = self.channel
        self.channel = channel
        self.stub = EvaluationStub(channel)
        if previous_channel is not None:
            previous_channel.close()
        self.domain = domain
        self.state = ProviderState.READY
        logger.info(f"{self.name} provider connected to {target}")
        return Result.success(self)

    def resolve_boolean_value(
        self, key: str, default: bool, context: Optional[EvaluationContext] = None
    ) -> Result[ResolutionDetails]:
        return self._resolve(FlagdService.RESOLVE_BOOLEAN, key, context)

    def resolve_string_value(
        self, key: str, default: str, context: Optional[EvaluationContext] = None
    ) -> Result[ResolutionDetails]:
        return self._resolve(FlagdService.RESOLVE_STRING, key, context)

    def resolve_number_value(
        self,
        key: str,
        default: int | float,
        context: Optional[EvaluationContext] = None,
        kind: Optional[NumericKind] = None,
    ) -> Result[ResolutionDetails]:
        """Resolve a numeric flag with ResolveInt or ResolveFloat.

        The RPC is chosen before the call, from `kind` when given, otherwise
        from the type of `default`: an int selects ResolveInt, anything else
        selects ResolveFloat.
        """
        kind = kind or NumericKind.of(default)
        return self._resolve(NUMERIC_METHODS[kind], key, context)

    def resolve_map_value(
        self, key: str, default: dict, context: Optional[EvaluationContext] = None
    ) -> Result[ResolutionDetails]:
        return self._resolve(FlagdService.RESOLVE_OBJECT, key, context)

    def _open_channel(
        self, target: str, credentials: Optional[grpc.ChannelCredentials]
    ) -> grpc.Channel:
        options = [
            (k, v)
            for k, v in self.config.transport_opts.items()
            if k.startswith("grpc.")
        ]
        service_config = get_grpc_service_config(self.config.retry_opts)
        if service_config:
            options.append(("grpc.enable_retries", 1))
            options.append(("grpc.service_config", service_config))
        if credentials is not None:
            return grpc.secure_channel(target, credentials, options=options)
        return grpc.insecure_channel(target, options=options)

    def _call_options(self) -> dict[str, Any]:
        transport_opts = self.config.transport_opts
        options: dict[str, Any] = {}
        if "timeout" in transport_opts:
            options["timeout"] = transport_opts["timeout"]
        if "metadata" in transport_opts:
            options["metadata"] = list(transport_opts["metadata"])
        return options

    def _resolve(
        self, method_name: str, key: str, context: Optional[EvaluationContext]
    ) -> Result[ResolutionDetails]:
        self._ensure_ready()
        request_class, _ = METHODS[method_name]
        try:
            request = request_class(flag_key=key, context=encode_context(context))
        except (TypeError, ValueError) as e:
            logger.error(f"Failed to encode evaluation context for flag '{key}': {e}")
            return Result.failure(
                UnexpectedError("Failed to encode evaluation context", original_error=e)
            )

        rpc = getattr(self.stub, method_name)
        try:
            logger.debug(f"Resolving flag '{key}' via {method_name}")
            response = rpc(request, **self._call_options())
        except Exception as e:
            # Every failed RPC is reported as flag_not_found
            logger.warning(
                f"Flag '{key}' could not be resolved: {_describe_rpc_error(e)}"
            )
            return Result.failure(
                FlagNotFoundError(f"Flag '{key}' not found", original_error=e)
            )

        return Result.success(self._to_details(response))

    @staticmethod
    def _to_details(response) -> ResolutionDetails:
        metadata = None
        if response.HasField("metadata"):
            metadata = decode_value(response.metadata)
        return ResolutionDetails(
            value=decode_value(response.value),
            variant=response.variant or None,
            reason=to_reason(response.reason),
            flag_metadata=metadata,
        )
