"""flagd provider over the HTTP/JSON evaluation API.

Each resolution is one JSON POST to
`{base_url}/flagd.evaluation.v1.Service/{Method}`. Failures are caught at
this boundary and returned as tagged results.
"""

import json
import logging
from typing import Any, Optional

import requests

from flagd_provider.config import Config
from flagd_provider.constants import FlagdService, HttpWire
from flagd_provider.exceptions import (
    FlagNotFoundError,
    RemoteEvaluationError,
    UnexpectedError,
)
from flagd_provider.models import (
    NumericKind,
    ProviderState,
    ResolutionDetails,
    Result,
    to_reason,
)
from flagd_provider.network.enums import HTTPMethod
from flagd_provider.network.http_client import HttpClient
from flagd_provider.network.retry import get_retry_session
from flagd_provider.provider import AbstractProvider, EvaluationContext
from flagd_provider.utils import to_plain_data

logger = logging.getLogger(__name__)


class HttpProvider(AbstractProvider):
    """flagd provider using the HTTP evaluation API.

    Attributes:
        client (HttpClient | None): Request client bound to the flagd base
            URL, created by `initialize`.

    Example:
        ```python
        provider = HttpProvider(Config.new(port=8013))
        provider.initialize(domain="checkout").unwrap()

        result = provider.resolve_boolean_value("new-checkout", False, {"user": "bo"})
        if result.ok:
            print(result.value.value, result.value.reason)
        ```
    """

    name = "FlagdHTTP"

    def __init__(
        self,
        config: Optional[Config] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialize the provider.

        Args:
            config: Connection settings. Defaults to `Config()`.
            session: Optional preconfigured session used instead of one built
                from `config.retry_opts`.
        """
        super().__init__(config)
        self.session = session
        self.client: Optional[HttpClient] = None

    def initialize(
        self, domain: Optional[str] = None, context: Optional[EvaluationContext] = None
    ) -> Result["HttpProvider"]:
        if self.client is None:
            self.client = self._build_client()
            logger.info(f"{self.name} provider bound to {self.client.base_url}")
        self.domain = domain
        self.state = ProviderState.READY
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
        # `kind` is ignored, the HTTP API has a single numeric method
        return self._resolve(FlagdService.RESOLVE_NUMBER, key, context)

    def resolve_map_value(
        self, key: str, default: dict, context: Optional[EvaluationContext] = None
    ) -> Result[ResolutionDetails]:
        return self._resolve(FlagdService.RESOLVE_OBJECT, key, context)

    def _build_client(self) -> HttpClient:
        transport_opts = dict(self.config.transport_opts)
        headers = {"Content-Type": HttpWire.CONTENT_TYPE}
        headers.update(transport_opts.pop("headers", {}))
        if self.config.tls and self.config.cert_path:
            transport_opts.setdefault("verify", self.config.cert_path)
        session = self.session or get_retry_session(self.config.retry_opts)
        return HttpClient(
            session=session,
            base_url=self.config.base_url,
            method=HTTPMethod.POST,
            headers=headers,
            **transport_opts,
        )

    def _resolve(
        self, method_name: str, key: str, context: Optional[EvaluationContext]
    ) -> Result[ResolutionDetails]:
        self._ensure_ready()
        try:
            body = json.dumps(
                {
                    HttpWire.FLAG_KEY: key,
                    HttpWire.CONTEXT: to_plain_data(context or {}),
                }
            )
        except (TypeError, ValueError) as e:
            logger.error(f"Failed to encode evaluation request for flag '{key}': {e}")
            return Result.failure(
                UnexpectedError("Failed to encode evaluation request", original_error=e)
            )

        try:
            logger.debug(f"Resolving flag '{key}' via {method_name}")
            endpoint = f"/{FlagdService.NAME}/{method_name}"
            response = self.client.request(endpoint, data=body)
            return self._parse_response(key, response)
        except Exception as e:
            logger.error(f"Error resolving flag '{key}' over HTTP: {e}")
            return Result.failure(UnexpectedError(str(e), original_error=e))

    def _parse_response(
        self, key: str, response: requests.Response
    ) -> Result[ResolutionDetails]:
        if response.status_code == 200:
            body = response.json()
            return Result.success(
                ResolutionDetails(
                    value=body.get(HttpWire.VALUE),
                    variant=body.get(HttpWire.VARIANT),
                    reason=to_reason(body.get(HttpWire.REASON)),
                    flag_metadata=body.get(HttpWire.FLAG_METADATA),
                )
            )

        body = self._error_body(response)
        message = body.get(HttpWire.ERROR_MESSAGE) or HttpWire.DEFAULT_ERROR_MESSAGE
        code = body.get(HttpWire.ERROR_CODE) or HttpWire.DEFAULT_ERROR_CODE
        if code == HttpWire.NOT_FOUND_CODE:
            return Result.failure(FlagNotFoundError(f"Flag '{key}' not found"))

        error = RemoteEvaluationError(code, message)
        logger.error(
            f"flagd returned status {response.status_code} for flag '{key}': {error}"
        )
        return Result.failure(UnexpectedError(str(error), original_error=error))

    @staticmethod
    def _error_body(response: requests.Response) -> dict[str, Any]:
        try:
            body = response.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {}
