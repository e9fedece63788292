"""Transport level retries driven by `Config.retry_opts`.

Both transports read the same keys:

    retry_count             number of retries (0 or absent disables retries)
    backoff_factor          base delay in seconds
    max_backoff             upper bound of a single delay in seconds
    status_forcelist        HTTP statuses to retry
    retryable_status_codes  gRPC status code names to retry
"""

import json
from collections.abc import Mapping
from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util import Retry

from flagd_provider.constants import FlagdService
from flagd_provider.network.enums import HTTPMethod

DEFAULT_RETRY_COUNT = 3
DEFAULT_BACKOFF_FACTOR = 0.5
DEFAULT_MAX_BACKOFF = 5.0
DEFAULT_STATUS_FORCELIST = [429, 500, 502, 503, 504]
DEFAULT_RETRYABLE_STATUS_CODES = ["UNAVAILABLE"]

# gRPC rejects retry policies outside this range
GRPC_MIN_ATTEMPTS = 2
GRPC_MAX_ATTEMPTS = 5
# backoff durations must be positive, written as decimal seconds
GRPC_MIN_BACKOFF = 0.001


def _duration(seconds: float) -> str:
    return f"{seconds:.3f}s"


def _retry_count(retry_opts: Mapping[str, Any]) -> int:
    if not retry_opts:
        return 0
    return int(retry_opts.get("retry_count", DEFAULT_RETRY_COUNT))


def get_retry_session(
    retry_opts: Mapping[str, Any] | None = None,
    allowed_methods: list[str] | None = None,
) -> requests.Session:
    """Get a requests session, with a retry strategy when one is configured.

    The wait time before retry attempt N is:
        backoff_factor * (2^(N-1)) seconds, capped at max_backoff

    Args:
        retry_opts (Mapping, optional): Retry settings. Empty or None gives a
            plain session.
        allowed_methods (list, optional): Methods to retry. Defaults to GET and POST.

    Returns:
        requests.Session: HTTP session.

    Examples:
        >>> session = get_retry_session({"retry_count": 5, "backoff_factor": 1})
        >>> response = session.post("http://localhost:8013/...")
    """
    session = requests.Session()
    retry_opts = retry_opts or {}
    retry_count = _retry_count(retry_opts)
    if retry_count <= 0:
        return session

    allowed_methods = allowed_methods or [HTTPMethod.GET.value, HTTPMethod.POST.value]
    retry_strategy = Retry(
        total=retry_count,
        backoff_factor=retry_opts.get("backoff_factor", DEFAULT_BACKOFF_FACTOR),
        backoff_max=retry_opts.get("max_backoff", DEFAULT_MAX_BACKOFF),
        status_forcelist=retry_opts.get("status_forcelist", DEFAULT_STATUS_FORCELIST),
        allowed_methods=allowed_methods,
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry_strategy)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session


def get_grpc_service_config(retry_opts: Mapping[str, Any] | None = None) -> str | None:
    """Build a `grpc.service_config` JSON document with a retry policy.

    Returns None when retries are disabled.
    """
    retry_opts = retry_opts or {}
    retry_count = _retry_count(retry_opts)
    if retry_count <= 0:
        return None

    max_attempts = min(max(retry_count + 1, GRPC_MIN_ATTEMPTS), GRPC_MAX_ATTEMPTS)
    backoff_factor = float(retry_opts.get("backoff_factor", DEFAULT_BACKOFF_FACTOR))
    max_backoff = float(retry_opts.get("max_backoff", DEFAULT_MAX_BACKOFF))
    initial_backoff = max(backoff_factor, GRPC_MIN_BACKOFF)
    max_backoff = max(max_backoff, initial_backoff)
    service_config = {
        "methodConfig": [
            {
                "name": [{"service": FlagdService.NAME}],
                "retryPolicy": {
                    "maxAttempts": max_attempts,
                    "initialBackoff": _duration(initial_backoff),
                    "maxBackoff": _duration(max_backoff),
                    "backoffMultiplier": 2,
                    "retryableStatusCodes": list(
                        retry_opts.get(
                            "retryable_status_codes", DEFAULT_RETRYABLE_STATUS_CODES
                        )
                    ),
                },
            }
        ]
    }
    return json.dumps(service_config)
