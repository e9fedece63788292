import json

import pytest
from requests.adapters import HTTPAdapter

from flagd_provider.network.retry import get_grpc_service_config, get_retry_session


class TestGetRetrySession:
    @pytest.mark.parametrize("retry_opts", [None, {}, {"retry_count": 0}])
    def test_no_retries(self, retry_opts) -> None:
        session = get_retry_session(retry_opts)

        assert session.get_adapter("http://flagd").max_retries.total == 0

    def test_retry_strategy(self) -> None:
        session = get_retry_session(
            {"retry_count": 4, "backoff_factor": 1, "status_forcelist": [503]}
        )

        for url in ("http://flagd", "https://flagd"):
            adapter = session.get_adapter(url)
            assert isinstance(adapter, HTTPAdapter)
            retry = adapter.max_retries
            assert retry.total == 4
            assert retry.backoff_factor == 1
            assert retry.status_forcelist == [503]
            assert "POST" in retry.allowed_methods
            assert retry.raise_on_status is False

    def test_defaults(self) -> None:
        retry = get_retry_session({"backoff_factor": 2}).get_adapter("http://x").max_retries

        assert retry.total == 3
        assert retry.status_forcelist == [429, 500, 502, 503, 504]


class TestGetGrpcServiceConfig:
    @pytest.mark.parametrize("retry_opts", [None, {}, {"retry_count": 0}])
    def test_no_retries(self, retry_opts) -> None:
        assert get_grpc_service_config(retry_opts) is None

    def test_retry_policy(self) -> None:
        service_config = json.loads(
            get_grpc_service_config(
                {"retry_count": 2, "backoff_factor": 0.1, "max_backoff": 1}
            )
        )

        method_config = service_config["methodConfig"][0]
        assert method_config["name"] == [{"service": "flagd.evaluation.v1.Service"}]
        assert method_config["retryPolicy"] == {
            "maxAttempts": 3,
            "initialBackoff": "0.100s",
            "maxBackoff": "1.000s",
            "backoffMultiplier": 2,
            "retryableStatusCodes": ["UNAVAILABLE"],
        }

    @pytest.mark.parametrize("retry_count, attempts", [(1, 2), (4, 5), (10, 5)])
    def test_max_attempts_is_clamped(self, retry_count: int, attempts: int) -> None:
        service_config = json.loads(get_grpc_service_config({"retry_count": retry_count}))

        assert service_config["methodConfig"][0]["retryPolicy"]["maxAttempts"] == attempts

    @pytest.mark.parametrize(
        "backoff_factor, max_backoff, initial, maximum",
        [
            (0, 1, "0.001s", "1.000s"),
            (1e-05, 1e-05, "0.001s", "0.001s"),
            (2, 1, "2.000s", "2.000s"),
        ],
    )
    def test_backoff_is_positive_decimal(
        self, backoff_factor: float, max_backoff: float, initial: str, maximum: str
    ) -> None:
        service_config = json.loads(
            get_grpc_service_config(
                {
                    "retry_count": 2,
                    "backoff_factor": backoff_factor,
                    "max_backoff": max_backoff,
                }
            )
        )

        retry_policy = service_config["methodConfig"][0]["retryPolicy"]
        assert retry_policy["initialBackoff"] == initial
        assert retry_policy["maxBackoff"] == maximum
