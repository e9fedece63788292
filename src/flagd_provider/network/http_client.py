import logging
from typing import Any

import requests

from flagd_provider.network.enums import HTTPMethod

logger = logging.getLogger(__name__)


class HttpClient:
    """Lightweight HTTP client wrapper around `requests.Session`.

    Binds a session to a base URL, a method, default headers and request
    options. Holds no per-request state so one instance can serve concurrent
    calls.
    """

    def __init__(
        self,
        session: requests.Session,
        base_url: str,
        method: HTTPMethod = HTTPMethod.POST,
        headers: dict[str, str] | None = None,
        **request_options: Any,
    ):
        """Initialize HttpClient.

        Args:
            session (requests.Session): Session object for making requests.
            base_url (str): Base URL for the API.
            method (HTTPMethod): HTTP method used for every request.
            headers (dict | None): Headers sent with every request.
            **request_options: Keyword arguments passed to `session.request`,
                e.g. timeout, verify, cert, proxies, auth.
        """
        self.session = session
        self.base_url = base_url.rstrip("/")
        self.method = method
        self.headers = dict(headers or {})
        self.request_options = request_options

    def request(self, endpoint: str, **kwargs: Any) -> requests.Response:
        """Send a request to `endpoint`, relative to the base URL.

        Args:
            endpoint (str): API endpoint
            **kwargs: Additional keyword arguments for `session.request`,
                overriding the client defaults

        Returns:
            requests.Response: Response object, whatever its status

        Raises:
            requests.exceptions.RequestException: If the request fails
        """
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        options = {**self.request_options, **kwargs}
        headers = {**self.headers, **options.pop("headers", {})}
        try:
            return self.session.request(
                method=self.method.value, url=url, headers=headers, **options
            )
        except requests.exceptions.RequestException as e:
            logger.debug(f"{self.method.value} {url} failed: {e}")
            raise
