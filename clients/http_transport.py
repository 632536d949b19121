"""
HTTP transport used by upstream clients.

Upstream clients only need "POST this, give me status and body". Keeping
that behind a small interface lets tests and alternative runtimes swap the
transport without touching protocol code.
"""

import logging
from dataclasses import dataclass
from typing import Any, Protocol

import requests

logger = logging.getLogger(__name__)


class TransportError(Exception):
    """Request never produced an HTTP response (DNS, connect, TLS, timeout...)."""


@dataclass
class HttpResult:
    """Raw HTTP response."""

    status_code: int
    text: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class HttpTransport(Protocol):
    def post(
        self,
        url: str,
        headers: dict[str, str],
        params: list[tuple[str, str]],
        json_body: Any | None = None,
    ) -> HttpResult: ...


class RequestsTransport:
    """
    HttpTransport backed by requests.

    Stateless: no cookie jar is kept between calls.
    """

    def __init__(self, timeout: float | None = None):
        self._timeout = timeout

    def post(
        self,
        url: str,
        headers: dict[str, str],
        params: list[tuple[str, str]],
        json_body: Any | None = None,
    ) -> HttpResult:
        """
        POST and return status plus body text.

        Raises:
            TransportError: On any connection-level failure.
        """
        try:
            response = requests.post(
                url,
                headers=headers,
                params=params,
                json=json_body,
                timeout=self._timeout,
            )
        except (requests.exceptions.RequestException, ConnectionError) as e:
            logger.error(f"POST {url} failed: {e}")
            raise TransportError(f"Connection failed: {e}")

        return HttpResult(status_code=response.status_code, text=response.text)
