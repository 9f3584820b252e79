from __future__ import annotations

import logging
from typing import Protocol

import httpx

logger = logging.getLogger(__name__)


class TransportError(RuntimeError):
    def __init__(self, code: str, message: str, status_code: int | None = None):
        super().__init__(message)
        self.code = code
        self.status_code = status_code


class HttpAdapter(Protocol):
    def get(self, url: str) -> str:
        ...


class HttpFetcher:
    """
    Blocking GET over an httpx client. Returns the body text; any non-2xx
    status aborts the call with TransportError.
    """

    def __init__(self, client: httpx.Client):
        self._client = client

    def get(self, url: str) -> str:
        try:
            response = self._client.get(url)
        except httpx.HTTPError as exc:
            raise TransportError("TRANSPORT_UNREACHABLE", f"The request is failed with error {exc}") from exc

        if not response.is_success:
            logger.warning("GET %s returned %s", url, response.status_code)
            raise TransportError(
                "TRANSPORT_STATUS",
                f"The request is failed with error {response.status_code}",
                status_code=response.status_code,
            )
        return response.text

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "HttpFetcher":
        return self

    def __exit__(self, *_args: object) -> None:
        self.close()
