"""HTTP client with timeouts and response classification."""

from __future__ import annotations

from dataclasses import dataclass
from types import TracebackType

import requests

from catfacts.common.constants import USER_AGENT
from catfacts.common.errors import (
    ClientError,
    ConfigError,
    HttpStatusError,
    NetworkError,
    ServerError,
)
from catfacts.common.models import FetchResult


@dataclass(frozen=True)
class TimeoutConfig:
    connect: float = 10.0
    read: float = 30.0


def classify_response(status: int, body: str, url: str) -> FetchResult:
    """Map a status code onto a result, raising for anything outside 2xx."""
    if 200 <= status <= 299:
        return FetchResult(status=status, body=body, url=url)
    if 400 <= status <= 499:
        raise ClientError(status, body, url=url)
    if 500 <= status <= 599:
        raise ServerError(status, body, url=url)
    raise HttpStatusError(status, body, url=url)


class HttpClient:
    def __init__(self, *, timeout: TimeoutConfig | None = None) -> None:
        self.timeout = timeout or TimeoutConfig()
        self.session = requests.Session()

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _headers(self, headers: dict[str, str] | None) -> dict[str, str]:
        out = {"User-Agent": USER_AGENT, "Accept": "application/json"}
        if headers:
            out.update(headers)
        return out

    def fetch(
        self,
        endpoint: str,
        *,
        headers: dict[str, str] | None = None,
        timeout: TimeoutConfig | None = None,
    ) -> FetchResult:
        if not endpoint:
            raise ConfigError("Endpoint URL must not be empty")
        req_timeout = timeout or self.timeout

        try:
            response = self.session.request(
                method="GET",
                url=endpoint,
                headers=self._headers(headers),
                timeout=(req_timeout.connect, req_timeout.read),
            )
            body = response.text
        except requests.RequestException as exc:
            raise NetworkError(f"No response from {endpoint}: {exc}", cause=exc) from exc

        return classify_response(response.status_code, body, endpoint)
