# src/sources/base_source.py

"""Abstract base class for upstream price data sources."""

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Self

from curl_cffi import requests as curl_requests

from src.config.settings import Settings
from src.errors import DataSourceError
from src.models.health_result import (
    STATUS_DOWN,
    STATUS_OK,
    STATUS_SLOW,
    HealthResult,
)
from src.models.price_record import PriceRecord


class BaseSource(ABC):
    """Shared HTTP plumbing for every upstream client.

    Requests go through a browser-impersonating ``curl_cffi`` session.
    Each call is attempted ``MAX_RETRIES`` times; when every attempt
    fails a :class:`DataSourceError` is raised so the caller can turn it
    into an error response.
    """

    def __init__(self, source_name: str) -> None:
        self.source_name = source_name
        self.logger = logging.getLogger(
            f"naftas.sources.{source_name}"
        )
        self.settings = Settings()
        self.session = curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )
        self._request_timeout: int = (
            self.settings.REQUEST_TIMEOUT
        )

    def close(self) -> None:
        """Release the curl session and its connections."""
        self.session.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _send(
        self,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> curl_requests.Response:
        """Send a request, raising DataSourceError after the last failure."""
        headers = {
            **self.settings.DEFAULT_HEADERS,
            **kwargs.pop("headers", {}),
        }
        last_error = "no attempt made"
        for attempt in range(self.settings.MAX_RETRIES):
            try:
                resp = self.session.request(
                    method,
                    url,
                    headers=headers,
                    timeout=self._request_timeout,
                    **kwargs,
                )
            except Exception as exc:
                self.logger.warning(
                    "[%s] Request error on attempt %d: %s",
                    self.source_name,
                    attempt + 1,
                    exc,
                    exc_info=True,
                )
                last_error = str(exc)
                continue

            if 200 <= resp.status_code < 300:
                return resp
            self.logger.warning(
                "[%s] HTTP %d on attempt %d",
                self.source_name,
                resp.status_code,
                attempt + 1,
            )
            last_error = f"HTTP {resp.status_code}"

        self.logger.error(
            "[%s] %s %s failed: %s",
            self.source_name,
            method,
            url,
            last_error,
        )
        raise DataSourceError(
            f"{self.source_name}: request failed ({last_error})"
        )

    def _fetch_get(
        self, url: str, **kwargs: Any,
    ) -> curl_requests.Response:
        """GET *url* (see :meth:`_send`)."""
        return self._send("GET", url, **kwargs)

    def _fetch_post(
        self, url: str, **kwargs: Any,
    ) -> curl_requests.Response:
        """POST to *url* (see :meth:`_send`)."""
        return self._send("POST", url, **kwargs)

    def _decode_json(self, resp: curl_requests.Response) -> Any:
        """Decode a JSON body or raise DataSourceError."""
        try:
            return resp.json()
        except ValueError as exc:
            self.logger.error(
                "[%s] Malformed JSON payload: %s",
                self.source_name,
                exc,
            )
            raise DataSourceError(
                f"{self.source_name}: malformed JSON payload"
            ) from exc

    @abstractmethod
    def health_url(self) -> str:
        """Return a URL that answers when the upstream is reachable."""
        ...

    def check_health(self) -> HealthResult:
        """HEAD the health URL once and classify the answer.

        A 405 still counts as reachable: some upstreams only take POST.
        Slower than ``HEALTH_SLOW_MS`` is ``slow``; a transport error or
        any other 4xx/5xx is ``down``.
        """
        start = time.monotonic()
        try:
            resp = self.session.head(
                self.health_url(),
                headers=self.settings.DEFAULT_HEADERS,
                timeout=self.settings.HEALTH_TIMEOUT,
            )
        except Exception as exc:
            latency_ms = (time.monotonic() - start) * 1000
            self.logger.warning(
                "[%s] Health check failed: %s", self.source_name, exc
            )
            return HealthResult(
                self.source_name, STATUS_DOWN, latency_ms, str(exc)[:80]
            )

        latency_ms = (time.monotonic() - start) * 1000
        if resp.status_code >= 400 and resp.status_code != 405:
            status, message = STATUS_DOWN, f"HTTP {resp.status_code}"
        elif latency_ms > self.settings.HEALTH_SLOW_MS:
            status, message = STATUS_SLOW, "High latency"
        else:
            status, message = STATUS_OK, ""
        return HealthResult(self.source_name, status, latency_ms, message)


class PriceSource(BaseSource):
    """A data-source strategy that yields raw price records."""

    @abstractmethod
    def fetch_raw_records(
        self,
        locality: str | None = None,
        brand: str | None = None,
    ) -> list[PriceRecord]:
        """Fetch records, optionally narrowed to a locality and brand."""
        ...
