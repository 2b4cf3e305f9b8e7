"""
HTTP Utilities

Instrumented wrapper around httpx.AsyncClient used by the real transport
session. Records request, error, cancellation and duration metrics per
service.
"""

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional, Tuple, Union

import httpx

from gitaccounts.core.metrics import (
    external_api_cancelled_total,
    external_api_duration_seconds,
    external_api_errors_total,
    external_api_requests_in_flight,
    external_api_requests_total,
    external_api_responses_total,
)

logger = logging.getLogger(__name__)

CLIENT_NOT_STARTED = "InstrumentedAsyncClient is not open; call start() or use it as an async context manager"


def status_class(status_code: int) -> str:
    """Bucket a status code into '2xx', '4xx', ... for metric labels."""
    return f"{status_code // 100}xx"


class InstrumentedAsyncClient:
    """
    httpx.AsyncClient holder that records Prometheus metrics for every send().

    The wrapped client is created lazily and reused until close(), so one
    instance can back a long-lived session:

        async with InstrumentedAsyncClient("GitLab API", timeout=30.0) as client:
            response = await client.send(client.build_request("GET", url), stream=True)
    """

    def __init__(
        self,
        service_name: str,
        timeout: Union[float, httpx.Timeout] = 30.0,
        **client_kwargs,
    ):
        self.service_name = service_name
        self._timeout = timeout
        self._client_kwargs = client_kwargs
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def is_started(self) -> bool:
        return self._client is not None

    async def start(self) -> None:
        if self._client is not None:
            return
        logger.debug(f"Opening HTTP client for {self.service_name}")
        self._client = httpx.AsyncClient(timeout=self._timeout, **self._client_kwargs)

    async def close(self) -> None:
        client, self._client = self._client, None
        if client is not None:
            await client.aclose()

    async def __aenter__(self) -> "InstrumentedAsyncClient":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def _require_client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError(CLIENT_NOT_STARTED)
        return self._client

    def _record_request(self) -> None:
        external_api_requests_total.labels(service=self.service_name).inc()

    def _record_response(self, elapsed: float, status_code: int) -> None:
        external_api_duration_seconds.labels(service=self.service_name).observe(elapsed)
        external_api_responses_total.labels(
            service=self.service_name, status_class=status_class(status_code)
        ).inc()

    def _record_error(self) -> None:
        external_api_errors_total.labels(service=self.service_name).inc()

    def _record_cancel(self) -> None:
        external_api_cancelled_total.labels(service=self.service_name).inc()

    @asynccontextmanager
    async def _track(self) -> AsyncIterator[None]:
        """Request counter and in-flight gauge around one send; failures count as cancel or error."""
        self._record_request()
        in_flight = external_api_requests_in_flight.labels(service=self.service_name)
        in_flight.inc()
        try:
            yield
        except asyncio.CancelledError:
            self._record_cancel()
            raise
        except Exception:
            self._record_error()
            raise
        finally:
            in_flight.dec()

    def build_request(self, method: str, url: str, **kwargs) -> httpx.Request:
        return self._require_client().build_request(method, url, **kwargs)

    async def send(self, request: httpx.Request, **kwargs) -> httpx.Response:
        """
        Send a prepared request with metrics.

        With stream=True the metrics stop once the headers arrive; use
        fetch() when the body read should be measured too.
        """
        client = self._require_client()
        started = time.monotonic()
        async with self._track():
            response = await client.send(request, **kwargs)
        self._record_response(time.monotonic() - started, response.status_code)
        return response

    async def fetch(self, request: httpx.Request) -> Tuple[httpx.Response, bytes]:
        """
        Send a request, read the whole body and release the connection.

        Duration and in-flight metrics cover the body read. The response is
        closed on every exit path, cancellation included.
        """
        client = self._require_client()
        started = time.monotonic()
        async with self._track():
            response = await client.send(request, stream=True)
            try:
                content = await response.aread()
            finally:
                await response.aclose()
        self._record_response(time.monotonic() - started, response.status_code)
        return response, content
