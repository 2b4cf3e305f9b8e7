"""
Transport sessions.

A TransportSession executes Requests. Both calling conventions (await and
completion callback) go through the same RequestTask so they share one
guarantee: exactly one outcome per request, and a cancelled request always
ends in RequestState.CANCELLED with its connection released.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, Coroutine, Generic, List, Optional, Tuple, TypeVar

import httpx

from gitaccounts.core.config import Settings
from gitaccounts.core.errors import Cancelled, TransportFailure
from gitaccounts.core.http_utils import InstrumentedAsyncClient
from gitaccounts.models.transport import RawResponse, Request

logger = logging.getLogger(__name__)

T = TypeVar("T")

CompletionCallback = Callable[[Optional[T], Optional[Exception]], None]


class RequestState(str, Enum):
    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (RequestState.SUCCEEDED, RequestState.FAILED, RequestState.CANCELLED)


class RequestTask(Generic[T]):
    """
    One execution of an operation, observable by awaiting or by callback.

    State machine: IDLE -> IN_FLIGHT -> SUCCEEDED | FAILED | CANCELLED.
    Every registered callback is invoked exactly once with either
    (result, None) or (None, error). A Cancelled error always means the
    request was cancelled, never that I/O failed.
    """

    def __init__(self, operation: Callable[[], Coroutine[Any, Any, T]], label: str = "request"):
        self._operation = operation
        self.label = label
        self.state = RequestState.IDLE
        self._task: Optional[asyncio.Task] = None
        self._outcome: Optional[Tuple[Optional[T], Optional[Exception]]] = None
        self._callbacks: List[CompletionCallback] = []

    def start(self) -> "RequestTask[T]":
        if self.state is not RequestState.IDLE:
            raise RuntimeError(f"{self.label} is already {self.state.value}")
        self._task = asyncio.get_running_loop().create_task(self._operation())
        self.state = RequestState.IN_FLIGHT
        self._task.add_done_callback(self._settle)
        return self

    def done(self) -> bool:
        return self.state.is_terminal

    def cancel(self) -> bool:
        """Request cancellation. Returns False if the task already finished."""
        if self.state is RequestState.IDLE:
            self._finish(None, Cancelled(), RequestState.CANCELLED)
            return True
        if self.state is RequestState.IN_FLIGHT and self._task is not None:
            logger.debug(f"Cancelling {self.label}")
            return self._task.cancel()
        return False

    def add_done_callback(self, callback: CompletionCallback) -> None:
        if self._outcome is None:
            self._callbacks.append(callback)
        else:
            self._invoke(callback)

    async def wait(self) -> T:
        """
        Suspend until the outcome is available.

        Cancelling the awaiting caller cancels the request as well; the
        caller then sees asyncio.CancelledError as usual. A request
        cancelled through cancel() surfaces as Cancelled.
        """
        if self._task is None:
            if self.state is RequestState.CANCELLED:
                raise Cancelled()
            raise RuntimeError(f"{self.label} was never started")
        try:
            return await self._task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
            raise Cancelled() from None

    def _settle(self, task: asyncio.Task) -> None:
        if task.cancelled():
            self._finish(None, Cancelled(), RequestState.CANCELLED)
            return
        error = task.exception()
        if error is None:
            self._finish(task.result(), None, RequestState.SUCCEEDED)
        elif isinstance(error, Cancelled):
            self._finish(None, error, RequestState.CANCELLED)
        elif isinstance(error, Exception):
            self._finish(None, error, RequestState.FAILED)
        else:
            # KeyboardInterrupt/SystemExit: record and let asyncio report it
            self._finish(None, TransportFailure(error), RequestState.FAILED)

    def _finish(self, result: Optional[T], error: Optional[Exception], state: RequestState) -> None:
        self.state = state
        self._outcome = (result, error)
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            self._invoke(callback)

    def _invoke(self, callback: CompletionCallback) -> None:
        result, error = self._outcome  # type: ignore[misc]
        try:
            callback(result, error)
        except Exception as e:
            logger.exception(f"Completion callback for {self.label} raised: {e}")


class TransportSession(ABC):
    """
    Executes Requests against the network or a test double.

    Subclasses implement _send(); the public entry points below are shared
    so every implementation honours the same outcome guarantees.
    """

    @abstractmethod
    async def _send(self, request: Request) -> RawResponse:
        """
        Perform one request and return the full response.

        Must raise TransportFailure for I/O errors and must release any
        per-request resource before returning or raising (including on
        asyncio.CancelledError).
        """
        pass

    def start(self, request: Request) -> RequestTask[RawResponse]:
        label = f"{request.method.value} {request.url}"
        return RequestTask(lambda: self._send(request), label=label).start()

    async def execute(self, request: Request) -> RawResponse:
        """Suspension mode."""
        return await self.start(request).wait()

    def execute_with_callback(
        self, request: Request, callback: CompletionCallback[RawResponse]
    ) -> RequestTask[RawResponse]:
        """Callback mode: a continuation registered on the same RequestTask."""
        task = self.start(request)
        task.add_done_callback(callback)
        return task

    async def close(self) -> None:
        pass

    async def __aenter__(self) -> "TransportSession":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


class HTTPXSession(TransportSession):
    """
    Network session backed by a long-lived httpx.AsyncClient.

    Holds connections only; no route or request state survives between calls.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        service_name: str = "Git API",
        **client_kwargs,
    ):
        self.settings = settings or Settings()
        timeout = httpx.Timeout(
            self.settings.HTTP_TIMEOUT_SECONDS, connect=self.settings.CONNECT_TIMEOUT_SECONDS
        )
        client_kwargs.setdefault(
            "limits",
            httpx.Limits(
                max_connections=self.settings.MAX_CONNECTIONS,
                max_keepalive_connections=self.settings.MAX_KEEPALIVE_CONNECTIONS,
            ),
        )
        self._client = InstrumentedAsyncClient(service_name, timeout=timeout, **client_kwargs)

    async def _send(self, request: Request) -> RawResponse:
        await self._client.start()
        try:
            http_request = self._client.build_request(
                request.method.value,
                request.url,
                params=request.params or None,
                headers=request.headers,
                content=request.content,
            )
        except (httpx.InvalidURL, UnicodeEncodeError) as e:
            # Requests not produced by build_request() can carry unencodable values
            logger.warning(f"{request.method.value} {request.url} could not be encoded: {type(e).__name__}")
            raise TransportFailure(e) from e
        logger.debug(f"{request.method.value} {request.url} headers={request.redacted_headers()}")

        try:
            response, content = await self._client.fetch(http_request)
        except httpx.HTTPError as e:
            logger.warning(f"{request.method.value} {request.url} failed: {type(e).__name__}: {e}")
            raise TransportFailure(e) from e

        logger.debug(f"{request.method.value} {request.url} -> {response.status_code} ({len(content)} bytes)")
        return RawResponse(
            status_code=response.status_code,
            headers=response.headers,
            content=content,
            url=str(response.url),
        )

    async def close(self) -> None:
        await self._client.close()

    async def __aenter__(self) -> "HTTPXSession":
        await self._client.start()
        return self
