"""
In-memory TransportSession for tests.

Responses are registered up front and handed out in order; nothing depends
on wall-clock time. hold() parks incoming requests in flight until release(),
which is how cancellation of an in-flight request is exercised.
"""

import asyncio
import json as jsonlib
import logging
from collections import deque
from typing import Any, Deque, Dict, List, Optional, Tuple, Union

import httpx

from gitaccounts.core.errors import GitAPIError, TransportFailure
from gitaccounts.models.transport import RawResponse, Request
from gitaccounts.services.session import TransportSession

logger = logging.getLogger(__name__)

FakeOutcome = Union[RawResponse, Exception]


class FakeSession(TransportSession):
    def __init__(self) -> None:
        self.requests: List[Request] = []
        self.in_flight = 0
        self.completed = 0
        self.released_resources = 0
        self.closed = False
        self._by_key: Dict[Tuple[str, str], Deque[FakeOutcome]] = {}
        self._queue: Deque[FakeOutcome] = deque()
        self._gate: Optional[asyncio.Event] = None
        self._arrivals: Optional[asyncio.Condition] = None

    def add_response(
        self,
        status_code: int = 200,
        content: bytes = b"",
        headers: Optional[Dict[str, str]] = None,
        json: Any = None,
        method: Optional[str] = None,
        url: Optional[str] = None,
    ) -> None:
        """
        Register a response.

        With method and url it is served only to that request; without them
        it goes to a shared queue used for any unmatched request.
        """
        response_headers = dict(headers or {})
        if json is not None:
            content = jsonlib.dumps(json).encode("utf-8")
            response_headers.setdefault("Content-Type", "application/json")
        self._register(
            RawResponse(
                status_code=status_code,
                headers=httpx.Headers(response_headers),
                content=content,
                url=url or "",
            ),
            method,
            url,
        )

    def add_error(self, error: Exception, method: Optional[str] = None, url: Optional[str] = None) -> None:
        """Register a failure; non-GitAPIError exceptions are wrapped in TransportFailure."""
        self._register(error, method, url)

    def _register(self, outcome: FakeOutcome, method: Optional[str], url: Optional[str]) -> None:
        if method is None and url is None:
            self._queue.append(outcome)
            return
        if method is None or url is None:
            raise ValueError("method and url must be given together")
        self._by_key.setdefault((method.upper(), url), deque()).append(outcome)

    def hold(self) -> None:
        """Keep every request that arrives from now on in flight until release()."""
        if self._gate is None:
            self._gate = asyncio.Event()

    def release(self) -> None:
        if self._gate is not None:
            self._gate.set()
            self._gate = None

    async def wait_for_in_flight(self, count: int = 1) -> None:
        """Suspend until at least `count` requests are parked in flight."""
        arrivals = self._condition()
        async with arrivals:
            await arrivals.wait_for(lambda: self.in_flight >= count)

    def _condition(self) -> asyncio.Condition:
        if self._arrivals is None:
            self._arrivals = asyncio.Condition()
        return self._arrivals

    def _take(self, request: Request) -> FakeOutcome:
        matched = self._by_key.get((request.method.value, request.url))
        if matched:
            return matched.popleft()
        if self._queue:
            return self._queue.popleft()
        logger.warning(f"FakeSession has nothing registered for {request.method.value} {request.url}")
        return TransportFailure(LookupError(f"No fake response for {request.method.value} {request.url}"))

    async def _send(self, request: Request) -> RawResponse:
        self.requests.append(request)
        outcome = self._take(request)
        gate = self._gate

        self.in_flight += 1
        try:
            arrivals = self._condition()
            async with arrivals:
                arrivals.notify_all()
            if gate is not None:
                await gate.wait()
        finally:
            self.in_flight -= 1
            self.released_resources += 1

        self.completed += 1
        if isinstance(outcome, GitAPIError):
            raise outcome
        if isinstance(outcome, Exception):
            raise TransportFailure(outcome) from outcome
        return outcome

    async def close(self) -> None:
        self.closed = True
