"""Tests for RequestTask, the session entry points and cancellation."""

import asyncio
import json
import logging

import httpx
import pytest

from gitaccounts.core.errors import Cancelled, GitAPIError, TransportFailure
from gitaccounts.models.transport import HTTPMethod, Request
from gitaccounts.routes.gitlab import ReadCommit, ReadCommits
from gitaccounts.services.fake_session import FakeSession
from gitaccounts.services.request_builder import build_request
from gitaccounts.services.session import HTTPXSession, RequestState, RequestTask
from tests.mocks.gitlab import GITLAB_TEST_API, make_commit_payload, make_gitlab_configuration


class StalledStream(httpx.AsyncByteStream):
    """Response body that never delivers a chunk."""

    def __init__(self):
        self.reading = asyncio.Event()
        self.closed = False

    async def __aiter__(self):
        self.reading.set()
        await asyncio.Event().wait()
        yield b""

    async def aclose(self):
        self.closed = True


def commits_request(project_id="42"):
    return build_request(ReadCommits(configuration=make_gitlab_configuration(), id=project_id))


class TestRequestTask:
    def test_success_invokes_callback_once(self):
        calls = []

        async def run():
            async def operation():
                return "done"

            task = RequestTask(operation, label="op").start()
            task.add_done_callback(lambda result, error: calls.append((result, error)))
            result = await task.wait()
            return task, result

        task, result = asyncio.run(run())
        assert result == "done"
        assert task.state is RequestState.SUCCEEDED
        assert calls == [("done", None)]

    def test_failure_state(self):
        async def run():
            async def operation():
                raise TransportFailure(httpx.ConnectError("refused"))

            task = RequestTask(operation).start()
            with pytest.raises(TransportFailure):
                await task.wait()
            return task

        assert asyncio.run(run()).state is RequestState.FAILED

    def test_late_callback_invoked_immediately(self):
        calls = []

        async def run():
            async def operation():
                return 1

            task = RequestTask(operation).start()
            await task.wait()
            task.add_done_callback(lambda result, error: calls.append(result))

        asyncio.run(run())
        assert calls == [1]

    def test_cannot_start_twice(self):
        async def run():
            async def operation():
                return None

            task = RequestTask(operation).start()
            with pytest.raises(RuntimeError):
                task.start()
            await task.wait()

        asyncio.run(run())

    def test_cancel_before_start(self):
        calls = []

        async def run():
            async def operation():
                return "never"

            task = RequestTask(operation)
            assert task.cancel()
            task.add_done_callback(lambda result, error: calls.append(error))
            with pytest.raises(Cancelled):
                await task.wait()
            return task

        task = asyncio.run(run())
        assert task.state is RequestState.CANCELLED
        assert len(calls) == 1
        assert isinstance(calls[0], Cancelled)

    def test_raising_callback_does_not_block_others(self):
        calls = []

        def broken(result, error):
            raise ValueError("callback bug")

        async def run():
            async def operation():
                return "ok"

            task = RequestTask(operation).start()
            task.add_done_callback(broken)
            task.add_done_callback(lambda result, error: calls.append(result))
            await task.wait()

        asyncio.run(run())
        assert calls == ["ok"]

    def test_broken_callback_logged_with_traceback(self, caplog):
        def broken(result, error):
            raise ValueError("callback bug")

        async def run():
            async def operation():
                return "ok"

            task = RequestTask(operation, label="logged").start()
            task.add_done_callback(broken)
            await task.wait()

        with caplog.at_level(logging.ERROR):
            asyncio.run(run())
        records = [record for record in caplog.records if "logged" in record.getMessage()]
        assert len(records) == 1
        assert records[0].exc_info is not None
        assert records[0].exc_info[0] is ValueError


class TestFakeSessionExecution:
    def test_execute_returns_registered_response(self):
        fake = FakeSession()
        request = commits_request()
        fake.add_response(json=[make_commit_payload()], method="GET", url=request.url)

        raw = asyncio.run(fake.execute(request))
        assert raw.status_code == 200
        assert json.loads(raw.content)[0]["short_id"] == "ed899a2f"
        assert fake.requests == [request]
        assert fake.completed == 1

    def test_transport_error_is_wrapped(self):
        fake = FakeSession()
        fake.add_error(httpx.ConnectError("refused"))

        with pytest.raises(TransportFailure) as exc_info:
            asyncio.run(fake.execute(commits_request()))
        assert isinstance(exc_info.value.cause, httpx.ConnectError)

    def test_unregistered_request_fails(self):
        with pytest.raises(TransportFailure):
            asyncio.run(FakeSession().execute(commits_request()))

    def test_callback_mode(self):
        fake = FakeSession()
        fake.add_response(status_code=201, content=b"{}")
        calls = []

        async def run():
            task = fake.execute_with_callback(commits_request(), lambda raw, error: calls.append((raw, error)))
            await task.wait()

        asyncio.run(run())
        assert len(calls) == 1
        raw, error = calls[0]
        assert error is None
        assert raw.status_code == 201


class TestCancellation:
    def test_cancel_in_flight_request(self):
        fake = FakeSession()
        fake.add_response(json=[])
        calls = []

        async def run():
            fake.hold()
            task = fake.execute_with_callback(commits_request(), lambda raw, error: calls.append((raw, error)))
            await fake.wait_for_in_flight(1)
            assert task.state is RequestState.IN_FLIGHT
            assert task.cancel()
            with pytest.raises(Cancelled):
                await task.wait()
            return task

        task = asyncio.run(run())
        assert task.state is RequestState.CANCELLED
        assert len(calls) == 1
        assert calls[0][0] is None
        assert isinstance(calls[0][1], Cancelled)
        assert fake.in_flight == 0
        assert fake.released_resources == 1
        assert fake.completed == 0

    def test_cancel_does_not_affect_sibling(self):
        fake = FakeSession()
        first = commits_request("1")
        second = commits_request("2")
        fake.add_response(json=[], method="GET", url=first.url)
        fake.add_response(json=[make_commit_payload()], method="GET", url=second.url)

        async def run():
            fake.hold()
            task_a = fake.start(first)
            task_b = fake.start(second)
            await fake.wait_for_in_flight(2)
            task_a.cancel()
            with pytest.raises(Cancelled):
                await task_a.wait()
            fake.release()
            return task_a, task_b, await task_b.wait()

        task_a, task_b, raw = asyncio.run(run())
        assert task_a.state is RequestState.CANCELLED
        assert task_b.state is RequestState.SUCCEEDED
        assert json.loads(raw.content)[0]["id"] == make_commit_payload()["id"]
        assert fake.released_resources == 2

    def test_cancelling_caller_cancels_request(self):
        fake = FakeSession()
        fake.add_response(json=[])

        async def run():
            fake.hold()
            caller = asyncio.create_task(fake.execute(commits_request()))
            await fake.wait_for_in_flight(1)
            caller.cancel()
            with pytest.raises(asyncio.CancelledError):
                await caller
            await asyncio.sleep(0)

        asyncio.run(run())
        assert fake.in_flight == 0
        assert fake.released_resources == 1
        assert fake.completed == 0

    def test_cancel_after_completion_is_noop(self):
        fake = FakeSession()
        fake.add_response(json=[])

        async def run():
            task = fake.start(commits_request())
            await task.wait()
            return task, task.cancel()

        task, cancelled = asyncio.run(run())
        assert cancelled is False
        assert task.state is RequestState.SUCCEEDED


class TestHTTPXSession:
    def test_sends_request_and_reads_body(self, settings):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["token"] = request.headers.get("PRIVATE-TOKEN")
            return httpx.Response(200, json=make_commit_payload(), headers={"X-Next-Page": ""})

        route = ReadCommit(configuration=make_gitlab_configuration(), id="42", sha="abc")
        request = build_request(route, user_agent=settings.USER_AGENT)

        async def run():
            transport = httpx.MockTransport(handler)
            async with HTTPXSession(settings, service_name="httpx-session-ok", transport=transport) as session:
                return await session.execute(request)

        raw = asyncio.run(run())
        assert raw.status_code == 200
        assert json.loads(raw.content)["short_id"] == "ed899a2f"
        assert seen["url"] == f"{GITLAB_TEST_API}/project/42/repository/commits/abc"
        assert seen["token"] == "glpat-test-token"

    def test_query_params_sent(self, settings):
        seen = {}

        def handler(request):
            seen["params"] = dict(request.url.params)
            return httpx.Response(200, json=[])

        route = ReadCommits(configuration=make_gitlab_configuration(), id="42", ref_name="main")
        request = build_request(route)

        async def run():
            transport = httpx.MockTransport(handler)
            async with HTTPXSession(settings, service_name="httpx-session-query", transport=transport) as session:
                return await session.execute(request)

        asyncio.run(run())
        assert seen["params"] == {"ref_name": "main"}

    def test_connect_error_becomes_transport_failure(self, settings):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async def run():
            transport = httpx.MockTransport(handler)
            async with HTTPXSession(settings, service_name="httpx-session-down", transport=transport) as session:
                return await session.execute(commits_request())

        with pytest.raises(TransportFailure) as exc_info:
            asyncio.run(run())
        assert isinstance(exc_info.value.cause, httpx.ConnectError)

    def test_cancel_while_reading_body_closes_stream(self, settings):
        async def run():
            stream = StalledStream()
            transport = httpx.MockTransport(lambda request: httpx.Response(200, stream=stream))
            async with HTTPXSession(settings, service_name="httpx-session-cancel", transport=transport) as session:
                task = session.start(commits_request())
                await stream.reading.wait()
                assert task.cancel()
                with pytest.raises(Cancelled):
                    await task.wait()
                return task, stream

        task, stream = asyncio.run(run())
        assert task.state is RequestState.CANCELLED
        assert stream.closed

    def test_read_timeout_fails_request(self, settings):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        async def run():
            transport = httpx.MockTransport(handler)
            async with HTTPXSession(settings, service_name="httpx-session-timeout", transport=transport) as session:
                task = session.start(commits_request())
                with pytest.raises(TransportFailure) as exc_info:
                    await task.wait()
                return task, exc_info.value

        task, error = asyncio.run(run())
        assert task.state is RequestState.FAILED
        assert isinstance(error.cause, httpx.ReadTimeout)

    def test_unencodable_header_becomes_transport_failure(self, settings):
        request = Request(
            method=HTTPMethod.GET,
            url=f"{GITLAB_TEST_API}/project/42/repository/commits",
            path="project/42/repository/commits",
            headers={"X-Team": "équipe"},
        )

        async def run():
            transport = httpx.MockTransport(lambda request: httpx.Response(200, json=[]))
            async with HTTPXSession(settings, service_name="httpx-session-encode", transport=transport) as session:
                return await session.execute(request)

        with pytest.raises(TransportFailure) as exc_info:
            asyncio.run(run())
        assert isinstance(exc_info.value, GitAPIError)
        assert isinstance(exc_info.value.cause, UnicodeEncodeError)
