import logging
from typing import Any, Optional

from gitaccounts.core.config import Settings
from gitaccounts.models.transport import APIResponse, Request
from gitaccounts.routes.base import Route
from gitaccounts.services.dispatcher import Dispatcher
from gitaccounts.services.request_builder import build_request
from gitaccounts.services.session import CompletionCallback, RequestTask, TransportSession

logger = logging.getLogger(__name__)


class GitClient:
    """
    Executes routes: build the request, run it on the session, dispatch the response.

    The session is injected and may be shared by many clients; the client
    itself keeps no per-request state. Callback mode is a continuation on
    the same coroutine that execute() runs, so both modes give exactly one
    outcome per call.
    """

    def __init__(
        self,
        session: TransportSession,
        dispatcher: Optional[Dispatcher] = None,
        settings: Optional[Settings] = None,
    ):
        self.session = session
        self.dispatcher = dispatcher or Dispatcher()
        self.settings = settings or Settings()

    def build(self, route: Route) -> Request:
        return build_request(route, user_agent=self.settings.USER_AGENT)

    async def execute(self, route: Route) -> APIResponse[Any]:
        request = self.build(route)
        logger.debug(f"Executing {route.route_name}: {request.method.value} {request.path}")
        raw = await self.session.execute(request)
        return self.dispatcher.dispatch(route, raw)

    def start(self, route: Route) -> RequestTask[APIResponse[Any]]:
        return RequestTask(lambda: self.execute(route), label=route.route_name).start()

    def execute_with_callback(
        self, route: Route, callback: CompletionCallback[APIResponse[Any]]
    ) -> RequestTask[APIResponse[Any]]:
        task = self.start(route)
        task.add_done_callback(callback)
        return task
