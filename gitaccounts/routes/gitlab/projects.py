"""GitLab project-level routes."""

from typing import Any, Dict, Union, assert_never, cast

from gitaccounts.models.gitlab_api import GitLabUpload
from gitaccounts.models.transport import Encoding, HTTPMethod
from gitaccounts.routes.base import Route, segment


class GitLabProjectRoute(Route):
    @property
    def method(self) -> HTTPMethod:
        route = cast("ProjectRoute", self)
        if isinstance(route, UploadFile):
            return HTTPMethod.POST
        assert_never(route)

    @property
    def encoding(self) -> Encoding:
        route = cast("ProjectRoute", self)
        if isinstance(route, UploadFile):
            return Encoding.MULTIPART
        assert_never(route)

    @property
    def path(self) -> str:
        route = cast("ProjectRoute", self)
        if isinstance(route, UploadFile):
            return f"project/{segment(route.id)}/uploads"
        assert_never(route)

    @property
    def params(self) -> Dict[str, Any]:
        route = cast("ProjectRoute", self)
        if isinstance(route, UploadFile):
            return {"file": (route.filename, route.content, route.content_type)}
        assert_never(route)

    @property
    def response_type(self) -> Any:
        route = cast("ProjectRoute", self)
        if isinstance(route, UploadFile):
            return GitLabUpload
        assert_never(route)


class UploadFile(GitLabProjectRoute):
    """Upload a file to the project's uploads area (markdown attachments)."""

    id: str
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"


ProjectRoute = Union[UploadFile]
