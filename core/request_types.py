"""Shared request data types."""

from dataclasses import dataclass
from urllib.parse import quote

from starlette.datastructures import Headers, QueryParams
from starlette.requests import Request

from core.crawlers import X_BUFFERBOT


@dataclass(frozen=True)
class InboundRequest:
    """Read-only view of the request the middleware decides on."""

    method: str
    path: str
    raw_uri: str
    headers: Headers
    query_params: QueryParams
    connection_host: str = ""

    @classmethod
    def from_request(cls, request: Request) -> "InboundRequest":
        scope = request.scope
        path = scope.get("path", "")
        raw_path = scope.get("raw_path")
        if raw_path:
            raw_uri = raw_path.split(b"?", 1)[0].decode("latin-1")
        else:
            raw_uri = quote(path)
        query_string = scope.get("query_string", b"")
        if query_string:
            raw_uri += "?" + query_string.decode("latin-1")

        connection_host = ""
        server = scope.get("server")
        if server and server[0]:
            host, port = server
            connection_host = host if port is None else f"{host}:{port}"

        return cls(
            method=request.method,
            path=path,
            raw_uri=raw_uri,
            headers=request.headers,
            query_params=request.query_params,
            connection_host=connection_host,
        )

    @property
    def user_agent(self) -> str:
        return self.headers.get("user-agent", "")

    @property
    def bufferbot(self) -> str:
        return self.headers.get(X_BUFFERBOT, "")


@dataclass(frozen=True)
class RenderedPage:
    """A rendering-service response to relay verbatim."""

    status_code: int
    headers: list[tuple[bytes, bytes]]
    content: bytes


@dataclass(frozen=True)
class RedirectIntercepted:
    """The rendering service answered with a redirect that was not followed."""

    status_code: int
    headers: list[tuple[bytes, bytes]]

    @property
    def location(self) -> str:
        for key, value in self.headers:
            if key.lower() == b"location":
                return value.decode("latin-1")
        return ""


RelayResult = RenderedPage | RedirectIntercepted
