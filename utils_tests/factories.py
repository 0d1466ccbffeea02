"""Request and logger doubles shared by the test modules."""

from starlette.requests import Request

from core.request_types import InboundRequest

TWITTERBOT = "Mozilla/5.0 (compatible; Twitterbot/1.0)"
BROWSER = "Mozilla/5.0 (X11; Linux x86_64) Firefox/128.0"


def make_scope(
    method="GET",
    path="/",
    query_string="",
    headers=None,
    server=("testserver", 80),
    raw_path=None,
):
    """Build a minimal ASGI HTTP scope."""
    raw_headers = [
        (key.lower().encode("latin-1"), value.encode("latin-1"))
        for key, value in (headers or {}).items()
    ]
    return {
        "type": "http",
        "http_version": "1.1",
        "method": method,
        "scheme": "http",
        "path": path,
        "raw_path": (raw_path or path).encode("latin-1"),
        "query_string": query_string.encode("latin-1"),
        "root_path": "",
        "headers": raw_headers,
        "server": server,
        "client": ("127.0.0.1", 50000),
    }


def make_request(**kwargs) -> InboundRequest:
    """Build an InboundRequest the way the middleware does."""
    return InboundRequest.from_request(Request(make_scope(**kwargs)))


class RecordingLogger:
    """RequestLogger that keeps every call for assertions."""

    def __init__(self):
        self.prerenders = []
        self.passthroughs = []
        self.redirects = []
        self.errors = []

    def log_prerender(self, url, user_agent):
        self.prerenders.append((url, user_agent))

    def log_passthrough(self, path):
        self.passthroughs.append(path)

    def log_redirect(self, url, location):
        self.redirects.append((url, location))

    def log_error(self, route, status, message):
        self.errors.append((route, status, message))
