"""Rendering-service URL construction."""

from urllib.parse import quote_plus, urlsplit

from core.exceptions import BuildError
from core.request_types import InboundRequest

CF_VISITOR = "cf-visitor"
CF_HTTPS = '"scheme":"https"'
X_FORWARDED_PROTO = "x-forwarded-proto"
X_FORWARDED_HTTPS = "https,"


def build_api_url(request: InboundRequest, service_url: str) -> str:
    """Return ``<service_url>/<escaped original URL>`` for a request.

    The original URL is rebuilt from the raw request URI, the best available
    host, and the scheme declared by a fronting proxy or CDN.

    Raises:
        BuildError: If the request URI is malformed or no host is known.
    """
    uri_host, path_and_query = _split_request_uri(request.raw_uri)

    host = request.headers.get("host") or uri_host or request.connection_host
    if not host:
        raise BuildError("undetectable host")

    original_url = f"{detect_scheme(request)}://{host}{path_and_query}"

    rawurl = service_url
    if not rawurl.endswith("/"):
        rawurl += "/"
    return rawurl + quote_plus(original_url, safe="")


def detect_scheme(request: InboundRequest) -> str:
    """Return "https" when a proxy header says the original request was TLS."""
    if CF_HTTPS in request.headers.get(CF_VISITOR, ""):
        return "https"
    if request.headers.get(X_FORWARDED_PROTO, "").startswith(X_FORWARDED_HTTPS):
        return "https"
    return "http"


def _split_request_uri(raw_uri: str) -> tuple[str, str]:
    """Split a request-target into (host, path-and-query)."""
    if raw_uri.startswith("/"):
        # Origin form. A leading "//" is still a path here, never an authority.
        return "", raw_uri

    try:
        parts = urlsplit(raw_uri)
    except ValueError as e:
        raise BuildError("malformed request URI") from e
    if not (parts.scheme and parts.netloc):
        raise BuildError("malformed request URI")

    path_and_query = parts.path
    if parts.query:
        path_and_query += "?" + parts.query
    return parts.netloc, path_and_query
